"""Compulsory insurance contributions (BHXH, BHYT, BHTN)."""

from __future__ import annotations

from vnpit.backend.app.models import InsuranceContribution
from vnpit.backend.config.regime_config import Region, RegimeConfiguration


def calculate_insurance(
    declared_base: float, region: Region, config: RegimeConfiguration
) -> InsuranceContribution:
    """Return employee contributions for ``declared_base`` in ``region``.

    Social and health insurance share a base capped at a multiple of the base
    salary; unemployment insurance is capped at a multiple of the regional
    minimum wage. A non-positive base yields zero contributions.
    """

    base = declared_base if declared_base > 0 else 0.0
    rates = config.insurance

    social_health_base = min(base, config.social_health_cap())
    unemployment_base = min(base, config.unemployment_cap(region))

    return InsuranceContribution(
        social=social_health_base * rates.social_rate,
        health=social_health_base * rates.health_rate,
        unemployment=unemployment_base * rates.unemployment_rate,
        social_health_base=social_health_base,
        unemployment_base=unemployment_base,
    )


__all__ = ["calculate_insurance"]
