"""Unit coverage for compulsory insurance contributions."""

from __future__ import annotations

import pytest

from vnpit.backend.app.services.calculators import calculate_insurance
from vnpit.backend.config.regime_config import Region, RegimeConfiguration


def test_insurance_applies_employee_rates_below_caps(
    regime_2026: RegimeConfiguration,
) -> None:
    contribution = calculate_insurance(20_000_000, Region.I, regime_2026)

    assert contribution.social == pytest.approx(1_600_000)
    assert contribution.health == pytest.approx(300_000)
    assert contribution.unemployment == pytest.approx(200_000)
    assert contribution.total == pytest.approx(2_100_000)
    assert contribution.social_health_base == 20_000_000
    assert contribution.unemployment_base == 20_000_000


@pytest.mark.parametrize("region", list(Region))
def test_insurance_bases_never_exceed_caps(
    region: Region, regime_2026: RegimeConfiguration
) -> None:
    contribution = calculate_insurance(1_000_000_000_000, region, regime_2026)

    assert contribution.social_health_base == pytest.approx(46_800_000)
    assert contribution.unemployment_base == pytest.approx(
        regime_2026.regional_minimum_wage[region] * 20
    )
    assert contribution.social == pytest.approx(46_800_000 * 0.08)
    assert contribution.health == pytest.approx(46_800_000 * 0.015)


def test_unemployment_cap_depends_on_region(regime_2026: RegimeConfiguration) -> None:
    region_one = calculate_insurance(120_000_000, Region.I, regime_2026)
    region_four = calculate_insurance(120_000_000, Region.IV, regime_2026)

    assert region_one.unemployment == pytest.approx(4_960_000 * 20 * 0.01)
    assert region_four.unemployment == pytest.approx(3_250_000 * 20 * 0.01)
    assert region_one.social == region_four.social


@pytest.mark.parametrize("declared_base", [0, -5_000_000])
def test_non_positive_base_yields_no_contributions(
    declared_base: float, regime_2025: RegimeConfiguration
) -> None:
    contribution = calculate_insurance(declared_base, Region.II, regime_2025)

    assert contribution.total == 0
    assert contribution.social_health_base == 0
    assert contribution.unemployment_base == 0
