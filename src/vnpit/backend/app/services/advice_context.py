"""Text snapshot of a calculation handed to the tax advice assistant."""

from __future__ import annotations

from vnpit.backend.app.localization import Translator
from vnpit.backend.app.models import CalculationResult
from vnpit.backend.config.regime_config import RegimeConfiguration

from .calculators import format_amount


def build_advice_context(
    result: CalculationResult,
    translator: Translator,
    config: RegimeConfiguration | None = None,
) -> str:
    """Return the figures the assistant needs, one per line."""

    lines = [
        f"{translator('advice.gross')}: {format_amount(result.gross)}",
        f"{translator('advice.total_net')}: {format_amount(result.total_net)}",
        f"{translator('advice.total_tax')}: {format_amount(result.total_tax)}",
        f"{translator('advice.insurance')}: {format_amount(result.total_insurance)}",
    ]
    if config is not None:
        lines.append(f"{translator('advice.regime')}: {regime_label(config, translator)}")
    return "\n".join(lines)


def regime_label(config: RegimeConfiguration, translator: Translator) -> str:
    key = config.meta.get("name_key")
    if isinstance(key, str):
        label = translator(key)
        if label != key:
            return label
    return config.name


__all__ = ["build_advice_context", "regime_label"]
