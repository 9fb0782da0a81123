"""Progressive (marginal) personal income tax."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from vnpit.backend.app.models import BracketDetail
from vnpit.backend.config.regime_config import TaxBracket


@dataclass(frozen=True)
class ProgressiveTax:
    tax: float
    details: tuple[BracketDetail, ...]


def calculate_progressive_tax(
    taxable_income: float, brackets: Sequence[TaxBracket]
) -> ProgressiveTax:
    """Calculate progressive tax for ``taxable_income`` using ``brackets``.

    Every bracket yields a detail row, including those the income never
    reaches, so the slices always add up to the taxable income.
    """

    total = 0.0
    details: list[BracketDetail] = []
    lower_bound = 0.0

    for level, bracket in enumerate(brackets, start=1):
        if bracket.is_unbounded:
            ceiling = taxable_income
        else:
            ceiling = min(taxable_income, bracket.upper_bound)
        taxed_amount = max(0.0, ceiling - lower_bound)

        tax_amount = taxed_amount * bracket.rate
        total += tax_amount
        details.append(
            BracketDetail(
                level=level,
                rate=bracket.rate,
                min_income=lower_bound,
                max_income=bracket.upper_bound,
                taxed_amount=taxed_amount,
                tax_amount=tax_amount,
            )
        )

        if not bracket.is_unbounded:
            lower_bound = bracket.upper_bound

    return ProgressiveTax(tax=total, details=tuple(details))


__all__ = ["ProgressiveTax", "calculate_progressive_tax"]
