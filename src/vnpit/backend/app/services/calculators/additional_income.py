"""Flat-rate taxation of supplementary income items."""

from __future__ import annotations

from collections.abc import Iterable

from vnpit.backend.app.models import (
    AdditionalIncome,
    AdditionalIncomeDetail,
    AdditionalIncomeType,
)
from vnpit.backend.config.regime_config import AdditionalIncomeRules


def rate_for_item(item: AdditionalIncome, rules: AdditionalIncomeRules) -> float:
    """Return the flat rate applied to ``item``.

    Salary-like income is withheld at a flat rate instead of being merged into
    the progressive schedule of the main salary. This is a known approximation.
    """

    if item.type is AdditionalIncomeType.FREELANCE:
        if item.amount >= rules.freelance_threshold:
            return rules.freelance_rate
        return 0.0
    if item.type is AdditionalIncomeType.INVESTMENT:
        return rules.investment_rate
    if item.type is AdditionalIncomeType.SALARY_LIKE:
        return rules.salary_like_rate
    return 0.0


def calculate_additional_income(
    items: Iterable[AdditionalIncome], rules: AdditionalIncomeRules
) -> tuple[AdditionalIncomeDetail, ...]:
    """Return one detail per item, preserving input order."""

    details: list[AdditionalIncomeDetail] = []
    for item in items:
        rate = rate_for_item(item, rules)
        details.append(
            AdditionalIncomeDetail(
                label=item.label,
                type=item.type,
                amount=item.amount,
                rate=rate,
                tax=item.amount * rate,
            )
        )
    return tuple(details)


__all__ = ["calculate_additional_income", "rate_for_item"]
