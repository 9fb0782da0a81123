"""Unit coverage for the progressive bracket calculator."""

from __future__ import annotations

import pytest

from vnpit.backend.app.services.calculators import calculate_progressive_tax
from vnpit.backend.config.regime_config import RegimeConfiguration, TaxBracket

_BRACKETS = (
    TaxBracket(upper=5_000_000, rate=0.05),
    TaxBracket(upper=10_000_000, rate=0.10),
    TaxBracket(rate=0.15),
)


def test_progressive_tax_splits_income_across_brackets() -> None:
    result = calculate_progressive_tax(12_000_000, _BRACKETS)

    assert result.tax == pytest.approx(1_050_000)
    assert [detail.level for detail in result.details] == [1, 2, 3]
    assert [detail.taxed_amount for detail in result.details] == pytest.approx(
        [5_000_000, 5_000_000, 2_000_000]
    )
    assert [detail.tax_amount for detail in result.details] == pytest.approx(
        [250_000, 500_000, 300_000]
    )


def test_progressive_tax_reports_unreached_brackets_with_zero_amounts() -> None:
    result = calculate_progressive_tax(3_000_000, _BRACKETS)

    assert result.tax == pytest.approx(150_000)
    assert len(result.details) == 3
    assert result.details[1].taxed_amount == 0
    assert result.details[2].tax_amount == 0


def test_progressive_tax_exposes_bracket_bounds() -> None:
    details = calculate_progressive_tax(12_000_000, _BRACKETS).details

    assert [(d.min_income, d.max_income) for d in details] == [
        (0, 5_000_000),
        (5_000_000, 10_000_000),
        (10_000_000, None),
    ]


def test_progressive_tax_is_zero_for_zero_income() -> None:
    result = calculate_progressive_tax(0, _BRACKETS)

    assert result.tax == 0
    assert all(detail.taxed_amount == 0 for detail in result.details)


def test_empty_bracket_list_yields_no_tax() -> None:
    result = calculate_progressive_tax(50_000_000, [])

    assert result.tax == 0
    assert result.details == ()


@pytest.mark.parametrize(
    "taxable_income", [0, 1, 9_999_999, 10_000_000, 42_500_000, 250_000_000]
)
def test_bracket_slices_cover_taxable_income(
    taxable_income: float, regime_2026: RegimeConfiguration
) -> None:
    """Taxed slices always add up to the taxable income."""

    details = calculate_progressive_tax(taxable_income, regime_2026.brackets).details

    assert sum(detail.taxed_amount for detail in details) == pytest.approx(taxable_income)
    assert len(details) == len(regime_2026.brackets)


def test_bracket_boundary_is_taxed_in_lower_bracket(
    regime_2026: RegimeConfiguration,
) -> None:
    result = calculate_progressive_tax(10_000_000, regime_2026.brackets)

    assert result.tax == pytest.approx(500_000)
    assert result.details[1].taxed_amount == 0
