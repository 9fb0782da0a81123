"""Tests for the regime configuration validator."""

from __future__ import annotations

import pytest

from vnpit.backend.config import validator
from vnpit.backend.config.regime_config import (
    Region,
    RegimeConfiguration,
    TaxBracket,
)


def test_shipped_regimes_are_valid() -> None:
    results = validator.validate_all_regimes()

    assert set(results) == {"2025", "2026"}
    assert all(not issues for issues in results.values())


def test_validator_flags_out_of_range_insurance(regime_2026: RegimeConfiguration) -> None:
    insurance = regime_2026.insurance.model_copy(update={"social_rate": 1.5})
    broken = regime_2026.model_copy(update={"insurance": insurance})

    issues = validator.validate_regime_configuration(broken)

    assert any("social contribution rate" in issue for issue in issues)
    assert any("combined contribution rates" in issue for issue in issues)


def test_validator_flags_increasing_regional_wages(
    regime_2026: RegimeConfiguration,
) -> None:
    wages = dict(regime_2026.regional_minimum_wage)
    wages[Region.IV] = 9_000_000
    broken = regime_2026.model_copy(update={"regional_minimum_wage": wages})

    issues = validator.validate_regime_configuration(broken)

    assert issues == [
        "regional_minimum_wage: wages should not increase from region I to region IV"
    ]


def test_validator_flags_dependent_deduction_above_personal(
    regime_2025: RegimeConfiguration,
) -> None:
    deductions = regime_2025.deductions.model_copy(update={"dependent": 12_000_000})
    broken = regime_2025.model_copy(update={"deductions": deductions})

    issues = validator.validate_regime_configuration(broken)

    assert any(issue.startswith("deductions:") for issue in issues)


def test_validator_flags_non_increasing_bracket_rates(
    regime_2025: RegimeConfiguration,
) -> None:
    brackets = [
        TaxBracket(upper=5_000_000, rate=0.10),
        TaxBracket(upper=10_000_000, rate=0.05),
        TaxBracket(rate=1.5),
    ]
    broken = regime_2025.model_copy(update={"brackets": brackets})

    issues = validator.validate_regime_configuration(broken)

    assert "tax_brackets[2]: rates should increase with each bracket" in issues
    assert any(issue.startswith("tax_brackets[3]: rate 1.5") for issue in issues)


def test_main_reports_success(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = validator.main(["2026"])

    assert exit_code == 0
    assert "[2026] OK" in capsys.readouterr().out


def test_main_reports_unknown_regime(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = validator.main(["1999"])

    assert exit_code == 1
    assert "failed to load configuration" in capsys.readouterr().out
