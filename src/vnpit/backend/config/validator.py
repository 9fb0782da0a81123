"""Utilities for validating regime configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from typing import Sequence

from .regime_config import (
    AdditionalIncomeRules,
    DeductionAllowances,
    InsuranceRates,
    Region,
    RegimeConfiguration,
    TaxBracket,
    available_regimes,
    load_regime_configuration,
)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_insurance(insurance: InsuranceRates) -> list[str]:
    errors: list[str] = []

    for label, value in {
        "social": insurance.social_rate,
        "health": insurance.health_rate,
        "unemployment": insurance.unemployment_rate,
    }.items():
        if value < 0 or value > 1:
            errors.append(
                _format_scope(
                    "insurance",
                    f"{label} contribution rate {value} must be between 0 and 1",
                )
            )

    if insurance.total_rate >= 1:
        errors.append(
            _format_scope("insurance", "combined contribution rates must stay below 1")
        )

    for label, value in {
        "social_cap_multiplier": insurance.social_cap_multiplier,
        "unemployment_cap_multiplier": insurance.unemployment_cap_multiplier,
    }.items():
        if value <= 0:
            errors.append(_format_scope("insurance", f"{label} must be positive"))

    return errors


def _validate_regional_wages(config: RegimeConfiguration) -> list[str]:
    errors: list[str] = []
    wages = [config.regional_minimum_wage[region] for region in Region]

    if any(wage <= 0 for wage in wages):
        errors.append(
            _format_scope("regional_minimum_wage", "wages must be positive amounts")
        )
    if wages != sorted(wages, reverse=True):
        errors.append(
            _format_scope(
                "regional_minimum_wage",
                "wages should not increase from region I to region IV",
            )
        )

    return errors


def _validate_deductions(deductions: DeductionAllowances) -> list[str]:
    errors: list[str] = []

    if deductions.personal <= 0:
        errors.append(_format_scope("deductions", "personal deduction must be positive"))
    if deductions.dependent > deductions.personal:
        errors.append(
            _format_scope(
                "deductions",
                "dependent deduction should not exceed the personal deduction",
            )
        )

    return errors


def _validate_brackets(brackets: Sequence[TaxBracket]) -> list[str]:
    errors: list[str] = []

    previous_rate: float | None = None
    for index, bracket in enumerate(brackets, start=1):
        scope = f"tax_brackets[{index}]"
        if bracket.rate > 1:
            errors.append(_format_scope(scope, f"rate {bracket.rate} exceeds 100%"))
        if previous_rate is not None and bracket.rate <= previous_rate:
            errors.append(
                _format_scope(scope, "rates should increase with each bracket")
            )
        previous_rate = bracket.rate

    return errors


def _validate_additional_income(rules: AdditionalIncomeRules) -> list[str]:
    errors: list[str] = []

    if rules.freelance_threshold <= 0:
        errors.append(
            _format_scope(
                "additional_income",
                "freelance withholding threshold should be positive",
            )
        )

    return errors


def validate_regime_configuration(config: RegimeConfiguration) -> list[str]:
    """Return human-readable issues detected for ``config``."""

    errors: list[str] = []

    if config.base_salary <= 0:
        errors.append(_format_scope("base_salary", "must be a positive amount"))

    errors.extend(_validate_insurance(config.insurance))
    errors.extend(_validate_regional_wages(config))
    errors.extend(_validate_deductions(config.deductions))
    errors.extend(_validate_brackets(config.brackets))
    errors.extend(_validate_additional_income(config.additional_income))

    return errors


def validate_all_regimes(regimes: Sequence[str] | None = None) -> dict[str, list[str]]:
    """Validate all configured regimes and return issues keyed by regime id."""

    targets = regimes or available_regimes()
    results: dict[str, list[str]] = {}

    for regime_id in targets:
        config = load_regime_configuration(regime_id)
        results[str(regime_id)] = validate_regime_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured tax regimes and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "regimes",
        nargs="*",
        help="Specific regime identifiers to validate (defaults to all configured regimes)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    regimes = args.regimes or available_regimes()

    if not regimes:
        parser.print_help()
        return 1

    exit_code = 0

    for regime_id in regimes:
        try:
            config = load_regime_configuration(regime_id)
        except FileNotFoundError as error:
            print(f"[{regime_id}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_regime_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{regime_id}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{regime_id}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
