"""Gross/net payroll conversion engine.

Both entry points are pure: they read the frozen input and regime
configuration and return a fresh :class:`CalculationResult`. Nothing is cached
between calls, so the functions are safe to share across threads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from vnpit.backend.app.models import (
    CalculationInput,
    CalculationResult,
    InsuranceContribution,
    InversionReport,
)
from vnpit.backend.config.regime_config import RegimeConfiguration

from .calculators import (
    ProgressiveTax,
    calculate_additional_income,
    calculate_insurance,
    calculate_progressive_tax,
)

_LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 50
DEFAULT_TOLERANCE = 1_000.0


@dataclass(frozen=True)
class _SalaryBreakdown:
    insurance: InsuranceContribution
    income_before_tax: float
    total_deductions: float
    taxable_income: float
    progressive: ProgressiveTax

    def net_for(self, gross: float) -> float:
        return gross - self.insurance.total - self.progressive.tax


def total_deductions(payload: CalculationInput, config: RegimeConfiguration) -> float:
    """Personal plus per-dependent allowances plus any other deductions."""

    allowances = config.deductions
    return (
        allowances.personal
        + allowances.dependent * payload.dependents
        + payload.other_deductions
    )


def _breakdown(
    gross: float, payload: CalculationInput, config: RegimeConfiguration
) -> _SalaryBreakdown:
    insurance = calculate_insurance(
        payload.insurance_base_for(gross), payload.region, config
    )
    income_before_tax = gross - insurance.total
    deductions = total_deductions(payload, config)
    taxable_income = max(0.0, income_before_tax - deductions)
    return _SalaryBreakdown(
        insurance=insurance,
        income_before_tax=income_before_tax,
        total_deductions=deductions,
        taxable_income=taxable_income,
        progressive=calculate_progressive_tax(taxable_income, config.brackets),
    )


def compute_from_gross(
    payload: CalculationInput, config: RegimeConfiguration
) -> CalculationResult:
    """Convert the declared gross salary into take-home pay."""

    gross = payload.income
    breakdown = _breakdown(gross, payload, config)
    net = breakdown.net_for(gross)

    additional = calculate_additional_income(
        payload.additional_incomes, config.additional_income
    )
    additional_tax = sum(item.tax for item in additional)
    additional_net = sum(item.net for item in additional)

    personal_income_tax = breakdown.progressive.tax
    return CalculationResult(
        gross=gross,
        net=net,
        insurance=breakdown.insurance,
        income_before_tax=breakdown.income_before_tax,
        total_deductions=breakdown.total_deductions,
        taxable_income=breakdown.taxable_income,
        personal_income_tax=personal_income_tax,
        detail_tax=breakdown.progressive.details,
        additional_incomes=additional,
        total_tax=personal_income_tax + additional_tax,
        total_net=net + additional_net,
    )


def compute_from_net(
    payload: CalculationInput,
    config: RegimeConfiguration,
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
) -> CalculationResult:
    """Find the gross salary whose take-home pay matches ``payload.income``.

    Net pay is non-decreasing in gross, so a bisection over
    ``[target, 2 * target]`` converges. The search stops once the candidate's
    net is within ``tolerance`` of the target or ``max_iterations`` midpoints
    have been tried; the last midpoint is then run through
    :func:`compute_from_gross`. Failure to converge is reported on the result
    rather than raised.

    Only the search options themselves are checked: a ``max_iterations`` below
    one or a non-positive ``tolerance`` raises :class:`ValueError`.
    """

    if max_iterations < 1:
        raise ValueError("max_iterations must be at least 1")
    if tolerance <= 0:
        raise ValueError("tolerance must be positive")

    target_net = payload.income
    lower = target_net
    upper = target_net * 2
    candidate = target_net
    residual = float("inf")
    iterations = 0
    converged = False

    for iterations in range(1, max_iterations + 1):
        candidate = (lower + upper) / 2
        current_net = _breakdown(candidate, payload, config).net_for(candidate)
        residual = current_net - target_net

        if abs(residual) < tolerance:
            converged = True
            break
        if current_net < target_net:
            lower = candidate
        else:
            upper = candidate

    if converged:
        _LOGGER.debug(
            "net-to-gross converged after %d iteration(s): gross=%.2f residual=%.2f",
            iterations,
            candidate,
            residual,
        )
    else:
        _LOGGER.warning(
            "net-to-gross did not converge within %d iterations "
            "(target=%.2f, gross=%.2f, residual=%.2f)",
            max_iterations,
            target_net,
            candidate,
            residual,
        )

    result = compute_from_gross(payload.as_gross(candidate), config)
    report = InversionReport(
        target_net=target_net,
        iterations=iterations,
        residual=result.net - target_net,
        converged=converged,
    )
    return replace(result, inversion=report)


__all__ = [
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_TOLERANCE",
    "compute_from_gross",
    "compute_from_net",
    "total_deductions",
]
