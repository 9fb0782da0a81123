"""Orchestrate request validation, regime resolution and payroll conversion.

The calculation service turns raw payloads into the frozen engine input,
loads the requested regime (with any user overrides from the settings
surface), dispatches on the declared income type and serialises the result.
Profiling hooks and payload validation live here so that the engine in
:mod:`vnpit.backend.app.services.payroll` stays pure.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from vnpit.backend.app.localization import Translator, get_translator
from vnpit.backend.app.models import (
    AdditionalIncome,
    CalculationInput,
    CalculationRequest,
    CalculationResponse,
    CalculationResult,
    IncomeType,
    format_validation_error,
)
from vnpit.backend.config.regime_config import (
    RegimeConfiguration,
    default_regime_id,
    load_regime_configuration,
)
from vnpit.backend.config.settings import apply_settings

from .advice_context import build_advice_context, regime_label
from .calculators import format_percentage, round_currency, round_rate
from .payroll import compute_from_gross, compute_from_net

_LOGGER = logging.getLogger(__name__)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("VNPIT_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _validate_request(
    payload: Mapping[str, Any] | CalculationRequest,
) -> CalculationRequest:
    if isinstance(payload, CalculationRequest):
        data: Any = payload.model_dump(mode="python")
    elif isinstance(payload, Mapping):
        data = payload
    else:
        raise ValueError("Payload must be a mapping")

    try:
        return CalculationRequest.model_validate(data)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def resolve_configuration(request: CalculationRequest) -> RegimeConfiguration:
    """Load the requested regime and apply any settings overrides."""

    regime_id = request.regime or default_regime_id()
    try:
        config = load_regime_configuration(regime_id)
    except FileNotFoundError as exc:
        raise ValueError(f"Unknown tax regime '{regime_id}'") from exc
    return apply_settings(config, request.settings)


def _normalise_payload(request: CalculationRequest) -> CalculationInput:
    additional_incomes = tuple(
        AdditionalIncome(label=item.label, amount=item.amount, type=item.type)
        for item in request.additional_incomes
    )
    return CalculationInput(
        income=request.income,
        income_type=request.income_type,
        region=request.region,
        dependents=request.dependents,
        insurance_mode=request.insurance_mode,
        insurance_salary=request.insurance_salary,
        other_deductions=request.other_deductions,
        additional_incomes=additional_incomes,
    )


def run_calculation(
    payload: CalculationInput, config: RegimeConfiguration
) -> CalculationResult:
    """Dispatch ``payload`` to the gross or net entry point."""

    if payload.income_type is IncomeType.NET:
        return compute_from_net(payload, config)
    return compute_from_gross(payload, config)


def _serialise_result(
    result: CalculationResult,
    payload: CalculationInput,
    config: RegimeConfiguration,
    translator: Translator,
) -> dict[str, Any]:
    summary_fields = (
        ("gross", result.gross),
        ("net", result.net),
        ("total_insurance", result.total_insurance),
        ("income_before_tax", result.income_before_tax),
        ("total_deductions", result.total_deductions),
        ("taxable_income", result.taxable_income),
        ("personal_income_tax", result.personal_income_tax),
        ("total_tax", result.total_tax),
        ("total_net", result.total_net),
    )
    summary: dict[str, Any] = {name: round_currency(value) for name, value in summary_fields}
    summary["labels"] = {name: translator(f"summary.{name}") for name, _ in summary_fields}

    insurance = result.insurance
    brackets = [
        {
            "level": detail.level,
            "rate": round_rate(detail.rate),
            "rate_label": format_percentage(detail.rate),
            "min_income": round_currency(detail.min_income),
            "max_income": (
                round_currency(detail.max_income) if detail.max_income is not None else None
            ),
            "taxed_amount": round_currency(detail.taxed_amount),
            "tax_amount": round_currency(detail.tax_amount),
        }
        for detail in result.detail_tax
    ]
    additional_incomes = [
        {
            "label": item.label,
            "type": item.type,
            "type_label": translator(f"additional_income.{item.type.value}"),
            "amount": round_currency(item.amount),
            "tax": round_currency(item.tax),
            "net": round_currency(item.net),
        }
        for item in result.additional_incomes
    ]

    meta: dict[str, Any] = {
        "regime": config.id,
        "regime_name": regime_label(config, translator),
        "locale": translator.locale,
        "income_type": payload.income_type,
        "region": payload.region.name,
        "customised": bool(config.meta.get("customised")),
    }
    if result.inversion is not None:
        meta["inversion"] = {
            "target_net": round_currency(result.inversion.target_net),
            "iterations": result.inversion.iterations,
            "residual": round_currency(result.inversion.residual),
            "converged": result.inversion.converged,
        }

    response_model = CalculationResponse.model_validate(
        {
            "summary": summary,
            "insurance": {
                "social": round_currency(insurance.social),
                "health": round_currency(insurance.health),
                "unemployment": round_currency(insurance.unemployment),
                "total": round_currency(insurance.total),
                "social_health_base": round_currency(insurance.social_health_base),
                "unemployment_base": round_currency(insurance.unemployment_base),
            },
            "brackets": brackets,
            "additional_incomes": additional_incomes,
            "meta": meta,
        }
    )
    return response_model.model_dump(mode="json", exclude_none=True)


def calculate_tax(
    payload: Mapping[str, Any] | CalculationRequest,
) -> dict[str, Any]:
    """Compute the payroll conversion for the provided payload."""

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    with _profile_section("validate", timings):
        request_model = _validate_request(payload)
        config = resolve_configuration(request_model)
        normalised = _normalise_payload(request_model)

    translator = get_translator(request_model.locale)

    with _profile_section("calculate", timings):
        result = run_calculation(normalised, config)

    with _profile_section("serialise", timings):
        response = _serialise_result(result, normalised, config, translator)

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "calculate_tax timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    return response


def build_calculation_context(
    payload: Mapping[str, Any] | CalculationRequest,
) -> dict[str, Any]:
    """Return the advice snapshot for the calculation described by ``payload``."""

    request_model = _validate_request(payload)
    config = resolve_configuration(request_model)
    result = run_calculation(_normalise_payload(request_model), config)
    translator = get_translator(request_model.locale)

    return {
        "locale": translator.locale,
        "regime": config.id,
        "context": build_advice_context(result, translator, config),
    }


__all__ = [
    "build_calculation_context",
    "calculate_tax",
    "resolve_configuration",
    "run_calculation",
]
