"""Unit tests for the calculation service orchestration."""

from __future__ import annotations

import logging

import pytest

from vnpit.backend.app.models import CalculationRequest
from vnpit.backend.app.services.calculation_service import (
    build_calculation_context,
    calculate_tax,
    resolve_configuration,
)


def test_calculate_tax_uses_default_regime_when_unspecified() -> None:
    result = calculate_tax({"income": 20_000_000})

    assert result["meta"]["regime"] == "2026"
    assert result["meta"]["regime_name"] == "Đề xuất 2026"
    assert result["meta"]["income_type"] == "GROSS"
    assert result["meta"]["region"] == "I"
    assert result["meta"]["customised"] is False
    assert "inversion" not in result["meta"]
    assert result["summary"]["net"] == pytest.approx(17_780_000)


def test_calculate_tax_returns_bracket_rows_with_labels() -> None:
    result = calculate_tax({"regime": "2025", "income": 30_000_000, "dependents": 1})

    brackets = result["brackets"]
    assert len(brackets) == 7
    assert [row["rate_label"] for row in brackets[:3]] == ["5%", "10%", "15%"]
    assert brackets[2]["taxed_amount"] == pytest.approx(1_450_000)
    assert "max_income" not in brackets[-1]
    assert sum(row["taxed_amount"] for row in brackets) == pytest.approx(
        result["summary"]["taxable_income"]
    )


def test_calculate_tax_localises_summary_labels() -> None:
    vietnamese = calculate_tax({"income": 20_000_000})
    english = calculate_tax({"income": 20_000_000, "locale": "en"})

    assert vietnamese["summary"]["labels"]["gross"] == "Lương Gross"
    assert english["summary"]["labels"]["gross"] == "Gross salary"
    assert english["meta"]["locale"] == "en"


def test_calculate_tax_labels_additional_income_types() -> None:
    result = calculate_tax(
        {
            "income": 20_000_000,
            "additional_incomes": [
                {"label": "Dịch vụ", "amount": 3_000_000, "type": "freelance"},
            ],
        }
    )

    row = result["additional_incomes"][0]
    assert row["type"] == "FREELANCE"
    assert row["type_label"] == "Vãng lai (10%)"
    assert row["tax"] == pytest.approx(300_000)
    assert row["net"] == pytest.approx(2_700_000)


def test_calculate_tax_net_mode_includes_inversion_report() -> None:
    result = calculate_tax({"income": 17_780_000, "income_type": "net"})

    inversion = result["meta"]["inversion"]
    assert result["meta"]["income_type"] == "NET"
    assert inversion["converged"] is True
    assert inversion["target_net"] == pytest.approx(17_780_000)
    assert abs(inversion["residual"]) < 1_000
    assert result["summary"]["gross"] == pytest.approx(20_000_000, abs=2_000)


def test_calculate_tax_applies_settings_overrides() -> None:
    result = calculate_tax(
        {"income": 20_000_000, "settings": {"personal_deduction": 11_000_000}}
    )

    assert result["meta"]["customised"] is True
    assert result["summary"]["total_deductions"] == pytest.approx(11_000_000)
    assert result["summary"]["taxable_income"] == pytest.approx(6_900_000)
    assert result["summary"]["personal_income_tax"] == pytest.approx(345_000)


def test_base_salary_override_moves_insurance_cap() -> None:
    result = calculate_tax(
        {"income": 100_000_000, "settings": {"base_salary": 3_000_000}}
    )

    assert result["insurance"]["social_health_base"] == pytest.approx(60_000_000)


def test_calculate_tax_accepts_roman_region_names() -> None:
    result = calculate_tax({"income": 120_000_000, "region": "iv"})

    assert result["meta"]["region"] == "IV"
    assert result["insurance"]["unemployment_base"] == pytest.approx(65_000_000)


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"income": -1}, "value cannot be negative"),
        ({"income": 1, "region": 7}, "region"),
        ({"income": 1, "income_type": "HOURLY"}, "income_type"),
        ({"income": 1, "dependents": 51}, "dependents"),
        ({"income": 1, "unexpected": True}, "unexpected"),
        ({"income": 1, "settings": {"base_salary": -10}}, "value cannot be negative"),
        ({"income": float("inf")}, "finite number"),
        ({"income": 1, "insurance_salary": float("nan")}, "insurance_salary"),
        (
            {"income": 1, "additional_incomes": [{"amount": float("inf")}]},
            "additional_incomes.0.amount",
        ),
        ({"income": 1, "settings": {"personal_deduction": float("inf")}}, "finite number"),
    ],
)
def test_calculate_tax_rejects_invalid_payloads(
    payload: dict[str, object], message: str
) -> None:
    with pytest.raises(ValueError, match="Invalid calculation payload") as excinfo:
        calculate_tax(payload)

    assert message in str(excinfo.value)


def test_calculate_tax_rejects_unknown_regime() -> None:
    with pytest.raises(ValueError, match="Unknown tax regime '1999'"):
        calculate_tax({"regime": "1999", "income": 10_000_000})


def test_calculate_tax_requires_mapping_payload() -> None:
    with pytest.raises(ValueError, match="mapping"):
        calculate_tax([("income", 1)])  # type: ignore[arg-type]


def test_calculate_tax_accepts_request_models() -> None:
    request = CalculationRequest(regime="2025", income=30_000_000, dependents=1)

    result = calculate_tax(request)

    assert result["summary"]["net"] == pytest.approx(25_882_500)


def test_resolve_configuration_returns_cached_regime_without_overrides() -> None:
    first = resolve_configuration(CalculationRequest(regime="2025"))
    second = resolve_configuration(CalculationRequest(regime="2025"))

    assert first is second


def test_profiling_logs_section_timings(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("VNPIT_PROFILE_CALCULATIONS", "1")

    with caplog.at_level(
        logging.DEBUG, logger="vnpit.backend.app.services.calculation_service"
    ):
        calculate_tax({"income": 20_000_000})

    assert "calculate_tax timings" in caplog.text


def test_build_calculation_context_renders_advice_lines() -> None:
    context = build_calculation_context({"income": 20_000_000})

    assert context["locale"] == "vi"
    assert context["regime"] == "2026"
    assert context["context"].splitlines() == [
        "Tổng thu nhập Gross: 20.000.000",
        "Thực nhận (Total Net): 17.780.000",
        "Tổng Thuế TNCN: 120.000",
        "Bảo hiểm: 2.100.000",
        "Áp dụng: Đề xuất 2026",
    ]
