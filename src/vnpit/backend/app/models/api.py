"""Pydantic models describing the public API surface."""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from vnpit.backend.config.regime_config import Region
from vnpit.backend.config.settings import SettingsOverrides

from .enums import AdditionalIncomeType, IncomeType, InsuranceMode

__all__ = [
    "AdditionalIncomeInput",
    "AdditionalIncomeRow",
    "BracketRow",
    "CalculationRequest",
    "CalculationResponse",
    "InsuranceBreakdown",
    "InversionMeta",
    "ResponseMeta",
    "Summary",
    "SummaryLabels",
    "format_validation_error",
]


def _normalise_choice(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().upper().replace("-", "_")
    return value


class AdditionalIncomeInput(BaseModel):
    """Supplementary income entry supplied by the user."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    label: str = Field(default="", max_length=120)
    amount: float = Field(default=0.0, ge=0)
    type: AdditionalIncomeType = AdditionalIncomeType.NON_TAXABLE

    @field_validator("type", mode="before")
    @classmethod
    def _normalise_type(cls, value: Any) -> Any:
        if value is None:
            return AdditionalIncomeType.NON_TAXABLE
        return _normalise_choice(value)

    @field_validator("label", mode="before")
    @classmethod
    def _strip_label(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()


class CalculationRequest(BaseModel):
    """Complete payload accepted by the calculation endpoint."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    regime: str | None = None
    locale: str = Field(default="vi")
    income: float = Field(default=0.0, ge=0)
    income_type: IncomeType = IncomeType.GROSS
    region: Region = Region.I
    dependents: int = Field(default=0, ge=0, le=50)
    insurance_mode: InsuranceMode = InsuranceMode.OFFICIAL
    insurance_salary: float = Field(default=0.0, ge=0)
    other_deductions: float = Field(default=0.0, ge=0)
    additional_incomes: list[AdditionalIncomeInput] = Field(default_factory=list)
    settings: SettingsOverrides | None = None

    @field_validator("regime", mode="before")
    @classmethod
    def _normalise_regime(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("locale", mode="before")
    @classmethod
    def _normalise_locale(cls, value: Any) -> str:
        if value is None:
            return "vi"
        text = str(value).strip()
        return text or "vi"

    @field_validator("income_type", "insurance_mode", mode="before")
    @classmethod
    def _normalise_choices(cls, value: Any) -> Any:
        return _normalise_choice(value)

    @field_validator("region", mode="before")
    @classmethod
    def _parse_region(cls, value: Any) -> Region:
        if value is None:
            return Region.I
        return Region.parse(value)

    @field_validator("additional_incomes", mode="before")
    @classmethod
    def _normalise_additional_incomes(cls, value: Any) -> Any:
        if value is None:
            return []
        return value


class SummaryLabels(BaseModel):
    """Localized labels for summary fields."""

    model_config = ConfigDict(extra="forbid")

    gross: str
    net: str
    total_insurance: str
    income_before_tax: str
    total_deductions: str
    taxable_income: str
    personal_income_tax: str
    total_tax: str
    total_net: str


class Summary(BaseModel):
    """Headline figures of a conversion."""

    model_config = ConfigDict(extra="forbid")

    gross: float
    net: float
    total_insurance: float
    income_before_tax: float
    total_deductions: float
    taxable_income: float
    personal_income_tax: float
    total_tax: float
    total_net: float
    labels: SummaryLabels


class InsuranceBreakdown(BaseModel):
    model_config = ConfigDict(extra="forbid")

    social: float
    health: float
    unemployment: float
    total: float
    social_health_base: float
    unemployment_base: float


class BracketRow(BaseModel):
    """Per-bracket line of the progressive tax table."""

    model_config = ConfigDict(extra="forbid")

    level: int
    rate: float
    rate_label: str
    min_income: float
    max_income: float | None = None
    taxed_amount: float
    tax_amount: float


class AdditionalIncomeRow(BaseModel):
    model_config = ConfigDict(extra="forbid")

    label: str
    type: AdditionalIncomeType
    type_label: str
    amount: float
    tax: float
    net: float


class InversionMeta(BaseModel):
    model_config = ConfigDict(extra="forbid")

    target_net: float
    iterations: int
    residual: float
    converged: bool


class ResponseMeta(BaseModel):
    """Metadata returned alongside the calculation output."""

    model_config = ConfigDict(extra="forbid")

    regime: str
    regime_name: str
    locale: str
    income_type: IncomeType
    region: str
    customised: bool = False
    inversion: InversionMeta | None = None


class CalculationResponse(BaseModel):
    """Full response payload produced by the calculation service."""

    model_config = ConfigDict(extra="forbid")

    summary: Summary
    insurance: InsuranceBreakdown
    brackets: list[BracketRow]
    additional_incomes: list[AdditionalIncomeRow]
    meta: ResponseMeta


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
