"""Typed inputs and derived results shared by the calculation engine.

Inputs are frozen Pydantic models so that validated requests cannot drift
after normalisation; results are lightweight frozen dataclasses owned by the
caller. Neither carries state between calculations.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from vnpit.backend.config.regime_config import Region

from .api import (
    AdditionalIncomeInput,
    AdditionalIncomeRow,
    BracketRow,
    CalculationRequest,
    CalculationResponse,
    InsuranceBreakdown,
    InversionMeta,
    ResponseMeta,
    Summary,
    SummaryLabels,
    format_validation_error,
)
from .enums import AdditionalIncomeType, IncomeType, InsuranceMode

__all__ = [
    "AdditionalIncome",
    "AdditionalIncomeDetail",
    "AdditionalIncomeInput",
    "AdditionalIncomeRow",
    "AdditionalIncomeType",
    "BracketDetail",
    "BracketRow",
    "CalculationInput",
    "CalculationRequest",
    "CalculationResponse",
    "CalculationResult",
    "IncomeType",
    "InsuranceBreakdown",
    "InsuranceContribution",
    "InsuranceMode",
    "InversionMeta",
    "InversionReport",
    "Region",
    "ResponseMeta",
    "Summary",
    "SummaryLabels",
    "format_validation_error",
]


class AdditionalIncome(BaseModel):
    """Supplementary income taxed outside the progressive schedule."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    label: str = ""
    amount: float = 0.0
    type: AdditionalIncomeType = AdditionalIncomeType.NON_TAXABLE


class CalculationInput(BaseModel):
    """Validated and normalised user input for a payroll conversion."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    income: float = 0.0
    income_type: IncomeType = IncomeType.GROSS
    region: Region = Region.I
    dependents: int = 0
    insurance_mode: InsuranceMode = InsuranceMode.OFFICIAL
    insurance_salary: float = 0.0
    other_deductions: float = 0.0
    additional_incomes: tuple[AdditionalIncome, ...] = Field(default_factory=tuple)

    def insurance_base_for(self, gross: float) -> float:
        """Return the declared contribution base when the salary is ``gross``."""

        if self.insurance_mode is InsuranceMode.CUSTOM:
            return self.insurance_salary
        return gross

    def as_gross(self, gross: float) -> CalculationInput:
        """Return a copy declaring ``gross`` as pre-tax income."""

        return self.model_copy(update={"income": gross, "income_type": IncomeType.GROSS})


@dataclass(frozen=True)
class InsuranceContribution:
    """Employee insurance contributions and the capped bases behind them."""

    social: float
    health: float
    unemployment: float
    social_health_base: float
    unemployment_base: float

    @property
    def total(self) -> float:
        return self.social + self.health + self.unemployment


@dataclass(frozen=True)
class BracketDetail:
    """Slice of taxable income falling into one progressive bracket."""

    level: int
    rate: float
    min_income: float
    max_income: float | None
    taxed_amount: float
    tax_amount: float


@dataclass(frozen=True)
class AdditionalIncomeDetail:
    label: str
    type: AdditionalIncomeType
    amount: float
    rate: float
    tax: float

    @property
    def net(self) -> float:
        return self.amount - self.tax


@dataclass(frozen=True)
class InversionReport:
    """Outcome of the net-to-gross search."""

    target_net: float
    iterations: int
    residual: float
    converged: bool


@dataclass(frozen=True)
class CalculationResult:
    """Fully itemised outcome of a payroll conversion."""

    gross: float
    net: float
    insurance: InsuranceContribution
    income_before_tax: float
    total_deductions: float
    taxable_income: float
    personal_income_tax: float
    detail_tax: tuple[BracketDetail, ...]
    additional_incomes: tuple[AdditionalIncomeDetail, ...]
    total_tax: float
    total_net: float
    inversion: InversionReport | None = None

    @property
    def social_insurance(self) -> float:
        return self.insurance.social

    @property
    def health_insurance(self) -> float:
        return self.insurance.health

    @property
    def unemployment_insurance(self) -> float:
        return self.insurance.unemployment

    @property
    def total_insurance(self) -> float:
        return self.insurance.total
