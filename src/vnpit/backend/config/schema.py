"""Pydantic models describing the tax regime configuration schema."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from typing_extensions import Self


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class Region(IntEnum):
    """Ordinal minimum-wage regions."""

    I = 1  # noqa: E741
    II = 2
    III = 3
    IV = 4

    @classmethod
    def parse(cls, value: Any) -> Region:
        """Accept ordinals (``1``), roman numerals (``"I"``) or members."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip().upper()
            if text.isdigit():
                return cls(int(text))
            try:
                return cls[text]
            except KeyError as exc:
                raise ValueError(f"Unknown region '{value}'") from exc
        if isinstance(value, bool):
            raise ValueError("Region must be an ordinal between 1 and 4")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError as exc:
                raise ValueError("Region must be an ordinal between 1 and 4") from exc
        raise ValueError(f"Unknown region '{value}'")


class TaxBracket(ImmutableModel):
    """Represents a single progressive tax bracket.

    ``upper_bound`` is ``None`` for the open-ended top bracket.
    """

    upper_bound: float | None = Field(default=None, alias="upper")
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBracket:
        if self.rate < 0:
            raise ConfigurationError("Tax rates must be non-negative")
        if self.upper_bound is not None and self.upper_bound <= 0:
            raise ConfigurationError("Upper bounds must be positive values")
        return self

    @property
    def is_unbounded(self) -> bool:
        return self.upper_bound is None


class InsuranceRates(ImmutableModel):
    """Employee contribution rates and the caps applied to their bases."""

    social_rate: float = Field(alias="social")
    health_rate: float = Field(alias="health")
    unemployment_rate: float = Field(alias="unemployment")
    social_cap_multiplier: float
    unemployment_cap_multiplier: float

    @model_validator(mode="after")
    def _validate_rates(self) -> InsuranceRates:
        for name in ("social_rate", "health_rate", "unemployment_rate"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"Insurance '{name}' must be non-negative")
        for name in ("social_cap_multiplier", "unemployment_cap_multiplier"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"Insurance '{name}' must be non-negative")
        return self

    @property
    def total_rate(self) -> float:
        return self.social_rate + self.health_rate + self.unemployment_rate


class DeductionAllowances(ImmutableModel):
    """Family circumstance deductions (giảm trừ gia cảnh)."""

    personal: float
    dependent: float

    @model_validator(mode="after")
    def _validate_amounts(self) -> DeductionAllowances:
        if self.personal < 0:
            raise ConfigurationError("Personal deduction must be non-negative")
        if self.dependent < 0:
            raise ConfigurationError("Dependent deduction must be non-negative")
        return self


class AdditionalIncomeRules(ImmutableModel):
    """Flat rates applied to supplementary income items."""

    salary_like_rate: float = 0.10
    freelance_rate: float = 0.10
    freelance_threshold: float = 2_000_000.0
    investment_rate: float = 0.05

    @model_validator(mode="after")
    def _validate_rules(self) -> AdditionalIncomeRules:
        for name in ("salary_like_rate", "freelance_rate", "investment_rate"):
            value = getattr(self, name)
            if value < 0 or value > 1:
                raise ConfigurationError(f"'{name}' must be between 0 and 1")
        if self.freelance_threshold < 0:
            raise ConfigurationError("'freelance_threshold' must be non-negative")
        return self


class RegimeConfiguration(ImmutableModel):
    """Structured representation of one tax-law regime."""

    id: str
    meta: Mapping[str, Any] = Field(default_factory=dict)
    base_salary: float
    regional_minimum_wage: Mapping[Region, float]
    insurance: InsuranceRates
    deductions: DeductionAllowances
    brackets: Sequence[TaxBracket] = Field(alias="tax_brackets")
    additional_income: AdditionalIncomeRules = Field(
        default_factory=AdditionalIncomeRules
    )

    @model_validator(mode="before")
    @classmethod
    def _prepare_sections(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        if "id" in prepared and prepared["id"] is not None:
            prepared["id"] = str(prepared["id"])

        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        if prepared.get("additional_income") is None:
            prepared.pop("additional_income", None)

        return prepared

    @field_validator("regional_minimum_wage", mode="before")
    @classmethod
    def _coerce_regions(cls, value: Any) -> Mapping[Region, float]:
        if not isinstance(value, Mapping):
            raise ConfigurationError("'regional_minimum_wage' must map regions to wages")
        wages: dict[Region, float] = {}
        for key, wage in value.items():
            try:
                region = Region.parse(key)
            except ValueError as exc:
                raise ConfigurationError(str(exc)) from exc
            wages[region] = float(wage)
        return wages

    @model_validator(mode="after")
    def _validate_regime(self) -> Self:
        if self.base_salary < 0:
            raise ConfigurationError("'base_salary' must be non-negative")
        missing = [region.name for region in Region if region not in self.regional_minimum_wage]
        if missing:
            raise ConfigurationError(
                f"Regional minimum wage missing for region(s): {', '.join(missing)}"
            )
        if any(wage < 0 for wage in self.regional_minimum_wage.values()):
            raise ConfigurationError("Regional minimum wages must be non-negative")
        self._validate_bracket_sequence(self.brackets)
        return self

    @staticmethod
    def _validate_bracket_sequence(brackets: Sequence[TaxBracket]) -> None:
        if not brackets:
            raise ConfigurationError("At least one tax bracket must be defined")
        last_upper: float | None = None
        for bracket in brackets[:-1]:
            if bracket.is_unbounded:
                raise ConfigurationError("Only the final tax bracket may be open-ended")
            upper = bracket.upper_bound
            if last_upper is not None and upper <= last_upper:
                raise ConfigurationError("Tax brackets must be in ascending order")
            last_upper = upper
        if not brackets[-1].is_unbounded:
            raise ConfigurationError("Final tax bracket must have an open upper bound")

    @property
    def name(self) -> str:
        return str(self.meta.get("name") or self.id)

    def social_health_cap(self) -> float:
        return self.base_salary * self.insurance.social_cap_multiplier

    def unemployment_cap(self, region: Region) -> float:
        return self.regional_minimum_wage[region] * self.insurance.unemployment_cap_multiplier


class RegimeManifestEntry(ImmutableModel):
    """Entry describing a shipped regime in the manifest."""

    id: str
    filename: str | None = None
    status: str = "current"
    notes_url: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)

    @model_validator(mode="after")
    def _validate_status(self) -> RegimeManifestEntry:
        if self.status not in {"current", "proposed", "archived"}:
            raise ConfigurationError(
                "Regime 'status' must be one of: current, proposed, archived"
            )
        return self

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.id}.yaml"


class RegimeManifest(ImmutableModel):
    """Manifest describing the available regime configuration files."""

    default: str | None = None
    regimes: Sequence[RegimeManifestEntry]

    @field_validator("default", mode="before")
    @classmethod
    def _coerce_default(cls, value: Any) -> str | None:
        return None if value is None else str(value)

    @model_validator(mode="after")
    def _validate_regimes(self) -> RegimeManifest:
        seen: set[str] = set()
        for entry in self.regimes:
            if entry.id in seen:
                raise ConfigurationError(
                    f"Duplicate regime {entry.id} declared in the configuration manifest"
                )
            seen.add(entry.id)
        if self.default is not None and self.default not in seen:
            raise ConfigurationError(
                f"Default regime {self.default} is not declared in the manifest"
            )
        return self

    def get_entry(self, regime_id: str) -> RegimeManifestEntry:
        for entry in self.regimes:
            if entry.id == regime_id:
                return entry
        raise KeyError(regime_id)

    @computed_field
    @property
    def supported_regimes(self) -> tuple[str, ...]:
        return tuple(entry.id for entry in self.regimes)

    @computed_field
    @property
    def default_regime(self) -> str | None:
        if self.default is not None:
            return self.default
        return self.regimes[-1].id if self.regimes else None


__all__ = [
    "AdditionalIncomeRules",
    "ConfigurationError",
    "DeductionAllowances",
    "ImmutableModel",
    "InsuranceRates",
    "Region",
    "RegimeConfiguration",
    "RegimeManifest",
    "RegimeManifestEntry",
    "TaxBracket",
    "ValidationError",
]
