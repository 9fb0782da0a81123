"""Editable regime settings.

The settings surface lets a user adjust a handful of regime figures (base
salary and the family deductions) before running a calculation. Each editable
field has its own setter so that range checks stay explicit; the editor never
mutates the source configuration and ``build`` always returns a fresh frozen
model.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .schema import RegimeConfiguration


class SettingsOverrides(BaseModel):
    """User-supplied overrides for the editable regime fields."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    base_salary: float | None = Field(default=None, ge=0)
    personal_deduction: float | None = Field(default=None, ge=0)
    dependent_deduction: float | None = Field(default=None, ge=0)

    @property
    def is_empty(self) -> bool:
        return (
            self.base_salary is None
            and self.personal_deduction is None
            and self.dependent_deduction is None
        )


def _require_amount(field_name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{field_name}' must be a number")
    amount = float(value)
    if not math.isfinite(amount):
        raise ValueError(f"'{field_name}' must be a finite number")
    if amount < 0:
        raise ValueError(f"'{field_name}' cannot be negative")
    return amount


class RegimeSettingsEditor:
    """Builder producing an edited copy of a :class:`RegimeConfiguration`."""

    def __init__(self, config: RegimeConfiguration) -> None:
        self._source = config
        self._base_salary = config.base_salary
        self._personal = config.deductions.personal
        self._dependent = config.deductions.dependent

    def set_base_salary(self, value: float) -> RegimeSettingsEditor:
        self._base_salary = _require_amount("base_salary", value)
        return self

    def set_personal_deduction(self, value: float) -> RegimeSettingsEditor:
        self._personal = _require_amount("personal_deduction", value)
        return self

    def set_dependent_deduction(self, value: float) -> RegimeSettingsEditor:
        self._dependent = _require_amount("dependent_deduction", value)
        return self

    def reset(self, default: RegimeConfiguration | None = None) -> RegimeSettingsEditor:
        """Restore editable fields from ``default`` (or the source regime)."""

        reference = default or self._source
        self._source = reference
        self._base_salary = reference.base_salary
        self._personal = reference.deductions.personal
        self._dependent = reference.deductions.dependent
        return self

    @property
    def has_changes(self) -> bool:
        return (
            self._base_salary != self._source.base_salary
            or self._personal != self._source.deductions.personal
            or self._dependent != self._source.deductions.dependent
        )

    def build(self) -> RegimeConfiguration:
        if not self.has_changes:
            return self._source

        deductions = self._source.deductions.model_copy(
            update={"personal": self._personal, "dependent": self._dependent}
        )
        meta = dict(self._source.meta)
        meta["customised"] = True
        return self._source.model_copy(
            update={
                "base_salary": self._base_salary,
                "deductions": deductions,
                "meta": meta,
            }
        )


def apply_settings(
    config: RegimeConfiguration, overrides: SettingsOverrides | None
) -> RegimeConfiguration:
    """Return ``config`` with any non-empty ``overrides`` applied."""

    if overrides is None or overrides.is_empty:
        return config

    editor = RegimeSettingsEditor(config)
    if overrides.base_salary is not None:
        editor.set_base_salary(overrides.base_salary)
    if overrides.personal_deduction is not None:
        editor.set_personal_deduction(overrides.personal_deduction)
    if overrides.dependent_deduction is not None:
        editor.set_dependent_deduction(overrides.dependent_deduction)
    return editor.build()


__all__ = ["RegimeSettingsEditor", "SettingsOverrides", "apply_settings"]
