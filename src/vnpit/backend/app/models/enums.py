"""Enumerations shared by request models and the calculation engine."""

from __future__ import annotations

from enum import Enum


class IncomeType(str, Enum):
    """Whether the declared income is pre-tax or take-home pay."""

    GROSS = "GROSS"
    NET = "NET"


class InsuranceMode(str, Enum):
    """How the insurance contribution base is derived."""

    OFFICIAL = "OFFICIAL"  # the gross salary itself
    CUSTOM = "CUSTOM"  # a separately declared amount


class AdditionalIncomeType(str, Enum):
    SALARY_LIKE = "SALARY_LIKE"
    FREELANCE = "FREELANCE"
    INVESTMENT = "INVESTMENT"
    NON_TAXABLE = "NON_TAXABLE"


__all__ = ["AdditionalIncomeType", "IncomeType", "InsuranceMode"]
