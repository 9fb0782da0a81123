"""Domain-specific calculation helpers."""

from .additional_income import calculate_additional_income, rate_for_item
from .insurance import calculate_insurance
from .progressive import ProgressiveTax, calculate_progressive_tax
from .utils import format_amount, format_percentage, round_currency, round_rate

__all__ = [
    "ProgressiveTax",
    "calculate_additional_income",
    "calculate_insurance",
    "calculate_progressive_tax",
    "format_amount",
    "format_percentage",
    "rate_for_item",
    "round_currency",
    "round_rate",
]
