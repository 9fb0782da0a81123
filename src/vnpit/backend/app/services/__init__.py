"""Calculation engine and the service layer wrapped around it."""

from .calculation_service import build_calculation_context, calculate_tax
from .payroll import compute_from_gross, compute_from_net

__all__ = [
    "build_calculation_context",
    "calculate_tax",
    "compute_from_gross",
    "compute_from_net",
]
