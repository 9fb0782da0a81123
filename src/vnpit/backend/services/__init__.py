"""HTTP-facing helpers for the VNPIT backend."""

from .request_parser import parse_calculation_payload
from .response_builder import build_calculation_response

__all__ = [
    "build_calculation_response",
    "parse_calculation_payload",
]
