"""REST endpoints for payroll conversions."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from vnpit.backend.app.services.calculation_service import (
    build_calculation_context,
    calculate_tax,
)
from vnpit.backend.services import (
    build_calculation_response,
    parse_calculation_payload,
)

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1")


@blueprint.post("/calculations")
def create_calculation() -> tuple[Any, int]:
    """Run a gross-to-net or net-to-gross conversion for the JSON payload."""

    payload = parse_calculation_payload(request)
    result = calculate_tax(payload)

    return build_calculation_response(result)


@blueprint.post("/calculations/context")
def create_calculation_context() -> tuple[Any, int]:
    """Return the text snapshot forwarded to the advice assistant."""

    payload = parse_calculation_payload(request)
    return build_calculation_response(build_calculation_context(payload))
