"""Serve translation catalogues to the front-end."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from vnpit.backend.app.localization import load_translations

blueprint = Blueprint("localization", __name__, url_prefix="/api/v1/translations")


@blueprint.get("")
@blueprint.get("/<locale>")
def get_translations(locale: str | None = None) -> tuple[Any, int]:
    """Unknown locales fall back to the Vietnamese catalogue."""

    return jsonify(load_translations(locale)), 200
