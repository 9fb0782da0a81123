"""Expose regime metadata consumed by the front-end.

The settings panel and the regime switcher read base salaries, deductions and
bracket tables from here instead of duplicating the YAML data client-side.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from vnpit.backend.app.http import problem_response
from vnpit.backend.app.localization import Translator, get_translator
from vnpit.backend.app.services.advice_context import regime_label
from vnpit.backend.app.services.calculators import format_percentage
from vnpit.backend.config.regime_config import (
    RegimeConfiguration,
    RegimeManifestEntry,
    load_manifest,
    load_regime_configuration,
)
from vnpit.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    manifest = load_manifest()
    return {
        "version": get_project_version(),
        "supported_regimes": list(manifest.supported_regimes),
        "default_regime": manifest.default_regime,
    }


def _serialise_regime(
    config: RegimeConfiguration,
    entry: RegimeManifestEntry,
    translator: Translator,
) -> dict[str, Any]:
    insurance = config.insurance
    return {
        "id": config.id,
        "name": regime_label(config, translator),
        "status": entry.status,
        "notes_url": entry.notes_url,
        "meta": dict(config.meta),
        "base_salary": config.base_salary,
        "regional_minimum_wage": {
            region.name: wage for region, wage in sorted(config.regional_minimum_wage.items())
        },
        "insurance": {
            "social_rate": insurance.social_rate,
            "health_rate": insurance.health_rate,
            "unemployment_rate": insurance.unemployment_rate,
            "social_cap_multiplier": insurance.social_cap_multiplier,
            "unemployment_cap_multiplier": insurance.unemployment_cap_multiplier,
            "social_health_cap": config.social_health_cap(),
        },
        "deductions": {
            "personal": config.deductions.personal,
            "dependent": config.deductions.dependent,
        },
        "brackets": [
            {
                "level": level,
                "upper": bracket.upper_bound,
                "rate": bracket.rate,
                "rate_label": format_percentage(bracket.rate),
            }
            for level, bracket in enumerate(config.brackets, start=1)
        ],
        "additional_income": config.additional_income.model_dump(mode="json"),
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    return jsonify({"version": get_project_version()}), 200


@blueprint.get("/regimes")
def list_regimes() -> tuple[Any, int]:
    """Return every configured regime with its figures."""

    translator = get_translator(request.args.get("locale"))
    manifest = load_manifest()
    regimes = [
        _serialise_regime(load_regime_configuration(entry.id), entry, translator)
        for entry in manifest.regimes
    ]
    return jsonify({"regimes": regimes, "default_regime": manifest.default_regime}), 200


@blueprint.get("/regimes/<regime_id>")
def get_regime(regime_id: str) -> tuple[Any, int]:
    """Return a single regime or a 404 problem payload."""

    translator = get_translator(request.args.get("locale"))
    try:
        entry = load_manifest().get_entry(regime_id)
        config = load_regime_configuration(regime_id)
    except (KeyError, FileNotFoundError):
        return problem_response(
            "not_found", status=404, message=f"Unknown tax regime '{regime_id}'"
        ).to_response()

    return jsonify(_serialise_regime(config, entry, translator)), 200
