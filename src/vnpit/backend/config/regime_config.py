"""Configuration loader wrapping the shared schema models."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from .schema import (
    AdditionalIncomeRules,
    ConfigurationError,
    DeductionAllowances,
    InsuranceRates,
    Region,
    RegimeConfiguration,
    RegimeManifest,
    RegimeManifestEntry,
    TaxBracket,
)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_manifest() -> RegimeManifest:
    """Load and cache the regime manifest."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError("Configuration manifest not found")

    raw_manifest = _load_yaml(MANIFEST_FILE)

    try:
        return RegimeManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ConfigurationError(f"Manifest validation failed: {error}") from error


def manifest_entries() -> Sequence[RegimeManifestEntry]:
    """Expose the configured manifest entries."""

    return load_manifest().regimes


@lru_cache(maxsize=8)
def load_regime_configuration(regime_id: str) -> RegimeConfiguration:
    """Load configuration for the specified regime from disk."""

    regime_id = str(regime_id)
    try:
        manifest_entry = load_manifest().get_entry(regime_id)
    except KeyError as exc:
        raise FileNotFoundError(
            f"Configuration for regime {regime_id} not declared in manifest"
        ) from exc

    config_file = CONFIG_DIRECTORY / manifest_entry.resolved_filename
    if not config_file.exists():
        raise FileNotFoundError(
            f"Configuration file for regime {regime_id} missing: {config_file.name}"
        )

    raw_config = _load_yaml(config_file)
    raw_config.setdefault("id", regime_id)

    try:
        configuration = RegimeConfiguration.model_validate(raw_config)
    except ValidationError as error:
        raise ConfigurationError(
            f"Configuration validation failed for {regime_id}: {error}"
        ) from error

    if configuration.id != regime_id:
        raise ConfigurationError(
            f"Configuration id mismatch: expected {regime_id}, found {configuration.id}"
        )

    return configuration


def available_regimes() -> Sequence[str]:
    """Return the regime identifiers declared in the manifest."""

    return load_manifest().supported_regimes


def default_regime_id() -> str:
    """Return the regime used when a request does not name one."""

    default = load_manifest().default_regime
    if default is None:
        raise ConfigurationError("Configuration manifest declares no regimes")
    return default


__all__ = [
    "AdditionalIncomeRules",
    "CONFIG_DIRECTORY",
    "ConfigurationError",
    "DeductionAllowances",
    "InsuranceRates",
    "MANIFEST_FILE",
    "Region",
    "RegimeConfiguration",
    "RegimeManifest",
    "RegimeManifestEntry",
    "TaxBracket",
    "available_regimes",
    "default_regime_id",
    "load_manifest",
    "load_regime_configuration",
    "manifest_entries",
]
