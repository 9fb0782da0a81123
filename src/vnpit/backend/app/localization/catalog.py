"""Translation catalogue helpers backed by JSON package resources."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import cache
from importlib import resources
from typing import Any, Mapping

_BASE_LOCALE = "vi"
_TRANSLATIONS_PACKAGE = "vnpit.translations"


@dataclass(frozen=True)
class Translator:
    """Callable returning the localized string for a message key."""

    locale: str
    _messages: Mapping[str, str]
    _fallback: Mapping[str, str]

    def __call__(self, key: str) -> str:
        return self._messages.get(key) or self._fallback.get(key, key)


@cache
def available_locales() -> tuple[str, ...]:
    """Return the locales that ship a translation payload."""

    root = resources.files(_TRANSLATIONS_PACKAGE)
    locales = sorted(
        entry.name.removesuffix(".json")
        for entry in root.iterdir()
        if entry.name.endswith(".json")
    )
    return tuple(locales) or (_BASE_LOCALE,)


@cache
def _read_catalogue(locale: str) -> dict[str, Any]:
    resource = resources.files(_TRANSLATIONS_PACKAGE).joinpath(f"{locale}.json")
    if not resource.is_file():
        return {"backend": {}, "frontend": {}}

    with resource.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    backend = payload.get("backend") or {}
    frontend = payload.get("frontend") or {}
    return {
        "backend": {str(key): str(value) for key, value in backend.items()},
        "frontend": dict(frontend),
    }


def normalise_locale(locale: str | None) -> str:
    """Map ``vi-VN``/``EN`` style hints onto a shipped catalogue key."""

    if not locale:
        return _BASE_LOCALE

    normalized = locale.strip().lower().replace("_", "-").split("-")[0]
    return normalized if normalized in available_locales() else _BASE_LOCALE


def get_translator(locale: str | None = None) -> Translator:
    normalized = normalise_locale(locale)
    messages = _read_catalogue(normalized)["backend"]
    fallback = _read_catalogue(_BASE_LOCALE)["backend"]
    return Translator(locale=normalized, _messages=messages, _fallback=fallback)


def load_translations(locale: str | None = None) -> dict[str, Any]:
    """Expose backend and frontend strings for API consumers."""

    normalized = normalise_locale(locale)
    catalogue = _read_catalogue(normalized)
    return {
        "locale": normalized,
        "available_locales": list(available_locales()),
        "backend": dict(catalogue["backend"]),
        "frontend": dict(catalogue["frontend"]),
    }


__all__ = [
    "Translator",
    "available_locales",
    "get_translator",
    "load_translations",
    "normalise_locale",
]
