"""
Message resolution for user-facing text.

The catalog content lives outside this module; components only pass dotted
keys (e.g. ``countries.fields.name``) and interpolation variables.

Catalogs are nested objects as exported for i18next::

    {"countries": {"fields": {"name": "Name"}}}

A resources file bundles one catalog per language::

    {"en": {"translation": {...}}, "ru": {"translation": {...}}}
"""

import json
import re
from pathlib import Path
from typing import Any, Optional

import structlog

logger = structlog.get_logger(__name__)

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")

DEFAULT_LANGUAGE = "en"


def lookup(catalog: dict[str, Any], key: str) -> Optional[str]:
    """Resolve a dotted key against a nested catalog, or None if missing."""
    # Flat entries win over nested ones
    value = catalog.get(key)
    if isinstance(value, str):
        return value

    node: Any = catalog
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


def _load_json(path: str | Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


class Translator:
    """Resolves dotted message keys, falling back to a second catalog."""

    def __init__(
        self,
        catalog: Optional[dict[str, Any]] = None,
        fallback: Optional[dict[str, Any]] = None,
        language: str = DEFAULT_LANGUAGE,
    ):
        self._catalog = dict(catalog or {})
        self._fallback = dict(fallback or {})
        self.language = language

    @classmethod
    def from_file(cls, path: str | Path) -> "Translator":
        """Load a single ``{key: message}`` JSON catalog, nested or flat."""
        catalog = _load_json(path)
        logger.info("i18n_catalog_loaded", path=str(path), keys=len(catalog))
        return cls(catalog)

    @classmethod
    def from_resources(
        cls,
        resources: dict[str, Any],
        language: str = DEFAULT_LANGUAGE,
        fallback_language: str = DEFAULT_LANGUAGE,
    ) -> "Translator":
        """
        Pick the catalogs for a language out of an i18next resources bundle.

        Args:
            resources: ``{lang: {"translation": catalog}}``
            language: Preferred language
            fallback_language: Consulted for keys the preferred one lacks

        Returns:
            Translator for ``language``; if it is not bundled, the fallback
            catalog alone is used
        """

        def catalog_for(lang: str) -> dict[str, Any]:
            return (resources.get(lang) or {}).get("translation") or {}

        catalog = catalog_for(language)
        if not catalog:
            logger.warning(
                "i18n_language_missing",
                language=language,
                fallback_language=fallback_language,
            )
            language = fallback_language

        fallback = catalog_for(fallback_language) if fallback_language != language else {}
        return cls(catalog or catalog_for(fallback_language), fallback, language=language)

    def __call__(self, key: str, **variables: Any) -> str:
        message = lookup(self._catalog, key)
        if message is None:
            message = lookup(self._fallback, key)
        if message is None:
            # Unknown keys render as the key itself
            message = key

        if not variables:
            return message
        return _PLACEHOLDER.sub(
            lambda m: str(variables.get(m.group(1), m.group(0))),
            message,
        )


def get_translator(
    resources_path: Optional[str] = None,
    language: str = DEFAULT_LANGUAGE,
    fallback_language: str = DEFAULT_LANGUAGE,
) -> Translator:
    """Create a translator from the configured resources file, if any."""
    if not resources_path:
        return Translator(language=language)

    resources = _load_json(resources_path)
    logger.info(
        "i18n_resources_loaded",
        path=resources_path,
        languages=sorted(resources),
        language=language,
    )
    return Translator.from_resources(resources, language, fallback_language)
