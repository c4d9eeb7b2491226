"""
Message catalogue for user-facing combat text.

The combat core never builds user-facing sentences itself: it asks a
translator for a message key plus a parameter map and embeds the returned
string in its results. This module provides the default YAML-backed
catalogue; any object with a compatible ``translate`` method can replace it.
"""
from typing import Any, Optional, Protocol

import yaml

from .config import resolve_asset_path

DEFAULT_CATALOGUE_PATH = "assets/i18n/en.yaml"


class Translator(Protocol):
    """Anything that turns a message key and parameters into text."""

    def translate(self, key: str, **params: Any) -> str:
        ...


class _KeepMissing(dict):
    """Leave unknown placeholders visible instead of failing."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


class MessageCatalog:
    """Translation catalogue loaded from a nested YAML file."""

    def __init__(self, messages: Optional[dict[str, Any]] = None):
        self._messages: dict[str, str] = {}
        if messages:
            self._flatten(messages, "")

    @classmethod
    def load(cls, path: Optional[str] = None) -> "MessageCatalog":
        """Load a catalogue file.

        Args:
            path: Package-relative or absolute path to the YAML catalogue

        Raises:
            FileNotFoundError: If the catalogue file does not exist
        """
        catalogue_file = resolve_asset_path(path or DEFAULT_CATALOGUE_PATH)
        try:
            with open(catalogue_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Message catalogue not found: {catalogue_file}")
        return cls(data)

    def _flatten(self, node: dict[str, Any], prefix: str) -> None:
        for key, value in node.items():
            full_key = f"{prefix}.{key}" if prefix else str(key)
            if isinstance(value, dict):
                self._flatten(value, full_key)
            else:
                self._messages[full_key] = str(value)

    def has(self, key: str) -> bool:
        return key in self._messages

    def translate(self, key: str, **params: Any) -> str:
        """Return the formatted message for ``key`` (the key itself if unknown)."""
        template = self._messages.get(key)
        if template is None:
            return key
        return template.format_map(_KeepMissing(params))


_default_catalog: Optional[MessageCatalog] = None


def get_default_catalog() -> MessageCatalog:
    """Return the shared English catalogue, loading it on first use."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = MessageCatalog.load()
    return _default_catalog
