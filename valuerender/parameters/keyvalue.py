"""Parsing of ``key=value`` command-line entries."""

from __future__ import annotations

from typing import Iterable

from ..core.errors import FormatError


def parse_key_value(item: str) -> tuple[str, str]:
    """Split a single ``key=value`` string on its first ``=``."""
    if "=" not in item:
        raise FormatError(f"expected key=value string, got {item!r}")
    key, value = item.split("=", 1)
    if not key or not value:
        raise FormatError(f"key or value cannot be empty, got {item!r}")
    return key, value


def parse_key_values(items: Iterable[str]) -> dict[str, str]:
    """Parse ``key=value`` strings into a mapping.

    Args:
        items: Strings in ``key=value`` form

    Returns:
        Mapping of key to raw value; the last occurrence of a key wins
    """
    result: dict[str, str] = {}
    for item in items:
        key, value = parse_key_value(item)
        result[key] = value
    return result
