"""CLI argument parsers and validators."""

from __future__ import annotations

import typer


def split_csv(values: list[str]) -> list[str]:
    """Flatten repeatable options whose values may also be comma-separated."""
    return [part for value in values if value for part in value.split(",")]


def parse_file_mode(value: str) -> int:
    """Parse octal file mode string."""
    try:
        return int(value, 8)
    except ValueError as e:
        raise typer.BadParameter(f"Invalid octal mode: {value!r}") from e
