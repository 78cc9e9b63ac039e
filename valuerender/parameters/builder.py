"""Assembly of the ``Values`` parameter tree."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import yaml

from ..core.errors import ParseError
from ..core.models import ParameterTree
from ..rendering.io import read_text
from .keyvalue import parse_key_values

logger = logging.getLogger(__name__)

VALUES_KEY = "Values"


def load_values_file(path: Path) -> dict[str, Any]:
    """Load a YAML or JSON values file.

    Args:
        path: Values file path

    Returns:
        The top-level mapping of the document (empty for an empty file)
    """
    text = read_text(path, kind="values file")

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(f"unmarshaling values file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParseError(
            f"unmarshaling values file {path}: expected a mapping at top level, "
            f"got {type(data).__name__}"
        )
    return data


def build_parameters(
    values: Iterable[str] = (), value_files: Iterable[str] = ()
) -> ParameterTree:
    """Build the parameter tree from inline and file-sourced values.

    Inline values are applied first and kept as strings. File values are
    applied second, so they replace an inline value set under the same key.

    Args:
        values: ``key=value`` entries
        value_files: ``key=path`` entries

    Returns:
        Mapping with a single ``Values`` key
    """
    value_map: dict[str, Any] = {}

    inline = parse_key_values(values)
    value_map.update(inline)
    logger.debug(f"Set {len(inline)} inline value(s)")

    for key, path in parse_key_values(value_files).items():
        if key in value_map:
            logger.debug(f"Values file {path} overrides inline value for {key!r}")
        value_map[key] = load_values_file(Path(path))
        logger.debug(f"Loaded values file {path} into Values.{key}")

    return {VALUES_KEY: value_map}
