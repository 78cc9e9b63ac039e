"""Error hierarchy for the rendering pipeline."""

from __future__ import annotations

from typing import Optional


class ValueRenderError(Exception):
    """Base class for every error the pipeline reports."""


class ConfigError(ValueRenderError):
    """Raised when settings read from the environment are invalid."""


class FormatError(ValueRenderError, ValueError):
    """Raised when a ``key=value`` string is malformed."""


class FileAccessError(ValueRenderError):
    """Raised when a template, values file or output file cannot be accessed."""


class ParseError(ValueRenderError):
    """Raised when a values file or template source cannot be parsed."""


class RenderError(ValueRenderError):
    """Raised when a template fails to render."""


class IncludeRecursionError(RenderError):
    """Raised when an included template nests too deeply.

    ``max_depth`` is set when the include counter tripped, and left as None
    when the interpreter's recursion limit was reached first.
    """

    def __init__(self, name: str, max_depth: Optional[int] = None) -> None:
        reason = (
            f"include depth exceeded {max_depth}"
            if max_depth is not None
            else "interpreter recursion limit reached"
        )
        super().__init__(
            f"rendering template has a nested reference name: {name} ({reason})"
        )
        self.name = name
        self.max_depth = max_depth
