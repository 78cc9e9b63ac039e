"""Domain models for rendering options and results."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

# Parameter tree values: str, int, float, bool, None, list or nested dict.
ParameterTree = dict[str, Any]


class TemplateEntry(BaseModel):
    """A registered template source."""

    name: str = Field(..., description="Identifier derived from the file base name")
    path: Path = Field(..., description="Template file path")
    source: str = Field(..., description="Raw template text")


class RenderOptions(BaseModel):
    """Everything a single run needs besides the template sources."""

    template_files: list[Path] = Field(..., min_length=1, description="Templates")
    values: list[str] = Field(default_factory=list, description="--set entries")
    value_files: list[str] = Field(
        default_factory=list, description="--set-from-file entries"
    )
    output_file: Optional[Path] = Field(default=None, description="Output path")
    file_mode: int = Field(default=0o600, description="File permissions (octal)")


class RenderedTemplate(BaseModel):
    """The result of rendering one top-level template."""

    name: str
    text: str
    destination: Optional[Path] = Field(
        default=None, description="Output path, or None for stderr"
    )
