"""Template rendering engine."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, TextIO

from jinja2 import TemplateError

from ..core.errors import RenderError, ValueRenderError
from ..core.models import ParameterTree, RenderedTemplate, RenderOptions
from ..parameters import build_parameters
from .io import atomic_write_text, write_diagnostic
from .registry import TemplateRegistry

logger = logging.getLogger(__name__)

LIBRARY_PREFIX = "_"


def is_library_template(name: str) -> bool:
    """Library templates are only reachable through inclusion."""
    return name.startswith(LIBRARY_PREFIX)


def render_template(
    registry: TemplateRegistry, name: str, parameters: ParameterTree
) -> str:
    """Render one registered template against the parameter tree.

    Args:
        registry: Registry holding the template
        name: Registered template name
        parameters: Parameter tree

    Returns:
        Rendered text
    """
    logger.debug(f"Rendering template: {name}")

    try:
        return registry.get(name).render(parameters)
    except ValueRenderError:
        raise
    except RecursionError as e:
        raise RenderError(
            f"executing template {name}: maximum recursion depth exceeded"
        ) from e
    except (
        TemplateError,
        TypeError,
        ValueError,
        AttributeError,
        LookupError,
        ArithmeticError,
    ) as e:
        raise RenderError(f"executing template {name}: {e}") from e


def dispatch_output(
    rendered: RenderedTemplate, file_mode: int, stream: Optional[TextIO] = None
) -> None:
    """Write rendered text to its destination file, or to stderr."""
    if rendered.destination is not None:
        atomic_write_text(rendered.destination, rendered.text, mode=file_mode)
        logger.info(f"Rendered {rendered.name} → {rendered.destination}")
    else:
        write_diagnostic(rendered.text, stream)


def render_all(
    registry: TemplateRegistry,
    parameters: ParameterTree,
    output_path: Optional[Path] = None,
    file_mode: int = 0o600,
    stream: Optional[TextIO] = None,
) -> list[RenderedTemplate]:
    """Render every non-library template in registration order.

    A name registered twice renders twice, each time with its latest source.

    Each result is written as soon as it renders. With an output path every
    template overwrites the same file, so only the last one survives. The
    first failure aborts the run; earlier output stays written.

    Args:
        registry: Registry with all templates loaded
        parameters: Parameter tree
        output_path: File to write, or None for stderr
        file_mode: Permissions for the output file
        stream: Diagnostic stream override (defaults to stderr)

    Returns:
        Rendered templates in output order
    """
    names = [name for name in registry.order if not is_library_template(name)]
    skipped = len(registry.order) - len(names)
    logger.info(f"Rendering {len(names)} template(s), {skipped} library template(s)")

    if output_path is not None and len(names) > 1:
        logger.warning(
            f"{len(names)} templates write to {output_path}; "
            f"only the output of {names[-1]} will remain"
        )

    outputs: list[RenderedTemplate] = []
    for name in names:
        rendered = RenderedTemplate(
            name=name,
            text=render_template(registry, name, parameters),
            destination=output_path,
        )
        dispatch_output(rendered, file_mode, stream)
        outputs.append(rendered)

    logger.info(f"Successfully rendered {len(outputs)} template(s)")
    return outputs


def run(
    options: RenderOptions, max_include_depth: Optional[int] = None
) -> list[RenderedTemplate]:
    """Build parameters, register templates and render them.

    Args:
        options: Validated render options
        max_include_depth: Include ceiling override

    Returns:
        Rendered templates in output order
    """
    parameters = build_parameters(options.values, options.value_files)

    registry = (
        TemplateRegistry(max_include_depth=max_include_depth)
        if max_include_depth is not None
        else TemplateRegistry()
    )
    registry.register_all(options.template_files)

    return render_all(
        registry,
        parameters,
        output_path=options.output_file,
        file_mode=options.file_mode,
    )
