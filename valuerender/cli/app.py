"""Main CLI application."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from typing_extensions import Annotated

from ..core.errors import ValueRenderError
from ..core.models import RenderOptions
from ..core.settings import load_settings
from ..rendering import engine
from .parsers import parse_file_mode, split_csv

logger = logging.getLogger(__name__)


def _exit_with_error(error: ValueRenderError) -> NoReturn:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=1) from error


app = typer.Typer(
    name="valuerender",
    help=(
        "Render Jinja2 TEMPLATES to stderr, parameterising them using values "
        "read from the command line or YAML/JSON files."
    ),
    add_completion=False,
)


@app.command()
def render(
    templates: Annotated[
        list[Path],
        typer.Argument(
            help="Template files, rendered in order. Names starting with '_' are only included.",
            metavar="TEMPLATES...",
            show_default=False,
        ),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output rendered templates to file rather than stderr.",
            metavar="FILE",
        ),
    ] = None,
    values: Annotated[
        list[str],
        typer.Option(
            "--set",
            help="Set the parameter at Values.KEY to VALUE (repeatable, or key1=val1,key2=val2).",
            metavar="KEY=VALUE",
            callback=split_csv,
        ),
    ] = [],
    value_files: Annotated[
        list[str],
        typer.Option(
            "--set-from-file",
            help="Set the parameter at Values.KEY to the YAML or JSON object read from FILE (repeatable, or key1=file1,key2=file2).",
            metavar="KEY=FILE",
            callback=split_csv,
        ),
    ] = [],
    file_mode: Annotated[
        Optional[str],
        typer.Option(
            "--mode",
            help="Output file permissions in octal (default: 0600).",
            metavar="OCTAL",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Render Jinja2 templates against a Values tree."""
    try:
        settings = load_settings()
    except ValueRenderError as e:
        _exit_with_error(e)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="[%(levelname)s] %(message)s",
        force=True,
    )

    logger.debug("Starting valuerender")

    options = RenderOptions(
        template_files=templates,
        values=values,
        value_files=value_files,
        output_file=output,
        file_mode=parse_file_mode(file_mode or settings.file_mode),
    )

    logger.debug(
        f"Config: {len(options.template_files)} template(s), "
        f"{len(options.values)} value(s), {len(options.value_files)} value file(s)"
    )

    try:
        outputs = engine.run(options, max_include_depth=settings.include_max_depth)
    except ValueRenderError as e:
        _exit_with_error(e)

    logger.debug(f"Completed: {len(outputs)} template(s) rendered")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
