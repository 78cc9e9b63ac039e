"""Template registry backed by a single Jinja2 environment."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from jinja2 import DictLoader, Environment, StrictUndefined, Template, TemplateSyntaxError

from ..core.errors import ParseError
from ..core.models import TemplateEntry
from ..core.settings import RECURSION_MAX_DEPTH
from .functions import register_functions
from .includer import Includer
from .io import read_text

logger = logging.getLogger(__name__)


def template_name(path: Path) -> str:
    """Templates are addressed by their file base name."""
    return Path(path).name


def create_environment(sources: dict[str, str]) -> Environment:
    """Create the strict environment every registered template shares.

    Args:
        sources: Live mapping of template name to source text

    Returns:
        Environment with the helper library installed
    """
    env = Environment(
        loader=DictLoader(sources),
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    register_functions(env)
    return env


class TemplateRegistry:
    """Named collection of templates sharing one function namespace.

    Args:
        max_include_depth: Nesting ceiling for the ``include`` function
    """

    def __init__(self, max_include_depth: int = RECURSION_MAX_DEPTH) -> None:
        self._sources: dict[str, str] = {}
        self.entries: dict[str, TemplateEntry] = {}
        self.order: list[str] = []
        self.environment = create_environment(self._sources)
        self.includer = Includer(self.environment, max_depth=max_include_depth)
        self.environment.globals["include"] = self.includer.include

    @property
    def names(self) -> list[str]:
        """Distinct registered names in first-registration order."""
        return list(self.entries)

    def add(self, name: str, source: str, path: Path | None = None) -> TemplateEntry:
        """Register template source under ``name`` and compile it.

        Raises:
            ParseError: The source is not valid template syntax
        """
        if name in self.entries:
            logger.warning(f"Template {name} registered twice; later source replaces earlier")

        entry = TemplateEntry(name=name, path=path or Path(name), source=source)
        previous = self._sources.get(name)
        self._sources[name] = source
        try:
            self.environment.get_template(name)
        except TemplateSyntaxError as e:
            if previous is None:
                del self._sources[name]
            else:
                self._sources[name] = previous
            raise ParseError(f"parsing template file {entry.path}: {e}") from e

        self.entries[name] = entry
        self.order.append(name)
        logger.debug(f"Registered template {name} from {entry.path}")
        return entry

    def register(self, path: Path) -> TemplateEntry:
        """Read a template file and register it under its base name."""
        path = Path(path)
        source = read_text(path, kind="template file")
        return self.add(template_name(path), source, path)

    def register_all(self, paths: Iterable[Path]) -> list[TemplateEntry]:
        """Register files in order, stopping at the first failure."""
        return [self.register(path) for path in paths]

    def get(self, name: str) -> Template:
        return self.environment.get_template(name)
