"""Recursion-guarded ``include`` function for templates."""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from typing import Any, Optional

from jinja2 import Environment, pass_context
from jinja2.runtime import Context

from ..core.errors import IncludeRecursionError
from ..core.settings import RECURSION_MAX_DEPTH

logger = logging.getLogger(__name__)

# Interpreter frames one include level costs inside Jinja2, rounded up.
FRAMES_PER_INCLUDE = 12
# Upper bound for the raised recursion limit; deeper stacks risk the C stack.
MAX_RECURSION_LIMIT = 20_000


def _render_vars(context: Context, data: Any) -> dict[str, Any]:
    if data is None:
        return context.get_all()
    if isinstance(data, Mapping):
        return dict(data)
    return {"value": data}


class Includer:
    """Renders templates by name from inside other templates.

    Each call counts as one level of nesting for the named template. The
    counter is released after the render whether or not it succeeded, so a
    failed include never leaks depth into later calls.

    Args:
        environment: Environment holding the includable templates
        max_depth: Nesting ceiling per template name
    """

    def __init__(
        self, environment: Environment, max_depth: int = RECURSION_MAX_DEPTH
    ) -> None:
        self.environment = environment
        self.max_depth = max_depth
        self.depths: dict[str, int] = {}
        self._active = 0
        self._saved_limit: Optional[int] = None

    def enter(self, name: str) -> None:
        depth = self.depths.get(name)
        if depth is None:
            self.depths[name] = 1
        elif depth > self.max_depth:
            raise IncludeRecursionError(name, self.max_depth)
        else:
            self.depths[name] = depth + 1

    def leave(self, name: str) -> None:
        self.depths[name] -= 1

    def _raise_recursion_limit(self) -> None:
        self._saved_limit = sys.getrecursionlimit()
        wanted = self._saved_limit + FRAMES_PER_INCLUDE * (self.max_depth + 1)
        sys.setrecursionlimit(max(self._saved_limit, min(wanted, MAX_RECURSION_LIMIT)))

    def _restore_recursion_limit(self) -> None:
        if self._saved_limit is not None:
            sys.setrecursionlimit(self._saved_limit)
            self._saved_limit = None

    def render(self, name: str, variables: Mapping[str, Any]) -> str:
        """Render ``name`` against ``variables`` under the depth guard.

        While any include is active the interpreter recursion limit is raised
        so that ``max_depth`` rather than CPython's default limit bounds the
        nesting. It is restored when the outermost include returns.
        """
        self.enter(name)
        if self._active == 0:
            self._raise_recursion_limit()
        self._active += 1
        try:
            return self.environment.get_template(name).render(variables)
        except RecursionError as e:
            raise IncludeRecursionError(name) from e
        finally:
            self._active -= 1
            if self._active == 0:
                self._restore_recursion_limit()
            self.leave(name)

    @pass_context
    def include(self, context: Context, name: str, data: Optional[Any] = None) -> str:
        """Template-facing entry point: ``{{ include("_helpers.tmpl", Values) }}``.

        A mapping becomes the included template's variables, any other value
        is exposed as ``value``, and no data reuses the caller's context.
        """
        logger.debug(f"Including {name} (depth {self.depths.get(name, 0)})")
        return self.render(name, _render_vars(context, data))
