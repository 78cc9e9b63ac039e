"""Built-in helper functions shared by every template.

Helpers are installed both as globals (``{{ quote(Values.name) }}``) and as
filters (``{{ Values.name | quote }}``). Names follow the Sprig library used by
Go template tools, but the subject always comes first so every helper reads
naturally after a ``|``.
"""

from __future__ import annotations

import base64
import hashlib
import json
import re
from collections.abc import Mapping
from typing import Any, Callable, NoReturn

import yaml
from jinja2 import Environment, Undefined

from ..core.errors import RenderError

_WORD_BOUNDARY = re.compile(r"[\s_\-]+|(?<=[a-z0-9])(?=[A-Z])")


def _words(value: Any) -> list[str]:
    return [w for w in _WORD_BOUNDARY.split(str(value)) if w]


# Strings


def quote(*values: Any) -> str:
    return " ".join(json.dumps(str(v)) for v in values if v is not None)


def squote(*values: Any) -> str:
    return " ".join(f"'{v}'" for v in values if v is not None)


def trim_prefix(value: Any, prefix: str) -> str:
    text = str(value)
    return text[len(prefix) :] if prefix and text.startswith(prefix) else text


def trim_suffix(value: Any, suffix: str) -> str:
    text = str(value)
    return text[: -len(suffix)] if suffix and text.endswith(suffix) else text


def has_prefix(value: Any, prefix: str) -> bool:
    return str(value).startswith(prefix)


def has_suffix(value: Any, suffix: str) -> bool:
    return str(value).endswith(suffix)


def contains(value: Any, substring: str) -> bool:
    return substring in str(value)


def indent(value: Any, spaces: int = 4) -> str:
    pad = " " * spaces
    return "\n".join(pad + line for line in str(value).split("\n"))


def nindent(value: Any, spaces: int = 4) -> str:
    return "\n" + indent(value, spaces)


def repeat(value: Any, count: int) -> str:
    return str(value) * count


def snakecase(value: Any) -> str:
    return "_".join(w.lower() for w in _words(value))


def kebabcase(value: Any) -> str:
    return "-".join(w.lower() for w in _words(value))


def camelcase(value: Any) -> str:
    return "".join(w[:1].upper() + w[1:] for w in _words(value))


def trunc(value: Any, length: int) -> str:
    text = str(value)
    return text[length:] if length < 0 else text[:length]


def b64enc(value: Any) -> str:
    return base64.b64encode(str(value).encode("utf-8")).decode("ascii")


def b64dec(value: Any) -> str:
    try:
        return base64.b64decode(str(value), validate=True).decode("utf-8")
    except ValueError as e:
        raise RenderError(f"b64dec: {e}") from e


def sha256sum(value: Any) -> str:
    return hashlib.sha256(str(value).encode("utf-8")).hexdigest()


# Serialization


def to_yaml(value: Any) -> str:
    if value is None:
        return ""
    return yaml.safe_dump(value, default_flow_style=False, sort_keys=True).rstrip("\n")


def to_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True)


def to_pretty_json(value: Any) -> str:
    return json.dumps(value, indent=2, sort_keys=True)


def from_yaml(value: str) -> Any:
    try:
        return yaml.safe_load(value)
    except yaml.YAMLError as e:
        raise RenderError(f"fromYaml: {e}") from e


def from_json(value: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise RenderError(f"fromJson: {e}") from e


# Math


def add(*numbers: Any) -> Any:
    return sum(numbers)


def sub(a: Any, b: Any) -> Any:
    return a - b


def mul(*numbers: Any) -> Any:
    result = 1
    for n in numbers:
        result *= n
    return result


def div(a: Any, b: Any) -> Any:
    if b == 0:
        raise RenderError("div: division by zero")
    if isinstance(a, int) and isinstance(b, int):
        return int(a / b)
    return a / b


def mod(a: Any, b: Any) -> Any:
    if b == 0:
        raise RenderError("mod: division by zero")
    return a % b


def until(count: int) -> list[int]:
    return list(range(count))


# Collections


def make_list(*items: Any) -> list[Any]:
    return list(items)


def make_dict(*pairs: Any, **kwargs: Any) -> dict[str, Any]:
    if len(pairs) % 2:
        raise RenderError("dict: expected an even number of arguments")
    result = {str(pairs[i]): pairs[i + 1] for i in range(0, len(pairs), 2)}
    result.update(kwargs)
    return result


def _mapping(func: str, value: Any) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise RenderError(f"{func}: expected a mapping, got {type(value).__name__}")
    return value


def keys(*mappings: Mapping[str, Any]) -> list[str]:
    return [k for m in mappings for k in _mapping("keys", m)]


def values(mapping: Mapping[str, Any]) -> list[Any]:
    return list(_mapping("values", mapping).values())


def has_key(mapping: Mapping[str, Any], key: str) -> bool:
    return key in _mapping("hasKey", mapping)


def pluck(key: str, *mappings: Mapping[str, Any]) -> list[Any]:
    return [m[key] for m in mappings if key in _mapping("pluck", m)]


def merge(dest: Mapping[str, Any], *sources: Mapping[str, Any]) -> dict[str, Any]:
    """Merge mappings recursively; keys already in ``dest`` win."""
    result = dict(_mapping("merge", dest))
    for source in sources:
        for key, value in _mapping("merge", source).items():
            if key not in result:
                result[key] = value
            elif isinstance(result[key], Mapping) and isinstance(value, Mapping):
                result[key] = merge(result[key], value)
    return result


def uniq(items: list[Any]) -> list[Any]:
    result: list[Any] = []
    for item in items:
        if item not in result:
            result.append(item)
    return result


def compact(items: list[Any]) -> list[Any]:
    return [item for item in items if not empty(item)]


# Control


def empty(value: Any) -> bool:
    return value is None or value is False or value == 0 or value in ("", [], {})


def coalesce(*items: Any) -> Any:
    for item in items:
        if not empty(item):
            return item
    return None


def ternary(condition: Any, true_value: Any, false_value: Any) -> Any:
    return true_value if condition else false_value


def required(value: Any, message: str) -> Any:
    if isinstance(value, Undefined) or value is None or value == "":
        raise RenderError(message)
    return value


def fail(message: str) -> NoReturn:
    raise RenderError(message)


BUILTIN_FUNCTIONS: dict[str, Callable[..., Any]] = {
    "quote": quote,
    "squote": squote,
    "trimPrefix": trim_prefix,
    "trimSuffix": trim_suffix,
    "hasPrefix": has_prefix,
    "hasSuffix": has_suffix,
    "contains": contains,
    "indent": indent,
    "nindent": nindent,
    "repeat": repeat,
    "snakecase": snakecase,
    "kebabcase": kebabcase,
    "camelcase": camelcase,
    "trunc": trunc,
    "b64enc": b64enc,
    "b64dec": b64dec,
    "sha256sum": sha256sum,
    "toYaml": to_yaml,
    "toJson": to_json,
    "toPrettyJson": to_pretty_json,
    "fromYaml": from_yaml,
    "fromJson": from_json,
    "add": add,
    "sub": sub,
    "mul": mul,
    "div": div,
    "mod": mod,
    "max": max,
    "min": min,
    "until": until,
    "list": make_list,
    "dict": make_dict,
    "keys": keys,
    "values": values,
    "hasKey": has_key,
    "pluck": pluck,
    "merge": merge,
    "uniq": uniq,
    "compact": compact,
    "empty": empty,
    "coalesce": coalesce,
    "ternary": ternary,
    "required": required,
    "fail": fail,
}


def register_functions(environment: Environment) -> None:
    """Install the helper library as globals and filters.

    Jinja2's own filters keep precedence where names collide (``indent``,
    ``list``, ``max``, ``min``), so only the globals carry those helpers.
    """
    for name, func in BUILTIN_FUNCTIONS.items():
        environment.globals[name] = func
        environment.filters.setdefault(name, func)
