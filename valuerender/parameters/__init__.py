"""Parameter tree construction from command-line and file values."""

from .builder import build_parameters, load_values_file
from .keyvalue import parse_key_values

__all__ = ["build_parameters", "load_values_file", "parse_key_values"]
