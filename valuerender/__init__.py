"""Valuerender - values-driven template renderer.

Renders Jinja2 templates against a ``Values`` tree assembled from
command-line assignments and YAML/JSON files.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Re-export main CLI entry point
from .cli import main

__all__ = ["main"]
