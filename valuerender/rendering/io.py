"""File I/O operations for rendering."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from typing import TextIO

from ..core.errors import FileAccessError


def read_text(path: Path, kind: str = "file") -> str:
    """Read a UTF-8 text file, reporting failures as FileAccessError.

    Args:
        path: File to read
        kind: What the file is, for the error message
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileAccessError(f"reading {kind}: {e}") from e


def ensure_parent(path: Path) -> None:
    """Ensure parent directories exist for the given path.

    Args:
        path: Path whose parent directories should be created
    """
    path.parent.mkdir(parents=True, exist_ok=True)


def atomic_write_text(path: Path, text: str, mode: int = 0o600) -> None:
    """Replace a file's content atomically using a temporary file.

    Args:
        path: Destination file path
        text: Text content to write
        mode: File permissions (octal)
    """
    try:
        ensure_parent(path)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    except OSError as e:
        raise FileAccessError(f"writing output file {path}: {e}") from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
        os.chmod(path, mode)
    except OSError as e:
        raise FileAccessError(f"writing output file {path}: {e}") from e
    finally:
        if os.path.exists(tmp_name):
            try:
                os.remove(tmp_name)
            except OSError:
                pass


def write_diagnostic(text: str, stream: TextIO | None = None) -> None:
    """Print rendered text to the diagnostic stream with a trailing newline."""
    stream = stream if stream is not None else sys.stderr
    stream.write(text + "\n")
    stream.flush()
