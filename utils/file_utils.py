"""File system utilities for reading repository lists and writing the registry."""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path


def read_lines(path: str | Path) -> list[str]:
    """
    Read a UTF-8 text file and return its non-blank lines.

    Surrounding whitespace is trimmed from every line and blank lines are
    dropped, so the file may use any line ending or indentation.
    """
    contents = Path(path).read_text(encoding="utf-8")
    return [line.strip() for line in contents.split("\n") if line.strip()]


def write_text_atomic(path: str | Path, text: str, encoding: str = "utf-8") -> None:
    """
    Replace ``path`` with ``text`` without ever leaving a partial file behind.

    The content is written to a temporary file in the destination directory,
    flushed to disk and renamed over the destination. On failure the temporary
    file is removed and the previous destination is left untouched.
    """
    destination = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{destination.name}.", suffix=".tmp", dir=destination.parent)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="\n") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        # mkstemp creates 0600 files; keep the registry world-readable
        os.chmod(tmp_name, destination.stat().st_mode & 0o777 if destination.exists() else 0o644)
        os.replace(tmp_name, destination)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise


def write_text(path: str | Path, text: str, encoding: str = "utf-8") -> None:
    """Overwrite ``path`` in place."""
    Path(path).write_text(text, encoding=encoding, newline="\n")
