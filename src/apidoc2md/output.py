"""Output folder management and page persistence."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from enum import Enum
from pathlib import Path

from apidoc2md.exceptions import OutputError

logger = logging.getLogger(__name__)


class NewlineKind(str, Enum):
    CRLF = "crlf"
    LF = "lf"

    @property
    def sequence(self) -> str:
        return "\r\n" if self is NewlineKind.CRLF else "\n"


def convert_line_endings(text: str, newline: NewlineKind) -> str:
    """Normalize every line ending in ``text`` to ``newline``."""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    if newline is NewlineKind.LF:
        return normalized
    return normalized.replace("\n", newline.sequence)


def reset_output_dir(path: Path) -> None:
    """Delete ``path`` and everything below it, then recreate it empty.

    Raises:
        OutputError: If the folder cannot be removed or created.
    """
    logger.info("Deleting old output from %s", path)
    try:
        if path.is_dir():
            shutil.rmtree(path)
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputError(f"Unable to reset output folder {path}: {exc}") from exc


def write_page(path: Path, text: str, *, newline: NewlineKind = NewlineKind.CRLF) -> Path:
    """Write one page as UTF-8, creating parent folders as needed.

    The text goes to a temporary file beside the target which then replaces
    it, so a page either exists in full or not at all.

    Raises:
        OutputError: If the page cannot be written.
    """
    data = convert_line_endings(text, newline).encode("utf-8")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise OutputError(f"Unable to write {path}: {exc}") from exc
    return path
