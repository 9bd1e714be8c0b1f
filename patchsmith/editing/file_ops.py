"""
File operations used by the patch engine: whole-file reads, atomic
whole-file writes and backup copies.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import tempfile

from .errors import PatchTargetNotFound

logger = logging.getLogger(__name__)


def split_lines(text: str) -> list[str]:
    """Split *text* on ``\\n``; the empty text has no lines.

    ``join_lines(split_lines(text)) == text`` for every text, so a trailing
    newline shows up as a final empty line.
    """
    if not text:
        return []
    return text.split("\n")


def join_lines(lines: list[str]) -> str:
    return "\n".join(lines)


def read_text(path: str) -> str:
    """Return the UTF-8 content of *path* with line endings untouched."""
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except FileNotFoundError:
        raise PatchTargetNotFound(path) from None


def write_text(path: str, text: str) -> None:
    """Write *text* to *path* atomically via a temp file + rename.

    The temp file lives next to the target so the final ``os.replace``
    never crosses a filesystem boundary.
    """
    abs_path = os.path.abspath(path)
    directory = os.path.dirname(abs_path)
    fd, tmp_path = tempfile.mkstemp(
        dir=directory, prefix=".patchsmith_", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        if os.path.exists(abs_path):
            mode = stat.S_IMODE(os.stat(abs_path).st_mode)
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, abs_path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
    logger.debug("[Patch] Wrote %d chars to %s", len(text), abs_path)


def copy_file(src: str, dest: str) -> None:
    """Copy *src* to *dest* (content and metadata)."""
    if not os.path.exists(src):
        raise PatchTargetNotFound(src)
    shutil.copy2(src, dest)
    logger.debug("[Patch] Backup created: %s", dest)
