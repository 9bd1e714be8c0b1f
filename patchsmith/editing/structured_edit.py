"""
Structured edits — search/replace and line-range replacement on whole
texts. Both produce new text only; callers diff it with the codec to
report what changed.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from .errors import InvalidEditError

logger = logging.getLogger(__name__)


@dataclass
class LineEdit:
    """Replace lines ``start_line..end_line`` (1-based, inclusive)."""
    start_line: int
    end_line: int
    new_content: str


def search_replace(
    text: str,
    search: str,
    replace: str,
    regex: bool = False,
    case_sensitive: bool = True,
    match_whole_word: bool = False,
) -> tuple[str, int]:
    """Replace every occurrence of *search* in *text*.

    With *regex*, *search* is a Python regular expression and *replace*
    may use group references (``\\1``, ``\\g<name>``); otherwise both are
    taken literally.

    Returns
    -------
    tuple[str, int]
        The new text and the number of replacements made.
    """
    if not search:
        raise InvalidEditError("Search text must not be empty")

    if not regex and case_sensitive and not match_whole_word:
        count = text.count(search)
        return text.replace(search, replace), count

    pattern_src = search if regex else re.escape(search)
    if match_whole_word:
        pattern_src = rf"\b(?:{pattern_src})\b"
    flags = 0 if case_sensitive else re.IGNORECASE

    try:
        pattern = re.compile(pattern_src, flags)
    except re.error as exc:
        raise InvalidEditError(f"Invalid regex {search!r}: {exc}") from exc

    if regex:
        try:
            return pattern.subn(replace, text)
        except re.error as exc:
            raise InvalidEditError(f"Invalid replacement {replace!r}: {exc}") from exc
    return pattern.subn(lambda _m: replace, text)


def validate_line_edits(edits: Sequence[LineEdit], line_count: int) -> None:
    """Raise :class:`InvalidEditError` for bad, overlapping or out-of-range edits."""
    for edit in edits:
        if edit.start_line < 1:
            raise InvalidEditError(
                f"Invalid start_line: {edit.start_line}. "
                "Line numbers must be >= 1"
            )
        if edit.end_line < edit.start_line:
            raise InvalidEditError(
                f"Invalid line range: {edit.start_line}-{edit.end_line}. "
                "end_line must be >= start_line"
            )
        if edit.end_line > line_count:
            raise InvalidEditError(
                f"Line {edit.end_line} exceeds file length ({line_count} lines)"
            )

    ordered = sorted(edits, key=lambda e: e.start_line)
    for prev, nxt in zip(ordered, ordered[1:]):
        if prev.end_line >= nxt.start_line:
            raise InvalidEditError(
                f"Overlapping edits detected at lines "
                f"{prev.start_line}-{prev.end_line} and "
                f"{nxt.start_line}-{nxt.end_line}"
            )


def apply_line_edits(lines: Sequence[str], edits: Sequence[LineEdit]) -> list[str]:
    """Return *lines* with every edit applied.

    Edits address the original numbering; they are applied bottom-up so
    earlier edits never shift later ones.
    """
    validate_line_edits(edits, len(lines))

    result = list(lines)
    for edit in sorted(edits, key=lambda e: e.start_line, reverse=True):
        result[edit.start_line - 1:edit.end_line] = edit.new_content.split("\n")

    logger.debug("[Edit] Applied %d line edit(s)", len(edits))
    return result
