"""
Unified diff codec — serializes hunks to unified-diff text and parses
such text back into hunks.

Output shape::

    --- a/{path}
    +++ b/{path}
    @@ -{old_start},{old_count} +{new_start},{new_count} @@
     {context line}
    -{removed line}
    +{added line}

The parser also accepts the common variations external diff tools emit:
a ``diff --git``/``index`` preamble, omitted hunk counts, section text after
the closing ``@@``, timestamps after the file labels and the
``\\ No newline at end of file`` marker.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Sequence

from .errors import InvalidPatchFormat
from .file_ops import split_lines
from .hunk_assembler import (
    CONTEXT,
    DEFAULT_CONTEXT_LINES,
    DiffLine,
    Hunk,
    assemble_hunks,
)
from .line_differ import ADD, REMOVE, diff_lines

logger = logging.getLogger(__name__)

_HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

_PREFIX_TO_KIND = {" ": CONTEXT, "-": REMOVE, "+": ADD}
_KIND_TO_PREFIX = {CONTEXT: " ", REMOVE: "-", ADD: "+"}


@dataclass
class ParsedPatch:
    """A single-file patch document."""
    old_label: str = ""
    new_label: str = ""
    hunks: list[Hunk] = field(default_factory=list)

    @property
    def target_path(self) -> str:
        """The file the patch applies to (new label, else old label)."""
        for label in (self.new_label, self.old_label):
            if label and label != "/dev/null":
                return label
        return ""


def strip_path_prefix(label: str) -> str:
    """Drop a trailing timestamp and the ``a/``/``b/`` prefix from a label."""
    label = label.split("\t", 1)[0].strip()
    if label.startswith(("a/", "b/")):
        return label[2:]
    return label


# ------------------------------------------------------------------
# Formatting
# ------------------------------------------------------------------

def format_patch(
    hunks: Sequence[Hunk],
    old_path: str,
    new_path: str | None = None,
) -> str:
    """Serialize *hunks* as a unified diff; no hunks gives an empty string."""
    if not hunks:
        return ""
    if new_path is None:
        new_path = old_path

    out = [f"--- a/{old_path}", f"+++ b/{new_path}"]
    for hunk in hunks:
        out.append(hunk.header)
        for line in hunk.lines:
            out.append(_KIND_TO_PREFIX[line.kind] + line.content)
    return "\n".join(out)


def create_patch(
    original_text: str,
    modified_text: str,
    path: str = "file",
    context: int = DEFAULT_CONTEXT_LINES,
) -> str:
    """Diff two texts and return the unified diff (empty when identical)."""
    ops = diff_lines(split_lines(original_text), split_lines(modified_text))
    return format_patch(assemble_hunks(ops, context), path)


# ------------------------------------------------------------------
# Parsing
# ------------------------------------------------------------------

def parse_patch(patch_text: str) -> ParsedPatch:
    """Parse unified-diff text into a :class:`ParsedPatch`.

    Raises
    ------
    InvalidPatchFormat
        When no hunk header is present, a ``@@`` header is malformed, a
        body line has an unknown prefix, or a second file starts after
        the first one's hunks.

    Every ``@@`` line starts a new hunk. Header counts only tell
    ``---``/``+++`` content lines from the headers of a second file: once
    a hunk's counts are used up, a ``---`` line directly followed by a
    ``+++`` line starts another file, anything else is still body. Counts
    are not checked against the body here (see
    :func:`validate_hunk_counts`).
    """
    lines = patch_text.split("\n")
    while lines and lines[-1] in ("", "\r"):
        lines.pop()

    parsed = ParsedPatch()
    current: Hunk | None = None
    old_left = new_left = 0

    for index, line in enumerate(lines):
        number = index + 1

        # No body line starts with "@", so this holds whatever the counts say.
        if line.startswith("@@"):
            current = _parse_hunk_header(line, number)
            parsed.hunks.append(current)
            old_left, new_left = current.old_count, current.new_count
            continue

        in_body = current is not None and (old_left > 0 or new_left > 0)

        if not in_body:
            if current is None:
                if line.startswith("--- "):
                    parsed.old_label = strip_path_prefix(line[4:])
                elif line.startswith("+++ "):
                    parsed.new_label = strip_path_prefix(line[4:])
                # Anything else is preamble: "diff --git", "index ...".
                continue
            if line.startswith("diff ") or _starts_file_header(lines, index):
                raise InvalidPatchFormat(
                    "Multi-file patches are not supported", number
                )
            if line == "":
                continue

        if line.startswith("\\"):
            continue
        if line == "":
            kind = CONTEXT
        else:
            kind = _PREFIX_TO_KIND.get(line[0])
            if kind is None:
                raise InvalidPatchFormat(
                    f"Unrecognized line prefix {line[0]!r}", number
                )

        current.lines.append(DiffLine(kind, line[1:]))
        if kind != ADD:
            old_left -= 1
        if kind != REMOVE:
            new_left -= 1

    if not parsed.hunks:
        raise InvalidPatchFormat("No hunk headers found")

    parsed.hunks.sort(key=lambda h: h.old_start)
    logger.debug(
        "[Patch] Parsed %d hunk(s) for %s",
        len(parsed.hunks), parsed.target_path or "<unnamed>",
    )
    return parsed


def _parse_hunk_header(line: str, number: int) -> Hunk:
    match = _HUNK_HEADER.match(line)
    if not match:
        raise InvalidPatchFormat(f"Malformed hunk header: {line!r}", number)
    old_start, old_count, new_start, new_count = match.groups()
    return Hunk(
        old_start=int(old_start),
        old_count=int(old_count) if old_count is not None else 1,
        new_start=int(new_start),
        new_count=int(new_count) if new_count is not None else 1,
    )


def validate_hunk_counts(parsed: ParsedPatch) -> None:
    """Raise :class:`InvalidPatchFormat` if a header disagrees with its body."""
    for hunk in parsed.hunks:
        old, new = hunk.recount()
        if (old, new) != (hunk.old_count, hunk.new_count):
            raise InvalidPatchFormat(
                f"Hunk {hunk.header} has {old} old and {new} new line(s)"
            )


def _starts_file_header(lines: list[str], index: int) -> bool:
    """True for a ``---`` line directly followed by a ``+++`` line."""
    return (
        lines[index].startswith("--- ")
        and index + 1 < len(lines)
        and lines[index + 1].startswith("+++ ")
    )
