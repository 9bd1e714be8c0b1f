"""
Hunk assembler — groups a line edit script into hunks bounded by context
lines and computes their unified-diff position headers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from .line_differ import ADD, REMOVE, SAME, LineEditOp

logger = logging.getLogger(__name__)

CONTEXT = "context"

DEFAULT_CONTEXT_LINES = 3


@dataclass
class DiffLine:
    """A single body line of a hunk."""
    kind: str      # "context" | "add" | "remove"
    content: str


@dataclass
class Hunk:
    """A contiguous region of change plus its surrounding context.

    ``old_start``/``new_start`` are 1-based line numbers of the first line
    the hunk covers in the original/modified file. A side with no lines
    names the line after which the change sits instead (0 for the start
    of the file), as GNU diff and git do.
    """
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: list[DiffLine] = field(default_factory=list)

    @property
    def header(self) -> str:
        return (
            f"@@ -{self.old_start},{self.old_count} "
            f"+{self.new_start},{self.new_count} @@"
        )

    @property
    def added(self) -> int:
        return sum(1 for line in self.lines if line.kind == ADD)

    @property
    def removed(self) -> int:
        return sum(1 for line in self.lines if line.kind == REMOVE)

    def recount(self) -> tuple[int, int]:
        """Return (old_count, new_count) as counted from the body lines."""
        old = sum(1 for line in self.lines if line.kind != ADD)
        new = sum(1 for line in self.lines if line.kind != REMOVE)
        return old, new

    def expected_lines(self) -> list[str]:
        """Lines the hunk assumes are present in the target."""
        return [line.content for line in self.lines if line.kind != ADD]

    def replacement_lines(self) -> list[str]:
        """Lines substituted for the expected ones."""
        return [line.content for line in self.lines if line.kind != REMOVE]

    def reversed(self) -> "Hunk":
        """Return the hunk that undoes this one (add/remove swapped)."""
        swap = {ADD: REMOVE, REMOVE: ADD}
        return Hunk(
            old_start=self.new_start,
            old_count=self.new_count,
            new_start=self.old_start,
            new_count=self.old_count,
            lines=[
                DiffLine(swap.get(line.kind, line.kind), line.content)
                for line in self.lines
            ],
        )


def assemble_hunks(
    ops: Sequence[LineEditOp],
    context: int = DEFAULT_CONTEXT_LINES,
) -> list[Hunk]:
    """Group *ops* into hunks with up to *context* lines around each change.

    Change clusters separated by no more than ``2 * context`` unchanged
    lines share their context and are merged into a single hunk.
    """
    if context < 0:
        raise ValueError(f"context must be >= 0, got {context}")

    changes = [i for i, op in enumerate(ops) if op.kind != SAME]
    if not changes:
        return []

    # Line positions (0-based) reached just before each op.
    old_pos = [0] * (len(ops) + 1)
    new_pos = [0] * (len(ops) + 1)
    for i, op in enumerate(ops):
        old_pos[i + 1] = old_pos[i] + (0 if op.kind == ADD else 1)
        new_pos[i + 1] = new_pos[i] + (0 if op.kind == REMOVE else 1)

    clusters: list[tuple[int, int]] = []
    first = last = changes[0]
    for idx in changes[1:]:
        if idx - last - 1 > 2 * context:
            clusters.append((first, last))
            first = idx
        last = idx
    clusters.append((first, last))

    hunks: list[Hunk] = []
    for first, last in clusters:
        lo = max(0, first - context)
        hi = min(len(ops), last + context + 1)
        lines = [
            DiffLine(CONTEXT if op.kind == SAME else op.kind, op.content)
            for op in ops[lo:hi]
        ]
        old_count = old_pos[hi] - old_pos[lo]
        new_count = new_pos[hi] - new_pos[lo]
        hunks.append(Hunk(
            old_start=old_pos[lo] + 1 if old_count else old_pos[lo],
            old_count=old_count,
            new_start=new_pos[lo] + 1 if new_count else new_pos[lo],
            new_count=new_count,
            lines=lines,
        ))

    logger.debug(
        "[Diff] Assembled %d hunk(s) from %d change(s) (context=%d)",
        len(hunks), len(changes), context,
    )
    return hunks
