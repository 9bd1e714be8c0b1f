"""Change summaries — added/removed line counts for diffs and hunks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from .errors import InvalidPatchFormat
from .hunk_assembler import Hunk
from .unified_diff import parse_patch


@dataclass
class ChangeSummary:
    added: int = 0
    removed: int = 0

    @property
    def total(self) -> int:
        return self.added + self.removed

    def __str__(self) -> str:
        return f"+{self.added} -{self.removed}"


def summarize_changes(source: Union[str, Iterable[Hunk], None]) -> ChangeSummary:
    """Count added and removed lines in a diff text or a hunk sequence.

    File headers are never counted; text that does not parse as a
    unified diff counts as zero.
    """
    if not source:
        return ChangeSummary()

    if isinstance(source, str):
        try:
            hunks = parse_patch(source).hunks
        except InvalidPatchFormat:
            return ChangeSummary()
    else:
        hunks = list(source)

    summary = ChangeSummary()
    for hunk in hunks:
        summary.added += hunk.added
        summary.removed += hunk.removed
    return summary
