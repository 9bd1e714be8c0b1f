"""
Patch applier — applies parsed unified-diff hunks to text, with exact
and fuzzy matching, reverse mode, dry runs, backups and atomic writes.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from .errors import ApplyConflict, PatchSyntaxError
from .file_ops import copy_file, join_lines, read_text, split_lines, write_text
from .hunk_assembler import Hunk
from .summary import ChangeSummary, summarize_changes
from .syntax_check import check_syntax
from .unified_diff import ParsedPatch, create_patch

logger = logging.getLogger(__name__)

APPLIED = "applied"
CONFLICT = "conflict"

# File-level end states
WRITTEN = "written"
DRY_RUN = "dry_run"
REJECTED = "rejected"
UNCHANGED = "unchanged"

DEFAULT_SEARCH_WINDOW = 50


@dataclass
class HunkOutcome:
    """What happened to one hunk."""
    hunk: Hunk
    status: str                        # "applied" | "conflict"
    matched_at: Optional[int] = None   # 1-based line where the hunk landed
    fuzzy_offset: int = 0

    @property
    def used_fuzzy(self) -> bool:
        return self.status == APPLIED and self.fuzzy_offset != 0

    def describe(self) -> str:
        if self.status == APPLIED:
            note = f" (offset {self.fuzzy_offset:+d})" if self.fuzzy_offset else ""
            return f"✓ Hunk at line {self.hunk.old_start} applied{note}"
        return (
            f"✗ Hunk at line {self.hunk.old_start} failed: "
            "could not find matching context"
        )


@dataclass
class PatchApplyOutcome:
    """Per-hunk accounting plus the resulting lines."""
    hunks: list[HunkOutcome] = field(default_factory=list)
    result_lines: list[str] = field(default_factory=list)

    @property
    def applied_count(self) -> int:
        return sum(1 for h in self.hunks if h.status == APPLIED)

    @property
    def failed_count(self) -> int:
        return sum(1 for h in self.hunks if h.status == CONFLICT)

    @property
    def is_partial(self) -> bool:
        return self.applied_count > 0 and self.failed_count > 0

    @property
    def used_fuzzy(self) -> bool:
        return any(h.used_fuzzy for h in self.hunks)

    @property
    def result_text(self) -> str:
        return join_lines(self.result_lines)


@dataclass
class FileApplyResult:
    """Result of applying a patch to a file on disk."""
    path: str
    outcome: PatchApplyOutcome
    state: str = REJECTED
    backup_path: Optional[str] = None
    preview: str = ""
    summary: ChangeSummary = field(default_factory=ChangeSummary)

    @property
    def success(self) -> bool:
        return self.state != REJECTED


class PatchApplier:
    """Apply parsed patches to line sequences and files."""

    def __init__(
        self,
        fuzzy: bool = True,
        search_window: int = DEFAULT_SEARCH_WINDOW,
        backup_suffix: str = ".bak",
        validate_syntax: bool = False,
    ) -> None:
        if search_window < 0:
            raise ValueError(f"search_window must be >= 0, got {search_window}")
        self._fuzzy = fuzzy
        self._search_window = search_window
        self._backup_suffix = backup_suffix
        self._validate_syntax = validate_syntax

    # ------------------------------------------------------------------
    # In-memory application
    # ------------------------------------------------------------------

    def apply_to_lines(
        self,
        lines: Sequence[str],
        parsed: ParsedPatch,
        reverse: bool = False,
    ) -> PatchApplyOutcome:
        """Apply every hunk of *parsed* to a copy of *lines*.

        Hunks are tried in ascending order of their start line. In strict
        mode (``fuzzy=False``) any conflict raises :class:`ApplyConflict`
        after all hunks were tried; *lines* is never modified.
        """
        result = list(lines)
        outcome = PatchApplyOutcome()
        running_offset = 0

        hunks = [h.reversed() for h in parsed.hunks] if reverse else list(parsed.hunks)
        hunks.sort(key=lambda h: h.old_start)

        for hunk in hunks:
            expected = hunk.expected_lines()
            replacement = hunk.replacement_lines()
            # An empty old side inserts after line old_start.
            anchor = hunk.old_start if not expected else hunk.old_start - 1
            start = max(anchor + running_offset, 0)

            found = self._locate(result, expected, start)
            if found is None:
                outcome.hunks.append(HunkOutcome(hunk, CONFLICT))
                logger.warning(
                    "[Patch] Hunk %s conflicted: context not found near line %d",
                    hunk.header, start + 1,
                )
                continue

            position, fuzzy_offset = found
            result[position:position + len(expected)] = replacement
            running_offset += len(replacement) - len(expected)
            outcome.hunks.append(HunkOutcome(
                hunk, APPLIED, matched_at=position + 1, fuzzy_offset=fuzzy_offset,
            ))
            if fuzzy_offset:
                logger.debug(
                    "[Patch] Fuzzy match: hunk %s applied at line %d (offset %+d)",
                    hunk.header, position + 1, fuzzy_offset,
                )

        outcome.result_lines = result

        if outcome.failed_count and not self._fuzzy:
            raise ApplyConflict(
                f"Failed to apply {outcome.failed_count} of "
                f"{len(outcome.hunks)} hunk(s)",
                outcome=outcome,
            )
        if outcome.is_partial:
            logger.warning(
                "[Patch] Partial apply: %d hunk(s) applied, %d conflicted",
                outcome.applied_count, outcome.failed_count,
            )
        return outcome

    def _locate(
        self,
        lines: list[str],
        expected: list[str],
        start: int,
    ) -> Optional[tuple[int, int]]:
        """Return (position, offset) of *expected* near *start*, or None."""
        for offset in self._search_offsets():
            position = start + offset
            if self._lines_match(lines, position, expected):
                return position, offset
        return None

    def _search_offsets(self) -> Iterator[int]:
        """0 first, then by increasing distance, earlier offset on ties."""
        yield 0
        if not self._fuzzy:
            return
        for distance in range(1, self._search_window + 1):
            yield -distance
            yield distance

    @staticmethod
    def _lines_match(lines: list[str], start: int, expected: list[str]) -> bool:
        if start < 0 or start + len(expected) > len(lines):
            return False
        return lines[start:start + len(expected)] == expected

    # ------------------------------------------------------------------
    # File application
    # ------------------------------------------------------------------

    def apply_to_file(
        self,
        path: str,
        parsed: ParsedPatch,
        reverse: bool = False,
        dry_run: bool = False,
        backup: bool = True,
    ) -> FileApplyResult:
        """Apply *parsed* to the file at *path*.

        The file is written only when at least one hunk applied and this
        is not a dry run. With *backup*, the original is copied to
        ``path + backup_suffix`` right before the write; the copy is kept
        even if the write then fails.

        Raises
        ------
        PatchTargetNotFound
            *path* does not exist.
        ApplyConflict
            Strict mode and at least one hunk did not match.
        PatchSyntaxError
            Syntax validation is on and the patched content does not parse.
        OSError
            Reading, copying or writing failed.
        """
        original_text = read_text(path)
        outcome = self.apply_to_lines(split_lines(original_text), parsed, reverse)
        new_text = outcome.result_text

        label = parsed.target_path or os.path.basename(path)
        preview = create_patch(original_text, new_text, label)
        result = FileApplyResult(
            path=path,
            outcome=outcome,
            preview=preview,
            summary=summarize_changes(preview),
        )

        if outcome.applied_count == 0:
            logger.warning("[Patch] No hunk applied to %s, file left untouched", path)
            result.state = REJECTED
            return result

        if self._validate_syntax:
            error = check_syntax(path, new_text)
            if error:
                logger.warning("[Patch] Syntax validation failed for %s: %s",
                               path, error)
                raise PatchSyntaxError(path, error)

        if new_text == original_text:
            result.state = UNCHANGED
            return result

        if dry_run:
            result.state = DRY_RUN
            return result

        if backup:
            backup_path = path + self._backup_suffix
            copy_file(path, backup_path)
            result.backup_path = backup_path

        try:
            write_text(path, new_text)
        except OSError as exc:
            logger.error(
                "[Patch] Write failed for %s: %s (backup: %s)",
                path, exc, result.backup_path or "none",
            )
            raise

        result.state = WRITTEN
        logger.info(
            "[Patch] %s: %d hunk(s) applied, %d failed (%s)",
            path, outcome.applied_count, outcome.failed_count, result.summary,
        )
        return result
