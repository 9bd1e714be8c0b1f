"""Diff/patch engine — line diffs, hunks, unified-diff codec and patch application."""

from .errors import (
    PatchError, InvalidPatchFormat, PatchTargetNotFound, ApplyConflict,
    PatchSyntaxError, InvalidEditError,
)
from .line_differ import LineEditOp, diff_lines
from .hunk_assembler import DiffLine, Hunk, assemble_hunks
from .unified_diff import (
    ParsedPatch, format_patch, parse_patch, create_patch, validate_hunk_counts,
)
from .patch_applier import (
    PatchApplier, PatchApplyOutcome, HunkOutcome, FileApplyResult,
)
from .summary import ChangeSummary, summarize_changes
from .structured_edit import LineEdit, search_replace, apply_line_edits
from .metrics import log_patch_metric, read_patch_stats

__all__ = [
    "PatchError", "InvalidPatchFormat", "PatchTargetNotFound", "ApplyConflict",
    "PatchSyntaxError", "InvalidEditError",
    "LineEditOp", "diff_lines",
    "DiffLine", "Hunk", "assemble_hunks",
    "ParsedPatch", "format_patch", "parse_patch", "create_patch",
    "validate_hunk_counts",
    "PatchApplier", "PatchApplyOutcome", "HunkOutcome", "FileApplyResult",
    "ChangeSummary", "summarize_changes",
    "LineEdit", "search_replace", "apply_line_edits",
    "log_patch_metric", "read_patch_stats",
]
