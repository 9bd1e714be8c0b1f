"""
Edit tools — search/replace and line-range edits, reported as unified
diffs through the patch engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..editing.errors import PatchError
from ..editing.file_ops import copy_file, join_lines, read_text, split_lines, write_text
from ..editing.metrics import log_patch_metric
from ..editing.structured_edit import LineEdit, apply_line_edits, search_replace
from ..editing.summary import summarize_changes
from ..editing.unified_diff import create_patch
from .base import Tool, ToolParameterError, ToolResult, require_type

logger = logging.getLogger(__name__)


@dataclass
class SearchReplaceRequest:
    path: str
    search: str
    replace: str
    regex: bool = False
    case_sensitive: bool = True
    match_whole_word: bool = False
    backup: Optional[bool] = None

    def __post_init__(self) -> None:
        require_type("path", self.path, str)
        require_type("search", self.search, str)
        require_type("replace", self.replace, str)
        require_type("regex", self.regex, bool)
        require_type("case_sensitive", self.case_sensitive, bool)
        require_type("match_whole_word", self.match_whole_word, bool)
        require_type("backup", self.backup, bool, optional=True)


@dataclass
class EditFileRequest:
    path: str
    edits: list = field(default_factory=list)
    backup: Optional[bool] = None

    def __post_init__(self) -> None:
        require_type("path", self.path, str)
        require_type("edits", self.edits, list)
        require_type("backup", self.backup, bool, optional=True)
        if not self.edits:
            raise ToolParameterError("At least one edit is required")
        self.edits = [_to_line_edit(i, e) for i, e in enumerate(self.edits)]


def _to_line_edit(index: int, raw) -> LineEdit:
    if isinstance(raw, LineEdit):
        return raw
    if not isinstance(raw, dict):
        raise ToolParameterError(f"edits[{index}] must be an object")
    keys = {"start_line", "end_line", "new_content"}
    if set(raw) != keys:
        raise ToolParameterError(
            f"edits[{index}] must have exactly: {', '.join(sorted(keys))}"
        )
    require_type(f"edits[{index}].start_line", raw["start_line"], int)
    require_type(f"edits[{index}].end_line", raw["end_line"], int)
    require_type(f"edits[{index}].new_content", raw["new_content"], str)
    return LineEdit(raw["start_line"], raw["end_line"], raw["new_content"])


class _FileEditTool(Tool):
    """Shared write path: backup, atomic write, diff report, metrics."""

    def _commit(self, path: str, original: str, modified: str,
                backup: Optional[bool]) -> tuple[str, str, Optional[str]]:
        """Write *modified*; return (diff, summary text, backup path)."""
        if backup is None:
            backup = self.config.BACKUP

        backup_path = None
        if backup:
            backup_path = path + self.config.BACKUP_SUFFIX
            copy_file(path, backup_path)
        write_text(path, modified)

        diff = create_patch(original, modified, path, self.config.CONTEXT_LINES)
        summary = str(summarize_changes(diff))
        if self.config.METRICS_ENABLED:
            log_patch_metric(
                {"tool": self.name, "file": path, "success": True,
                 "state": "written"},
                metrics_dir=self.config.METRICS_DIR,
            )
        return diff, summary, backup_path


class SearchReplaceTool(_FileEditTool):
    name = "search_replace"
    description = (
        "Search and replace text in a file. Supports literal text or regex "
        "patterns and shows a diff of the changes."
    )
    request_type = SearchReplaceRequest

    def execute(self, request: SearchReplaceRequest) -> ToolResult:
        try:
            original = read_text(request.path)
            modified, count = search_replace(
                original, request.search, request.replace,
                regex=request.regex,
                case_sensitive=request.case_sensitive,
                match_whole_word=request.match_whole_word,
            )
            if count == 0:
                return ToolResult(
                    success=True,
                    output=f'No matches found for: "{request.search}"',
                )
            if modified == original:
                return ToolResult(
                    success=True,
                    output=f"{count} match(es) found; content unchanged",
                )
            diff, summary, backup_path = self._commit(
                request.path, original, modified, request.backup,
            )
        except (PatchError, OSError) as exc:
            logger.error("[Edit] search_replace failed: %s", exc)
            return ToolResult(success=False, error=str(exc))

        logger.info("[Edit] %s: %d replacement(s) (%s)",
                    request.path, count, summary)
        return ToolResult(
            success=True,
            output=(
                f"Modified {request.path}: {count} replacement(s) made {summary}\n"
                f"Backup: {backup_path or 'None'}\n\n"
                f"{diff}"
            ),
        )


class EditFileTool(_FileEditTool):
    name = "edit_file"
    description = (
        "Replace line ranges of a file with new content. Supports multiple "
        "non-overlapping edits in one call and shows a diff of all changes."
    )
    request_type = EditFileRequest

    def execute(self, request: EditFileRequest) -> ToolResult:
        try:
            original = read_text(request.path)
            lines = apply_line_edits(split_lines(original), request.edits)
            modified = join_lines(lines)
            if modified == original:
                return ToolResult(success=True,
                                  output=f"{request.path}: content unchanged")
            diff, summary, backup_path = self._commit(
                request.path, original, modified, request.backup,
            )
        except (PatchError, OSError) as exc:
            logger.error("[Edit] edit_file failed: %s", exc)
            return ToolResult(success=False, error=str(exc))

        logger.info("[Edit] %s: %d edit(s) (%s)",
                    request.path, len(request.edits), summary)
        return ToolResult(
            success=True,
            output=(
                f"Edited {request.path}: {len(request.edits)} edit(s) applied "
                f"{summary}\n"
                f"Backup: {backup_path or 'None'}\n\n"
                f"{diff}"
            ),
        )
