"""
Patch tools — "generate a patch between two texts" and "apply a patch to
a file", the two verbs the engine exposes to an agent or the CLI.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from ..editing.errors import ApplyConflict, PatchError
from ..editing.file_ops import read_text, write_text
from ..editing.metrics import log_patch_metric
from ..editing.patch_applier import (
    DRY_RUN, REJECTED, UNCHANGED, FileApplyResult, PatchApplier,
    PatchApplyOutcome,
)
from ..editing.summary import summarize_changes
from ..editing.unified_diff import create_patch, parse_patch
from .base import Tool, ToolParameterError, ToolResult, require_type

logger = logging.getLogger(__name__)


@dataclass
class GeneratePatchRequest:
    original_path: str
    modified_path: Optional[str] = None
    modified_content: Optional[str] = None
    context_lines: Optional[int] = None
    output_file: Optional[str] = None

    def __post_init__(self) -> None:
        require_type("original_path", self.original_path, str)
        require_type("modified_path", self.modified_path, str, optional=True)
        require_type("modified_content", self.modified_content, str, optional=True)
        require_type("context_lines", self.context_lines, int, optional=True)
        require_type("output_file", self.output_file, str, optional=True)
        if self.modified_path is None and self.modified_content is None:
            raise ToolParameterError(
                "Must provide either modified_path or modified_content"
            )
        if self.context_lines is not None and self.context_lines < 0:
            raise ToolParameterError("context_lines must be >= 0")


@dataclass
class ApplyPatchRequest:
    patch: str
    base_path: str = "."
    reverse: bool = False
    dry_run: bool = False
    backup: Optional[bool] = None
    fuzzy: Optional[bool] = None

    def __post_init__(self) -> None:
        require_type("patch", self.patch, str)
        require_type("base_path", self.base_path, str)
        require_type("reverse", self.reverse, bool)
        require_type("dry_run", self.dry_run, bool)
        require_type("backup", self.backup, bool, optional=True)
        require_type("fuzzy", self.fuzzy, bool, optional=True)
        if not self.patch.strip():
            raise ToolParameterError("Patch text is empty")


class GeneratePatchTool(Tool):
    name = "generate_patch"
    description = (
        "Generate a unified diff patch by comparing two versions of a file. "
        "Can compare two files or a file with provided content. Optionally "
        "save the patch to a file."
    )
    request_type = GeneratePatchRequest

    def execute(self, request: GeneratePatchRequest) -> ToolResult:
        try:
            return self._generate(request)
        except (PatchError, OSError) as exc:
            logger.error("[Patch] generate_patch failed: %s", exc)
            return ToolResult(success=False, error=str(exc))

    def _generate(self, request: GeneratePatchRequest) -> ToolResult:
        original = read_text(request.original_path)
        if request.modified_content is not None:
            modified = request.modified_content
        else:
            modified = read_text(request.modified_path)

        context = request.context_lines
        if context is None:
            context = self.config.CONTEXT_LINES

        patch = create_patch(original, modified, request.original_path, context)
        if not patch:
            return ToolResult(
                success=True,
                output="No differences found between original and modified content.",
            )

        summary = summarize_changes(patch)
        saved_note = ""
        if request.output_file:
            write_text(request.output_file, patch + "\n")
            saved_note = f"\nPatch saved to: {request.output_file}"
            logger.debug("[Patch] Saved patch to %s", request.output_file)

        logger.info("[Patch] Generated patch for %s (%s)",
                    request.original_path, summary)
        return ToolResult(
            success=True,
            output=(
                f"Generated patch for {request.original_path}\n"
                f"Changes: {summary}{saved_note}\n\n"
                f"{patch}"
            ),
        )


class ApplyPatchTool(Tool):
    name = "apply_patch"
    description = (
        "Apply a unified diff patch to a file. Supports reverse application, "
        "dry runs, fuzzy matching and automatic backups."
    )
    request_type = ApplyPatchRequest

    def execute(self, request: ApplyPatchRequest) -> ToolResult:
        fuzzy = self.config.FUZZY if request.fuzzy is None else request.fuzzy
        backup = self.config.BACKUP if request.backup is None else request.backup
        target = ""

        try:
            parsed = parse_patch(request.patch)
            target = parsed.target_path
            if not target:
                return ToolResult(success=False,
                                  error="Patch does not name a target file")
            path = os.path.join(os.path.abspath(request.base_path), target)

            applier = PatchApplier(
                fuzzy=fuzzy,
                search_window=self.config.SEARCH_WINDOW,
                backup_suffix=self.config.BACKUP_SUFFIX,
                validate_syntax=self.config.VALIDATE_SYNTAX,
            )
            result = applier.apply_to_file(
                path, parsed,
                reverse=request.reverse,
                dry_run=request.dry_run,
                backup=backup,
            )
        except ApplyConflict as exc:
            logger.error("[Patch] apply_patch rejected: %s", exc)
            self._record(target, exc.outcome, success=False, state="rejected")
            return ToolResult(
                success=False,
                error=f"{exc}:\n{_describe_hunks(exc.outcome)}",
            )
        except (PatchError, OSError) as exc:
            logger.error("[Patch] apply_patch failed: %s", exc)
            return ToolResult(success=False, error=str(exc))

        self._record(target, result.outcome, success=result.success,
                     state=result.state)

        if result.state == REJECTED:
            return ToolResult(
                success=False,
                error=(
                    f"No hunk of the patch could be applied to {target}:\n"
                    f"{_describe_hunks(result.outcome)}"
                ),
            )
        return ToolResult(success=True, output=_format_apply_output(target, result))

    def _record(self, target: str, outcome: Optional[PatchApplyOutcome],
                success: bool, state: str) -> None:
        if not self.config.METRICS_ENABLED or outcome is None:
            return
        log_patch_metric(
            {
                "tool": self.name,
                "file": target,
                "success": success,
                "state": state,
                "hunks_applied": outcome.applied_count,
                "hunks_failed": outcome.failed_count,
                "fuzzy_used": outcome.used_fuzzy,
            },
            metrics_dir=self.config.METRICS_DIR,
        )


def _describe_hunks(outcome: Optional[PatchApplyOutcome]) -> str:
    if outcome is None:
        return ""
    return "\n".join(h.describe() for h in outcome.hunks)


def _format_apply_output(target: str, result: FileApplyResult) -> str:
    outcome = result.outcome
    mode = "[DRY RUN] " if result.state == DRY_RUN else ""
    lines = [
        f"{mode}Applied patch to {target}",
        f"{outcome.applied_count} hunk(s) applied successfully",
    ]
    if outcome.failed_count:
        lines.append(
            f"{outcome.failed_count} hunk(s) failed (partial apply, fuzzy matching)"
        )
    if result.state == UNCHANGED:
        lines.append("File content unchanged")
    lines.append(f"Changes: {result.summary}")
    if result.backup_path:
        lines.append(f"Backup: {result.backup_path}")
    lines.append("")
    lines.append(_describe_hunks(outcome))
    if result.preview:
        lines.append("")
        lines.append("Preview:")
        lines.append(result.preview)
    return "\n".join(lines)
