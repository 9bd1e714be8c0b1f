"""Tests for the generate_patch and apply_patch tools."""

import os

import pytest

from patchsmith.config import Config
from patchsmith.editing.metrics import read_patch_stats
from patchsmith.editing.unified_diff import create_patch
from patchsmith.tools.base import ToolParameterError
from patchsmith.tools.patch_tools import (
    ApplyPatchRequest, ApplyPatchTool, GeneratePatchRequest, GeneratePatchTool,
)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def config():
    return Config({"metrics": False})


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


class TestGeneratePatchRequest:
    def test_requires_a_modified_source(self):
        with pytest.raises(ToolParameterError, match="modified_path or modified_content"):
            GeneratePatchRequest(original_path="a.txt")

    def test_rejects_negative_context(self):
        with pytest.raises(ToolParameterError):
            GeneratePatchRequest(original_path="a.txt", modified_content="x",
                                 context_lines=-1)

    def test_rejects_bool_as_context(self):
        with pytest.raises(ToolParameterError, match="context_lines"):
            GeneratePatchRequest(original_path="a.txt", modified_content="x",
                                 context_lines=True)


class TestGeneratePatchTool:
    def test_patch_from_content(self, workdir, config):
        _write(workdir / "f.txt", "a\nb\nc")

        result = GeneratePatchTool(config).execute(
            GeneratePatchRequest(original_path="f.txt", modified_content="a\nx\nc")
        )

        assert result.success
        assert result.output.startswith("Generated patch for f.txt\nChanges: +1 -1")
        assert result.output.endswith(create_patch("a\nb\nc", "a\nx\nc", "f.txt"))

    def test_patch_from_two_files_saved(self, workdir, config):
        _write(workdir / "old.txt", "a\nb")
        _write(workdir / "new.txt", "a\nc")

        result = GeneratePatchTool(config).execute(GeneratePatchRequest(
            original_path="old.txt", modified_path="new.txt",
            output_file="change.patch",
        ))

        assert result.success
        assert "Patch saved to: change.patch" in result.output
        saved = (workdir / "change.patch").read_text(encoding="utf-8")
        assert saved == create_patch("a\nb", "a\nc", "old.txt") + "\n"

    def test_identical_content(self, workdir, config):
        _write(workdir / "f.txt", "same")

        result = GeneratePatchTool(config).execute(
            GeneratePatchRequest(original_path="f.txt", modified_content="same")
        )

        assert result.success
        assert result.output == "No differences found between original and modified content."

    def test_context_lines_from_config(self, workdir):
        _write(workdir / "f.txt", "\n".join(f"l{i}" for i in range(10)))
        tool = GeneratePatchTool(Config({"metrics": False, "context_lines": 0}))

        result = tool.execute(GeneratePatchRequest(
            original_path="f.txt",
            modified_content="\n".join("X" if i == 5 else f"l{i}" for i in range(10)),
        ))

        assert "@@ -6,1 +6,1 @@" in result.output

    def test_missing_original(self, workdir, config):
        result = GeneratePatchTool(config).execute(
            GeneratePatchRequest(original_path="nope.txt", modified_content="x")
        )
        assert not result.success
        assert "File not found" in result.error


class TestApplyPatchTool:
    def test_apply_writes_and_reports(self, workdir, config):
        _write(workdir / "f.txt", "a\nb\nc")
        patch = create_patch("a\nb\nc", "a\nx\nc", "f.txt")

        result = ApplyPatchTool(config).execute(ApplyPatchRequest(patch=patch))

        assert result.success
        assert result.output.startswith("Applied patch to f.txt")
        assert "1 hunk(s) applied successfully" in result.output
        assert "Backup: " in result.output
        assert "✓ Hunk at line 1 applied" in result.output
        assert (workdir / "f.txt").read_text(encoding="utf-8") == "a\nx\nc"
        assert (workdir / "f.txt.bak").exists()

    def test_dry_run(self, workdir, config):
        _write(workdir / "f.txt", "a\nb\nc")
        patch = create_patch("a\nb\nc", "a\nx\nc", "f.txt")

        result = ApplyPatchTool(config).execute(
            ApplyPatchRequest(patch=patch, dry_run=True)
        )

        assert result.success
        assert result.output.startswith("[DRY RUN] ")
        assert "Preview:" in result.output
        assert (workdir / "f.txt").read_text(encoding="utf-8") == "a\nb\nc"

    def test_base_path(self, workdir, config):
        (workdir / "src").mkdir()
        _write(workdir / "src" / "f.txt", "a\nb")
        patch = create_patch("a\nb", "a\nc", "f.txt")

        result = ApplyPatchTool(config).execute(
            ApplyPatchRequest(patch=patch, base_path="src", backup=False)
        )

        assert result.success
        assert (workdir / "src" / "f.txt").read_text(encoding="utf-8") == "a\nc"
        assert not (workdir / "src" / "f.txt.bak").exists()

    def test_reverse(self, workdir, config):
        _write(workdir / "f.txt", "a\nx\nc")
        patch = create_patch("a\nb\nc", "a\nx\nc", "f.txt")

        result = ApplyPatchTool(config).execute(
            ApplyPatchRequest(patch=patch, reverse=True, fuzzy=False)
        )

        assert result.success
        assert (workdir / "f.txt").read_text(encoding="utf-8") == "a\nb\nc"

    def test_strict_conflict_reports_hunks(self, workdir, config):
        _write(workdir / "f.txt", "totally\ndifferent")
        patch = create_patch("a\nb\nc", "a\nx\nc", "f.txt")

        result = ApplyPatchTool(config).execute(
            ApplyPatchRequest(patch=patch, fuzzy=False)
        )

        assert not result.success
        assert "✗ Hunk at line 1 failed" in result.error
        assert (workdir / "f.txt").read_text(encoding="utf-8") == "totally\ndifferent"

    def test_fuzzy_nothing_applied(self, workdir, config):
        _write(workdir / "f.txt", "totally\ndifferent")
        patch = create_patch("a\nb\nc", "a\nx\nc", "f.txt")

        result = ApplyPatchTool(config).execute(ApplyPatchRequest(patch=patch))

        assert not result.success
        assert result.error.startswith("No hunk of the patch could be applied to f.txt")

    def test_invalid_patch(self, workdir, config):
        result = ApplyPatchTool(config).execute(ApplyPatchRequest(patch="garbage"))
        assert not result.success
        assert "No hunk headers" in result.error

    def test_missing_target(self, workdir, config):
        patch = create_patch("a", "b", "missing.txt")
        result = ApplyPatchTool(config).execute(ApplyPatchRequest(patch=patch))
        assert not result.success
        assert "File not found" in result.error

    def test_metrics_recorded(self, workdir):
        _write(workdir / "f.txt", "a\nb\nc")
        patch = create_patch("a\nb\nc", "a\nx\nc", "f.txt")

        ApplyPatchTool(Config({"metrics": True})).execute(ApplyPatchRequest(patch=patch))

        stats = read_patch_stats(project_root=str(workdir))
        assert stats["total_edits"] == 1
        assert stats["hunks_applied"] == 1
        assert stats["tools"] == {"apply_patch": 1}

    def test_empty_patch_rejected(self):
        with pytest.raises(ToolParameterError):
            ApplyPatchRequest(patch="   ")

    def test_resolves_path_under_base(self, workdir, config):
        _write(workdir / "f.txt", "a")
        patch = create_patch("a", "b", "f.txt")
        ApplyPatchTool(config).execute(
            ApplyPatchRequest(patch=patch, base_path=str(workdir))
        )
        assert os.path.isfile(workdir / "f.txt.bak")
