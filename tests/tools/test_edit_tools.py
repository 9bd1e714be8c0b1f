"""Tests for the search_replace and edit_file tools."""

import pytest

from patchsmith.config import Config
from patchsmith.editing.structured_edit import LineEdit
from patchsmith.tools.base import ToolParameterError
from patchsmith.tools.edit_tools import (
    EditFileRequest, EditFileTool, SearchReplaceRequest, SearchReplaceTool,
)


@pytest.fixture
def config():
    return Config({"metrics": False})


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "app.py"
    path.write_text("def add(a, b):\n    return a + b\n\nresult = add(1, 2)\n",
                    encoding="utf-8")
    return path


class TestSearchReplaceTool:
    def test_replaces_and_reports_diff(self, source, config):
        result = SearchReplaceTool(config).execute(
            SearchReplaceRequest(path=str(source), search="add", replace="plus")
        )

        assert result.success
        assert "2 replacement(s) made +2 -2" in result.output
        assert "-def add(a, b):" in result.output
        assert "+def plus(a, b):" in result.output
        assert source.read_text(encoding="utf-8").count("plus") == 2
        assert (source.parent / "app.py.bak").exists()

    def test_no_match(self, source, config):
        result = SearchReplaceTool(config).execute(
            SearchReplaceRequest(path=str(source), search="missing", replace="x")
        )
        assert result.success
        assert result.output == 'No matches found for: "missing"'
        assert not (source.parent / "app.py.bak").exists()

    def test_regex_without_backup(self, source, config):
        result = SearchReplaceTool(config).execute(SearchReplaceRequest(
            path=str(source), search=r"add\((\d), (\d)\)", replace=r"add(\2, \1)",
            regex=True, backup=False,
        ))
        assert result.success
        assert "Backup: None" in result.output
        assert "add(2, 1)" in source.read_text(encoding="utf-8")
        assert not (source.parent / "app.py.bak").exists()

    def test_invalid_regex_is_failure(self, source, config):
        result = SearchReplaceTool(config).execute(SearchReplaceRequest(
            path=str(source), search="(", replace="x", regex=True,
        ))
        assert not result.success
        assert "Invalid regex" in result.error

    def test_missing_file(self, tmp_path, config):
        result = SearchReplaceTool(config).execute(SearchReplaceRequest(
            path=str(tmp_path / "nope.py"), search="a", replace="b",
        ))
        assert not result.success
        assert "File not found" in result.error

    def test_request_type_checks(self):
        with pytest.raises(ToolParameterError, match="regex"):
            SearchReplaceRequest(path="a", search="b", replace="c", regex="yes")


class TestEditFileTool:
    def test_edits_lines(self, source, config):
        result = EditFileTool(config).execute(EditFileRequest(
            path=str(source),
            edits=[{"start_line": 2, "end_line": 2,
                    "new_content": "    return a - b"}],
        ))

        assert result.success
        assert "1 edit(s) applied +1 -1" in result.output
        assert "    return a - b" in source.read_text(encoding="utf-8")

    def test_out_of_range_is_failure(self, source, config):
        result = EditFileTool(config).execute(EditFileRequest(
            path=str(source),
            edits=[{"start_line": 40, "end_line": 41, "new_content": "x"}],
        ))
        assert not result.success
        assert "exceeds file length" in result.error
        assert not (source.parent / "app.py.bak").exists()

    def test_unchanged_content(self, source, config):
        result = EditFileTool(config).execute(EditFileRequest(
            path=str(source),
            edits=[{"start_line": 1, "end_line": 1,
                    "new_content": "def add(a, b):"}],
        ))
        assert result.success
        assert result.output.endswith("content unchanged")

    def test_request_converts_edits(self):
        request = EditFileRequest(
            path="a", edits=[{"start_line": 1, "end_line": 2, "new_content": "x"}]
        )
        assert request.edits == [LineEdit(1, 2, "x")]

    @pytest.mark.parametrize("edits", [
        [],
        ["not an object"],
        [{"start_line": 1, "end_line": 1}],
        [{"start_line": "1", "end_line": 1, "new_content": "x"}],
        [{"start_line": 1, "end_line": 1, "new_content": "x", "extra": 1}],
    ])
    def test_request_rejects_bad_edits(self, edits):
        with pytest.raises(ToolParameterError):
            EditFileRequest(path="a", edits=edits)
