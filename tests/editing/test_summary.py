"""Tests for change summaries."""

from patchsmith.editing.hunk_assembler import CONTEXT, DiffLine, Hunk
from patchsmith.editing.line_differ import ADD, REMOVE
from patchsmith.editing.summary import ChangeSummary, summarize_changes
from patchsmith.editing.unified_diff import create_patch


class TestSummarizeChanges:
    def test_counts_diff_text(self):
        patch = create_patch("a\nb\nc", "a\nx\ny\nc", "f.txt")
        summary = summarize_changes(patch)
        assert (summary.added, summary.removed) == (2, 1)
        assert summary.total == 3

    def test_file_headers_not_counted(self):
        patch = create_patch("--x\n++y", "--x\n++z", "f.txt")
        assert summarize_changes(patch) == ChangeSummary(added=1, removed=1)

    def test_counts_hunk_sequence(self):
        hunks = [
            Hunk(1, 2, 1, 1, [DiffLine(CONTEXT, "a"), DiffLine(REMOVE, "b")]),
            Hunk(9, 0, 8, 2, [DiffLine(ADD, "c"), DiffLine(ADD, "d")]),
        ]
        assert summarize_changes(hunks) == ChangeSummary(added=2, removed=1)

    def test_malformed_text_counts_zero(self):
        assert summarize_changes("this is not a diff") == ChangeSummary()

    def test_empty_inputs(self):
        assert summarize_changes("") == ChangeSummary()
        assert summarize_changes([]) == ChangeSummary()
        assert summarize_changes(None) == ChangeSummary()

    def test_str(self):
        assert str(ChangeSummary(added=3, removed=0)) == "+3 -0"
