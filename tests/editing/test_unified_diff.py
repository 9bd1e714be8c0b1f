"""Tests for the unified diff codec."""

import pytest

from patchsmith.editing.errors import InvalidPatchFormat
from patchsmith.editing.hunk_assembler import CONTEXT, DiffLine, Hunk
from patchsmith.editing.line_differ import ADD, REMOVE
from patchsmith.editing.unified_diff import (
    ParsedPatch, create_patch, format_patch, parse_patch, strip_path_prefix,
    validate_hunk_counts,
)


SIMPLE_PATCH = """\
--- a/f.txt
+++ b/f.txt
@@ -1,3 +1,3 @@
 a
-b
+x
 c"""


GIT_PATCH = """\
diff --git a/src/app.py b/src/app.py
index 83db48f..bf269f4 100644
--- a/src/app.py\t2024-01-01 10:00:00.000000000 +0000
+++ b/src/app.py\t2024-01-02 10:00:00.000000000 +0000
@@ -3 +3 @@ def main():
-    return 1
+    return 2
\\ No newline at end of file
"""


class TestFormat:
    def test_single_hunk_exact_text(self):
        assert create_patch("a\nb\nc", "a\nx\nc", "f.txt") == SIMPLE_PATCH

    def test_no_hunks_is_empty_document(self):
        assert format_patch([], "f.txt") == ""
        assert create_patch("same\ntext", "same\ntext", "f.txt") == ""

    def test_distinct_new_path(self):
        hunk = Hunk(0, 0, 1, 1, [DiffLine(ADD, "hello")])
        assert format_patch([hunk], "old.txt", "new.txt") == (
            "--- a/old.txt\n+++ b/new.txt\n@@ -0,0 +1,1 @@\n+hello"
        )

    def test_zero_context_insertion_header(self):
        assert create_patch("a\nb", "a\nx\nb", "f", context=0) == (
            "--- a/f\n+++ b/f\n@@ -1,0 +2,1 @@\n+x"
        )

    def test_empty_context_line_keeps_its_prefix(self):
        patch = create_patch("a\n\nb", "a\n\nc", "f")
        assert "\n \n" in patch


class TestParse:
    def test_parses_own_output(self):
        parsed = parse_patch(SIMPLE_PATCH)

        assert parsed.old_label == "f.txt"
        assert parsed.new_label == "f.txt"
        assert parsed.hunks == [
            Hunk(1, 3, 1, 3, [
                DiffLine(CONTEXT, "a"),
                DiffLine(REMOVE, "b"),
                DiffLine(ADD, "x"),
                DiffLine(CONTEXT, "c"),
            ])
        ]

    def test_trailing_newlines_ignored(self):
        assert parse_patch(SIMPLE_PATCH + "\n\n").hunks == parse_patch(SIMPLE_PATCH).hunks

    def test_external_tool_variations(self):
        parsed = parse_patch(GIT_PATCH)

        assert parsed.target_path == "src/app.py"
        assert len(parsed.hunks) == 1
        hunk = parsed.hunks[0]
        assert (hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count) == (3, 1, 3, 1)
        assert hunk.lines == [
            DiffLine(REMOVE, "    return 1"),
            DiffLine(ADD, "    return 2"),
        ]

    def test_dash_lines_inside_hunk_are_content(self):
        patch = create_patch("-- comment\n++ other\nkeep", "keep", "q.sql")
        hunk = parse_patch(patch).hunks[0]

        assert hunk.lines == [
            DiffLine(REMOVE, "-- comment"),
            DiffLine(REMOVE, "++ other"),
            DiffLine(CONTEXT, "keep"),
        ]

    def test_blank_line_in_body_is_empty_context(self):
        patch = "--- a/f\n+++ b/f\n@@ -1,3 +1,3 @@\n a\n\n-b\n+c"
        hunk = parse_patch(patch).hunks[0]
        assert hunk.lines[1] == DiffLine(CONTEXT, "")

    def test_overstated_counts_stop_at_next_hunk(self):
        patch = (
            "--- a/f\n+++ b/f\n"
            "@@ -1,4 +1,4 @@\n a\n-b\n+x\n"
            "@@ -10,1 +10,1 @@\n-j\n+J\n"
        )

        hunks = parse_patch(patch).hunks

        assert [h.old_start for h in hunks] == [1, 10]
        assert hunks[0].lines == [
            DiffLine(CONTEXT, "a"), DiffLine(REMOVE, "b"), DiffLine(ADD, "x"),
        ]
        assert hunks[1].lines == [DiffLine(REMOVE, "j"), DiffLine(ADD, "J")]

    def test_understated_counts_keep_dash_content(self):
        patch = (
            "--- a/q.sql\n+++ b/q.sql\n"
            "@@ -1,1 +1,1 @@\n-a\n+b\n--- comment\n keep"
        )

        hunk = parse_patch(patch).hunks[0]

        assert hunk.lines == [
            DiffLine(REMOVE, "a"),
            DiffLine(ADD, "b"),
            DiffLine(REMOVE, "-- comment"),
            DiffLine(CONTEXT, "keep"),
        ]

    def test_hunks_sorted_by_old_start(self):
        patch = (
            "--- a/f\n+++ b/f\n"
            "@@ -10,1 +10,1 @@\n-x\n+y\n"
            "@@ -2,1 +2,1 @@\n-a\n+b"
        )
        assert [h.old_start for h in parse_patch(patch).hunks] == [2, 10]

    def test_patch_without_headers(self):
        parsed = parse_patch("@@ -1,1 +1,1 @@\n-a\n+b")
        assert parsed.target_path == ""
        assert len(parsed.hunks) == 1

    def test_dev_null_label_falls_back(self):
        parsed = ParsedPatch(old_label="f.txt", new_label="/dev/null")
        assert parsed.target_path == "f.txt"

    @pytest.mark.parametrize("label,expected", [
        ("a/src/x.py", "src/x.py"),
        ("b/x.py", "x.py"),
        ("x.py\t2024-01-01", "x.py"),
        ("plain.txt", "plain.txt"),
    ])
    def test_strip_path_prefix(self, label, expected):
        assert strip_path_prefix(label) == expected


class TestParseErrors:
    def test_no_hunk_headers(self):
        with pytest.raises(InvalidPatchFormat, match="No hunk headers"):
            parse_patch("--- a/f\n+++ b/f\n")

    def test_empty_text(self):
        with pytest.raises(InvalidPatchFormat):
            parse_patch("")

    def test_unknown_prefix(self):
        with pytest.raises(InvalidPatchFormat, match="Unrecognized line prefix"):
            parse_patch("--- a/f\n+++ b/f\n@@ -1,2 +1,2 @@\n a\n*b\n+c")

    def test_malformed_hunk_header(self):
        with pytest.raises(InvalidPatchFormat, match="Malformed hunk header"):
            parse_patch("--- a/f\n+++ b/f\n@@ -x,1 +1,1 @@\n-a\n+b")

    def test_multi_file_patch_rejected(self):
        patch = (
            "--- a/one\n+++ b/one\n@@ -1,1 +1,1 @@\n-a\n+b\n"
            "--- a/two\n+++ b/two\n@@ -1,1 +1,1 @@\n-c\n+d"
        )
        with pytest.raises(InvalidPatchFormat, match="Multi-file"):
            parse_patch(patch)

    def test_invalid_format_is_value_error(self):
        with pytest.raises(ValueError):
            parse_patch("not a patch")


class TestValidateCounts:
    def test_consistent_counts_pass(self):
        validate_hunk_counts(parse_patch(SIMPLE_PATCH))

    def test_mismatched_counts_rejected(self):
        parsed = parse_patch("--- a/f\n+++ b/f\n@@ -1,5 +1,3 @@\n a\n-b\n+x\n c")
        with pytest.raises(InvalidPatchFormat):
            validate_hunk_counts(parsed)
