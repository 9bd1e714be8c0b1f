"""
CLI entry point — argument parsing and dispatch to the editing tools.
"""

import argparse
import logging
import os
import sys

from .cli_display import print_stats, print_tool_result, setup_logger
from .config import Config
from .diff_display import prompt_patch_approval
from .editing.errors import PatchError
from .editing.metrics import read_patch_stats
from .editing.patch_applier import PatchApplier
from .editing.unified_diff import parse_patch
from .tools import ToolResult, build_default_registry

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="patchsmith",
        description="patchsmith — generate and apply unified diff patches",
    )
    parser.add_argument("--config", default=None,
                        help="Path to .patchsmith.yaml config file")
    parser.add_argument("--no-color", action="store_true",
                        help="Disable ANSI colours in output")
    parser.add_argument("--log-dir", default=None,
                        help="Directory for log files (default: from config)")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a patch between two versions")
    gen.add_argument("original", help="Path to the original file")
    source = gen.add_mutually_exclusive_group(required=True)
    source.add_argument("--modified", default=None,
                        help="Path to the modified file")
    source.add_argument("--content", default=None,
                        help="Modified content as a literal string")
    gen.add_argument("-U", "--context", type=int, default=None,
                     help="Number of context lines (default: from config)")
    gen.add_argument("-o", "--output", default=None,
                     help="Save the patch to this file")

    app = sub.add_parser("apply", help="Apply a patch to a file")
    app.add_argument("patch", help="Patch file, or - to read from stdin")
    app.add_argument("--base-path", default=".",
                     help="Directory the patch's file path is relative to")
    app.add_argument("-R", "--reverse", action="store_true",
                     help="Apply the patch in reverse")
    app.add_argument("--dry-run", action="store_true",
                     help="Preview the result without writing")
    app.add_argument("--no-backup", action="store_true",
                     help="Do not keep a backup copy of the file")
    app.add_argument("--strict", action="store_true",
                     help="Disable fuzzy matching; reject on any conflict")
    app.add_argument("--search-window", type=int, default=None,
                     help="Fuzzy search window in lines (default: from config)")
    app.add_argument("--validate-syntax", action="store_true",
                     help="Refuse patches that break the file's syntax")
    app.add_argument("-i", "--interactive", action="store_true",
                     help="Review the preview and approve before writing")

    rep = sub.add_parser("replace", help="Search and replace text in a file")
    rep.add_argument("path", help="File to modify")
    rep.add_argument("search", help="Text or pattern to search for")
    rep.add_argument("replace", help="Replacement text")
    rep.add_argument("--regex", action="store_true",
                     help="Treat the search text as a regular expression")
    rep.add_argument("--ignore-case", action="store_true",
                     help="Case-insensitive search")
    rep.add_argument("--whole-word", action="store_true",
                     help="Match whole words only")
    rep.add_argument("--no-backup", action="store_true",
                     help="Do not keep a backup copy of the file")

    edit = sub.add_parser("edit", help="Replace line ranges of a file")
    edit.add_argument("path", help="File to modify")
    edit.add_argument("--edit", nargs=3, action="append", required=True,
                      metavar=("START", "END", "CONTENT"),
                      help="Replace lines START..END (1-based, inclusive)")
    edit.add_argument("--no-backup", action="store_true",
                      help="Do not keep a backup copy of the file")

    stats = sub.add_parser("stats", help="Show patch and edit statistics")
    stats.add_argument("--last", type=int, default=50,
                       help="Number of most recent operations to include")

    return parser


def _read_patch_arg(value: str) -> str:
    if value == "-":
        return sys.stdin.read()
    with open(value, "r", encoding="utf-8", newline="") as f:
        return f.read()


def _confirm_apply(cfg: Config, args, patch_text: str) -> bool:
    """Show the dry-run preview and ask for approval."""
    try:
        parsed = parse_patch(patch_text)
        path = os.path.join(os.path.abspath(args.base_path), parsed.target_path)
        preview = PatchApplier(
            fuzzy=cfg.FUZZY, search_window=cfg.SEARCH_WINDOW,
        ).apply_to_file(path, parsed, reverse=args.reverse, dry_run=True)
    except (PatchError, OSError):
        # Let the real apply report the error.
        return True
    report = "\n".join(h.describe() for h in preview.outcome.hunks)
    return prompt_patch_approval(parsed.target_path, preview.preview,
                                 str(preview.summary), hunk_report=report)


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)

    cfg = Config.load(args.config)
    setup_logger(args.log_dir or cfg.LOG_DIR)
    color = cfg.COLOR and not args.no_color

    if args.command == "stats":
        print_stats(read_patch_stats(args.last, metrics_dir=cfg.METRICS_DIR),
                    color=color)
        return 0

    if args.command == "apply":
        if args.strict:
            cfg.FUZZY = False
        if args.search_window is not None:
            cfg.SEARCH_WINDOW = max(0, args.search_window)
        if args.validate_syntax:
            cfg.VALIDATE_SYNTAX = True

    registry = build_default_registry(cfg)

    if args.command == "generate":
        params = {"original_path": args.original}
        if args.modified is not None:
            params["modified_path"] = args.modified
        if args.content is not None:
            params["modified_content"] = args.content
        if args.context is not None:
            params["context_lines"] = args.context
        if args.output:
            params["output_file"] = args.output
        result = registry.dispatch("generate_patch", params)

    elif args.command == "apply":
        try:
            patch_text = _read_patch_arg(args.patch)
        except OSError as exc:
            result = ToolResult(success=False, error=f"Cannot read patch: {exc}")
        else:
            if (args.interactive and not args.dry_run
                    and not _confirm_apply(cfg, args, patch_text)):
                print("Patch rejected; no changes written.")
                return 1
            result = registry.dispatch("apply_patch", {
                "patch": patch_text,
                "base_path": args.base_path,
                "reverse": args.reverse,
                "dry_run": args.dry_run,
                "backup": not args.no_backup,
            })

    elif args.command == "replace":
        result = registry.dispatch("search_replace", {
            "path": args.path,
            "search": args.search,
            "replace": args.replace,
            "regex": args.regex,
            "case_sensitive": not args.ignore_case,
            "match_whole_word": args.whole_word,
            "backup": not args.no_backup,
        })

    else:  # edit
        try:
            edits = [
                {"start_line": int(start), "end_line": int(end),
                 "new_content": content}
                for start, end, content in args.edit
            ]
        except ValueError:
            result = ToolResult(success=False,
                                error="START and END must be integers")
        else:
            result = registry.dispatch("edit_file", {
                "path": args.path,
                "edits": edits,
                "backup": not args.no_backup,
            })

    print_tool_result(result, color=color)
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
