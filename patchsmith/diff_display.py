"""
Diff display — terminal colouring for unified diffs and the interactive
patch review screen.

The review screen is a small Textual app: the patch preview on the left,
the per-hunk accounting on the right, and approve/reject bindings. When
Textual cannot start (no terminal, not installed) a plain console prompt
is used instead.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

# line kind -> (ANSI code, Rich style)
_STYLES = {
    "header": ("1", "bold white"),
    "hunk": ("36", "cyan"),
    "add": ("32", "green"),
    "remove": ("31", "red"),
}


def _line_kind(line: str) -> str | None:
    if line.startswith(("--- ", "+++ ")):
        return "header"
    if line.startswith("@@"):
        return "hunk"
    if line.startswith("+"):
        return "add"
    if line.startswith("-"):
        return "remove"
    return None


def format_colored_diff(diff_text: str) -> str:
    """Return *diff_text* with ANSI colours on headers and changed lines."""
    out: list[str] = []
    for line in diff_text.split("\n"):
        kind = _line_kind(line)
        if kind is None:
            out.append(line)
        else:
            out.append(f"\033[{_STYLES[kind][0]}m{line}\033[0m")
    return "\n".join(out)


def _format_rich_diff(diff_text: str) -> str:
    """Return *diff_text* as Rich markup, escaping literal brackets."""
    out: list[str] = []
    for line in diff_text.split("\n"):
        escaped = line.replace("[", "\\[")
        kind = _line_kind(line)
        if kind is None:
            out.append(escaped)
        else:
            style = _STYLES[kind][1]
            out.append(f"[{style}]{escaped}[/{style}]")
    return "\n".join(out)


# ══════════════════════════════════════════════════════════════════
#  Patch review
# ══════════════════════════════════════════════════════════════════

def prompt_patch_approval(label: str, diff_text: str, summary: str = "",
                          hunk_report: str = "", auto: bool = False) -> bool:
    """Ask whether the previewed patch for *label* should be written.

    An empty preview has nothing to review and counts as approved, as
    does *auto* mode (the preview is logged instead).
    """
    if not diff_text.strip():
        return True

    if auto:
        logger.info("[Review] Auto-approved patch for %s (%s)", label, summary)
        return True

    try:
        return _textual_patch_review(label, diff_text, summary, hunk_report)
    except ImportError:
        logger.warning("[Review] Textual not installed, using console prompt")
    except Exception as exc:
        logger.warning("[Review] Textual review failed: %s", exc)

    return _console_patch_review(label, diff_text, summary, hunk_report)


def _textual_patch_review(label: str, diff_text: str, summary: str,
                          hunk_report: str) -> bool:
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.containers import Horizontal, Vertical, VerticalScroll
    from textual.widgets import Button, Footer, Header, Static

    class PatchReviewApp(App):
        TITLE = "patchsmith review"

        CSS = """
        #body {
            height: 1fr;
        }
        #preview {
            width: 3fr;
            border: round $accent;
            padding: 0 1;
        }
        #hunks {
            width: 1fr;
            border: round $secondary;
            padding: 0 1;
        }
        #choices {
            dock: bottom;
            height: 3;
            align: center middle;
        }
        #choices Button {
            margin: 0 1;
        }
        """

        BINDINGS = [
            Binding("y", "decide(True)", "Write patch"),
            Binding("n", "decide(False)", "Discard"),
            Binding("escape", "decide(False)", "Discard", show=False),
        ]

        def __init__(self) -> None:
            super().__init__()
            self.approved = False

        def compose(self) -> ComposeResult:
            yield Header()
            with Horizontal(id="body"):
                with VerticalScroll(id="preview"):
                    yield Static(_format_rich_diff(diff_text))
                with Vertical(id="hunks"):
                    yield Static(f"[b]{label}[/b]\n{summary}\n")
                    yield Static(hunk_report.replace("[", "\\["))
            with Horizontal(id="choices"):
                yield Button("Write patch (y)", id="yes", variant="success")
                yield Button("Discard (n)", id="no", variant="error")
            yield Footer()

        def on_button_pressed(self, event: Button.Pressed) -> None:
            self.action_decide(event.button.id == "yes")

        def action_decide(self, approved: bool) -> None:
            self.approved = approved
            self.exit()

    app = PatchReviewApp()
    app.run()
    return app.approved


def _console_patch_review(label: str, diff_text: str, summary: str,
                          hunk_report: str) -> bool:
    print(f"\nPatch for {label}" + (f" ({summary})" if summary else ""))
    print("─" * 60)
    print(format_colored_diff(diff_text))
    if hunk_report:
        print("─" * 60)
        print(hunk_report)
    print("─" * 60)

    while True:
        try:
            answer = input("Write this patch? [y/n] ").strip().lower()
        except (EOFError, KeyboardInterrupt):
            return False
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
