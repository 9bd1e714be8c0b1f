"""
patchsmith — unified diff generation and patch application for coding agents.

Public API for library usage::

    from patchsmith import create_patch, parse_patch, PatchApplier

    patch = create_patch(old_text, new_text, "src/app.py")
    outcome = PatchApplier().apply_to_lines(old_text.split("\\n"), parse_patch(patch))
"""

from .editing import (
    PatchApplier, create_patch, parse_patch, format_patch, summarize_changes,
)

__version__ = "0.1.0"

__all__ = [
    "PatchApplier", "create_patch", "parse_patch", "format_patch",
    "summarize_changes",
]
