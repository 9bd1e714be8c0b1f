"""
Patch errors — the failure taxonomy shared by the codec, the applier and
the structured edit helpers.
"""

from __future__ import annotations


class PatchError(Exception):
    """Base class for every diff/patch engine failure."""


class InvalidPatchFormat(PatchError, ValueError):
    """Raised when patch text cannot be parsed as a unified diff."""

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"{message} (patch line {line_number})"
        super().__init__(message)


class PatchTargetNotFound(PatchError, FileNotFoundError):
    """Raised when a file the operation needs does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"File not found: {path}")


class ApplyConflict(PatchError):
    """Raised in strict mode when one or more hunks cannot be matched.

    ``outcome`` holds the per-hunk accounting computed before the abort.
    """

    def __init__(self, message: str, outcome=None):
        self.outcome = outcome
        super().__init__(message)


class PatchSyntaxError(PatchError):
    """Raised when patched content fails syntax validation."""

    def __init__(self, path: str, detail: str = ""):
        self.path = path
        self.detail = detail
        msg = f"Syntax error in patched {path}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class InvalidEditError(PatchError, ValueError):
    """Raised when a structured edit request is malformed."""
