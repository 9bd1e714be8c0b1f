"""
Tool base — typed request validation and the result shape returned to the
caller (an agent loop or the CLI).
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from ..config import Config


class ToolParameterError(ValueError):
    """Raised when raw tool parameters do not fit the tool's request type."""


@dataclass
class ToolResult:
    success: bool
    output: str = ""
    error: str = ""


def require_type(name: str, value: Any, expected: type,
                 optional: bool = False) -> None:
    """Check *value* against *expected*; bools never pass as ints."""
    if value is None and optional:
        return
    if expected is int and isinstance(value, bool):
        ok = False
    else:
        ok = isinstance(value, expected)
    if not ok:
        raise ToolParameterError(
            f"Parameter '{name}' must be {expected.__name__}, "
            f"got {type(value).__name__}"
        )


def build_request(request_type: type, params: Any):
    """Construct *request_type* from an untyped parameter dict.

    Unknown and missing fields are rejected here; per-field type checks
    live in each request's ``__post_init__``.
    """
    if not isinstance(params, dict):
        raise ToolParameterError(
            f"Parameters must be an object, got {type(params).__name__}"
        )

    fields = {f.name: f for f in dataclasses.fields(request_type)}
    unknown = sorted(set(params) - set(fields))
    if unknown:
        raise ToolParameterError(f"Unknown parameter(s): {', '.join(unknown)}")

    missing = [
        name for name, f in fields.items()
        if name not in params
        and f.default is dataclasses.MISSING
        and f.default_factory is dataclasses.MISSING
    ]
    if missing:
        raise ToolParameterError(f"Missing parameter(s): {', '.join(missing)}")

    return request_type(**params)


class Tool(ABC):
    """A named operation with a typed request."""

    name: str = ""
    description: str = ""
    request_type: type = type(None)

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()

    @abstractmethod
    def execute(self, request) -> ToolResult:
        """Run the tool. Expected failures come back as ``success=False``."""
