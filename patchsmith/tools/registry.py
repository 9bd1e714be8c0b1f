"""
Tool Registry — maps tool names to tools and validates raw parameters at
the boundary before any engine code runs.
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import Config
from .base import Tool, ToolParameterError, ToolResult, build_request
from .edit_tools import EditFileTool, SearchReplaceTool
from .patch_tools import ApplyPatchTool, GeneratePatchTool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Holds the available tools and dispatches calls to them."""

    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        if not tool.name:
            raise ValueError(f"{type(tool).__name__} has no name")
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool
        logger.debug("[ToolRegistry] Registered tool: %s", tool.name)

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def dispatch(self, name: str, params: Any) -> ToolResult:
        """Validate *params* for tool *name* and run it.

        Unknown tools and invalid parameters come back as failed results
        without touching any file.
        """
        tool = self._tools.get(name)
        if tool is None:
            logger.warning("[ToolRegistry] Unknown tool requested: %s", name)
            return ToolResult(success=False, error=f"Unknown tool: {name}")

        try:
            request = build_request(tool.request_type, params)
        except ToolParameterError as exc:
            logger.warning("[ToolRegistry] Invalid parameters for %s: %s",
                           name, exc)
            return ToolResult(success=False,
                              error=f"Invalid parameters for {name}: {exc}")

        return tool.execute(request)

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    @property
    def size(self) -> int:
        return len(self._tools)


def build_default_registry(config: Config | None = None) -> ToolRegistry:
    """Registry with every editing tool, sharing one configuration."""
    config = config or Config()
    registry = ToolRegistry()
    for tool_cls in (GeneratePatchTool, ApplyPatchTool,
                     SearchReplaceTool, EditFileTool):
        registry.register(tool_cls(config))
    return registry
