"""Editing tools — typed requests for the patch engine's command-level verbs."""

from .base import Tool, ToolResult, ToolParameterError
from .patch_tools import (
    GeneratePatchRequest, ApplyPatchRequest, GeneratePatchTool, ApplyPatchTool,
)
from .edit_tools import (
    SearchReplaceRequest, EditFileRequest, SearchReplaceTool, EditFileTool,
)
from .registry import ToolRegistry, build_default_registry

__all__ = [
    "Tool", "ToolResult", "ToolParameterError",
    "GeneratePatchRequest", "ApplyPatchRequest",
    "GeneratePatchTool", "ApplyPatchTool",
    "SearchReplaceRequest", "EditFileRequest",
    "SearchReplaceTool", "EditFileTool",
    "ToolRegistry", "build_default_registry",
]
