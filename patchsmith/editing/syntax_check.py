"""
Syntax check — parses patched content with tree-sitter before it is
written, so a patch that breaks the file's syntax can be refused.

Uses the tree-sitter >= 0.22 API with the individual grammar packages.
Files whose extension has no grammar, or whose grammar package is not
installed, are not checked.
"""

from __future__ import annotations

import importlib
import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

EXTENSION_TO_LANGUAGE: dict[str, str] = {
    ".py": "python",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
    ".go": "go",
    ".rs": "rust",
    ".rb": "ruby",
    ".php": "php",
    ".cs": "c_sharp",
}

_PARSER_CACHE: dict[str, object] = {}


def detect_language(file_path: str) -> Optional[str]:
    """Return the grammar name for *file_path*, or None if unsupported."""
    ext = os.path.splitext(file_path)[1].lower()
    return EXTENSION_TO_LANGUAGE.get(ext)


# grammar name -> (package, function returning the language pointer)
_GRAMMAR_PACKAGES: dict[str, tuple[str, str]] = {
    "python": ("tree_sitter_python", "language"),
    "javascript": ("tree_sitter_javascript", "language"),
    "typescript": ("tree_sitter_typescript", "language_typescript"),
    "tsx": ("tree_sitter_typescript", "language_tsx"),
    "java": ("tree_sitter_java", "language"),
    "c": ("tree_sitter_c", "language"),
    "cpp": ("tree_sitter_cpp", "language"),
    "go": ("tree_sitter_go", "language"),
    "rust": ("tree_sitter_rust", "language"),
    "ruby": ("tree_sitter_ruby", "language"),
    "php": ("tree_sitter_php", "language_php"),
    "c_sharp": ("tree_sitter_c_sharp", "language"),
}


def _get_lang_func(language: str):
    """Return the grammar package's language function, or None."""
    package, func_name = _GRAMMAR_PACKAGES[language]
    try:
        module = importlib.import_module(package)
    except ImportError:
        return None
    return getattr(module, func_name, None)


def _get_parser(language: str):
    if language in _PARSER_CACHE:
        return _PARSER_CACHE[language]
    func = _get_lang_func(language)
    if func is None:
        return None
    try:
        import tree_sitter as ts  # type: ignore
        parser = ts.Parser(ts.Language(func()))
    except Exception as exc:
        logger.warning("[Patch] Cannot create tree-sitter parser for %s: %s",
                       language, exc)
        return None
    _PARSER_CACHE[language] = parser
    return parser


def _first_error(root) -> Optional[tuple[int, int, str]]:
    """Return (line, column, kind) of the first ERROR or missing node."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            row, col = node.start_point
            if node.is_missing:
                return row + 1, col + 1, f"missing {node.type!r}"
            return row + 1, col + 1, "unexpected input"
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def check_syntax(file_path: str, text: str) -> Optional[str]:
    """Return a description of the first syntax error in *text*, else None.

    *file_path* only selects the grammar; nothing is read from disk.
    """
    language = detect_language(file_path)
    if language is None:
        return None

    parser = _get_parser(language)
    if parser is None:
        logger.debug("[Patch] No tree-sitter grammar for %s, skipping syntax check",
                     language)
        return None

    tree = parser.parse(text.encode("utf-8"))
    if not tree.root_node.has_error:
        return None

    location = _first_error(tree.root_node)
    if location is None:
        return "parse tree contains errors"
    line, column, kind = location
    return f"{kind} at line {line}, column {column}"
