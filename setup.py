from setuptools import setup, find_packages

setup(
    name="patchsmith",
    version="0.1.0",
    packages=find_packages(include=["patchsmith", "patchsmith.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pyyaml",
        "textual",
        # Syntax validation of patched files
        "tree-sitter>=0.22",
        "tree-sitter-python",
        "tree-sitter-javascript",
        "tree-sitter-typescript",
        "tree-sitter-java",
        "tree-sitter-c",
        "tree-sitter-cpp",
        "tree-sitter-go",
        "tree-sitter-rust",
        "tree-sitter-ruby",
        "tree-sitter-php",
        "tree-sitter-c-sharp",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "patchsmith=patchsmith.cli:main",
        ],
    },
    author="Uday Kanth",
    description="Unified diff generation and fuzzy patch application for coding agents.",
)
