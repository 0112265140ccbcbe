"""
Unified test infrastructure for docbind.

This package contains common utilities and helpers
used across all tests to avoid code duplication.

Modules:
- file_utils: Utilities for creating files and directories
- docx_utils: Builders for WordprocessingML markup and in-memory .docx packages
- cli_utils: Running the command line interface in a subprocess
"""

from .file_utils import write
from .docx_utils import W_NS, w_document, w_paragraph, w_run, make_docx, read_member, member_names
from .cli_utils import run_cli

__all__ = [
    # File utilities
    "write",

    # Document builders
    "W_NS", "w_document", "w_paragraph", "w_run", "make_docx", "read_member", "member_names",

    # CLI utilities
    "run_cli",
]
