"""
docbind — подстановка структурированных данных в шаблоны документов.

Публичный API: движок разрешения шаблонов, исправление разорванных
плейсхолдеров и конвейеры для текста и пакетов .docx.
"""

from __future__ import annotations

from .engine import process_template_string, render_docx, render_docx_file, render_markup
from .errors import ArchiveError, ConfigError, DataError, DocbindUserError, PayloadMissingError
from .markup import repair_fragments
from .template import (
    replace_simple_placeholder,
    resolve_conditionals,
    resolve_repeaters,
    resolve_template,
    resolve_variables,
)
from .types import RenderOptions

__all__ = [
    "process_template_string",
    "render_docx",
    "render_docx_file",
    "render_markup",
    "repair_fragments",
    "replace_simple_placeholder",
    "resolve_conditionals",
    "resolve_repeaters",
    "resolve_template",
    "resolve_variables",
    "RenderOptions",
    "DocbindUserError",
    "ArchiveError",
    "PayloadMissingError",
    "ConfigError",
    "DataError",
]
