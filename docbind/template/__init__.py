"""
Шаблонизатор docbind.

Три конструкции в тексте разметки: плейсхолдеры {{ expr }},
условные блоки [[cond]]...[[end:cond]] и повторители
<<add_more path>>...<<end:add_more>>.
"""

from __future__ import annotations

from .parser import parse_template
from .processor import (
    Constructs,
    TemplateProcessor,
    replace_simple_placeholder,
    resolve_conditionals,
    resolve_repeaters,
    resolve_template,
    resolve_variables,
)

__all__ = [
    "Constructs",
    "TemplateProcessor",
    "parse_template",
    "replace_simple_placeholder",
    "resolve_conditionals",
    "resolve_repeaters",
    "resolve_template",
    "resolve_variables",
]
