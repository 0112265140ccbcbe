"""
Работа с разметкой документа: структурный сканер и исправление
разорванных плейсхолдеров.
"""

from __future__ import annotations

from .repair import FragmentRepairer, repair_fragments
from .scanner import MarkupScanner, Paragraph, TextRun, scan_paragraphs

__all__ = [
    "FragmentRepairer",
    "repair_fragments",
    "MarkupScanner",
    "Paragraph",
    "TextRun",
    "scan_paragraphs",
]
