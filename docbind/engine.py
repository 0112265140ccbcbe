"""
Main processing pipeline.

raw markup -> fragment repair -> company name pre-pass -> template resolution.
For document packages the pipeline runs once per processed member before the
archive is rebuilt.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional

from .docx import DOCUMENT_MEMBER, DocxPackage, Source, write_package
from .markup import repair_fragments
from .template import replace_simple_placeholder, resolve_template
from .types import RenderOptions, Scope

logger = logging.getLogger(__name__)

COMPANY_NAME_KEY = "company_name"


def _root_scope(data: Mapping) -> Scope:
    # Копия: движок не изменяет данные вызывающего
    return dict(data)


def process_template_string(template: str, data: Mapping, options: Optional[RenderOptions] = None) -> str:
    """
    Process a plain template string (not a package).

    Runs the optional company name substitution, then repeaters,
    conditional blocks and variable replacements.

    Args:
        template: Template text
        data: Root data context
        options: Rendering options

    Returns:
        Resolved text
    """
    options = options or RenderOptions()
    out = template
    if options.company_name:
        out = replace_simple_placeholder(out, COMPANY_NAME_KEY, options.company_name)
    return resolve_template(out, _root_scope(data))


def render_markup(markup: str, data: Mapping, options: Optional[RenderOptions] = None) -> str:
    """Repairs split placeholders in document markup and resolves it."""
    return process_template_string(repair_fragments(markup), data, options)


def render_docx(source: Source, data: Mapping, options: Optional[RenderOptions] = None) -> bytes:
    """
    Render a .docx template (path or bytes).

    The main document member is mandatory; headers and footers matching
    `options.extra_members` are rendered when present.

    Raises:
        PayloadMissingError: word/document.xml is absent
        ArchiveError: The package cannot be read or rebuilt
    """
    options = options or RenderOptions()
    package = DocxPackage.open(source)

    members = [DOCUMENT_MEMBER]
    members.extend(m for m in package.matching(options.extra_members) if m != DOCUMENT_MEMBER)

    for member in members:
        markup = package.read_text(member)
        package.replace_text(member, render_markup(markup, data, options))
        logger.debug(f"Rendered member {member}")

    return package.to_bytes()


def render_docx_file(
    source: Source,
    output: Path,
    data: Mapping,
    options: Optional[RenderOptions] = None,
) -> Path:
    """Renders a package and writes the result to `output`."""
    return write_package(render_docx(source, data, options), Path(output))


def repair_docx(source: Source) -> bytes:
    """Runs fragment repair only, on the main document member."""
    package = DocxPackage.open(source)
    package.replace_text(DOCUMENT_MEMBER, repair_fragments(package.read_text(DOCUMENT_MEMBER)))
    return package.to_bytes()


__all__ = [
    "process_template_string",
    "render_markup",
    "render_docx",
    "render_docx_file",
    "repair_docx",
]
