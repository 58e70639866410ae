"""
doc-convert: Word / HTML / Markdown / text / PDF conversion with a careful HTML renderer.

Use as a library:

    from doc_convert import convert_document
    result = convert_document("report.docx", "out/report.md")

    from doc_convert import render_to_markdown
    md = render_to_markdown(html)

Or run the CLI:

    doc-convert convert report.docx -o out/report.md
"""

from doc_convert.api import batch_convert, convert_document, get_supported_formats, validate_document
from doc_convert.models import (
    BatchConversionResult,
    ConversionOptions,
    ConversionResult,
    DocumentMetadata,
    DocumentValidation,
    RenderLimits,
)
from doc_convert.render import render_to_markdown, render_to_plain_text

__all__ = [
    "batch_convert",
    "convert_document",
    "get_supported_formats",
    "validate_document",
    "render_to_markdown",
    "render_to_plain_text",
    "BatchConversionResult",
    "ConversionOptions",
    "ConversionResult",
    "DocumentMetadata",
    "DocumentValidation",
    "RenderLimits",
]
