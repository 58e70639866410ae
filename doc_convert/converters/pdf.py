"""PyMuPDF-based PDF support: read page text from PDFs, and write plain text into simple A4 PDFs."""

import logging
import re
from pathlib import Path

import fitz  # PyMuPDF

from doc_convert.config import Settings
from doc_convert.converters.base import (
    FormatConverter,
    effective_limits,
    html_title,
    write_text,
)
from doc_convert.errors import ExtractionError
from doc_convert.models import (
    ConversionOptions,
    DocumentMetadata,
    RenderLimits,
    RenderWarning,
    SupportedFormat,
)
from doc_convert.render.limits import apply_limits
from doc_convert.render.plain_text import text_to_html, text_to_markdown

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Page geometry (points)
# ---------------------------------------------------------------------------

PAGE_RECT = fitz.paper_rect("a4")
# 20 mm margin, 6 mm line pitch
MARGIN = 56.7
LINE_HEIGHT = 17.0
FONT_SIZE = 10
LATIN_FONT = "helv"
CJK_FONT = "china-s"

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f\ufeff]")


def _font_for(line: str) -> str:
    """Base-14 Helvetica covers Latin-1 only; anything wider goes to the built-in CJK font."""
    return CJK_FONT if any(ord(c) > 0xFF for c in line) else LATIN_FONT


def _pdf_date(value) -> str:
    return value.strftime("D:%Y%m%d%H%M%S") if value else ""


def _pdf_metadata(metadata: DocumentMetadata) -> dict[str, str]:
    return {
        "title": metadata.title or "",
        "author": metadata.author or "",
        "subject": metadata.subject or "",
        "keywords": ", ".join(metadata.keywords),
        "creationDate": _pdf_date(metadata.created_date),
        "modDate": _pdf_date(metadata.modified_date),
    }


def prepare_pdf_lines(
    text: str,
    settings: Settings,
    warnings: list[RenderWarning] | None = None,
) -> list[str]:
    """Apply the PDF ceilings, cut long lines with '...', and drop control characters."""
    limits = RenderLimits(max_chars=settings.pdf_max_chars, max_lines=settings.pdf_max_lines)
    text = apply_limits(text, limits, warnings)
    max_len = settings.pdf_max_line_length
    lines: list[str] = []
    for line in text.split("\n"):
        line = _CONTROL_CHARS_RE.sub("", line).rstrip()
        if len(line) > max_len:
            line = line[:max_len] + "..."
        lines.append(line)
    return lines


def write_text_pdf(
    text: str,
    output_path: Path,
    settings: Settings,
    *,
    metadata: DocumentMetadata | None = None,
    warnings: list[RenderWarning] | None = None,
) -> int:
    """
    Lay text out one line per row on A4 pages and save it as a PDF.

    Lines PyMuPDF refuses to draw are skipped with a warning. Returns the page count.
    """
    warnings = warnings if warnings is not None else []
    lines = prepare_pdf_lines(text, settings, warnings)
    bottom = PAGE_RECT.height - MARGIN

    doc = fitz.open()
    try:
        page = doc.new_page(width=PAGE_RECT.width, height=PAGE_RECT.height)
        y = MARGIN
        for line in lines:
            if y > bottom:
                page = doc.new_page(width=PAGE_RECT.width, height=PAGE_RECT.height)
                y = MARGIN
            if line:
                try:
                    page.insert_text(
                        fitz.Point(MARGIN, y),
                        line,
                        fontsize=FONT_SIZE,
                        fontname=_font_for(line),
                    )
                except (RuntimeError, ValueError) as e:
                    log.warning("skipped PDF line %r: %s", line[:50], e)
                    warnings.append(RenderWarning(kind="pdf_line_skipped", message=line[:50]))
            y += LINE_HEIGHT
        if metadata is not None:
            doc.set_metadata(_pdf_metadata(metadata))
        doc.save(str(output_path))
        page_count = doc.page_count
    finally:
        doc.close()
    log.info("wrote %s (%d pages)", output_path, page_count)
    return page_count


def extract_pdf_text(pdf_path: Path) -> list[str]:
    """Plain text of each page, in page order."""
    try:
        doc = fitz.open(pdf_path)
    except Exception as e:
        raise ExtractionError(f"Failed to open PDF {pdf_path}: {e}") from e
    try:
        return [page.get_text("text") for page in doc]
    finally:
        doc.close()


class PdfConverter(FormatConverter):
    """PDF input: page text extracted with PyMuPDF, then shaped like plain-text input."""

    input_format: SupportedFormat = "pdf"
    output_formats: tuple[SupportedFormat, ...] = ("txt", "md", "html")

    @property
    def name(self) -> str:
        return "pdf"

    def convert(
        self,
        input_path: Path,
        output_path: Path,
        output_format: SupportedFormat,
        options: ConversionOptions,
        settings: Settings,
    ) -> list[RenderWarning]:
        warnings: list[RenderWarning] = []
        pages = extract_pdf_text(input_path)
        text = "\n\n".join(p.strip() for p in pages if p.strip())
        log.info("extracted %d pages from %s", len(pages), input_path)

        if output_format == "html":
            content = text_to_html(text, html_title(options.metadata))
        else:
            if output_format == "md":
                text = text_to_markdown(text)
            content = apply_limits(text, effective_limits(options, settings), warnings)
        write_text(output_path, content)
        return warnings
