"""
Word (.docx) input converter.

mammoth turns the document into HTML (images inlined as data URIs); that HTML
then goes through pagination repair, code-fragment merging and block rendering.
"""

import io
import logging
from pathlib import Path

import mammoth

from doc_convert.config import Settings
from doc_convert.converters.base import FormatConverter, html_title, write_text
from doc_convert.converters.html import write_rendered_html
from doc_convert.errors import ExtractionError, InvalidDocumentError
from doc_convert.models import ConversionOptions, RenderWarning, SupportedFormat
from doc_convert.render.plain_text import wrap_html_document

log = logging.getLogger(__name__)


def extract_html(document: bytes, warnings: list[RenderWarning] | None = None) -> str:
    """
    HTML for a .docx payload.

    mammoth's conversion messages are appended to warnings. Raises
    InvalidDocumentError for an empty payload and ExtractionError when mammoth fails.
    """
    if not document:
        raise InvalidDocumentError("Word document is empty")
    try:
        result = mammoth.convert_to_html(io.BytesIO(document))
    except Exception as e:
        raise ExtractionError(f"Word document conversion failed: {e}") from e
    for message in getattr(result, "messages", None) or []:
        log.debug("mammoth %s: %s", message.type, message.message)
        if warnings is not None:
            warnings.append(RenderWarning(kind=f"extract_{message.type}", message=message.message))
    return result.value


class WordConverter(FormatConverter):
    input_format: SupportedFormat = "docx"
    output_formats: tuple[SupportedFormat, ...] = ("md", "html", "txt", "pdf")

    @property
    def name(self) -> str:
        return "word"

    def convert(
        self,
        input_path: Path,
        output_path: Path,
        output_format: SupportedFormat,
        options: ConversionOptions,
        settings: Settings,
    ) -> list[RenderWarning]:
        warnings: list[RenderWarning] = []
        html = extract_html(Path(input_path).read_bytes(), warnings)
        log.info("extracted %d chars of HTML from %s", len(html), input_path)
        if output_format == "html":
            write_text(output_path, wrap_html_document(html, html_title(options.metadata)))
            return warnings
        return warnings + write_rendered_html(html, output_path, output_format, options, settings)
