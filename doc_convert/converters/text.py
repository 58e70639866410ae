"""Plain-text input converter."""

import logging
from pathlib import Path

from doc_convert.config import Settings
from doc_convert.converters.base import FormatConverter, effective_limits, html_title, write_text
from doc_convert.converters.pdf import write_text_pdf
from doc_convert.models import ConversionOptions, RenderWarning, SupportedFormat
from doc_convert.render.limits import apply_limits
from doc_convert.render.plain_text import text_to_html, text_to_markdown

log = logging.getLogger(__name__)


class TextConverter(FormatConverter):
    input_format: SupportedFormat = "txt"
    output_formats: tuple[SupportedFormat, ...] = ("md", "html", "pdf")

    @property
    def name(self) -> str:
        return "text"

    def convert(
        self,
        input_path: Path,
        output_path: Path,
        output_format: SupportedFormat,
        options: ConversionOptions,
        settings: Settings,
    ) -> list[RenderWarning]:
        warnings: list[RenderWarning] = []
        text = Path(input_path).read_text(encoding="utf-8", errors="replace")
        if output_format == "pdf":
            write_text_pdf(text, output_path, settings, metadata=options.metadata, warnings=warnings)
            return warnings
        if output_format == "html":
            content = text_to_html(text, html_title(options.metadata))
        else:
            content = apply_limits(text_to_markdown(text), effective_limits(options, settings), warnings)
        write_text(output_path, content)
        log.debug("text -> %s: %d chars", output_format, len(content))
        return warnings
