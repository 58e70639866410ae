"""Markdown input converter: Python-Markdown produces the HTML, the render core does the rest."""

from pathlib import Path

import markdown

from doc_convert.config import Settings
from doc_convert.converters.base import FormatConverter, html_title, write_text
from doc_convert.converters.html import write_rendered_html
from doc_convert.models import ConversionOptions, RenderWarning, SupportedFormat
from doc_convert.render.plain_text import wrap_html_document

MARKDOWN_EXTENSIONS = ["tables", "fenced_code"]


def markdown_to_html(text: str) -> str:
    """Body fragment for a Markdown source."""
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)


class MarkdownConverter(FormatConverter):
    input_format: SupportedFormat = "md"
    output_formats: tuple[SupportedFormat, ...] = ("html", "txt", "pdf")

    @property
    def name(self) -> str:
        return "markdown"

    def convert(
        self,
        input_path: Path,
        output_path: Path,
        output_format: SupportedFormat,
        options: ConversionOptions,
        settings: Settings,
    ) -> list[RenderWarning]:
        body = markdown_to_html(Path(input_path).read_text(encoding="utf-8", errors="replace"))
        if output_format == "html":
            write_text(output_path, wrap_html_document(body, html_title(options.metadata)))
            return []
        return write_rendered_html(body, output_path, output_format, options, settings)
