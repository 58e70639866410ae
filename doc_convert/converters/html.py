"""HTML input converter, plus the HTML -> md/txt/pdf fan-out shared with Word and Markdown input."""

import logging
import re
from pathlib import Path

from doc_convert.config import Settings
from doc_convert.converters.base import (
    FormatConverter,
    effective_limits,
    image_store_for,
    write_text,
)
from doc_convert.converters.pdf import write_text_pdf
from doc_convert.models import ConversionOptions, RenderWarning, SupportedFormat
from doc_convert.render.blocks import render_to_markdown, render_to_plain_text

log = logging.getLogger(__name__)

_NON_CONTENT_RE = re.compile(r"<(script|style|head)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)


def strip_non_content(html: str) -> str:
    """Drop script, style and head elements along with their bodies."""
    return _NON_CONTENT_RE.sub("", html)


def write_rendered_html(
    html: str,
    output_path: Path,
    output_format: SupportedFormat,
    options: ConversionOptions,
    settings: Settings,
) -> list[RenderWarning]:
    """Render an HTML string into md, txt or pdf at output_path and return the render warnings."""
    warnings: list[RenderWarning] = []
    if output_format == "md":
        content = render_to_markdown(
            html,
            images=image_store_for(output_path, settings),
            include_images=options.include_images,
            default_alt=settings.default_image_alt,
            limits=effective_limits(options, settings),
            warnings=warnings,
        )
        write_text(output_path, content)
    elif output_format == "txt":
        content = render_to_plain_text(
            html,
            include_images=options.include_images,
            default_alt=settings.default_image_alt,
            limits=effective_limits(options, settings),
            warnings=warnings,
        )
        write_text(output_path, content)
    elif output_format == "pdf":
        # the PDF writer applies its own ceilings
        text = render_to_plain_text(
            html,
            include_images=options.include_images,
            default_alt=settings.default_image_alt,
            warnings=warnings,
        )
        write_text_pdf(text, output_path, settings, metadata=options.metadata, warnings=warnings)
    else:
        raise ValueError(f"cannot render HTML as {output_format}")
    log.debug("rendered HTML as %s with %d warnings", output_format, len(warnings))
    return warnings


class HtmlConverter(FormatConverter):
    input_format: SupportedFormat = "html"
    output_formats: tuple[SupportedFormat, ...] = ("md", "txt", "pdf")

    @property
    def name(self) -> str:
        return "html"

    def convert(
        self,
        input_path: Path,
        output_path: Path,
        output_format: SupportedFormat,
        options: ConversionOptions,
        settings: Settings,
    ) -> list[RenderWarning]:
        html = Path(input_path).read_text(encoding="utf-8", errors="replace")
        return write_rendered_html(strip_non_content(html), output_path, output_format, options, settings)
