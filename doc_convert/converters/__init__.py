"""Format converters: one per input format, each writing a subset of the output formats."""

from doc_convert.converters.base import FormatConverter
from doc_convert.converters.html import HtmlConverter
from doc_convert.converters.markdown import MarkdownConverter
from doc_convert.converters.pdf import PdfConverter
from doc_convert.converters.text import TextConverter
from doc_convert.converters.word import WordConverter
from doc_convert.errors import UnsupportedConversionError
from doc_convert.models import SupportedFormat

__all__ = [
    "FormatConverter",
    "HtmlConverter",
    "MarkdownConverter",
    "PdfConverter",
    "TextConverter",
    "WordConverter",
]

REGISTRY: dict[SupportedFormat, type[FormatConverter]] = {
    "docx": WordConverter,
    "html": HtmlConverter,
    "md": MarkdownConverter,
    "txt": TextConverter,
    "pdf": PdfConverter,
}


def get_converter(input_format: SupportedFormat, output_format: SupportedFormat) -> FormatConverter:
    """Return a converter for the pair. Raises UnsupportedConversionError if none handles it."""
    cls = REGISTRY.get(input_format)
    if cls is None or output_format not in cls.output_formats:
        raise UnsupportedConversionError(f"Unsupported conversion: {input_format} -> {output_format}")
    return cls()


def supported_output_formats() -> list[SupportedFormat]:
    """Every format at least one converter can write, in a stable order."""
    seen: list[SupportedFormat] = []
    for cls in REGISTRY.values():
        for fmt in cls.output_formats:
            if fmt not in seen:
                seen.append(fmt)
    return seen
