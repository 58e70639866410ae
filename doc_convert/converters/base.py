"""Abstract interface for per-input-format converters, plus small shared helpers."""

from abc import ABC, abstractmethod
from pathlib import Path

from doc_convert.config import Settings
from doc_convert.models import (
    ConversionOptions,
    DocumentMetadata,
    RenderLimits,
    RenderWarning,
    SupportedFormat,
)
from doc_convert.render.images import ImageStore
from doc_convert.render.plain_text import DEFAULT_HTML_TITLE


class FormatConverter(ABC):
    """Interface that each input-format converter must implement."""

    input_format: SupportedFormat
    output_formats: tuple[SupportedFormat, ...] = ()

    def can_convert(self, input_format: SupportedFormat, output_format: SupportedFormat) -> bool:
        return input_format == self.input_format and output_format in self.output_formats

    @abstractmethod
    def convert(
        self,
        input_path: Path,
        output_path: Path,
        output_format: SupportedFormat,
        options: ConversionOptions,
        settings: Settings,
    ) -> list[RenderWarning]:
        """
        Convert input_path into output_format and write it to output_path.

        - The output directory already exists
        - Returns non-fatal warnings; raises ConversionError subclasses on fatal problems
        - Nothing is written to output_path when it raises
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Converter identifier (e.g. 'word')."""
        ...


def effective_limits(options: ConversionOptions, settings: Settings) -> RenderLimits:
    """Per-call limits win over configured ones."""
    return options.limits if options.limits is not None else settings.render_limits()


def image_store_for(output_path: Path, settings: Settings) -> ImageStore:
    """Images for out/report.md go to out/images/report_image_001.png, ..."""
    output_path = Path(output_path)
    return ImageStore(
        output_path.parent / settings.images_dirname,
        prefix=f"{output_path.stem}_image",
        link_prefix=f"./{settings.images_dirname}",
        attempts=settings.image_write_attempts,
    )


def html_title(metadata: DocumentMetadata | None) -> str:
    if metadata is not None and metadata.title:
        return metadata.title
    return DEFAULT_HTML_TITLE


def write_text(path: Path, content: str) -> None:
    Path(path).write_text(content, encoding="utf-8")
