"""Data models for conversion options, results and render diagnostics."""

from datetime import datetime
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

SupportedFormat = Literal["docx", "md", "pdf", "html", "txt"]


class RenderLimits(BaseModel):
    """Output ceilings applied after rendering. None means unbounded."""

    max_chars: int | None = Field(default=None, ge=1, description="Maximum characters kept in the output")
    max_lines: int | None = Field(default=None, ge=1, description="Maximum lines kept in the output")


class RenderWarning(BaseModel):
    """A construct that could not be converted faithfully and was degraded instead."""

    kind: str = Field(description="e.g. nested_table, image_write_failed, invalid_image, truncated")
    message: str = Field(default="", description="Human-readable detail")

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}" if self.message else self.kind


class DocumentMetadata(BaseModel):
    """Descriptive metadata written into outputs that support it (HTML title, PDF info)."""

    title: str | None = None
    author: str | None = None
    subject: str | None = None
    keywords: list[str] = Field(default_factory=list)
    created_date: datetime | None = None
    modified_date: datetime | None = None


class ConversionOptions(BaseModel):
    """Per-call options for a conversion."""

    include_images: bool = Field(default=True, description="Keep image references (and persist embedded images)")
    metadata: DocumentMetadata | None = Field(default=None, description="Metadata for HTML/PDF outputs")
    limits: RenderLimits | None = Field(
        default=None,
        description="Override the configured render ceilings for this call",
    )


class ConversionResult(BaseModel):
    """Result of converting one document."""

    success: bool = Field(description="Whether conversion completed without fatal errors")
    input_path: Path
    output_path: Path
    input_format: SupportedFormat | None = None
    output_format: SupportedFormat | None = None
    input_size: int = Field(default=0, description="Input file size in bytes")
    output_size: int = Field(default=0, description="Output file size in bytes")
    duration_ms: int = Field(default=0, description="Wall time spent on this document")
    error: str | None = Field(default=None, description="Fatal error message if success is False")
    warnings: list[str] = Field(default_factory=list, description="Non-fatal render warnings")
    message: str = Field(default="", description="Human-readable summary")

    model_config = {"arbitrary_types_allowed": True}


class BatchConversionResult(BaseModel):
    """Aggregate of a batch run."""

    results: list[ConversionResult] = Field(default_factory=list)
    total_files: int = 0
    success_count: int = 0
    failure_count: int = 0
    total_duration_ms: int = 0


class DocumentValidation(BaseModel):
    """Outcome of checking an input path before conversion."""

    is_valid: bool
    format: SupportedFormat | None = None
    size: int | None = None
    error: str | None = None


class SupportedFormats(BaseModel):
    input: list[SupportedFormat]
    output: list[SupportedFormat]
