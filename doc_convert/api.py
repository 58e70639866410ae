"""
Public API: run conversions from code.

    from doc_convert import convert_document
    result = convert_document("report.docx", "out/report.md")
    if not result.success:
        print(result.error)
"""

import logging
import shutil
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import get_args

from doc_convert.config import Settings, load_settings
from doc_convert.converters import REGISTRY, get_converter, supported_output_formats
from doc_convert.errors import ConversionError, InvalidDocumentError, UnsupportedConversionError
from doc_convert.models import (
    BatchConversionResult,
    ConversionOptions,
    ConversionResult,
    DocumentValidation,
    RenderWarning,
    SupportedFormat,
    SupportedFormats,
)
from doc_convert.path_utils import batch_output_paths, detect_format, validate_file_path

log = logging.getLogger(__name__)

_FORMATS: tuple[str, ...] = get_args(SupportedFormat)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def validate_document(path: str | Path) -> DocumentValidation:
    """Check that path names an existing file of a known format."""
    error = validate_file_path(path)
    if error:
        return DocumentValidation(is_valid=False, error=error)
    path = Path(path)
    if not path.exists():
        return DocumentValidation(is_valid=False, error=f"File does not exist: {path}")
    if not path.is_file():
        return DocumentValidation(is_valid=False, error=f"Not a file: {path}")
    fmt = detect_format(path)
    if fmt is None:
        return DocumentValidation(is_valid=False, error=f"Unsupported file format: {path.suffix or path.name}")
    return DocumentValidation(is_valid=True, format=fmt, size=path.stat().st_size)


def get_supported_formats() -> SupportedFormats:
    return SupportedFormats(input=list(REGISTRY), output=supported_output_formats())


def _resolve_output_format(output_path: Path, output_format: str | None) -> SupportedFormat:
    if output_format is None:
        fmt = detect_format(output_path)
        if fmt is None:
            raise UnsupportedConversionError(f"Cannot infer the output format from {output_path}")
        return fmt
    fmt = output_format.lower().lstrip(".")
    if fmt not in _FORMATS:
        raise UnsupportedConversionError(f"Unknown output format: {output_format}")
    return fmt  # type: ignore[return-value]


def convert_document(
    input_path: str | Path,
    output_path: str | Path,
    output_format: str | None = None,
    *,
    options: ConversionOptions | None = None,
    settings: Settings | None = None,
) -> ConversionResult:
    """
    Convert one document (library entry point).

    The output format is taken from output_path's suffix when not given. Fatal
    problems do not raise: they come back as success=False with error set.

    Args:
        input_path: Source document (.docx, .md, .pdf, .html, .txt).
        output_path: File to write; its directory is created if needed.
        output_format: 'md', 'html', 'txt' or 'pdf'.
        options: Per-call options (images, metadata, ceilings).
        settings: Loaded settings; discovered from .doc_convert.json when omitted.

    Returns:
        ConversionResult with formats, sizes, timing and warnings.
    """
    start = time.perf_counter()
    input_path = Path(input_path)
    output_path = Path(output_path)
    options = options or ConversionOptions()
    settings = settings or load_settings()
    input_format: SupportedFormat | None = None
    fmt: SupportedFormat | None = None
    input_size = 0
    warnings: list[RenderWarning] = []

    try:
        validation = validate_document(input_path)
        if not validation.is_valid:
            raise InvalidDocumentError(validation.error or f"Invalid document: {input_path}")
        input_format = validation.format
        input_size = validation.size or 0
        fmt = _resolve_output_format(output_path, output_format)
        log.info("converting %s (%s -> %s)", input_path, input_format, fmt)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        if input_format == fmt:
            if input_path.resolve() != output_path.resolve():
                shutil.copyfile(input_path, output_path)
        else:
            converter = get_converter(input_format, fmt)
            warnings = converter.convert(input_path, output_path, fmt, options, settings)
    except (ConversionError, OSError) as e:
        log.error("conversion of %s failed: %s", input_path, e)
        return ConversionResult(
            success=False,
            input_path=input_path,
            output_path=output_path,
            input_format=input_format,
            output_format=fmt,
            input_size=input_size,
            duration_ms=_elapsed_ms(start),
            error=str(e),
            message="Conversion failed",
        )

    for w in warnings:
        log.warning("%s: %s", input_path.name, w)
    duration_ms = _elapsed_ms(start)
    log.info("wrote %s in %d ms", output_path, duration_ms)
    return ConversionResult(
        success=True,
        input_path=input_path,
        output_path=output_path,
        input_format=input_format,
        output_format=fmt,
        input_size=input_size,
        output_size=output_path.stat().st_size if output_path.is_file() else 0,
        duration_ms=duration_ms,
        warnings=[str(w) for w in warnings],
        message=f"Converted {input_format} to {fmt}",
    )


def batch_convert(
    input_paths: list[str | Path],
    output_dir: str | Path,
    output_format: str,
    *,
    options: ConversionOptions | None = None,
    settings: Settings | None = None,
    max_workers: int = 1,
) -> BatchConversionResult:
    """
    Convert each input into output_dir/<stem>.<output_format> (repeated stems
    get a numeric suffix: <stem>_2, <stem>_3, ...).

    Documents are independent: one failure does not stop the others. With
    max_workers > 1 they run on a thread pool; results keep input order.
    """
    start = time.perf_counter()
    settings = settings or load_settings()
    fmt = output_format.lower().lstrip(".")

    # Shared stems get distinct targets so parallel writes never collide.
    targets = batch_output_paths([Path(p) for p in input_paths], Path(output_dir), fmt)

    def run(path: str | Path, target: Path) -> ConversionResult:
        return convert_document(path, target, fmt, options=options, settings=settings)

    if max_workers > 1 and len(input_paths) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(run, input_paths, targets))
    else:
        results = [run(p, t) for p, t in zip(input_paths, targets)]

    success_count = sum(1 for r in results if r.success)
    return BatchConversionResult(
        results=results,
        total_files=len(results),
        success_count=success_count,
        failure_count=len(results) - success_count,
        total_duration_ms=_elapsed_ms(start),
    )
