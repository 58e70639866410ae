"""Resolve document formats from paths and validate user-supplied paths. No CLI dependency."""

import mimetypes
import re
from pathlib import Path

from doc_convert.models import SupportedFormat

EXTENSION_FORMATS: dict[str, SupportedFormat] = {
    "docx": "docx",
    "doc": "docx",
    "md": "md",
    "markdown": "md",
    "pdf": "pdf",
    "html": "html",
    "htm": "html",
    "txt": "txt",
}

_INVALID_PATH_CHARS = re.compile(r'[<>"|?*]')


def detect_format(path: Path | str) -> SupportedFormat | None:
    """Format from the file suffix, falling back to the guessed MIME type. None if unknown."""
    path = Path(path)
    ext = path.suffix.lower().lstrip(".")
    if ext in EXTENSION_FORMATS:
        return EXTENSION_FORMATS[ext]
    mime_type, _ = mimetypes.guess_type(path.name)
    if mime_type:
        if "word" in mime_type:
            return "docx"
        if "pdf" in mime_type:
            return "pdf"
        if "html" in mime_type:
            return "html"
        if "markdown" in mime_type:
            return "md"
        if mime_type.startswith("text"):
            return "txt"
    return None


def validate_file_path(path: Path | str) -> str | None:
    """Return an error message for an unusable path string, or None when it looks fine."""
    raw = str(path) if path is not None else ""
    if not raw.strip():
        return "File path must not be empty"
    # ":" stays allowed for drive letters.
    if _INVALID_PATH_CHARS.search(raw):
        return f"File path contains invalid characters: {raw}"
    return None


def batch_output_paths(
    input_paths: list[Path], output_dir: Path, output_format: SupportedFormat
) -> list[Path]:
    """
    <output_dir>/<input stem>.<format> for each input; repeated stems get "_2", "_3", ...

    Names are compared case-insensitively so that a.docx and A.md do not share a
    file on case-insensitive filesystems.
    """
    taken: set[str] = set()
    targets = []
    for input_path in input_paths:
        stem = Path(input_path).stem
        candidate, n = stem, 1
        while candidate.lower() in taken:
            n += 1
            candidate = f"{stem}_{n}"
        taken.add(candidate.lower())
        targets.append(Path(output_dir) / f"{candidate}.{output_format}")
    return targets
