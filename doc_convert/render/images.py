"""Persist base64 data-URI images next to a rendered document."""

import base64
import binascii
import itertools
import logging
import re
from collections.abc import Callable
from pathlib import Path

from doc_convert.errors import ImageWriteError

log = logging.getLogger(__name__)

DATA_URI_RE = re.compile(r"^data:image/([a-zA-Z0-9.+-]+);base64,(.+)$", re.DOTALL)

_EXTENSION_ALIASES = {"jpeg": "jpg", "svg+xml": "svg", "x-icon": "ico"}


def is_data_uri(src: str) -> bool:
    return src.startswith("data:image/")


def _sequence_ids(prefix: str) -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"{prefix}_{next(counter):03d}"


class ImageStore:
    """
    Write embedded images into one directory with collision-free names.

    Names come from id_factory when given, else from a per-store sequence
    ("<prefix>_001", "<prefix>_002", ...). The directory is created on the first
    write, so documents without embedded images leave no empty folder behind.
    """

    def __init__(
        self,
        images_dir: Path,
        *,
        prefix: str = "image",
        id_factory: Callable[[], str] | None = None,
        link_prefix: str | None = None,
        attempts: int = 2,
    ):
        self.images_dir = Path(images_dir)
        self._next_id = id_factory or _sequence_ids(prefix)
        self.link_prefix = link_prefix if link_prefix is not None else f"./{self.images_dir.name}"
        self.attempts = max(1, attempts)
        self.saved: list[Path] = []

    def save_data_uri(self, data_uri: str) -> str:
        """
        Decode a data:image URI, write it, and return the link to use in Markdown.

        Raises ImageWriteError if the URI is malformed or the file cannot be written.
        """
        m = DATA_URI_RE.match(data_uri.strip())
        if not m:
            raise ImageWriteError("not a base64 image data URI")
        fmt = m.group(1).lower()
        ext = _EXTENSION_ALIASES.get(fmt, fmt)
        try:
            data = base64.b64decode(re.sub(r"\s+", "", m.group(2)), validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageWriteError(f"invalid base64 payload: {e}") from e

        filename = f"{self._next_id()}.{ext}"
        path = self.images_dir / filename
        last_error: OSError | None = None
        for attempt in range(self.attempts):
            try:
                self.images_dir.mkdir(parents=True, exist_ok=True)
                path.write_bytes(data)
                break
            except OSError as e:
                last_error = e
                log.warning("image write failed (attempt %d/%d): %s", attempt + 1, self.attempts, e)
        else:
            raise ImageWriteError(f"could not write {path}: {last_error}") from last_error

        self.saved.append(path)
        log.debug("saved image %s (%d bytes)", path, len(data))
        return f"{self.link_prefix}/{filename}"
