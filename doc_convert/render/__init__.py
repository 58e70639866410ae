"""HTML -> Markdown / plain-text rendering core: pagination repair, code merging, tables."""

from doc_convert.render.blocks import prepare_html, render_to_markdown, render_to_plain_text
from doc_convert.render.images import ImageStore
from doc_convert.render.languages import detect_language
from doc_convert.render.limits import TRUNCATION_MARKER, apply_limits
from doc_convert.render.merger import merge_code_fragments
from doc_convert.render.pagination import normalize_pagination

__all__ = [
    "ImageStore",
    "TRUNCATION_MARKER",
    "apply_limits",
    "detect_language",
    "merge_code_fragments",
    "normalize_pagination",
    "prepare_html",
    "render_to_markdown",
    "render_to_plain_text",
]
