"""
Pagination normalizer: remove page-break markup that Word exports leave in HTML.

Runs before code-fragment merging so that the gap between two halves of a split
block is as small as possible. Patterns that do not match are left untouched;
the function never raises.
"""

import re

_FLAGS = re.IGNORECASE | re.DOTALL

# Tag-level removals, applied in order over the whole document.
PAGE_BREAK_RULES: tuple[re.Pattern, ...] = (
    re.compile(r'<w:br\s+w:type="page"[^>]*>', _FLAGS),
    re.compile(r'<br\b[^>]*style="[^"]*page-break[^"]*"[^>]*>', _FLAGS),
    re.compile(r'<div\b[^>]*style="[^"]*page-break[^"]*"[^>]*>.*?</div>', _FLAGS),
    re.compile(r'<hr\b[^>]*style="[^"]*page-break[^"]*"[^>]*>', _FLAGS),
    re.compile(r'<div\b[^>]*class="[^"]*page-break[^"]*"[^>]*>.*?</div>', _FLAGS),
)

EMPTY_BLOCK_RULES: tuple[re.Pattern, ...] = (
    re.compile(r"<p\b[^>]*>\s*</p>", _FLAGS),
    re.compile(r"<div\b[^>]*>\s*</div>", _FLAGS),
)

PAGE_BREAK_COMMENT_RE = re.compile(r"<!--\s*PageBreak\s*-->", _FLAGS)
# Word's mso-* styled spans are unwrapped: the tags go, the text stays.
MSO_SPAN_RE = re.compile(r'<span\b[^>]*style="[^"]*mso-[^"]*"[^>]*>(.*?)</span>', _FLAGS)

_PRE_SPLIT_RE = re.compile(r"(<pre\b.*?</pre>)", _FLAGS)
_NEWLINE_RUN_RE = re.compile(r"\n[ \t]*\n(?:[ \t]*\n)+")
_SPACE_RUN_RE = re.compile(r"[ \t]{3,}")


def _collapse_whitespace(html: str) -> str:
    """Collapse newline and space runs everywhere except inside <pre> elements."""
    parts = _PRE_SPLIT_RE.split(html)
    for i in range(0, len(parts), 2):
        part = _NEWLINE_RUN_RE.sub("\n\n", parts[i])
        parts[i] = _SPACE_RUN_RE.sub(" ", part)
    return "".join(parts)


def _normalize_once(html: str) -> str:
    for pattern in PAGE_BREAK_RULES:
        html = pattern.sub("", html)
    for pattern in EMPTY_BLOCK_RULES:
        html = pattern.sub("", html)
    html = _collapse_whitespace(html)
    html = PAGE_BREAK_COMMENT_RE.sub("", html)
    html = MSO_SPAN_RE.sub(r"\1", html)
    return html


def normalize_pagination(html: str) -> str:
    """Strip page breaks, empty blocks and pagination whitespace. Idempotent."""
    if not html:
        return ""
    # Every rule deletes or shortens markup, so this terminates.
    while True:
        normalized = _normalize_once(html)
        if normalized == html:
            return html
        html = normalized
