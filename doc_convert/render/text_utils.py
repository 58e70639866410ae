"""Small string helpers shared by the render stages."""

import re
import unicodedata

TAG_RE = re.compile(r"<[^>]+>")

# Decoded in this order, after all tag handling.
ENTITY_TABLE: tuple[tuple[str, str], ...] = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)

# Code bodies additionally see &apos; and decode &amp; last so "&amp;lt;" stays "&lt;".
_CODE_ENTITY_TABLE: tuple[tuple[str, str], ...] = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&apos;", "'"),
    ("&nbsp;", " "),
    ("&amp;", "&"),
)

_BLANK_RUN_RE = re.compile(r"\n(?:[ \t]*\n){2,}")


def strip_tags(text: str) -> str:
    return TAG_RE.sub("", text)


def decode_entities(text: str) -> str:
    """Decode the named entities the renderers understand; anything else is left as-is."""
    for entity, char in ENTITY_TABLE:
        if entity in text:
            text = text.replace(entity, char)
    return text


def clean_code_content(code: str) -> str:
    """
    Turn the inner HTML of a <code> element into plain source text.

    Keeps indentation and line structure; caps runs of blank lines at two, blanks
    whitespace-only lines, and drops leading/trailing newlines.
    """
    code = strip_tags(code)
    for entity, char in _CODE_ENTITY_TABLE:
        if entity in code:
            code = code.replace(entity, char)
    code = re.sub(r"\n{4,}", "\n\n\n", code)
    code = re.sub(r"(?m)^[ \t]+$", "", code)
    return code.strip("\n")


def inline_text(fragment: str) -> str:
    """Inner HTML of a cell or list item as one trimmed line."""
    return strip_tags(fragment).replace("\r", " ").replace("\n", " ").strip()


def display_width(text: str) -> int:
    """Terminal columns taken by text: 2 per East Asian wide/full-width character, else 1."""
    width = 0
    for ch in text:
        width += 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1
    return width


def collapse_blank_lines(text: str) -> str:
    """Reduce any run of two or more blank lines to a single blank line."""
    return _BLANK_RUN_RE.sub("\n\n", text)
