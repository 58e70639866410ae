"""
Line heuristics that give loose plain text (or text pulled out of a PDF) some structure.

A line is treated as a heading when it is short and either all upper-case or
looks like a title (starts with a capital or CJK character, no closing period).
"- " / "* " and "1." lines are list items; everything else is a paragraph.
"""

import html
import re

DEFAULT_HTML_TITLE = "Converted document"
MAX_TITLE_LENGTH = 80

_TITLE_START_RE = re.compile(r"^[A-Z\u4e00-\u9fff]")
_BULLET_RE = re.compile(r"^[-*]\s+")
_ORDERED_RE = re.compile(r"^\d+\.\s*")


def is_likely_title(line: str) -> bool:
    return bool(_TITLE_START_RE.match(line)) and not line.endswith((".", "。"))


def classify_line(line: str, index: int) -> tuple[str, int | str]:
    """
    Kind of a stripped, non-empty line: ("heading", level), ("ul", item),
    ("ol", item) or ("p", line).
    """
    if len(line) < MAX_TITLE_LENGTH and (line.isupper() or is_likely_title(line)):
        return "heading", 1 if line.isupper() or index == 0 else 2
    if _BULLET_RE.match(line):
        return "ul", _BULLET_RE.sub("", line, count=1)
    if _ORDERED_RE.match(line):
        return "ol", _ORDERED_RE.sub("", line, count=1)
    return "p", line


def text_to_markdown(text: str) -> str:
    lines = text.splitlines()
    out: list[str] = []
    for i, raw in enumerate(lines):
        line = raw.strip()
        if not line:
            out.append("")
            continue
        kind, value = classify_line(line, i)
        if kind == "heading":
            out.append(f"{'#' * value} {line}")
            out.append("")
            continue
        # list lines keep their own marker
        out.append(line)
        if kind == "p" and i + 1 < len(lines) and not lines[i + 1].strip():
            out.append("")
    return re.sub(r"\n{3,}", "\n\n", "\n".join(out)).strip() + "\n"


def wrap_html_document(body: str, title: str = DEFAULT_HTML_TITLE) -> str:
    """Minimal standalone HTML page around a body fragment."""
    return "\n".join([
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '    <meta charset="UTF-8">',
        '    <meta name="viewport" content="width=device-width, initial-scale=1.0">',
        f"    <title>{html.escape(title)}</title>",
        "</head>",
        "<body>",
        body,
        "</body>",
        "</html>",
    ])


def text_to_html(text: str, title: str = DEFAULT_HTML_TITLE) -> str:
    body: list[str] = []
    open_list: str | None = None

    def close_list() -> None:
        nonlocal open_list
        if open_list:
            body.append(f"</{open_list}>")
            open_list = None

    for i, raw in enumerate(text.splitlines()):
        line = raw.strip()
        if not line:
            close_list()
            continue
        kind, value = classify_line(line, i)
        if kind in ("ul", "ol"):
            if open_list != kind:
                close_list()
                body.append(f"<{kind}>")
                open_list = kind
            body.append(f"    <li>{html.escape(value)}</li>")
            continue
        close_list()
        if kind == "heading":
            body.append(f"<h{value}>{html.escape(line)}</h{value}>")
        else:
            body.append(f"<p>{html.escape(line)}</p>")
    close_list()
    return wrap_html_document("\n".join(body), title)
