"""
Table layout engine: <table> markup -> Markdown pipe table or box-drawn text table.

Plain-text layout measures cells in display columns (wide CJK characters count
twice) so the borders line up in a monospaced terminal.
"""

import re
from dataclasses import dataclass, field

from doc_convert.render.text_utils import decode_entities, display_width, inline_text

_FLAGS = re.IGNORECASE | re.DOTALL
THEAD_RE = re.compile(r"<thead\b[^>]*>(.*?)</thead>", _FLAGS)
TBODY_RE = re.compile(r"<tbody\b[^>]*>(.*?)</tbody>", _FLAGS)
ROW_RE = re.compile(r"<tr\b[^>]*>(.*?)</tr>", _FLAGS)
CELL_RE = re.compile(r"<t[hd]\b[^>]*>(.*?)</t[hd]>", _FLAGS)

EMPTY_TABLE_TEXT = "Table is empty"
TABLE_LABEL = "Table:"


@dataclass
class TableModel:
    """Rows of cell text. Rows may be ragged; layout pads missing cells."""

    rows: list[list[str]] = field(default_factory=list)
    has_header: bool = False

    @property
    def column_count(self) -> int:
        return max((len(r) for r in self.rows), default=0)


def extract_table(table_html: str) -> TableModel:
    """Collect row/cell text from the inner HTML of a <table>."""
    head = THEAD_RE.search(table_html)
    body = TBODY_RE.search(table_html)
    content = table_html
    if head or body:
        content = (head.group(1) if head else "") + (body.group(1) if body else "")

    rows: list[list[str]] = []
    for row in ROW_RE.finditer(content):
        cells = [decode_entities(inline_text(c.group(1))) for c in CELL_RE.finditer(row.group(1))]
        if cells:
            rows.append(cells)
    return TableModel(rows=rows, has_header=head is not None)


def column_widths(model: TableModel) -> tuple[int, ...]:
    """Maximum display width per column across all rows; missing cells count as 0."""
    widths = [0] * model.column_count
    for row in model.rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], display_width(cell))
    return tuple(widths)


def _escape_md_cell(cell: str) -> str:
    return cell.replace("|", r"\|")


def render_markdown_table(model: TableModel) -> str:
    """First row is the header. Empty tables render as ""."""
    if not model.rows:
        return ""
    lines: list[str] = []
    for index, row in enumerate(model.rows):
        lines.append("| " + " | ".join(_escape_md_cell(c) for c in row) + " |")
        if index == 0:
            lines.append("| " + " | ".join("---" for _ in row) + " |")
    return "\n".join(lines)


def _rule(widths: tuple[int, ...], left: str, mid: str, right: str) -> str:
    return left + mid.join("─" * (w + 2) for w in widths) + right


def render_text_table(model: TableModel) -> str:
    """Box-drawn table; every line has the same display width."""
    if not model.rows:
        return EMPTY_TABLE_TEXT
    widths = column_widths(model)
    lines = [TABLE_LABEL, _rule(widths, "┌", "┬", "┐")]
    for index, row in enumerate(model.rows):
        cells = list(row) + [""] * (len(widths) - len(row))
        padded = [
            " " + cell + " " * (width - display_width(cell) + 1)
            for cell, width in zip(cells, widths)
        ]
        lines.append("│" + "│".join(padded) + "│")
        if index == 0 and len(model.rows) > 1:
            lines.append(_rule(widths, "├", "┼", "┤"))
    lines.append(_rule(widths, "└", "┴", "┘"))
    return "\n".join(lines)
