from doc_convert.render.tables import (
    EMPTY_TABLE_TEXT,
    TableModel,
    column_widths,
    extract_table,
    render_markdown_table,
    render_text_table,
)
from doc_convert.render.text_utils import display_width

CJK_TABLE = "<tr><th>A</th><th>名称</th></tr><tr><td>1</td><td>李</td></tr>"


def _box_lines(text: str) -> list[str]:
    return [line for line in text.split("\n") if line[:1] in ("┌", "│", "├", "└")]


def test_extract_prefers_thead_and_tbody():
    inner = (
        "<caption>ignored <tr><td>x</td></tr></caption>"
        "<thead><tr><th>H1</th><th>H2</th></tr></thead>"
        "<tbody><tr><td>a &amp; b</td><td><b>bold</b>\ntext</td></tr></tbody>"
    )
    model = extract_table(inner)
    assert model.has_header
    assert model.rows == [["H1", "H2"], ["a & b", "bold text"]]


def test_cjk_columns_are_measured_in_display_width():
    model = extract_table(CJK_TABLE)
    assert column_widths(model) == (1, 4)
    text = render_text_table(model)
    assert text.split("\n") == [
        "Table:",
        "┌───┬──────┐",
        "│ A │ 名称 │",
        "├───┼──────┤",
        "│ 1 │ 李   │",
        "└───┴──────┘",
    ]


def test_every_box_line_has_the_same_width():
    model = extract_table(
        "<tr><td>日本語のテキスト</td><td>x</td></tr>"
        "<tr><td>a</td><td>longer cell</td><td>extra</td></tr>"
        "<tr><td>한국어</td></tr>"
    )
    widths = {display_width(line) for line in _box_lines(render_text_table(model))}
    assert len(widths) == 1


def test_single_row_table_has_no_header_rule():
    text = render_text_table(TableModel(rows=[["only"]]))
    assert "├" not in text
    assert text.split("\n")[2] == "│ only │"


def test_empty_tables():
    assert render_text_table(TableModel()) == EMPTY_TABLE_TEXT
    assert render_markdown_table(TableModel()) == ""


def test_markdown_table_uses_first_row_as_header():
    model = TableModel(rows=[["A", "B"], ["1", "x|y"]])
    assert render_markdown_table(model) == "| A | B |\n| --- | --- |\n| 1 | x\\|y |"
