from doc_convert.models import RenderLimits
from doc_convert.render.limits import TRUNCATION_MARKER, apply_limits
from doc_convert.render.text_utils import (
    clean_code_content,
    collapse_blank_lines,
    decode_entities,
    display_width,
    inline_text,
)


def test_no_limits_no_change():
    assert apply_limits("abc", None) == "abc"
    assert apply_limits("abc", RenderLimits()) == "abc"


def test_under_the_ceiling_records_nothing():
    warnings = []
    assert apply_limits("a\nb", RenderLimits(max_chars=10, max_lines=2), warnings) == "a\nb"
    assert warnings == []


def test_line_ceiling():
    warnings = []
    out = apply_limits("1\n2\n3\n4", RenderLimits(max_lines=2), warnings)
    assert out == "1\n2\n\n" + TRUNCATION_MARKER
    assert warnings[0].kind == "truncated"
    assert "2 lines" in warnings[0].message


def test_display_width():
    assert display_width("abc") == 3
    assert display_width("名称") == 4
    assert display_width("ｱ") == 1  # half-width katakana
    assert display_width("Ａ") == 2  # full-width latin


def test_decode_entities_leaves_unknown_ones():
    assert decode_entities("&lt;a&gt; &copy;") == "<a> &copy;"


def test_clean_code_content():
    raw = "\n<span>x</span> = 1\n   \n\n\n\n\ny &amp;&amp; z &amp;lt;\n"
    assert clean_code_content(raw) == "x = 1\n\n\n\ny && z &lt;"


def test_inline_text_flattens_lines():
    assert inline_text(" <b>a</b>\nb\r\nc ") == "a b  c"


def test_collapse_blank_lines():
    assert collapse_blank_lines("a\n\n \n\t\nb\n\nc") == "a\n\nb\n\nc"
