import pytest

from doc_convert.render.pagination import normalize_pagination


def test_removes_page_break_div_with_its_content():
    html = '<p>a</p><div style="page-break-before: always">Page 3 of 10</div><p>b</p>'
    out = normalize_pagination(html)
    assert "Page 3" not in out
    assert out == "<p>a</p><p>b</p>"


def test_removes_word_page_breaks_and_comments():
    html = '<p>a</p><w:br w:type="page"/><!-- PageBreak --><br style="page-break-before:always"><p>b</p>'
    assert normalize_pagination(html) == "<p>a</p><p>b</p>"


def test_removes_page_break_class_and_rule():
    html = '<p>a</p><div class="page-break">x</div><hr style="page-break-after: always"/><p>b</p>'
    assert normalize_pagination(html) == "<p>a</p><p>b</p>"


def test_drops_empty_blocks():
    assert normalize_pagination("<p>x</p><p>  </p><div>\n</div>") == "<p>x</p>"


def test_unwraps_mso_spans():
    html = '<p><span style="mso-spacerun:yes">kept text</span></p>'
    assert normalize_pagination(html) == "<p>kept text</p>"


def test_collapses_whitespace_outside_pre_only():
    html = "<p>a     b</p>\n\n\n\n<pre><code>x\n\n\n\ny      z</code></pre>"
    out = normalize_pagination(html)
    assert "<p>a b</p>\n\n<pre>" in out
    assert "x\n\n\n\ny      z" in out


def test_empty_input():
    assert normalize_pagination("") == ""


@pytest.mark.parametrize("html", [
    "<div><p></p></div>",
    '<div style="page-break-after:always"><p></p></div><p>a</p>',
    "<p>a</p>\n \n\n\n<p>b</p>",
    '<p><span style="mso-x:1"><span style="mso-y:2">t</span></span></p><div> </div>',
    "<pre><code>   \n\n\n\n</code></pre>",
    "<div>" * 10 + "</div>" * 10 + "<p>a</p>",
])
def test_idempotent(html):
    once = normalize_pagination(html)
    assert normalize_pagination(once) == once


def test_nested_empty_blocks_disappear_completely():
    assert normalize_pagination("<div><p></p></div>") == ""


def test_deeply_nested_empty_blocks():
    html = "<div>" * 12 + "<p> </p>" + "</div>" * 12 + "<p>a</p>"
    assert normalize_pagination(html) == "<p>a</p>"
