from doc_convert.render.merger import (
    has_code_continuity,
    has_similar_indentation,
    is_continuous_structure,
    is_page_break_content,
    merge_code,
    merge_code_fragments,
    scan_code_blocks,
    should_merge,
)
from doc_convert.render.text_utils import clean_code_content

LONG_UNRELATED_PARAGRAPH = (
    "<p>The following example shows how the same idea looks in a scripting "
    "language that ships with most operating systems today.</p>"
)


def _bodies(html: str) -> list[str]:
    return [clean_code_content(b.raw_code) for b in scan_code_blocks(html)]


def test_short_gap_merges_into_one_block_in_order():
    html = "<pre><code>x = [1,</code></pre><p>Page 2</p><pre><code>2, 3]</code></pre>"
    assert _bodies(merge_code_fragments(html)) == ["x = [1,\n2, 3]"]


def test_split_if_block_separated_by_empty_paragraph():
    html = "<pre><code>if (x) {</code></pre><p></p><pre><code>  return 1;</code></pre>"
    bodies = _bodies(merge_code_fragments(html))
    assert len(bodies) == 1
    assert bodies[0].index("if (x) {") < bodies[0].index("return 1;")
    assert bodies[0] == "if (x) {\n  return 1;"


def test_unrelated_complete_blocks_do_not_merge():
    c_block = "<pre><code>int main(void) {\n    int total = 0;\n    return 0;</code></pre>"
    py_block = "<pre><code>import os\nprint(os.getcwd())</code></pre>"
    html = c_block + LONG_UNRELATED_PARAGRAPH + py_block
    assert merge_code_fragments(html) == html
    assert len(scan_code_blocks(html)) == 2


def test_empty_body_never_merges():
    html = "<pre><code>  </code></pre><pre><code>x = 1</code></pre>"
    assert merge_code_fragments(html) == html


def test_chain_of_three_fragments_collapses():
    html = (
        "<pre><code>def f(a,</code></pre>"
        "<p>Page 1</p><pre><code>      b,</code></pre>"
        "<p>Page 2</p><pre><code>      c):</code></pre>"
    )
    bodies = _bodies(merge_code_fragments(html))
    assert len(bodies) == 1
    assert "def f(a," in bodies[0] and bodies[0].endswith("c):")


def test_merged_block_keeps_language_and_escapes_markup():
    html = (
        '<pre><code class="language-python">if a &lt; b:</code></pre>'
        "<pre><code>    pass</code></pre>"
    )
    out = merge_code_fragments(html)
    assert out == '<pre><code class="language-python">if a &lt; b:\n    pass</code></pre>'


def test_page_keyword_in_long_gap_triggers_merge():
    gap = "<p>Listing 4, continued from the previous one, printed at the top of the next sheet</p>"
    assert is_page_break_content("continued from the previous one")
    assert should_merge(gap, "a = 1;", "b = 2;")


def test_page_keywords_are_case_insensitive():
    assert is_page_break_content("PAGE 12")
    assert is_page_break_content("第 3 页")
    assert not is_page_break_content("a perfectly ordinary sentence")


def test_continuity_rules():
    assert has_code_continuity("total = a +", "b")
    assert has_code_continuity("x = 1;", ")")
    assert not has_code_continuity("x = 1;", "import os")


def test_similar_indentation_tolerance():
    assert has_similar_indentation("    x = 1", "      y = 2")
    assert not has_similar_indentation("x = 1", "          y = 2")
    assert not has_similar_indentation("", "y = 2")


def test_structural_continuity():
    assert is_continuous_structure("class Foo:", "pass")
    assert is_continuous_structure("x = 1;", "} else {")
    assert not is_continuous_structure("x = 1;", "import os")


def test_merge_code_separators():
    assert merge_code("a = 1;", "def g():") == "a = 1;\n\ndef g():"
    assert merge_code("call(a,", "b)") == "call(a,\nb)"
    assert merge_code("", "b") == "b"


def test_single_block_is_untouched():
    html = "<p>intro</p><pre><code>x = 1</code></pre>"
    assert merge_code_fragments(html) == html
