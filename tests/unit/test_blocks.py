import pytest

from doc_convert.models import RenderLimits
from doc_convert.render.blocks import CODE_RULE, render_to_markdown, render_to_plain_text
from doc_convert.render.images import ImageStore
from doc_convert.render.limits import TRUNCATION_MARKER

PNG_DATA_URI = "data:image/png;base64,iVBORw0KGgo="


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------

def test_heading_and_paragraph_round_trip():
    assert render_to_markdown("<h1>Title</h1><p>Hello <b>world</b></p>") == "# Title\n\nHello **world**"


def test_emphasis_and_line_breaks():
    out = render_to_markdown("<p><em>a</em> <strong>b</strong> <i>c</i><br/>next</p>")
    assert out == "*a* **b** *c*\nnext"


def test_untagged_python_block_gets_python_fence():
    out = render_to_markdown("<pre><code>def foo():\n    pass</code></pre>")
    assert out == "```python\ndef foo():\n    pass\n```"


def test_explicit_language_class_wins():
    out = render_to_markdown('<pre><code class="language-rust">fn main() {}</code></pre>')
    assert out.startswith("```rust\n")


def test_code_keeps_angle_brackets_and_entities():
    out = render_to_markdown("<pre><code>if a &lt; b and c &gt; d:\n    x = &quot;s&quot;</code></pre>")
    assert "if a < b and c > d:\n    x = \"s\"" in out


def test_fence_outgrows_backticks_in_code():
    out = render_to_markdown("<pre><code>x = ```</code></pre>")
    assert out.startswith("````")
    assert out.endswith("````")


def test_empty_code_block_is_dropped():
    assert render_to_markdown("<pre><code>   \n  </code></pre><p>after</p>") == "after"


def test_inline_code_is_not_stripped():
    assert render_to_markdown("<p>use <code>a &lt;b&gt;</code> here</p>") == "use `a <b>` here"


def test_lists():
    assert render_to_markdown("<ul><li>a</li><li><b>b</b></li></ul>") == "- a\n- b"
    assert render_to_markdown("<ol><li>one</li><li>two</li></ol>") == "1. one\n2. two"


def test_links():
    assert render_to_markdown('<p><a href="https://example.org">Example</a></p>') == "[Example](https://example.org)"


def test_entities_are_decoded():
    assert render_to_markdown("<p>Tom &amp; Jerry&nbsp;&quot;2&quot;</p>") == 'Tom & Jerry "2"'


def test_markdown_table():
    html = "<table><tr><th>A</th><th>B</th></tr><tr><td>1</td><td>2</td></tr></table>"
    assert render_to_markdown(html) == "| A | B |\n| --- | --- |\n| 1 | 2 |"


def test_nested_table_produces_warning():
    warnings = []
    html = "<table><tr><td>outer<table><tr><td>inner</td></tr></table></td></tr></table>"
    render_to_markdown(html, warnings=warnings)
    assert [w.kind for w in warnings] == ["nested_table"]


def test_pagination_split_code_is_rejoined():
    html = (
        "<pre><code>if (x) {</code></pre>"
        '<div style="page-break-before: always">Page 2</div><p></p>'
        "<pre><code>  return 1;\n}</code></pre>"
    )
    out = render_to_markdown(html)
    assert out.count("```") == 2
    assert "if (x) {\n  return 1;\n}" in out


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

def test_embedded_image_is_saved(tmp_path):
    out = render_to_markdown(f'<p><img src="{PNG_DATA_URI}" alt="Logo"></p>', tmp_path / "images")
    assert out == "![Logo](./images/image_001.png)"
    assert (tmp_path / "images" / "image_001.png").read_bytes().startswith(b"\x89PNG")


def test_image_names_come_from_the_store_sequence(tmp_path):
    store = ImageStore(tmp_path / "img", prefix="doc_image")
    html = f'<img src="{PNG_DATA_URI}"><img src="{PNG_DATA_URI}">'
    out = render_to_markdown(html, images=store)
    assert "![image](./img/doc_image_001.png)" in out
    assert "![image](./img/doc_image_002.png)" in out
    assert len(store.saved) == 2


def test_bad_image_degrades_to_placeholder(tmp_path):
    warnings = []
    out = render_to_markdown(
        '<p>before</p><img src="data:image/png;base64,@@@" alt="Chart"><p>after</p>',
        tmp_path / "images",
        warnings=warnings,
    )
    assert out == "before\n\n[Chart]\n\nafter"
    assert [w.kind for w in warnings] == ["image_write_failed"]
    assert not (tmp_path / "images").exists()


def test_external_image_passes_through():
    assert render_to_markdown('<img src="pics/a.png">') == "![image](pics/a.png)"


def test_images_can_be_dropped():
    assert render_to_markdown(f'<p>x</p><img src="{PNG_DATA_URI}">', include_images=False) == "x"


# ---------------------------------------------------------------------------
# Plain text
# ---------------------------------------------------------------------------

def test_plain_text_headings_are_underlined():
    out = render_to_plain_text("<h1>Title</h1><h2>名称</h2><h3>Deep</h3><p>body</p>")
    assert out == "Title\n=====\n\n名称\n----\n\nDeep\n\nbody"


def test_plain_text_code_box():
    out = render_to_plain_text("<pre><code>x = 1</code></pre>")
    assert out == f"Code:\n{CODE_RULE}\nx = 1\n{CODE_RULE}"


def test_plain_text_lists_links_and_images():
    html = (
        "<p>Items</p><ul><li>a</li><li>b</li></ul>"
        '<ol><li>first</li></ol><p><a href="https://x.org">X</a></p>'
        '<img src="a.png" alt="Diagram">'
    )
    out = render_to_plain_text(html)
    assert "Items\n\n  • a\n  • b" in out
    assert "  1. first" in out
    assert "X (https://x.org)" in out
    assert "[image: Diagram]" in out


def test_plain_text_table_is_boxed():
    out = render_to_plain_text("<table><tr><th>A</th><th>名称</th></tr><tr><td>1</td><td>李</td></tr></table>")
    assert "│ A │ 名称 │\n├───┼──────┤\n│ 1 │ 李   │" in out


# ---------------------------------------------------------------------------
# Ceilings
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("render", [render_to_markdown, render_to_plain_text])
def test_truncation_marker(render):
    warnings = []
    out = render("<p>" + "x" * 100 + "</p>", limits=RenderLimits(max_chars=10), warnings=warnings)
    assert out == "x" * 10 + "\n\n" + TRUNCATION_MARKER
    assert warnings[-1].kind == "truncated"


def test_malformed_html_never_raises():
    out = render_to_markdown("<p>unclosed <b>bold <table><tr><td>cell</p></pre>")
    assert "unclosed" in out


def test_nul_characters_in_input_are_replaced():
    assert render_to_markdown("<p>a\x005\x00b</p>") == "a\ufffd5\ufffdb"
    out = render_to_markdown("<p>x\x000\x00</p><table><tr><td>T</td></tr></table>")
    assert out.count("| T |") == 1
    assert "\x00" not in out
