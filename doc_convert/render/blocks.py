"""
Block structural renderer: normalized HTML -> Markdown or fixed-width plain text.

Pipeline (each stage rewrites the output of the previous one):
  1. Pagination normalizer, then code-fragment merger
  2. Images
  3. Headings
  4. Tables (table layout engine)
  5. Code blocks (language classifier for untagged blocks)
  6. Inline code
  7. Lists
  8. Links
  9. Paragraphs, line breaks, bold/italic
 10. Residual tag stripping and entity decoding
 11. Blank-line collapse, trim, output ceilings

Rendered tables and code are parked in a stash behind placeholder tokens so
that later stages (tag stripping in particular) cannot eat "<" in source code
or misalign a box table. Unmatched or unbalanced markup falls through to the
residual strip; nothing here raises on bad HTML.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from doc_convert.errors import ImageWriteError
from doc_convert.models import RenderLimits, RenderWarning
from doc_convert.render.images import ImageStore, is_data_uri
from doc_convert.render.languages import detect_language
from doc_convert.render.limits import apply_limits
from doc_convert.render.merger import merge_code_fragments
from doc_convert.render.pagination import normalize_pagination
from doc_convert.render.tables import extract_table, render_markdown_table, render_text_table
from doc_convert.render.text_utils import (
    clean_code_content,
    collapse_blank_lines,
    decode_entities,
    display_width,
    inline_text,
    strip_tags,
)

log = logging.getLogger(__name__)

DEFAULT_IMAGE_ALT = "image"
CODE_LABEL = "Code:"
CODE_RULE = "─" * 40
HEADING_RULE_MAX = 50

_FLAGS = re.IGNORECASE | re.DOTALL

IMG_RE = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
ATTR_RE = re.compile(r"""\b(src|alt)\s*=\s*(?:"([^"]*)"|'([^']*)')""", re.IGNORECASE)
HEADING_RE = re.compile(r"<h([1-6])\b[^>]*>(.*?)</h[1-6]>", _FLAGS)
TABLE_RE = re.compile(r"<table\b[^>]*>(.*?)</table>", _FLAGS)
PRE_CODE_RE = re.compile(r"<pre\b[^>]*>\s*<code\b([^>]*)>(.*?)</code>\s*</pre>", _FLAGS)
LANGUAGE_CLASS_RE = re.compile(r"""class\s*=\s*["'][^"']*?\blanguage-([\w+#.-]+)""", re.IGNORECASE)
INLINE_CODE_RE = re.compile(r"<code\b[^>]*>(.*?)</code>", re.IGNORECASE)
UL_RE = re.compile(r"<ul\b[^>]*>(.*?)</ul>", _FLAGS)
OL_RE = re.compile(r"<ol\b[^>]*>(.*?)</ol>", _FLAGS)
LI_RE = re.compile(r"<li\b[^>]*>(.*?)</li>", _FLAGS)
LINK_RE = re.compile(r"""<a\b[^>]*?\bhref\s*=\s*(["'])(.*?)\1[^>]*>(.*?)</a>""", _FLAGS)

# Paragraphs, emphasis and breaks. Same markers for both targets.
INLINE_RULES: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"<p\b[^>]*>(.*?)</p>", _FLAGS), r"\1\n\n"),
    (re.compile(r"<strong\b[^>]*>(.*?)</strong>", _FLAGS), r"**\1**"),
    (re.compile(r"<b\b[^>]*>(.*?)</b>", _FLAGS), r"**\1**"),
    (re.compile(r"<em\b[^>]*>(.*?)</em>", _FLAGS), r"*\1*"),
    (re.compile(r"<i\b[^>]*>(.*?)</i>", _FLAGS), r"*\1*"),
    (re.compile(r"<br\s*/?>", re.IGNORECASE), "\n"),
)

_STASH_TOKEN = "\x00{}\x00"
_STASH_RE = re.compile(r"\x00(\d+)\x00")


@dataclass
class _RenderContext:
    markdown: bool
    warnings: list[RenderWarning]
    images: ImageStore | None = None
    include_images: bool = True
    default_alt: str = DEFAULT_IMAGE_ALT
    stash: list[str] = field(default_factory=list)

    def park(self, rendered: str) -> str:
        """Hold rendered output out of later stages; returns the placeholder."""
        self.stash.append(rendered)
        return _STASH_TOKEN.format(len(self.stash) - 1)

    def warn(self, kind: str, message: str) -> None:
        log.warning("%s: %s", kind, message)
        self.warnings.append(RenderWarning(kind=kind, message=message))


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

def _image_attrs(tag: str) -> tuple[str, str]:
    attrs = {m.group(1).lower(): m.group(2) if m.group(2) is not None else m.group(3) for m in ATTR_RE.finditer(tag)}
    return attrs.get("src", ""), attrs.get("alt", "")


def _render_images(html: str, ctx: _RenderContext) -> str:
    def repl(m: re.Match) -> str:
        if not ctx.include_images:
            return ""
        src, alt = _image_attrs(m.group(0))
        alt = alt.strip() or ctx.default_alt
        if not ctx.markdown:
            label = alt if alt == ctx.default_alt else f"{ctx.default_alt}: {alt}"
            return f"[{label}]\n\n"
        if is_data_uri(src):
            if ctx.images is None:
                ctx.warn("image_dropped", f"embedded image '{alt}' not saved (no image directory)")
                return f"[{alt}]\n\n"
            try:
                src = ctx.images.save_data_uri(src)
            except ImageWriteError as e:
                ctx.warn("image_write_failed", f"'{alt}': {e}")
                return f"[{alt}]\n\n"
        return f"![{alt}]({src})\n\n"

    return IMG_RE.sub(repl, html)


def _render_headings(html: str, ctx: _RenderContext) -> str:
    def repl(m: re.Match) -> str:
        level = int(m.group(1))
        text = strip_tags(m.group(2)).strip()
        if ctx.markdown:
            return f"{'#' * level} {text}\n\n"
        decoration = "=" if level == 1 else "-" if level == 2 else ""
        rule = ""
        if decoration:
            rule = "\n" + decoration * min(display_width(decode_entities(text)), HEADING_RULE_MAX)
        return f"\n\n{text}{rule}\n\n"

    return HEADING_RE.sub(repl, html)


def _render_tables(html: str, ctx: _RenderContext) -> str:
    def repl(m: re.Match) -> str:
        inner = m.group(1)
        if re.search(r"<table\b", inner, re.IGNORECASE):
            ctx.warn("nested_table", "nested table flattened into its outer table")
        model = extract_table(inner)
        if ctx.markdown:
            rendered = render_markdown_table(model)
            return "\n" + ctx.park(rendered) + "\n\n" if rendered else "\n"
        return "\n" + ctx.park(render_text_table(model)) + "\n\n"

    return TABLE_RE.sub(repl, html)


def _fence_for(code: str) -> str:
    longest = max((len(run) for run in re.findall(r"`+", code)), default=0)
    return "`" * max(3, longest + 1)


def _render_code_blocks(html: str, ctx: _RenderContext) -> str:
    def repl(m: re.Match) -> str:
        code = clean_code_content(m.group(2))
        if not code.strip():
            return ""
        if not ctx.markdown:
            return "\n" + ctx.park(f"{CODE_LABEL}\n{CODE_RULE}\n{code}\n{CODE_RULE}") + "\n\n"
        lang_match = LANGUAGE_CLASS_RE.search(m.group(1))
        language = lang_match.group(1) if lang_match else detect_language(code)
        fence = _fence_for(code)
        return ctx.park(f"{fence}{language}\n{code}\n{fence}") + "\n\n"

    return PRE_CODE_RE.sub(repl, html)


def _render_inline_code(html: str, ctx: _RenderContext) -> str:
    def repl(m: re.Match) -> str:
        return ctx.park("`" + decode_entities(strip_tags(m.group(1))) + "`")

    return INLINE_CODE_RE.sub(repl, html)


def _list_items(list_html: str, ordered: bool, ctx: _RenderContext) -> str:
    items = [inline_text(m.group(1)) for m in LI_RE.finditer(list_html)]
    if not items:
        return ""
    lines = []
    for index, item in enumerate(items, start=1):
        if ordered:
            prefix = f"{index}. "
        else:
            prefix = "- " if ctx.markdown else "• "
        lines.append(prefix + item if ctx.markdown else "  " + prefix + item)
    return "\n" + "\n".join(lines) + "\n\n"


def _render_lists(html: str, ctx: _RenderContext) -> str:
    html = UL_RE.sub(lambda m: _list_items(m.group(1), False, ctx), html)
    return OL_RE.sub(lambda m: _list_items(m.group(1), True, ctx), html)


def _render_links(html: str, ctx: _RenderContext) -> str:
    def repl(m: re.Match) -> str:
        url, text = m.group(2), m.group(3)
        if ctx.markdown:
            return f"[{text}]({url})"
        return f"{text} ({url})" if url and strip_tags(text).strip() != url else text

    return LINK_RE.sub(repl, html)


def _render_inline(html: str, ctx: _RenderContext) -> str:
    for pattern, replacement in INLINE_RULES:
        html = pattern.sub(replacement, html)
    return html


def _strip_residual(html: str, ctx: _RenderContext) -> str:
    return decode_entities(strip_tags(html))


Stage = Callable[[str, _RenderContext], str]

STAGES: tuple[tuple[str, Stage], ...] = (
    ("images", _render_images),
    ("headings", _render_headings),
    ("tables", _render_tables),
    ("code_blocks", _render_code_blocks),
    ("inline_code", _render_inline_code),
    ("lists", _render_lists),
    ("links", _render_links),
    ("inline", _render_inline),
    ("residual", _strip_residual),
)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def prepare_html(html: str) -> str:
    """Pagination normalizer followed by the code-fragment merger."""
    # NUL delimits stash tokens; input NULs become U+FFFD as in an HTML parser.
    html = html.replace("\x00", "\ufffd")
    return merge_code_fragments(normalize_pagination(html))


def _render(html: str, ctx: _RenderContext, limits: RenderLimits | None) -> str:
    text = prepare_html(html or "")
    for _name, stage in STAGES:
        text = stage(text, ctx)
    text = collapse_blank_lines(text)
    text = _STASH_RE.sub(lambda m: ctx.stash[int(m.group(1))], text)
    return apply_limits(text.strip(), limits, ctx.warnings)


def render_to_markdown(
    html: str,
    image_dir: Path | str | None = None,
    *,
    images: ImageStore | None = None,
    include_images: bool = True,
    default_alt: str = DEFAULT_IMAGE_ALT,
    limits: RenderLimits | None = None,
    warnings: list[RenderWarning] | None = None,
) -> str:
    """
    Render HTML (typically extracted from a Word document) as Markdown.

    Embedded data-URI images are written under image_dir (or through the given
    ImageStore) and linked relative to the Markdown file. Non-fatal problems are
    appended to warnings when a list is passed.
    """
    if images is None and image_dir is not None:
        images = ImageStore(Path(image_dir))
    ctx = _RenderContext(
        markdown=True,
        warnings=warnings if warnings is not None else [],
        images=images,
        include_images=include_images,
        default_alt=default_alt,
    )
    return _render(html, ctx, limits)


def render_to_plain_text(
    html: str,
    *,
    include_images: bool = True,
    default_alt: str = DEFAULT_IMAGE_ALT,
    limits: RenderLimits | None = None,
    warnings: list[RenderWarning] | None = None,
) -> str:
    """Render HTML as fixed-width plain text with box-drawn tables and ruled code sections."""
    ctx = _RenderContext(
        markdown=False,
        warnings=warnings if warnings is not None else [],
        include_images=include_images,
        default_alt=default_alt,
    )
    return _render(html, ctx, limits)
