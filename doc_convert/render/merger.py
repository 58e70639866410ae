"""
Code-fragment merger: rejoin <pre><code> blocks that pagination split in two.

Word pagination cuts long code listings into several blocks separated by a page
break (and often a running header). For each adjacent pair the merger looks at
the text between them and at the two bodies, and collapses the pair into one
block when it looks like a single listing. The heuristics are pattern matching,
not parsing; false merges and missed merges are expected.

Pipeline:
  1. Scan all code blocks with their offsets
  2. Walk adjacent pairs (i, i+1) left to right
  3. On merge: splice one combined block over both spans, re-scan, stay at i
  4. Otherwise: advance to i+1
"""

import html as html_lib
import logging
import re
from dataclasses import dataclass

from doc_convert.render.languages import same_language
from doc_convert.render.text_utils import clean_code_content, decode_entities, strip_tags

log = logging.getLogger(__name__)

CODE_BLOCK_RE = re.compile(
    r"<pre\b[^>]*>\s*<code\b([^>]*)>(.*?)</code>\s*</pre>",
    re.IGNORECASE | re.DOTALL,
)
LANGUAGE_CLASS_RE = re.compile(r"""class\s*=\s*["'][^"']*?\blanguage-([\w+#.-]+)""", re.IGNORECASE)

# Gap (cleaned characters) at or below which two blocks are assumed to be one.
MAX_GAP_CHARS = 50
# Allowed indentation difference between the end of block i and the start of block i+1.
INDENT_TOLERANCE = 4

PAGE_BREAK_KEYWORDS: tuple[str, ...] = (
    "第", "页", "page", "章", "chapter", "节", "section",
    "续", "continued", "接上页", "接下页", "见下页", "转下页",
)

# Statement-leading keywords: a block starting with one of these is a fresh statement.
STATEMENT_KEYWORDS: tuple[str, ...] = (
    "def", "class", "if", "for", "while", "try", "with", "import", "from",
    "function", "const", "let", "var",
    "public", "private", "protected", "static", "final",
)
_KEYWORD_ALT = "|".join(STATEMENT_KEYWORDS)

# ---------------------------------------------------------------------------
# Rule tables
# ---------------------------------------------------------------------------

INCOMPLETE_END_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\{\s*$"), re.compile(r"\(\s*$"), re.compile(r"\[\s*$"),
    re.compile(r",\s*$"), re.compile(r"\+\s*$"), re.compile(r"-\s*$"),
    re.compile(r"\*\s*$"), re.compile(r"/\s*$"),
    re.compile(r"=\s*$"), re.compile(r":\s*$"), re.compile(r"\.\s*$"),
    re.compile(r"if\s*$"), re.compile(r"else\s*$"), re.compile(r"for\s*$"), re.compile(r"while\s*$"),
    re.compile(r"def\s*$"), re.compile(r"function\s*$"), re.compile(r"class\s*$"),
    re.compile(r"import\s*$"), re.compile(r"from\s*$"), re.compile(r"return\s*$"),
    re.compile(r"\\\s*$"),
)

CONTINUATION_START_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"^\s*\}"), re.compile(r"^\s*\)"), re.compile(r"^\s*\]"),
    re.compile(rf"^\s*(?!(?:{_KEYWORD_ALT})\b)[a-zA-Z_$][\w$]*"),
    re.compile(r"^\s*\d+"),
    re.compile(r"^\s*[\"']"),
    re.compile(r"^\s*[+\-*/=<>!&|]"),
    re.compile(r"^\s*(and|or|not|in|is)\b"),
    re.compile(r"^\s*(&&|\|\||!|==|!=|<=|>=)"),
)

OPENING_CONSTRUCT_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"class\s+\w+.*:\s*$"),
    re.compile(r"def\s+\w+.*:\s*$"),
    re.compile(r"function\s+\w+.*\{\s*$"),
    re.compile(r"if\s*\(.*\)\s*\{\s*$"),
    re.compile(r"for\s*\(.*\)\s*\{\s*$"),
    re.compile(r"while\s*\(.*\)\s*\{\s*$"),
    re.compile(r"try\s*\{\s*$"),
    re.compile(r"catch\s*\(.*\)\s*\{\s*$"),
    re.compile(r"else\s*\{\s*$"),
    re.compile(r"\{\s*$"),
)

CONTINUATION_CONSTRUCT_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"^\s*\}"),
    re.compile(r"^\s*else"),
    re.compile(r"^\s*elif"),
    re.compile(r"^\s*except"),
    re.compile(r"^\s*finally"),
    re.compile(r"^\s*catch"),
    re.compile(r"^\s*[a-zA-Z_$][\w$]*\s*[=:]"),
)

# Matched against the last line of the first block.
COMPLETE_END_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"[;}]\s*$"),
    re.compile(r"^\s*#.*$"),
    re.compile(r"^\s*//.*$"),
    re.compile(r"^\s*/\*.*\*/\s*$"),
    re.compile(r":\s*$"),
    re.compile(r"^\s*pass\s*$"),
    re.compile(r"^\s*return\b"),
    re.compile(r"^\s*break\s*$"),
    re.compile(r"^\s*continue\s*$"),
)

# Matched against the first line of the second block.
COMPLETE_START_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"^(def|class|if|for|while|try|with|import|from)\b"),
    re.compile(r"^(function|const|let|var|if|for|while|try|class)\b"),
    re.compile(r"^(public|private|protected|static|final)\b"),
    re.compile(r"^\w+\s*[=:]"),
    re.compile(r"^#"),
    re.compile(r"^//"),
    re.compile(r"^/\*"),
)


@dataclass
class CodeBlock:
    """One <pre><code> element found in the document, with its span."""

    raw_code: str
    language: str | None
    start: int
    end: int


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------

def scan_code_blocks(html: str) -> list[CodeBlock]:
    """Return every <pre><code> block in document order."""
    blocks: list[CodeBlock] = []
    for m in CODE_BLOCK_RE.finditer(html):
        lang_match = LANGUAGE_CLASS_RE.search(m.group(1))
        blocks.append(CodeBlock(
            raw_code=m.group(2),
            language=lang_match.group(1) if lang_match else None,
            start=m.start(),
            end=m.end(),
        ))
    return blocks


def clean_between(between: str) -> str:
    """Visible text between two blocks: tags and entities removed, whitespace collapsed."""
    text = decode_entities(strip_tags(between))
    return re.sub(r"\s+", " ", text).strip()


# ---------------------------------------------------------------------------
# Merge predicates
# ---------------------------------------------------------------------------

def is_page_break_content(text: str) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in PAGE_BREAK_KEYWORDS)


def has_code_continuity(code1: str, code2: str) -> bool:
    """Block 1 stops mid-construct, or block 2 starts with a continuation token."""
    if any(p.search(code1) for p in INCOMPLETE_END_PATTERNS):
        return True
    return any(p.search(code2) for p in CONTINUATION_START_PATTERNS)


def _indent_levels(code: str) -> list[int]:
    return [len(line) - len(line.lstrip()) for line in code.split("\n") if line.strip()]


def has_similar_indentation(code1: str, code2: str) -> bool:
    """Last non-blank indent of block 1 within INDENT_TOLERANCE of first non-blank indent of block 2."""
    indent1 = _indent_levels(code1)
    indent2 = _indent_levels(code2)
    if not indent1 or not indent2:
        return False
    return abs(indent1[-1] - indent2[0]) <= INDENT_TOLERANCE


def is_continuous_structure(code1: str, code2: str) -> bool:
    """Block 1 ends by opening a construct, or block 2 starts by continuing one."""
    if any(p.search(code1) for p in OPENING_CONSTRUCT_PATTERNS):
        return True
    return any(p.search(code2) for p in CONTINUATION_CONSTRUCT_PATTERNS)


def should_merge(between: str, code1: str, code2: str) -> bool:
    """
    Decide whether two adjacent code blocks are one listing split by pagination.

    between is the raw markup separating the blocks; code1/code2 are the inner
    HTML of each <code>. The first rule that fires wins.
    """
    clean1 = clean_code_content(code1)
    clean2 = clean_code_content(code2)
    if not clean1.strip() or not clean2.strip():
        return False

    gap = clean_between(between)
    if len(gap) <= MAX_GAP_CHARS:
        log.debug("merge: short gap (%d chars)", len(gap))
        return True
    if is_page_break_content(gap):
        log.debug("merge: gap looks like a page header/footer")
        return True
    if has_code_continuity(clean1, clean2):
        log.debug("merge: code continues across the split")
        return True
    if same_language(clean1, clean2) and has_similar_indentation(clean1, clean2):
        log.debug("merge: same language and similar indentation")
        return True
    if is_continuous_structure(clean1, clean2):
        log.debug("merge: open construct continues")
        return True
    return False


# ---------------------------------------------------------------------------
# Merging
# ---------------------------------------------------------------------------

def _last_line(code: str) -> str:
    lines = code.strip().split("\n")
    return lines[-1].strip() if lines else ""


def _first_line(code: str) -> str:
    return code.strip().split("\n")[0].strip()


def ends_with_complete_statement(code: str) -> bool:
    last = _last_line(code)
    return any(p.search(last) for p in COMPLETE_END_PATTERNS)


def starts_with_complete_statement(code: str) -> bool:
    first = _first_line(code)
    return any(p.search(first) for p in COMPLETE_START_PATTERNS)


def merge_code(code1: str, code2: str) -> str:
    """
    Concatenate two code bodies (inner HTML) into plain source text.

    Two complete statements are separated by a blank line; if either side is
    cut mid-statement the halves are rejoined on the next line.
    """
    clean1 = clean_code_content(code1)
    clean2 = clean_code_content(code2)
    if not clean1.strip():
        return clean2
    if not clean2.strip():
        return clean1

    if ends_with_complete_statement(clean1) and starts_with_complete_statement(clean2):
        separator = "\n\n"
    else:
        separator = "" if clean1.endswith("\n") else "\n"
    return clean1.rstrip("\n") + separator + clean2.lstrip("\n")


def _render_block(code: str, language: str | None) -> str:
    attrs = f' class="language-{language}"' if language else ""
    return f"<pre><code{attrs}>{html_lib.escape(code, quote=False)}</code></pre>"


def merge_code_fragments(html: str) -> str:
    """Merge adjacent code blocks judged to be one listing. Blocks judged independent are left alone."""
    blocks = scan_code_blocks(html)
    if len(blocks) < 2:
        return html

    log.debug("found %d code blocks, checking for pagination splits", len(blocks))
    merges = 0
    i = 0
    while i < len(blocks) - 1:
        first, second = blocks[i], blocks[i + 1]
        between = html[first.end:second.start]
        if not should_merge(between, first.raw_code, second.raw_code):
            i += 1
            continue

        merged = merge_code(first.raw_code, second.raw_code)
        html = html[:first.start] + _render_block(merged, first.language or second.language) + html[second.end:]
        merges += 1
        # Offsets after the splice are stale.
        blocks = scan_code_blocks(html)

    if merges:
        log.info("merged %d paginated code fragment(s)", merges)
    return html
