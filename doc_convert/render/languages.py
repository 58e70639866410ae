"""
Guess the programming language of a code fragment from syntactic signatures.

The table is evaluated in declaration order and the first language with any
matching signature wins. This is a tie-break, not an accuracy claim: broad
signatures on early languages (python's trailing colon, for instance) shadow
later ones.
"""

import re

LANGUAGE_SIGNATURES: tuple[tuple[str, tuple[re.Pattern, ...]], ...] = (
    ("python", (
        re.compile(r"def\s+\w+"),
        re.compile(r"class\s+\w+"),
        re.compile(r"import\s+\w+"),
        re.compile(r"from\s+\w+"),
        re.compile(r"if\s+__name__"),
        re.compile(r"print\s*\("),
        re.compile(r":\s*$"),
        re.compile(r"^\s*#", re.MULTILINE),
    )),
    ("javascript", (
        re.compile(r"function\s+\w+"),
        re.compile(r"const\s+\w+"),
        re.compile(r"let\s+\w+"),
        re.compile(r"var\s+\w+"),
        re.compile(r"=>\s*{?"),
        re.compile(r"console\.log"),
        re.compile(r"//"),
        re.compile(r"/\*.*\*/"),
    )),
    ("java", (
        re.compile(r"public\s+class"),
        re.compile(r"private\s+\w+"),
        re.compile(r"public\s+static"),
        re.compile(r"import\s+java"),
        re.compile(r"System\.out"),
        re.compile(r"//"),
    )),
    ("csharp", (
        re.compile(r"public\s+class"),
        re.compile(r"private\s+\w+"),
        re.compile(r"using\s+System"),
        re.compile(r"namespace\s+\w+"),
        re.compile(r"Console\.WriteLine"),
        re.compile(r"//"),
    )),
    ("css", (
        re.compile(r"\w+\s*{"),
        re.compile(r":\s*[^;]+;"),
        re.compile(r"@media"),
        re.compile(r"\.[\w-]+"),
        re.compile(r"/\*.*\*/"),
        re.compile(r"#[\w-]+"),
    )),
    ("html", (
        re.compile(r"<\w+[^>]*>"),
        re.compile(r"</\w+>"),
        re.compile(r"<!DOCTYPE"),
        re.compile(r"<html"),
        re.compile(r"<!--.*-->"),
        re.compile(r"class\s*="),
    )),
    ("sql", (
        re.compile(r"SELECT\s+", re.IGNORECASE),
        re.compile(r"FROM\s+", re.IGNORECASE),
        re.compile(r"WHERE\s+", re.IGNORECASE),
        re.compile(r"INSERT\s+", re.IGNORECASE),
        re.compile(r"UPDATE\s+", re.IGNORECASE),
        re.compile(r"DELETE\s+", re.IGNORECASE),
        re.compile(r"CREATE\s+", re.IGNORECASE),
        re.compile(r"--"),
    )),
    ("bash", (
        re.compile(r"#!"),
        re.compile(r"\$\w+"),
        re.compile(r"echo\s+"),
        re.compile(r"cd\s+"),
        re.compile(r"ls\s+"),
        re.compile(r"grep\s+"),
    )),
    ("json", (
        re.compile(r"^\s*{"),
        re.compile(r"^\s*\["),
        re.compile(r'"[\w-]+"\s*:'),
        re.compile(r'^\s*"[\w-]+"'),
    )),
)


def matching_languages(code: str) -> list[str]:
    """All languages with at least one matching signature, in table order."""
    return [
        language
        for language, patterns in LANGUAGE_SIGNATURES
        if any(p.search(code) for p in patterns)
    ]


def detect_language(code: str) -> str:
    """Best-guess language tag for code, or "" when no signature matches."""
    for language, patterns in LANGUAGE_SIGNATURES:
        if any(p.search(code) for p in patterns):
            return language
    return ""


def same_language(code1: str, code2: str) -> bool:
    """True when both fragments classify to the same non-empty language."""
    lang1 = detect_language(code1)
    return bool(lang1) and lang1 == detect_language(code2)
