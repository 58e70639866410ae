import pytest

from doc_convert.render.languages import (
    LANGUAGE_SIGNATURES,
    detect_language,
    matching_languages,
    same_language,
)


@pytest.mark.parametrize("code,expected", [
    ("def foo():\n    pass", "python"),
    ("import os", "python"),
    ("console.log('hi')", "javascript"),
    ("SELECT id FROM users WHERE id = 1", "sql"),
    ("echo $HOME", "bash"),
    ('{"name": 1}', "json"),
    ("<div>hello</div>", "html"),
    ("plain words only", ""),
])
def test_detect_language(code, expected):
    assert detect_language(code) == expected


def test_table_order_decides_ties():
    # "//" is a signature of javascript, java and csharp; the earliest wins
    assert matching_languages("// note") == ["javascript", "java", "csharp"]
    assert detect_language("// note") == "javascript"


def test_signature_table_is_ordered_data():
    names = [name for name, _ in LANGUAGE_SIGNATURES]
    assert names[0] == "python"
    assert len(names) == len(set(names))


def test_same_language_requires_a_match():
    assert same_language("def a():", "import sys")
    assert not same_language("plain", "words")
    assert not same_language("def a():", "SELECT 1 FROM t")
