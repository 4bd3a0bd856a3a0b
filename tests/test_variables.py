"""
Tests for variable scanning - tests/test_variables.py
"""

import pytest

from templatekit.builder.variables import find_tokens, first_gap, next_ordinal, scan


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Hi {{1}}", [1]),
        ("{{3}} then {{1}} then {{2}}", [1, 2, 3]),
        ("{{2}} and {{2}} and {{1}}", [1, 2]),
        ("{{10}} {{9}}", [9, 10]),
        ("No variables here", []),
        ("", []),
        (None, []),
    ],
)
def test_scan(text, expected):
    assert scan(text) == expected


def test_scan_requires_exact_token_shape():
    """Whitespace inside braces or single braces are not variables."""
    assert scan("{{ 1 }} {1} {{a}} {{1 }} {{{2}}}") == [2]


def test_find_tokens_keeps_order_and_repeats():
    assert find_tokens("{{2}} x {{1}} y {{2}}") == ["{{2}}", "{{1}}", "{{2}}"]


def test_next_ordinal():
    assert next_ordinal("") == 1
    assert next_ordinal("Hi {{1}} and {{3}}") == 4


def test_first_gap():
    assert first_gap([]) is None
    assert first_gap([1, 2, 3]) is None
    assert first_gap([1, 3]) == 2
    assert first_gap([2]) == 1
    assert first_gap([0, 1]) == 1
