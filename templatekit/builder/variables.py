"""
Template variable scanning - templatekit/builder/variables.py

Variables are {{n}} tokens with no whitespace inside the braces.
"""

import re
from typing import List, Optional

VARIABLE_PATTERN = re.compile(r"\{\{(\d+)\}\}")


def find_tokens(text: Optional[str]) -> List[str]:
    """Every variable token in text, left to right, repeats included."""
    if not text:
        return []
    return [m.group(0) for m in VARIABLE_PATTERN.finditer(text)]


def scan(text: Optional[str]) -> List[int]:
    """
    Sorted, de-duplicated variable ordinals used in text.

    Example:
        >>> scan("Hi {{2}}, order {{1}} for {{2}}")
        [1, 2]
    """
    if not text:
        return []
    return sorted({int(m.group(1)) for m in VARIABLE_PATTERN.finditer(text)})


def next_ordinal(text: Optional[str]) -> int:
    """Ordinal for the next inserted variable."""
    ordinals = scan(text)
    return ordinals[-1] + 1 if ordinals else 1


def first_gap(ordinals: List[int]) -> Optional[int]:
    """
    First missing ordinal in a sorted ordinal list, or None when it is 1..k.

    Example:
        >>> first_gap([1, 3])
        2
    """
    for expected, actual in enumerate(ordinals, start=1):
        if actual != expected:
            return expected
    return None


__all__ = ["VARIABLE_PATTERN", "find_tokens", "scan", "next_ordinal", "first_gap"]
