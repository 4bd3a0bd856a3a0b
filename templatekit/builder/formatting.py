"""
WhatsApp text formatting - templatekit/builder/formatting.py

Variable substitution and inline styling for previews.

Flow: text → substitute() → format_text() → [TextSpan] → to_html() / to_plain()
"""

from html import escape
from typing import List, Optional, Sequence

from templatekit.builder.variables import VARIABLE_PATTERN
from templatekit.schemas.preview import TextSpan

# Checked in order at each position; the triple backtick must win over
# anything shorter.
DELIMITERS = (
    ("```", "monospace"),
    ("*", "bold"),
    ("_", "italic"),
    ("~", "strikethrough"),
)

HTML_TAGS = {
    "bold": "strong",
    "italic": "em",
    "strikethrough": "del",
    "monospace": "code",
}


def placeholder(position: int) -> str:
    """Stand-in for a variable slot with no value (position is 0-based)."""
    return f"[Variable {position + 1}]"


def substitute(text: Optional[str], examples: Optional[Sequence[str]] = None) -> str:
    """
    Replace variable tokens with sample values by position.

    The i-th token in the text takes examples[i], whatever its ordinal, so a
    repeated {{1}} consumes the next slot. Missing or empty values become
    "[Variable i+1]".

    Example:
        >>> substitute("Hi {{1}}, your order {{1}} shipped", ["A", "B"])
        'Hi A, your order B shipped'
    """
    if not text:
        return ""
    values = list(examples or [])
    position = 0

    def _replace(match) -> str:
        nonlocal position
        index = position
        position += 1
        if index < len(values) and values[index]:
            return str(values[index])
        return placeholder(index)

    return VARIABLE_PATTERN.sub(_replace, text)


def format_text(text: Optional[str]) -> List[TextSpan]:
    """
    Split text into styled spans: *bold*, _italic_, ~strike~, ```mono```.

    Single pass, no nesting: a span's content is kept literally, so
    "*a _b_ c*" is one bold span with the underscores intact. An
    unterminated or empty span leaves its delimiter as plain text.
    """
    if not text:
        return []

    spans: List[TextSpan] = []
    plain: List[str] = []
    i = 0

    def _flush() -> None:
        if plain:
            spans.append(TextSpan(text="".join(plain)))
            plain.clear()

    while i < len(text):
        for delimiter, style in DELIMITERS:
            if not text.startswith(delimiter, i):
                continue
            start = i + len(delimiter)
            end = text.find(delimiter, start)
            inner = text[start:end] if end != -1 else ""
            if not inner or (style == "monospace" and "`" in inner):
                plain.append(delimiter)
                i = start
            else:
                _flush()
                spans.append(TextSpan(text=inner, style=style))
                i = end + len(delimiter)
            break
        else:
            plain.append(text[i])
            i += 1

    _flush()
    return spans


def to_plain(spans: Sequence[TextSpan]) -> str:
    return "".join(span.text for span in spans)


def to_html(spans: Sequence[TextSpan]) -> str:
    """Render spans as escaped HTML with strong/em/del/code tags."""
    parts = []
    for span in spans:
        content = escape(span.text).replace("\n", "<br>")
        if span.style:
            tag = HTML_TAGS[span.style]
            parts.append(f"<{tag}>{content}</{tag}>")
        else:
            parts.append(content)
    return "".join(parts)


__all__ = ["placeholder", "substitute", "format_text", "to_plain", "to_html"]
