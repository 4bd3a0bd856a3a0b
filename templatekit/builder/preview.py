"""
Preview Composer - templatekit/builder/preview.py

Builds the structural preview of a template as WhatsApp would show it.
Works on incomplete drafts: missing media becomes a placeholder block and
missing values become "[Variable n]".

Flow: Template (+ live values) → substitute() → format_text() → MessagePreview
"""

from typing import List, Optional

from templatekit.builder.formatting import format_text, substitute
from templatekit.schemas.preview import (
    BodyPreview,
    ButtonPreview,
    FooterPreview,
    HeaderPreview,
    MessagePreview,
    PreviewValues,
)
from templatekit.schemas.templates import MEDIA_FORMATS, Header, HeaderFormat, Template


def _header_values(header: Header, values: Optional[PreviewValues]) -> List[str]:
    if values is not None and values.header is not None:
        return values.header
    return [header.example] if header.example else []


def compose_header(
    header: Optional[Header], values: Optional[PreviewValues] = None
) -> Optional[HeaderPreview]:
    if header is None or not header.enabled:
        return None

    if header.format == HeaderFormat.TEXT:
        if not header.text:
            return None
        text = substitute(header.text, _header_values(header, values))
        return HeaderPreview(format=header.format, text=text, spans=format_text(text))

    if header.format not in [f.value for f in MEDIA_FORMATS]:
        return None

    filename = header.filename
    if header.format == HeaderFormat.DOCUMENT and not filename:
        filename = "document.pdf"
    return HeaderPreview(
        format=header.format,
        media_url=header.media_url,
        filename=filename,
        placeholder=not header.media_url,
    )


def compose(template: Template, values: Optional[PreviewValues] = None) -> MessagePreview:
    """
    Compose the preview tree for a template.

    Args:
        template: Template being edited (may be incomplete)
        values: Live values for a send; template examples are used otherwise

    Returns:
        MessagePreview with header/body/footer text already substituted and
        split into styled spans
    """
    body_values = (
        values.body if values is not None and values.body is not None else template.body.examples
    )
    body_text = substitute(template.body.text, body_values)

    footer = None
    if template.footer is not None and template.footer.enabled and template.footer.text:
        footer = FooterPreview(
            text=template.footer.text, spans=format_text(template.footer.text)
        )

    buttons: List[ButtonPreview] = []
    if template.buttons is not None and template.buttons.enabled:
        buttons = [
            ButtonPreview(
                type=b.type,
                text=b.text,
                url=b.url,
                phone_number=b.phone_number,
                example=b.example,
            )
            for b in template.buttons.items
        ]

    return MessagePreview(
        header=compose_header(template.header, values),
        body=BodyPreview(text=body_text, spans=format_text(body_text)),
        footer=footer,
        buttons=buttons,
    )


__all__ = ["compose", "compose_header"]
