"""
Pydantic schemas for the structural message preview.

The tree carries no styling: any surface (HTML, terminal, native UI) can
draw it.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SpanStyle = Literal["bold", "italic", "strikethrough", "monospace"]


class PreviewModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class TextSpan(PreviewModel):
    """Run of text with at most one inline style."""

    text: str
    style: Optional[SpanStyle] = None


class HeaderPreview(PreviewModel):
    format: str
    text: Optional[str] = None
    spans: List[TextSpan] = Field(default_factory=list)
    media_url: Optional[str] = None
    filename: Optional[str] = None
    placeholder: bool = Field(False, description="True when media has no sample URL yet")


class BodyPreview(PreviewModel):
    text: str
    spans: List[TextSpan] = Field(default_factory=list)


class FooterPreview(PreviewModel):
    text: str
    spans: List[TextSpan] = Field(default_factory=list)


class ButtonPreview(PreviewModel):
    type: str
    text: str
    url: Optional[str] = None
    phone_number: Optional[str] = None
    example: Optional[str] = None


class MessagePreview(PreviewModel):
    header: Optional[HeaderPreview] = None
    body: BodyPreview
    footer: Optional[FooterPreview] = None
    buttons: List[ButtonPreview] = Field(default_factory=list)


class PreviewValues(PreviewModel):
    """Live values for a send; falls back to the template's examples when omitted."""

    header: Optional[List[str]] = None
    body: Optional[List[str]] = None


__all__ = [
    "SpanStyle",
    "TextSpan",
    "HeaderPreview",
    "BodyPreview",
    "FooterPreview",
    "ButtonPreview",
    "MessagePreview",
    "PreviewValues",
]
