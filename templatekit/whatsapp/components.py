"""
Template Components Serializer - templatekit/whatsapp/components.py

Converts a Template to the WhatsApp template submission shape and back.
Simple, single-file approach - easy to debug and maintain.

Flow: Template → build_components() → [HEADER, BODY, FOOTER, BUTTONS] → API
"""

from typing import Any, Dict, List, Optional

from templatekit.builder.variables import find_tokens
from templatekit.schemas.templates import (
    MEDIA_FORMATS,
    Body,
    Button,
    ButtonSet,
    ButtonType,
    Footer,
    Header,
    HeaderFormat,
    Template,
    TemplateSubmission,
)

# =============================================================================
# BUILD FUNCTIONS
# =============================================================================


def build_header(header: Optional[Header]) -> Optional[Dict[str, Any]]:
    """HEADER component, or None when the header is off."""
    if header is None or not header.enabled:
        return None

    component: Dict[str, Any] = {"type": "HEADER", "format": header.format}
    if header.format == HeaderFormat.TEXT:
        component["text"] = header.text
        if find_tokens(header.text) and header.example:
            component["example"] = {"header_text": [header.example]}
    elif header.format in [f.value for f in MEDIA_FORMATS]:
        # One sample slot on the wire: the handle wins, so a URL kept next
        # to a handle does not come back from parse_components().
        sample = header.media_handle or header.media_url
        if sample:
            component["example"] = {"header_handle": [sample]}
    return component


def build_body(body: Body) -> Dict[str, Any]:
    """BODY component (always present)."""
    component: Dict[str, Any] = {"type": "BODY", "text": body.text}
    if find_tokens(body.text) and body.examples:
        component["example"] = {"body_text": [list(body.examples)]}
    return component


def build_footer(footer: Optional[Footer]) -> Optional[Dict[str, Any]]:
    if footer is None or not footer.enabled or not footer.text:
        return None
    return {"type": "FOOTER", "text": footer.text}


def build_button(button: Button) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"type": button.type, "text": button.text}
    if button.type == ButtonType.URL:
        payload["url"] = button.url
    elif button.type == ButtonType.PHONE_NUMBER:
        payload["phone_number"] = button.phone_number
    elif button.type == ButtonType.COPY_CODE and button.example:
        payload["example"] = button.example
    return payload


def build_buttons(buttons: Optional[ButtonSet]) -> Optional[Dict[str, Any]]:
    if buttons is None or not buttons.enabled or not buttons.items:
        return None
    return {"type": "BUTTONS", "buttons": [build_button(b) for b in buttons.items]}


# =============================================================================
# MAIN BUILD FUNCTIONS
# =============================================================================


def build_components(template: Template) -> List[Dict[str, Any]]:
    """
    Convert a template to its components list, in HEADER, BODY, FOOTER,
    BUTTONS order. Disabled parts are omitted.

    Example:
        >>> t = Template(name="hi", language="en", category="UTILITY",
        ...              body={"text": "Hi {{1}}", "examples": ["Ana"]})
        >>> build_components(t)
        [{'type': 'BODY', 'text': 'Hi {{1}}', 'example': {'body_text': [['Ana']]}}]
    """
    components = [
        build_header(template.header),
        build_body(template.body),
        build_footer(template.footer),
        build_buttons(template.buttons),
    ]
    return [c for c in components if c is not None]


def build_submission(template: Template) -> TemplateSubmission:
    return TemplateSubmission(
        name=template.name,
        language=template.language,
        category=template.category,
        components=build_components(template),
    )


# =============================================================================
# PARSE FUNCTIONS
# =============================================================================


def _parse_header(component: Dict[str, Any]) -> Header:
    fmt = component.get("format", HeaderFormat.TEXT.value)
    example = component.get("example") or {}
    if fmt == HeaderFormat.TEXT:
        samples = example.get("header_text") or [None]
        return Header(enabled=True, format=fmt, text=component.get("text", ""), example=samples[0])

    samples = example.get("header_handle") or [None]
    sample = samples[0]
    if sample and str(sample).startswith(("https://", "http://")):
        return Header(enabled=True, format=fmt, media_url=sample)
    return Header(enabled=True, format=fmt, media_handle=sample)


def _parse_body(component: Dict[str, Any]) -> Body:
    example = component.get("example") or {}
    rows = example.get("body_text") or [[]]
    return Body(text=component.get("text", ""), examples=[str(v) for v in rows[0]])


def _parse_button(raw: Dict[str, Any]) -> Button:
    example = raw.get("example")
    if isinstance(example, list):
        example = example[0] if example else None
    return Button(
        type=raw.get("type", ButtonType.QUICK_REPLY.value),
        text=raw.get("text", ""),
        url=raw.get("url"),
        phone_number=raw.get("phone_number"),
        example=example,
    )


def parse_components(
    components: List[Dict[str, Any]],
    name: str = "",
    language: str = "",
    category: str = "",
    template_id: Optional[str] = None,
) -> Template:
    """
    Inverse of build_components(): rebuild a Template from components.

    Parts that are not in the list come back disabled.
    """
    header = Header()
    body = Body()
    footer = Footer()
    buttons = ButtonSet()

    for component in components:
        kind = str(component.get("type", "")).upper()
        if kind == "HEADER":
            header = _parse_header(component)
        elif kind == "BODY":
            body = _parse_body(component)
        elif kind == "FOOTER":
            footer = Footer(enabled=True, text=component.get("text", ""))
        elif kind == "BUTTONS":
            items = [_parse_button(b) for b in component.get("buttons", [])]
            buttons = ButtonSet(enabled=bool(items), items=items)

    return Template(
        id=template_id,
        name=name,
        language=language,
        category=category,
        header=header,
        body=body,
        footer=footer,
        buttons=buttons,
    )


def parse_submission(submission: TemplateSubmission) -> Template:
    return parse_components(
        submission.components,
        name=submission.name,
        language=submission.language,
        category=submission.category,
    )


__all__ = [
    "build_header",
    "build_body",
    "build_footer",
    "build_button",
    "build_buttons",
    "build_components",
    "build_submission",
    "parse_components",
    "parse_submission",
]
