"""
Template Schemas - templatekit/schemas/templates.py

Pydantic models for the WhatsApp message template being built in the
dashboard: header, body, footer and buttons with numbered {{n}} variables.

Models are frozen. Mutations go through templatekit.builder.model, which
returns a new snapshot and shares every untouched sub-object.
"""

from __future__ import annotations

import enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel

from templatekit.builder.variables import scan

# =============================================================================
# ENUMS & CONSTANTS
# =============================================================================


class TemplateCategory(str, enum.Enum):
    MARKETING = "MARKETING"
    UTILITY = "UTILITY"
    AUTHENTICATION = "AUTHENTICATION"


class HeaderFormat(str, enum.Enum):
    TEXT = "TEXT"
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    DOCUMENT = "DOCUMENT"


MEDIA_FORMATS = (HeaderFormat.IMAGE, HeaderFormat.VIDEO, HeaderFormat.DOCUMENT)


class ButtonType(str, enum.Enum):
    QUICK_REPLY = "QUICK_REPLY"
    URL = "URL"
    PHONE_NUMBER = "PHONE_NUMBER"
    COPY_CODE = "COPY_CODE"


SUPPORTED_LANGUAGES: Dict[str, str] = {
    "en": "English",
    "en_US": "English (US)",
    "en_GB": "English (UK)",
    "es": "Spanish",
    "pt_BR": "Portuguese (Brazil)",
    "hi": "Hindi",
    "ar": "Arabic",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "id": "Indonesian",
    "ms": "Malay",
    "th": "Thai",
    "vi": "Vietnamese",
    "zh_CN": "Chinese (Simplified)",
    "ja": "Japanese",
    "ko": "Korean",
}

# =============================================================================
# BASE
# =============================================================================


class TemplatePart(BaseModel):
    """
    Base for every template model.

    Explicit nulls from the UI are dropped before validation so the field
    default applies: a missing nested field is simply absent/empty.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# =============================================================================
# COMPONENTS
# =============================================================================


class Header(TemplatePart):
    """Optional header: a short text line or a media attachment."""

    enabled: bool = False
    format: str = Field(HeaderFormat.TEXT.value, description="TEXT, IMAGE, VIDEO or DOCUMENT")
    text: str = Field("", description="Header text (TEXT format only)")
    example: Optional[str] = Field(None, description="Sample value for the header variable")
    media_url: Optional[str] = Field(None, description="Public HTTPS URL of the media sample")
    media_handle: Optional[str] = Field(None, description="Meta upload handle of the media sample")
    filename: Optional[str] = Field(None, description="Document name shown in preview")


class Body(TemplatePart):
    """Main message text. Always present."""

    text: str = ""
    examples: List[str] = Field(
        default_factory=list, description="One sample value per variable slot"
    )

    @computed_field
    @property
    def variables(self) -> List[int]:
        return scan(self.text)

    @computed_field(alias="variableCount")
    @property
    def variable_count(self) -> int:
        return len(self.variables)


class Footer(TemplatePart):
    enabled: bool = False
    text: str = ""


class Button(TemplatePart):
    """Call-to-action or quick reply button."""

    type: str = ButtonType.QUICK_REPLY.value
    text: str = Field("", description="Button label")
    url: Optional[str] = None
    phone_number: Optional[str] = None
    example: Optional[str] = Field(None, description="Sample code for COPY_CODE buttons")


class ButtonSet(TemplatePart):
    enabled: bool = False
    items: List[Button] = Field(default_factory=list)


# =============================================================================
# TEMPLATE
# =============================================================================


class Template(TemplatePart):
    """A WhatsApp message template definition."""

    id: Optional[str] = Field(None, description="Remote ID once the draft is saved")
    name: str = Field("", description="Template name (lowercase, digits, underscores)")
    language: str = ""
    category: str = ""
    header: Optional[Header] = None
    body: Body = Field(default_factory=Body)
    footer: Optional[Footer] = None
    buttons: Optional[ButtonSet] = None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def to_json(self) -> Dict[str, Any]:
        """JSON-ready dict with the UI's camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TemplateSubmission(BaseModel):
    """Payload accepted by the messaging platform's template endpoint."""

    name: str
    language: str
    category: str
    components: List[Dict[str, Any]]


__all__ = [
    "TemplateCategory",
    "HeaderFormat",
    "ButtonType",
    "MEDIA_FORMATS",
    "SUPPORTED_LANGUAGES",
    "TemplatePart",
    "Header",
    "Body",
    "Footer",
    "Button",
    "ButtonSet",
    "Template",
    "TemplateSubmission",
]
