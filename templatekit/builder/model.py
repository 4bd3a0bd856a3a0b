"""
Template Model - templatekit/builder/model.py

Mutation operations for a template under construction.

Each operation is a small Pydantic command; apply() turns
(template, operation) into a new Template, copying only the objects on the
mutated path so earlier snapshots stay intact (undo history shares
everything else).

Flow: UI event → operation → apply() → new Template → validate() / compose()
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from templatekit.builder.validator import validate
from templatekit.builder.variables import next_ordinal
from templatekit.core.config import settings
from templatekit.core.monitoring import log_event
from templatekit.schemas.templates import (
    Body,
    Button,
    ButtonSet,
    ButtonType,
    Footer,
    Header,
    Template,
    TemplateCategory,
)
from templatekit.schemas.validation import ValidationResult

MAX_BUTTONS = 10
BUTTON_FIELDS = ("type", "text", "url", "phone_number", "example")
_BUTTON_FIELD_ALIASES = {"phoneNumber": "phone_number"}


class TemplateMutationError(ValueError):
    """An operation that cannot be applied to the current template."""


# =============================================================================
# OPERATIONS
# =============================================================================


class Operation(BaseModel):
    model_config = ConfigDict(frozen=True)


class SetName(Operation):
    op: Literal["set_name"] = "set_name"
    value: str


class SetCategory(Operation):
    op: Literal["set_category"] = "set_category"
    value: str


class SetLanguage(Operation):
    op: Literal["set_language"] = "set_language"
    value: str


class SetHeaderEnabled(Operation):
    op: Literal["set_header_enabled"] = "set_header_enabled"
    value: bool


class SetHeaderFormat(Operation):
    op: Literal["set_header_format"] = "set_header_format"
    value: str


class SetHeaderText(Operation):
    op: Literal["set_header_text"] = "set_header_text"
    value: str


class SetHeaderExample(Operation):
    op: Literal["set_header_example"] = "set_header_example"
    value: Optional[str] = None


class SetHeaderMedia(Operation):
    op: Literal["set_header_media"] = "set_header_media"
    media_url: Optional[str] = None
    media_handle: Optional[str] = None
    filename: Optional[str] = None


class SetBodyText(Operation):
    op: Literal["set_body_text"] = "set_body_text"
    value: str


class SetBodyExample(Operation):
    op: Literal["set_body_example"] = "set_body_example"
    index: int = Field(..., ge=0)
    value: str


class SetFooterEnabled(Operation):
    op: Literal["set_footer_enabled"] = "set_footer_enabled"
    value: bool


class SetFooterText(Operation):
    op: Literal["set_footer_text"] = "set_footer_text"
    value: str


class SetButtonsEnabled(Operation):
    op: Literal["set_buttons_enabled"] = "set_buttons_enabled"
    value: bool


class AddButton(Operation):
    op: Literal["add_button"] = "add_button"
    type: str = ButtonType.QUICK_REPLY.value


class RemoveButton(Operation):
    op: Literal["remove_button"] = "remove_button"
    index: int


class SetButtonField(Operation):
    op: Literal["set_button_field"] = "set_button_field"
    index: int
    field: str
    value: Optional[str] = None


class InsertVariable(Operation):
    """Append the next {{n}} to the header or body text."""

    op: Literal["insert_variable"] = "insert_variable"
    target: Literal["header", "body"] = "body"


TemplateOperation = Annotated[
    Union[
        SetName,
        SetCategory,
        SetLanguage,
        SetHeaderEnabled,
        SetHeaderFormat,
        SetHeaderText,
        SetHeaderExample,
        SetHeaderMedia,
        SetBodyText,
        SetBodyExample,
        SetFooterEnabled,
        SetFooterText,
        SetButtonsEnabled,
        AddButton,
        RemoveButton,
        SetButtonField,
        InsertVariable,
    ],
    Field(discriminator="op"),
]

_operation_adapter = TypeAdapter(TemplateOperation)


def parse_operation(data: Dict[str, Any]) -> Operation:
    """
    Parse a UI event dict into its operation.

    Raises pydantic.ValidationError if "op" is unknown or fields are invalid.
    """
    return _operation_adapter.validate_python(data)


# =============================================================================
# REDUCER
# =============================================================================


def new_template(
    category: str = TemplateCategory.MARKETING.value,
    language: Optional[str] = None,
) -> Template:
    """Empty draft as the builder opens it."""
    return Template(
        category=category,
        language=language or settings.TEMPLATE_DEFAULT_LANGUAGE,
        header=Header(),
        body=Body(),
        footer=Footer(),
        buttons=ButtonSet(),
    )


def _header(template: Template) -> Header:
    return template.header or Header()


def _footer(template: Template) -> Footer:
    return template.footer or Footer()


def _buttons(template: Template) -> ButtonSet:
    return template.buttons or ButtonSet()


def _check_index(items: List[Any], index: int, what: str) -> None:
    if not 0 <= index < len(items):
        raise TemplateMutationError(
            f"{what} index {index} out of range (have {len(items)})"
        )


def _with_header(template: Template, **changes: Any) -> Template:
    return template.model_copy(update={"header": _header(template).model_copy(update=changes)})


def _with_body(template: Template, **changes: Any) -> Template:
    return template.model_copy(update={"body": template.body.model_copy(update=changes)})


def _with_footer(template: Template, **changes: Any) -> Template:
    return template.model_copy(update={"footer": _footer(template).model_copy(update=changes)})


def _with_buttons(template: Template, **changes: Any) -> Template:
    return template.model_copy(update={"buttons": _buttons(template).model_copy(update=changes)})


def apply(template: Template, operation: Operation) -> Template:
    """
    Apply one operation and return the new template.

    AddButton on a full list (10 buttons) returns the template unchanged.

    Raises:
        TemplateMutationError: On out-of-range indices, unknown button
            fields, or renaming a saved template
    """
    if isinstance(operation, SetName):
        if template.is_persisted and operation.value != template.name:
            raise TemplateMutationError("Template name cannot change after it is saved")
        return template.model_copy(update={"name": operation.value})
    elif isinstance(operation, SetCategory):
        return template.model_copy(update={"category": operation.value})
    elif isinstance(operation, SetLanguage):
        return template.model_copy(update={"language": operation.value})

    elif isinstance(operation, SetHeaderEnabled):
        return _with_header(template, enabled=operation.value)
    elif isinstance(operation, SetHeaderFormat):
        return _with_header(template, format=operation.value)
    elif isinstance(operation, SetHeaderText):
        return _with_header(template, text=operation.value)
    elif isinstance(operation, SetHeaderExample):
        return _with_header(template, example=operation.value)
    elif isinstance(operation, SetHeaderMedia):
        # Only the fields the caller passed; an upload handle survives a URL edit.
        changes = {
            name: getattr(operation, name)
            for name in ("media_url", "media_handle", "filename")
            if name in operation.model_fields_set
        }
        return _with_header(template, **changes)

    elif isinstance(operation, SetBodyText):
        return _with_body(template, text=operation.value)
    elif isinstance(operation, SetBodyExample):
        examples = list(template.body.examples)
        if operation.index >= len(examples):
            examples.extend([""] * (operation.index + 1 - len(examples)))
        examples[operation.index] = operation.value
        return _with_body(template, examples=examples)

    elif isinstance(operation, SetFooterEnabled):
        return _with_footer(template, enabled=operation.value)
    elif isinstance(operation, SetFooterText):
        return _with_footer(template, text=operation.value)

    elif isinstance(operation, SetButtonsEnabled):
        return _with_buttons(template, enabled=operation.value)
    elif isinstance(operation, AddButton):
        items = _buttons(template).items
        if len(items) >= MAX_BUTTONS:
            return template
        return _with_buttons(
            template, enabled=True, items=[*items, Button(type=operation.type)]
        )
    elif isinstance(operation, RemoveButton):
        items = _buttons(template).items
        _check_index(items, operation.index, "Button")
        remaining = [b for i, b in enumerate(items) if i != operation.index]
        if remaining:
            return _with_buttons(template, items=remaining)
        return _with_buttons(template, items=remaining, enabled=False)
    elif isinstance(operation, SetButtonField):
        items = list(_buttons(template).items)
        _check_index(items, operation.index, "Button")
        field = _BUTTON_FIELD_ALIASES.get(operation.field, operation.field)
        if field not in BUTTON_FIELDS:
            raise TemplateMutationError(f"Unknown button field: {operation.field}")
        items[operation.index] = items[operation.index].model_copy(
            update={field: operation.value}
        )
        return _with_buttons(template, items=items)

    elif isinstance(operation, InsertVariable):
        if operation.target == "header":
            text = _header(template).text
            return _with_header(template, text=f"{text}{{{{{next_ordinal(text)}}}}}")
        text = template.body.text
        return _with_body(template, text=f"{text}{{{{{next_ordinal(text)}}}}}")

    raise TemplateMutationError(f"Unknown operation: {type(operation).__name__}")


# =============================================================================
# DOTTED PATHS
# =============================================================================

_PATH_OPERATIONS = {
    "name": lambda v: SetName(value=v),
    "category": lambda v: SetCategory(value=v),
    "language": lambda v: SetLanguage(value=v),
    "header.enabled": lambda v: SetHeaderEnabled(value=v),
    "header.format": lambda v: SetHeaderFormat(value=v),
    "header.text": lambda v: SetHeaderText(value=v),
    "header.example": lambda v: SetHeaderExample(value=v),
    "header.mediaUrl": lambda v: SetHeaderMedia(media_url=v),
    "body.text": lambda v: SetBodyText(value=v),
    "footer.enabled": lambda v: SetFooterEnabled(value=v),
    "footer.text": lambda v: SetFooterText(value=v),
    "buttons.enabled": lambda v: SetButtonsEnabled(value=v),
}


def operation_for_path(path: str, value: Any) -> Operation:
    """
    Translate a dotted field path from the UI into an operation.

    Supports the depth-2 component paths plus body.examples.<i> and
    buttons.items.<i>.<field>.
    """
    if path in _PATH_OPERATIONS:
        return _PATH_OPERATIONS[path](value)

    parts = path.split(".")
    if len(parts) == 3 and parts[:2] == ["body", "examples"] and parts[2].isdigit():
        return SetBodyExample(index=int(parts[2]), value=value)
    if len(parts) == 4 and parts[:2] == ["buttons", "items"] and parts[2].isdigit():
        return SetButtonField(index=int(parts[2]), field=parts[3], value=value)

    raise TemplateMutationError(f"Unsupported template path: {path}")


def update(template: Template, path: str, value: Any) -> Template:
    """apply() addressed by dotted path, e.g. update(t, "body.text", "Hi {{1}}")."""
    return apply(template, operation_for_path(path, value))


# =============================================================================
# EDITOR SESSION
# =============================================================================


class TemplateModel:
    """
    The single mutable reference to a template being edited.

    Holds the current snapshot, its undo history and the validation result
    for the active step. The result is recomputed inside dispatch(), so
    nothing can observe a template without its matching result.
    """

    def __init__(self, template: Optional[Template] = None, step: int = 1):
        self._template = template or new_template()
        self._history: List[Template] = []
        self._step = step
        self._validation = validate(step, self._template)

    @property
    def template(self) -> Template:
        return self._template

    @property
    def validation(self) -> ValidationResult:
        return self._validation

    @property
    def history(self) -> List[Template]:
        return list(self._history)

    @property
    def step(self) -> int:
        return self._step

    def set_step(self, step: int) -> None:
        result = validate(step, self._template)
        self._step = step
        self._validation = result

    def mark_saved(self, template_id: Optional[str]) -> Template:
        """
        Record the remote id assigned by a save.

        Content stays as edited; the id is set on every snapshot so an undo
        never brings back an unsaved copy.
        """
        self._template = self._template.model_copy(update={"id": template_id})
        self._history = [t.model_copy(update={"id": template_id}) for t in self._history]
        self._validation = validate(self._step, self._template)
        return self._template

    def dispatch(self, operation: Operation) -> Template:
        template = apply(self._template, operation)
        validation = validate(self._step, template)
        self._history.append(self._template)
        self._template = template
        self._validation = validation
        log_event(
            "template_mutated",
            level="debug",
            op=getattr(operation, "op", type(operation).__name__),
            name=template.name,
            valid=validation.valid,
        )
        return template

    def update(self, path: str, value: Any) -> Template:
        return self.dispatch(operation_for_path(path, value))

    def can_undo(self) -> bool:
        return bool(self._history)

    def undo(self) -> Template:
        if not self._history:
            raise TemplateMutationError("Nothing to undo")
        self._template = self._history.pop()
        self._validation = validate(self._step, self._template)
        return self._template


__all__ = [
    "TemplateMutationError",
    "Operation",
    "SetName",
    "SetCategory",
    "SetLanguage",
    "SetHeaderEnabled",
    "SetHeaderFormat",
    "SetHeaderText",
    "SetHeaderExample",
    "SetHeaderMedia",
    "SetBodyText",
    "SetBodyExample",
    "SetFooterEnabled",
    "SetFooterText",
    "SetButtonsEnabled",
    "AddButton",
    "RemoveButton",
    "SetButtonField",
    "InsertVariable",
    "TemplateOperation",
    "parse_operation",
    "new_template",
    "apply",
    "operation_for_path",
    "update",
    "TemplateModel",
]
