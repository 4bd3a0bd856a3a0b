"""
Template Validator - templatekit/builder/validator.py

Checks a template against WhatsApp Business Platform constraints, one wizard
step at a time. Every rule runs and every violation is collected; problems are
returned as data (ValidationResult), never raised.

Steps:
    1 Details  - name, category, language
    2 Content  - header, body, footer, category content rules
    3 Buttons  - per-button fields and type cardinality
    4 Review   - steps 1-3 together, the full pre-submit check
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Tuple, Union

from pydantic import ValidationError
from pydantic.alias_generators import to_camel, to_snake

from templatekit.builder.variables import find_tokens, first_gap, scan
from templatekit.schemas.templates import (
    MEDIA_FORMATS,
    SUPPORTED_LANGUAGES,
    ButtonSet,
    ButtonType,
    Footer,
    Header,
    HeaderFormat,
    Template,
    TemplateCategory,
)
from templatekit.schemas.validation import ValidationIssue, ValidationResult

# =============================================================================
# LIMITS & PATTERNS
# =============================================================================

NAME_MAX_LENGTH = 512
HEADER_TEXT_MAX_LENGTH = 60
HEADER_VARIABLES_MAX = 1
BODY_MAX_LENGTH = 1024
FOOTER_MAX_LENGTH = 60
BUTTON_TEXT_MAX_LENGTH = 25
BUTTONS_MAX_COUNT = 10
URL_BUTTONS_MAX = 2
PHONE_BUTTONS_MAX = 1

NAME_PATTERN = re.compile(r"^[a-z0-9_]+$")
PHONE_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")
RESERVED_NAME_PREFIXES = ("test_", "sample_", "example_")

# Content Meta commonly rejects. Reported as warnings only.
DISCOURAGED_CONTENT = (
    (
        re.compile(r"\b(free|win|winner|prize|congratulations)\b", re.IGNORECASE),
        "Avoid spam-triggering words",
    ),
    (re.compile(r"https?://bit\.ly", re.IGNORECASE), "URL shorteners are not recommended"),
    (
        re.compile(r"\b(click here|act now|limited time)\b", re.IGNORECASE),
        "Avoid urgency phrases that may trigger rejection",
    ),
)

STEPS = (1, 2, 3, 4)
REVIEW_STEP = 4

# =============================================================================
# CATEGORY RULES
# =============================================================================


@dataclass(frozen=True)
class CategoryRules:
    """Platform restrictions that depend on the template category."""

    header_allowed: bool = True
    requires_otp: bool = False
    allowed_button_types: Tuple[str, ...] = tuple(t.value for t in ButtonType)
    max_buttons: int = BUTTONS_MAX_COUNT


CATEGORY_RULES: Dict[str, CategoryRules] = {
    TemplateCategory.MARKETING.value: CategoryRules(),
    TemplateCategory.UTILITY.value: CategoryRules(),
    TemplateCategory.AUTHENTICATION.value: CategoryRules(
        header_allowed=False,
        requires_otp=True,
        allowed_button_types=(ButtonType.COPY_CODE.value, ButtonType.URL.value),
        max_buttons=1,
    ),
}

# Unknown or missing category: only the generic platform limits apply.
DEFAULT_RULES = CategoryRules()


def rules_for(category: Optional[str]) -> CategoryRules:
    return CATEGORY_RULES.get(category or "", DEFAULT_RULES)


# =============================================================================
# COLLECTOR
# =============================================================================


class _Issues:
    """Accumulates errors and warnings for one validation run."""

    def __init__(self) -> None:
        self.errors: List[ValidationIssue] = []
        self.warnings: List[ValidationIssue] = []

    def error(self, field: str, message: str) -> None:
        self.errors.append(ValidationIssue(field=field, message=message))

    def warning(self, field: str, message: str) -> None:
        self.warnings.append(ValidationIssue(field=field, message=message))

    def result(self) -> ValidationResult:
        return ValidationResult(
            valid=not self.errors,
            errors=list(self.errors),
            warnings=list(self.warnings),
        )


# =============================================================================
# STEP 1: DETAILS
# =============================================================================


def _check_details(template: Template, issues: _Issues) -> None:
    name = template.name
    if not name:
        issues.error("name", "Template name is required")
    else:
        if not NAME_PATTERN.match(name):
            issues.error("name", "Only lowercase letters, numbers, and underscores allowed")
        if len(name) > NAME_MAX_LENGTH:
            issues.error("name", f"Template name cannot exceed {NAME_MAX_LENGTH} characters")
        if name.startswith(RESERVED_NAME_PREFIXES):
            issues.warning(
                "name",
                "Names starting with test_, sample_ or example_ are often rejected",
            )

    valid_categories = [c.value for c in TemplateCategory]
    if not template.category:
        issues.error("category", "Category is required")
    elif template.category not in valid_categories:
        issues.error(
            "category",
            f"Invalid category: {template.category}. Must be one of: {', '.join(valid_categories)}",
        )

    if not template.language:
        issues.error("language", "Language is required")
    elif template.language not in SUPPORTED_LANGUAGES:
        issues.error("language", f"Unsupported language: {template.language}")


# =============================================================================
# STEP 2: CONTENT
# =============================================================================


def _check_header(header: Optional[Header], issues: _Issues) -> None:
    if header is None or not header.enabled:
        return

    if header.format == HeaderFormat.TEXT:
        if not header.text:
            issues.error("header.text", "Header text is required")
            return
        if len(header.text) > HEADER_TEXT_MAX_LENGTH:
            issues.error(
                "header.text",
                f"Header exceeds {HEADER_TEXT_MAX_LENGTH} characters",
            )
        tokens = find_tokens(header.text)
        if len(tokens) > HEADER_VARIABLES_MAX:
            issues.error(
                "header.text",
                f"Header can contain at most {HEADER_VARIABLES_MAX} variable",
            )
        elif tokens and scan(header.text) != [1]:
            issues.error("header.text", "Header variable must be {{1}}")
        if tokens and not header.example:
            issues.error("header.example", "Example value is required for the header variable")

    elif header.format in [f.value for f in MEDIA_FORMATS]:
        if not header.media_url and not header.media_handle:
            issues.warning(
                "header.media",
                f"A sample {header.format.lower()} is required before submission",
            )
        if header.media_url and not header.media_url.startswith("https://"):
            issues.error("header.mediaUrl", "Media URL must be a valid HTTPS URL")

    else:
        issues.error(
            "header.format",
            f"Invalid header format. Must be one of: {', '.join(f.value for f in HeaderFormat)}",
        )


def _check_body(template: Template, issues: _Issues) -> None:
    body = template.body
    text = body.text
    if not text or not text.strip():
        issues.error("body.text", "Body text is required")
        return

    if len(text) > BODY_MAX_LENGTH:
        issues.error("body.text", f"Body exceeds {BODY_MAX_LENGTH} characters")

    ordinals = scan(text)
    gap = first_gap(ordinals)
    if gap is not None:
        found = ", ".join(f"{{{{{n}}}}}" for n in ordinals)
        issues.error(
            "body.text",
            f"Variables must be sequential starting from {{{{1}}}}: "
            f"{{{{{gap}}}}} is missing (found {found})",
        )

    missing = len(ordinals) - len(body.examples)
    if missing > 0:
        issues.error(
            "body.examples",
            f"Provide example values for all {len(ordinals)} variables ({missing} missing)",
        )

    for pattern, message in DISCOURAGED_CONTENT:
        if pattern.search(text):
            issues.warning("body.text", message)


def _check_footer(footer: Optional[Footer], issues: _Issues) -> None:
    if footer is None or not footer.enabled:
        return
    if len(footer.text) > FOOTER_MAX_LENGTH:
        issues.error("footer.text", f"Footer exceeds {FOOTER_MAX_LENGTH} characters")
    if find_tokens(footer.text):
        issues.error("footer.text", "Variables are not allowed in the footer")


def _check_category_content(template: Template, issues: _Issues) -> None:
    rules = rules_for(template.category)
    header_enabled = template.header is not None and template.header.enabled
    if header_enabled and not rules.header_allowed:
        issues.error("header", f"{template.category.title()} templates cannot have headers")
    if rules.requires_otp and 1 not in scan(template.body.text):
        issues.error("body.text", f"{template.category.title()} templates must include {{{{1}}}} for the code")


def _check_content(template: Template, issues: _Issues) -> None:
    _check_header(template.header, issues)
    _check_body(template, issues)
    _check_footer(template.footer, issues)
    _check_category_content(template, issues)


# =============================================================================
# STEP 3: BUTTONS
# =============================================================================


def _check_buttons(template: Template, issues: _Issues) -> None:
    buttons: Optional[ButtonSet] = template.buttons
    if buttons is None or not buttons.enabled or not buttons.items:
        return

    rules = rules_for(template.category)
    valid_types = [t.value for t in ButtonType]
    counts: Dict[str, int] = {t: 0 for t in valid_types}

    for i, button in enumerate(buttons.items):
        prefix = f"buttons.items[{i}]"
        label = f"Button {i + 1}"

        if button.type not in valid_types:
            issues.error(f"{prefix}.type", f"{label} has an unknown type: {button.type}")
        else:
            counts[button.type] += 1
            if button.type not in rules.allowed_button_types:
                issues.error(
                    f"{prefix}.type",
                    f"{label}: {button.type} buttons are not allowed for {template.category} templates",
                )

        if not button.text or not button.text.strip():
            issues.error(f"{prefix}.text", f"{label} text is required")
        elif len(button.text) > BUTTON_TEXT_MAX_LENGTH:
            issues.error(
                f"{prefix}.text",
                f"{label} text exceeds {BUTTON_TEXT_MAX_LENGTH} chars",
            )

        if button.type == ButtonType.URL:
            if not button.url:
                issues.error(f"{prefix}.url", f"{label} requires a URL")
            elif not button.url.startswith("https://"):
                issues.error(f"{prefix}.url", f"{label} requires a valid HTTPS URL")

        elif button.type == ButtonType.PHONE_NUMBER:
            if not button.phone_number:
                issues.error(f"{prefix}.phoneNumber", f"{label} requires a phone number")
            elif not PHONE_PATTERN.match(re.sub(r"[\s\-()]", "", button.phone_number)):
                issues.error(
                    f"{prefix}.phoneNumber",
                    f"{label} requires phone in international format (+...)",
                )

        elif button.type == ButtonType.COPY_CODE and not button.example:
            issues.warning(f"{prefix}.example", f"{label} should include an example code")

    if len(buttons.items) > BUTTONS_MAX_COUNT:
        issues.error("buttons", f"Maximum {BUTTONS_MAX_COUNT} buttons allowed")
    elif len(buttons.items) > rules.max_buttons:
        issues.error(
            "buttons",
            f"Maximum {rules.max_buttons} button allowed for {template.category} templates",
        )
    if counts[ButtonType.URL.value] > URL_BUTTONS_MAX:
        issues.error("buttons", f"Maximum {URL_BUTTONS_MAX} URL buttons allowed")
    if counts[ButtonType.PHONE_NUMBER.value] > PHONE_BUTTONS_MAX:
        issues.error("buttons", f"Maximum {PHONE_BUTTONS_MAX} phone button allowed")

    call_to_action = counts[ButtonType.URL.value] + counts[ButtonType.PHONE_NUMBER.value]
    if counts[ButtonType.QUICK_REPLY.value] and call_to_action:
        issues.warning(
            "buttons",
            "Mixing quick reply with URL/phone buttons may affect user experience",
        )


# =============================================================================
# ENTRY POINTS
# =============================================================================

_STEP_CHECKS = {
    1: (_check_details,),
    2: (_check_content,),
    3: (_check_buttons,),
    4: (_check_details, _check_content, _check_buttons),
}


# Top-level fields each step is responsible for.
_STEP_FIELDS = {
    1: ("id", "name", "category", "language"),
    2: ("header", "body", "footer"),
    3: ("buttons",),
}
_KNOWN_FIELDS = tuple(f for fields in _STEP_FIELDS.values() for f in fields)

# Attempts at dropping bad values before giving up on the input.
_COERCE_PASSES = 3
_DROPPED = object()


def _field_name(loc: Tuple[Any, ...]) -> str:
    """("buttons", "items", 0, "phone_number") -> "buttons.items[0].phoneNumber"."""
    field = ""
    for part in loc:
        if isinstance(part, int):
            field += f"[{part}]"
            continue
        name = to_camel(part) if "_" in str(part) else str(part)
        field += f".{name}" if field else name
    return field or "template"


def _key_for(container: MutableMapping, part: Any) -> Any:
    if part in container:
        return part
    snake = to_snake(str(part))
    return snake if snake in container else None


def _drop(data: MutableMapping, loc: Tuple[Any, ...]) -> bool:
    """Remove the value at loc; list items are marked and stripped later."""
    parent: Any = data
    for part in loc[:-1]:
        if isinstance(parent, MutableMapping):
            key = _key_for(parent, part)
            if key is None:
                return False
            parent = parent[key]
        elif isinstance(parent, list) and isinstance(part, int) and 0 <= part < len(parent):
            parent = parent[part]
        else:
            return False

    last = loc[-1]
    if isinstance(parent, MutableMapping):
        key = _key_for(parent, last)
        if key is None:
            return False
        del parent[key]
        return True
    if isinstance(parent, list) and isinstance(last, int) and 0 <= last < len(parent):
        parent[last] = _DROPPED
        return True
    return False


def _strip_dropped(value: Any) -> Any:
    if isinstance(value, MutableMapping):
        return {k: _strip_dropped(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_strip_dropped(v) for v in value if v is not _DROPPED]
    return value


def coerce_template(
    data: Union[Template, Mapping[str, Any]],
) -> Tuple[Optional[Template], List[ValidationIssue]]:
    """
    Build a Template from UI data without raising.

    Each value that does not fit the schema is reported as an issue, addressed
    with the same dotted field names the rules use, and then treated as
    absent so the remaining fields can still be checked. Returns (None,
    issues) only when nothing usable is left.
    """
    if isinstance(data, Template):
        return data, []
    if not isinstance(data, Mapping):
        return None, [ValidationIssue(field="template", message="Template must be an object")]

    working = copy.deepcopy(dict(data))
    issues: List[ValidationIssue] = []
    for _ in range(_COERCE_PASSES):
        try:
            return Template.model_validate(working), issues
        except ValidationError as e:
            dropped = False
            for err in e.errors():
                loc = tuple(err["loc"])
                issues.append(ValidationIssue(field=_field_name(loc), message=err["msg"]))
                if loc and _drop(working, loc):
                    dropped = True
            if not dropped:
                return None, issues
            working = _strip_dropped(working)
    return None, issues


def _belongs_to_step(field: str, step: int) -> bool:
    if step == REVIEW_STEP:
        return True
    root = re.split(r"[.\[]", field, maxsplit=1)[0]
    return root not in _KNOWN_FIELDS or root in _STEP_FIELDS[step]


def validate(step: int, template: Union[Template, Mapping[str, Any]]) -> ValidationResult:
    """
    Validate a template for a wizard step.

    Args:
        step: 1 (Details), 2 (Content), 3 (Buttons) or 4 (Review = all)
        template: Template model or its JSON dict

    Returns:
        ValidationResult with every error and warning found. Values that do
        not fit the schema are reported (for the step owning them) and then
        checked as if absent.

    Raises:
        ValueError: If step is not 1-4
    """
    if step not in _STEP_CHECKS:
        raise ValueError(f"Unknown wizard step: {step}")

    model, schema_issues = coerce_template(template)
    schema_issues = [i for i in schema_issues if _belongs_to_step(i.field, step)]
    if model is None:
        return ValidationResult(valid=False, errors=schema_issues)

    issues = _Issues()
    issues.errors.extend(schema_issues)
    for check in _STEP_CHECKS[step]:
        check(model, issues)
    return issues.result()


def validate_template(template: Union[Template, Mapping[str, Any]]) -> ValidationResult:
    """Full pre-submit validation (the Review step)."""
    return validate(REVIEW_STEP, template)


__all__ = [
    "CategoryRules",
    "CATEGORY_RULES",
    "STEPS",
    "REVIEW_STEP",
    "rules_for",
    "coerce_template",
    "validate",
    "validate_template",
]
