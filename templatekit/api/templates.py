"""
Template Builder API endpoints.

Stateless helpers for the dashboard UI: validate a draft, compose its
preview, and serialize it to submission components.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException, Query
from pydantic import BaseModel

from templatekit.builder.preview import compose
from templatekit.builder.validator import REVIEW_STEP, STEPS, validate
from templatekit.core.monitoring import log_event
from templatekit.schemas.preview import MessagePreview, PreviewValues
from templatekit.schemas.templates import Template, TemplateSubmission
from templatekit.schemas.validation import ValidationResult
from templatekit.whatsapp.components import build_submission

router = APIRouter(prefix="/templates", tags=["Templates"])


class PreviewRequest(BaseModel):
    """Schema for a preview request"""

    template: Template
    values: Optional[PreviewValues] = None


# ============================================================================
# ENDPOINTS
# ============================================================================


@router.post("/validate", response_model=ValidationResult)
async def validate_template(
    template: Dict[str, Any] = Body(...),
    step: int = Query(REVIEW_STEP, description="Wizard step 1-4 (4 = full check)"),
):
    """
    Validate a template for a wizard step.

    Always answers 200 with the result, even for malformed templates;
    only an unknown step is rejected.
    """
    if step not in STEPS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid step. Must be one of: {', '.join(str(s) for s in STEPS)}",
        )

    result = validate(step, template)
    if not result.valid:
        log_event(
            "template_validation_failed",
            level="debug",
            step=step,
            name=template.get("name"),
            errors=len(result.errors),
        )
    return result


@router.post("/preview", response_model=MessagePreview, response_model_exclude_none=True)
async def preview_template(data: PreviewRequest):
    """Compose the message preview; never fails on incomplete drafts."""
    return compose(data.template, data.values)


@router.post("/components", response_model=TemplateSubmission)
async def template_components(template: Template):
    """
    Serialize a template to the submission payload.

    Requires a template that passes the full validation.
    """
    result = validate(REVIEW_STEP, template)
    if not result.valid:
        raise HTTPException(
            status_code=422,
            detail={
                "message": "Template validation failed",
                "errors": [e.model_dump() for e in result.errors],
            },
        )
    return build_submission(template)
