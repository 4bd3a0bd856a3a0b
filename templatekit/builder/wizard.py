"""
Template Wizard - templatekit/builder/wizard.py

Walks the user through Details → Content → Buttons → Review.

Moving forward needs the current step to validate; jumping to any step
already reached is always allowed. Drafts can be saved from any step.
Submission happens only from Review with a fully valid template.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from templatekit.builder.model import Operation, TemplateModel
from templatekit.builder.validator import validate
from templatekit.core.monitoring import log_event
from templatekit.schemas.templates import Template
from templatekit.schemas.validation import ValidationResult
from templatekit.whatsapp.client import APIError, TemplateAPI
from templatekit.whatsapp.components import build_submission


class WizardStep(enum.IntEnum):
    DETAILS = 1
    CONTENT = 2
    BUTTONS = 3
    REVIEW = 4


@dataclass(frozen=True)
class StepInfo:
    step: WizardStep
    name: str
    description: str


STEPS: List[StepInfo] = [
    StepInfo(WizardStep.DETAILS, "Details", "Name, category & language"),
    StepInfo(WizardStep.CONTENT, "Content", "Header, body & footer"),
    StepInfo(WizardStep.BUTTONS, "Buttons", "Add call-to-action buttons"),
    StepInfo(WizardStep.REVIEW, "Review", "Preview & submit"),
]


class WizardStateMachine:
    """
    Step sequencing for one template editing session.

    Args:
        model: Editor session to drive (a fresh draft by default)
        api: Persistence for save_draft()/submit(); without it both stay
            in-process and return the draft / submission payload
    """

    def __init__(self, model: Optional[TemplateModel] = None, api: Optional[TemplateAPI] = None):
        self.model = model or TemplateModel()
        self.api = api
        self._step = WizardStep(self.model.step)
        self._furthest = self._step
        self.model.set_step(self._step)

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def current_step(self) -> WizardStep:
        return self._step

    @property
    def furthest_step(self) -> WizardStep:
        """Highest step reached so far."""
        return self._furthest

    @property
    def step_info(self) -> StepInfo:
        return STEPS[self._step - 1]

    @property
    def template(self) -> Template:
        return self.model.template

    @property
    def validation(self) -> ValidationResult:
        """Validation of the current step against the latest template."""
        return self.model.validation

    def dispatch(self, operation: Operation) -> Template:
        return self.model.dispatch(operation)

    # =========================================================================
    # NAVIGATION
    # =========================================================================

    def can_advance(self) -> bool:
        return self._step < WizardStep.REVIEW and self.validation.valid

    def advance(self) -> bool:
        """Go to the next step. Returns False (and stays put) when blocked."""
        if not self.can_advance():
            log_event(
                "wizard_advance_blocked",
                level="debug",
                step=int(self._step),
                errors=len(self.validation.errors),
            )
            return False
        return self._move_to(WizardStep(self._step + 1))

    def back(self) -> bool:
        if self._step == WizardStep.DETAILS:
            return False
        return self._move_to(WizardStep(self._step - 1))

    def can_go_to(self, step: int) -> bool:
        return WizardStep.DETAILS <= step <= self._furthest

    def go_to(self, step: int) -> bool:
        """Jump to any already reached step, up to the furthest one visited."""
        if not self.can_go_to(step):
            return False
        return self._move_to(WizardStep(step))

    def _move_to(self, step: WizardStep) -> bool:
        previous = self._step
        self._step = step
        self._furthest = max(self._furthest, step)
        self.model.set_step(step)
        log_event(
            "wizard_step_changed",
            name=self.template.name,
            from_step=int(previous),
            to_step=int(step),
        )
        return True

    # =========================================================================
    # SAVE & SUBMIT
    # =========================================================================

    def can_submit(self) -> bool:
        return self._step == WizardStep.REVIEW and validate(WizardStep.REVIEW, self.template).valid

    async def save_draft(self) -> Tuple[Optional[Template], Optional[APIError]]:
        """Save the current template as a draft; validity is not required."""
        if self.api is None:
            return self.template, None

        saved, error = await self.api.save_draft(self.template)
        if error:
            return None, error
        return self.model.mark_saved(saved.id), None

    async def submit(self) -> Tuple[Optional[Any], Optional[APIError]]:
        """
        Submit from the Review step.

        Returns:
            (response, None) on success - the API response, or the
            submission payload when no API is configured;
            (None, APIError) when not on Review, invalid, or the API failed
        """
        if self._step != WizardStep.REVIEW:
            return None, APIError(status_code=409, message="Submit is only available from the Review step")

        result = validate(WizardStep.REVIEW, self.template)
        if not result.valid:
            return None, APIError(
                status_code=422,
                message="Template validation failed",
                details=[e.model_dump() for e in result.errors],
            )

        log_event("wizard_submit", name=self.template.name, warnings=len(result.warnings))
        if self.api is None:
            return build_submission(self.template), None
        return await self.api.submit(self.template)


__all__ = ["WizardStep", "StepInfo", "STEPS", "WizardStateMachine"]
