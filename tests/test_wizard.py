"""
Tests for the template wizard - tests/test_wizard.py
"""

from unittest.mock import AsyncMock, patch

import pytest

from templatekit.builder.model import SetBodyText, SetName, TemplateModel
from templatekit.builder.wizard import WizardStateMachine, WizardStep
from templatekit.schemas.templates import TemplateSubmission
from templatekit.whatsapp.client import APIError, DashboardClient, TemplateAPI


def walk_to_review(wizard: WizardStateMachine) -> None:
    wizard.dispatch(SetName(value="welcome_msg"))
    assert wizard.advance()
    wizard.dispatch(SetBodyText(value="Hello there"))
    assert wizard.advance()
    assert wizard.advance()


@pytest.fixture
def wizard():
    return WizardStateMachine()


# =============================================================================
# NAVIGATION
# =============================================================================


def test_starts_on_details(wizard):
    assert wizard.current_step == WizardStep.DETAILS
    assert wizard.step_info.name == "Details"


def test_invalid_step_blocks_advance(wizard):
    assert wizard.can_advance() is False
    assert wizard.advance() is False
    assert wizard.current_step == WizardStep.DETAILS


def test_fixing_errors_enables_advance(wizard):
    wizard.dispatch(SetName(value="welcome_msg"))

    assert wizard.can_advance() is True
    assert wizard.advance() is True
    assert wizard.current_step == WizardStep.CONTENT
    assert [e.field for e in wizard.validation.errors] == ["body.text"]


def test_content_step_requires_body(wizard):
    wizard.dispatch(SetName(value="welcome_msg"))
    wizard.advance()

    assert wizard.advance() is False

    wizard.dispatch(SetBodyText(value="Hi"))
    assert wizard.advance() is True
    assert wizard.current_step == WizardStep.BUTTONS


def test_walk_to_review(wizard):
    walk_to_review(wizard)

    assert wizard.current_step == WizardStep.REVIEW
    assert wizard.can_advance() is False
    assert wizard.can_submit() is True


def test_back_is_always_allowed(wizard):
    walk_to_review(wizard)
    wizard.dispatch(SetName(value="Broken Name"))

    assert wizard.back() is True
    assert wizard.current_step == WizardStep.BUTTONS


def test_back_from_first_step(wizard):
    assert wizard.back() is False
    assert wizard.current_step == WizardStep.DETAILS


def test_go_to_reached_steps_only(wizard):
    wizard.dispatch(SetName(value="welcome_msg"))
    wizard.advance()

    assert wizard.go_to(3) is False
    assert wizard.go_to(1) is True
    assert wizard.current_step == WizardStep.DETAILS
    assert wizard.go_to(0) is False


def test_go_to_furthest_visited_step(wizard):
    wizard.dispatch(SetName(value="welcome_msg"))
    wizard.advance()
    wizard.dispatch(SetBodyText(value="Hi"))
    wizard.advance()
    wizard.back()
    wizard.back()

    assert wizard.current_step == WizardStep.DETAILS
    assert wizard.furthest_step == WizardStep.BUTTONS
    assert wizard.go_to(3) is True
    assert wizard.current_step == WizardStep.BUTTONS
    assert wizard.go_to(4) is False


def test_step_change_revalidates():
    model = TemplateModel()
    wizard = WizardStateMachine(model)
    wizard.dispatch(SetName(value="welcome_msg"))
    wizard.advance()

    assert model.step == 2
    assert not wizard.validation.valid


# =============================================================================
# SAVE & SUBMIT
# =============================================================================


@pytest.mark.asyncio
async def test_save_draft_without_api_returns_template(wizard):
    saved, error = await wizard.save_draft()

    assert error is None
    assert saved is wizard.template


@pytest.mark.asyncio
async def test_save_draft_stores_remote_id(marketing_template):
    api = AsyncMock(spec=TemplateAPI)
    api.save_draft.return_value = (marketing_template.model_copy(update={"id": "tpl_1"}), None)
    wizard = WizardStateMachine(api=api)

    saved, error = await wizard.save_draft()

    assert error is None
    assert wizard.template.id == "tpl_1"
    assert saved is wizard.template
    api.save_draft.assert_awaited_once()


@pytest.mark.asyncio
async def test_save_draft_keeps_editor_content(marketing_template, api_success_response):
    api = TemplateAPI(DashboardClient(base_url="https://dash.example.com/api", token="t"))
    wizard = WizardStateMachine(TemplateModel(marketing_template), api=api)
    # Stored reply carries only the body component
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = api_success_response

        saved, error = await wizard.save_draft()

    assert error is None
    assert "components" in mock_request.call_args.kwargs["json"]
    assert wizard.template.id == "tpl_123"
    assert wizard.template.header == marketing_template.header
    assert wizard.template.body == marketing_template.body
    assert wizard.template.buttons == marketing_template.buttons


@pytest.mark.asyncio
async def test_undo_after_save_keeps_id(api_success_response):
    api = TemplateAPI(DashboardClient(base_url="https://dash.example.com/api", token="t"))
    wizard = WizardStateMachine(api=api)
    wizard.dispatch(SetName(value="welcome_msg"))
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = api_success_response
        await wizard.save_draft()

    wizard.model.undo()

    assert wizard.template.id == "tpl_123"
    assert wizard.template.name == ""


@pytest.mark.asyncio
async def test_save_draft_error_keeps_template(wizard):
    api = AsyncMock(spec=TemplateAPI)
    api.save_draft.return_value = (None, APIError(status_code=500, message="boom", is_retryable=True))
    wizard.api = api
    before = wizard.template

    saved, error = await wizard.save_draft()

    assert saved is None
    assert error.message == "boom"
    assert wizard.template is before


@pytest.mark.asyncio
async def test_submit_only_from_review(wizard):
    wizard.dispatch(SetName(value="welcome_msg"))

    data, error = await wizard.submit()

    assert data is None
    assert error.status_code == 409


@pytest.mark.asyncio
async def test_submit_without_api_returns_payload(wizard):
    walk_to_review(wizard)

    data, error = await wizard.submit()

    assert error is None
    assert isinstance(data, TemplateSubmission)
    assert data.name == "welcome_msg"
    assert data.components == [{"type": "BODY", "text": "Hello there"}]


@pytest.mark.asyncio
async def test_submit_invalid_on_review(wizard):
    walk_to_review(wizard)
    wizard.dispatch(SetBodyText(value="Hi {{2}}"))

    data, error = await wizard.submit()

    assert data is None
    assert error.status_code == 422
    assert wizard.can_submit() is False


@pytest.mark.asyncio
async def test_submit_delegates_to_api():
    api = AsyncMock(spec=TemplateAPI)
    api.submit.return_value = ({"status": "PENDING"}, None)
    wizard = WizardStateMachine(api=api)
    walk_to_review(wizard)

    data, error = await wizard.submit()

    assert error is None
    assert data == {"status": "PENDING"}
    api.submit.assert_awaited_once_with(wizard.template)
