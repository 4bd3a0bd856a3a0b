"""
Test configuration and shared fixtures.

This module provides common test fixtures for the template builder test suite.
"""

from __future__ import annotations

import os
import tempfile

# Keep test logs out of the package directory.
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="templatekit-logs-"))

from typing import Any, Dict  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402

from templatekit.schemas.templates import Template  # noqa: E402

# =============================================================================
# FIXTURES: Template Data
# =============================================================================


@pytest.fixture
def marketing_data() -> Dict[str, Any]:
    """A complete, valid marketing template as the UI sends it."""
    return {
        "name": "summer_sale_2024",
        "language": "en",
        "category": "MARKETING",
        "header": {"enabled": True, "format": "TEXT", "text": "Hello {{1}}", "example": "Ana"},
        "body": {
            "text": "Hi {{1}}, *{{2}}* off everything until {{3}}.",
            "examples": ["Ana", "20%", "Sunday"],
        },
        "footer": {"enabled": True, "text": "Reply STOP to opt out"},
        "buttons": {
            "enabled": True,
            "items": [
                {"type": "URL", "text": "Shop now", "url": "https://shop.example.com"},
                {"type": "PHONE_NUMBER", "text": "Call us", "phoneNumber": "+15551234567"},
            ],
        },
    }


@pytest.fixture
def marketing_template(marketing_data) -> Template:
    return Template.model_validate(marketing_data)


@pytest.fixture
def auth_data() -> Dict[str, Any]:
    """A valid authentication (OTP) template."""
    return {
        "name": "login_code",
        "language": "en_US",
        "category": "AUTHENTICATION",
        "header": {"enabled": False},
        "body": {"text": "Your code is {{1}}", "examples": ["123456"]},
        "buttons": {
            "enabled": True,
            "items": [{"type": "COPY_CODE", "text": "Copy code", "example": "123456"}],
        },
    }


@pytest.fixture
def auth_template(auth_data) -> Template:
    return Template.model_validate(auth_data)


def _make_template(**overrides: Any) -> Template:
    data: Dict[str, Any] = {
        "name": "order_update",
        "language": "en",
        "category": "UTILITY",
        "body": {"text": "Your order has shipped."},
    }
    data.update(overrides)
    return Template.model_validate(data)


def _with_buttons(*buttons: Dict[str, Any], category: str = "MARKETING") -> Template:
    return _make_template(
        category=category,
        buttons={"enabled": True, "items": list(buttons)},
    )


@pytest.fixture
def make_template():
    """Factory: minimal valid utility template with overrides applied."""
    return _make_template


@pytest.fixture
def with_buttons():
    """Factory: template whose button set holds the given buttons."""
    return _with_buttons


# =============================================================================
# FIXTURES: HTTP Response Mocks
# =============================================================================


@pytest.fixture
def api_success_response() -> MagicMock:
    """Mock dashboard reply to a draft create: the stored document."""
    response = MagicMock()
    response.status_code = 201
    response.content = b"{}"
    response.json.return_value = {
        "template": {
            "_id": "tpl_123",
            "workspace": "ws_1",
            "name": "summer_sale_2024",
            "language": "en",
            "category": "MARKETING",
            "status": "DRAFT",
            "components": [
                {
                    "type": "BODY",
                    "text": "Hi {{1}}, *{{2}}* off everything until {{3}}.",
                    "example": {"body_text": [["Ana", "20%", "Sunday"]]},
                },
            ],
        }
    }
    return response


@pytest.fixture
def api_error_response() -> MagicMock:
    """Mock failed dashboard API response."""
    response = MagicMock()
    response.status_code = 400
    response.content = b"{}"
    response.json.return_value = {
        "success": False,
        "message": "Template validation failed",
        "errors": [{"field": "name", "message": "Template name is required"}],
    }
    return response
