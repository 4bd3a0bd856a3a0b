"""
Dashboard REST Client - templatekit/whatsapp/client.py

Async client for the dashboard API that stores and submits templates.
Failures come back as values (APIError), never as exceptions.

Usage:
    from templatekit.whatsapp.client import DashboardClient, TemplateAPI

    api = TemplateAPI(DashboardClient(token="..."))
    saved, error = await api.save_draft(template)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import httpx

from templatekit.builder.validator import validate_template
from templatekit.core.config import settings
from templatekit.core.monitoring import log_event, log_exception
from templatekit.schemas.templates import Template
from templatekit.whatsapp.components import build_submission, parse_components

Result = Tuple[Optional[Any], Optional["APIError"]]


@dataclass
class APIError:
    """Error details from the dashboard API."""

    status_code: int
    message: str
    details: Optional[Any] = None
    is_retryable: bool = False

    @classmethod
    def from_response(cls, response: httpx.Response, data: Any) -> "APIError":
        """Create APIError from an error response body."""
        body = data if isinstance(data, dict) else {}
        error = body.get("error")
        if isinstance(error, dict):
            message = error.get("message", "Unknown error")
        else:
            message = body.get("message") or error or "Unknown error"

        return cls(
            status_code=response.status_code,
            message=str(message),
            details=body.get("errors"),
            is_retryable=response.status_code in (429, 500, 502, 503, 504),
        )


class DashboardClient:
    """
    Generic JSON client: get/post/put/delete(endpoint, payload).

    Each call returns (json, None) on success or (None, APIError).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.DASHBOARD_API_URL).rstrip("/")
        self.token = token or settings.DASHBOARD_API_TOKEN
        self.timeout = timeout or settings.HTTP_TIMEOUT

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def request(
        self,
        method: str,
        endpoint: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Result:
        """Core method behind get/post/put/delete."""
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs: Dict[str, Any] = {"headers": self._headers()}
        if payload is not None:
            if method == "GET":
                kwargs["params"] = payload
            else:
                kwargs["json"] = payload

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(method, url, **kwargs)

                data = response.json() if response.content else None

                if response.status_code >= 400:
                    error = APIError.from_response(response, data)
                    log_event(
                        "dashboard_request_failed",
                        level="warning",
                        method=method,
                        endpoint=endpoint,
                        status_code=response.status_code,
                        error=error.message,
                    )
                    return None, error

                log_event(
                    "dashboard_request_ok",
                    level="debug",
                    method=method,
                    endpoint=endpoint,
                    status_code=response.status_code,
                )
                return data, None

        except httpx.TimeoutException:
            log_exception("dashboard_request_timeout", method=method, endpoint=endpoint)
            return None, APIError(status_code=-1, message="Request timed out", is_retryable=True)
        except httpx.RequestError as e:
            log_exception("dashboard_network_error", e, method=method, endpoint=endpoint)
            return None, APIError(
                status_code=-1, message=f"Network error: {str(e)}", is_retryable=True
            )
        except ValueError as e:
            log_exception("dashboard_invalid_json", e, method=method, endpoint=endpoint)
            return None, APIError(status_code=-1, message="Invalid JSON in response")

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Result:
        return await self.request("GET", endpoint, params)

    async def post(self, endpoint: str, payload: Optional[Dict[str, Any]] = None) -> Result:
        return await self.request("POST", endpoint, payload)

    async def put(self, endpoint: str, payload: Optional[Dict[str, Any]] = None) -> Result:
        return await self.request("PUT", endpoint, payload)

    async def delete(self, endpoint: str, payload: Optional[Dict[str, Any]] = None) -> Result:
        return await self.request("DELETE", endpoint, payload)


def _template_from_response(data: Any) -> Template:
    """
    Rebuild a Template from a stored template document.

    The dashboard stores templates as {name, language, category, components}
    and answers with {"template": {...}}; "_id" becomes the template id.
    """
    raw = data.get("template", data) if isinstance(data, dict) else data
    if not isinstance(raw, dict):
        raise ValueError("Template document must be an object")

    template_id = raw.get("id", raw.get("_id"))
    template_id = str(template_id) if template_id is not None else None

    if "components" in raw:
        return parse_components(
            raw.get("components") or [],
            name=raw.get("name", ""),
            language=raw.get("language", ""),
            category=raw.get("category", ""),
            template_id=template_id,
        )

    fields = {k: v for k, v in raw.items() if k != "_id"}
    fields["id"] = template_id
    return Template.model_validate(fields)


def _read_template(data: Any, endpoint: str) -> Tuple[Optional[Template], Optional[APIError]]:
    try:
        return _template_from_response(data), None
    except (ValueError, TypeError, AttributeError) as e:
        log_exception("dashboard_invalid_template", e, endpoint=endpoint)
        return None, APIError(status_code=-1, message="Invalid template in response")


class TemplateAPI:
    """Template endpoints of the dashboard API."""

    def __init__(self, client: Optional[DashboardClient] = None):
        self.client = client or DashboardClient()

    async def list_templates(self, **filters: Any) -> Tuple[Optional[List[Template]], Optional[APIError]]:
        data, error = await self.client.get("templates", filters or None)
        if error:
            return None, error
        items = data.get("templates", []) if isinstance(data, dict) else []

        templates = []
        for item in items:
            template, error = _read_template(item, "templates")
            if error:
                return None, error
            templates.append(template)
        return templates, None

    async def get_template(self, template_id: str) -> Tuple[Optional[Template], Optional[APIError]]:
        endpoint = f"templates/{template_id}"
        data, error = await self.client.get(endpoint)
        if error:
            return None, error
        return _read_template(data, endpoint)

    async def save_draft(self, template: Template) -> Tuple[Optional[Template], Optional[APIError]]:
        """
        Create or update the draft. Drafts need not be valid.

        The draft is stored in submission shape (name, language, category,
        components). Returns the stored template, which carries the remote
        id after the first save.
        """
        payload = build_submission(template).model_dump()

        if template.is_persisted:
            endpoint = f"templates/{template.id}"
            data, error = await self.client.put(endpoint, payload)
        else:
            endpoint = "templates"
            data, error = await self.client.post(endpoint, payload)
        if error:
            return None, error

        saved, error = _read_template(data, endpoint)
        if error:
            return None, error
        if saved.id is None and template.id is not None:
            saved = saved.model_copy(update={"id": template.id})
        log_event("template_draft_saved", template_id=saved.id, name=saved.name)
        return saved, None

    async def submit(self, template: Template) -> Result:
        """
        Submit a template for platform approval.

        Runs the full validation first and never calls the API for an
        invalid template. Unsaved templates are saved as a draft first.
        """
        result = validate_template(template)
        if not result.valid:
            return None, APIError(
                status_code=422,
                message="Template validation failed",
                details=[e.model_dump() for e in result.errors],
            )

        if not template.is_persisted:
            saved, error = await self.save_draft(template)
            if error:
                return None, error
            template = template.model_copy(update={"id": saved.id})

        data, error = await self.client.post(f"templates/{template.id}/submit")
        if error:
            return None, error

        log_event("template_submitted", template_id=template.id, name=template.name)
        return data, None

    async def delete_template(self, template_id: str) -> Result:
        return await self.client.delete(f"templates/{template_id}")


__all__ = ["APIError", "DashboardClient", "TemplateAPI"]
