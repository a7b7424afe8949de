"""LoanSewa backend API HTTP client"""

import time
from datetime import date
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from loansewa_web.config import settings
from loansewa_web.domain.exceptions import BackendAPIError, BackendUnavailableError, MalformedResponseError
from loansewa_web.infrastructure.clients.schemas import (
    DashboardStats,
    Identity,
    ImprovementReport,
    Insights,
    LoanApplication,
    LoanApplicationForm,
)
from loansewa_web.infrastructure.observability.logging import log_backend_call
from loansewa_web.infrastructure.observability.metrics import backend_call_counter, backend_latency_histogram

T = TypeVar("T", bound=BaseModel)

_applications_adapter = TypeAdapter(List[LoanApplication])
_identities_adapter = TypeAdapter(List[Identity])


def _error_message(response: httpx.Response, fallback: str) -> str:
    """Server-supplied error text (FastAPI 'detail' or 'message'), else the fallback"""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        for key in ("detail", "message"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return fallback


def _decode(model: Type[T], data: Any, endpoint: str) -> T:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(f"Unexpected response from {endpoint}: {e.error_count()} invalid field(s)") from e


class LoanSewaClient:
    """Client for the LoanSewa credit and admin REST API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        endpoint: str,
        fallback: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        """
        Send one request and return the decoded JSON body.

        Raises:
            BackendUnavailableError: On timeout or connection failure
            BackendAPIError: On non-2xx status, carrying the server message
            MalformedResponseError: On a body that is not JSON
        """
        start_time = time.time()
        outcome = "ok"
        status_code = None
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                with backend_latency_histogram.labels(endpoint=endpoint).time():
                    response = await client.request(method, f"{self.base_url}{path}", params=params, json=json)
                status_code = response.status_code

                if response.is_error:
                    outcome = "error"
                    raise BackendAPIError(_error_message(response, fallback), status_code=status_code)

                try:
                    return response.json()
                except ValueError as e:
                    outcome = "malformed"
                    raise MalformedResponseError(f"Non-JSON response from {endpoint}", status_code=status_code) from e

        except httpx.TimeoutException as e:
            outcome = "unavailable"
            raise BackendUnavailableError(f"Backend timeout after {self.timeout}s") from e
        except httpx.RequestError as e:
            outcome = "unavailable"
            raise BackendUnavailableError(f"Backend unreachable: {e}") from e
        finally:
            backend_call_counter.labels(endpoint=endpoint, outcome=outcome).inc()
            log_backend_call(endpoint, outcome, (time.time() - start_time) * 1000, status_code)

    # Auth

    async def signup(self, payload: Dict[str, Any]) -> Identity:
        data = await self._request(
            "POST", "/auth/signup", "auth_signup", "Registration failed. Please try again.", json=payload
        )
        return self._identity_from(data, "user", "auth_signup", "Registration failed. Please try again.")

    async def login(self, identifier: str, password: str) -> Identity:
        data = await self._request(
            "POST",
            "/auth/login",
            "auth_login",
            "Invalid credentials. Please try again.",
            json={"identifier": identifier, "password": password},
        )
        return self._identity_from(data, "user", "auth_login", "Login failed. Please try again.")

    async def admin_login(self, email: str, password: str) -> Identity:
        data = await self._request(
            "POST", "/admin/login", "admin_login", "Login failed", json={"email": email, "password": password}
        )
        return self._identity_from(data, "admin", "admin_login", "Login failed")

    async def admin_signup(self, payload: Dict[str, Any]) -> Identity:
        data = await self._request("POST", "/admin/signup", "admin_signup", "Registration failed", json=payload)
        return self._identity_from(data, "admin", "admin_signup", "Registration failed")

    @staticmethod
    def _identity_from(data: Any, key: str, endpoint: str, fallback: str) -> Identity:
        if not isinstance(data, dict) or data.get("success") is False or not data.get(key):
            raise BackendAPIError(_message_of(data) or fallback)
        return _decode(Identity, data[key], endpoint)

    # Loans

    async def apply_for_loan(self, form: LoanApplicationForm, user_id: str) -> LoanApplication:
        data = await self._request(
            "POST",
            "/loan/apply",
            "loan_apply",
            "Application failed. Please try again.",
            params={"user_id": user_id},
            json=form.model_dump(),
        )
        if not isinstance(data, dict) or not data.get("success") or "application" not in data:
            raise BackendAPIError(_message_of(data) or "Application failed. Please try again.")
        return _decode(LoanApplication, data["application"], "loan_apply")

    async def get_user_applications(self, user_id: str) -> List[LoanApplication]:
        """Applications for a user, newest first"""
        data = await self._request(
            "GET", f"/loan/applications/{user_id}", "loan_applications", "Could not load applications"
        )
        return self._applications_from(data or [], "loan_applications")

    async def get_improvement(self, user_id: str) -> ImprovementReport:
        data = await self._request(
            "GET", f"/credit/improvement/{user_id}", "credit_improvement", "Failed to load suggestions. Please try again."
        )
        return _decode(ImprovementReport, data, "credit_improvement")

    # Admin

    async def get_dashboard_stats(self) -> DashboardStats:
        data = await self._request("GET", "/admin/dashboard/stats", "admin_stats", "Could not load statistics")
        return _decode(DashboardStats, data or {}, "admin_stats")

    async def get_pending_applications(self) -> List[LoanApplication]:
        data = await self._request(
            "GET", "/admin/applications/pending", "admin_pending", "Could not load pending applications"
        )
        return self._applications_from(data or [], "admin_pending")

    async def get_application_history(
        self,
        status: str = "",
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: str = "",
    ) -> List[LoanApplication]:
        params = {
            "status": status,
            "startDate": start_date.isoformat() if start_date else "",
            "endDate": end_date.isoformat() if end_date else "",
            "search": search,
        }
        data = await self._request(
            "GET", "/admin/applications/history", "admin_history", "Could not load history", params=params
        )
        return self._applications_from(data or [], "admin_history")

    async def get_insights(self) -> Insights:
        data = await self._request("GET", "/admin/analytics/insights", "admin_insights", "Could not load insights")
        return _decode(Insights, data or {}, "admin_insights")

    async def list_users(self) -> List[Identity]:
        data = await self._request("GET", "/admin/users", "admin_users", "Could not load users")
        try:
            return _identities_adapter.validate_python(data or [])
        except ValidationError as e:
            raise MalformedResponseError(f"Unexpected response from admin_users: {e.error_count()} invalid field(s)") from e

    async def approve_application(self, app_id: str, admin_id: str) -> None:
        await self._request(
            "POST",
            f"/admin/applications/{app_id}/approve",
            "admin_approve",
            "Unknown error",
            params={"admin_id": admin_id},
            json={},
        )

    async def reject_application(self, app_id: str, admin_id: str, reason: str) -> None:
        await self._request(
            "POST",
            f"/admin/applications/{app_id}/reject",
            "admin_reject",
            "Unknown error",
            params={"admin_id": admin_id},
            json={"rejection_reason": reason},
        )

    async def delete_user(self, user_id: str) -> None:
        await self._request("DELETE", f"/admin/users/{user_id}", "admin_delete_user", "Unknown error")

    @staticmethod
    def _applications_from(data: Any, endpoint: str) -> List[LoanApplication]:
        try:
            return _applications_adapter.validate_python(data)
        except ValidationError as e:
            raise MalformedResponseError(f"Unexpected response from {endpoint}: {e.error_count()} invalid field(s)") from e


def _message_of(data: Any) -> Optional[str]:
    if isinstance(data, dict):
        message = data.get("message") or data.get("detail")
        return message if isinstance(message, str) else None
    return None
