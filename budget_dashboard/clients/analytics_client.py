"""
Analytics tracking client for the budget dashboard API.

Python counterpart of the dashboard's browser-side tracking helpers.
Tracking calls are fire-and-forget: failures are logged and reported as
False so a broken analytics pipeline never interrupts the caller.
Session creation and stats retrieval raise, since callers need the result.
"""

from typing import Any

import httpx

from budget_dashboard.infrastructure.observability.logging import get_logger
from budget_dashboard.models.api.contact_response import ContactStatsResponse

logger = get_logger(__name__)

REQUEST_TIMEOUT = 10  # seconds


class AnalyticsClientError(Exception):
    """Custom exception for analytics API calls that must succeed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class BudgetAnalyticsClient:
    """
    Async client for the dashboard's tracking and stats endpoints.

    Usage:
        async with BudgetAnalyticsClient("https://budget.example.org") as client:
            session_id = await client.create_budget_session()
            await client.track_interaction(session_id, "slider_change", {"category": "defense"})
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "BudgetAnalyticsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _post(self, path: str, payload: dict[str, Any] | None = None) -> httpx.Response:
        return await self._client.post(path, json=payload or {})

    async def _track(self, path: str, payload: dict[str, Any], operation: str, **context) -> bool:
        try:
            response = await self._post(path, payload)
        except httpx.HTTPError as e:
            logger.error(f"Failed to {operation}", error=str(e), **context)
            return False

        if not response.is_success:
            logger.error(
                f"Failed to {operation}",
                status_code=response.status_code,
                error=_error_text(response),
                **context,
            )
            return False
        return True

    async def create_budget_session(self) -> str:
        """Start a dashboard session and return its id."""
        try:
            response = await self._post("/api/create-budget-session")
        except httpx.HTTPError as e:
            logger.error("Failed to create budget session", error=str(e))
            raise AnalyticsClientError(f"Failed to create budget session: {e}") from e

        if not response.is_success:
            raise AnalyticsClientError(
                f"Failed to create budget session: {_error_text(response)}",
                status_code=response.status_code,
            )
        return response.json()["id"]

    async def complete_session(self, session_id: str) -> bool:
        return await self._track(
            "/api/complete-budget-session",
            {"sessionId": session_id},
            "complete budget session",
            session_id=session_id,
        )

    async def track_interaction(
        self,
        session_id: str,
        interaction_type: str,
        interaction_data: dict[str, Any] | None = None,
    ) -> bool:
        return await self._track(
            "/api/track-interaction",
            {
                "sessionId": session_id,
                "interactionType": interaction_type,
                "interactionData": interaction_data,
            },
            "track interaction",
            session_id=session_id,
        )

    async def save_user_feedback(self, session_id: str, feedback: dict[str, Any]) -> bool:
        """``feedback`` uses the API's camelCase keys, e.g. politicalAffiliation."""
        return await self._track(
            "/api/save-user-feedback",
            {"sessionId": session_id, "feedback": feedback},
            "save user feedback",
            session_id=session_id,
        )

    async def save_budget_config(self, session_id: str, budget_data: dict[str, Any]) -> bool:
        return await self._track(
            "/api/save-budget-config",
            {"sessionId": session_id, "budgetData": budget_data},
            "save budget config",
            session_id=session_id,
        )

    async def track_congress_contact(
        self,
        zip_code: str,
        representatives: list[dict[str, Any]],
        budget_summary: dict[str, Any] | None = None,
    ) -> bool:
        return await self._track(
            "/api/track-congress-contact",
            {
                "zipCode": zip_code,
                "representatives": representatives,
                "budgetSummary": budget_summary,
            },
            "track congress contact",
            zip_code=zip_code,
        )

    async def get_contact_stats(self) -> ContactStatsResponse:
        """Fetch the contact report."""
        try:
            response = await self._client.get("/api/congress-contact-stats")
        except httpx.HTTPError as e:
            logger.error("Failed to get contact stats", error=str(e))
            raise AnalyticsClientError(f"Failed to get contact stats: {e}") from e

        if not response.is_success:
            raise AnalyticsClientError(
                f"Failed to get contact stats: {_error_text(response)}",
                status_code=response.status_code,
            )
        return ContactStatsResponse.model_validate(response.json())


def _error_text(response: httpx.Response) -> str:
    try:
        return response.json().get("error") or response.text
    except (ValueError, AttributeError):
        return response.text
