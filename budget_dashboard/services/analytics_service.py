"""
Analytics service for dashboard sessions, interactions, feedback and
saved budget configurations.

Service layer returns plain values or domain models; the API layer
handles HTTP concerns.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from budget_dashboard.db.supabase_rest import SupabaseRestClient, get_store_client
from budget_dashboard.infrastructure.observability.logging import get_logger
from budget_dashboard.models.domain.analytics_domain import (
    BudgetConfigRecord,
    FeedbackRecord,
    InteractionEvent,
)
from budget_dashboard.repositories.analytics_repository import AnalyticsRepository

logger = get_logger(__name__)

DEFAULT_APPROACH = "mixed"


class AnalyticsService:
    """Writes dashboard usage data to the store."""

    def __init__(self, client_factory: Callable[[], SupabaseRestClient] = get_store_client):
        self._client_factory = client_factory

    def _repository(self) -> AnalyticsRepository:
        return AnalyticsRepository(self._client_factory())

    async def create_session(self) -> str:
        session_id = await self._repository().create_session()
        logger.info("Budget session created", session_id=session_id)
        return session_id

    async def complete_session(self, session_id: str) -> None:
        await self._repository().complete_session(session_id, datetime.now(UTC))
        logger.info("Budget session completed", session_id=session_id)

    async def track_interaction(
        self, session_id: str, interaction_type: str, interaction_data: dict[str, Any] | None
    ) -> InteractionEvent:
        event = InteractionEvent(
            session_id=session_id,
            interaction_type=interaction_type,
            interaction_data=interaction_data,
            created_at=datetime.now(UTC),
        )
        await self._repository().insert_interaction(event)
        logger.debug(
            "Interaction tracked", session_id=session_id, interaction_type=interaction_type
        )
        return event

    async def save_feedback(self, session_id: str, feedback: dict[str, Any]) -> FeedbackRecord:
        record = FeedbackRecord(
            session_id=session_id,
            political_affiliation=feedback.get("political_affiliation"),
            income_bracket=feedback.get("income_bracket"),
            age_range=feedback.get("age_range"),
            comments=feedback.get("comments"),
            satisfaction=feedback.get("satisfaction"),
            created_at=datetime.now(UTC),
        )
        await self._repository().insert_feedback(record)
        logger.info("User feedback saved", session_id=session_id)
        return record

    async def save_budget_config(
        self, session_id: str, budget_data: dict[str, Any]
    ) -> BudgetConfigRecord:
        record = BudgetConfigRecord(
            session_id=session_id,
            total_spending=budget_data["total_spending"],
            total_revenue=budget_data["total_revenue"],
            deficit=budget_data["deficit"],
            spending_breakdown=budget_data.get("spending_breakdown") or {},
            revenue_breakdown=budget_data.get("revenue_breakdown") or {},
            approach=budget_data.get("approach") or DEFAULT_APPROACH,
            created_at=datetime.now(UTC),
        )
        await self._repository().insert_budget_config(record)
        logger.info(
            "Budget configuration saved",
            session_id=session_id,
            approach=record.approach,
            deficit=record.deficit,
        )
        return record


analytics_service = AnalyticsService()
