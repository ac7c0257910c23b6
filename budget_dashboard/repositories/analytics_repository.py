"""
Repository helpers for dashboard usage analytics tables.
"""

from datetime import datetime

from budget_dashboard.db.supabase_rest import StoreError, SupabaseRestClient, eq
from budget_dashboard.models.domain.analytics_domain import (
    BudgetConfigRecord,
    FeedbackRecord,
    InteractionEvent,
)

SESSIONS_TABLE = "budget_sessions"
INTERACTIONS_TABLE = "user_interactions"
FEEDBACK_TABLE = "user_feedback"
CONFIGS_TABLE = "budget_configs"


class AnalyticsRepository:
    """Store access for budget sessions and the rows hanging off them."""

    def __init__(self, client: SupabaseRestClient):
        self.client = client

    async def create_session(self) -> str:
        # Empty insert: id and created_at come from column defaults
        created = await self.client.insert(SESSIONS_TABLE, {}, returning="id")
        if not created or "id" not in created:
            raise StoreError(
                "Session insert returned no id", operation="insert", table=SESSIONS_TABLE
            )
        return str(created["id"])

    async def complete_session(self, session_id: str, completed_at: datetime) -> None:
        await self.client.update(
            SESSIONS_TABLE,
            {"completed": True, "completed_at": completed_at.isoformat()},
            [eq("id", session_id)],
        )

    async def insert_interaction(self, event: InteractionEvent) -> None:
        await self.client.insert(
            INTERACTIONS_TABLE,
            {
                "session_id": event.session_id,
                "interaction_type": event.interaction_type,
                "interaction_data": event.interaction_data,
                "created_at": event.created_at.isoformat(),
            },
        )

    async def insert_feedback(self, record: FeedbackRecord) -> None:
        await self.client.insert(
            FEEDBACK_TABLE,
            {
                "session_id": record.session_id,
                "political_affiliation": record.political_affiliation,
                "income_bracket": record.income_bracket,
                "age_range": record.age_range,
                "comments": record.comments,
                "satisfaction": record.satisfaction,
                "created_at": record.created_at.isoformat(),
            },
        )

    async def insert_budget_config(self, record: BudgetConfigRecord) -> None:
        await self.client.insert(
            CONFIGS_TABLE,
            {
                "session_id": record.session_id,
                "total_spending": record.total_spending,
                "total_revenue": record.total_revenue,
                "deficit": record.deficit,
                "spending_breakdown": record.spending_breakdown,
                "revenue_breakdown": record.revenue_breakdown,
                "approach": record.approach,
                "created_at": record.created_at.isoformat() if record.created_at else None,
            },
        )
