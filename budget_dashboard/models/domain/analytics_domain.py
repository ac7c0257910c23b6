"""
Domain models for dashboard usage analytics.

These mirror the rows written by the tracking endpoints.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(slots=True)
class InteractionEvent:
    session_id: str
    interaction_type: str
    interaction_data: dict[str, Any] | None
    created_at: datetime


@dataclass(slots=True)
class FeedbackRecord:
    session_id: str
    political_affiliation: str | None
    income_bracket: str | None
    age_range: str | None
    comments: str | None
    satisfaction: int | None
    created_at: datetime


@dataclass(slots=True)
class BudgetConfigRecord:
    session_id: str
    total_spending: float
    total_revenue: float
    deficit: float
    spending_breakdown: dict[str, float] = field(default_factory=dict)
    revenue_breakdown: dict[str, float] = field(default_factory=dict)
    approach: str = "mixed"
    created_at: datetime | None = None
