# budget_dashboard/models/api/analytics_request.py
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CompleteSessionRequest(BaseModel):
    """Request body for POST /api/complete-budget-session"""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str | None = Field(default=None, alias="sessionId")


class TrackInteractionRequest(BaseModel):
    """Request body for POST /api/track-interaction"""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., min_length=1, alias="sessionId")
    interaction_type: str = Field(..., min_length=1, alias="interactionType")
    interaction_data: dict[str, Any] | None = Field(default=None, alias="interactionData")


class FeedbackPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    political_affiliation: str | None = Field(default=None, alias="politicalAffiliation")
    income_bracket: str | None = Field(default=None, alias="incomeBracket")
    age_range: str | None = Field(default=None, alias="ageRange")
    comments: str | None = Field(default=None, max_length=5000)
    satisfaction: int | None = Field(default=None, ge=1, le=5)


class SaveFeedbackRequest(BaseModel):
    """Request body for POST /api/save-user-feedback"""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., min_length=1, alias="sessionId")
    feedback: FeedbackPayload


class BudgetData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_spending: float = Field(..., alias="totalSpending")
    total_revenue: float = Field(..., alias="totalRevenue")
    deficit: float
    spending_breakdown: dict[str, float] = Field(default_factory=dict, alias="spendingBreakdown")
    revenue_breakdown: dict[str, float] = Field(default_factory=dict, alias="revenueBreakdown")
    approach: str | None = None


class SaveBudgetConfigRequest(BaseModel):
    """Request body for POST /api/save-budget-config"""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., min_length=1, alias="sessionId")
    budget_data: BudgetData = Field(..., alias="budgetData")
