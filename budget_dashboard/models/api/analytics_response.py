# budget_dashboard/models/api/analytics_response.py
from pydantic import BaseModel


class CreateSessionResponse(BaseModel):
    """Response for POST /api/create-budget-session"""

    id: str
