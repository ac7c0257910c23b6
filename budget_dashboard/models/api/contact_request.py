# budget_dashboard/models/api/contact_request.py
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RepresentativeRef(BaseModel):
    """Representative the constituent chose to contact."""

    id: str
    name: str
    chamber: str


class TrackCongressContactRequest(BaseModel):
    """Request body for POST /api/track-congress-contact"""

    model_config = ConfigDict(populate_by_name=True)

    zip_code: str = Field(..., min_length=5, max_length=10, alias="zipCode")
    representatives: list[RepresentativeRef] = Field(default_factory=list)
    budget_summary: dict[str, Any] | None = Field(default=None, alias="budgetSummary")
