# budget_dashboard/models/api/contact_response.py
from pydantic import BaseModel, ConfigDict, Field

from budget_dashboard.models.domain.contact_domain import ContactStats


class TopDistrict(BaseModel):
    """One ranked district in the contact stats report."""

    district: str = Field(..., description='District key, e.g. "CA-12" or "NY (Senate)"')
    count: int = Field(..., ge=0)


class ContactStatsResponse(BaseModel):
    """Response for GET /api/congress-contact-stats"""

    model_config = ConfigDict(populate_by_name=True)

    total_contacts: int = Field(..., ge=0, alias="totalContacts")
    last_24_hours: int = Field(..., ge=0, alias="last24Hours")
    top_districts: list[TopDistrict] = Field(default_factory=list, alias="topDistricts")
    growth_rate: float = Field(
        ..., alias="growthRate", description="Week-over-week change, percent"
    )

    @classmethod
    def from_domain(cls, stats: ContactStats) -> "ContactStatsResponse":
        return cls(
            total_contacts=stats.total_contacts,
            last_24_hours=stats.last_24_hours,
            top_districts=[
                TopDistrict(district=d.district, count=d.count) for d in stats.top_districts
            ],
            growth_rate=stats.growth_rate,
        )


class ErrorResponse(BaseModel):
    """Error body shared by every endpoint."""

    error: str


class SuccessResponse(BaseModel):
    success: bool = True
