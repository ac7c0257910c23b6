"""
Domain models for constituent-to-Congress contact reporting.

Plain dataclasses shared by the contact repository, the stats service and
the API layer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

Chamber = Literal["house", "senate"]


@dataclass(slots=True)
class ContactEvent:
    """One contact action recorded in congress_contacts."""

    zip_code: str
    contacted_at: datetime
    representatives: list[dict] = field(default_factory=list)
    budget_summary: dict | None = None


@dataclass(slots=True)
class Member:
    """A legislator as stored in congress_members."""

    state: str
    district: str | None
    chamber: Chamber


@dataclass(slots=True)
class JoinedContactRow:
    """A contact joined to the member it was routed to."""

    zip_code: str
    state: str
    district: str | None
    chamber: str

    @property
    def district_key(self) -> str:
        """Grouping label: "CA-12" for house members, "NY (Senate)" otherwise."""
        if self.chamber == "house":
            return f"{self.state}-{self.district if self.district else 'AL'}"
        return f"{self.state} (Senate)"


@dataclass(slots=True)
class RankedDistrict:
    district: str
    count: int


@dataclass(slots=True)
class ContactCounts:
    """Raw counts as read from the store; None means the store gave no total."""

    total: int | None
    last_24_hours: int | None
    this_week: int | None
    prior_week: int | None


@dataclass(slots=True)
class ContactStats:
    """Aggregated contact report returned by the stats service."""

    total_contacts: int
    last_24_hours: int
    top_districts: list[RankedDistrict]
    growth_rate: float
