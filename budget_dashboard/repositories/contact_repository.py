"""
Repository helpers for congress contact data.

Reads contact counts and contact/member join rows from the store, and
records new contact events. Join rows are validated here so the stats
service only ever sees typed records.
"""

from datetime import datetime
from typing import Any

from budget_dashboard.db.supabase_rest import StoreError, SupabaseRestClient, gte, lt
from budget_dashboard.infrastructure.observability.logging import get_logger
from budget_dashboard.models.domain.contact_domain import ContactEvent, JoinedContactRow, Member

logger = get_logger(__name__)

CONTACTS_TABLE = "congress_contacts"
MEMBERS_RELATION = "congress_members"
TIMESTAMP_COLUMN = "contacted_at"

# !inner drops contacts that were never resolved to a member
JOIN_COLUMNS = f"zip_code,{MEMBERS_RELATION}!inner(state,district,chamber)"
# unique key so offset pages neither overlap nor skip
JOIN_ORDER = "id.asc"


class ContactRepository:
    """Store access for congress_contacts."""

    def __init__(self, client: SupabaseRestClient):
        self.client = client

    async def count_contacts(
        self, since: datetime | None = None, until: datetime | None = None
    ) -> int | None:
        """
        Count contacts with ``since <= contacted_at < until``.

        Either bound may be omitted. Returns None if the store gave no total.
        """
        filters = []
        if since is not None:
            filters.append(gte(TIMESTAMP_COLUMN, since))
        if until is not None:
            filters.append(lt(TIMESTAMP_COLUMN, until))
        return await self.client.count(CONTACTS_TABLE, filters)

    async def fetch_contact_members(self) -> list[JoinedContactRow]:
        """Return every contact joined to its member, one row per member."""
        raw_rows = await self.client.select_all(CONTACTS_TABLE, JOIN_COLUMNS, order=JOIN_ORDER)

        joined: list[JoinedContactRow] = []
        for raw in raw_rows:
            joined.extend(_parse_joined_row(raw))

        logger.debug("Contact join rows fetched", raw_rows=len(raw_rows), joined_rows=len(joined))
        return joined

    async def insert_contact(self, event: ContactEvent) -> None:
        await self.client.insert(
            CONTACTS_TABLE,
            {
                "zip_code": event.zip_code,
                "representatives": event.representatives,
                "budget_summary": event.budget_summary,
                "contacted_at": event.contacted_at.isoformat(),
            },
        )


def _parse_joined_row(raw: Any) -> list[JoinedContactRow]:
    if not isinstance(raw, dict):
        raise StoreError(f"Malformed join row: {raw!r}", operation="select", table=CONTACTS_TABLE)

    zip_code = raw.get("zip_code")
    members = raw.get(MEMBERS_RELATION)

    # many-to-one embeds come back as an object, one-to-many as a list
    if isinstance(members, dict):
        members = [members]
    if not isinstance(members, list) or not members:
        raise StoreError(
            f"Join row without member data: {raw!r}", operation="select", table=CONTACTS_TABLE
        )

    rows = []
    for member_raw in members:
        member = _parse_member(member_raw)
        rows.append(
            JoinedContactRow(
                zip_code=str(zip_code) if zip_code is not None else "",
                state=member.state,
                district=member.district,
                chamber=member.chamber,
            )
        )
    return rows


def _parse_member(raw: Any) -> Member:
    if not isinstance(raw, dict):
        raise StoreError(f"Malformed member: {raw!r}", operation="select", table=MEMBERS_RELATION)

    state = raw.get("state")
    chamber = raw.get("chamber")
    district = raw.get("district")

    if not isinstance(state, str) or not state:
        raise StoreError(
            f"Member without state: {raw!r}", operation="select", table=MEMBERS_RELATION
        )
    if not isinstance(chamber, str) or not chamber:
        raise StoreError(
            f"Member without chamber: {raw!r}", operation="select", table=MEMBERS_RELATION
        )

    return Member(
        state=state,
        district=str(district) if district is not None else None,
        chamber=chamber.lower(),
    )
