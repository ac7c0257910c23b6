"""Test doubles shared by unit and integration tests."""

from datetime import UTC, datetime

import httpx

from budget_dashboard.db.supabase_rest import Filter, StoreError

FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


def _matches(row: dict, flt: Filter) -> bool:
    value = row.get(flt.column)
    if flt.op == "eq":
        return value == flt.value
    if flt.op == "gte":
        return value >= flt.value
    if flt.op == "lt":
        return value < flt.value
    raise AssertionError(f"Unexpected filter op {flt.op}")


class FakeStore:
    """
    In-memory stand-in for SupabaseRestClient.

    Counts are computed from ``contacts`` (dicts with contacted_at), selects
    return the canned ``joined`` rows. Every call is recorded in ``calls``.
    """

    def __init__(
        self,
        contacts: list[dict] | None = None,
        joined: list[dict] | None = None,
        *,
        fail_on: str | None = None,
        missing_counts: bool = False,
    ):
        self.contacts = contacts or []
        self.joined = joined or []
        self.fail_on = fail_on
        self.missing_counts = missing_counts
        self.calls: list[tuple] = []
        self.inserted: dict[str, list[dict]] = {}
        self.updated: list[tuple] = []

    def _maybe_fail(self, operation: str, table: str) -> None:
        if self.fail_on == operation:
            raise StoreError("store unavailable", operation=operation, status_code=503, table=table)

    async def count(self, table, filters=None):
        self.calls.append(("count", table, tuple(filters or ())))
        self._maybe_fail("count", table)
        if self.missing_counts:
            return None
        return sum(1 for row in self.contacts if all(_matches(row, f) for f in filters or []))

    async def select(self, table, columns="*", filters=None, *, order=None, limit=None):
        self.calls.append(("select", table, columns))
        self._maybe_fail("select", table)
        return list(self.joined)

    async def select_all(self, table, columns="*", filters=None, *, order=None, page_size=1000):
        return await self.select(table, columns, filters, order=order)

    async def insert(self, table, row, *, returning=None):
        self.calls.append(("insert", table))
        self._maybe_fail("insert", table)
        self.inserted.setdefault(table, []).append(row)
        if returning:
            return {"id": "session-123"}
        return None

    async def update(self, table, values, filters):
        self.calls.append(("update", table))
        self._maybe_fail("update", table)
        self.updated.append((table, values, tuple(filters)))

    async def ping(self, table="congress_contacts"):
        self.calls.append(("ping", table))
        return True


def house_row(state: str, district: str, zip_code: str = "94103") -> dict:
    return {
        "zip_code": zip_code,
        "congress_members": {"state": state, "district": district, "chamber": "house"},
    }


def senate_row(state: str, district: str | None = None, zip_code: str = "10001") -> dict:
    return {
        "zip_code": zip_code,
        "congress_members": {"state": state, "district": district, "chamber": "senate"},
    }


def contacts_aged(count: int, age, now: datetime = FIXED_NOW) -> list[dict]:
    """``count`` contact rows stamped ``age`` (a timedelta) before ``now``."""
    return [{"zip_code": "94103", "contacted_at": now - age} for _ in range(count)]


class CappedRestTable:
    """
    MockTransport handler serving ``rows`` the way PostgREST does.

    Each response holds at most ``max_rows`` rows starting at ``offset``;
    ``Prefer: count=exact`` requests get a Content-Range total, or ``*``
    when ``report_count`` is off.
    """

    def __init__(self, rows: list[dict], max_rows: int = 1000, *, report_count: bool = True):
        self.rows = rows
        self.max_rows = max_rows
        self.report_count = report_count
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        params = request.url.params
        offset = int(params.get("offset", 0))
        limit = min(int(params.get("limit", self.max_rows)), self.max_rows)
        page = self.rows[offset : offset + limit]

        headers = {}
        if "count=exact" in request.headers.get("prefer", ""):
            total = str(len(self.rows)) if self.report_count else "*"
            span = f"{offset}-{offset + len(page) - 1}" if page else "*"
            headers["Content-Range"] = f"{span}/{total}"
        return httpx.Response(200, json=page, headers=headers)
