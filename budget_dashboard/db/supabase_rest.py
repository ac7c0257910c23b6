# budget_dashboard/db/supabase_rest.py
"""
Async client for the Supabase PostgREST interface.

Covers the small query surface the API needs: exact row counts with
comparison filters, selects (including embedded joins), inserts and
updates. All calls authenticate with the service-role key.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

import httpx

from budget_dashboard.config import settings
from budget_dashboard.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

MAX_KEEPALIVE_CONNECTIONS = 10
MAX_CONNECTIONS = 20

# Supabase caps a single response at 1000 rows by default
PAGE_SIZE = 1000


class StoreError(Exception):
    """Custom exception for store operations."""

    def __init__(
        self,
        message: str,
        operation: str = "unknown",
        status_code: int | None = None,
        table: str | None = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
        self.table = table


@dataclass(frozen=True, slots=True)
class Filter:
    """A PostgREST horizontal filter, rendered as ``column=op.value``."""

    column: str
    op: str
    value: Any

    def as_param(self) -> tuple[str, str]:
        return self.column, f"{self.op}.{_format_value(self.value)}"


def eq(column: str, value: Any) -> Filter:
    if value is None:
        raise ValueError(f"eq() cannot match NULL on {column}; use is_()")
    return Filter(column, "eq", value)


def gte(column: str, value: Any) -> Filter:
    return Filter(column, "gte", value)


def lt(column: str, value: Any) -> Filter:
    return Filter(column, "lt", value)


def is_(column: str, value: bool | None) -> Filter:
    """Identity test (``is.null``, ``is.true``), the only way to match NULL."""
    return Filter(column, "is", value)


def _format_value(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def parse_content_range(header: str | None) -> int | None:
    """
    Extract the total from a Content-Range header.

    "0-24/42" -> 42, "*/0" -> 0, "0-24/*" -> None (count unknown).
    """
    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1].strip()
    if total == "*":
        return None
    try:
        return int(total)
    except ValueError as e:
        raise StoreError(f"Invalid Content-Range header: {header}", operation="count") from e


class SupabaseRestClient:
    """Thin async wrapper around the Supabase REST endpoint."""

    def __init__(
        self,
        base_url: str,
        service_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=f"{self.base_url}/rest/v1",
            headers={
                "apikey": service_key,
                "Authorization": f"Bearer {service_key}",
                "Accept": "application/json",
            },
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(
                max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
                max_connections=MAX_CONNECTIONS,
            ),
            transport=transport,
        )
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._closed:
            return
        await self._client.aclose()
        self._closed = True

    async def _request(
        self,
        method: str,
        table: str,
        operation: str,
        *,
        params: list[tuple[str, str]] | None = None,
        headers: dict[str, str] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method, f"/{table}", params=params, headers=headers, json=json
            )
        except httpx.HTTPError as e:
            logger.error(
                "Store request failed",
                operation=operation,
                table=table,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise StoreError(
                f"Store request failed: {e}", operation=operation, table=table
            ) from e

        if not response.is_success:
            message = _error_message(response)
            logger.error(
                "Store returned an error",
                operation=operation,
                table=table,
                status_code=response.status_code,
                error=message,
            )
            raise StoreError(
                message, operation=operation, status_code=response.status_code, table=table
            )

        return response

    async def count(self, table: str, filters: list[Filter] | None = None) -> int | None:
        """
        Exact row count for ``table`` matching ``filters``.

        Returns None when the store does not report a total.
        """
        params = [("select", "*")] + [f.as_param() for f in filters or []]
        response = await self._request(
            "HEAD", table, "count", params=params, headers={"Prefer": "count=exact"}
        )
        return parse_content_range(response.headers.get("content-range"))

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: list[Filter] | None = None,
        *,
        order: str | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Return one response worth of matching rows as dicts.

        ``columns`` may embed related tables. The server truncates large
        results to its max-rows setting; use select_all() when every row
        is needed.
        """
        rows, _ = await self._select_page(table, columns, filters, order=order, limit=limit)
        return rows

    async def select_all(
        self,
        table: str,
        columns: str = "*",
        filters: list[Filter] | None = None,
        *,
        order: str | None = None,
        page_size: int = PAGE_SIZE,
    ) -> list[dict[str, Any]]:
        """
        Return every matching row, paging by offset.

        The first page asks for an exact count. Paging stops once that many
        rows have arrived or a page comes back empty, so a server cap smaller
        than ``page_size`` still yields the full result. Pass a unique
        ``order`` so pages do not overlap.
        """
        rows: list[dict[str, Any]] = []
        total: int | None = None
        pages = 0

        while True:
            page, page_total = await self._select_page(
                table,
                columns,
                filters,
                order=order,
                limit=page_size,
                offset=len(rows),
                count=pages == 0,
            )
            pages += 1
            if pages == 1:
                total = page_total
            if not page:
                break
            rows.extend(page)
            if total is not None and len(rows) >= total:
                break

        logger.debug("Store rows fetched", table=table, rows=len(rows), pages=pages, total=total)
        return rows

    async def _select_page(
        self,
        table: str,
        columns: str,
        filters: list[Filter] | None,
        *,
        order: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        count: bool = False,
    ) -> tuple[list[dict[str, Any]], int | None]:
        params = [("select", columns)] + [f.as_param() for f in filters or []]
        if order:
            params.append(("order", order))
        if limit is not None:
            params.append(("limit", str(limit)))
        if offset:
            params.append(("offset", str(offset)))
        headers = {"Prefer": "count=exact"} if count else None

        response = await self._request("GET", table, "select", params=params, headers=headers)
        try:
            rows = response.json()
        except ValueError as e:
            raise StoreError(
                f"Invalid JSON from store: {e}", operation="select", table=table
            ) from e

        if not isinstance(rows, list):
            raise StoreError(
                f"Expected a list of rows, got {type(rows).__name__}",
                operation="select",
                table=table,
            )
        total = parse_content_range(response.headers.get("content-range")) if count else None
        return rows, total

    async def insert(
        self, table: str, row: dict[str, Any], *, returning: str | None = None
    ) -> dict[str, Any] | None:
        """Insert one row; return it when ``returning`` columns are requested."""
        if returning:
            headers = {"Prefer": "return=representation"}
            params = [("select", returning)]
        else:
            headers = {"Prefer": "return=minimal"}
            params = None

        response = await self._request(
            "POST", table, "insert", params=params, headers=headers, json=row
        )
        if not returning:
            return None

        created = response.json()
        if isinstance(created, list):
            created = created[0] if created else None
        return created

    async def update(self, table: str, values: dict[str, Any], filters: list[Filter]) -> None:
        """Update rows matching ``filters``. Refuses an unfiltered update."""
        if not filters:
            raise StoreError("Refusing to update without filters", operation="update", table=table)

        await self._request(
            "PATCH",
            table,
            "update",
            params=[f.as_param() for f in filters],
            headers={"Prefer": "return=minimal"},
            json=values,
        )

    async def ping(self, table: str = "congress_contacts") -> bool:
        """Cheap reachability check used by readiness probes."""
        await self.count(table, [eq("zip_code", "00000")])
        return True


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(data, dict):
        return data.get("message") or data.get("error") or f"HTTP {response.status_code}"
    return f"HTTP {response.status_code}"


# Process-wide client, created on first use
_store_client: SupabaseRestClient | None = None


def get_store_client() -> SupabaseRestClient:
    """
    Return the shared store client, building it from settings on first use.

    Raises:
        ConfigurationError: if store credentials are missing (no I/O attempted)
    """
    global _store_client

    url, key = settings.store_credentials()
    if _store_client is None or _store_client.closed:
        _store_client = SupabaseRestClient(url, key, timeout=settings.STORE_REQUEST_TIMEOUT)
        logger.info("Store client created", project_ref=settings.project_ref())
    return _store_client


async def close_store_client() -> None:
    """Close the shared store client if one was created."""
    global _store_client

    if _store_client is not None:
        await _store_client.close()
        _store_client = None
        logger.info("Store client closed")
