"""
Records constituent-to-Congress contact events.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from budget_dashboard.db.supabase_rest import SupabaseRestClient, get_store_client
from budget_dashboard.infrastructure.observability.logging import get_logger
from budget_dashboard.models.domain.contact_domain import ContactEvent
from budget_dashboard.repositories.contact_repository import ContactRepository

logger = get_logger(__name__)


async def record_contact(
    zip_code: str,
    representatives: list[dict[str, Any]],
    budget_summary: dict[str, Any] | None,
    *,
    client_factory: Callable[[], SupabaseRestClient] = get_store_client,
) -> ContactEvent:
    """
    Store one contact event stamped with the current time.

    Raises:
        ConfigurationError: store credentials missing
        StoreError: the store rejected the insert
    """
    repository = ContactRepository(client_factory())

    event = ContactEvent(
        zip_code=zip_code,
        contacted_at=datetime.now(UTC),
        representatives=[
            {"id": r.get("id"), "name": r.get("name"), "chamber": r.get("chamber")}
            for r in representatives
        ],
        budget_summary=budget_summary,
    )
    await repository.insert_contact(event)

    logger.info(
        "Congress contact recorded",
        zip_code=zip_code,
        representatives=len(event.representatives),
    )
    return event
