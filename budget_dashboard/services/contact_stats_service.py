"""
Contact statistics aggregation.

Builds the dashboard's contact report: total contacts, contacts in the
last 24 hours, the five districts with the most contacts, and the
week-over-week growth rate.

The pure helpers (district counting, ranking, growth) carry all the
arithmetic; ContactStatsService only fetches and assembles.
"""

import asyncio
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from budget_dashboard.config import ConfigurationError
from budget_dashboard.db.supabase_rest import SupabaseRestClient, get_store_client
from budget_dashboard.infrastructure.observability.logging import get_logger
from budget_dashboard.models.domain.contact_domain import (
    ContactCounts,
    ContactStats,
    JoinedContactRow,
    RankedDistrict,
)
from budget_dashboard.repositories.contact_repository import ContactRepository

logger = get_logger(__name__)

TOP_DISTRICTS_LIMIT = 5
DAY = timedelta(hours=24)
WEEK = timedelta(days=7)


class AggregationError(Exception):
    """Any failure while querying or shaping the contact report."""

    def __init__(self, message: str, stage: str = "unknown"):
        super().__init__(message)
        self.stage = stage


def coalesce_count(value: int | None) -> int:
    """A missing count from the store counts as zero."""
    return 0 if value is None else int(value)


def count_by_district(rows: Iterable[JoinedContactRow]) -> dict[str, int]:
    """Fold join rows into {district_key: count}. Each row lands in one bucket."""
    counts: dict[str, int] = {}
    for row in rows:
        key = row.district_key
        counts[key] = counts.get(key, 0) + 1
    return counts


def rank_districts(
    counts: dict[str, int], limit: int = TOP_DISTRICTS_LIMIT
) -> list[RankedDistrict]:
    """Highest count first; equal counts ordered by district key."""
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [RankedDistrict(district=key, count=count) for key, count in ordered[:limit]]


def growth_rate(this_week: int, prior_week: int) -> float:
    """
    Percent change from the prior 7-day window to the current one.

    Zero when the prior window is empty. Rounded to one decimal, halves
    away from zero.
    """
    if prior_week <= 0:
        return 0.0
    rate = Decimal(this_week - prior_week) / Decimal(prior_week) * 100
    rounded = rate.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return float(rounded)


def build_stats(counts: ContactCounts, rows: Iterable[JoinedContactRow]) -> ContactStats:
    """Assemble the report from raw counts and join rows."""
    return ContactStats(
        total_contacts=coalesce_count(counts.total),
        last_24_hours=coalesce_count(counts.last_24_hours),
        top_districts=rank_districts(count_by_district(rows)),
        growth_rate=growth_rate(
            coalesce_count(counts.this_week), coalesce_count(counts.prior_week)
        ),
    )


class ContactStatsService:
    """Compile the congress contact report for the dashboard."""

    def __init__(
        self,
        client_factory: Callable[[], SupabaseRestClient] = get_store_client,
        clock: Callable[[], datetime] | None = None,
    ):
        self._client_factory = client_factory
        self._clock = clock or (lambda: datetime.now(UTC))

    async def get_contact_stats(self) -> ContactStats:
        """
        Build the contact report relative to the current time.

        Raises:
            ConfigurationError: store credentials missing; nothing was queried
            AggregationError: any query or shaping failure
        """
        # Resolved first so a missing configuration never reaches the store
        client = self._client_factory()
        repository = ContactRepository(client)

        now = self._clock()
        day_ago = now - DAY
        week_ago = now - WEEK
        two_weeks_ago = now - 2 * WEEK

        stage = "counts"
        try:
            total, last_24h, this_week, prior_week = await asyncio.gather(
                repository.count_contacts(),
                repository.count_contacts(since=day_ago),
                repository.count_contacts(since=week_ago),
                repository.count_contacts(since=two_weeks_ago, until=week_ago),
            )
            counts = ContactCounts(
                total=total, last_24_hours=last_24h, this_week=this_week, prior_week=prior_week
            )

            stage = "districts"
            rows = await repository.fetch_contact_members()

            stage = "assemble"
            stats = build_stats(counts, rows)

        except ConfigurationError:
            raise
        except Exception as e:
            logger.error(
                "Contact stats aggregation failed",
                stage=stage,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise AggregationError(f"Contact stats aggregation failed: {e}", stage=stage) from e

        logger.info(
            "Contact stats compiled",
            total_contacts=stats.total_contacts,
            last_24_hours=stats.last_24_hours,
            districts_ranked=len(stats.top_districts),
            growth_rate=stats.growth_rate,
        )
        return stats


contact_stats_service = ContactStatsService()
