"""
FastAPI dependencies for the API routes.

Routes depend on these instead of module singletons so tests can swap
them through app.dependency_overrides.
"""

from collections.abc import Callable

from fastapi.responses import JSONResponse

from budget_dashboard.db.supabase_rest import SupabaseRestClient, get_store_client
from budget_dashboard.services.analytics_service import AnalyticsService, analytics_service
from budget_dashboard.services.contact_stats_service import (
    ContactStatsService,
    contact_stats_service,
)


def get_store_factory() -> Callable[[], SupabaseRestClient]:
    return get_store_client


def get_contact_stats_service() -> ContactStatsService:
    return contact_stats_service


def get_analytics_service() -> AnalyticsService:
    return analytics_service


def error_response(message: str, status_code: int = 500) -> JSONResponse:
    """Error body shared by every endpoint: {"error": message}."""
    return JSONResponse(status_code=status_code, content={"error": message})
