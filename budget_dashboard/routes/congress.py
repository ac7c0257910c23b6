"""
congress.py
-----------
Purpose:
    Endpoints behind the dashboard's "Contact Congress" tool.

Usage:
    1. GET /api/congress-contact-stats - Contact totals, top districts, growth
    2. POST /api/track-congress-contact - Record one contact event
"""

from collections.abc import Callable

from fastapi import APIRouter, Depends

from budget_dashboard.config import ConfigurationError
from budget_dashboard.db.supabase_rest import StoreError, SupabaseRestClient
from budget_dashboard.infrastructure.observability.logging import get_logger
from budget_dashboard.models.api.contact_request import TrackCongressContactRequest
from budget_dashboard.models.api.contact_response import (
    ContactStatsResponse,
    ErrorResponse,
    SuccessResponse,
)
from budget_dashboard.routes.dependencies import (
    error_response,
    get_contact_stats_service,
    get_store_factory,
)
from budget_dashboard.services.contact_stats_service import ContactStatsService
from budget_dashboard.services.contact_tracking_service import record_contact

router = APIRouter(prefix="/api", tags=["congress"])
logger = get_logger(__name__)


@router.get(
    "/congress-contact-stats",
    response_model=ContactStatsResponse,
    responses={500: {"model": ErrorResponse}},
)
async def congress_contact_stats(
    service: ContactStatsService = Depends(get_contact_stats_service),
):
    """
    Aggregate contact volume for the dashboard.

    Returns:
        ContactStatsResponse: totals, top 5 districts and week-over-week growth

    Raises:
        500: {"error": "Configuration error"} when store credentials are missing
        500: {"error": "Internal server error"} on any other failure
    """
    try:
        stats = await service.get_contact_stats()
    except ConfigurationError as e:
        logger.error("Store configuration missing", missing=e.missing)
        return error_response("Configuration error")
    except Exception as e:
        logger.error(
            "Error loading congress contact stats", error=str(e), error_type=type(e).__name__
        )
        return error_response("Internal server error")

    return ContactStatsResponse.from_domain(stats)


@router.post(
    "/track-congress-contact",
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def track_congress_contact(
    request: TrackCongressContactRequest,
    store_factory: Callable[[], SupabaseRestClient] = Depends(get_store_factory),
):
    """Record that a constituent contacted their representatives."""
    try:
        await record_contact(
            zip_code=request.zip_code,
            representatives=[r.model_dump() for r in request.representatives],
            budget_summary=request.budget_summary,
            client_factory=store_factory,
        )
    except ConfigurationError as e:
        logger.error("Missing store credentials", missing=e.missing)
        return error_response("Configuration error")
    except StoreError as e:
        logger.error("Failed to track contact", error=str(e), status_code=e.status_code)
        return error_response("Failed to save contact")
    except Exception as e:
        logger.error("Error tracking congress contact", error=str(e), error_type=type(e).__name__)
        return error_response("Internal server error")

    return SuccessResponse()
