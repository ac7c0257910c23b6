"""
analytics.py
------------
Purpose:
    Usage tracking endpoints called by the dashboard's analytics client.

Usage:
    1. POST /api/create-budget-session - Start a session, returns its id
    2. POST /api/complete-budget-session - Mark a session finished
    3. POST /api/track-interaction - Record one UI interaction
    4. POST /api/save-user-feedback - Store the feedback form
    5. POST /api/save-budget-config - Store the user's final budget
"""

from collections.abc import Awaitable

from fastapi import APIRouter, Depends

from budget_dashboard.config import ConfigurationError
from budget_dashboard.db.supabase_rest import StoreError
from budget_dashboard.infrastructure.observability.logging import get_logger
from budget_dashboard.models.api.analytics_request import (
    CompleteSessionRequest,
    SaveBudgetConfigRequest,
    SaveFeedbackRequest,
    TrackInteractionRequest,
)
from budget_dashboard.models.api.analytics_response import CreateSessionResponse
from budget_dashboard.models.api.contact_response import ErrorResponse, SuccessResponse
from budget_dashboard.routes.dependencies import error_response, get_analytics_service
from budget_dashboard.services.analytics_service import AnalyticsService

router = APIRouter(
    prefix="/api",
    tags=["analytics"],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
logger = get_logger(__name__)


async def _write(operation: Awaitable, route: str, failure_message: str):
    """Await a store write and map failures onto the shared error bodies."""
    try:
        await operation
    except ConfigurationError as e:
        logger.error("Missing store credentials", route=route, missing=e.missing)
        return error_response("Server configuration error")
    except StoreError as e:
        logger.error("Store write failed", route=route, error=str(e), status_code=e.status_code)
        return error_response(failure_message)
    except Exception as e:
        logger.error(f"Error in {route}", error=str(e), error_type=type(e).__name__)
        return error_response("Internal server error")

    return SuccessResponse()


@router.post("/create-budget-session", response_model=CreateSessionResponse)
async def create_budget_session(service: AnalyticsService = Depends(get_analytics_service)):
    """Insert an empty session row; the store assigns id and created_at."""
    try:
        session_id = await service.create_session()
    except ConfigurationError as e:
        logger.error("Missing store credentials", route="create-budget-session", missing=e.missing)
        return error_response("Server configuration error")
    except StoreError as e:
        logger.error("Store insert error", error=str(e), status_code=e.status_code)
        return error_response(str(e))
    except Exception as e:
        logger.error("Error in create-budget-session", error=str(e), error_type=type(e).__name__)
        return error_response("Internal server error")

    return CreateSessionResponse(id=session_id)


@router.post("/complete-budget-session", response_model=SuccessResponse)
async def complete_budget_session(
    request: CompleteSessionRequest,
    service: AnalyticsService = Depends(get_analytics_service),
):
    if not request.session_id:
        return error_response("Missing session ID", status_code=400)

    return await _write(
        service.complete_session(request.session_id),
        "complete-budget-session",
        "Failed to complete session",
    )


@router.post("/track-interaction", response_model=SuccessResponse)
async def track_interaction(
    request: TrackInteractionRequest,
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await _write(
        service.track_interaction(
            request.session_id, request.interaction_type, request.interaction_data
        ),
        "track-interaction",
        "Failed to track interaction",
    )


@router.post("/save-user-feedback", response_model=SuccessResponse)
async def save_user_feedback(
    request: SaveFeedbackRequest,
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await _write(
        service.save_feedback(request.session_id, request.feedback.model_dump()),
        "save-user-feedback",
        "Failed to save feedback",
    )


@router.post("/save-budget-config", response_model=SuccessResponse)
async def save_budget_config(
    request: SaveBudgetConfigRequest,
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await _write(
        service.save_budget_config(request.session_id, request.budget_data.model_dump()),
        "save-budget-config",
        "Failed to save budget configuration",
    )
