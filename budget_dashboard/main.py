# budget_dashboard/main.py
"""
FastAPI application for the Federal Budget Dashboard API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from budget_dashboard.config import settings
from budget_dashboard.db.supabase_rest import close_store_client
from budget_dashboard.infrastructure.observability.logging import get_logger, setup_logging
from budget_dashboard.middleware import RequestContextMiddleware
from budget_dashboard.routes import analytics, congress, health

# Setup logging before creating the app
setup_logging(log_level=settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and release the store client on shutdown."""
    logger.info(
        "Application starting",
        environment=settings.environment,
        debug=settings.debug,
        store_configured=bool(settings.SUPABASE_URL and settings.SUPABASE_SERVICE_ROLE_KEY),
    )

    yield

    logger.info("Application shutting down")
    try:
        await close_store_client()
    except Exception as e:
        logger.error("Error closing store client", error=str(e))


app = FastAPI(
    title="Federal Budget Dashboard API",
    description="Contact statistics and usage tracking for the budget dashboard",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)
app.add_middleware(RequestContextMiddleware)

# Include routers
app.include_router(health.router)
app.include_router(congress.router)
app.include_router(analytics.router)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Invalid or incomplete request bodies answer 400 with the shared error body."""
    logger.warning(
        "Request validation failed",
        path=request.url.path,
        errors=len(exc.errors()),
    )
    return JSONResponse(status_code=400, content={"error": "Missing required fields"})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
