# budget_dashboard/routes/health.py
"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from budget_dashboard.config import ConfigurationError, settings
from budget_dashboard.db.supabase_rest import get_store_client

router = APIRouter()


@router.get("/healthz")
async def healthz():
    """Basic health check - always returns 200 if app is running."""
    return {"status": "ok", "service": "budget-dashboard-api"}


@router.get("/readyz")
async def readyz():
    """
    Readiness check covering configuration and store reachability.
    """
    checks = {}
    overall_ok = True

    # 1) Configuration checks
    config_issues = []
    try:
        settings.store_credentials()
    except ConfigurationError as e:
        config_issues = [f"{name} not set" for name in e.missing]

    checks["configuration"] = {
        "ok": not config_issues,
        "issues": config_issues or None,
        "environment": settings.environment,
    }
    overall_ok = overall_ok and not config_issues

    # 2) Store reachability (skipped when unconfigured)
    if config_issues:
        checks["store"] = {"ok": False, "error": "Store not configured"}
        overall_ok = False
    else:
        t0 = time.time()
        try:
            store_ok = await get_store_client().ping()
            checks["store"] = {
                "ok": bool(store_ok),
                "latency_ms": round((time.time() - t0) * 1000, 1),
                "project_ref": settings.project_ref(),
            }
            overall_ok = overall_ok and bool(store_ok)
        except Exception as e:
            checks["store"] = {
                "ok": False,
                "error": f"{type(e).__name__}: {e}",
                "latency_ms": round((time.time() - t0) * 1000, 1),
            }
            overall_ok = False

    return {"overall_ok": overall_ok, "checks": checks, "timestamp": time.time()}
