"""
Middleware components for request processing.

This package contains middleware for:
- Request context (request ID, client IP, request timing logs)
"""

from budget_dashboard.middleware.request_context import RequestContextMiddleware

__all__ = [
    "RequestContextMiddleware",
]
