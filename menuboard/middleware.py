"""
FastAPI middleware for request correlation and multi-tenant support.
"""

import logging
import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .tenant import (
    clear_current_tenant,
    resolve_subdomain,
    set_current_tenant,
)

logger = logging.getLogger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique request ID to each request.

    The ID is available in request.state.request_id and returned in the
    X-Request-ID header. A client-supplied X-Request-ID is reused.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class TenantMiddleware(BaseHTTPMiddleware):
    """
    Middleware that resolves the tenant subdomain from incoming requests.

    Tenant resolution order:
    1. Tenant header (X-Tenant-Subdomain by default)
    2. ?tenant= query parameter
    3. Host header under TENANT_BASE_DOMAIN

    Requests without a tenant pass through untouched; routes that need one
    depend on ``get_tenant`` which rejects them.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        subdomain = resolve_subdomain(
            request.headers,
            request.query_params,
            request.headers.get("host"),
        )

        try:
            set_current_tenant(subdomain)
            request.state.tenant_subdomain = subdomain
            if subdomain:
                logger.debug("Request tenant resolved: %s", subdomain)

            response = await call_next(request)
            return response

        finally:
            # Always clear tenant context after request
            clear_current_tenant()
