"""
Multi-tenant resolution.

Every user is a tenant addressed by its subdomain. This module handles:
- Resolving the tenant subdomain from request information (header, query, host)
- Tracking the current tenant in a context variable for the request
- The ``get_tenant`` dependency used by public (unauthenticated) routes
"""

import logging
from contextvars import ContextVar
from typing import Mapping, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from . import config
from .db import get_db
from .errors import ApiError
from .models import User

logger = logging.getLogger(__name__)

# Context variable to track current tenant in async/threaded contexts
_current_tenant: ContextVar[Optional[str]] = ContextVar("current_tenant", default=None)


def subdomain_from_host(host: Optional[str], base_domain: Optional[str]) -> Optional[str]:
    """
    Extract the tenant label from ``host`` when it sits directly under ``base_domain``.

    >>> subdomain_from_host("pepe.menus.example.com:8000", "menus.example.com")
    'pepe'
    """
    if not host or not base_domain:
        return None
    hostname = host.lower().split(":")[0]
    suffix = "." + base_domain.lower().lstrip(".")
    if not hostname.endswith(suffix):
        return None
    label = hostname[: -len(suffix)]
    # Only a single label counts; "a.b.menus.example.com" is not a tenant host
    if not label or "." in label:
        return None
    return label


def resolve_subdomain(
    headers: Mapping[str, str],
    query_params: Mapping[str, str],
    host: Optional[str] = None,
) -> Optional[str]:
    """
    Resolve the tenant subdomain from request information.

    Resolution order:
    1. Tenant header (TENANT_HEADER)
    2. ?tenant= query parameter
    3. Host header under TENANT_BASE_DOMAIN
    """
    candidate = headers.get(config.TENANT_HEADER) or query_params.get(config.TENANT_QUERY_PARAM)
    if not candidate:
        candidate = subdomain_from_host(host, config.TENANT_BASE_DOMAIN)
    if not candidate:
        return None
    candidate = candidate.strip().lower()
    return candidate or None


def get_current_tenant() -> Optional[str]:
    """Get the current tenant subdomain from context."""
    return _current_tenant.get()


def set_current_tenant(subdomain: Optional[str]) -> None:
    """Set the current tenant subdomain in context."""
    _current_tenant.set(subdomain)


def clear_current_tenant() -> None:
    """Clear the current tenant from context."""
    _current_tenant.set(None)


def get_tenant(request: Request, db: Session = Depends(get_db)) -> User:
    """
    FastAPI dependency returning the active user that owns the request's tenant.

    The subdomain is read from request state (set by TenantMiddleware); when the
    middleware is not installed it is resolved directly from the request.

    Raises:
        ApiError (400): No tenant given.
        ApiError (404): No active user with that subdomain.
    """
    subdomain = getattr(request.state, "tenant_subdomain", None)
    if subdomain is None:
        subdomain = resolve_subdomain(
            request.headers, request.query_params, request.headers.get("host")
        )

    if not subdomain:
        raise ApiError(
            f"Tenant not specified. Use {config.TENANT_HEADER} header or "
            f"?{config.TENANT_QUERY_PARAM}= param",
            400,
        )

    user = (
        db.query(User)
        .filter(User.subdomain == subdomain, User.active.is_(True))
        .first()
    )
    if not user:
        logger.info("Unknown or inactive tenant requested: %s", subdomain)
        raise ApiError("User not found or inactive", 404)
    return user
