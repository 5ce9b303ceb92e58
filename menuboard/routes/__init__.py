"""
Routes Package for Menuboard
============================

This package contains all API route definitions organized by domain. Each module
defines a FastAPI APIRouter with related endpoints grouped together.

Architecture Overview:
----------------------
**Public Routes (no bearer token):**
- auth.py: Login
- public.py: Tenant-resolved, read-only menu trees
- users.py: Sign-up and password recovery (the rest of users.py needs a token)

**Owner Routes (require a bearer token):**
- menus.py: Menu CRUD, JSON or multipart with branding uploads
- categories.py: Category CRUD and deep create/update
- items.py: Item CRUD with image patches
- images.py: Image CRUD and file uploads

Router Registration:
--------------------
All routers are registered in app_factory.py under two prefixes:
1. /api/v1/* - Versioned API (recommended)
2. /* - Root paths

Each router is defined with a prefix and tags for OpenAPI documentation:

    menus_router = APIRouter(prefix="/menus", tags=["Menus"])

Route Dependencies:
-------------------
Common dependencies are injected via FastAPI's Depends():
- get_db: Database session for queries
- get_current_user: Bearer token authentication
- require_admin: Admin-only endpoints
- get_tenant: Tenant owner for public endpoints
- limiter.limit(): Rate limiting on credential endpoints

Error Handling:
---------------
Services raise ApiError, rendered as {"message": ...} by the handlers in
errors.py:
- 400: Bad request (invalid payload, validation errors)
- 401: Unauthorized (missing or invalid token)
- 403: Forbidden (admin role required)
- 404: Not found (unknown id or another tenant's row)
- 409: Conflict (email or subdomain taken)
- 413: Uploaded file too large
- 429: Too many requests (rate limited)
"""

from .auth import auth_router, limiter
from .categories import categories_router
from .images import images_router
from .items import items_router
from .menus import menus_router
from .public import public_router
from .users import users_router

ALL_ROUTERS = [
    auth_router,
    users_router,
    menus_router,
    categories_router,
    items_router,
    images_router,
    public_router,
]

__all__ = [
    "ALL_ROUTERS",
    "auth_router",
    "categories_router",
    "images_router",
    "items_router",
    "limiter",
    "menus_router",
    "public_router",
    "users_router",
]
