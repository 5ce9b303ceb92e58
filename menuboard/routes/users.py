"""
User Routes for Menuboard
=========================

Sign-up, profile management and password recovery for tenant users.

Endpoints:
----------
- POST /users: Sign up (public)
- GET /users: List active users, paginated (admin)
- GET /users/me: Current user
- GET /users/{id}: Get a user (self or admin)
- PUT /users/{id}: Update a user (self or admin)
- DELETE /users/{id}: Disable a user (self or admin)
- POST /users/forgot-password: Email a reset link (public, rate limited)
- POST /users/restore-password: Set a new password from a reset token
  (public, rate limited)

Pagination:
-----------
GET /users accepts ``page``, ``limit``, ``sort_by`` and ``order``:

    GET /users?page=2&limit=20&sort_by=created_at&order=desc
    {"items": [...], "total": 45, "page": 2, "limit": 20, "pages": 3}
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from ..auth import get_current_user, require_admin
from ..config import get_rate_limit_auth
from ..db import get_db
from ..models import User
from ..pagination import build_pagination
from ..schemas.common import MessageOut
from ..schemas.users import (
    ForgotPasswordRequest,
    PaginatedUsers,
    RestorePasswordRequest,
    UserCreate,
    UserOut,
    UserUpdate,
)
from ..services import users as user_service
from .auth import limiter

logger = logging.getLogger(__name__)

# Router definition
users_router = APIRouter(prefix="/users", tags=["Users"])


# =============================================================================
# Account Endpoints
# =============================================================================

@users_router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)) -> UserOut:
    """Sign up a new tenant user."""
    return UserOut.model_validate(user_service.create_user(db, payload))


@users_router.get("", response_model=PaginatedUsers)
def list_users(
    page: Optional[int] = Query(None, description="Page number (1-based)"),
    limit: Optional[int] = Query(None, description="Page size"),
    sort_by: Optional[str] = Query(None, description="Sort field"),
    order: Optional[str] = Query(None, description="asc or desc"),
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> PaginatedUsers:
    """List active users. Requires the admin role."""
    params = build_pagination(page, limit, sort_by, order, allowed=user_service.USER_SORT_FIELDS)
    return PaginatedUsers(**user_service.list_users(db, params))


@users_router.get("/me", response_model=UserOut)
def get_me(current_user: User = Depends(get_current_user)) -> UserOut:
    return UserOut.model_validate(current_user)


# =============================================================================
# Password Recovery Endpoints
# =============================================================================

@users_router.post(
    "/forgot-password",
    response_model=MessageOut,
    status_code=status.HTTP_202_ACCEPTED,
)
@limiter.limit(get_rate_limit_auth)
def forgot_password(
    request: Request,
    payload: ForgotPasswordRequest,
    db: Session = Depends(get_db),
) -> MessageOut:
    """Email a password reset link to an active user."""
    reset_url = str(payload.reset_url) if payload.reset_url else None
    return MessageOut(**user_service.request_password_reset(db, payload.email, reset_url))


@users_router.post("/restore-password", response_model=MessageOut)
@limiter.limit(get_rate_limit_auth)
def restore_password(
    request: Request,
    payload: RestorePasswordRequest,
    db: Session = Depends(get_db),
) -> MessageOut:
    """Replace the password of the user a reset token was issued to."""
    return MessageOut(**user_service.restore_password(db, payload.token, payload.password))


# =============================================================================
# Per-user Endpoints
# =============================================================================

@users_router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UserOut:
    return UserOut.model_validate(user_service.get_user_for(db, current_user, user_id))


@users_router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UserOut:
    return UserOut.model_validate(user_service.update_user(db, current_user, user_id, payload))


@users_router.delete("/{user_id}", response_model=MessageOut)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageOut:
    """Disable a user account. Its data is kept."""
    return MessageOut(**user_service.delete_user(db, current_user, user_id))
