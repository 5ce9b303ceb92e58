"""
Auth Routes for Menuboard
=========================

Issues bearer tokens for the owner API.

Endpoints:
----------
- POST /auth/login: Exchange email and password for an access token

Rate Limiting:
--------------
Credential endpoints (login, forgot/restore password) share a per-IP limit set
by RATE_LIMIT_AUTH. The limiter is created here and attached to the app in
app_factory.py.

Usage:
------
    POST /auth/login
    {"email": "pepe@example.com", "password": "s3cretpass"}

    200
    {
        "access_token": "eyJhbGciOi...",
        "token_type": "bearer",
        "expires_in": 43200,
        "user": {"id": 1, "subdomain": "don-pepe", ...}
    }
"""

import logging

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from ..config import RATE_LIMIT_ENABLED, get_rate_limit_auth
from ..db import get_db
from ..schemas.users import LoginRequest, TokenOut
from ..services import users as user_service

logger = logging.getLogger(__name__)

# Router definition
auth_router = APIRouter(prefix="/auth", tags=["Auth"])

limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)


@auth_router.post("/login", response_model=TokenOut)
@limiter.limit(get_rate_limit_auth)
def login(
    request: Request,
    payload: LoginRequest,
    db: Session = Depends(get_db),
) -> TokenOut:
    """Verify credentials and return a bearer token."""
    return TokenOut(**user_service.authenticate(db, payload.email, payload.password))
