"""
Authentication Module for Menuboard
===================================

This module handles credentials for tenant users: password hashing, access
token issuance and the FastAPI dependencies that protect owner endpoints.

Authentication Methods:
-----------------------
1. **Password login**: ``POST /auth/login`` verifies the argon2 hash stored on
   the user and returns a signed access token.

2. **Bearer tokens**: Every owner endpoint requires
   ``Authorization: Bearer <token>``. Tokens are HS256 JWTs signed with
   ``JWT_SECRET`` and carry the user id in ``sub``.

Security Features:
------------------
- **Argon2id hashing**: Passwords are hashed with argon2-cffi's
  ``PasswordHasher`` defaults. Hashes are never serialized or logged.

- **Fail closed**: If ``JWT_SECRET`` is not configured, authenticated endpoints
  return 503 Service Unavailable rather than accepting unsigned tokens.

- **Live user check**: A valid token for a user that has since been disabled
  is rejected with 401.

Usage:
------
    from menuboard.auth import get_current_user, require_admin

    @router.get("/menus")
    def list_menus(
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ):
        ...
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from . import config
from .db import get_db
from .errors import ApiError
from .models import User

logger = logging.getLogger(__name__)

_hasher = PasswordHasher()

bearer_scheme = HTTPBearer(auto_error=False)


# =============================================================================
# Passwords
# =============================================================================

def normalize_password(raw: Any) -> str:
    """
    Trim a candidate password and enforce the configured length bounds.

    Raises:
        ApiError (400): If the value is not a string or its trimmed length is
                        outside PASSWORD_MIN_LENGTH..PASSWORD_MAX_LENGTH.
    """
    if not isinstance(raw, str):
        raise ApiError("Password must be a string", 400)
    pwd = raw.strip()
    if not config.PASSWORD_MIN_LENGTH <= len(pwd) <= config.PASSWORD_MAX_LENGTH:
        raise ApiError(
            f"Password must be between {config.PASSWORD_MIN_LENGTH} and "
            f"{config.PASSWORD_MAX_LENGTH} characters.",
            400,
        )
    return pwd


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    """Return True if ``password`` matches ``password_hash``; False otherwise."""
    try:
        return _hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


# =============================================================================
# Access Tokens
# =============================================================================

def create_access_token(user: User, now: Optional[datetime] = None) -> str:
    """
    Issue a signed access token for ``user``.

    Claims:
        sub: user id (string, as required by RFC 7519)
        sub_domain: tenant subdomain
        role: role id
        iat / exp: issue and expiry times
    """
    if not config.JWT_SECRET:
        raise ApiError("Authentication not configured. Set JWT_SECRET environment variable.", 503)
    issued = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "sub_domain": user.subdomain,
        "role": user.role_id,
        "iat": issued,
        "exp": issued + timedelta(minutes=config.ACCESS_TOKEN_TTL_MINUTES),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify an access token.

    Raises:
        jwt.PyJWTError: If the signature, expiry or format is invalid.
    """
    return jwt.decode(
        token,
        config.JWT_SECRET,
        algorithms=[config.JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# =============================================================================
# Dependencies
# =============================================================================

def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the authenticated user from the bearer token.

    Raises:
        HTTPException (503): If JWT_SECRET is not configured.
        HTTPException (401): If the token is missing, invalid or expired, or
                             names a user that no longer exists or is inactive.
    """
    if not config.JWT_SECRET:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication not configured. Set JWT_SECRET environment variable.",
        )

    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")

    try:
        claims = decode_access_token(credentials.credentials)
        user_id = int(claims["sub"])
    except (jwt.PyJWTError, ValueError) as e:
        logger.debug("Rejected access token: %s", type(e).__name__)
        raise _unauthorized("Invalid or expired token")

    user = db.query(User).filter(User.id == user_id, User.active.is_(True)).first()
    if not user:
        raise _unauthorized("Invalid or expired token")
    return user


def is_admin(user: User) -> bool:
    return user.role_id == config.ROLE_ADMIN


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Dependency that only lets administrators through (403 otherwise)."""
    if not is_admin(current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return current_user
