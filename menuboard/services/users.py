"""
User Service for Menuboard
==========================

Account lifecycle for tenant users: sign-up, profile updates, soft deletion,
login and the password reset flow.

Password Reset Flow:
--------------------
1. ``request_password_reset`` invalidates the user's unused tokens, stores a
   fresh random token valid for PASSWORD_RESET_TTL_MINUTES and emails a link
   ``<reset_url>?token=<token>``.
2. ``restore_password`` accepts the token and the new password once. The token
   is marked used, and the stored hash is re-verified against the new password
   before reporting success.

Access Rules:
-------------
Administrators may read and modify any user. Everyone else may only act on
their own account; other ids are reported as "User not found".
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import urlencode, urlsplit, urlunsplit

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import config
from ..auth import create_access_token, hash_password, is_admin, verify_password
from ..email_service import send_password_reset_email, send_welcome_email
from ..errors import ApiError
from ..models import PasswordResetToken, User
from ..pagination import PaginationParams, apply_pagination, build_paginated_result
from ..schemas.users import UserCreate, UserOut, UserUpdate

logger = logging.getLogger(__name__)

USER_SORT_FIELDS = ["id", "name", "last_name", "email", "created_at"]


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they are stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _email_taken(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def _conflict_message(exc: IntegrityError) -> str:
    text = str(exc.orig).lower()
    if "subdomain" in text:
        return "Subdomain already in use"
    return "Email already in use"


# =============================================================================
# Queries
# =============================================================================

def list_users(db: Session, params: PaginationParams) -> dict:
    query = db.query(User).filter(User.active.is_(True))
    total = query.count()
    users = apply_pagination(query, User, params).all()
    return build_paginated_result([UserOut.model_validate(u) for u in users], total, params)


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id, User.active.is_(True)).first()
    if not user:
        raise ApiError("User not found", 404)
    return user


def get_user_for(db: Session, actor: User, user_id: int) -> User:
    """Load ``user_id`` if ``actor`` may see it (self or admin)."""
    if actor.id != user_id and not is_admin(actor):
        raise ApiError("User not found", 404)
    return get_user(db, user_id)


# =============================================================================
# Mutations
# =============================================================================

def create_user(db: Session, payload: UserCreate) -> User:
    """
    Sign up a new tenant.

    Raises:
        ApiError (409): Email or subdomain already registered.
    """
    # Pre-checks give clean messages; the unique constraints are the backstop
    if _email_taken(db, payload.email):
        raise ApiError("Email already in use", 409)
    if db.query(User.id).filter(User.subdomain == payload.subdomain).first():
        raise ApiError("Subdomain already in use", 409)

    user = User(
        name=payload.name,
        last_name=payload.last_name,
        email=payload.email,
        cel=payload.cel,
        role_id=config.ROLE_OWNER,
        subdomain=payload.subdomain,
        active=True,
        password_hash=hash_password(payload.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ApiError(_conflict_message(e), 409) from e
    db.refresh(user)
    logger.info("Created user id=%d subdomain=%s", user.id, user.subdomain)

    send_welcome_email(user.email, user.name, user.subdomain)
    return user


def update_user(db: Session, actor: User, user_id: int, payload: UserUpdate) -> User:
    user = get_user_for(db, actor, user_id)
    changes = payload.model_dump(exclude_unset=True)

    role_id = changes.get("role_id")
    if role_id is not None and role_id != user.role_id and not is_admin(actor):
        raise ApiError("Only administrators can change roles", 403)

    email = changes.get("email")
    if email and email != user.email and _email_taken(db, email, exclude_id=user.id):
        raise ApiError("Email already in use", 409)

    password = changes.pop("password", None)
    for field in ("name", "last_name", "email", "cel", "role_id"):
        if changes.get(field) is not None:
            setattr(user, field, changes[field])
    if password:
        user.password_hash = hash_password(password)

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ApiError(_conflict_message(e), 409) from e
    db.refresh(user)

    if password and not verify_password(user.password_hash, password):
        raise ApiError("Password update failed", 500)

    logger.info("Updated user id=%d (fields: %s)", user.id, ", ".join(sorted(changes)) or "password")
    return user


def delete_user(db: Session, actor: User, user_id: int) -> dict:
    user = get_user_for(db, actor, user_id)
    user.active = False
    db.commit()
    logger.info("Disabled user id=%d", user.id)
    return {"message": "User disabled successfully"}


# =============================================================================
# Authentication
# =============================================================================

def authenticate(db: Session, email: str, password: str) -> dict:
    """
    Verify credentials and issue an access token.

    Raises:
        ApiError (401): Unknown email or wrong password.
        ApiError (403): Correct credentials for a disabled account.
    """
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if not user or not verify_password(user.password_hash, password):
        logger.info("Failed login attempt for %s", email)
        raise ApiError("Invalid credentials", 401)
    if not user.active:
        raise ApiError("User is inactive", 403)

    token = create_access_token(user)
    logger.info("User id=%d logged in", user.id)
    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_in": config.ACCESS_TOKEN_TTL_MINUTES * 60,
        "user": UserOut.model_validate(user),
    }


# =============================================================================
# Password Reset
# =============================================================================

def build_reset_link(base_url: Optional[str], token: str) -> Optional[str]:
    """Append ``token`` to ``base_url`` as a query parameter, keeping existing ones."""
    if not base_url:
        return None
    parts = urlsplit(base_url)
    query = f"{parts.query}&" if parts.query else ""
    query += urlencode({"token": token})
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def request_password_reset(
    db: Session,
    email: str,
    reset_url: Optional[str] = None,
    now: Optional[datetime] = None,
) -> dict:
    user = db.query(User).filter(User.email == email, User.active.is_(True)).first()
    if not user:
        raise ApiError("Email not found", 404)

    now = now or datetime.now(timezone.utc)
    db.query(PasswordResetToken).filter(
        PasswordResetToken.user_id == user.id,
        PasswordResetToken.is_used.is_(False),
    ).update({PasswordResetToken.is_used: True}, synchronize_session=False)

    token = secrets.token_urlsafe(32)
    db.add(PasswordResetToken(
        user_id=user.id,
        token=token,
        expires_at=now + timedelta(minutes=config.PASSWORD_RESET_TTL_MINUTES),
        is_used=False,
    ))
    db.commit()

    link = build_reset_link(reset_url or config.PASSWORD_RESET_URL, token)
    result = send_password_reset_email(user.email, user.name, link)
    if result.get("status") != "sent":
        logger.error("Password reset email for user id=%d was not delivered", user.id)
    else:
        logger.info("Password reset requested for user id=%d", user.id)
    return {"message": "Password reset email sent"}


def restore_password(
    db: Session,
    token: str,
    new_password: str,
    now: Optional[datetime] = None,
) -> dict:
    now = now or datetime.now(timezone.utc)
    record = db.query(PasswordResetToken).filter(PasswordResetToken.token == token).first()
    if (
        not record
        or record.is_used
        or _as_utc(record.expires_at) <= now
        or not record.user.active
    ):
        raise ApiError("Invalid or expired token", 400)

    user = record.user
    user.password_hash = hash_password(new_password)
    record.is_used = True
    db.commit()

    db.refresh(user)
    if not verify_password(user.password_hash, new_password):
        raise ApiError("Password update failed", 500)

    logger.info("Password restored for user id=%d", user.id)
    return {"message": "Password updated successfully"}
