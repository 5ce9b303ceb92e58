"""
Configuration Module for Menuboard
==================================

This module centralizes all configuration settings, environment variables, and
constants used throughout the Menuboard application. Values are parsed once at
import time; call sites read them as ``config.NAME`` so tests can override
individual settings with monkeypatch.

Configuration Categories:
-------------------------
- **Authentication**: JWT signing secret, algorithm and token lifetime, password
  length bounds, reset token lifetime.

- **Rate Limiting**: Throttling for the credential endpoints (login, forgot and
  restore password).

- **Tenancy**: Header name and base domain used to resolve the tenant
  subdomain of public requests.

- **Storage**: Backend selection (local disk or S3) and upload constraints.

- **Email**: SMTP settings for password reset and welcome emails.

- **CORS Settings**: Cross-Origin Resource Sharing configuration for frontend
  integration. Defaults allow all origins for development.

Environment Variables:
----------------------
- JWT_SECRET: Signing secret for access tokens (required for authenticated routes)
- ACCESS_TOKEN_TTL_MINUTES: Access token lifetime (default: 720)
- PASSWORD_RESET_TTL_MINUTES: Reset token lifetime (default: 30)
- RATE_LIMIT_AUTH: Credential endpoint rate limit (default: "10 per minute")
- TENANT_HEADER: Header carrying the tenant subdomain (default: "X-Tenant-Subdomain")
- TENANT_BASE_DOMAIN: Base domain for host-based tenant resolution (default: "")
- STORAGE_BACKEND: "local" or "s3" (default: "local")
- CORS_ORIGINS: Comma-separated allowed origins (default: "*")

Usage:
------
    from menuboard import config

    if not config.JWT_SECRET:
        ...
"""

import os
from typing import List


# =============================================================================
# Authentication Configuration
# =============================================================================
# Access tokens are HS256 JWTs. Authenticated endpoints fail closed (503) when
# JWT_SECRET is not configured.

JWT_SECRET: str = os.getenv("JWT_SECRET", "")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_TTL_MINUTES: int = int(os.getenv("ACCESS_TOKEN_TTL_MINUTES", "720"))  # 12 hours

# Passwords are trimmed before the length check
PASSWORD_MIN_LENGTH: int = int(os.getenv("PASSWORD_MIN_LENGTH", "8"))
PASSWORD_MAX_LENGTH: int = int(os.getenv("PASSWORD_MAX_LENGTH", "16"))

PASSWORD_RESET_TTL_MINUTES: int = int(os.getenv("PASSWORD_RESET_TTL_MINUTES", "30"))

# Front-end page that receives ?token=... when the request does not name one
PASSWORD_RESET_URL: str = os.getenv("PASSWORD_RESET_URL", "")


# =============================================================================
# Roles
# =============================================================================

ROLE_ADMIN: int = int(os.getenv("ROLE_ADMIN", "1"))
ROLE_OWNER: int = int(os.getenv("ROLE_OWNER", "2"))


# =============================================================================
# Rate Limiting Configuration
# =============================================================================
# Uses slowapi with in-memory storage (use Redis for multi-worker prod).
# Format: "X per Y" where Y is second, minute, hour, or day

RATE_LIMIT_AUTH: str = os.getenv("RATE_LIMIT_AUTH", "10 per minute")
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"


def get_rate_limit_auth() -> str:
    """
    Return the current credential endpoint rate limit.

    This function allows dynamic override in tests without modifying
    the module-level constant.
    """
    return RATE_LIMIT_AUTH


# =============================================================================
# Tenancy Configuration
# =============================================================================
# Public menu requests name their tenant by subdomain. The header wins over the
# ?tenant= query parameter, which wins over the Host header.

TENANT_HEADER: str = os.getenv("TENANT_HEADER", "X-Tenant-Subdomain")
TENANT_QUERY_PARAM: str = "tenant"

# e.g. "menus.example.com" makes "pepe.menus.example.com" resolve to "pepe"
TENANT_BASE_DOMAIN: str = os.getenv("TENANT_BASE_DOMAIN", "").lower()


# =============================================================================
# Storage Configuration
# =============================================================================

STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "local").lower()

S3_BUCKET: str = os.getenv("S3_BUCKET", "")
S3_REGION: str = os.getenv("S3_REGION", "us-east-1")
S3_ENDPOINT_URL: str = os.getenv("S3_ENDPOINT_URL", "")  # MinIO, R2, etc.
S3_PUBLIC_BASE_URL: str = os.getenv("S3_PUBLIC_BASE_URL", "")
S3_PUBLIC_READ: bool = os.getenv("S3_PUBLIC_READ", "false").lower() == "true"

LOCAL_UPLOAD_DIR: str = os.getenv("LOCAL_UPLOAD_DIR", "uploads")
LOCAL_UPLOAD_URL_PREFIX: str = "/uploads"

MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))  # 5 MB
MAX_UPLOAD_FILES: int = int(os.getenv("MAX_UPLOAD_FILES", "10"))

_image_types_env = os.getenv("ALLOWED_IMAGE_TYPES", "")
ALLOWED_IMAGE_TYPES: List[str] = [
    t.strip().lower()
    for t in _image_types_env.split(",")
    if t.strip()
] or ["image/jpeg", "image/png", "image/webp", "image/gif"]


# =============================================================================
# Email Configuration
# =============================================================================
# When SMTP is not fully configured, emails are logged instead of sent.

SMTP_HOST: str = os.getenv("SMTP_HOST", "")
SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME: str = os.getenv("SMTP_USERNAME", "")
SMTP_PASSWORD: str = os.getenv("SMTP_PASSWORD", "")
SMTP_FROM_EMAIL: str = os.getenv("SMTP_FROM_EMAIL", "")
SMTP_FROM_NAME: str = os.getenv("SMTP_FROM_NAME", "Menuboard")


# =============================================================================
# CORS Configuration
# =============================================================================
# Format: comma-separated list of origins, e.g. "https://app.example.com"
# Default "*" allows all origins (suitable for development only)

_cors_origins_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in _cors_origins_env.split(",")
    if origin.strip()
] or ["*"]
