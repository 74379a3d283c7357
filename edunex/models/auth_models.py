"""
Authentication Models.

Typed contracts passed between the session layer, the notification
channel and the UI.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from edunex.models.enums import AuthState, NotificationLevel
from edunex.models.user import User


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------

class AuthErrorCode(StrEnum):
    """Categories of authentication failure."""

    DOMAIN_REJECTED = "domain_rejected"
    INVALID_EMAIL_FORMAT = "invalid_email_format"
    CREDENTIALS_REJECTED = "credentials_rejected"
    EMAIL_NOT_CONFIRMED = "email_not_confirmed"
    EMAIL_ALREADY_EXISTS = "email_already_exists"
    WEAK_PASSWORD = "weak_password"
    RATE_LIMITED = "rate_limited"
    PROFILE_FETCH_FAILED = "profile_fetch_failed"
    PROFILE_CREATE_FAILED = "profile_create_failed"
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    UNKNOWN_ERROR = "unknown_error"


PROVIDER_ERROR_MAP: dict[str, tuple[AuthErrorCode, str]] = {
    "invalid_credentials": (
        AuthErrorCode.CREDENTIALS_REJECTED,
        "Incorrect email or password.",
    ),
    "invalid login credentials": (
        AuthErrorCode.CREDENTIALS_REJECTED,
        "Incorrect email or password.",
    ),
    "invalid_grant": (
        AuthErrorCode.CREDENTIALS_REJECTED,
        "Incorrect email or password.",
    ),
    "email_not_confirmed": (
        AuthErrorCode.EMAIL_NOT_CONFIRMED,
        "Please confirm your email address before signing in.",
    ),
    "user_already_exists": (
        AuthErrorCode.EMAIL_ALREADY_EXISTS,
        "An account with this email already exists. Try signing in.",
    ),
    "user already registered": (
        AuthErrorCode.EMAIL_ALREADY_EXISTS,
        "An account with this email already exists. Try signing in.",
    ),
    "weak_password": (
        AuthErrorCode.WEAK_PASSWORD,
        "Password is too weak. Use at least 6 characters.",
    ),
    "over_request_rate_limit": (
        AuthErrorCode.RATE_LIMITED,
        "Too many attempts. Please wait a moment and try again.",
    ),
}


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------

class SessionSnapshot(BaseModel):
    """Immutable view of the session at one point in time."""

    state: AuthState
    user: Optional[User] = None

    model_config = {"frozen": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def loading(self) -> bool:
        return self.state in (AuthState.INITIALIZING, AuthState.RESOLVING_PROFILE)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

class Notification(BaseModel):
    """A transient, user-visible message (rendered as a toast)."""

    level: NotificationLevel
    message: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
