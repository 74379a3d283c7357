"""
Authentication Errors.

Every failure the session layer raises to a caller is an ``AuthError``
carrying a structured ``code`` and a ``user_message`` safe to show in
the login form.  ``classify_provider_error`` maps raw Supabase /
transport exceptions onto this hierarchy.
"""

from __future__ import annotations

from typing import Optional

import httpx

from edunex.models.auth_models import PROVIDER_ERROR_MAP, AuthErrorCode
from edunex.services.identity import DOMAIN_REJECTED_MESSAGE


class AuthError(Exception):
    """Base class for authentication and profile failures."""

    default_code: AuthErrorCode = AuthErrorCode.UNKNOWN_ERROR
    default_message: str = "An unexpected error occurred. Please try again later."

    def __init__(
        self,
        user_message: Optional[str] = None,
        *,
        code: Optional[AuthErrorCode] = None,
        original_error: Optional[BaseException] = None,
    ) -> None:
        self.user_message: str = user_message or self.default_message
        self.code: AuthErrorCode = code or self.default_code
        self.original_error: Optional[BaseException] = original_error
        super().__init__(self.user_message)


class DomainRejectedError(AuthError):
    default_code = AuthErrorCode.DOMAIN_REJECTED
    default_message = DOMAIN_REJECTED_MESSAGE


class InvalidEmailFormatError(AuthError):
    default_code = AuthErrorCode.INVALID_EMAIL_FORMAT
    default_message = "Invalid college email format"


class CredentialsRejectedError(AuthError):
    default_code = AuthErrorCode.CREDENTIALS_REJECTED
    default_message = "Incorrect email or password."


class ProfileFetchFailedError(AuthError):
    default_code = AuthErrorCode.PROFILE_FETCH_FAILED
    default_message = "Failed to load user profile"


class ProfileCreateFailedError(AuthError):
    default_code = AuthErrorCode.PROFILE_CREATE_FAILED
    default_message = "Failed to create user profile"


class ProviderUnavailableError(AuthError):
    default_code = AuthErrorCode.PROVIDER_UNAVAILABLE
    default_message = "Cannot reach the server. Check your internet connection."


_TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    ConnectionError,
    TimeoutError,
    httpx.TransportError,
)


def is_transport_error(exc: BaseException) -> bool:
    """``True`` for network failures and an unconfigured client.

    ``DatabaseManager.supabase`` raises ``RuntimeError`` when no
    Supabase project is configured, which is treated as offline.
    """
    return isinstance(exc, _TRANSPORT_ERRORS) or type(exc) is RuntimeError


def classify_provider_error(
    exc: BaseException,
    fallback: type[AuthError] = AuthError,
) -> AuthError:
    """Translate a provider exception into an ``AuthError``.

    Transport failures become ``ProviderUnavailableError``.  Known
    provider error strings are looked up in ``PROVIDER_ERROR_MAP``;
    credential codes always map to ``CredentialsRejectedError``.
    Anything else becomes *fallback*.
    """
    if isinstance(exc, AuthError):
        return exc

    if is_transport_error(exc):
        return ProviderUnavailableError(original_error=exc)

    haystack = " ".join(
        part for part in (str(getattr(exc, "code", "") or ""), str(exc)) if part
    ).lower()

    for needle, (code, message) in PROVIDER_ERROR_MAP.items():
        if needle in haystack:
            if code == AuthErrorCode.CREDENTIALS_REJECTED:
                return CredentialsRejectedError(message, original_error=exc)
            return fallback(message, code=code, original_error=exc)

    return fallback(original_error=exc)
