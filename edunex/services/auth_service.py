"""
Authentication Service.

Orchestrates the authenticated-user lifecycle against Supabase:
session restore on startup, sign in, sign up, sign out, and lazy
profile resolution whenever the provider reports a new session.

State lives in the injected ``SessionManager``::

    INITIALIZING ──restore──▶ RESOLVING_PROFILE ──▶ AUTHENTICATED
          │                         │                    │
          └──no session──▶ UNAUTHENTICATED ◀──failure────┘◀─sign out

Caller-facing operations (``sign_in``, ``sign_up``, ``sign_out``) raise
``AuthError`` subclasses.  Passive work (restore and provider
callbacks) has no caller, so its failures go to the
``NotificationCenter`` and the session settles in ``UNAUTHENTICATED``.

Every provider call runs on a small worker pool and is awaited for at
most ``call_timeout_s`` seconds.  ``close()`` cancels the provider
subscription once, cancels queued calls, and makes late results no-ops.
"""

from __future__ import annotations

import threading
from concurrent.futures import CancelledError, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Callable, Optional, Protocol, TypeVar

from edunex.auth import SessionManager
from edunex.database import DatabaseManager
from edunex.logger import StructuredLogger
from edunex.models.enums import AuthState, Role
from edunex.models.user import User
from edunex.services.auth_errors import (
    AuthError,
    CredentialsRejectedError,
    DomainRejectedError,
    InvalidEmailFormatError,
    ProfileCreateFailedError,
    ProfileFetchFailedError,
    ProviderUnavailableError,
    classify_provider_error,
)
from edunex.services.base_service import BaseService
from edunex.services.identity import derive_role, is_institutional_email
from edunex.services.notifications import NotificationCenter
from edunex.services.profile_provisioning import ProfileProvisioningService
from edunex.utils.audit import log_audit_event

T = TypeVar("T")

Dispatcher = Callable[[Callable[[], None]], None]


class _Subscription(Protocol):
    def unsubscribe(self) -> None: ...  # noqa: E704


def _spawn_thread(task: Callable[[], None]) -> None:
    threading.Thread(target=task, name="profile-resolve", daemon=True).start()


class AuthService(BaseService):
    """Session/profile manager.

    Parameters
    ----------
    db:
        Holder of the Supabase client.
    session:
        State holder driven by this service.
    provisioning:
        Fetch-or-create for institutional profiles.
    notifications:
        Channel for failures that have no caller.
    logger:
        Structured logger.
    call_timeout_s:
        Upper bound for any single provider call.
    max_workers:
        Size of the provider-call pool.  Must be at least 2: a provider
        callback may resolve a profile while ``sign_in`` is in flight.
    dispatch:
        Runs profile resolution triggered by a provider callback.
        Defaults to a daemon thread per event.
    """

    def __init__(
        self,
        db: DatabaseManager,
        session: SessionManager,
        provisioning: ProfileProvisioningService,
        notifications: NotificationCenter,
        logger: StructuredLogger,
        call_timeout_s: float = 15.0,
        max_workers: int = 4,
        dispatch: Optional[Dispatcher] = None,
    ) -> None:
        super().__init__(logger)
        self._db = db
        self._session = session
        self._provisioning = provisioning
        self._notifications = notifications
        self._call_timeout_s: float = call_timeout_s
        self._dispatch: Dispatcher = dispatch or _spawn_thread

        self._executor = ThreadPoolExecutor(
            max_workers=max(2, max_workers),
            thread_name_prefix="auth-call",
        )
        self._lifecycle_lock: threading.Lock = threading.Lock()
        self._resolve_lock: threading.Lock = threading.Lock()
        self._generation_lock: threading.RLock = threading.RLock()
        self._subscription: Optional[_Subscription] = None
        self._started: bool = False
        # Bumped whenever the provider session is cleared; a profile
        # lookup started under an older value is discarded.
        self._generation: int = 0
        self._closed: bool = False

    # ==================================================================
    # Lifecycle
    # ==================================================================

    def start(self) -> None:
        """Subscribe to provider auth events and restore any saved session.

        Blocking; the shell runs it off the UI thread.  Calling it more
        than once, or after ``close()``, does nothing.
        """
        with self._lifecycle_lock:
            if self._started or self._closed:
                return
            self._started = True

        try:
            subscription = self._db.supabase.auth.on_auth_state_change(
                self._on_auth_state_change,
            )
        except Exception as exc:
            self._logger.warning("Could not subscribe to auth events: %s", exc)
        else:
            with self._lifecycle_lock:
                if self._closed:
                    subscription.unsubscribe()
                    return
                self._subscription = subscription

        generation = self._current_generation()
        try:
            auth_session = self._call(
                "get_session", lambda: self._db.supabase.auth.get_session(),
            )
        except AuthError as exc:
            self._logger.warning("Session restore failed: %s", exc)
            self._notifications.error(exc.user_message)
            self._settle_unauthenticated()
            return

        auth_user = getattr(auth_session, "user", None) if auth_session else None
        if auth_user is None:
            self._logger.info("No saved session; waiting for sign-in.")
            self._settle_unauthenticated()
            return

        self._resolve_session(auth_user, generation)

    def close(self) -> None:
        """Tear down: unsubscribe from the provider and cancel pending calls.

        Safe to call more than once; only the first call does anything.
        """
        with self._lifecycle_lock:
            if self._closed:
                return
            self._closed = True
            subscription = self._subscription
            self._subscription = None

        if subscription is not None:
            try:
                subscription.unsubscribe()
            except Exception as exc:
                self._logger.warning("Auth subscription cleanup failed: %s", exc)

        self._executor.shutdown(wait=False, cancel_futures=True)
        self._logger.info("Auth service closed.")

    @property
    def is_closed(self) -> bool:
        return self._closed

    # ==================================================================
    # Caller-facing operations
    # ==================================================================

    def sign_in(self, email: str, password: str) -> None:
        """Verify credentials with the provider.

        The session moves to ``AUTHENTICATED`` through the provider's
        auth-state callback, not here.

        Raises:
            DomainRejectedError: *email* is not an institutional address.
            CredentialsRejectedError: The provider refused the credentials.
            ProviderUnavailableError: Network failure or timeout.
        """
        if not is_institutional_email(email):
            raise DomainRejectedError()

        self._call(
            "sign_in",
            lambda: self._db.supabase.auth.sign_in_with_password(
                {"email": email, "password": password},
            ),
            fallback=CredentialsRejectedError,
        )
        self._logger.info(
            "Credentials accepted for %s", email, extra={"event": "SIGN_IN"},
        )

    def sign_up(self, email: str, password: str, name: str) -> Optional[User]:
        """Create an account and its profile.

        Returns the created profile, or ``None`` when the provider
        created no user (e.g. confirmation pending with no user object).

        Raises:
            DomainRejectedError: *email* is not an institutional address.
            InvalidEmailFormatError: No role could be derived.
            ProfileCreateFailedError: The account exists but its profile
                could not be written; the caller should offer a retry.
            AuthError: Any other provider rejection.
        """
        if not is_institutional_email(email):
            raise DomainRejectedError()

        role = derive_role(email)
        if not isinstance(role, Role):
            raise InvalidEmailFormatError()

        response = self._call(
            "sign_up",
            lambda: self._db.supabase.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"name": name, "role": str(role)}},
            }),
        )

        auth_user = getattr(response, "user", None)
        if auth_user is None:
            self._logger.warning("Sign-up for %s returned no user.", email)
            return None

        profile = self._call(
            "create_profile",
            lambda: self._provisioning.create_profile(
                User(id=auth_user.id, email=email, name=name, role=role),
            ),
            fallback=ProfileCreateFailedError,
        )

        log_audit_event(
            logger=self._logger,
            action="SIGN_UP",
            entity_type="User",
            entity_id=profile.id,
            user_id=profile.id,
            details={"email": email, "role": str(role)},
        )
        return profile

    def sign_out(self) -> None:
        """Revoke the provider session and clear local state.

        Raises:
            ProviderUnavailableError: Network failure or timeout.
            AuthError: The provider refused the sign-out.
        """
        user = self._session.current_user
        self._call("sign_out", lambda: self._db.supabase.auth.sign_out())
        self._invalidate_resolutions()
        self._session.clear()

        user_id = user.id if user is not None else "unknown"
        log_audit_event(
            logger=self._logger,
            action="SIGN_OUT",
            entity_type="User",
            entity_id=user_id,
            user_id=user_id,
        )

    # ==================================================================
    # Provider events and profile resolution
    # ==================================================================

    def _on_auth_state_change(self, event: object, auth_session: object) -> None:
        """Provider callback: ``(event, session_or_none)``."""
        if self._closed:
            return

        auth_user = getattr(auth_session, "user", None) if auth_session else None
        self._logger.debug("Auth event %s (user: %s)", event, getattr(auth_user, "id", None))

        if auth_user is None:
            self._invalidate_resolutions()
            self._settle_unauthenticated()
            return

        current = self._session.current_user
        if current is not None and current.id == auth_user.id:
            return

        generation = self._current_generation()
        self._dispatch(lambda: self._resolve_session(auth_user, generation))

    def _resolve_session(self, auth_user: object, generation: int) -> None:
        """Fetch-or-create the profile for *auth_user*.  Never raises.

        *generation* is the value of the session generation when the
        event arrived; if the provider session has been cleared since,
        the result is dropped.
        """
        with self._resolve_lock:
            if self._closed or generation != self._current_generation():
                return
            user_id: str = getattr(auth_user, "id")
            current = self._session.current_user
            if current is not None and current.id == user_id:
                return

            email: str = getattr(auth_user, "email", None) or ""
            metadata = getattr(auth_user, "user_metadata", None) or {}

            with self._generation_lock:
                if generation != self._generation:
                    return
                self._session.transition(AuthState.RESOLVING_PROFILE)
            try:
                user = self._call(
                    "resolve_profile",
                    lambda: self._provisioning.ensure_profile(
                        user_id, email, metadata.get("name"),
                    ),
                    fallback=ProfileFetchFailedError,
                )
            except ProfileCreateFailedError:
                self._fail_resolution(ProfileCreateFailedError.default_message, generation)
                return
            except AuthError as exc:
                self._logger.warning("Profile resolution failed: %s", exc)
                self._fail_resolution(ProfileFetchFailedError.default_message, generation)
                return

            with self._generation_lock:
                if self._closed or generation != self._generation:
                    self._logger.info(
                        "Discarding profile for %s; session ended during lookup.", user_id,
                    )
                    return
                self._session.transition(AuthState.AUTHENTICATED, user)
            self._logger.info(
                "User authenticated: %s (role: %s)",
                user.name,
                user.role,
                extra={"event": "AUTHENTICATED", "user_id": user.id},
            )

    def _fail_resolution(self, message: str, generation: int) -> None:
        with self._generation_lock:
            if self._closed or generation != self._generation:
                return
            self._notifications.error(message)
            self._session.clear()

    def _settle_unauthenticated(self) -> None:
        if not self._closed:
            self._session.clear()

    def _current_generation(self) -> int:
        with self._generation_lock:
            return self._generation

    def _invalidate_resolutions(self) -> None:
        """Mark every profile lookup in flight as stale."""
        with self._generation_lock:
            self._generation += 1

    # ==================================================================
    # Provider call runner
    # ==================================================================

    def _call(
        self,
        operation: str,
        fn: Callable[[], T],
        fallback: type[AuthError] = AuthError,
    ) -> T:
        """Run *fn* on the worker pool with the configured timeout.

        Exceptions are translated into ``AuthError`` subclasses;
        ``AuthError`` raised by *fn* passes through unchanged.
        """
        if self._closed:
            raise ProviderUnavailableError("The application is shutting down.")

        try:
            future = self._executor.submit(fn)
        except RuntimeError as exc:
            raise ProviderUnavailableError(
                "The application is shutting down.", original_error=exc,
            ) from exc

        try:
            return future.result(timeout=self._call_timeout_s)
        except FuturesTimeoutError as exc:
            future.cancel()
            self._logger.warning(
                "%s timed out after %.1fs", operation, self._call_timeout_s,
            )
            raise ProviderUnavailableError(
                "The server took too long to respond. Please try again.",
                original_error=exc,
            ) from exc
        except CancelledError as exc:
            raise ProviderUnavailableError(
                "The request was cancelled.", original_error=exc,
            ) from exc
        except AuthError:
            raise
        except Exception as exc:
            error = classify_provider_error(exc, fallback)
            self._logger.warning(
                "%s failed (%s): %s",
                operation,
                error.code,
                exc,
                extra={"event": "AUTH_CALL_FAILED", "operation": operation},
            )
            raise error from exc
