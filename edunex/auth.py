"""
Session State.

``SessionManager`` is the single, injectable holder of "who is signed
in" for the lifetime of the application window.  It owns no I/O:
``AuthService`` drives its transitions, the shell and views read it
and subscribe to changes.

Usage::

    session = SessionManager()
    unsubscribe = session.subscribe(lambda snap: print(snap.state))
    session.transition(AuthState.AUTHENTICATED, user)
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from edunex.models.auth_models import SessionSnapshot
from edunex.models.enums import AuthState
from edunex.models.user import User

SessionListener = Callable[[SessionSnapshot], None]


class SessionManager:
    """Thread-safe session state with change notification.

    Starts in ``INITIALIZING`` (``loading`` is ``True``).  Listeners are
    called, outside the lock, only when the snapshot actually changes.
    """

    def __init__(self) -> None:
        self._lock: threading.RLock = threading.RLock()
        self._snapshot: SessionSnapshot = SessionSnapshot(state=AuthState.INITIALIZING)
        self._listeners: list[SessionListener] = []

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self._snapshot

    @property
    def state(self) -> AuthState:
        return self.snapshot().state

    @property
    def loading(self) -> bool:
        return self.snapshot().loading

    @property
    def current_user(self) -> Optional[User]:
        return self.snapshot().user

    def get_current_user(self) -> User:
        """Return the signed-in user.

        Raises:
            RuntimeError: If no user is currently authenticated.
        """
        user = self.current_user
        if user is None:
            raise RuntimeError("No user is currently authenticated. Login required.")
        return user

    @property
    def is_authenticated(self) -> bool:
        snap = self.snapshot()
        return snap.state == AuthState.AUTHENTICATED and snap.user is not None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def transition(self, state: AuthState, user: Optional[User] = None) -> bool:
        """Move to *state*.  Returns ``True`` if the snapshot changed.

        ``user`` is only kept in the ``AUTHENTICATED`` state.
        """
        if state == AuthState.AUTHENTICATED and user is None:
            raise ValueError("AUTHENTICATED requires a user")
        new_snapshot = SessionSnapshot(
            state=state,
            user=user if state == AuthState.AUTHENTICATED else None,
        )
        with self._lock:
            if new_snapshot == self._snapshot:
                return False
            self._snapshot = new_snapshot
            listeners = list(self._listeners)

        for listener in listeners:
            listener(new_snapshot)
        return True

    def clear(self) -> bool:
        """End the session (``UNAUTHENTICATED``, no user)."""
        return self.transition(AuthState.UNAUTHENTICATED)

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register *listener*; the returned callable removes it."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe
