"""
Notification Channel.

Fan-out of transient, user-visible messages.  Services publish here
when there is no caller to hand an error back to (passive session
restore, auth-state callbacks); the shell's ``ToastHost`` subscribes
and renders each notification as a toast.
"""

from __future__ import annotations

import threading
from typing import Callable

from edunex.logger import StructuredLogger
from edunex.models.auth_models import Notification
from edunex.models.enums import NotificationLevel

NotificationListener = Callable[[Notification], None]


class NotificationCenter:
    """Thread-safe publish/subscribe hub for ``Notification`` objects.

    Listeners are invoked synchronously on the publishing thread; UI
    listeners must marshal onto the UI thread themselves.
    """

    def __init__(self, logger: StructuredLogger) -> None:
        self._logger = logger
        self._lock = threading.Lock()
        self._listeners: list[NotificationListener] = []

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        """Register *listener*; the returned callable removes it again."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def publish(self, level: NotificationLevel, message: str) -> Notification:
        notification = Notification(level=level, message=message)
        log = self._logger.error if level == NotificationLevel.ERROR else self._logger.info
        log("Notification (%s): %s", level, message)

        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(notification)
            except Exception as exc:
                self._logger.warning(
                    "Notification listener failed (non-fatal): %s", exc,
                )
        return notification

    def info(self, message: str) -> Notification:
        return self.publish(NotificationLevel.INFO, message)

    def success(self, message: str) -> Notification:
        return self.publish(NotificationLevel.SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self.publish(NotificationLevel.ERROR, message)
