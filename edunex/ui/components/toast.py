"""Toast Notifications.

Transient message cards stacked in the top-right corner of the window.
``ToastHost.show`` must run on the UI thread; the shell marshals
``NotificationCenter`` events onto it with ``after(0, ...)``.
"""

from __future__ import annotations

import customtkinter as ctk

from edunex.models.auth_models import Notification
from edunex.ui.theme import CORNER_RADIUS, FONT_BODY, PADDING_MD, PADDING_SM, TEXT_LIGHT, TOAST_BG

_TOAST_WIDTH: int = 320
_MAX_VISIBLE: int = 4

_LEVEL_ICONS: dict[str, str] = {
    "info": "ℹ",
    "success": "✓",
    "error": "✕",
}


class ToastHost:
    """Owns the on-screen toasts for one window.

    Parameters
    ----------
    parent:
        Window the toasts are placed over.
    duration_ms:
        How long each toast stays visible.
    """

    def __init__(self, parent: ctk.CTk, duration_ms: int = 4000) -> None:
        self._parent = parent
        self._duration_ms = duration_ms
        self._toasts: list[ctk.CTkFrame] = []

    def show(self, notification: Notification) -> None:
        level = str(notification.level)
        toast = ctk.CTkFrame(
            self._parent,
            width=_TOAST_WIDTH,
            fg_color=TOAST_BG.get(level, TOAST_BG["info"]),
            corner_radius=CORNER_RADIUS,
        )
        ctk.CTkLabel(
            toast,
            text=f"{_LEVEL_ICONS.get(level, '')}  {notification.message}",
            font=FONT_BODY,
            text_color=TEXT_LIGHT,
            wraplength=_TOAST_WIDTH - 2 * PADDING_MD,
            justify="left",
            anchor="w",
        ).pack(fill="x", padx=PADDING_MD, pady=PADDING_SM)

        self._toasts.append(toast)
        while len(self._toasts) > _MAX_VISIBLE:
            self._dismiss(self._toasts[0])

        self._relayout()
        self._parent.after(self._duration_ms, lambda: self._dismiss(toast))

    def clear(self) -> None:
        for toast in list(self._toasts):
            self._dismiss(toast)

    def _dismiss(self, toast: ctk.CTkFrame) -> None:
        if toast not in self._toasts:
            return
        self._toasts.remove(toast)
        toast.destroy()
        self._relayout()

    def _relayout(self) -> None:
        y = PADDING_MD
        for toast in self._toasts:
            toast.place(relx=1.0, x=-PADDING_MD, y=y, anchor="ne")
            toast.lift()
            toast.update_idletasks()
            y += toast.winfo_reqheight() + PADDING_SM
