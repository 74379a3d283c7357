"""Sidebar Navigation Component.

Displays the role's navigation entries, the signed-in user's identity,
and a sign-out button.  Follows the **Thin UI** rule: zero business
logic; all actions are delegated via injected callbacks.
"""

from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from edunex.logger import StructuredLogger
from edunex.models.enums import ViewId
from edunex.models.user import User
from edunex.ui.theme import (
    ACCENT_HOVER,
    FONT_BODY,
    FONT_BRAND,
    FONT_SIDEBAR,
    FONT_SIDEBAR_ACTIVE,
    FONT_SMALL,
    LOGOUT_HOVER,
    LOGOUT_PRIMARY,
    PADDING_MD,
    PADDING_SM,
    SIDEBAR_ACTIVE,
    SIDEBAR_BG,
    SIDEBAR_HOVER,
    SIDEBAR_TEXT,
    SIDEBAR_WIDTH,
    TEXT_LIGHT,
)
from edunex.ui.view_router import NavEntry

_AVATAR_SIZE: int = 40


class _NavButton(ctk.CTkButton):
    """Internal clickable sidebar entry for a single view."""

    def __init__(
        self,
        parent: ctk.CTkFrame,
        entry: NavEntry,
        on_click: Callable[[ViewId], None],
    ) -> None:
        self._view_id = entry.id
        super().__init__(
            parent,
            text=f"  {entry.icon}   {entry.label}",
            anchor="w",
            font=FONT_SIDEBAR,
            text_color=SIDEBAR_TEXT,
            fg_color="transparent",
            hover_color=SIDEBAR_HOVER,
            height=40,
            corner_radius=6,
            command=lambda: on_click(self._view_id),
        )

    @property
    def view_id(self) -> ViewId:
        return self._view_id

    def set_active(self, active: bool) -> None:
        if active:
            self.configure(fg_color=SIDEBAR_ACTIVE, font=FONT_SIDEBAR_ACTIVE)
        else:
            self.configure(fg_color="transparent", font=FONT_SIDEBAR)


class SidebarNav(ctk.CTkFrame):
    """Sidebar navigation panel.

    Parameters
    ----------
    parent:
        The parent widget (the AppShell root).
    user:
        The signed-in user; only read for name, role and initials.
    entries:
        Navigation entries for the user's role, in display order.
    on_view_selected:
        Called with the ``ViewId`` when the user clicks an entry.
    on_sign_out:
        Called when the user clicks Sign Out.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        parent: ctk.CTk,
        user: User,
        entries: tuple[NavEntry, ...],
        on_view_selected: Callable[[ViewId], None],
        on_sign_out: Callable[[], None],
        logger: StructuredLogger,
    ) -> None:
        super().__init__(parent, width=SIDEBAR_WIDTH, fg_color=SIDEBAR_BG, corner_radius=0)
        self.pack_propagate(False)

        self._user = user
        self._on_view_selected = on_view_selected
        self._on_sign_out = on_sign_out
        self._logger = logger

        self._buttons: dict[ViewId, _NavButton] = {}
        self._active_view_id: Optional[ViewId] = None
        self._sign_out_button: Optional[ctk.CTkButton] = None

        self._build_ui(entries)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def set_active(self, view_id: ViewId) -> None:
        """Highlight *view_id* and un-highlight the previous entry."""
        if self._active_view_id in self._buttons:
            self._buttons[self._active_view_id].set_active(False)
        if view_id in self._buttons:
            self._buttons[view_id].set_active(True)
        self._active_view_id = view_id

    def set_signing_out(self, busy: bool) -> None:
        if self._sign_out_button is None:
            return
        if busy:
            self._sign_out_button.configure(text="  ⏻   Signing out...", state="disabled")
        else:
            self._sign_out_button.configure(text="  ⏻   Sign Out", state="normal")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_ui(self, entries: tuple[NavEntry, ...]) -> None:
        ctk.CTkLabel(
            self,
            text="EduNex",
            font=FONT_BRAND,
            text_color=TEXT_LIGHT,
            anchor="w",
        ).pack(fill="x", padx=PADDING_MD, pady=(PADDING_MD, PADDING_SM))

        # --- User info: avatar + name + role ---
        row = ctk.CTkFrame(self, fg_color="transparent")
        row.pack(fill="x", padx=PADDING_MD, pady=(PADDING_SM, PADDING_SM))

        avatar = ctk.CTkFrame(
            row,
            width=_AVATAR_SIZE,
            height=_AVATAR_SIZE,
            corner_radius=_AVATAR_SIZE // 2,
            fg_color=ACCENT_HOVER,
        )
        avatar.pack(side="left", padx=(0, 10))
        avatar.pack_propagate(False)

        ctk.CTkLabel(
            avatar,
            text=self._user.initials,
            font=("Segoe UI", 14, "bold"),
            text_color=TEXT_LIGHT,
        ).place(relx=0.5, rely=0.5, anchor="center")

        text_frame = ctk.CTkFrame(row, fg_color="transparent")
        text_frame.pack(side="left", fill="x", expand=True)

        ctk.CTkLabel(
            text_frame,
            text=self._user.name,
            font=FONT_SIDEBAR_ACTIVE,
            text_color=TEXT_LIGHT,
            anchor="w",
        ).pack(fill="x")
        ctk.CTkLabel(
            text_frame,
            text=str(self._user.role).capitalize(),
            font=FONT_SMALL,
            text_color=SIDEBAR_TEXT,
            anchor="w",
        ).pack(fill="x")

        ctk.CTkFrame(self, height=1, fg_color=SIDEBAR_HOVER).pack(
            fill="x", padx=PADDING_MD, pady=PADDING_SM,
        )

        # --- Navigation entries ---
        nav_frame = ctk.CTkFrame(self, fg_color="transparent")
        nav_frame.pack(fill="both", expand=True, pady=PADDING_SM)
        for entry in entries:
            button = _NavButton(nav_frame, entry, self._on_view_selected)
            button.pack(fill="x", padx=PADDING_SM, pady=2)
            self._buttons[entry.id] = button

        # --- Bottom: separator + sign out ---
        ctk.CTkFrame(self, height=1, fg_color=SIDEBAR_HOVER).pack(
            fill="x", padx=PADDING_MD, side="bottom",
        )
        bottom_frame = ctk.CTkFrame(self, fg_color="transparent")
        bottom_frame.pack(fill="x", padx=PADDING_SM, pady=PADDING_SM, side="bottom")

        self._sign_out_button = ctk.CTkButton(
            bottom_frame,
            text="  ⏻   Sign Out",
            font=FONT_BODY,
            fg_color="transparent",
            hover_color=LOGOUT_HOVER,
            text_color=LOGOUT_PRIMARY,
            anchor="w",
            height=36,
            corner_radius=6,
            command=self._on_sign_out,
        )
        self._sign_out_button.pack(fill="x")
