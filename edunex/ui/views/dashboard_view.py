"""Dashboard View: generic landing page.

Greeting banner, role stat cards, quick actions, recent activity and
an overview panel, all read from ``edunex.services.dashboard_content``.

**Thin UI Rule**: Zero business logic; only reads and displays.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import customtkinter as ctk

from edunex.auth import SessionManager
from edunex.logger import StructuredLogger
from edunex.services.dashboard_content import (
    StatCard,
    greeting,
    overview_panel_for_role,
    quick_actions_for_role,
    recent_activities_for_role,
    stats_for_role,
)
from edunex.ui.theme import (
    BANNER_BG,
    BANNER_SUBTEXT,
    CARD_BORDER,
    CHANGE_NEGATIVE,
    CHANGE_POSITIVE,
    CONTENT_BG,
    CONTENT_CARD_BG,
    CORNER_RADIUS,
    FONT_BODY,
    FONT_CAPTION,
    FONT_HERO,
    FONT_ICON,
    FONT_SECTION,
    FONT_SMALL,
    FONT_STAT_VALUE,
    PADDING_LG,
    PADDING_MD,
    PADDING_SM,
    TEXT_LIGHT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)
from edunex.ui.view_router import coerce_role

_GREETING_REFRESH_MS: int = 60_000


class DashboardView(ctk.CTkScrollableFrame):
    """Landing dashboard for the signed-in user.

    The greeting is refreshed every minute so it follows the time of
    day.  The timer is cancelled when the widget is destroyed.

    Parameters
    ----------
    parent:
        Content container provided by the shell.
    session:
        Used to read the current user's identity.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        parent: ctk.CTkFrame,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(parent, fg_color=CONTENT_BG)
        self._session = session
        self._logger = logger
        self._refresh_job: Optional[str] = None
        self._greeting_label: Optional[ctk.CTkLabel] = None

        self._build_ui()
        self._schedule_refresh()

    # ------------------------------------------------------------------
    # Widget creation
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        user = self._session.get_current_user()
        role = coerce_role(user.role)

        # --- Greeting banner ---
        banner = ctk.CTkFrame(self, fg_color=BANNER_BG, corner_radius=CORNER_RADIUS)
        banner.pack(fill="x", padx=PADDING_LG, pady=(PADDING_LG, PADDING_MD))

        self._greeting_label = ctk.CTkLabel(
            banner,
            text=greeting(datetime.now().hour, user.name),
            font=FONT_HERO,
            text_color=TEXT_LIGHT,
            anchor="w",
        )
        self._greeting_label.pack(fill="x", padx=PADDING_LG, pady=(PADDING_LG, 4))

        ctk.CTkLabel(
            banner,
            text=f"Welcome to your {str(user.role).capitalize()} dashboard",
            font=FONT_BODY,
            text_color=BANNER_SUBTEXT,
            anchor="w",
        ).pack(fill="x", padx=PADDING_LG, pady=(0, PADDING_LG))

        # --- Stat cards ---
        stats_row = ctk.CTkFrame(self, fg_color="transparent")
        stats_row.pack(fill="x", padx=PADDING_LG, pady=(0, PADDING_MD))
        stats = stats_for_role(role)
        for column, stat in enumerate(stats):
            stats_row.grid_columnconfigure(column, weight=1, uniform="stat")
            self._build_stat_card(stats_row, stat).grid(
                row=0,
                column=column,
                sticky="nsew",
                padx=(0 if column == 0 else PADDING_SM, 0),
            )

        # --- Quick actions | Recent activity ---
        lower = ctk.CTkFrame(self, fg_color="transparent")
        lower.pack(fill="x", padx=PADDING_LG, pady=(0, PADDING_MD))
        lower.grid_columnconfigure(0, weight=1, uniform="lower")
        lower.grid_columnconfigure(1, weight=1, uniform="lower")

        actions_card = self._card(lower, "Quick Actions")
        actions_card.grid(row=0, column=0, sticky="nsew", padx=(0, PADDING_SM))
        actions = quick_actions_for_role(role)
        if not actions:
            ctk.CTkLabel(
                actions_card,
                text="No quick actions for your role.",
                font=FONT_SMALL,
                text_color=TEXT_SECONDARY,
            ).pack(padx=PADDING_MD, pady=PADDING_MD)
        for action in actions:
            ctk.CTkButton(
                actions_card,
                text=f"{action.icon}  {action.label}",
                font=FONT_BODY,
                fg_color="transparent",
                border_width=1,
                border_color=CARD_BORDER,
                text_color=TEXT_PRIMARY,
                hover_color=CONTENT_BG,
                height=44,
                command=lambda label=action.label: self._logger.info(
                    "Quick action selected: %s", label,
                ),
            ).pack(fill="x", padx=PADDING_MD, pady=(0, PADDING_SM))

        activity_card = self._card(lower, "Recent Activity")
        activity_card.grid(row=0, column=1, sticky="nsew")
        for activity in recent_activities_for_role(role):
            item = ctk.CTkFrame(activity_card, fg_color="transparent")
            item.pack(fill="x", padx=PADDING_MD, pady=(0, PADDING_SM))
            ctk.CTkLabel(
                item, text=activity.icon, font=FONT_ICON, text_color=TEXT_SECONDARY, width=32,
            ).pack(side="left")
            text_frame = ctk.CTkFrame(item, fg_color="transparent")
            text_frame.pack(side="left", fill="x", expand=True)
            ctk.CTkLabel(
                text_frame, text=activity.text, font=FONT_BODY, text_color=TEXT_PRIMARY, anchor="w",
            ).pack(fill="x")
            ctk.CTkLabel(
                text_frame, text=activity.time, font=FONT_CAPTION, text_color=TEXT_SECONDARY, anchor="w",
            ).pack(fill="x")

        # --- Overview panel ---
        title, body = overview_panel_for_role(role)
        overview = self._card(self, title)
        overview.pack(fill="x", padx=PADDING_LG, pady=(0, PADDING_LG))
        ctk.CTkLabel(
            overview,
            text=body,
            font=FONT_BODY,
            text_color=TEXT_SECONDARY,
            fg_color=CONTENT_BG,
            corner_radius=CORNER_RADIUS,
            height=120,
        ).pack(fill="x", padx=PADDING_MD, pady=(0, PADDING_MD))

    def _build_stat_card(self, parent: ctk.CTkFrame, stat: StatCard) -> ctk.CTkFrame:
        card = ctk.CTkFrame(
            parent,
            fg_color=CONTENT_CARD_BG,
            corner_radius=CORNER_RADIUS,
            border_width=1,
            border_color=CARD_BORDER,
        )
        badge = ctk.CTkLabel(
            card,
            text=stat.icon,
            font=FONT_ICON,
            fg_color=stat.color,
            text_color=TEXT_LIGHT,
            corner_radius=6,
            width=44,
            height=44,
        )
        badge.pack(side="left", padx=PADDING_MD, pady=PADDING_MD)

        text_frame = ctk.CTkFrame(card, fg_color="transparent")
        text_frame.pack(side="left", fill="x", expand=True, pady=PADDING_MD)
        ctk.CTkLabel(
            text_frame, text=stat.title, font=FONT_SMALL, text_color=TEXT_SECONDARY, anchor="w",
        ).pack(fill="x")

        value_row = ctk.CTkFrame(text_frame, fg_color="transparent")
        value_row.pack(fill="x")
        ctk.CTkLabel(
            value_row, text=stat.value, font=FONT_STAT_VALUE, text_color=TEXT_PRIMARY,
        ).pack(side="left")
        if stat.change:
            colour = {
                "positive": CHANGE_POSITIVE,
                "negative": CHANGE_NEGATIVE,
            }.get(stat.change_type, TEXT_SECONDARY)
            ctk.CTkLabel(
                value_row, text=f"  ↗ {stat.change}", font=FONT_SMALL, text_color=colour,
            ).pack(side="left")
        return card

    @staticmethod
    def _card(parent: ctk.CTkBaseClass, title: str) -> ctk.CTkFrame:
        card = ctk.CTkFrame(
            parent,
            fg_color=CONTENT_CARD_BG,
            corner_radius=CORNER_RADIUS,
            border_width=1,
            border_color=CARD_BORDER,
        )
        ctk.CTkLabel(
            card, text=title, font=FONT_SECTION, text_color=TEXT_PRIMARY, anchor="w",
        ).pack(fill="x", padx=PADDING_MD, pady=(PADDING_MD, PADDING_SM))
        return card

    # ------------------------------------------------------------------
    # Periodic refresh
    # ------------------------------------------------------------------

    def _schedule_refresh(self) -> None:
        self._refresh_job = self.after(_GREETING_REFRESH_MS, self._refresh)

    def _refresh(self) -> None:
        try:
            if not self.winfo_exists():
                return
            user = self._session.current_user
            if user is not None and self._greeting_label is not None:
                self._greeting_label.configure(text=greeting(datetime.now().hour, user.name))
        except Exception as exc:
            self._logger.warning("Dashboard refresh failed (non-fatal): %s", exc)

        if self.winfo_exists():
            self._schedule_refresh()

    def destroy(self) -> None:
        """Cancel the pending refresh timer before destroying the widget."""
        if self._refresh_job is not None:
            self.after_cancel(self._refresh_job)
            self._refresh_job = None
        super().destroy()
