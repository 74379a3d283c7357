"""Placeholder View.

Stands in for every module whose workflow is not built yet (admissions,
fees, hostel, examinations, attendance, library, students, users,
analytics).  Shows the view title and a short "coming soon" note.
"""

from __future__ import annotations

import customtkinter as ctk

from edunex.ui.theme import (
    CARD_BORDER,
    CONTENT_BG,
    CONTENT_CARD_BG,
    CORNER_RADIUS,
    FONT_BODY,
    FONT_HEADING,
    PADDING_LG,
    PADDING_MD,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)


class PlaceholderView(ctk.CTkFrame):
    """Titled card with a fixed message."""

    def __init__(
        self,
        parent: ctk.CTkFrame,
        title: str,
        message: str = "This module is coming soon.",
    ) -> None:
        super().__init__(parent, fg_color=CONTENT_BG)

        ctk.CTkLabel(
            self,
            text=title,
            font=FONT_HEADING,
            text_color=TEXT_PRIMARY,
            anchor="w",
        ).pack(fill="x", padx=PADDING_LG, pady=(PADDING_LG, PADDING_MD))

        card = ctk.CTkFrame(
            self,
            fg_color=CONTENT_CARD_BG,
            corner_radius=CORNER_RADIUS,
            border_width=1,
            border_color=CARD_BORDER,
        )
        card.pack(fill="both", expand=True, padx=PADDING_LG, pady=(0, PADDING_LG))

        ctk.CTkLabel(
            card,
            text=message,
            font=FONT_BODY,
            text_color=TEXT_SECONDARY,
        ).place(relx=0.5, rely=0.5, anchor="center")
