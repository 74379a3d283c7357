"""UI Theme Constants for EduNex.

Centralises all colour, font, and sizing constants for the
CustomTkinter interface.  Dark blue sidebar + light content area,
after the college's web portal.

This file contains **zero logic**, only ``Final`` constants.
"""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Colour palette
# ---------------------------------------------------------------------------

SIDEBAR_BG: Final[str] = "#1e3a8a"
SIDEBAR_HOVER: Final[str] = "#1e40af"
SIDEBAR_ACTIVE: Final[str] = "#2563eb"
SIDEBAR_TEXT: Final[str] = "#dbeafe"

CONTENT_BG: Final[str] = "#f3f4f6"
CONTENT_CARD_BG: Final[str] = "#ffffff"
CARD_BORDER: Final[str] = "#e5e7eb"

ACCENT_PRIMARY: Final[str] = "#2563eb"
ACCENT_HOVER: Final[str] = "#1d4ed8"
BANNER_BG: Final[str] = "#1d4ed8"
BANNER_SUBTEXT: Final[str] = "#dbeafe"
TEXT_PRIMARY: Final[str] = "#111827"
TEXT_SECONDARY: Final[str] = "#6b7280"
TEXT_LIGHT: Final[str] = "#ffffff"

CHANGE_POSITIVE: Final[str] = "#16a34a"
CHANGE_NEGATIVE: Final[str] = "#dc2626"

# Input / form
INPUT_BG: Final[str] = "#ffffff"
INPUT_BORDER: Final[str] = "#d1d5db"
ERROR_TEXT: Final[str] = "#dc2626"
SUCCESS_TEXT: Final[str] = "#16a34a"

# Tabs / sign-out
TAB_HOVER: Final[str] = "#f3f4f6"
LOGOUT_PRIMARY: Final[str] = "#fca5a5"
LOGOUT_HOVER: Final[str] = "#7f1d1d"

# Toasts by notification level
TOAST_BG: Final[dict[str, str]] = {
    "info": "#1f2937",
    "success": "#15803d",
    "error": "#b91c1c",
}

# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------

FONT_FAMILY: Final[str] = "Segoe UI"
FONT_BRAND: Final[tuple[str, int, str]] = (FONT_FAMILY, 22, "bold")
FONT_HERO: Final[tuple[str, int, str]] = (FONT_FAMILY, 26, "bold")
FONT_HEADING: Final[tuple[str, int, str]] = (FONT_FAMILY, 20, "bold")
FONT_SECTION: Final[tuple[str, int, str]] = (FONT_FAMILY, 15, "bold")
FONT_STAT_VALUE: Final[tuple[str, int, str]] = (FONT_FAMILY, 22, "bold")
FONT_SUBTITLE: Final[tuple[str, int]] = (FONT_FAMILY, 12)
FONT_BODY: Final[tuple[str, int]] = (FONT_FAMILY, 13)
FONT_SIDEBAR: Final[tuple[str, int]] = (FONT_FAMILY, 14)
FONT_SIDEBAR_ACTIVE: Final[tuple[str, int, str]] = (FONT_FAMILY, 14, "bold")
FONT_LABEL: Final[tuple[str, int, str]] = (FONT_FAMILY, 11, "bold")
FONT_SMALL: Final[tuple[str, int]] = (FONT_FAMILY, 11)
FONT_CAPTION: Final[tuple[str, int]] = (FONT_FAMILY, 10)
FONT_BUTTON: Final[tuple[str, int, str]] = (FONT_FAMILY, 13, "bold")
FONT_ICON: Final[tuple[str, int]] = (FONT_FAMILY, 20)

# ---------------------------------------------------------------------------
# Dimensions
# ---------------------------------------------------------------------------

SIDEBAR_WIDTH: Final[int] = 250
LOGIN_WINDOW_WIDTH: Final[int] = 480
LOGIN_WINDOW_HEIGHT: Final[int] = 720
MAIN_WINDOW_WIDTH: Final[int] = 1200
MAIN_WINDOW_HEIGHT: Final[int] = 760
CORNER_RADIUS: Final[int] = 8
PADDING_SM: Final[int] = 8
PADDING_MD: Final[int] = 16
PADDING_LG: Final[int] = 24
