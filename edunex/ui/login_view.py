"""Login View: Authentication Screen.

Sign In / Create Account tabs for institutional accounts.  Credentials
go to ``AuthService`` on a background thread; the session moving to
AUTHENTICATED is what swaps this view out, so the view itself never
navigates.

**Thin UI Rule**: This module contains ZERO business logic.  It
gathers inputs, delegates to ``AuthService``, and displays results.
"""

from __future__ import annotations

import threading
import tkinter as tk
from typing import Callable, Optional

import customtkinter as ctk

from edunex.logger import StructuredLogger
from edunex.services.auth_errors import AuthError, ProfileCreateFailedError
from edunex.services.auth_service import AuthService
from edunex.services.identity import INSTITUTION_DOMAIN
from edunex.ui.theme import (
    ACCENT_HOVER,
    ACCENT_PRIMARY,
    CARD_BORDER,
    CONTENT_BG,
    CONTENT_CARD_BG,
    CORNER_RADIUS,
    ERROR_TEXT,
    FONT_BODY,
    FONT_BRAND,
    FONT_BUTTON,
    FONT_CAPTION,
    FONT_LABEL,
    FONT_SMALL,
    FONT_SUBTITLE,
    INPUT_BG,
    INPUT_BORDER,
    PADDING_LG,
    PADDING_MD,
    PADDING_SM,
    SUCCESS_TEXT,
    TAB_HOVER,
    TEXT_LIGHT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_CARD_WIDTH: int = 420
_TAB_HEIGHT: int = 42
_INPUT_HEIGHT: int = 44
_BUTTON_HEIGHT: int = 48
_BRAND_ICON_SIZE: int = 56
_EMAIL_PLACEHOLDER: str = f"name@student.{INSTITUTION_DOMAIN}"
_GENERIC_ERROR: str = "Something went wrong. Please try again."


class LoginView(ctk.CTkFrame):
    """Full-screen login frame with Sign In / Create Account tabs.

    Parameters
    ----------
    parent:
        The root ``CTk`` window this frame belongs to.
    auth_service:
        Session/profile manager handling sign-in and sign-up.
    logger:
        Structured JSON logger.
    """

    def __init__(
        self,
        parent: ctk.CTk,
        auth_service: AuthService,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(parent, fg_color=CONTENT_BG)

        self._auth_service: AuthService = auth_service
        self._logger: StructuredLogger = logger

        self._active_tab: str = "sign_in"

        # Sign In widgets
        self._email_entry: Optional[ctk.CTkEntry] = None
        self._password_entry: Optional[ctk.CTkEntry] = None
        self._login_button: Optional[ctk.CTkButton] = None
        self._error_label: Optional[ctk.CTkLabel] = None

        # Create Account widgets
        self._su_name_entry: Optional[ctk.CTkEntry] = None
        self._su_email_entry: Optional[ctk.CTkEntry] = None
        self._su_password_entry: Optional[ctk.CTkEntry] = None
        self._su_create_button: Optional[ctk.CTkButton] = None
        self._su_error_label: Optional[ctk.CTkLabel] = None
        self._su_success_label: Optional[ctk.CTkLabel] = None

        self._sign_in_tab: Optional[ctk.CTkButton] = None
        self._sign_up_tab: Optional[ctk.CTkButton] = None
        self._sign_in_frame: Optional[ctk.CTkFrame] = None
        self._sign_up_frame: Optional[ctk.CTkFrame] = None

        self._build_ui()

    # ------------------------------------------------------------------
    # UI Construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)
        self.grid_rowconfigure(2, weight=0)
        self.grid_rowconfigure(3, weight=1)
        self.grid_columnconfigure(0, weight=1)

        card = ctk.CTkFrame(
            self,
            width=_CARD_WIDTH,
            fg_color=CONTENT_CARD_BG,
            corner_radius=16,
            border_width=1,
            border_color=CARD_BORDER,
        )
        card.grid(row=1, column=0, pady=(0, PADDING_SM))

        inner = ctk.CTkFrame(card, fg_color="transparent")
        inner.pack(fill="both", expand=True, padx=36, pady=28)

        icon_frame = ctk.CTkFrame(
            inner,
            width=_BRAND_ICON_SIZE,
            height=_BRAND_ICON_SIZE,
            corner_radius=14,
            fg_color=ACCENT_PRIMARY,
        )
        icon_frame.pack(pady=(0, 12))
        icon_frame.pack_propagate(False)
        ctk.CTkLabel(
            icon_frame,
            text="\U0001F393",
            font=("Segoe UI", 24, "bold"),
            text_color=TEXT_LIGHT,
        ).place(relx=0.5, rely=0.5, anchor="center")

        ctk.CTkLabel(
            inner, text="EduNex", font=FONT_BRAND, text_color=TEXT_PRIMARY,
        ).pack(pady=(0, 2))
        ctk.CTkLabel(
            inner,
            text="College Administration System",
            font=FONT_SUBTITLE,
            text_color=TEXT_SECONDARY,
        ).pack(pady=(0, PADDING_LG))

        # -- Tab bar --
        tab_bar = ctk.CTkFrame(inner, fg_color="transparent", height=_TAB_HEIGHT)
        tab_bar.pack(fill="x", pady=(0, PADDING_MD))
        tab_bar.pack_propagate(False)
        tab_bar.grid_columnconfigure(0, weight=1)
        tab_bar.grid_columnconfigure(1, weight=1)

        self._sign_in_tab = self._tab_button(tab_bar, "Sign In", "sign_in")
        self._sign_in_tab.grid(row=0, column=0, sticky="nsew")
        self._sign_up_tab = self._tab_button(tab_bar, "Create Account", "sign_up")
        self._sign_up_tab.grid(row=0, column=1, sticky="nsew")
        self._style_tabs()

        self._sign_in_frame = ctk.CTkFrame(inner, fg_color="transparent")
        self._build_sign_in_tab(self._sign_in_frame)

        self._sign_up_frame = ctk.CTkFrame(inner, fg_color="transparent")
        self._build_sign_up_tab(self._sign_up_frame)

        self._sign_in_frame.pack(fill="both", expand=True)

        ctk.CTkLabel(
            inner,
            text=f"Use your official college email (@{INSTITUTION_DOMAIN}).",
            font=FONT_SMALL,
            text_color=TEXT_SECONDARY,
        ).pack(side="bottom", pady=(PADDING_SM, 0))

        ctk.CTkLabel(
            self,
            text="© Matrusri Engineering College",
            font=FONT_CAPTION,
            text_color=TEXT_SECONDARY,
        ).grid(row=2, column=0, pady=(PADDING_SM, 0))

    def _tab_button(self, parent: ctk.CTkFrame, text: str, tab: str) -> ctk.CTkButton:
        return ctk.CTkButton(
            parent,
            text=text,
            font=("Segoe UI", 13),
            fg_color="transparent",
            hover_color=TAB_HOVER,
            text_color=TEXT_SECONDARY,
            height=_TAB_HEIGHT,
            corner_radius=0,
            border_width=1,
            border_color=INPUT_BORDER,
            command=lambda: self._switch_tab(tab),
        )

    def _labelled_entry(
        self,
        parent: ctk.CTkFrame,
        label: str,
        placeholder: str,
        *,
        secret: bool = False,
        bottom_pad: int = PADDING_MD,
    ) -> ctk.CTkEntry:
        ctk.CTkLabel(
            parent, text=label, font=FONT_LABEL, text_color=TEXT_PRIMARY, anchor="w",
        ).pack(fill="x", pady=(0, 4))
        entry = ctk.CTkEntry(
            parent,
            placeholder_text=placeholder,
            font=FONT_BODY,
            fg_color=INPUT_BG,
            border_color=INPUT_BORDER,
            text_color=TEXT_PRIMARY,
            show="*" if secret else "",
            height=_INPUT_HEIGHT,
            corner_radius=CORNER_RADIUS,
        )
        entry.pack(fill="x", pady=(0, bottom_pad))
        return entry

    def _primary_button(
        self, parent: ctk.CTkFrame, text: str, command: Callable[[], None],
    ) -> ctk.CTkButton:
        button = ctk.CTkButton(
            parent,
            text=text,
            font=FONT_BUTTON,
            fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER,
            text_color=TEXT_LIGHT,
            height=_BUTTON_HEIGHT,
            corner_radius=CORNER_RADIUS,
            command=command,
        )
        button.pack(fill="x", pady=(0, PADDING_SM))
        return button

    def _message_label(self, parent: ctk.CTkFrame, colour: str) -> ctk.CTkLabel:
        label = ctk.CTkLabel(
            parent,
            text="",
            font=FONT_SMALL,
            text_color=colour,
            wraplength=_CARD_WIDTH - 100,
        )
        label.pack(fill="x")
        label.pack_forget()
        return label

    def _build_sign_in_tab(self, parent: ctk.CTkFrame) -> None:
        self._email_entry = self._labelled_entry(parent, "EMAIL ADDRESS", _EMAIL_PLACEHOLDER)
        self._password_entry = self._labelled_entry(
            parent, "PASSWORD", "••••••••", secret=True, bottom_pad=PADDING_LG,
        )
        self._login_button = self._primary_button(parent, "Sign In  →", self._handle_login)
        self._error_label = self._message_label(parent, ERROR_TEXT)

        self._email_entry.bind("<Return>", self._on_enter_key)
        self._password_entry.bind("<Return>", self._on_enter_key)

    def _build_sign_up_tab(self, parent: ctk.CTkFrame) -> None:
        self._su_name_entry = self._labelled_entry(parent, "FULL NAME", "e.g. Priya Sharma")
        self._su_email_entry = self._labelled_entry(parent, "EMAIL ADDRESS", _EMAIL_PLACEHOLDER)
        self._su_password_entry = self._labelled_entry(
            parent, "PASSWORD", "••••••••", secret=True, bottom_pad=PADDING_LG,
        )
        self._su_create_button = self._primary_button(
            parent, "Create Account  →", self._handle_sign_up,
        )
        self._su_error_label = self._message_label(parent, ERROR_TEXT)
        self._su_success_label = self._message_label(parent, SUCCESS_TEXT)

        ctk.CTkLabel(
            parent,
            text="Your role is assigned from your email address.",
            font=FONT_CAPTION,
            text_color=TEXT_SECONDARY,
        ).pack(pady=(PADDING_SM, 0))

    # ------------------------------------------------------------------
    # Tab switching
    # ------------------------------------------------------------------

    def _switch_tab(self, tab: str) -> None:
        if tab == self._active_tab:
            return
        self._active_tab = tab
        self._clear_error()
        self._clear_su_messages()

        if tab == "sign_in":
            self._sign_up_frame.pack_forget()
            self._sign_in_frame.pack(fill="both", expand=True)
        else:
            self._sign_in_frame.pack_forget()
            self._sign_up_frame.pack(fill="both", expand=True)
        self._style_tabs()

    def _style_tabs(self) -> None:
        for tab, button in (("sign_in", self._sign_in_tab), ("sign_up", self._sign_up_tab)):
            if button is None:
                continue
            if tab == self._active_tab:
                button.configure(
                    text_color=ACCENT_PRIMARY,
                    border_color=ACCENT_PRIMARY,
                    border_width=2,
                    font=("Segoe UI", 13, "bold"),
                )
            else:
                button.configure(
                    text_color=TEXT_SECONDARY,
                    border_color=INPUT_BORDER,
                    border_width=1,
                    font=("Segoe UI", 13),
                )

    # ------------------------------------------------------------------
    # Event Handlers: Sign In
    # ------------------------------------------------------------------

    def _on_enter_key(self, event: tk.Event[tk.Misc]) -> None:
        self._handle_login()

    def _handle_login(self) -> None:
        email = self._email_entry.get().strip()
        password = self._password_entry.get()

        if not email or not password:
            self._show_error("Please enter email and password.")
            return

        self._set_loading(True)
        self._clear_error()

        threading.Thread(
            target=self._authenticate,
            args=(email, password),
            name="sign-in",
            daemon=True,
        ).start()

    def _authenticate(self, email: str, password: str) -> None:
        """Background thread: delegate to ``AuthService.sign_in``.

        All UI mutations are dispatched back via ``self.after(0, ...)``.
        """
        try:
            self._auth_service.sign_in(email, password)
        except AuthError as exc:
            self._logger.info("Sign-in rejected (%s) for %s", exc.code, email)
            self.after(0, lambda msg=exc.user_message: self._show_error(msg))
        except Exception as exc:
            self._logger.error("Unexpected sign-in failure: %s", exc, exc_info=True)
            self.after(0, lambda: self._show_error(_GENERIC_ERROR))
        finally:
            self.after(0, lambda: self._set_loading(False))

    # ------------------------------------------------------------------
    # Event Handlers: Create Account
    # ------------------------------------------------------------------

    def _handle_sign_up(self) -> None:
        name = self._su_name_entry.get().strip()
        email = self._su_email_entry.get().strip()
        password = self._su_password_entry.get()

        self._clear_su_messages()

        if not all([name, email, password]):
            self._show_su_error("All fields are required.")
            return

        self._set_su_loading(True)
        threading.Thread(
            target=self._do_sign_up,
            args=(name, email, password),
            name="sign-up",
            daemon=True,
        ).start()

    def _do_sign_up(self, name: str, email: str, password: str) -> None:
        """Background thread: delegate to ``AuthService.sign_up``."""
        try:
            self._auth_service.sign_up(email, password, name)
        except ProfileCreateFailedError as exc:
            self._logger.warning("Account created without profile for %s", email)
            self.after(
                0,
                lambda msg=exc.user_message: self._show_su_error(
                    f"{msg}. Your account exists; sign in to finish setting it up."
                ),
            )
        except AuthError as exc:
            self._logger.info("Sign-up rejected (%s) for %s", exc.code, email)
            self.after(0, lambda msg=exc.user_message: self._show_su_error(msg))
        except Exception as exc:
            self._logger.error("Unexpected sign-up failure: %s", exc, exc_info=True)
            self.after(0, lambda: self._show_su_error(_GENERIC_ERROR))
        else:
            self.after(0, self._on_sign_up_success)
        finally:
            self.after(0, lambda: self._set_su_loading(False))

    def _on_sign_up_success(self) -> None:
        self._su_success_label.configure(
            text="Account created! Check your email if confirmation is required, then sign in.",
        )
        self._su_success_label.pack(fill="x")
        self._su_name_entry.delete(0, "end")
        self._su_email_entry.delete(0, "end")
        self._su_password_entry.delete(0, "end")

    # ------------------------------------------------------------------
    # UI Helper Methods
    # ------------------------------------------------------------------

    def _show_error(self, message: str) -> None:
        if self._error_label is not None:
            self._error_label.configure(text=message)
            self._error_label.pack(fill="x")

    def _clear_error(self) -> None:
        if self._error_label is not None:
            self._error_label.configure(text="")
            self._error_label.pack_forget()

    def _show_su_error(self, message: str) -> None:
        if self._su_error_label is not None:
            self._su_error_label.configure(text=message)
            self._su_error_label.pack(fill="x")

    def _clear_su_messages(self) -> None:
        for label in (self._su_error_label, self._su_success_label):
            if label is not None:
                label.configure(text="")
                label.pack_forget()

    def _set_loading(self, loading: bool) -> None:
        if self._login_button is None or not self.winfo_exists():
            return
        if loading:
            self._login_button.configure(text="Signing in...", state="disabled")
        else:
            self._login_button.configure(text="Sign In  →", state="normal")

    def _set_su_loading(self, loading: bool) -> None:
        if self._su_create_button is None or not self.winfo_exists():
            return
        if loading:
            self._su_create_button.configure(text="Creating account...", state="disabled")
        else:
            self._su_create_button.configure(text="Create Account  →", state="normal")
