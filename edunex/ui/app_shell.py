"""Application Host Shell.

The top-level ``CTk`` window.  It renders whatever the session state
says:

- INITIALIZING / RESOLVING_PROFILE: a loading screen.
- UNAUTHENTICATED: the ``LoginView``.
- AUTHENTICATED: sidebar + content area, or the full-page library
  dashboard for librarians.

All dependencies are injected via the constructor.  The shell contains
no business logic: ``AuthService`` drives the session, ``ViewRouter``
picks the view, ``ViewRegistry`` builds it.  Session and notification
events arrive on worker threads and are marshalled onto the UI thread
with ``self.after(0, ...)``.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

import customtkinter as ctk

from edunex.auth import SessionManager
from edunex.config import AppConfig
from edunex.logger import StructuredLogger
from edunex.models.auth_models import Notification, SessionSnapshot
from edunex.models.enums import ViewId
from edunex.models.user import User
from edunex.services import ServiceContainer
from edunex.services.auth_errors import AuthError
from edunex.services.auth_service import AuthService
from edunex.services.notifications import NotificationCenter
from edunex.ui.components.toast import ToastHost
from edunex.ui.login_view import LoginView
from edunex.ui.module_registry import ViewRegistry
from edunex.ui.sidebar import SidebarNav
from edunex.ui.theme import (
    CONTENT_BG,
    CONTENT_CARD_BG,
    FONT_BODY,
    FONT_HEADING,
    FONT_SMALL,
    LOGIN_WINDOW_HEIGHT,
    LOGIN_WINDOW_WIDTH,
    LOGOUT_HOVER,
    MAIN_WINDOW_HEIGHT,
    MAIN_WINDOW_WIDTH,
    PADDING_LG,
    PADDING_MD,
    PADDING_SM,
    SIDEBAR_BG,
    TEXT_LIGHT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)
from edunex.ui.view_router import ViewRouter


class AppShell(ctk.CTk):
    """Host Shell: the main application window.

    Parameters
    ----------
    config:
        Application configuration.
    session:
        Session state; the shell subscribes to it.
    services:
        Fully-wired service container.
    registry:
        View registry populated before shell launch.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        config: AppConfig,
        session: SessionManager,
        services: ServiceContainer,
        registry: ViewRegistry,
        logger: StructuredLogger,
    ) -> None:
        super().__init__()

        self._config = config
        self._session = session
        self._auth_service: AuthService = services["auth_service"]
        self._notifications: NotificationCenter = services["notifications"]
        self._registry = registry
        self._logger = logger

        self._router = ViewRouter()
        self._toasts = ToastHost(self, duration_ms=config.TOAST_DURATION_MS)

        self._screen: Optional[str] = None
        self._screen_frame: Optional[ctk.CTkFrame] = None
        self._sidebar: Optional[SidebarNav] = None
        self._content_container: Optional[ctk.CTkFrame] = None
        self._view_frames: dict[ViewId, ctk.CTkFrame] = {}
        self._active_view_id: Optional[ViewId] = None
        self._closing: bool = False

        self.title(config.APP_TITLE)
        ctk.set_appearance_mode("light")
        ctk.set_default_color_theme("blue")
        self.geometry(f"{MAIN_WINDOW_WIDTH}x{MAIN_WINDOW_HEIGHT}")
        self.minsize(LOGIN_WINDOW_WIDTH, LOGIN_WINDOW_HEIGHT)

        self.protocol("WM_DELETE_WINDOW", self._on_close)

        self._unsubscribers: list[Callable[[], None]] = [
            session.subscribe(self._on_session_event),
            self._notifications.subscribe(self._on_notification),
        ]

        self._render(session.snapshot())
        threading.Thread(
            target=self._auth_service.start,
            name="session-restore",
            daemon=True,
        ).start()

    # ==================================================================
    # Event marshalling (worker thread -> UI thread)
    # ==================================================================

    def _on_session_event(self, snapshot: SessionSnapshot) -> None:
        if not self._closing:
            self.after(0, self._render, snapshot)

    def _on_notification(self, notification: Notification) -> None:
        if not self._closing:
            self.after(0, self._toasts.show, notification)

    # ==================================================================
    # Rendering
    # ==================================================================

    def _render(self, snapshot: SessionSnapshot) -> None:
        if self._closing:
            return
        user_changed = self._router.on_session_changed(snapshot)

        if snapshot.loading:
            if self._screen != "loading":
                self._show_loading()
            return

        if snapshot.user is None:
            if self._screen != "login":
                self._show_login()
            return

        if self._screen != "main" or user_changed:
            self._show_main(snapshot.user)

    def _show_loading(self) -> None:
        self._clear_screen()
        frame = ctk.CTkFrame(self, fg_color=CONTENT_BG)
        frame.pack(fill="both", expand=True)

        inner = ctk.CTkFrame(frame, fg_color="transparent")
        inner.place(relx=0.5, rely=0.5, anchor="center")
        ctk.CTkLabel(
            inner, text=self._config.APP_TITLE, font=FONT_HEADING, text_color=TEXT_PRIMARY,
        ).pack(pady=(0, PADDING_SM))
        ctk.CTkLabel(
            inner, text="Loading...", font=FONT_BODY, text_color=TEXT_SECONDARY,
        ).pack(pady=(0, PADDING_MD))
        progress = ctk.CTkProgressBar(inner, mode="indeterminate", width=220)
        progress.pack()
        progress.start()

        self._screen_frame = frame
        self._screen = "loading"

    def _show_login(self) -> None:
        self._clear_screen()
        login_view = LoginView(
            parent=self,
            auth_service=self._auth_service,
            logger=self._logger,
        )
        login_view.pack(fill="both", expand=True)
        self._screen_frame = login_view
        self._screen = "login"

    def _show_main(self, user: User) -> None:
        self._clear_screen()
        self.minsize(800, 500)

        if self._router.full_page:
            self._build_full_page(user)
        else:
            self._sidebar = SidebarNav(
                parent=self,
                user=user,
                entries=self._router.navigation,
                on_view_selected=self._switch_view,
                on_sign_out=self._handle_sign_out,
                logger=self._logger,
            )
            self._sidebar.pack(side="left", fill="y")

            self._content_container = ctk.CTkFrame(self, fg_color=CONTENT_BG, corner_radius=0)
            self._content_container.pack(side="left", fill="both", expand=True)

        self._screen = "main"
        self._logger.info(
            "Showing %s for %s (%s)",
            self._router.active_view,
            user.name,
            user.role,
        )
        self._show_view(self._router.active_view)

    def _build_full_page(self, user: User) -> None:
        """Librarians: a slim header bar over a single full-page view."""
        header = ctk.CTkFrame(self, fg_color=SIDEBAR_BG, corner_radius=0, height=48)
        header.pack(side="top", fill="x")
        header.pack_propagate(False)

        ctk.CTkLabel(
            header,
            text=f"{self._config.APP_TITLE}  ·  {user.name}",
            font=FONT_BODY,
            text_color=TEXT_LIGHT,
        ).pack(side="left", padx=PADDING_LG)
        ctk.CTkButton(
            header,
            text="⏻  Sign Out",
            font=FONT_SMALL,
            fg_color="transparent",
            hover_color=LOGOUT_HOVER,
            text_color=TEXT_LIGHT,
            width=110,
            command=self._handle_sign_out,
        ).pack(side="right", padx=PADDING_MD)

        self._screen_frame = header
        self._content_container = ctk.CTkFrame(self, fg_color=CONTENT_CARD_BG, corner_radius=0)
        self._content_container.pack(side="top", fill="both", expand=True)

    def _clear_screen(self) -> None:
        """Destroy whatever screen is showing, including cached views."""
        for frame in self._view_frames.values():
            frame.destroy()
        self._view_frames.clear()
        self._active_view_id = None

        for widget in (self._sidebar, self._content_container, self._screen_frame):
            if widget is not None:
                widget.destroy()
        self._sidebar = None
        self._content_container = None
        self._screen_frame = None
        self._screen = None

    # ==================================================================
    # View switching
    # ==================================================================

    def _switch_view(self, view_id: ViewId) -> None:
        self._show_view(self._router.select(view_id))

    def _show_view(self, view_id: ViewId) -> None:
        """Hide the current view frame and show (or create) *view_id*.

        An unregistered view falls back to the dashboard; the current
        frame stays visible until the replacement exists.
        """
        if self._content_container is None:
            return
        target = self._registry.resolve(view_id)
        if target is None or target == self._active_view_id:
            return

        if target not in self._view_frames:
            entry = self._registry.get_view(target)
            self._view_frames[target] = entry.factory(self._content_container)

        if self._active_view_id in self._view_frames:
            self._view_frames[self._active_view_id].pack_forget()

        self._view_frames[target].pack(fill="both", expand=True)
        self._active_view_id = target

        if self._sidebar is not None:
            self._sidebar.set_active(target)
        self._logger.debug("Switched to view: %s", target)

    # ==================================================================
    # Sign out
    # ==================================================================

    def _handle_sign_out(self) -> None:
        if self._sidebar is not None:
            self._sidebar.set_signing_out(True)

        def _sign_out_in_background() -> None:
            try:
                self._auth_service.sign_out()
            except AuthError as exc:
                self._notifications.error(exc.user_message)
            finally:
                if not self._closing:
                    self.after(0, self._reset_sign_out_button)

        threading.Thread(
            target=_sign_out_in_background,
            name="sign-out",
            daemon=True,
        ).start()

    def _reset_sign_out_button(self) -> None:
        if self._sidebar is not None:
            self._sidebar.set_signing_out(False)

    # ==================================================================
    # Window close
    # ==================================================================

    def _on_close(self) -> None:
        """Stop listening, tear down the auth service, destroy the window."""
        self._closing = True
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._auth_service.close()
        self._toasts.clear()
        self.destroy()
