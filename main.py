"""
EduNex Desktop Application Entry Point.

Bootstraps the entire dependency graph via constructor injection and
launches the CustomTkinter GUI.  Every subsystem is wired here; no
module-level globals.

Usage::

    python main.py          # or the installed ``edunex`` script
"""

from __future__ import annotations

import sys
import traceback

from edunex.auth import SessionManager
from edunex.config import get_config
from edunex.database import DatabaseManager
from edunex.logger import StructuredLogger, get_logger
from edunex.models.enums import ViewId
from edunex.services import create_services
from edunex.services.notifications import NotificationCenter
from edunex.services.session_storage import EncryptedSessionStorage
from edunex.ui.app_shell import AppShell
from edunex.ui.module_registry import ViewRegistry
from edunex.ui.views.dashboard_view import DashboardView
from edunex.ui.views.placeholder_view import PlaceholderView

_PLACEHOLDER_TITLES: dict[ViewId, str] = {
    ViewId.ADMISSIONS: "Admissions",
    ViewId.FEES: "Fees",
    ViewId.HOSTEL: "Hostel",
    ViewId.EXAMS: "Examinations",
    ViewId.ATTENDANCE: "Attendance",
    ViewId.LIBRARY: "Library",
    ViewId.LIBRARY_DASHBOARD: "Library Dashboard",
    ViewId.STUDENTS: "Students",
    ViewId.USERS: "User Management",
    ViewId.ANALYTICS: "Analytics",
}


def main() -> None:
    """Application entry point: wire dependencies and launch the GUI."""
    logger: StructuredLogger = get_logger("main")
    logger.info("Starting EduNex...")

    # ------------------------------------------------------------------
    # 1. Configuration (from .env / environment variables)
    # ------------------------------------------------------------------
    config = get_config()

    # ------------------------------------------------------------------
    # 2. Supabase client with encrypted session persistence
    # ------------------------------------------------------------------
    storage = EncryptedSessionStorage(
        path=config.SESSION_STORE_PATH,
        logger=StructuredLogger(name="session_storage"),
    )
    db = DatabaseManager(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        logger=StructuredLogger(name="database"),
        storage=storage,
        postgrest_timeout=config.POSTGREST_TIMEOUT_S,
    )

    # ------------------------------------------------------------------
    # 3. Session state + notification channel
    # ------------------------------------------------------------------
    session = SessionManager()
    notifications = NotificationCenter(logger=StructuredLogger(name="notifications"))

    # ------------------------------------------------------------------
    # 4. Service Container (repositories + services, single composition root)
    # ------------------------------------------------------------------
    services = create_services(
        db=db,
        config=config,
        session=session,
        notifications=notifications,
    )
    auth_service = services["auth_service"]

    # ------------------------------------------------------------------
    # 5. View Registry
    # ------------------------------------------------------------------
    registry = ViewRegistry(logger=get_logger("views"))
    registry.register(
        ViewId.DASHBOARD,
        "Dashboard",
        lambda parent: DashboardView(
            parent=parent,
            session=session,
            logger=get_logger("dashboard"),
        ),
    )
    for view_id, title in _PLACEHOLDER_TITLES.items():
        registry.register(
            view_id,
            title,
            lambda parent, title=title: PlaceholderView(parent=parent, title=title),
        )

    unregistered = registry.missing()
    if unregistered:
        logger.warning(
            "Views without a frame (the dashboard is shown instead): %s",
            ", ".join(unregistered),
        )

    # ------------------------------------------------------------------
    # 6. Launch the GUI (blocks until window closes)
    # ------------------------------------------------------------------
    logger.info("Launching GUI...")
    try:
        app = AppShell(
            config=config,
            session=session,
            services=services,
            registry=registry,
            logger=get_logger("ui"),
        )
        app.mainloop()
    finally:
        # Idempotent; the window's close handler usually got here first.
        auth_service.close()
        logger.info("EduNex shut down.")


def _show_fatal_error(exc: BaseException) -> None:
    """Display a fatal-error dialog so double-click users get feedback.

    Uses ``tkinter.messagebox`` (stdlib) rather than CustomTkinter so
    the dialog works even when CTk initialisation itself is the thing
    that failed.
    """
    detail = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    try:
        import tkinter
        from tkinter import messagebox

        root = tkinter.Tk()
        root.withdraw()
        messagebox.showerror(
            title="EduNex: Fatal Error",
            message=(
                "The application encountered an unexpected error and "
                "cannot continue.\n\n"
                f"{type(exc).__name__}: {exc}"
            ),
            detail=detail,
        )
        root.destroy()
    except Exception:
        # Headless or missing Tcl/Tk: fall back to stderr.
        sys.stderr.write(f"FATAL: {type(exc).__name__}: {exc}\n{detail}")


def run() -> None:
    """Console-script entry point: ``main()`` with fatal-error reporting."""
    try:
        main()
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        _show_fatal_error(exc)
        sys.exit(1)


if __name__ == "__main__":
    run()
