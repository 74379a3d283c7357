"""View Router.

Role-to-navigation tables and the rules that decide which view the
content area renders.  Display-independent: nothing here touches
CustomTkinter, so the shell and the tests share the same logic.

Rules:
    - Every role has an ordered list of navigation entries and a
      default landing view.  Both tables are exhaustive over ``Role``;
      a missing role fails at import.
    - Librarians always get the full-page library dashboard, whatever
      tab is selected.
    - A selection outside the role's entries (or an unknown id, or no
      role at all) falls back to the generic dashboard.
"""

from __future__ import annotations

from typing import Final, Optional, Union

from pydantic import BaseModel

from edunex.models.auth_models import SessionSnapshot
from edunex.models.enums import Role, ViewId


class NavEntry(BaseModel):
    """One sidebar entry."""

    id: ViewId
    label: str
    icon: str

    model_config = {"frozen": True}


_DASHBOARD: Final[NavEntry] = NavEntry(id=ViewId.DASHBOARD, label="Dashboard", icon="\U0001F3E0")

NAVIGATION: Final[dict[Role, tuple[NavEntry, ...]]] = {
    Role.ADMIN: (
        _DASHBOARD,
        NavEntry(id=ViewId.ADMISSIONS, label="Admissions", icon="\U0001F393"),
        NavEntry(id=ViewId.FEES, label="Fee Management", icon="₹"),
        NavEntry(id=ViewId.HOSTEL, label="Hostel", icon="\U0001F3E2"),
        NavEntry(id=ViewId.EXAMS, label="Examinations", icon="\U0001F4DD"),
        NavEntry(id=ViewId.LIBRARY, label="Library", icon="\U0001F4DA"),
        NavEntry(id=ViewId.USERS, label="Users", icon="\U0001F465"),
        NavEntry(id=ViewId.ANALYTICS, label="Analytics", icon="\U0001F4CA"),
    ),
    Role.STUDENT: (
        _DASHBOARD,
        NavEntry(id=ViewId.FEES, label="My Fees", icon="₹"),
        NavEntry(id=ViewId.HOSTEL, label="My Room", icon="\U0001F3E2"),
        NavEntry(id=ViewId.EXAMS, label="Results", icon="\U0001F4DD"),
        NavEntry(id=ViewId.ATTENDANCE, label="Attendance", icon="\U0001F4C5"),
        NavEntry(id=ViewId.LIBRARY, label="Library", icon="\U0001F4DA"),
    ),
    Role.FACULTY: (
        _DASHBOARD,
        NavEntry(id=ViewId.EXAMS, label="Examinations", icon="\U0001F4DD"),
        NavEntry(id=ViewId.STUDENTS, label="Students", icon="\U0001F465"),
    ),
    Role.WARDEN: (
        _DASHBOARD,
        NavEntry(id=ViewId.HOSTEL, label="Hostel Management", icon="\U0001F3E2"),
        NavEntry(id=ViewId.STUDENTS, label="Students", icon="\U0001F465"),
    ),
    Role.LIBRARIAN: (
        _DASHBOARD,
        NavEntry(id=ViewId.LIBRARY, label="Library Management", icon="\U0001F4DA"),
        NavEntry(id=ViewId.STUDENTS, label="Students", icon="\U0001F465"),
    ),
}

DEFAULT_VIEWS: Final[dict[Role, ViewId]] = {
    Role.ADMIN: ViewId.ANALYTICS,
    Role.STUDENT: ViewId.FEES,
    Role.FACULTY: ViewId.EXAMS,
    Role.WARDEN: ViewId.HOSTEL,
    Role.LIBRARIAN: ViewId.LIBRARY_DASHBOARD,
}

FALLBACK_NAVIGATION: Final[tuple[NavEntry, ...]] = (_DASHBOARD,)
FALLBACK_VIEW: Final[ViewId] = ViewId.DASHBOARD


def _check_tables() -> None:
    for table_name, table in (("NAVIGATION", NAVIGATION), ("DEFAULT_VIEWS", DEFAULT_VIEWS)):
        missing = [role for role in Role if role not in table]
        if missing:
            raise RuntimeError(f"{table_name} has no entry for: {', '.join(missing)}")


_check_tables()


def coerce_role(value: Union[Role, str, None]) -> Optional[Role]:
    """Return the ``Role`` for *value*, or ``None`` if it names no role."""
    if value is None or isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def navigation_for(role: Union[Role, str, None]) -> tuple[NavEntry, ...]:
    resolved = coerce_role(role)
    if resolved is None:
        return FALLBACK_NAVIGATION
    return NAVIGATION[resolved]


def default_view_for(role: Union[Role, str, None]) -> ViewId:
    resolved = coerce_role(role)
    if resolved is None:
        return FALLBACK_VIEW
    return DEFAULT_VIEWS[resolved]


def uses_full_page(role: Union[Role, str, None]) -> bool:
    """Librarians get a single full-page view with no sidebar."""
    return coerce_role(role) == Role.LIBRARIAN


def resolve_view(role: Union[Role, str, None], selected: Union[ViewId, str, None]) -> ViewId:
    """Return the view to render for *role* when *selected* is the active tab.

    Never raises.
    """
    resolved = coerce_role(role)
    if resolved == Role.LIBRARIAN:
        return ViewId.LIBRARY_DASHBOARD
    if resolved is None or selected is None:
        return FALLBACK_VIEW

    try:
        view = ViewId(selected)
    except ValueError:
        return FALLBACK_VIEW

    if any(entry.id == view for entry in NAVIGATION[resolved]):
        return view
    return FALLBACK_VIEW


class ViewRouter:
    """Tracks the selected tab for one shell.

    The default view is chosen once, when a user appears after none
    was signed in, and forgotten again on sign-out.  Re-rendering with
    the same user does not reset the selection.
    """

    def __init__(self) -> None:
        self._role: Optional[Role] = None
        self._user_id: Optional[str] = None
        self._selected: Optional[ViewId] = None

    def on_session_changed(self, snapshot: SessionSnapshot) -> bool:
        """Update from a session snapshot.  Returns ``True`` when the
        selection was (re)initialised or cleared."""
        user = snapshot.user
        if user is None:
            if self._user_id is None:
                return False
            self._role = None
            self._user_id = None
            self._selected = None
            return True

        if user.id == self._user_id:
            return False

        self._user_id = user.id
        self._role = coerce_role(user.role)
        self._selected = default_view_for(self._role)
        return True

    def select(self, view_id: Union[ViewId, str]) -> ViewId:
        """Record *view_id* as the active tab; returns the view to render."""
        try:
            self._selected = ViewId(view_id)
        except ValueError:
            self._selected = None
        return self.active_view

    @property
    def selected(self) -> Optional[ViewId]:
        return self._selected

    @property
    def role(self) -> Optional[Role]:
        return self._role

    @property
    def active_view(self) -> ViewId:
        return resolve_view(self._role, self._selected)

    @property
    def navigation(self) -> tuple[NavEntry, ...]:
        return navigation_for(self._role)

    @property
    def full_page(self) -> bool:
        return uses_full_page(self._role)
