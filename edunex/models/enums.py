"""
Shared Enumerations for EduNex Models.

``StrEnum`` values compare equal to their string equivalents, so a
profile row's ``"warden"`` and ``Role.WARDEN`` are interchangeable.
"""

from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    """Closed set of roles.  Derived from the email domain at profile
    creation and never edited through the client."""

    STUDENT = "student"
    FACULTY = "faculty"
    WARDEN = "warden"
    LIBRARIAN = "librarian"
    ADMIN = "admin"


class ViewId(StrEnum):
    """Every view the shell knows how to render."""

    DASHBOARD = "dashboard"
    ADMISSIONS = "admissions"
    FEES = "fees"
    HOSTEL = "hostel"
    EXAMS = "exams"
    ATTENDANCE = "attendance"
    LIBRARY = "library"
    LIBRARY_DASHBOARD = "library-dashboard"
    STUDENTS = "students"
    USERS = "users"
    ANALYTICS = "analytics"


class AuthState(StrEnum):
    """States of the session/profile lifecycle."""

    INITIALIZING = "initializing"
    RESOLVING_PROFILE = "resolving_profile"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class NotificationLevel(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"
