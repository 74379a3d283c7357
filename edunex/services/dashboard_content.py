"""
Dashboard Content.

Static, role-specific content for the landing dashboard: greeting,
stat cards, recent activity, quick actions and the overview panel.
Pure data; the view only lays it out.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel

from edunex.models.enums import Role

ChangeType = Literal["positive", "negative", "neutral"]


class StatCard(BaseModel):
    title: str
    value: str
    icon: str
    color: str
    change: Optional[str] = None
    change_type: ChangeType = "neutral"

    model_config = {"frozen": True}


class Activity(BaseModel):
    icon: str
    text: str
    time: str

    model_config = {"frozen": True}


class QuickAction(BaseModel):
    icon: str
    label: str

    model_config = {"frozen": True}


# Glyphs stand in for the web icon set.
_USERS = "\U0001F465"
_MONEY = "₹"
_BUILDING = "\U0001F3E2"
_BOOK = "\U0001F4D6"
_TREND = "\U0001F4C8"
_ALERT = "⚠"
_CALENDAR = "\U0001F4C5"
_BELL = "\U0001F514"
_CLOCK = "\U0001F552"

_BLUE = "#3B82F6"
_GREEN = "#22C55E"
_PURPLE = "#A855F7"
_ORANGE = "#F97316"
_RED = "#EF4444"


_STATS: dict[Role, tuple[StatCard, ...]] = {
    Role.ADMIN: (
        StatCard(title="Total Students", value="1,247", change="+5.2%",
                 change_type="positive", icon=_USERS, color=_BLUE),
        StatCard(title="Fee Collection", value="₹12.4L", change="+12.8%",
                 change_type="positive", icon=_MONEY, color=_GREEN),
        StatCard(title="Hostel Occupancy", value="89%", change="+2.1%",
                 change_type="positive", icon=_BUILDING, color=_PURPLE),
        StatCard(title="Library Books", value="15,678", change="+234",
                 change_type="positive", icon=_BOOK, color=_ORANGE),
    ),
    Role.STUDENT: (
        StatCard(title="Current CGPA", value="8.4", icon=_BOOK, color=_BLUE),
        StatCard(title="Pending Fees", value="₹2,500", icon=_MONEY, color=_RED),
        StatCard(title="Books Issued", value="3", icon=_BOOK, color=_GREEN),
        StatCard(title="Attendance", value="92%", change_type="positive",
                 icon=_USERS, color=_PURPLE),
    ),
    Role.FACULTY: (
        StatCard(title="Total Students", value="156", icon=_USERS, color=_BLUE),
        StatCard(title="Pending Evaluations", value="23", icon=_ALERT, color=_ORANGE),
        StatCard(title="Classes This Week", value="18", icon=_BOOK, color=_GREEN),
        StatCard(title="Average Attendance", value="87%", icon=_TREND, color=_PURPLE),
    ),
}

_DEFAULT_STATS: tuple[StatCard, ...] = (
    StatCard(title="Active Users", value="1,247", icon=_USERS, color=_BLUE),
    StatCard(title="System Health", value="99.9%", change_type="positive",
             icon=_TREND, color=_GREEN),
)

_ACTIVITIES: dict[Role, tuple[Activity, ...]] = {
    Role.ADMIN: (
        Activity(icon=_USERS, text="25 new admissions this week", time="2 hours ago"),
        Activity(icon=_BOOK, text="Fee reminder sent to 156 students", time="4 hours ago"),
        Activity(icon=_CALENDAR, text="Exam schedule published", time="1 day ago"),
        Activity(icon=_TREND, text="Monthly report generated", time="2 days ago"),
    ),
    Role.STUDENT: (
        Activity(icon=_BOOK, text="Assignment submitted for CS301", time="1 hour ago"),
        Activity(icon=_CALENDAR, text="Upcoming exam: Database Systems", time="3 days"),
        Activity(icon=_BELL, text="Fee payment reminder", time="1 day ago"),
        Activity(icon=_CLOCK, text="Library book due tomorrow", time="1 day left"),
    ),
}

_DEFAULT_ACTIVITIES: tuple[Activity, ...] = (
    Activity(icon=_BELL, text="System maintenance scheduled", time="2 hours ago"),
    Activity(icon=_USERS, text="New user registrations", time="1 day ago"),
)

_QUICK_ACTIONS: dict[Role, tuple[QuickAction, ...]] = {
    Role.ADMIN: (
        QuickAction(icon=_USERS, label="View Students"),
        QuickAction(icon=_BOOK, label="Fee Reports"),
    ),
    Role.STUDENT: (
        QuickAction(icon=_BOOK, label="Pay Fees"),
        QuickAction(icon=_CALENDAR, label="View Results"),
    ),
}


def greeting(hour: int, name: str) -> str:
    """``"Good morning, <name>!"`` before 12, afternoon before 17, else evening."""
    if hour < 12:
        salutation = "Good morning"
    elif hour < 17:
        salutation = "Good afternoon"
    else:
        salutation = "Good evening"
    return f"{salutation}, {name}!"


def stats_for_role(role: Optional[Role]) -> tuple[StatCard, ...]:
    if role is None:
        return _DEFAULT_STATS
    return _STATS.get(role, _DEFAULT_STATS)


def recent_activities_for_role(role: Optional[Role]) -> tuple[Activity, ...]:
    if role is None:
        return _DEFAULT_ACTIVITIES
    return _ACTIVITIES.get(role, _DEFAULT_ACTIVITIES)


def quick_actions_for_role(role: Optional[Role]) -> tuple[QuickAction, ...]:
    """Shortcut buttons; only admins and students have any."""
    if role is None:
        return ()
    return _QUICK_ACTIONS.get(role, ())


def overview_panel_for_role(role: Optional[Role]) -> tuple[str, str]:
    """Title and body of the panel below the activity feed."""
    if role == Role.STUDENT:
        return (
            "Upcoming Schedule",
            "Your class schedule and exam dates will appear here",
        )
    return (
        "System Overview",
        "Analytics charts and system metrics will be displayed here",
    )
