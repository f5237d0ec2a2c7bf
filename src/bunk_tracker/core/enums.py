from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Status of a single lecture as marked by the student."""

    PRESENT = "present"
    ABSENT = "absent"


class Weekday(str, Enum):
    """Day names used by timetable entries (same order as date.weekday())."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class RiskLevel(str, Enum):
    SAFE = "Safe"
    RISK = "Risk"
    DANGER = "Danger"


class SessionState(str, Enum):
    """Lifecycle of a signed-in session."""

    UNAUTHENTICATED = "UNAUTHENTICATED"
    RESTORING = "RESTORING"
    READY = "READY"
