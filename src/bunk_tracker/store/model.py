from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..subjects.model import Subject
from ..timetable.model import TimetableEntry
from ..users.model import UserProfile


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable view of everything the client mirrors from the backend."""

    profile: Optional[UserProfile] = None
    subjects: tuple[Subject, ...] = ()
    timetable: tuple[TimetableEntry, ...] = ()
    attendance: tuple[AttendanceRecord, ...] = ()


EMPTY_SNAPSHOT = StoreSnapshot()
