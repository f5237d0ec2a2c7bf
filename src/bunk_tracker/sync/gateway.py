from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

from ..attendance.model import AttendanceRecord, MarkResult
from ..subjects.model import Subject
from ..timetable.model import TimetableEntry
from ..users.model import UserProfile
from .credentials import Credential


class BackendGateway(Protocol):
    """Interface of the remote backend the client mirrors.

    Note (DIP): the coordinator depends on this interface, not on a concrete
    transport. Every mutation takes a wire payload and returns the confirmed
    entity. Implementations raise RemoteFailure / NotFoundError /
    StaleSessionError from core.exceptions.
    """

    async def login(self, email: str, password: str) -> Credential:
        raise NotImplementedError

    async def logout(self) -> None:
        raise NotImplementedError

    async def get_profile(self) -> UserProfile:
        raise NotImplementedError

    async def update_profile(self, patch: Mapping[str, Any]) -> UserProfile:
        raise NotImplementedError

    async def list_subjects(self) -> Sequence[Subject]:
        raise NotImplementedError

    async def create_subject(self, payload: Mapping[str, Any]) -> Subject:
        raise NotImplementedError

    async def update_subject(self, subject_id: str, patch: Mapping[str, Any]) -> Subject:
        raise NotImplementedError

    async def delete_subject(self, subject_id: str) -> None:
        """Deletes the subject; the backend cascades to timetable and attendance."""

        raise NotImplementedError

    async def list_timetable(self) -> Sequence[TimetableEntry]:
        raise NotImplementedError

    async def create_timetable_entry(self, payload: Mapping[str, Any]) -> TimetableEntry:
        raise NotImplementedError

    async def update_timetable_entry(self, entry_id: str, patch: Mapping[str, Any]) -> TimetableEntry:
        raise NotImplementedError

    async def delete_timetable_entry(self, entry_id: str) -> None:
        raise NotImplementedError

    async def list_attendance(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    async def mark_attendance(self, payload: Mapping[str, Any]) -> MarkResult:
        """Create or replace the record for (date, subject).

        The result may carry the subject's updated lecture counters.
        """

        raise NotImplementedError
