from __future__ import annotations

import asyncio
from typing import Optional

import pytest

from bunk_tracker.attendance.model import AttendanceRecord, MarkResult, SubjectCounters
from bunk_tracker.core.enums import AttendanceStatus
from bunk_tracker.core.exceptions import NotFoundError
from bunk_tracker.subjects.model import Subject
from bunk_tracker.sync.coordinator import SyncCoordinator
from bunk_tracker.sync.credentials import Credential, InMemoryCredentialStore
from bunk_tracker.timetable.model import TimetableEntry
from bunk_tracker.users.model import UserProfile


class InMemoryBackend:
    """Behaves like the REST backend: assigns ids, cascades deletes, keeps counters."""

    def __init__(self):
        self.profile = {"name": "Asha", "email": "asha@example.com", "overallMinimumAttendance": 75}
        self.subjects: dict[str, dict] = {}
        self.timetable: dict[str, dict] = {}
        self.attendance: dict[str, dict] = {}
        self.calls: list[str] = []
        self.fail_with: Optional[Exception] = None
        self.fail_only: Optional[str] = None
        self.held: set[str] = set()
        self.gate: Optional[asyncio.Event] = None
        self._next_id = 0

    def _new_id(self, prefix: str) -> str:
        self._next_id += 1
        return f"{prefix}{self._next_id}"

    async def _enter(self, op: str) -> None:
        self.calls.append(op)
        if op in self.held:
            if self.gate is None:
                self.gate = asyncio.Event()
            await self.gate.wait()
        if self.fail_with is not None and (self.fail_only is None or self.fail_only == op):
            raise self.fail_with

    def seed_subject(self, name: str, *, total: int, attended: int, minimum: float = 75) -> str:
        sid = self._new_id("s")
        self.subjects[sid] = {
            "_id": sid,
            "name": name,
            "totalLectures": total,
            "attendedLectures": attended,
            "minimumAttendance": minimum,
            "color": "#3B82F6",
        }
        return sid

    # --- gateway -----------------------------------------------------------

    async def login(self, email, password):
        await self._enter("login")
        return Credential(access_token=f"token-{email}")

    async def logout(self):
        await self._enter("logout")

    async def get_profile(self):
        await self._enter("get_profile")
        return UserProfile.from_payload(self.profile)

    async def update_profile(self, patch):
        await self._enter("update_profile")
        self.profile = {**self.profile, **patch}
        return UserProfile.from_payload(self.profile)

    async def list_subjects(self):
        await self._enter("list_subjects")
        return [Subject.from_payload(s) for s in self.subjects.values()]

    async def create_subject(self, payload):
        await self._enter("create_subject")
        sid = self._new_id("s")
        self.subjects[sid] = {**payload, "_id": sid}
        return Subject.from_payload(self.subjects[sid])

    async def update_subject(self, subject_id, patch):
        await self._enter("update_subject")
        if subject_id not in self.subjects:
            raise NotFoundError("Subject not found")
        self.subjects[subject_id] = {**self.subjects[subject_id], **patch}
        return Subject.from_payload(self.subjects[subject_id])

    async def delete_subject(self, subject_id):
        await self._enter("delete_subject")
        if subject_id not in self.subjects:
            raise NotFoundError("Subject not found")
        del self.subjects[subject_id]
        self.timetable = {k: v for k, v in self.timetable.items() if v["subjectId"] != subject_id}
        self.attendance = {k: v for k, v in self.attendance.items() if v["subjectId"] != subject_id}

    async def list_timetable(self):
        await self._enter("list_timetable")
        return [TimetableEntry.from_payload(t) for t in self.timetable.values()]

    async def create_timetable_entry(self, payload):
        await self._enter("create_timetable_entry")
        tid = self._new_id("t")
        self.timetable[tid] = {**payload, "id": tid}
        return TimetableEntry.from_payload(self.timetable[tid])

    async def update_timetable_entry(self, entry_id, patch):
        await self._enter("update_timetable_entry")
        if entry_id not in self.timetable:
            raise NotFoundError("Entry not found")
        self.timetable[entry_id] = {**self.timetable[entry_id], **patch}
        return TimetableEntry.from_payload(self.timetable[entry_id])

    async def delete_timetable_entry(self, entry_id):
        await self._enter("delete_timetable_entry")
        self.timetable.pop(entry_id, None)

    async def list_attendance(self):
        await self._enter("list_attendance")
        return [AttendanceRecord.from_payload(a) for a in self.attendance.values()]

    async def mark_attendance(self, payload):
        await self._enter("mark_attendance")
        subject = self.subjects[payload["subjectId"]]
        present = payload["status"] == AttendanceStatus.PRESENT.value

        existing = next(
            (a for a in self.attendance.values() if (a["date"], a["subjectId"]) == (payload["date"], payload["subjectId"])),
            None,
        )
        if existing is None:
            aid = self._new_id("a")
            self.attendance[aid] = {**payload, "_id": aid}
            subject["totalLectures"] += 1
            subject["attendedLectures"] += 1 if present else 0
            record = self.attendance[aid]
        else:
            was_present = existing["status"] == AttendanceStatus.PRESENT.value
            existing.update(payload)
            subject["attendedLectures"] += int(present) - int(was_present)
            record = existing

        counters = {
            "id": payload["subjectId"],
            "totalLectures": subject["totalLectures"],
            "attendedLectures": subject["attendedLectures"],
            "absentLectures": subject["totalLectures"] - subject["attendedLectures"],
        }
        return MarkResult(
            record=AttendanceRecord.from_payload(record),
            counters=SubjectCounters.from_payload(counters),
        )


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def credentials() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def coordinator(backend, credentials) -> SyncCoordinator:
    return SyncCoordinator(backend, credentials)


@pytest.fixture
def signed_in(backend, credentials, coordinator) -> SyncCoordinator:
    backend.seed_subject("Maths", total=40, attended=30)
    backend.seed_subject("Physics", total=20, attended=19)
    asyncio.run(coordinator.login("asha@example.com", "secret"))
    return coordinator
