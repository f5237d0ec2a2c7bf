from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional

from ..attendance.model import AttendanceRecord, MarkResult
from ..core.enums import AttendanceStatus, Weekday
from ..core.exceptions import NotFoundError
from ..subjects.model import Subject
from ..timetable.model import TimetableEntry
from ..users.model import UserProfile
from .model import EMPTY_SNAPSHOT, StoreSnapshot


class EntityStore:
    """Authoritative local mirror of subjects, timetable, attendance and profile.

    Only server-confirmed entities are applied. Every apply method builds a new
    StoreSnapshot from the current one and publishes it with a single
    assignment, so readers holding a snapshot never see a half-applied change.
    """

    def __init__(self, snapshot: StoreSnapshot = EMPTY_SNAPSHOT):
        self._snapshot = snapshot

    @property
    def snapshot(self) -> StoreSnapshot:
        return self._snapshot

    def _publish(self, snapshot: StoreSnapshot) -> StoreSnapshot:
        self._snapshot = snapshot
        return snapshot

    # --- reads -----------------------------------------------------------

    def find_subject(self, subject_id: str) -> Optional[Subject]:
        return next((s for s in self._snapshot.subjects if s.subject_id == subject_id), None)

    def get_subject(self, subject_id: str) -> Subject:
        subject = self.find_subject(subject_id)
        if not subject:
            raise NotFoundError(f"Subject {subject_id} not found")
        return subject

    def _require_subject(self, snap: StoreSnapshot, subject_id: str) -> None:
        # A confirmation may arrive after its subject was deleted and cascaded.
        if not any(s.subject_id == subject_id for s in snap.subjects):
            raise NotFoundError(f"Subject {subject_id} not found")

    def get_timetable_entry(self, entry_id: str) -> TimetableEntry:
        entry = next((t for t in self._snapshot.timetable if t.entry_id == entry_id), None)
        if not entry:
            raise NotFoundError(f"Timetable entry {entry_id} not found")
        return entry

    def attendance_for_date(self, date: str) -> list[AttendanceRecord]:
        return [r for r in self._snapshot.attendance if r.date == date]

    def attendance_status(self, date: str, subject_id: str) -> Optional[AttendanceStatus]:
        record = next((r for r in self._snapshot.attendance if r.key == (date, subject_id)), None)
        return record.status if record else None

    def classes_for_day(self, day: Weekday) -> list[TimetableEntry]:
        return sorted((t for t in self._snapshot.timetable if t.day == day), key=lambda t: t.start_time)

    # --- whole collections -------------------------------------------------

    def replace_all(
        self,
        *,
        profile: Optional[UserProfile],
        subjects: Iterable[Subject],
        timetable: Iterable[TimetableEntry],
        attendance: Iterable[AttendanceRecord],
    ) -> StoreSnapshot:
        return self._publish(
            StoreSnapshot(
                profile=profile,
                subjects=tuple(subjects),
                timetable=tuple(timetable),
                attendance=tuple(attendance),
            )
        )

    def clear(self) -> StoreSnapshot:
        return self._publish(EMPTY_SNAPSHOT)

    # --- subjects ----------------------------------------------------------

    def insert_subject(self, subject: Subject) -> StoreSnapshot:
        snap = self._snapshot
        return self._publish(replace(snap, subjects=snap.subjects + (subject,)))

    def replace_subject(self, subject: Subject) -> StoreSnapshot:
        snap = self._snapshot
        self.get_subject(subject.subject_id)
        subjects = tuple(subject if s.subject_id == subject.subject_id else s for s in snap.subjects)
        return self._publish(replace(snap, subjects=subjects))

    def remove_subject(self, subject_id: str) -> StoreSnapshot:
        """Remove a subject together with its timetable entries and attendance records."""
        snap = self._snapshot
        return self._publish(
            replace(
                snap,
                subjects=tuple(s for s in snap.subjects if s.subject_id != subject_id),
                timetable=tuple(t for t in snap.timetable if t.subject_id != subject_id),
                attendance=tuple(a for a in snap.attendance if a.subject_id != subject_id),
            )
        )

    # --- timetable ---------------------------------------------------------

    def insert_timetable_entry(self, entry: TimetableEntry) -> StoreSnapshot:
        snap = self._snapshot
        self._require_subject(snap, entry.subject_id)
        return self._publish(replace(snap, timetable=snap.timetable + (entry,)))

    def replace_timetable_entry(self, entry: TimetableEntry) -> StoreSnapshot:
        snap = self._snapshot
        self.get_timetable_entry(entry.entry_id)
        self._require_subject(snap, entry.subject_id)
        timetable = tuple(entry if t.entry_id == entry.entry_id else t for t in snap.timetable)
        return self._publish(replace(snap, timetable=timetable))

    def remove_timetable_entry(self, entry_id: str) -> StoreSnapshot:
        snap = self._snapshot
        return self._publish(replace(snap, timetable=tuple(t for t in snap.timetable if t.entry_id != entry_id)))

    # --- attendance --------------------------------------------------------

    def apply_mark(self, result: MarkResult) -> StoreSnapshot:
        """Upsert the record by (date, subject) and merge returned counters in one step.

        Raises NotFoundError, leaving the store untouched, if the subject is gone.
        """
        snap = self._snapshot
        record = result.record
        self._require_subject(snap, record.subject_id)

        if any(a.key == record.key for a in snap.attendance):
            attendance = tuple(record if a.key == record.key else a for a in snap.attendance)
        else:
            attendance = snap.attendance + (record,)

        subjects = snap.subjects
        counters = result.counters
        if counters:
            subjects = tuple(
                s.with_counters(
                    total_lectures=counters.total_lectures,
                    attended_lectures=counters.attended_lectures,
                    absent_lectures=counters.absent_lectures,
                )
                if s.subject_id == counters.subject_id
                else s
                for s in subjects
            )

        return self._publish(replace(snap, attendance=attendance, subjects=subjects))

    # --- profile -----------------------------------------------------------

    def set_profile(self, profile: UserProfile) -> StoreSnapshot:
        return self._publish(replace(self._snapshot, profile=profile))
