from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.validators import require_iso_date, require_non_empty, require_non_negative_int, require_status
from ..core.enums import AttendanceStatus
from ..subjects.model import payload_id


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: attendance of one subject on one date.

    At most one record exists per (date, subject_id).
    """

    record_id: str
    date: str
    subject_id: str
    status: AttendanceStatus
    subject_name: str = ""

    @property
    def key(self) -> tuple[str, str]:
        return (self.date, self.subject_id)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AttendanceRecord":
        status = payload.get("status")
        if status is None and "attended" in payload:
            status = AttendanceStatus.PRESENT if payload["attended"] else AttendanceStatus.ABSENT
        return cls(
            record_id=payload_id(payload),
            date=require_iso_date(str(payload.get("date") or "")[:10], "Date"),
            subject_id=str(payload.get("subjectId") or ""),
            status=require_status(status),
            subject_name=payload.get("subjectName") or "",
        )


@dataclass(frozen=True)
class AttendanceMark:
    """Request to mark a subject present/absent on a date."""

    date: str
    subject_id: str
    status: AttendanceStatus

    def validated(self) -> "AttendanceMark":
        return AttendanceMark(
            date=require_iso_date(self.date, "Date"),
            subject_id=require_non_empty(self.subject_id, "Subject"),
            status=require_status(self.status),
        )

    def to_payload(self, *, subject_name: str) -> dict:
        return {
            "date": self.date,
            "subjectId": self.subject_id,
            "subjectName": subject_name,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class SubjectCounters:
    """Updated lecture counters the backend returns after a mark."""

    subject_id: str
    total_lectures: int
    attended_lectures: int
    absent_lectures: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SubjectCounters":
        absent = payload.get("absentLectures")
        return cls(
            subject_id=payload_id(payload),
            total_lectures=require_non_negative_int(payload.get("totalLectures", 0), "Total lectures"),
            attended_lectures=require_non_negative_int(payload.get("attendedLectures", 0), "Attended lectures"),
            absent_lectures=None if absent is None else require_non_negative_int(absent, "Absent lectures"),
        )


@dataclass(frozen=True)
class MarkResult:
    record: AttendanceRecord
    counters: Optional[SubjectCounters] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "MarkResult":
        subject = payload.get("subject")
        return cls(
            record=AttendanceRecord.from_payload(payload["attendance"]),
            counters=SubjectCounters.from_payload(subject) if subject else None,
        )
