from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.validators import (
    require_lecture_counts,
    require_non_empty,
    require_non_negative_int,
    require_percentage,
)
from ..core.constants import DEFAULT_MINIMUM_ATTENDANCE, DEFAULT_SUBJECT_COLOR
from ..core.exceptions import ValidationError


def payload_id(payload: Mapping[str, Any]) -> str:
    """Backend documents carry their identity as either `id` or `_id`."""
    value = payload.get("id") or payload.get("_id")
    if not value:
        raise ValidationError("Entity without identity")
    return str(value)


@dataclass(frozen=True)
class Subject:
    """Domain entity: a subject with its lecture counters.

    Invariant: 0 <= attended_lectures <= total_lectures, checked on construction
    so an inconsistent server payload is rejected instead of stored.
    """

    subject_id: str
    name: str
    total_lectures: int = 0
    attended_lectures: int = 0
    minimum_attendance: float = DEFAULT_MINIMUM_ATTENDANCE
    color: str = DEFAULT_SUBJECT_COLOR
    # absentLectures as reported by the backend; wins over the derived value.
    reported_absent: Optional[int] = None

    def __post_init__(self):
        # Frozen: normalize through object.__setattr__.
        object.__setattr__(self, "name", require_non_empty(self.name, "Subject name"))
        object.__setattr__(self, "total_lectures", require_non_negative_int(self.total_lectures, "Total lectures"))
        object.__setattr__(
            self, "attended_lectures", require_non_negative_int(self.attended_lectures, "Attended lectures")
        )
        require_lecture_counts(self.attended_lectures, self.total_lectures)
        object.__setattr__(
            self, "minimum_attendance", require_percentage(self.minimum_attendance, "Minimum attendance")
        )

    @property
    def absent_lectures(self) -> int:
        if self.reported_absent is not None:
            return self.reported_absent
        return self.total_lectures - self.attended_lectures

    def with_counters(self, *, total_lectures: int, attended_lectures: int, absent_lectures: Optional[int] = None) -> "Subject":
        return Subject(
            subject_id=self.subject_id,
            name=self.name,
            total_lectures=total_lectures,
            attended_lectures=attended_lectures,
            minimum_attendance=self.minimum_attendance,
            color=self.color,
            reported_absent=absent_lectures,
        )

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Subject":
        absent = payload.get("absentLectures")
        return cls(
            subject_id=payload_id(payload),
            name=payload.get("name") or "",
            total_lectures=require_non_negative_int(payload.get("totalLectures", 0), "Total lectures"),
            attended_lectures=require_non_negative_int(payload.get("attendedLectures", 0), "Attended lectures"),
            minimum_attendance=require_percentage(
                payload.get("minimumAttendance", DEFAULT_MINIMUM_ATTENDANCE), "Minimum attendance"
            ),
            color=payload.get("color") or DEFAULT_SUBJECT_COLOR,
            reported_absent=None if absent is None else require_non_negative_int(absent, "Absent lectures"),
        )

    def to_payload(self) -> dict:
        return {
            "id": self.subject_id,
            "name": self.name,
            "totalLectures": self.total_lectures,
            "attendedLectures": self.attended_lectures,
            "absentLectures": self.absent_lectures,
            "minimumAttendance": self.minimum_attendance,
            "color": self.color,
        }


@dataclass(frozen=True)
class SubjectDraft:
    """A subject the user wants to create; identity is assigned by the backend."""

    name: str
    total_lectures: int = 0
    attended_lectures: int = 0
    minimum_attendance: float = DEFAULT_MINIMUM_ATTENDANCE
    color: str = DEFAULT_SUBJECT_COLOR

    def validated(self) -> "SubjectDraft":
        total = require_non_negative_int(self.total_lectures, "Total lectures")
        attended = require_non_negative_int(self.attended_lectures, "Attended lectures")
        require_lecture_counts(attended, total)
        return SubjectDraft(
            name=require_non_empty(self.name, "Subject name"),
            total_lectures=total,
            attended_lectures=attended,
            minimum_attendance=require_percentage(self.minimum_attendance, "Minimum attendance"),
            color=self.color or DEFAULT_SUBJECT_COLOR,
        )

    def to_payload(self) -> dict:
        return {
            "name": self.name,
            "totalLectures": self.total_lectures,
            "attendedLectures": self.attended_lectures,
            "minimumAttendance": self.minimum_attendance,
            "color": self.color,
        }


# Patch keys accepted by update_subject, mapped to their wire names.
SUBJECT_PATCH_FIELDS = {
    "name": "name",
    "total_lectures": "totalLectures",
    "attended_lectures": "attendedLectures",
    "minimum_attendance": "minimumAttendance",
    "color": "color",
}


def validate_subject_patch(current: Subject, patch: Mapping[str, Any]) -> dict:
    """Check a partial update against the current subject.

    Returns the wire payload for the patch. The merged result has to satisfy the
    same invariants as a full subject.
    """
    unknown = set(patch) - set(SUBJECT_PATCH_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown subject fields: {', '.join(sorted(unknown))}")
    if not patch:
        raise ValidationError("Nothing to update")

    merged = {
        "subject_id": current.subject_id,
        "name": current.name,
        "total_lectures": current.total_lectures,
        "attended_lectures": current.attended_lectures,
        "minimum_attendance": current.minimum_attendance,
        "color": current.color,
    }
    merged.update(patch)
    checked = Subject(**merged)

    return {SUBJECT_PATCH_FIELDS[k]: getattr(checked, k) for k in patch}
