from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..common.validators import require_hhmm, require_non_empty, require_time_range, require_weekday
from ..core.enums import Weekday
from ..core.exceptions import ValidationError
from ..subjects.model import payload_id


@dataclass(frozen=True)
class TimetableEntry:
    """Domain entity: one weekly slot of a subject.

    subject_name is a display copy taken from the subject list when the entry
    was created. Times are zero-padded "HH:MM" strings, so plain string
    comparison orders them correctly.
    """

    entry_id: str
    day: Weekday
    subject_id: str
    subject_name: str
    start_time: str
    end_time: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TimetableEntry":
        return cls(
            entry_id=payload_id(payload),
            day=require_weekday(payload.get("day")),
            subject_id=str(payload.get("subjectId") or ""),
            subject_name=payload.get("subjectName") or "",
            start_time=require_hhmm(payload.get("startTime"), "Start time"),
            end_time=require_hhmm(payload.get("endTime"), "End time"),
        )


@dataclass(frozen=True)
class TimetableDraft:
    day: Weekday
    subject_id: str
    start_time: str
    end_time: str

    def validated(self) -> "TimetableDraft":
        start = require_hhmm(self.start_time, "Start time")
        end = require_hhmm(self.end_time, "End time")
        require_time_range(start, end)
        return TimetableDraft(
            day=require_weekday(self.day),
            subject_id=require_non_empty(self.subject_id, "Subject"),
            start_time=start,
            end_time=end,
        )

    def to_payload(self, *, subject_name: str) -> dict:
        return {
            "day": self.day.value,
            "subjectId": self.subject_id,
            "subjectName": subject_name,
            "startTime": self.start_time,
            "endTime": self.end_time,
        }


TIMETABLE_PATCH_FIELDS = {
    "day": "day",
    "subject_id": "subjectId",
    "start_time": "startTime",
    "end_time": "endTime",
}


def validate_timetable_patch(current: TimetableEntry, patch: Mapping[str, Any]) -> dict:
    unknown = set(patch) - set(TIMETABLE_PATCH_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown timetable fields: {', '.join(sorted(unknown))}")
    if not patch:
        raise ValidationError("Nothing to update")

    merged = TimetableDraft(
        day=patch.get("day", current.day),
        subject_id=patch.get("subject_id", current.subject_id),
        start_time=patch.get("start_time", current.start_time),
        end_time=patch.get("end_time", current.end_time),
    ).validated()

    out = {}
    for key in patch:
        value = getattr(merged, key)
        out[TIMETABLE_PATCH_FIELDS[key]] = value.value if isinstance(value, Weekday) else value
    return out
