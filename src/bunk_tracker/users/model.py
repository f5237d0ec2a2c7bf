from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.validators import optional_percentage, require_iso_date, require_percentage
from ..core.constants import DEFAULT_MINIMUM_ATTENDANCE
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class UserProfile:
    """The signed-in student.

    current_overall_attendance is the figure reported by the college; when set it
    is displayed instead of the average computed from subjects.
    """

    name: str
    email: str
    college: Optional[str] = None
    semester_start: Optional[str] = None
    semester_end: Optional[str] = None
    current_overall_attendance: Optional[float] = None
    overall_minimum_attendance: float = DEFAULT_MINIMUM_ATTENDANCE

    def display_overall_attendance(self, calculated: float) -> float:
        if self.current_overall_attendance is not None:
            return self.current_overall_attendance
        return calculated

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "UserProfile":
        start = payload.get("semesterStart")
        end = payload.get("semesterEnd")
        return cls(
            name=payload.get("name") or "",
            email=payload.get("email") or "",
            college=payload.get("college"),
            semester_start=require_iso_date(str(start)[:10], "Semester start") if start else None,
            semester_end=require_iso_date(str(end)[:10], "Semester end") if end else None,
            current_overall_attendance=optional_percentage(
                payload.get("currentOverallAttendance"), "Current overall attendance"
            ),
            overall_minimum_attendance=require_percentage(
                payload.get("overallMinimumAttendance", DEFAULT_MINIMUM_ATTENDANCE), "Overall minimum attendance"
            ),
        )


PROFILE_PATCH_FIELDS = {
    "name": "name",
    "email": "email",
    "college": "college",
    "semester_start": "semesterStart",
    "semester_end": "semesterEnd",
    "current_overall_attendance": "currentOverallAttendance",
    "overall_minimum_attendance": "overallMinimumAttendance",
}


def validate_profile_patch(current: Optional[UserProfile], patch: Mapping[str, Any]) -> dict:
    unknown = set(patch) - set(PROFILE_PATCH_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown profile fields: {', '.join(sorted(unknown))}")

    clean = dict(patch)
    if "current_overall_attendance" in clean:
        clean["current_overall_attendance"] = optional_percentage(
            clean["current_overall_attendance"], "Current overall attendance"
        )
    if "overall_minimum_attendance" in clean:
        clean["overall_minimum_attendance"] = require_percentage(
            clean["overall_minimum_attendance"], "Overall minimum attendance"
        )
    for key, label in (("semester_start", "Semester start"), ("semester_end", "Semester end")):
        if clean.get(key):
            clean[key] = require_iso_date(clean[key], label)

    start = clean.get("semester_start", current.semester_start if current else None)
    end = clean.get("semester_end", current.semester_end if current else None)
    if start and end and start > end:
        raise ValidationError("Semester end must not be before semester start")

    return {PROFILE_PATCH_FIELDS[k]: v for k, v in clean.items()}
