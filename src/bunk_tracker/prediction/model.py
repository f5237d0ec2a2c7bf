from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PredictionResult:
    """Verdict for skipping the next lecture of one subject."""

    subject_id: str
    subject_name: str
    can_bunk: bool
    current_attendance: float
    after_bunk_attendance: float
    minimum_required: float
    safe_bunks_remaining: int
    classes_needed_to_recover: int
    recommendation: str

    def to_dict(self) -> dict:
        return {
            "subjectId": self.subject_id,
            "subjectName": self.subject_name,
            "canBunk": self.can_bunk,
            "currentAttendance": round(self.current_attendance, 2),
            "afterBunkAttendance": round(self.after_bunk_attendance, 2),
            "minimumRequired": self.minimum_required,
            "safeBunksRemaining": self.safe_bunks_remaining,
            "classesNeededToRecover": self.classes_needed_to_recover,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class SimulationResult:
    """What happens after skipping several lectures in a row."""

    subject_id: str
    subject_name: str
    number_of_bunks: int
    current_attendance: float
    after_bunks_attendance: float
    minimum_required: float
    stays_above_minimum: bool
    classes_needed_to_recover: int

    def to_dict(self) -> dict:
        return {
            "subjectId": self.subject_id,
            "subjectName": self.subject_name,
            "numberOfBunks": self.number_of_bunks,
            "currentAttendance": round(self.current_attendance, 2),
            "afterBunksAttendance": round(self.after_bunks_attendance, 2),
            "minimumRequired": self.minimum_required,
            "staysAboveMinimum": self.stays_above_minimum,
            "classesNeededToRecover": self.classes_needed_to_recover,
        }
