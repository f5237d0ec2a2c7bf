from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Iterable, Sequence

from ..attendance.calculator import (
    attendance_after_bunks,
    meets_minimum,
    percentage,
    recovery_classes_needed,
    safe_bunks,
)
from ..core.constants import UNBOUNDED
from ..core.exceptions import ValidationError
from ..subjects.model import Subject
from .model import PredictionResult, SimulationResult

logger = logging.getLogger(__name__)


def build_recommendation(result: PredictionResult) -> str:
    """Human readable advice, derived only from the figures in the result."""
    if result.can_bunk:
        if result.safe_bunks_remaining == UNBOUNDED:
            return (
                f"You can bunk this lecture. With a {result.minimum_required:g}% minimum "
                f"there is no limit on safe bunks."
            )
        return (
            f"You can bunk this lecture. Your attendance will be {result.after_bunk_attendance:.2f}% "
            f"and you have {result.safe_bunks_remaining} safe bunk(s) in total."
        )
    if result.classes_needed_to_recover == UNBOUNDED:
        return (
            f"You should NOT bunk this lecture. Attendance would drop to {result.after_bunk_attendance:.2f}% "
            f"and a {result.minimum_required:g}% minimum cannot be recovered."
        )
    return (
        f"You should NOT bunk this lecture. Attendance would drop to {result.after_bunk_attendance:.2f}%, "
        f"below the required {result.minimum_required:g}%. You would need to attend "
        f"{result.classes_needed_to_recover} consecutive class(es) to recover."
    )


class PredictionEngine:
    """Use case: decide whether skipping a lecture keeps a subject above its minimum.

    Works on Subject values only and never touches the store.
    """

    def __init__(self, *, max_workers: int = 0):
        self._max_workers = int(max_workers)

    def predict(self, subject: Subject) -> PredictionResult:
        attended = subject.attended_lectures
        total = subject.total_lectures
        minimum = subject.minimum_attendance

        after_bunk = attendance_after_bunks(attended, total, 1)
        can_bunk = meets_minimum(attended, total + 1, minimum)

        draft = PredictionResult(
            subject_id=subject.subject_id,
            subject_name=subject.name,
            can_bunk=can_bunk,
            current_attendance=percentage(attended, total),
            after_bunk_attendance=after_bunk,
            minimum_required=minimum,
            safe_bunks_remaining=safe_bunks(attended, total, minimum),
            classes_needed_to_recover=0 if can_bunk else recovery_classes_needed(attended, total, minimum),
            recommendation="",
        )
        return replace(draft, recommendation=build_recommendation(draft))

    def predict_all(self, subjects: Iterable[Subject]) -> list[PredictionResult]:
        items: Sequence[Subject] = list(subjects)
        if self._max_workers <= 1 or len(items) <= 1:
            return [self.predict(s) for s in items]

        logger.debug("Predicting %d subjects with %d workers", len(items), self._max_workers)
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            return list(pool.map(self.predict, items))

    def simulate(self, subject: Subject, number_of_bunks: int) -> SimulationResult:
        try:
            bunks = int(number_of_bunks)
        except (TypeError, ValueError):
            raise ValidationError("Number of bunks must be a whole number")
        if bunks < 1:
            raise ValidationError("Number of bunks must be at least 1")

        attended = subject.attended_lectures
        total = subject.total_lectures
        minimum = subject.minimum_attendance
        after = attendance_after_bunks(attended, total, bunks)

        return SimulationResult(
            subject_id=subject.subject_id,
            subject_name=subject.name,
            number_of_bunks=bunks,
            current_attendance=percentage(attended, total),
            after_bunks_attendance=after,
            minimum_required=minimum,
            stays_above_minimum=meets_minimum(attended, total + bunks, minimum),
            classes_needed_to_recover=recovery_classes_needed(attended, total, minimum, bunks),
        )
