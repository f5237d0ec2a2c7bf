from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..attendance.calculator import percentage, risk_level, safe_bunks
from ..core.constants import DEFAULT_MINIMUM_ATTENDANCE, UNBOUNDED
from ..core.enums import AttendanceStatus, RiskLevel
from ..store.model import StoreSnapshot


@dataclass(frozen=True)
class SubjectStanding:
    subject_id: str
    name: str
    color: str
    percentage: float
    minimum_attendance: float
    safe_bunks: int
    risk: RiskLevel


@dataclass(frozen=True)
class DashboardSummary:
    calculated_attendance: float
    overall_attendance: float
    overall_minimum: float
    overall_risk: RiskLevel
    total_safe_bunks: int
    today_present: int
    today_marked: int
    subjects: list[SubjectStanding]

    def to_dict(self) -> dict:
        return {
            "calculatedAttendance": round(self.calculated_attendance, 2),
            "overallAttendance": round(self.overall_attendance, 2),
            "overallMinimumAttendance": self.overall_minimum,
            "overallRisk": self.overall_risk.value,
            "totalSafeBunks": self.total_safe_bunks,
            "todayPresent": self.today_present,
            "todayMarked": self.today_marked,
            "subjects": [
                {
                    "subjectId": s.subject_id,
                    "name": s.name,
                    "color": s.color,
                    "percentage": round(s.percentage, 2),
                    "minimumAttendance": s.minimum_attendance,
                    "safeBunks": s.safe_bunks,
                    "risk": s.risk.value,
                }
                for s in self.subjects
            ],
        }


class DashboardService:
    """Use case: overview figures for the home screen, read from a store snapshot.

    The college-reported overall attendance (when the profile has one) replaces
    the calculated average for display only; per-subject figures always use the
    subject's own counters.
    """

    def summarize(self, snapshot: StoreSnapshot, *, today: date) -> DashboardSummary:
        standings = [
            SubjectStanding(
                subject_id=s.subject_id,
                name=s.name,
                color=s.color,
                percentage=percentage(s.attended_lectures, s.total_lectures),
                minimum_attendance=s.minimum_attendance,
                safe_bunks=safe_bunks(s.attended_lectures, s.total_lectures, s.minimum_attendance),
                risk=risk_level(percentage(s.attended_lectures, s.total_lectures), s.minimum_attendance),
            )
            for s in snapshot.subjects
        ]

        calculated = sum(s.percentage for s in standings) / len(standings) if standings else 0.0
        profile = snapshot.profile
        overall = profile.display_overall_attendance(calculated) if profile else calculated
        minimum = profile.overall_minimum_attendance if profile else DEFAULT_MINIMUM_ATTENDANCE

        today_iso = today.isoformat()
        todays = [r for r in snapshot.attendance if r.date == today_iso]

        return DashboardSummary(
            calculated_attendance=calculated,
            overall_attendance=overall,
            overall_minimum=minimum,
            overall_risk=risk_level(overall, minimum),
            total_safe_bunks=self._total_safe_bunks(standings),
            today_present=sum(1 for r in todays if r.status == AttendanceStatus.PRESENT),
            today_marked=len(todays),
            subjects=standings,
        )

    @staticmethod
    def _total_safe_bunks(standings: list[SubjectStanding]) -> int:
        total = 0
        for s in standings:
            if s.safe_bunks == UNBOUNDED:
                return UNBOUNDED
            total += s.safe_bunks
        return total
