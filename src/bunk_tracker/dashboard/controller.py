from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date, today_local, weekday_of
from ..common.http import error_response, ok
from ..core.exceptions import AuthenticationError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _session_store():
        if container.coordinator is None:
            raise AuthenticationError("No active session")
        return container.coordinator.store

    def _date_arg():
        value = request.args.get("date")
        if not value:
            return today_local()
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError("date must be YYYY-MM-DD")

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    def dashboard():
        try:
            summary = container.dashboard_service.summarize(_session_store().snapshot, today=_date_arg())
            return ok({"dashboard": summary.to_dict()})
        except Exception as e:
            return error_response(e)

    @app.route("/api/daily-attendance", methods=["GET"], endpoint="daily_attendance")
    def daily_attendance():
        """Classes scheduled on the given date with what has been marked so far."""
        try:
            store = _session_store()
            day = _date_arg()
            date_s = day.isoformat()
            classes = [
                {
                    "entryId": entry.entry_id,
                    "subjectId": entry.subject_id,
                    "subjectName": entry.subject_name,
                    "startTime": entry.start_time,
                    "endTime": entry.end_time,
                    "status": getattr(store.attendance_status(date_s, entry.subject_id), "value", None),
                }
                for entry in store.classes_for_day(weekday_of(day))
            ]
            return ok({"date": date_s, "day": weekday_of(day).value, "classes": classes})
        except Exception as e:
            return error_response(e)
