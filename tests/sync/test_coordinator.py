from __future__ import annotations

import asyncio

import pytest

from bunk_tracker.attendance.model import AttendanceMark
from bunk_tracker.core.enums import AttendanceStatus, SessionState, Weekday
from bunk_tracker.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    RemoteFailure,
    StaleSessionError,
    ValidationError,
)
from bunk_tracker.subjects.model import SubjectDraft
from bunk_tracker.sync.credentials import Credential
from bunk_tracker.timetable.model import TimetableDraft


def _maths_id(coordinator) -> str:
    return next(s.subject_id for s in coordinator.store.snapshot.subjects if s.name == "Maths")


def test_login_loads_all_collections(signed_in, credentials):
    assert signed_in.state == SessionState.READY
    assert credentials.load().access_token == "token-asha@example.com"

    snap = signed_in.store.snapshot
    assert snap.profile.name == "Asha"
    assert {s.name for s in snap.subjects} == {"Maths", "Physics"}


def test_restore_without_credential_stays_signed_out(coordinator, backend):
    state = asyncio.run(coordinator.restore())

    assert state == SessionState.UNAUTHENTICATED
    assert backend.calls == []
    with pytest.raises(AuthenticationError):
        coordinator.store


def test_restore_with_credential_reaches_ready(coordinator, credentials):
    credentials.save(Credential(access_token="abc"))

    assert asyncio.run(coordinator.restore()) == SessionState.READY


def test_failed_restore_clears_credential(coordinator, credentials, backend):
    credentials.save(Credential(access_token="abc"))
    backend.fail_with = ConnectionError("backend down")
    backend.fail_only = "list_timetable"

    with pytest.raises(RemoteFailure):
        asyncio.run(coordinator.restore())

    assert coordinator.state == SessionState.UNAUTHENTICATED
    assert credentials.load() is None


def test_add_subject_appends_confirmed_entity(signed_in):
    subject = asyncio.run(signed_in.add_subject(SubjectDraft(name="Chemistry", total_lectures=5, attended_lectures=5)))

    subjects = signed_in.store.snapshot.subjects
    assert subjects[-1] == subject
    assert subject.subject_id


def test_invalid_draft_never_reaches_backend(signed_in, backend):
    backend.calls.clear()

    with pytest.raises(ValidationError):
        asyncio.run(signed_in.add_subject(SubjectDraft(name="Chemistry", total_lectures=5, attended_lectures=6)))

    assert backend.calls == []


def test_update_unknown_subject_is_not_found_and_no_op(signed_in, backend):
    before = signed_in.store.snapshot
    backend.calls.clear()

    with pytest.raises(NotFoundError):
        asyncio.run(signed_in.update_subject("missing", {"name": "X"}))

    assert signed_in.store.snapshot == before
    assert backend.calls == []


def test_update_subject_replaces_with_confirmed_entity(signed_in):
    sid = _maths_id(signed_in)

    updated = asyncio.run(signed_in.update_subject(sid, {"minimum_attendance": 80}))

    assert updated.minimum_attendance == 80
    assert signed_in.store.get_subject(sid) == updated


def test_failed_mutation_leaves_store_identical(signed_in, backend):
    sid = _maths_id(signed_in)
    before = signed_in.store.snapshot
    backend.fail_with = TimeoutError("slow backend")

    with pytest.raises(RemoteFailure) as err:
        asyncio.run(signed_in.mark_attendance(AttendanceMark("2026-10-19", sid, AttendanceStatus.PRESENT)))

    assert str(err.value) == "Failed to mark attendance"
    assert signed_in.store.snapshot == before
    assert signed_in.state == SessionState.READY


def test_remote_failure_message_is_kept(signed_in, backend):
    backend.fail_with = RemoteFailure("Subject limit reached", status=400)

    with pytest.raises(RemoteFailure, match="Subject limit reached"):
        asyncio.run(signed_in.add_subject(SubjectDraft(name="Chemistry")))


def test_mark_attendance_twice_updates_in_place_and_counters(signed_in):
    sid = _maths_id(signed_in)

    asyncio.run(signed_in.mark_attendance(AttendanceMark("2026-10-19", sid, AttendanceStatus.PRESENT)))
    asyncio.run(signed_in.mark_attendance(AttendanceMark("2026-10-19", sid, "absent")))

    snap = signed_in.store.snapshot
    records = [r for r in snap.attendance if r.key == ("2026-10-19", sid)]
    assert len(records) == 1
    assert records[0].status == AttendanceStatus.ABSENT
    assert records[0].subject_name == "Maths"

    maths = signed_in.store.get_subject(sid)
    assert (maths.total_lectures, maths.attended_lectures, maths.absent_lectures) == (41, 30, 11)


def test_delete_subject_cascades_locally(signed_in):
    sid = _maths_id(signed_in)
    asyncio.run(
        signed_in.add_timetable_entry(
            TimetableDraft(day=Weekday.MONDAY, subject_id=sid, start_time="09:00", end_time="10:00")
        )
    )
    asyncio.run(signed_in.mark_attendance(AttendanceMark("2026-10-19", sid, AttendanceStatus.PRESENT)))

    asyncio.run(signed_in.delete_subject(sid))

    snap = signed_in.store.snapshot
    assert all(s.subject_id != sid for s in snap.subjects)
    assert all(t.subject_id != sid for t in snap.timetable)
    assert all(a.subject_id != sid for a in snap.attendance)


def test_timetable_entry_carries_subject_name(signed_in):
    sid = _maths_id(signed_in)

    entry = asyncio.run(
        signed_in.add_timetable_entry(TimetableDraft(day="Friday", subject_id=sid, start_time="14:00", end_time="15:30"))
    )
    moved = asyncio.run(signed_in.update_timetable_entry(entry.entry_id, {"start_time": "13:00"}))

    assert entry.subject_name == "Maths"
    assert moved.start_time == "13:00"
    assert signed_in.store.classes_for_day(Weekday.FRIDAY) == [moved]

    asyncio.run(signed_in.delete_timetable_entry(entry.entry_id))
    assert signed_in.store.snapshot.timetable == ()


def test_timetable_entry_for_unknown_subject_is_rejected(signed_in, backend):
    backend.calls.clear()
    with pytest.raises(NotFoundError):
        asyncio.run(
            signed_in.add_timetable_entry(TimetableDraft(day="Friday", subject_id="nope", start_time="09:00", end_time="10:00"))
        )
    assert backend.calls == []


def test_update_profile(signed_in):
    profile = asyncio.run(signed_in.update_profile({"current_overall_attendance": 82}))

    assert profile.current_overall_attendance == 82
    assert signed_in.store.snapshot.profile == profile


def test_expired_session_signs_out(signed_in, backend, credentials):
    backend.fail_with = StaleSessionError("Token expired")

    with pytest.raises(StaleSessionError):
        asyncio.run(signed_in.add_subject(SubjectDraft(name="Chemistry")))

    assert signed_in.state == SessionState.UNAUTHENTICATED
    assert credentials.load() is None


def test_logout_is_unconditional(signed_in, backend, credentials):
    backend.fail_with = ConnectionError("offline")

    asyncio.run(signed_in.logout())

    assert signed_in.state == SessionState.UNAUTHENTICATED
    assert credentials.load() is None
    with pytest.raises(AuthenticationError):
        signed_in.store


def test_response_after_logout_is_discarded(signed_in, backend):
    sid = _maths_id(signed_in)
    store = signed_in.store
    backend.held = {"mark_attendance"}

    async def scenario():
        pending = asyncio.create_task(
            signed_in.mark_attendance(AttendanceMark("2026-10-19", sid, AttendanceStatus.PRESENT))
        )
        await asyncio.sleep(0)
        generation = signed_in.generation
        await signed_in.logout()
        assert signed_in.generation != generation
        backend.gate.set()
        await pending

    with pytest.raises(StaleSessionError):
        asyncio.run(scenario())

    assert store.snapshot.attendance == ()


def test_refresh_replaces_collections(signed_in, backend):
    backend.seed_subject("Biology", total=3, attended=3)

    asyncio.run(signed_in.refresh())
    asyncio.run(signed_in.refresh())

    names = [s.name for s in signed_in.store.snapshot.subjects]
    assert names.count("Biology") == 1


def test_local_prediction_uses_store(signed_in):
    sid = _maths_id(signed_in)

    result = signed_in.predict(sid)
    assert result.can_bunk is False
    assert result.classes_needed_to_recover == 3

    assert len(signed_in.predict_all()) == 2
    assert signed_in.simulate(sid, 2).number_of_bunks == 2


def test_mark_confirmed_after_subject_delete_leaves_no_orphan(signed_in, backend, monkeypatch):
    sid = _maths_id(signed_in)
    store = signed_in.store
    confirm = backend.mark_attendance

    async def scenario():
        released = asyncio.Event()

        async def slow_confirmation(payload):
            result = await confirm(payload)
            await released.wait()
            return result

        monkeypatch.setattr(backend, "mark_attendance", slow_confirmation)
        pending = asyncio.create_task(
            signed_in.mark_attendance(AttendanceMark("2026-10-19", sid, AttendanceStatus.PRESENT))
        )
        await asyncio.sleep(0)
        await signed_in.delete_subject(sid)
        released.set()
        await pending

    with pytest.raises(NotFoundError):
        asyncio.run(scenario())

    snap = store.snapshot
    assert all(s.subject_id != sid for s in snap.subjects)
    assert all(a.subject_id != sid for a in snap.attendance)
    assert all(t.subject_id != sid for t in snap.timetable)


def test_interleaved_mutations_both_land(signed_in, backend):
    physics = next(s.subject_id for s in signed_in.store.snapshot.subjects if s.name == "Physics")
    backend.held = {"create_subject"}

    async def scenario():
        adding = asyncio.create_task(signed_in.add_subject(SubjectDraft(name="Chemistry", total_lectures=5, attended_lectures=4)))
        await asyncio.sleep(0)
        await signed_in.update_subject(physics, {"name": "Applied Physics"})
        backend.gate.set()
        await adding

    asyncio.run(scenario())

    names = [s.name for s in signed_in.store.snapshot.subjects]
    assert names == ["Maths", "Applied Physics", "Chemistry"]
