from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Mapping, Optional, TypeVar

from ..attendance.model import AttendanceMark, AttendanceRecord
from ..common.validators import require_non_empty
from ..core.enums import SessionState
from ..core.exceptions import AuthenticationError, DomainError, RemoteFailure, StaleSessionError
from ..prediction.model import PredictionResult, SimulationResult
from ..prediction.service import PredictionEngine
from ..store.entity_store import EntityStore
from ..subjects.model import Subject, SubjectDraft, validate_subject_patch
from ..timetable.model import TimetableDraft, TimetableEntry, validate_timetable_patch
from ..users.model import UserProfile, validate_profile_patch
from .credentials import CredentialStore
from .gateway import BackendGateway

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SyncCoordinator:
    """Keeps an EntityStore in step with the backend for one signed-in user.

    Session states: UNAUTHENTICATED -> RESTORING -> READY, back to
    UNAUTHENTICATED on logout, failed restore or an expired session.
    Mutations are confirm-then-apply: the store changes only after the backend
    returned the confirmed entity, and not at all if the call failed.

    `generation` changes whenever a session starts or ends. A response that
    arrives for an older generation is discarded.
    """

    def __init__(
        self,
        gateway: BackendGateway,
        credentials: CredentialStore,
        *,
        engine: Optional[PredictionEngine] = None,
    ):
        self._gateway = gateway
        self._credentials = credentials
        self._engine = engine or PredictionEngine()
        self._state = SessionState.UNAUTHENTICATED
        self._store: Optional[EntityStore] = None
        self._generation = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def store(self) -> EntityStore:
        if self._state != SessionState.READY or self._store is None:
            raise AuthenticationError("No active session")
        return self._store

    # --- session lifecycle -------------------------------------------------

    async def login(self, email: str, password: str) -> UserProfile:
        email = require_non_empty(email, "Email")
        require_non_empty(password, "Password")

        try:
            credential = await self._gateway.login(email, password)
        except DomainError:
            raise
        except Exception as e:
            logger.warning("Login request failed: %s", e)
            raise RemoteFailure("Login failed") from e

        self._credentials.save(credential)
        await self._open_session()
        return self.store.snapshot.profile

    async def restore(self) -> SessionState:
        """Resume a session from a stored credential, if there is one."""
        credential = self._credentials.load()
        if not credential or not credential.is_usable:
            logger.debug("No stored credential, staying signed out")
            return self._state

        await self._open_session()
        return self._state

    async def refresh(self) -> None:
        """Re-fetch everything and replace all collections."""
        store = self.store
        profile, subjects, timetable, attendance = await self._call("Failed to load data", self._fetch_all())
        store.replace_all(profile=profile, subjects=subjects, timetable=timetable, attendance=attendance)

    async def logout(self) -> None:
        """Sign out locally no matter what the backend answers."""
        try:
            await self._gateway.logout()
        except Exception as e:
            logger.warning("Remote logout failed, signing out locally: %s", e)
        finally:
            self._close_session()
            logger.info("Signed out")

    async def _open_session(self) -> None:
        self._generation += 1
        generation = self._generation
        self._state = SessionState.RESTORING
        self._store = None
        logger.info("Restoring session (generation %d)", generation)

        try:
            profile, subjects, timetable, attendance = await self._fetch_all()
        except Exception as e:
            logger.warning("Failed to restore session: %s", e)
            if generation == self._generation:
                self._close_session()
            if isinstance(e, DomainError):
                raise
            raise RemoteFailure("Failed to load data") from e

        if generation != self._generation:
            raise StaleSessionError("Session changed while loading data")

        store = EntityStore()
        store.replace_all(profile=profile, subjects=subjects, timetable=timetable, attendance=attendance)
        self._store = store
        self._state = SessionState.READY
        logger.info("Session ready: %d subjects, %d timetable entries", len(subjects), len(timetable))

    def _close_session(self) -> None:
        self._generation += 1
        self._credentials.clear()
        if self._store is not None:
            self._store.clear()
        self._store = None
        self._state = SessionState.UNAUTHENTICATED

    async def _fetch_all(self):
        return await asyncio.gather(
            self._gateway.get_profile(),
            self._gateway.list_subjects(),
            self._gateway.list_timetable(),
            self._gateway.list_attendance(),
        )

    async def _call(self, failure_message: str, request: Awaitable[T]) -> T:
        generation = self._generation
        try:
            result = await request
        except StaleSessionError:
            logger.info("Session expired during request: %s", failure_message)
            if generation == self._generation:
                self._close_session()
            raise
        except RemoteFailure as e:
            logger.warning("%s: %s", failure_message, e)
            raise e.with_fallback(failure_message)
        except DomainError:
            raise
        except Exception as e:
            logger.warning("%s: %s", failure_message, e)
            raise RemoteFailure(failure_message) from e

        if generation != self._generation:
            logger.info("Discarding response from an earlier session: %s", failure_message)
            raise StaleSessionError("Session changed while the request was in flight")
        return result

    # --- subjects ----------------------------------------------------------

    async def add_subject(self, draft: SubjectDraft) -> Subject:
        store = self.store
        draft = draft.validated()
        subject = await self._call("Failed to add subject", self._gateway.create_subject(draft.to_payload()))
        store.insert_subject(subject)
        return subject

    async def update_subject(self, subject_id: str, patch: Mapping[str, Any]) -> Subject:
        store = self.store
        current = store.get_subject(subject_id)
        payload = validate_subject_patch(current, patch)
        subject = await self._call("Failed to update subject", self._gateway.update_subject(subject_id, payload))
        store.replace_subject(subject)
        return subject

    async def delete_subject(self, subject_id: str) -> None:
        store = self.store
        store.get_subject(subject_id)
        await self._call("Failed to delete subject", self._gateway.delete_subject(subject_id))
        store.remove_subject(subject_id)

    # --- timetable ---------------------------------------------------------

    async def add_timetable_entry(self, draft: TimetableDraft) -> TimetableEntry:
        store = self.store
        draft = draft.validated()
        subject = store.get_subject(draft.subject_id)
        payload = draft.to_payload(subject_name=subject.name)
        entry = await self._call("Failed to add timetable entry", self._gateway.create_timetable_entry(payload))
        store.insert_timetable_entry(entry)
        return entry

    async def update_timetable_entry(self, entry_id: str, patch: Mapping[str, Any]) -> TimetableEntry:
        store = self.store
        current = store.get_timetable_entry(entry_id)
        payload = validate_timetable_patch(current, patch)
        if "subjectId" in payload:
            payload["subjectName"] = store.get_subject(payload["subjectId"]).name
        entry = await self._call(
            "Failed to update timetable entry", self._gateway.update_timetable_entry(entry_id, payload)
        )
        store.replace_timetable_entry(entry)
        return entry

    async def delete_timetable_entry(self, entry_id: str) -> None:
        store = self.store
        store.get_timetable_entry(entry_id)
        await self._call("Failed to delete timetable entry", self._gateway.delete_timetable_entry(entry_id))
        store.remove_timetable_entry(entry_id)

    # --- attendance --------------------------------------------------------

    async def mark_attendance(self, mark: AttendanceMark) -> AttendanceRecord:
        store = self.store
        mark = mark.validated()
        subject = store.get_subject(mark.subject_id)
        result = await self._call(
            "Failed to mark attendance",
            self._gateway.mark_attendance(mark.to_payload(subject_name=subject.name)),
        )
        store.apply_mark(result)
        return result.record

    # --- profile -----------------------------------------------------------

    async def update_profile(self, patch: Mapping[str, Any]) -> UserProfile:
        store = self.store
        payload = validate_profile_patch(store.snapshot.profile, patch)
        profile = await self._call("Failed to update profile", self._gateway.update_profile(payload))
        store.set_profile(profile)
        return profile

    # --- prediction (computed locally) -------------------------------------

    def predict(self, subject_id: str) -> PredictionResult:
        return self._engine.predict(self.store.get_subject(subject_id))

    def predict_all(self) -> list[PredictionResult]:
        return self._engine.predict_all(self.store.snapshot.subjects)

    def simulate(self, subject_id: str, number_of_bunks: int) -> SimulationResult:
        return self._engine.simulate(self.store.get_subject(subject_id), number_of_bunks)
