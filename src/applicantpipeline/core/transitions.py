"""Status transition manager owning a session's working set."""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from typing import Any, Callable, Mapping

import pendulum
import structlog

from ..errors import ApplicantNotFound, ValidationFailure
from ..schemas import Applicant, ApplicantDraft, ApplicantStatus, ApplicantUpdate
from .store_client import ApplicantStoreClient


class StatusTransitionManager:
    """Apply optimistic status and interview changes for one owner's applicants.

    Every status may move to every other status. Local changes are applied
    before the store call and rolled back to the pre-mutation snapshot when
    the store call fails or is cancelled. Mutations on the same applicant
    are serialized by a per-id lock; responses for applicants that left the
    working set while the request was in flight are dropped.
    """

    def __init__(
        self,
        client: ApplicantStoreClient,
        owner_id: str,
        *,
        clock: Callable[[], pendulum.DateTime] | None = None,
    ) -> None:
        self._client = client
        self._owner_id = owner_id
        self._clock = clock or (lambda: pendulum.now("UTC"))
        self._working: OrderedDict[str, Applicant] = OrderedDict()
        self._locks: dict[str, asyncio.Lock] = {}
        self._logger = structlog.get_logger(__name__).bind(owner_id=owner_id)

    @property
    def owner_id(self) -> str:
        return self._owner_id

    def applicants(self) -> list[Applicant]:
        """Snapshot of the working set, newest first."""
        return list(self._working.values())

    def get(self, applicant_id: str) -> Applicant:
        try:
            return self._working[applicant_id]
        except KeyError as exc:
            raise ApplicantNotFound("read", applicant_id) from exc

    async def load(self) -> list[Applicant]:
        applicants = await self._client.list(self._owner_id)
        self._working = OrderedDict((applicant.id, applicant) for applicant in applicants)
        return self.applicants()

    async def add(self, draft: ApplicantDraft | Mapping[str, Any]) -> Applicant:
        applicant = await self._client.create(self._owner_id, draft)
        self._working[applicant.id] = applicant
        self._working.move_to_end(applicant.id, last=False)
        return applicant

    async def set_status(self, applicant_id: str, status: ApplicantStatus | str) -> Applicant:
        try:
            new_status = ApplicantStatus(status)
        except ValueError as exc:
            raise ValidationFailure("set_status", f"Unknown status {status!r}") from exc
        return await self._mutate(
            "set_status", applicant_id, ApplicantUpdate(status=new_status)
        )

    async def set_interviewed(self, applicant_id: str, flag: bool) -> Applicant:
        return await self._mutate(
            "set_interviewed", applicant_id, ApplicantUpdate(is_interviewed=flag)
        )

    async def delete(self, applicant_id: str) -> None:
        """Delete remotely, then drop the local record once the store confirms."""
        async with self._lock_for(applicant_id):
            if applicant_id not in self._working:
                raise ApplicantNotFound("delete", applicant_id)
            await self._client.delete(applicant_id)
            self._working.pop(applicant_id, None)
        self._locks.pop(applicant_id, None)
        self._logger.info("transition.deleted", applicant_id=applicant_id)

    async def _mutate(
        self, operation: str, applicant_id: str, update: ApplicantUpdate
    ) -> Applicant:
        async with self._lock_for(applicant_id):
            snapshot = self._working.get(applicant_id)
            if snapshot is None:
                raise ApplicantNotFound(operation, applicant_id)

            changes: dict[str, Any] = update.model_dump(exclude_none=True)
            changes["updated_at"] = self._clock()
            self._working[applicant_id] = snapshot.model_copy(update=changes)

            try:
                persisted = await self._client.update_fields(applicant_id, update)
            except BaseException:
                if applicant_id in self._working:
                    self._working[applicant_id] = snapshot
                self._logger.warning(
                    "transition.rollback", operation=operation, applicant_id=applicant_id
                )
                raise

            if applicant_id not in self._working:
                self._logger.info(
                    "transition.stale_response", operation=operation, applicant_id=applicant_id
                )
                return persisted
            self._working[applicant_id] = persisted
            self._logger.info(
                "transition.applied",
                operation=operation,
                applicant_id=applicant_id,
                status=persisted.status.value,
                is_interviewed=persisted.is_interviewed,
            )
            return persisted

    def _lock_for(self, applicant_id: str) -> asyncio.Lock:
        lock = self._locks.get(applicant_id)
        if lock is None:
            lock = self._locks[applicant_id] = asyncio.Lock()
        return lock
