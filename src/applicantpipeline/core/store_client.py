"""Typed, validating client over an applicant store backend."""

from __future__ import annotations

from typing import Any, Callable, Mapping

import pendulum
import structlog
from pydantic import ValidationError

from ..errors import DuplicateEmail, RemoteFailure, ValidationFailure
from ..schemas import Applicant, ApplicantDraft, ApplicantUpdate

# The store reports uniqueness violations only through its message text.
_UNIQUE_MARKERS = ("unique", "duplicate")


class ApplicantStoreClient:
    """Create, read, update and delete applicants for one store backend.

    Local validation happens before any remote call; remote failures are
    propagated unchanged apart from mapping uniqueness violations to
    ``DuplicateEmail``. Nothing is retried.
    """

    def __init__(
        self,
        backend: Any,
        *,
        clock: Callable[[], pendulum.DateTime] | None = None,
    ) -> None:
        self._backend = backend
        self._clock = clock or (lambda: pendulum.now("UTC"))
        self._logger = structlog.get_logger(__name__)

    @property
    def backend(self) -> Any:
        return self._backend

    async def list(self, owner_id: str) -> list[Applicant]:
        raw_records = await self._backend.select(owner_id)
        applicants: list[Applicant] = []
        for idx, record in enumerate(raw_records):
            try:
                applicant = Applicant.model_validate(record)
            except ValidationError as exc:
                self._logger.warning(
                    "store.skipped_record",
                    index=idx,
                    record_id=record.get("id") if isinstance(record, Mapping) else None,
                    errors=exc.error_count(),
                )
                continue
            if applicant.owner_id != owner_id:
                self._logger.warning(
                    "store.foreign_record", record_id=applicant.id, owner_id=owner_id
                )
                continue
            applicants.append(applicant)
        applicants.sort(key=lambda item: item.created_at, reverse=True)
        self._logger.info("store.list", owner_id=owner_id, count=len(applicants))
        return applicants

    async def create(
        self, owner_id: str, draft: ApplicantDraft | Mapping[str, Any]
    ) -> Applicant:
        validated = self._validate_draft(draft)
        try:
            record = await self._backend.insert(validated.to_record(owner_id))
        except RemoteFailure as exc:
            if _is_unique_violation(exc.reason):
                raise DuplicateEmail(validated.email) from exc
            raise
        applicant = self._parse("create", record)
        self._logger.info("store.create", applicant_id=applicant.id, owner_id=owner_id)
        return applicant

    async def update_fields(
        self, applicant_id: str, partial: ApplicantUpdate | Mapping[str, Any]
    ) -> Applicant:
        if isinstance(partial, ApplicantUpdate):
            update = partial
        else:
            try:
                update = ApplicantUpdate.model_validate(dict(partial))
            except ValidationError as exc:
                raise ValidationFailure(
                    "update", "Only status and interview flag can change", exc.errors()
                ) from exc
        changes = update.to_record()
        if not changes:
            raise ValidationFailure("update", "Nothing to update")
        changes["updated_at"] = self._clock().to_iso8601_string()
        record = await self._backend.update(applicant_id, changes)
        applicant = self._parse("update", record)
        self._logger.info("store.update", applicant_id=applicant_id, fields=sorted(changes))
        return applicant

    async def delete(self, applicant_id: str) -> None:
        await self._backend.delete(applicant_id)
        self._logger.info("store.delete", applicant_id=applicant_id)

    async def aclose(self) -> None:
        await self._backend.aclose()

    @staticmethod
    def _validate_draft(draft: ApplicantDraft | Mapping[str, Any]) -> ApplicantDraft:
        if isinstance(draft, ApplicantDraft):
            return draft
        try:
            return ApplicantDraft.model_validate(dict(draft))
        except ValidationError as exc:
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
            reason = "Invalid or missing fields: " + ", ".join(fields) if fields else str(exc)
            raise ValidationFailure("create", reason, exc.errors()) from exc

    @staticmethod
    def _parse(operation: str, record: Any) -> Applicant:
        try:
            return Applicant.model_validate(record)
        except ValidationError as exc:
            raise RemoteFailure(operation, "store returned a malformed applicant record") from exc


def _is_unique_violation(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in _UNIQUE_MARKERS)
