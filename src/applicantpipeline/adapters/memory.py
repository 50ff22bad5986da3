"""Process-local applicant store with optional JSON Lines persistence."""

from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Any, Callable, Iterable

import pendulum
import structlog

from ..errors import RemoteFailure
from ..schemas import parse_timestamp

_IMMUTABLE_FIELDS = ("id", "user_id", "created_at")


class InMemoryApplicantStore:
    """Applicant table kept in memory, mirrored to a JSONL file when a path is set."""

    name = "memory"

    def __init__(
        self,
        records: Iterable[dict[str, Any]] | None = None,
        *,
        path: Path | None = None,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], pendulum.DateTime] | None = None,
    ) -> None:
        self._records: dict[str, dict[str, Any]] = {}
        for record in records or []:
            self._records[str(record["id"])] = dict(record)
        self._path = path
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._clock = clock or (lambda: pendulum.now("UTC"))
        self._logger = structlog.get_logger(__name__)

    @classmethod
    def from_path(cls, path: str | Path | None) -> InMemoryApplicantStore:
        """Load a store from a JSON Lines file; a missing file starts empty."""
        if path is None:
            return cls()
        path = Path(path)
        records: list[dict[str, Any]] = []
        if path.exists():
            with path.open("r", encoding="utf-8") as handle:
                for idx, line in enumerate(handle, start=1):
                    raw = line.strip()
                    if not raw:
                        continue
                    try:
                        record = json.loads(raw)
                    except json.JSONDecodeError as exc:
                        raise RemoteFailure("load", f"line {idx}: invalid JSON ({exc})") from exc
                    if not isinstance(record, dict) or not record.get("id"):
                        raise RemoteFailure("load", f"line {idx}: record has no id")
                    records.append(record)
        return cls(records, path=path)

    async def select(self, owner_id: str) -> list[dict[str, Any]]:
        owned = [dict(r) for r in self._records.values() if r.get("user_id") == owner_id]
        owned.sort(key=_created_sort_key, reverse=True)
        return owned

    async def insert(self, record: dict[str, Any]) -> dict[str, Any]:
        email = str(record.get("email", "")).lower()
        owner_id = record.get("user_id")
        for existing in self._records.values():
            if existing.get("user_id") == owner_id and str(existing.get("email", "")).lower() == email:
                raise RemoteFailure(
                    "create",
                    'duplicate key value violates unique constraint "applicants_email_key"',
                    status_code=409,
                )
        now = self._clock().to_iso8601_string()
        stored = dict(record)
        stored.setdefault("id", self._id_factory())
        stored["created_at"] = now
        stored["updated_at"] = now
        self._records[str(stored["id"])] = stored
        self._persist()
        return dict(stored)

    async def update(self, applicant_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        existing = self._records.get(applicant_id)
        if existing is None:
            raise RemoteFailure("update", f"no applicant with id {applicant_id!r}", status_code=404)
        existing.update({k: v for k, v in changes.items() if k not in _IMMUTABLE_FIELDS})
        existing["updated_at"] = self._clock().to_iso8601_string()
        self._persist()
        return dict(existing)

    async def delete(self, applicant_id: str) -> None:
        if self._records.pop(applicant_id, None) is None:
            raise RemoteFailure("delete", f"no applicant with id {applicant_id!r}", status_code=404)
        self._persist()

    async def aclose(self) -> None:
        return None

    def _persist(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        lines = [json.dumps(record, ensure_ascii=False) for record in self._records.values()]
        self._path.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
        self._logger.debug("store.persisted", path=str(self._path), count=len(lines))


def _created_sort_key(record: dict[str, Any]) -> float:
    try:
        return parse_timestamp(record.get("created_at")).timestamp()
    except ValueError:
        return float("-inf")
