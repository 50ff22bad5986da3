"""Store backends holding the remote applicant table."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .memory import InMemoryApplicantStore
from .rest import RestApplicantStore


@runtime_checkable
class ApplicantStore(Protocol):
    """Owner-scoped CRUD contract over raw applicant records.

    Implementations exchange wire-shaped mappings (``user_id``,
    ``cv_gdrive_link``, ISO timestamps) and raise ``RemoteFailure`` for any
    failure, carrying the store's own message so callers can inspect it.
    """

    name: str

    async def select(self, owner_id: str) -> list[dict[str, Any]]:
        """Return the owner's records ordered by creation time, newest first."""

    async def insert(self, record: dict[str, Any]) -> dict[str, Any]:
        """Insert a record and return it as stored."""

    async def update(self, applicant_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        """Apply a partial update and return the updated record."""

    async def delete(self, applicant_id: str) -> None:
        """Delete a record permanently."""

    async def aclose(self) -> None:
        """Release any held resources."""


__all__ = ["ApplicantStore", "InMemoryApplicantStore", "RestApplicantStore"]
