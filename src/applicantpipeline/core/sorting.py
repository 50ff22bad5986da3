"""Sort engine ordering applicants by a chosen key and direction."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable

from ..schemas import Applicant


class SortKey(str, Enum):
    CREATED_AT = "created_at"
    NAME = "name"
    OVERALL_SCORE = "overall_score"
    STATUS = "status"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


def _score_key(applicant: Applicant) -> tuple[int, int]:
    # Missing scores sort below every present score.
    if applicant.overall_score is None:
        return (0, 0)
    return (1, applicant.overall_score)


_KEY_FUNCS: dict[SortKey, Callable[[Applicant], Any]] = {
    SortKey.CREATED_AT: lambda applicant: applicant.created_at,
    SortKey.NAME: lambda applicant: applicant.full_name.lower(),
    SortKey.OVERALL_SCORE: _score_key,
    SortKey.STATUS: lambda applicant: applicant.status.value.lower(),
}


def sort_applicants(
    applicants: Iterable[Applicant],
    key: SortKey | str = SortKey.CREATED_AT,
    direction: SortDirection | str = SortDirection.ASC,
) -> list[Applicant]:
    """Return a new list ordered by ``key``; equal keys keep their input order."""
    sort_key = SortKey(key)
    sort_direction = SortDirection(direction)
    return sorted(
        applicants,
        key=_KEY_FUNCS[sort_key],
        reverse=sort_direction is SortDirection.DESC,
    )


@dataclass(frozen=True, slots=True)
class SortState:
    """Current sort selection of a view."""

    key: SortKey = SortKey.CREATED_AT
    direction: SortDirection = SortDirection.DESC

    def toggle(self, key: SortKey | str) -> SortState:
        """Flip direction for the same key; a new key starts ascending."""
        new_key = SortKey(key)
        if new_key is self.key:
            return SortState(key=new_key, direction=self.direction.flipped())
        return SortState(key=new_key, direction=SortDirection.ASC)

    def apply(self, applicants: Iterable[Applicant]) -> list[Applicant]:
        return sort_applicants(applicants, self.key, self.direction)
