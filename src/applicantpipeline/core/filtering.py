"""Filter engine narrowing an applicant collection."""

from __future__ import annotations

from typing import Any, Iterable, Literal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ..schemas import Applicant, ApplicantStatus

ALL: Literal["all"] = "all"

# Bands offered by the dashboard's score selector.
SCORE_BANDS: dict[str, tuple[int, int]] = {
    "high": (8, 10),
    "medium": (5, 7),
    "low": (1, 4),
}


class ScoreRange(BaseModel):
    """Inclusive overall-score range."""

    min: int
    max: int

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_bounds(self) -> ScoreRange:
        if not 1 <= self.min <= self.max <= 10:
            raise ValueError("score range must satisfy 1 <= min <= max <= 10")
        return self

    @classmethod
    def parse(cls, value: str) -> ScoreRange:
        """Parse ``"8-10"`` or a band name such as ``"high"``."""
        text = value.strip().lower()
        if text in SCORE_BANDS:
            low, high = SCORE_BANDS[text]
            return cls(min=low, max=high)
        parts = text.split("-")
        if len(parts) != 2:
            raise ValueError(f"Invalid score range: {value!r}")
        try:
            low, high = (int(part) for part in parts)
        except ValueError as exc:
            raise ValueError(f"Invalid score range: {value!r}") from exc
        return cls(min=low, max=high)

    def contains(self, score: int | None) -> bool:
        return score is not None and self.min <= score <= self.max


class FilterConfig(BaseModel):
    """Closed set of filter options; defaults leave the collection unchanged."""

    search_term: str = ""
    status: ApplicantStatus | Literal["all"] = ALL
    score_range: ScoreRange | Literal["all"] = ALL

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("score_range", mode="before")
    @classmethod
    def _parse_score_range(cls, value: Any) -> Any:
        if isinstance(value, str) and value != ALL:
            return ScoreRange.parse(value)
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return ScoreRange(min=value[0], max=value[1])
        return value

    @property
    def is_default(self) -> bool:
        return not self.search_term and self.status == ALL and self.score_range == ALL

    def matches(self, applicant: Applicant) -> bool:
        if self.search_term:
            term = self.search_term.lower()
            if not (
                term in applicant.first_name.lower()
                or term in applicant.last_name.lower()
                or term in applicant.email.lower()
            ):
                return False
        if self.status != ALL and applicant.status != self.status:
            return False
        if self.score_range != ALL and not self.score_range.contains(applicant.overall_score):
            return False
        return True


def filter_applicants(
    applicants: Iterable[Applicant],
    config: FilterConfig | None = None,
) -> list[Applicant]:
    """Return applicants passing every active predicate, in input order."""
    config = config or FilterConfig()
    if config.is_default:
        return list(applicants)
    return [applicant for applicant in applicants if config.matches(applicant)]
