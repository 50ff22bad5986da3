"""Analytics aggregation over an owner's applicant collection.

All functions are pure and accept either ``Applicant`` models or raw
wire-shaped mappings. A malformed field on one record only removes that
record's contribution to the affected metric; it never aborts the whole
aggregation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Mapping

import pendulum
import structlog

from ..schemas import ApplicantStatus, parse_timestamp

ScoreTier = Literal["high", "medium", "low", "none"]

_logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class StatusShare:
    status: ApplicantStatus
    count: int
    percentage: float


@dataclass(slots=True)
class MonthlyBucket:
    """Applications and interviews for one calendar month."""

    year: int
    month: int
    label: str
    applications: int = 0
    interviewed: int = 0


@dataclass(slots=True)
class AnalyticsSummary:
    """Dashboard metrics for a collection."""

    total: int
    status_counts: dict[ApplicantStatus, int]
    distribution: list[StatusShare]
    interviewed_count: int
    interview_rate: float
    average_score: float
    monthly_trend: list[MonthlyBucket] = field(default_factory=list)


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _record_id(record: Any) -> Any:
    return _field(record, "id")


def percentage(count: int, total: int) -> float:
    """``count / total * 100`` to one decimal; ``0.0`` when ``total`` is zero."""
    if total <= 0:
        return 0.0
    return round(count / total * 100, 1)


def status_counts(records: Iterable[Any]) -> dict[ApplicantStatus, int]:
    """Count records per status over all five statuses; unset status counts as Applied."""
    counts = {status: 0 for status in ApplicantStatus}
    for record in records:
        raw = _field(record, "status")
        try:
            status = ApplicantStatus.APPLIED if raw is None else ApplicantStatus(raw)
        except ValueError:
            _logger.warning(
                "analytics.skipped_record",
                metric="status_counts",
                record_id=_record_id(record),
                value=str(raw),
            )
            continue
        counts[status] += 1
    return counts


def status_distribution(records: Iterable[Any]) -> list[StatusShare]:
    items = list(records)
    counts = status_counts(items)
    return [
        StatusShare(status=status, count=count, percentage=percentage(count, len(items)))
        for status, count in counts.items()
    ]


def interviewed_count(records: Iterable[Any]) -> int:
    return sum(1 for record in records if _field(record, "is_interviewed") is True)


def interview_rate(records: Iterable[Any]) -> float:
    items = list(records)
    return percentage(interviewed_count(items), len(items))


def _cv_score(record: Any) -> float:
    value = _field(record, "cv_scoring")
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        _logger.warning(
            "analytics.skipped_record",
            metric="cv_scoring",
            record_id=_record_id(record),
            value=str(value),
        )
        return 0.0


def average_score(records: Iterable[Any]) -> float:
    """Mean CV score; missing scores add 0 but still count as a record."""
    items = list(records)
    if not items:
        return 0.0
    return sum(_cv_score(record) for record in items) / len(items)


def count_cv_at_least(records: Iterable[Any], threshold: int = 8) -> int:
    return sum(1 for record in records if _cv_score(record) >= threshold)


def count_cv_below(records: Iterable[Any], threshold: int = 5) -> int:
    return sum(1 for record in records if _cv_score(record) < threshold)


def score_tier(score: int | None) -> ScoreTier:
    """Badge tier for an overall score."""
    if not score:
        return "none"
    if score >= 7:
        return "high"
    if score >= 5:
        return "medium"
    return "low"


def monthly_trend(
    records: Iterable[Any],
    months: int = 6,
    *,
    timezone: str | None = None,
    locale: str = "en",
) -> list[MonthlyBucket]:
    """Bucket records by calendar month of creation, keeping the latest ``months``."""
    tz = timezone or pendulum.local_timezone()
    buckets: dict[tuple[int, int], MonthlyBucket] = {}
    for record in records:
        raw = _field(record, "created_at")
        try:
            created = pendulum.instance(parse_timestamp(raw)).in_timezone(tz)
        except ValueError:
            _logger.warning(
                "analytics.skipped_record",
                metric="monthly_trend",
                record_id=_record_id(record),
                value=str(raw),
            )
            continue
        key = (created.year, created.month)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = MonthlyBucket(
                year=created.year,
                month=created.month,
                label=created.format("MMM", locale=locale),
            )
        bucket.applications += 1
        if _field(record, "is_interviewed") is True:
            bucket.interviewed += 1
    ordered = [buckets[key] for key in sorted(buckets)]
    return ordered[-months:] if months > 0 else []


def summarize(
    records: Iterable[Any],
    months: int = 6,
    *,
    timezone: str | None = None,
    locale: str = "en",
) -> AnalyticsSummary:
    items = list(records)
    counts = status_counts(items)
    total = len(items)
    interviewed = interviewed_count(items)
    return AnalyticsSummary(
        total=total,
        status_counts=counts,
        distribution=[
            StatusShare(status=status, count=count, percentage=percentage(count, total))
            for status, count in counts.items()
        ],
        interviewed_count=interviewed,
        interview_rate=percentage(interviewed, total),
        average_score=round(average_score(items), 1),
        monthly_trend=monthly_trend(items, months, timezone=timezone, locale=locale),
    )
