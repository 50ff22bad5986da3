"""Core applicant pipeline engine components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .analytics import (
    AnalyticsSummary,
    MonthlyBucket,
    StatusShare,
    average_score,
    interview_rate,
    monthly_trend,
    percentage,
    score_tier,
    status_counts,
    summarize,
)
from .export import CSV_HEADERS, export_filename, render_csv, write_csv
from .filtering import SCORE_BANDS, FilterConfig, ScoreRange, filter_applicants
from .sorting import SortDirection, SortKey, SortState, sort_applicants
from .store_client import ApplicantStoreClient
from .transitions import StatusTransitionManager

__all__ = [
    "AnalyticsSummary",
    "MonthlyBucket",
    "StatusShare",
    "average_score",
    "interview_rate",
    "monthly_trend",
    "percentage",
    "score_tier",
    "status_counts",
    "summarize",
    "CSV_HEADERS",
    "export_filename",
    "render_csv",
    "write_csv",
    "SCORE_BANDS",
    "FilterConfig",
    "ScoreRange",
    "filter_applicants",
    "SortDirection",
    "SortKey",
    "SortState",
    "sort_applicants",
    "ApplicantStoreClient",
    "StatusTransitionManager",
]
