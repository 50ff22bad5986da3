"""Pydantic schema definitions for applicant records and configuration."""

from __future__ import annotations

from .applicant import (
    Applicant,
    ApplicantDraft,
    ApplicantStatus,
    ApplicantUpdate,
    parse_timestamp,
)
from .config import AnalyticsConfig, AppConfig, ExportConfig, StoreConfig

__all__ = [
    "Applicant",
    "ApplicantDraft",
    "ApplicantStatus",
    "ApplicantUpdate",
    "parse_timestamp",
    "AppConfig",
    "StoreConfig",
    "ExportConfig",
    "AnalyticsConfig",
]
