"""Applicant record schemas shared by the store client and the pipeline."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any

import pendulum
from pydantic import BaseModel, ConfigDict, Field, field_validator

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ApplicantStatus(str, Enum):
    """Pipeline status of an applicant. Any status may follow any other."""

    APPLIED = "Applied"
    REVIEWING = "Reviewing"
    INTERVIEWED = "Interviewed"
    REJECTED = "Rejected"
    HIRED = "Hired"


def parse_timestamp(value: Any) -> datetime:
    """Parse a wire timestamp into an aware datetime (naive values are UTC)."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, str):
        parsed = pendulum.parse(value)
        if not isinstance(parsed, datetime):
            raise ValueError(f"Not a timestamp: {value!r}")
        return parsed
    raise ValueError(f"Unsupported timestamp value: {value!r}")


class _ContactFields(BaseModel):
    first_name: str
    last_name: str
    email: str

    @field_validator("first_name", "last_name")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError("must be a valid email address")
        return value


class Applicant(_ContactFields):
    """Applicant record as stored remotely and held in the working set."""

    id: str
    owner_id: str = Field(alias="user_id")
    status: ApplicantStatus = ApplicantStatus.APPLIED
    is_interviewed: bool = False
    cv_scoring: int = Field(ge=1, le=10)
    overall_score: int | None = Field(default=None, ge=1, le=10)
    email_content_summary: str | None = None
    candidate_summary: str | None = None
    quick_read: str | None = None
    cv_link: str | None = Field(default=None, alias="cv_gdrive_link")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        return ApplicantStatus.APPLIED if value is None else value

    @field_validator("is_interviewed", mode="before")
    @classmethod
    def _default_interviewed(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_timestamps(cls, value: Any) -> datetime:
        return parse_timestamp(value)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_record(self) -> dict[str, Any]:
        """Serialize using the store's wire field names."""
        return self.model_dump(mode="json", by_alias=True)


class ApplicantDraft(_ContactFields):
    """Input for creating an applicant."""

    cv_scoring: int = Field(default=5, ge=1, le=10)
    overall_score: int | None = Field(default=None, ge=1, le=10)
    email_content_summary: str | None = None
    candidate_summary: str | None = None
    quick_read: str | None = None
    cv_link: str | None = Field(default=None, alias="cv_gdrive_link")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def to_record(self, owner_id: str) -> dict[str, Any]:
        record = self.model_dump(mode="json", by_alias=True)
        record.update(
            {
                "user_id": owner_id,
                "status": ApplicantStatus.APPLIED.value,
                "is_interviewed": False,
            }
        )
        return record


class ApplicantUpdate(BaseModel):
    """Partial update payload; only the transition fields are mutable."""

    status: ApplicantStatus | None = None
    is_interviewed: bool | None = None

    model_config = ConfigDict(extra="forbid")

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
