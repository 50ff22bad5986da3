"""Error taxonomy for applicant pipeline operations."""

from __future__ import annotations

from typing import Any


class PipelineError(Exception):
    """Base error naming the failed operation and a best-effort reason."""

    def __init__(self, operation: str, reason: str):
        super().__init__(f"{operation} failed: {reason}")
        self.operation = operation
        self.reason = reason


class RemoteFailure(PipelineError):
    """Raised when a store call fails on the network or server side."""

    def __init__(self, operation: str, reason: str, *, status_code: int | None = None):
        super().__init__(operation, reason)
        self.status_code = status_code


class DuplicateEmail(RemoteFailure):
    """Raised when the store rejects an insert because the email already exists."""

    def __init__(self, email: str, reason: str = "An applicant with this email already exists."):
        super().__init__("create", reason)
        self.email = email


class ValidationFailure(PipelineError):
    """Raised when input is rejected locally, before any remote call."""

    def __init__(self, operation: str, reason: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(operation, reason)
        self.errors = errors or []


class EmptyExport(PipelineError):
    """Raised when an export is attempted with zero rows."""

    def __init__(self) -> None:
        super().__init__("export", "No applicants to export")


class ApplicantNotFound(PipelineError):
    """Raised when an applicant id is not part of the working set."""

    def __init__(self, operation: str, applicant_id: str):
        super().__init__(operation, f"Applicant {applicant_id!r} not found")
        self.applicant_id = applicant_id


__all__ = [
    "PipelineError",
    "RemoteFailure",
    "DuplicateEmail",
    "ValidationFailure",
    "EmptyExport",
    "ApplicantNotFound",
]
