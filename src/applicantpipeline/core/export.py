"""CSV export of a filtered and sorted applicant view."""

from __future__ import annotations

import csv
import io
from datetime import date
from pathlib import Path
from typing import Sequence

import pendulum
import structlog

from ..errors import EmptyExport
from ..schemas import Applicant

CSV_HEADERS: tuple[str, ...] = (
    "First Name",
    "Last Name",
    "Email",
    "Overall Score",
    "Status",
    "Interviewed",
    "Email Summary",
    "Candidate Summary",
    "Quick Read",
    "CV Link",
    "Applied Date",
)

_logger = structlog.get_logger(__name__)


def format_applied_date(
    applicant: Applicant,
    *,
    timezone: str | None = None,
    locale: str = "en",
    date_format: str = "L",
) -> str:
    """Render ``created_at`` in the viewer's timezone using a pendulum format."""
    tz = timezone or pendulum.local_timezone()
    local = pendulum.instance(applicant.created_at).in_timezone(tz)
    return local.format(date_format, locale=locale)


def applicant_row(
    applicant: Applicant,
    *,
    timezone: str | None = None,
    locale: str = "en",
    date_format: str = "L",
) -> list[str]:
    return [
        applicant.first_name,
        applicant.last_name,
        applicant.email,
        "" if applicant.overall_score is None else str(applicant.overall_score),
        applicant.status.value,
        "Yes" if applicant.is_interviewed else "No",
        applicant.email_content_summary or "",
        applicant.candidate_summary or "",
        applicant.quick_read or "",
        applicant.cv_link or "",
        format_applied_date(
            applicant, timezone=timezone, locale=locale, date_format=date_format
        ),
    ]


def render_csv(
    applicants: Sequence[Applicant],
    *,
    timezone: str | None = None,
    locale: str = "en",
    date_format: str = "L",
) -> str:
    """Render applicants as CSV with every field quoted, in input order."""
    if not applicants:
        raise EmptyExport()
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for applicant in applicants:
        writer.writerow(
            applicant_row(
                applicant, timezone=timezone, locale=locale, date_format=date_format
            )
        )
    return buffer.getvalue()


def export_filename(today: date | None = None) -> str:
    day = today or pendulum.now("UTC").date()
    return f"applicants-{day.isoformat()}.csv"


def write_csv(
    applicants: Sequence[Applicant],
    directory: str | Path,
    *,
    timezone: str | None = None,
    locale: str = "en",
    date_format: str = "L",
    today: date | None = None,
) -> Path:
    """Write the export into ``directory``; nothing is written for an empty view."""
    content = render_csv(
        applicants, timezone=timezone, locale=locale, date_format=date_format
    )
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / export_filename(today)
    path.write_text(content, encoding="utf-8")
    _logger.info("export.written", path=str(path), rows=len(applicants))
    return path
