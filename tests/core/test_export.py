from __future__ import annotations

import csv
import io
from datetime import date
from typing import Any

import pytest

from applicantpipeline.core import CSV_HEADERS, export_filename, render_csv, write_csv
from applicantpipeline.errors import EmptyExport
from applicantpipeline.schemas import Applicant


def build_applicant(**kwargs: Any) -> Applicant:
    defaults: dict[str, Any] = {
        "id": "A-001",
        "owner_id": "owner-1",
        "first_name": "Alice",
        "last_name": "Smith",
        "email": "alice@example.com",
        "cv_scoring": 5,
        "created_at": "2024-03-15T10:00:00+00:00",
        "updated_at": "2024-03-15T10:00:00+00:00",
    }
    defaults.update(kwargs)
    return Applicant(**defaults)


def parse(content: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(content)))


def test_header_and_row_count():
    applicants = [
        build_applicant(id="A"),
        build_applicant(id="B", first_name="Bob", email="bob@fisher.io"),
    ]

    rows = parse(render_csv(applicants, timezone="UTC"))

    assert rows[0] == list(CSV_HEADERS)
    assert len(CSV_HEADERS) == 11
    assert len(rows) - 1 == len(applicants)


def test_rows_follow_input_order_and_render_fields():
    applicants = [
        build_applicant(
            first_name="Carol",
            last_name="Jones",
            email="carol@example.com",
            overall_score=8,
            status="Hired",
            is_interviewed=True,
            email_content_summary="Strong cover letter",
            candidate_summary="Senior engineer",
            quick_read="Ready to start",
            cv_link="https://drive.example.com/cv/carol",
        ),
        build_applicant(first_name="Bob", last_name="Fisher", email="bob@fisher.io"),
    ]

    rows = parse(render_csv(applicants, timezone="UTC", date_format="YYYY-MM-DD"))

    assert rows[1] == [
        "Carol",
        "Jones",
        "carol@example.com",
        "8",
        "Hired",
        "Yes",
        "Strong cover letter",
        "Senior engineer",
        "Ready to start",
        "https://drive.example.com/cv/carol",
        "2024-03-15",
    ]
    assert rows[2][3] == ""
    assert rows[2][5] == "No"
    assert rows[2][6:10] == ["", "", "", ""]


def test_every_field_is_quoted_and_quotes_are_doubled():
    applicant = build_applicant(quick_read='Said "ready now", available', candidate_summary="a,b")

    content = render_csv([applicant], timezone="UTC")
    header_line, data_line = content.splitlines()

    assert header_line == ",".join(f'"{name}"' for name in CSV_HEADERS)
    assert '"Said ""ready now"", available"' in data_line
    assert parse(content)[1][8] == 'Said "ready now", available'
    assert parse(content)[1][7] == "a,b"


def test_applied_date_uses_viewer_timezone():
    applicant = build_applicant(created_at="2024-03-15T23:30:00Z")

    utc_rows = parse(render_csv([applicant], timezone="UTC", date_format="YYYY-MM-DD"))
    tokyo_rows = parse(render_csv([applicant], timezone="Asia/Tokyo", date_format="YYYY-MM-DD"))

    assert utc_rows[1][10] == "2024-03-15"
    assert tokyo_rows[1][10] == "2024-03-16"


def test_empty_export_fails_without_writing(tmp_path):
    with pytest.raises(EmptyExport):
        render_csv([])
    with pytest.raises(EmptyExport):
        write_csv([], tmp_path / "out")

    assert not (tmp_path / "out").exists()


def test_filename_carries_iso_date():
    assert export_filename(date(2026, 10, 18)) == "applicants-2026-10-18.csv"


def test_write_csv_creates_dated_file(tmp_path):
    path = write_csv(
        [build_applicant()],
        tmp_path / "exports",
        timezone="UTC",
        today=date(2024, 4, 1),
    )

    assert path == tmp_path / "exports" / "applicants-2024-04-01.csv"
    rows = parse(path.read_text(encoding="utf-8"))
    assert rows[0][0] == "First Name"
    assert len(rows) == 2
