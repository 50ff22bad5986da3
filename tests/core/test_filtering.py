from __future__ import annotations

from typing import Any

import pytest

from applicantpipeline.core import FilterConfig, ScoreRange, filter_applicants
from applicantpipeline.schemas import Applicant, ApplicantStatus


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


@pytest.fixture
def trio() -> list[Applicant]:
    return [
        build_applicant(id="A", first_name="Alice", last_name="Smith", email="alice@example.com",
                        status="Reviewing", cv_scoring=9, overall_score=9),
        build_applicant(id="B", first_name="Bob", last_name="Fisher", email="bob@fisher.io",
                        status="Applied", cv_scoring=4, overall_score=4),
        build_applicant(id="C", first_name="Carol", last_name="Jones", email="carol@example.com",
                        status="Hired", cv_scoring=8, overall_score=8),
    ]


def ids(applicants: list[Applicant]) -> list[str]:
    return [applicant.id for applicant in applicants]


def test_search_matches_names_or_email_preserving_order(trio):
    result = filter_applicants(trio, FilterConfig(status="all", search_term="a"))

    assert ids(result) == ["A", "C"]


def test_search_is_case_insensitive_and_checks_email(trio):
    assert ids(filter_applicants(trio, FilterConfig(search_term="ALICE"))) == ["A"]
    assert ids(filter_applicants(trio, FilterConfig(search_term="FISHER.IO"))) == ["B"]


def test_status_filter_is_exact(trio):
    result = filter_applicants(trio, FilterConfig(status=ApplicantStatus.HIRED))

    assert ids(result) == ["C"]


def test_score_range_excludes_missing_scores(trio):
    unscored = build_applicant(id="D", first_name="Dan", email="dan@example.com", overall_score=None)

    result = filter_applicants([*trio, unscored], FilterConfig(score_range="high"))

    assert ids(result) == ["A", "C"]
    assert ids(filter_applicants([unscored], FilterConfig(score_range=(1, 10)))) == []


def test_predicates_are_conjunctive(trio):
    config = FilterConfig(search_term="example", status="Hired", score_range="5-10")

    assert ids(filter_applicants(trio, config)) == ["C"]


def test_default_config_returns_collection_unchanged(trio):
    result = filter_applicants(trio)

    assert result == trio
    assert result is not trio


def test_empty_and_fully_filtered_collections_yield_empty_list(trio):
    assert filter_applicants([], FilterConfig(search_term="x")) == []
    assert filter_applicants(trio, FilterConfig(search_term="zzz")) == []


@pytest.mark.parametrize(
    "config",
    [
        FilterConfig(search_term="o"),
        FilterConfig(status="Applied"),
        FilterConfig(score_range="medium"),
        FilterConfig(search_term="e", score_range="8-10"),
        FilterConfig(search_term="c", status="Reviewing", score_range="low"),
    ],
)
def test_result_is_subset_satisfying_every_predicate(trio, config):
    result = filter_applicants(trio, config)

    assert all(applicant in trio for applicant in result)
    assert all(config.matches(applicant) for applicant in result)
    assert [a for a in trio if a in result] == result


def test_score_range_parsing():
    assert ScoreRange.parse("high") == ScoreRange(min=8, max=10)
    assert ScoreRange.parse("5-7") == ScoreRange(min=5, max=7)
    assert ScoreRange.parse(" 1-4 ").contains(4)

    with pytest.raises(ValueError):
        ScoreRange.parse("11-12")
    with pytest.raises(ValueError):
        ScoreRange.parse("seven")
    with pytest.raises(ValueError):
        FilterConfig(score_range="9-2")
