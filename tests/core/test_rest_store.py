from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from applicantpipeline.adapters import RestApplicantStore
from applicantpipeline.core import ApplicantStoreClient
from applicantpipeline.errors import DuplicateEmail, RemoteFailure
from applicantpipeline.pipeline import ApplicantPipeline
from applicantpipeline.schemas import ApplicantStatus

RECORD = {
    "id": "A-1",
    "user_id": "owner-1",
    "first_name": "Alice",
    "last_name": "Smith",
    "email": "alice@example.com",
    "status": "Applied",
    "is_interviewed": False,
    "cv_scoring": 9,
    "overall_score": None,
    "cv_gdrive_link": None,
    "created_at": "2024-03-01T00:00:00+00:00",
    "updated_at": "2024-03-01T00:00:00+00:00",
}


def build_store(handler) -> RestApplicantStore:
    return RestApplicantStore(
        "https://db.example.com/rest/v1",
        "secret-key",
        transport=httpx.MockTransport(handler),
    )


def run_with(store: RestApplicantStore, coro_factory):
    async def scenario():
        try:
            return await coro_factory(store)
        finally:
            await store.aclose()

    return asyncio.run(scenario())


def test_select_sends_owner_scoped_ordered_query():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[RECORD])

    applicants = run_with(build_store(handler), lambda s: ApplicantStoreClient(s).list("owner-1"))

    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/applicants"
    assert request.url.params["user_id"] == "eq.owner-1"
    assert request.url.params["order"] == "created_at.desc"
    assert request.headers["apikey"] == "secret-key"
    assert request.headers["authorization"] == "Bearer secret-key"
    assert [a.id for a in applicants] == ["A-1"]


def test_insert_posts_record_and_returns_representation():
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert request.method == "POST"
        assert request.headers["prefer"] == "return=representation"
        assert body["user_id"] == "owner-1"
        assert body["status"] == "Applied"
        return httpx.Response(201, json=[{**RECORD, **body, "id": "A-9"}])

    created = run_with(
        build_store(handler),
        lambda s: ApplicantStoreClient(s).create(
            "owner-1", {"first_name": "Alice", "last_name": "Smith", "email": "alice@example.com"}
        ),
    )

    assert created.id == "A-9"
    assert created.cv_scoring == 5


def test_unique_violation_maps_to_duplicate_email():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            409,
            json={
                "code": "23505",
                "message": 'duplicate key value violates unique constraint "applicants_email_key"',
            },
        )

    with pytest.raises(DuplicateEmail):
        run_with(
            build_store(handler),
            lambda s: ApplicantStoreClient(s).create(
                "owner-1", {"first_name": "Alice", "last_name": "Smith", "email": "alice@example.com"}
            ),
        )


def test_server_error_raises_remote_failure_with_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "internal error"})

    with pytest.raises(RemoteFailure) as exc:
        run_with(build_store(handler), lambda s: s.select("owner-1"))

    assert exc.value.status_code == 500
    assert exc.value.reason == "internal error"
    assert exc.value.operation == "list"


def test_transport_error_raises_remote_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RemoteFailure) as exc:
        run_with(build_store(handler), lambda s: s.delete("A-1"))

    assert "connection refused" in exc.value.reason


def test_update_patches_by_id_and_requires_a_matching_row():
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if request.url.params["id"] == "eq.A-1":
            return httpx.Response(200, json=[{**RECORD, **json.loads(request.content)}])
        return httpx.Response(200, json=[])

    updated = run_with(
        build_store(handler),
        lambda s: ApplicantStoreClient(s).update_fields("A-1", {"status": "Hired"}),
    )

    assert calls[0].method == "PATCH"
    assert updated.status.value == "Hired"

    with pytest.raises(RemoteFailure) as exc:
        run_with(build_store(handler), lambda s: s.update("A-404", {"status": "Hired"}))
    assert exc.value.reason == "no rows matched"


def test_endpoint_is_required():
    with pytest.raises(ValueError):
        RestApplicantStore("")


def test_non_json_success_body_rolls_back_status_change():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json=[{**RECORD, "status": "Reviewing"}])
        return httpx.Response(
            200, content=b"<html>gateway</html>", headers={"content-type": "text/html"}
        )

    store = build_store(handler)
    pipeline = ApplicantPipeline(client=ApplicantStoreClient(store), owner_id="owner-1")

    async def scenario():
        await pipeline.load()
        with pytest.raises(RemoteFailure) as exc:
            await pipeline.set_status("A-1", "Hired")
        await pipeline.aclose()
        return exc.value

    error = asyncio.run(scenario())

    assert error.reason == "invalid JSON response"
    assert error.status_code == 200
    assert pipeline.manager.get("A-1").status is ApplicantStatus.REVIEWING
    [notification] = pipeline.notifications.items
    assert notification.level == "error"
    assert notification.message == "Failed to update status: invalid JSON response"
