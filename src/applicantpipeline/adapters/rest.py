"""PostgREST-style HTTP backend for the applicant table."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from ..errors import RemoteFailure


class RestApplicantStore:
    """Async HTTP client for a PostgREST table endpoint."""

    name = "rest"

    def __init__(
        self,
        endpoint: str,
        api_key: str | None = None,
        *,
        table: str = "applicants",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not endpoint:
            raise ValueError("RestApplicantStore requires an endpoint")
        self._base_url = endpoint.rstrip("/")
        self._table = table
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._logger = structlog.get_logger(__name__)

    async def __aenter__(self) -> RestApplicantStore:
        self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def select(self, owner_id: str) -> list[dict[str, Any]]:
        payload = await self._request(
            "list",
            "GET",
            params={"select": "*", "user_id": f"eq.{owner_id}", "order": "created_at.desc"},
        )
        return list(payload or [])

    async def insert(self, record: dict[str, Any]) -> dict[str, Any]:
        payload = await self._request("create", "POST", json=record)
        return self._single("create", payload)

    async def update(self, applicant_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        payload = await self._request(
            "update", "PATCH", params={"id": f"eq.{applicant_id}"}, json=changes
        )
        return self._single("update", payload)

    async def delete(self, applicant_id: str) -> None:
        await self._request("delete", "DELETE", params={"id": f"eq.{applicant_id}"})

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {
                "Content-Type": "application/json",
                "Prefer": "return=representation",
            }
            if self._api_key:
                headers["apikey"] = self._api_key
                headers["Authorization"] = f"Bearer {self._api_key}"
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )
        return self._client

    async def _request(self, operation: str, method: str, **kwargs: Any) -> Any:
        client = self._ensure_client()
        try:
            response = await client.request(method, f"/{self._table}", **kwargs)
        except httpx.HTTPError as exc:
            self._logger.warning("store.request_failed", operation=operation, error=str(exc))
            raise RemoteFailure(operation, str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            reason = _error_message(response)
            self._logger.warning(
                "store.request_rejected",
                operation=operation,
                status_code=response.status_code,
                reason=reason,
            )
            raise RemoteFailure(operation, reason, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            self._logger.warning(
                "store.invalid_response", operation=operation, status_code=response.status_code
            )
            raise RemoteFailure(
                operation, "invalid JSON response", status_code=response.status_code
            ) from exc

    @staticmethod
    def _single(operation: str, payload: Any) -> dict[str, Any]:
        if isinstance(payload, list):
            if not payload:
                raise RemoteFailure(operation, "no rows matched")
            payload = payload[0]
        if not isinstance(payload, dict):
            raise RemoteFailure(operation, "unexpected response shape")
        return payload


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("message", "details", "hint", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"
