"""Hosted assistants API (threads / messages / runs) over HTTP.

Implements the handful of v2 endpoints a chat turn needs:
  - POST /threads                          create a conversation thread
  - POST /threads/{thread}/messages        append a user message
  - POST /threads/{thread}/runs            start a run
  - GET  /threads/{thread}/runs/{run}      poll run status
  - GET  /threads/{thread}/messages        read back the reply
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.adapters.base import AssistantBackendAdapter
from app.config import RelayConfig
from app.errors import UpstreamError

logger = logging.getLogger(__name__)


def _require_id(obj: dict[str, Any], *, step: str) -> str:
    """Return the object id, treating a missing id as an upstream failure."""
    obj_id = obj.get("id")
    if not obj_id:
        raise UpstreamError(f"Failed to {step}: response had no id", step=step)
    return obj_id


class OpenAIAssistantsAdapter(AssistantBackendAdapter):
    """HTTP client for the assistants API."""

    def __init__(
        self, config: RelayConfig, *, transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {config.api_key}",
                "OpenAI-Beta": config.beta_header,
            },
            timeout=config.http_timeout,
            transport=transport,
        )

    # ── Core protocol ────────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        path: str,
        *,
        step: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request; any non-success outcome is an UpstreamError."""
        try:
            resp = await self._client.request(method, path, json=json, params=params)
        except httpx.RequestError as exc:
            raise UpstreamError(f"Failed to {step}: {exc}", step=step) from exc

        if not resp.is_success:
            raise UpstreamError(
                f"Failed to {step}: {resp.reason_phrase or resp.status_code}",
                step=step,
                status_code=resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError as exc:
            raise UpstreamError(f"Failed to {step}: invalid JSON body", step=step) from exc
        if not isinstance(body, dict):
            raise UpstreamError(f"Failed to {step}: invalid JSON body", step=step)
        return body

    # ── Public API ───────────────────────────────────────────────────

    async def create_thread(self) -> str:
        thread = await self._request("POST", "/threads", step="create thread", json={})
        return _require_id(thread, step="create thread")

    async def add_message(self, thread_id: str, text: str) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"/threads/{thread_id}/messages",
            step="add message",
            json={"role": "user", "content": [{"type": "text", "text": text}]},
        )

    async def create_run(self, thread_id: str, assistant_id: str) -> str:
        run = await self._request(
            "POST",
            f"/threads/{thread_id}/runs",
            step="create run",
            json={"assistant_id": assistant_id},
        )
        return _require_id(run, step="create run")

    async def get_run(self, thread_id: str, run_id: str) -> dict[str, Any]:
        return await self._request(
            "GET", f"/threads/{thread_id}/runs/{run_id}", step="check run status"
        )

    async def list_messages(self, thread_id: str) -> list[dict[str, Any]]:
        result = await self._request(
            "GET",
            f"/threads/{thread_id}/messages",
            step="get messages",
            params={"order": "desc"},
        )
        return result.get("data", [])

    async def aclose(self) -> None:
        await self._client.aclose()
