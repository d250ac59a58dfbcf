"""Shared fixtures: an ASGI test client and a fake assistants API."""

from __future__ import annotations

import json

import httpx
import pytest
import pytest_asyncio

from app.adapters.openai_assistants import OpenAIAssistantsAdapter
from app.config import RelayConfig
from app.main import app
from app.services.chat_service import ConversationRelay, get_relay

BASE_URL = "https://api.openai.test/v1"


class FakeAssistantsAPI:
    """In-memory stand-in for the threads/runs endpoints.

    *statuses* are handed out one per poll; the last one repeats forever.
    *failures* maps a step name ("create thread", "add message", "create run",
    "check run status", "get messages") to the HTTP status it should answer with.
    *bodies* maps a step name to a raw JSON body answered with status 200.
    """

    def __init__(
        self,
        *,
        thread_id: str = "t1",
        run_id: str = "run_1",
        statuses: tuple[str, ...] = ("completed",),
        reply: str | None = "Hello!",
        failures: dict[str, int] | None = None,
        bodies: dict[str, object] | None = None,
    ) -> None:
        self.thread_id = thread_id
        self.run_id = run_id
        self.statuses = statuses
        self.reply = reply
        self.failures = failures or {}
        self.bodies = bodies or {}
        self.requests: list[httpx.Request] = []
        self.posted_messages: list[dict] = []
        self.polls = 0

    def count(self, step: str) -> int:
        return sum(1 for r in self.requests if _step_of(r) == step)

    @property
    def steps(self) -> list[str]:
        return [_step_of(r) for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = _step_of(request)
        if step in self.failures:
            return httpx.Response(self.failures[step], json={"error": {"message": "boom"}})
        if step in self.bodies:
            return httpx.Response(200, json=self.bodies[step])

        if step == "create thread":
            return httpx.Response(200, json={"id": self.thread_id, "object": "thread"})
        if step == "add message":
            body = json.loads(request.content)
            self.posted_messages.append(body)
            return httpx.Response(200, json={"id": "msg_user", "role": "user"})
        if step == "create run":
            return httpx.Response(200, json={"id": self.run_id, "status": "queued"})
        if step == "check run status":
            status = self.statuses[min(self.polls, len(self.statuses) - 1)]
            self.polls += 1
            return httpx.Response(200, json={"id": self.run_id, "status": status})
        if step == "get messages":
            return httpx.Response(200, json={
                "object": "list",
                "data": [
                    {
                        "id": "msg_assistant",
                        "role": "assistant",
                        "content": [
                            {"type": "text", "text": {"value": self.reply, "annotations": []}},
                        ],
                    },
                    {
                        "id": "msg_user",
                        "role": "user",
                        "content": [{"type": "text", "text": {"value": "Hi", "annotations": []}}],
                    },
                ],
            })
        return httpx.Response(404, json={"error": {"message": "not found"}})


def _step_of(request: httpx.Request) -> str:
    parts = request.url.path.removeprefix("/v1/").strip("/").split("/")
    if request.method == "POST" and parts == ["threads"]:
        return "create thread"
    if len(parts) == 3 and parts[2] == "messages":
        return "add message" if request.method == "POST" else "get messages"
    if len(parts) == 3 and parts[2] == "runs" and request.method == "POST":
        return "create run"
    if len(parts) == 4 and parts[2] == "runs" and request.method == "GET":
        return "check run status"
    return "unknown"


class RecordingSleep:
    """Replaces asyncio.sleep so polling tests run instantly."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def relay_config() -> RelayConfig:
    return RelayConfig(api_key="sk-test", assistant_id="asst_test", base_url=BASE_URL)


@pytest.fixture
def fake_api() -> FakeAssistantsAPI:
    return FakeAssistantsAPI()


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest_asyncio.fixture
async def relay_factory(relay_config: RelayConfig, fake_sleep: RecordingSleep):
    """Build relays wired to a FakeAssistantsAPI; adapters are closed afterwards."""
    backends: list[OpenAIAssistantsAdapter] = []

    def make(api: FakeAssistantsAPI, config: RelayConfig | None = None) -> ConversationRelay:
        cfg = config or relay_config
        backend = OpenAIAssistantsAdapter(cfg, transport=httpx.MockTransport(api.handler))
        backends.append(backend)
        return ConversationRelay(backend, cfg, sleep=fake_sleep)

    yield make

    for backend in backends:
        await backend.aclose()


@pytest.fixture
def use_fake_api(relay_factory):
    """Route POST /api/chat through a FakeAssistantsAPI instead of the real service."""

    def install(api: FakeAssistantsAPI) -> FakeAssistantsAPI:
        async def _relay():
            yield relay_factory(api)

        app.dependency_overrides[get_relay] = _relay
        return api

    yield install
    app.dependency_overrides.pop(get_relay, None)


@pytest_asyncio.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
