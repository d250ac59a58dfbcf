"""Chat surface state — the client side of a conversation with the relay.

Holds the message history, the thread handle returned by the relay and the
loading / typing flags a UI needs. Rendering is left to the front-end
(see ``apps/streamlit/app.py``).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from app.schemas.chat import ChatResponse, MessageRole, SurfaceMessage

logger = logging.getLogger(__name__)

STARTER_MESSAGES = (
    "Where's the incident report form?",
    "Can I use my phone when kids are asleep?",
    "What's the rule for trampoline use?",
    "What do I do if a parent doesn't come home?",
)

APOLOGY_MESSAGE = "I'm sorry, I'm having trouble responding right now. Please try again."


class RelayClientError(Exception):
    """The relay endpoint answered with an error."""


class RelayClient:
    """Posts chat turns to the relay endpoint."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 90.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self._timeout = timeout
        self._transport = transport

    async def send(self, message: str, thread_id: str | None) -> ChatResponse:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            resp = await client.post(self.url, json={"message": message, "threadId": thread_id})

        try:
            data = resp.json()
        except ValueError:
            data = {}

        if not resp.is_success:
            if not isinstance(data, dict):
                data = {}
            raise RelayClientError(data.get("error") or "Failed to get response")
        return ChatResponse.model_validate(data)


class ChatSurface:
    """Ordered message history plus the state of the turn in flight."""

    def __init__(
        self,
        client: RelayClient,
        *,
        typing_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._typing_delay = typing_delay
        self._sleep = sleep
        self.messages: list[SurfaceMessage] = []
        self.thread_id: str | None = None
        self.is_loading = False
        self.is_typing = False
        self.has_started_chat = False

    async def submit(self, text: str) -> SurfaceMessage | None:
        """Send typed input; blank input or a turn already in flight is ignored."""
        if not text.strip() or self.is_loading:
            return None
        self.has_started_chat = True
        return await self.send(text)

    async def start_with(self, starter: str) -> SurfaceMessage:
        """Leave the landing view by sending one of the starter prompts."""
        self.has_started_chat = True
        return await self.send(starter)

    async def send(self, text: str) -> SurfaceMessage:
        """Run one turn and return the assistant (or apology) message appended."""
        self.messages.append(SurfaceMessage(content=text, role=MessageRole.USER))
        self.is_loading = True
        self.is_typing = True

        try:
            reply = await self._client.send(text, self.thread_id)
            # The first handle handed out is kept for the rest of the session
            if reply.thread_id and not self.thread_id:
                self.thread_id = reply.thread_id
                logger.info("Thread ID set: %s", self.thread_id)

            await self._sleep(self._typing_delay)
            answer = SurfaceMessage(content=reply.response, role=MessageRole.ASSISTANT)
        except (httpx.HTTPError, RelayClientError, ValueError) as exc:
            logger.error("Chat turn failed: %s", exc)
            answer = SurfaceMessage(content=APOLOGY_MESSAGE, role=MessageRole.ASSISTANT)
        finally:
            self.is_typing = False
            self.is_loading = False

        self.messages.append(answer)
        return answer
