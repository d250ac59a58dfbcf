"""Chat service — relay one user turn through an assistant thread/run."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from app.adapters.base import AssistantBackendAdapter
from app.adapters.openai_assistants import OpenAIAssistantsAdapter
from app.config import RelayConfig, settings
from app.errors import RunFailedError, RunTimeoutError, UpstreamError
from app.schemas.chat import ChatResponse, RunStatus

logger = logging.getLogger(__name__)


def extract_reply(messages: list[dict[str, Any]]) -> str:
    """Return the first text segment of the newest message.

    *messages* is ordered newest first, as the messages endpoint returns it.
    """
    if not messages or not isinstance(messages, list) or not isinstance(messages[0], dict):
        raise UpstreamError("Failed to get messages: thread has no messages", step="get messages")

    for part in messages[0].get("content") or []:
        if isinstance(part, dict) and part.get("type") == "text":
            text = part.get("text")
            value = text.get("value") if isinstance(text, dict) else None
            if not isinstance(value, str):
                raise UpstreamError(
                    "Failed to get messages: text segment has no value", step="get messages"
                )
            return value

    raise UpstreamError(
        "Failed to get messages: latest message has no text content", step="get messages"
    )


class ConversationRelay:
    """Runs a single chat turn end to end.

    Ensures a thread exists, posts the user message, starts one run, polls
    it at a fixed interval until it completes (or fails, or the polling
    ceiling is hit) and returns the newest assistant text.
    """

    def __init__(
        self,
        backend: AssistantBackendAdapter,
        config: RelayConfig,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._backend = backend
        self._config = config
        self._sleep = sleep

    async def relay(self, message: str | None, thread_id: str | None = None) -> ChatResponse:
        logger.info("Generating response with assistant: %s", self._config.assistant_id)

        if not thread_id:
            thread_id = await self._backend.create_thread()
            logger.info("Created new thread: %s", thread_id)
        else:
            logger.info("Using existing thread: %s", thread_id)

        text = message or self._config.fallback_message
        await self._backend.add_message(thread_id, text)
        logger.debug("Message added to thread %s", thread_id)

        run_id = await self._backend.create_run(thread_id, self._config.assistant_id)
        logger.info("Created run: %s", run_id)

        await self._wait_for_run(thread_id, run_id)

        reply = extract_reply(await self._backend.list_messages(thread_id))
        logger.info("Generated response for thread %s (%d chars)", thread_id, len(reply))
        return ChatResponse(response=reply, thread_id=thread_id)

    async def _wait_for_run(self, thread_id: str, run_id: str) -> None:
        """Poll the run until it completes; raise on failure or timeout."""
        max_attempts = self._config.max_poll_attempts
        for attempt in range(1, max_attempts + 1):
            run = await self._backend.get_run(thread_id, run_id)
            status = run.get("status")
            logger.debug("Run %s status: %s (attempt %d/%d)", run_id, status, attempt, max_attempts)

            if status == RunStatus.COMPLETED:
                return
            if status == RunStatus.FAILED:
                logger.warning("Run failed: %s", run)
                raise RunFailedError(
                    "Assistant run failed", run_id=run_id, last_error=run.get("last_error")
                )

            await self._sleep(self._config.poll_interval)

        raise RunTimeoutError("Assistant response timeout", run_id=run_id, attempts=max_attempts)


@asynccontextmanager
async def open_relay(config: RelayConfig | None = None) -> AsyncIterator[ConversationRelay]:
    """Yield a relay backed by the assistants API, closing its client afterwards.

    Without an explicit *config* the process settings are used, which raises
    ``ConfigError`` before any client is created when credentials are missing.
    """
    if config is None:
        config = settings.relay_config()
    backend = OpenAIAssistantsAdapter(config)
    try:
        yield ConversationRelay(backend, config)
    finally:
        await backend.aclose()


async def get_relay() -> AsyncIterator[ConversationRelay]:
    async with open_relay() as relay:
        yield relay
