"""Abstract base class for assistant backend adapters.

Swap the hosted assistants API for another thread/run style backend by
implementing this interface.
"""

from abc import ABC, abstractmethod
from typing import Any


class AssistantBackendAdapter(ABC):
    """Contract that any thread/run assistant backend must satisfy."""

    @abstractmethod
    async def create_thread(self) -> str:
        """Create a new conversation thread and return its id."""

    @abstractmethod
    async def add_message(self, thread_id: str, text: str) -> dict[str, Any]:
        """Append a user-authored text message to a thread."""

    @abstractmethod
    async def create_run(self, thread_id: str, assistant_id: str) -> str:
        """Start a run of *assistant_id* against a thread and return the run id."""

    @abstractmethod
    async def get_run(self, thread_id: str, run_id: str) -> dict[str, Any]:
        """Return the current run object (at least its ``status``)."""

    @abstractmethod
    async def list_messages(self, thread_id: str) -> list[dict[str, Any]]:
        """Return the thread's messages, newest first."""

    @abstractmethod
    async def aclose(self) -> None:
        """Release the underlying transport."""
