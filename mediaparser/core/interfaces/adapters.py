"""
Adapter interfaces module.

Contains abstract base classes defining contracts for external collaborators:
the AI text-completion capability, the confirmed-metadata store, the retry
queue and the progress-event sink.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ITextCompletion(ABC):
    """
    Text completion capability interface.

    A single call taking a prompt and returning raw text that is expected
    to be JSON.
    """

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Check whether the capability can be called at all."""
        pass

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """
        Complete a prompt.

        Args:
            prompt: The full instruction text.

        Returns:
            Raw response text.

        Raises:
            AICallError: On timeout, transport error or non-success response.
        """
        pass


class IMetadataStore(ABC):
    """
    Confirmed-metadata store interface.

    Owned by the CRUD layer; used to check that a learn target exists.
    """

    @abstractmethod
    def exists(self, metadata_type: str, metadata_id: str) -> bool:
        pass


class IRetryQueue(ABC):
    """
    Retry queue interface.

    Failed AI or downstream attempts are handed off here; the queue owns
    backoff and re-execution.
    """

    @abstractmethod
    def enqueue(
        self,
        task_type: str,
        payload: Dict[str, Any],
        reason: Optional[str] = None
    ) -> str:
        """
        Enqueue a deferred task.

        Returns:
            The task ID.
        """
        pass


class IProgressSink(ABC):
    """Progress-event sink interface ("emit named event with payload")."""

    @abstractmethod
    def emit(self, event: str, payload: Dict[str, Any]) -> None:
        pass
