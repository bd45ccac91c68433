from abc import ABC, abstractmethod
from typing import Any


class BaseSettingsStore(ABC):
    """Contract for the host facility that persists the upload settings blob."""

    @abstractmethod
    def load(self) -> dict[str, Any] | None:
        """Return the previously saved blob, or None when nothing was saved."""

    @abstractmethod
    def save(self, data: dict[str, Any]) -> None:
        """Persist the blob, replacing any earlier copy."""


class BaseAttachmentStorage(ABC):
    """Contract for the host's local attachment storage."""

    @abstractmethod
    async def save(self, name: str, data: bytes, source_path: str | None = None) -> str:
        """Store raw bytes under a collision-free path.

        Args:
            name: Desired file name, e.g. ``report.pdf``.
            data: Raw file content.
            source_path: Path of the note the attachment belongs to, if any.

        Returns:
            The final stored file name as assigned by the host.
        """


class BaseChoicePrompt(ABC):
    """Contract for a two-option interactive question."""

    @abstractmethod
    async def ask(self, question: str, accept_label: str, reject_label: str) -> bool | None:
        """Return True for accept, False for reject, None if dismissed."""


class BaseNotifier(ABC):
    """Contract for transient, non-blocking user notifications."""

    @abstractmethod
    def notify(self, message: str) -> None:
        """Show a single-line message to the user."""
