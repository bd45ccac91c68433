from abc import ABC, abstractmethod


class BaseEditor(ABC):
    """Contract for the host's handle on the active document."""

    @abstractmethod
    def get_value(self) -> str:
        """Return the full document text."""

    @abstractmethod
    def set_value(self, text: str) -> None:
        """Replace the full document text."""

    @abstractmethod
    def replace_selection(self, text: str) -> None:
        """Insert text at the caret, replacing the current selection."""

    @property
    def source_path(self) -> str | None:
        """Path of the document on disk, when the host knows it."""
        return None
