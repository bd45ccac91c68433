from dataclasses import dataclass, field
from enum import Enum

from drop_uploader.upload.models import UploadTarget


class EventKind(str, Enum):
    DROP = "drop"
    PASTE = "paste"


@dataclass
class FileEvent:
    """A drop or paste occurrence delivered by the host, carrying file blobs."""

    kind: EventKind
    files: list[UploadTarget] = field(default_factory=list)
    default_prevented: bool = False
    propagation_stopped: bool = False

    def suppress(self) -> None:
        """Stop the host's native handling and any further propagation."""
        self.default_prevented = True
        self.propagation_stopped = True

    @property
    def suppressed(self) -> bool:
        return self.default_prevented and self.propagation_stopped
