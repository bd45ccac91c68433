from drop_uploader.host.base import BaseNotifier
from drop_uploader.logging.logger import Log


class LogNotifier(BaseNotifier):
    """Routes user notifications to the log and remembers them."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)
        Log.warning(message)
