from textual.message import Message

from .datamodels import SyncStatus


class SyncStatusChanged(Message):
    """The remote sync status changed."""
    def __init__(self, status: SyncStatus) -> None:
        self.status = status
        super().__init__()


class DocumentChanged(Message):
    """The bookmark document was replaced."""


class LoginRequested(Message):
    """Credentials are needed before the change can be made."""


class LoginSucceeded(Message):
    """The shared secret was accepted by the server."""
