from abc import ABC, abstractmethod
from collections.abc import Callable

from wrestlequest.models.outcome import ProgressSnapshot
from wrestlequest.models.user import UserProgress

SnapshotListener = Callable[[ProgressSnapshot], None]


class StorageError(Exception):
    """Raised when the store cannot complete a read or write."""

    def __init__(self, message: str, user_id: str | None = None):
        super().__init__(message)
        self.user_id = user_id


class Subscription:
    """Handle returned by subscribe(); close() detaches the listener."""

    def __init__(self, backend: "StorageBackend", user_id: str, listener: SnapshotListener):
        self.backend = backend
        self.user_id = user_id
        self.listener = listener
        self.closed = False

    def close(self) -> None:
        if not self.closed:
            self.backend._remove_listener(self)
            self.closed = True


class StorageBackend(ABC):
    """Whole-document store keyed by user id, with change notification.

    Every successful save bumps the document's revision. Listeners get the
    current snapshot on subscribe and one snapshot per later change.
    """

    def __init__(self):
        self._listeners: dict[str, list[Subscription]] = {}

    @abstractmethod
    def get_snapshot(self, user_id: str) -> ProgressSnapshot: ...

    @abstractmethod
    def save_user_progress(self, user_id: str, progress: UserProgress) -> int: ...

    def get_user_progress(self, user_id: str) -> UserProgress | None:
        snapshot = self.get_snapshot(user_id)
        return UserProgress.model_validate(snapshot.document) if snapshot.exists else None

    def subscribe(self, user_id: str, listener: SnapshotListener) -> Subscription:
        subscription = Subscription(self, user_id, listener)
        self._listeners.setdefault(user_id, []).append(subscription)
        listener(self.get_snapshot(user_id))
        return subscription

    def _remove_listener(self, subscription: Subscription) -> None:
        subs = self._listeners.get(subscription.user_id, [])
        if subscription in subs:
            subs.remove(subscription)

    def _notify(self, snapshot: ProgressSnapshot) -> None:
        for subscription in list(self._listeners.get(snapshot.user_id, [])):
            subscription.listener(snapshot)

    @staticmethod
    def _to_document(progress: UserProgress) -> dict:
        return progress.model_dump(mode="json")
