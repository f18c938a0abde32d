import copy

from wrestlequest.models.outcome import ProgressSnapshot
from wrestlequest.models.user import UserProgress
from wrestlequest.storage.base import StorageBackend


class InMemoryStorage(StorageBackend):
    """Process-local store. Documents are kept as JSON-shaped dicts."""

    def __init__(self):
        super().__init__()
        self._docs: dict[str, tuple[int, dict]] = {}

    def get_snapshot(self, user_id: str) -> ProgressSnapshot:
        revision, document = self._docs.get(user_id, (0, None))
        return ProgressSnapshot(
            user_id=user_id,
            revision=revision,
            document=copy.deepcopy(document),
        )

    def save_user_progress(self, user_id: str, progress: UserProgress) -> int:
        return self.put_document(user_id, self._to_document(progress))

    def put_document(self, user_id: str, document: dict) -> int:
        """Store a raw document as-is, as another client of the store would."""
        revision = self._docs.get(user_id, (0, None))[0] + 1
        self._docs[user_id] = (revision, copy.deepcopy(document))
        self._notify(self.get_snapshot(user_id))
        return revision
