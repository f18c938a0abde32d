"""Stateful owner of one user's progress: engine transitions in, store writes out.

The tracker holds the in-memory UserProgress, runs every transition through
the pure functions in wrestlequest.engine.progression, writes the whole
document after each change and reconciles with snapshots pushed by the store.

Reconciliation is revision based. Each snapshot carries the store's revision
for the document. A snapshot is adopted only if its revision is newer than
the last one this tracker adopted or had acknowledged for its own write, and
adoption replaces the whole state. The echo of the tracker's own in-flight
write only advances the revision, so local animation flags survive it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime
from functools import partial

from wrestlequest.engine import progression
from wrestlequest.engine.validator import validate_progress
from wrestlequest.kb import PROGRESSION_CONFIG, default_progress
from wrestlequest.models.enums import SyncState, TransitionStatus, WriteStatus
from wrestlequest.models.kb import ProgressionConfig
from wrestlequest.models.outcome import ApplyOutcome, ProgressSnapshot, UndoOutcome
from wrestlequest.models.user import UserProgress
from wrestlequest.session.dialog import ActivitySelection, SelectionDialog
from wrestlequest.session.scheduler import DeferredClearScheduler
from wrestlequest.storage.base import StorageBackend, StorageError, Subscription

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ProgressTracker:
    def __init__(
        self,
        user_id: str,
        storage: StorageBackend,
        config: ProgressionConfig = PROGRESSION_CONFIG,
        scheduler: DeferredClearScheduler | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.user_id = user_id
        self._storage = storage
        self._config = config
        self._scheduler = scheduler or DeferredClearScheduler()
        self._owns_scheduler = scheduler is None
        self._clock = clock
        self._lock = threading.RLock()

        self._progress: UserProgress = default_progress()
        self._revision = 0
        self._sync_state = SyncState.IDLE
        self._in_flight: tuple[UserProgress, dict] | None = None
        self._subscription: Subscription | None = None
        self.last_write_error: str | None = None

    # --- state ---

    @property
    def progress(self) -> UserProgress:
        return self._progress

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def sync_state(self) -> SyncState:
        return self._sync_state

    @property
    def has_unsaved_changes(self) -> bool:
        return self.last_write_error is not None

    # --- lifecycle ---

    def start(self) -> None:
        """Subscribe to the store. A user with no document gets defaults written."""
        if self._subscription is None:
            self._subscription = self._storage.subscribe(self.user_id, self._on_snapshot)

    def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
        for i in range(len(self._progress.skills)):
            self._scheduler.cancel(self.user_id, i)
        if self._owns_scheduler:
            self._scheduler.shutdown()

    # --- transitions ---

    def log_activity(
        self,
        skill_index: int,
        activity_name: str,
        duration: int,
        custom: bool = False,
    ) -> ApplyOutcome:
        """Apply one logged activity and persist the result.

        Raises InvalidSkillError for a bad index, before anything changes.
        """
        with self._lock:
            updated, applied = progression.apply_activity(
                self._progress,
                skill_index,
                activity_name,
                duration,
                self._clock(),
                self._config,
                custom=custom,
            )
            self._progress = updated
            skill = updated.skills[skill_index]
            logger.info(
                "%s logged %r on %s: +%d points (streak bonus %d), rank %d, level %d",
                self.user_id,
                activity_name,
                skill.name.value,
                applied.points_earned,
                applied.streak_bonus,
                skill.rank,
                updated.level,
            )

            write, error = self._write()
            if applied.rank_ups > 0:
                self._schedule_clear(skill_index)

            return ApplyOutcome(progress=updated, applied=applied, write=write, error=error)

    def log_selection(self, skill_index: int, selection: ActivitySelection) -> ApplyOutcome:
        return self.log_activity(
            skill_index,
            selection.activity_name,
            selection.duration,
            custom=selection.is_custom,
        )

    def open_dialog(self, skill_index: int) -> SelectionDialog:
        """Dialog for one skill whose confirmation logs straight into this tracker."""
        skill = progression.check_skill_index(self._progress, skill_index)
        return SelectionDialog(skill.name, partial(self.log_selection, skill_index))

    def undo_point(self, skill_index: int) -> UndoOutcome:
        with self._lock:
            updated = progression.undo_point(self._progress, skill_index, self._config)
            if updated is None:
                logger.info(
                    "%s: nothing to undo on %s",
                    self.user_id,
                    self._progress.skills[skill_index].name.value,
                )
                return UndoOutcome(
                    status=TransitionStatus.NOT_APPLICABLE,
                    progress=self._progress,
                    skill_index=skill_index,
                    write=WriteStatus.SKIPPED,
                )

            self._progress = updated
            skill = updated.skills[skill_index]
            logger.info(
                "%s undid a point on %s: points %d, rank %d, level %d",
                self.user_id,
                skill.name.value,
                skill.points,
                skill.rank,
                updated.level,
            )
            write, error = self._write()
            return UndoOutcome(
                status=TransitionStatus.APPLIED,
                progress=updated,
                skill_index=skill_index,
                write=write,
                error=error,
            )

    def clear_leveling_up(self, skill_index: int) -> bool:
        """Clear a skill's level-up flag on whatever the current state is.

        Runs from the scheduler thread. The flag is not stored, so nothing is
        written. Returns False if the flag was already clear.
        """
        with self._lock:
            cleared = progression.clear_leveling_up(self._progress, skill_index)
            if cleared is self._progress:
                return False
            self._progress = cleared
            return True

    def rename(self, name: str) -> WriteStatus:
        return self._edit_profile(name=name)

    def set_quest(self, quest: str) -> WriteStatus:
        return self._edit_profile(quest=quest)

    def flush(self) -> WriteStatus:
        """Retry the write after a failure. No-op when the store is current."""
        with self._lock:
            if not self.has_unsaved_changes:
                return WriteStatus.SKIPPED
            write, _ = self._write()
            return write

    # --- internals ---

    def _edit_profile(self, **fields: str) -> WriteStatus:
        with self._lock:
            self._progress = self._progress.model_copy(update=fields)
            write, _ = self._write()
            return write

    def _schedule_clear(self, skill_index: int) -> None:
        self._scheduler.schedule(
            self.user_id,
            skill_index,
            self._config.level_up_flash_seconds,
            partial(self.clear_leveling_up, skill_index),
        )

    def _write(self) -> tuple[WriteStatus, str | None]:
        progress = self._progress
        self._in_flight = (progress, progress.model_dump(mode="json"))
        self._sync_state = SyncState.WRITING
        try:
            revision = self._storage.save_user_progress(self.user_id, progress)
        except StorageError as e:
            self.last_write_error = str(e)
            logger.warning("Write failed for %s, keeping local state: %s", self.user_id, e)
            return WriteStatus.FAILED, str(e)
        finally:
            self._in_flight = None
            self._sync_state = SyncState.IDLE

        self.last_write_error = None
        self._accept_own_write(progress, revision)
        logger.debug("Write acked for %s at revision %d", self.user_id, revision)
        return WriteStatus.ACKED, None

    def _accept_own_write(self, progress: UserProgress, revision: int) -> None:
        # Our document is the newest in the store unless a later snapshot
        # was adopted while the write was out; then that one stays.
        if revision > self._revision:
            self._progress = progress
            self._revision = revision

    def _on_snapshot(self, snapshot: ProgressSnapshot) -> None:
        with self._lock:
            if self._in_flight is not None and snapshot.document == self._in_flight[1]:
                self._accept_own_write(self._in_flight[0], snapshot.revision)
                return

            if not snapshot.exists:
                logger.info("No stored progress for %s, writing defaults", self.user_id)
                self._progress = default_progress()
                self._write()
                return

            if snapshot.revision <= self._revision:
                logger.debug(
                    "Ignoring stale snapshot for %s (revision %d <= %d)",
                    self.user_id,
                    snapshot.revision,
                    self._revision,
                )
                return

            result = validate_progress(snapshot.document, self._config)
            if not result.valid:
                logger.warning(
                    "Rejected snapshot %d for %s: %s",
                    snapshot.revision,
                    self.user_id,
                    [v.message for v in result.violations],
                )
                return

            self._progress = result.progress
            self._revision = snapshot.revision
            self.last_write_error = None
            logger.info("Adopted snapshot %d for %s", snapshot.revision, self.user_id)
