"""
HistoryManager: bounded, linear undo/redo over snapshots of placed objects.

State is a list of frozen ``Snapshot`` records plus one integer cursor:

    [S0, S1, S2, S3]
              ^ current_index = 2

- ``record_if_changed`` drops everything after the cursor (the redo branch),
  appends a deep copy, and moves the cursor to the end. Unchanged states are
  ignored, so repeated commits of the same collection don't pad the history.
- ``undo``/``redo`` move the cursor and hand back fresh copies of the
  snapshot they land on. Past the ends they return None.
- Once the list grows past ``max_history_size`` the oldest snapshots are
  evicted and the cursor shifts with them.

The manager only ever sees user edits: it subscribes to store commits via
``on_commit``, and the store's ``replace`` (used to apply undo/redo) does not
emit commits.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .config import Config
from .schemas import PlacedObject, Snapshot
from .store import StoreCommit


class HistoryManager:
    """Linear undo/redo stack of immutable snapshots."""

    def __init__(
        self,
        initial_objects: Optional[Iterable[PlacedObject]] = None,
        max_history_size: Optional[int] = None,
    ):
        """Start a history whose only entry is ``initial_objects``.

        Raises:
            ValueError: If max_history_size is smaller than 1
        """
        self.max_history_size = (
            Config.MAX_HISTORY_SIZE if max_history_size is None else max_history_size
        )
        if self.max_history_size < 1:
            raise ValueError(f"max_history_size must be >= 1, got {self.max_history_size}")

        self._snapshots: List[Snapshot] = [Snapshot.capture(list(initial_objects or []))]
        self._current_index = 0

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def history_length(self) -> int:
        return len(self._snapshots)

    @property
    def snapshots(self) -> Tuple[Snapshot, ...]:
        return tuple(self._snapshots)

    @property
    def can_undo(self) -> bool:
        return self._current_index > 0

    @property
    def can_redo(self) -> bool:
        return self._current_index < len(self._snapshots) - 1

    def current(self) -> List[PlacedObject]:
        """Fresh copy of the objects at the cursor."""

        return self._snapshots[self._current_index].restore()

    def record_if_changed(self, objects: Iterable[PlacedObject]) -> bool:
        """Append a snapshot of ``objects`` unless it equals the current one.

        Returns True if a snapshot was recorded.
        """
        objects = list(objects)
        if self._snapshots[self._current_index].matches(objects):
            return False

        # New edit after an undo discards the redo branch
        del self._snapshots[self._current_index + 1:]
        self._snapshots.append(Snapshot.capture(objects))

        overflow = len(self._snapshots) - self.max_history_size
        if overflow > 0:
            del self._snapshots[:overflow]
        self._current_index = len(self._snapshots) - 1
        return True

    def on_commit(self, commit: StoreCommit) -> None:
        """Store listener: record the collection after each user edit."""

        self.record_if_changed(commit.objects)

    def undo(self) -> Optional[List[PlacedObject]]:
        if not self.can_undo:
            return None
        self._current_index -= 1
        return self._snapshots[self._current_index].restore()

    def redo(self) -> Optional[List[PlacedObject]]:
        if not self.can_redo:
            return None
        self._current_index += 1
        return self._snapshots[self._current_index].restore()

    def reset(self, objects: Iterable[PlacedObject]) -> None:
        """Forget all history; ``objects`` becomes the only snapshot."""

        self._snapshots = [Snapshot.capture(list(objects))]
        self._current_index = 0
