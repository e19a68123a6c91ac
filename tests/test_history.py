"""Tests for HistoryManager snapshot recording, undo/redo and eviction."""

import pytest
from pydantic import ValidationError

from tilesmith.environment import GridPosition, GridSize, PixelPosition, PixelSize
from tilesmith.history import HistoryManager
from tilesmith.schemas import CharacterDetails, PlacedObject, Snapshot


def make_object(object_id: str, x: int, y: int = 0) -> PlacedObject:
    return PlacedObject(
        id=object_id,
        name=object_id.title(),
        grid_position=GridPosition(grid_x=x, grid_y=y),
        grid_size=GridSize(grid_width=1, grid_height=2),
        pixel_position=PixelPosition(x=x * 32, y=y * 32),
        pixel_size=PixelSize(width=32, height=64),
        details=CharacterDetails(character_name=object_id.title()),
    )


def test_initial_state():
    history = HistoryManager([make_object("alice", 0)])

    assert history.current_index == 0
    assert history.history_length == 1
    assert history.can_undo is False
    assert history.can_redo is False
    assert history.undo() is None
    assert history.redo() is None
    assert [obj.id for obj in history.current()] == ["alice"]


def test_undo_twice_returns_to_start():
    s0 = [make_object("alice", 0)]
    s1 = s0 + [make_object("bob", 2)]
    s2 = s1 + [make_object("carol", 4)]

    history = HistoryManager(s0)
    assert history.record_if_changed(s1) is True
    assert history.record_if_changed(s2) is True

    assert history.undo() == s1
    assert history.undo() == s0
    assert history.undo() is None
    assert history.current_index == 0

    assert history.redo() == s1
    assert history.redo() == s2
    assert history.redo() is None


def test_new_edit_after_undo_discards_redo_branch():
    s0: list = []
    s1 = [make_object("alice", 0)]
    s2 = s1 + [make_object("bob", 2)]
    s3 = s1 + [make_object("carol", 6)]

    history = HistoryManager(s0)
    history.record_if_changed(s1)
    history.record_if_changed(s2)
    assert history.undo() == s1

    history.record_if_changed(s3)

    assert history.redo() is None
    assert history.can_redo is False
    assert [list(snapshot.objects) for snapshot in history.snapshots] == [s0, s1, s3]


def test_unchanged_state_is_not_recorded():
    s0 = [make_object("alice", 0)]
    history = HistoryManager(s0)

    assert history.record_if_changed([make_object("alice", 0)]) is False
    assert history.history_length == 1

    # Same objects, different values
    moved = [make_object("alice", 3)]
    assert history.record_if_changed(moved) is True
    assert history.history_length == 2


def test_snapshots_are_independent_of_live_objects():
    live = [make_object("alice", 0)]
    history = HistoryManager([])
    history.record_if_changed(live)

    live[0] = live[0].model_copy(update={"name": "Changed after recording"})
    live.append(make_object("bob", 2))

    recorded = history.snapshots[-1]
    assert [obj.name for obj in recorded.objects] == ["Alice"]

    # What undo/redo hand out is a copy as well
    history.undo()
    restored = history.redo()
    restored.append(make_object("carol", 4))
    assert [obj.id for obj in history.current()] == ["alice"]


def test_recorded_objects_cannot_be_rewritten():
    history = HistoryManager([])
    history.record_if_changed([make_object("alice", 0)])

    recorded = history.snapshots[-1].objects[0]
    with pytest.raises(ValidationError):
        recorded.name = "tampered"
    with pytest.raises(ValidationError):
        recorded.grid_position = GridPosition(grid_x=9, grid_y=9)
    with pytest.raises(ValidationError):
        recorded.details.character_name = "tampered"

    assert history.snapshots[-1].objects[0] == make_object("alice", 0)


def test_snapshot_is_frozen():
    snapshot = Snapshot.capture([make_object("alice", 0)])
    with pytest.raises(ValidationError):
        snapshot.objects = ()


def test_eviction_shifts_cursor():
    history = HistoryManager([], max_history_size=3)

    for x in range(1, 6):
        history.record_if_changed([make_object("alice", x)])

    assert history.history_length == 3
    assert history.current_index == 2
    assert [snapshot.objects[0].grid_position.grid_x for snapshot in history.snapshots] == [3, 4, 5]

    assert history.undo()[0].grid_position.grid_x == 4
    assert history.undo()[0].grid_position.grid_x == 3
    assert history.undo() is None


def test_default_capacity_is_fifty():
    history = HistoryManager([])
    for x in range(60):
        history.record_if_changed([make_object("alice", x)])

    assert history.max_history_size == 50
    assert history.history_length == 50
    assert history.current_index == 49


def test_reset_discards_history():
    history = HistoryManager([])
    history.record_if_changed([make_object("alice", 0)])
    history.record_if_changed([make_object("alice", 1)])

    history.reset([make_object("bob", 5)])

    assert history.history_length == 1
    assert history.current_index == 0
    assert history.can_undo is False
    assert [obj.id for obj in history.current()] == ["bob"]


def test_invalid_capacity():
    with pytest.raises(ValueError):
        HistoryManager([], max_history_size=0)
