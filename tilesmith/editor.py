"""
MapEditor: one map's placement state plus its undo/redo history.

Wires the pieces together so data only flows one way:

    caller -> SpatialObjectStore mutation -> GridIndex validation
           -> commit -> HistoryManager.record_if_changed

and back for undo/redo:

    HistoryManager snapshot -> SpatialObjectStore.replace

Usage:
    editor = MapEditor(DEFAULT_MAP.bounds)
    tree_id = editor.add_object(get_template("tree-oak"), PixelPosition(x=64, y=64))
    editor.remove_object(tree_id)
    editor.undo()   # tree is back
    editor.redo()   # gone again
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from .environment import (
    CollisionResult,
    CollisionVisualization,
    GridPosition,
    GridSize,
    MapBounds,
    PixelPosition,
    PixelRect,
)
from .history import HistoryManager
from .logging_utils import log_info, log_success
from .schemas import ModelTemplate, PlacedObject, PlacementResult
from .store import SpatialObjectStore


class MapEditor:
    """Facade over a SpatialObjectStore and its HistoryManager."""

    def __init__(
        self,
        bounds: Optional[MapBounds] = None,
        initial_objects: Optional[Iterable[PlacedObject]] = None,
        *,
        max_history_size: Optional[int] = None,
        max_search_radius: Optional[int] = None,
    ):
        self.store = SpatialObjectStore(
            bounds,
            initial_objects,
            max_search_radius=max_search_radius,
        )
        self.history = HistoryManager(self.store.objects, max_history_size=max_history_size)
        self.store.add_listener(self.history.on_commit)

    @property
    def bounds(self) -> MapBounds:
        return self.store.bounds

    @property
    def objects(self) -> List[PlacedObject]:
        return self.store.objects

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    # Edits ---------------------------------------------------------------

    def add_object(self, template: ModelTemplate, pixel_position: PixelPosition) -> Optional[str]:
        return self.store.add_object(template, pixel_position)

    def place_object(self, template: ModelTemplate, pixel_position: PixelPosition) -> PlacementResult:
        return self.store.place_object(template, pixel_position)

    def update_object(self, object_id: str, updates: Mapping[str, Any]) -> bool:
        return self.store.update_object(object_id, updates)

    def remove_object(self, object_id: str) -> bool:
        return self.store.remove_object(object_id)

    # Queries -------------------------------------------------------------

    def get_object(self, object_id: str) -> Optional[PlacedObject]:
        return self.store.get_object(object_id)

    def get_object_at(self, cell: GridPosition) -> Optional[PlacedObject]:
        return self.store.get_object_at(cell)

    def check_collision(
        self,
        grid_pos: GridPosition,
        grid_size: GridSize,
        exclude_id: Optional[str] = None,
    ) -> bool:
        return self.store.check_collision(grid_pos, grid_size, exclude_id)

    def get_collision_info(
        self,
        grid_pos: GridPosition,
        grid_size: GridSize,
        exclude_id: Optional[str] = None,
    ) -> CollisionResult:
        return self.store.get_collision_info(grid_pos, grid_size, exclude_id)

    def get_collision_visualization(self) -> CollisionVisualization:
        return self.store.get_collision_visualization()

    def has_pixel_overlap(self, rect: PixelRect, exclude_id: Optional[str] = None) -> bool:
        return self.store.has_pixel_overlap(rect, exclude_id)

    # History -------------------------------------------------------------

    def undo(self) -> bool:
        """Step back one snapshot. Returns False when there is nothing to undo."""

        previous = self.history.undo()
        if previous is None:
            return False
        self.store.replace(previous)
        log_success(
            f"Undo -> snapshot {self.history.current_index + 1}/{self.history.history_length}"
        )
        return True

    def redo(self) -> bool:
        """Step forward one snapshot. Returns False when there is nothing to redo."""

        following = self.history.redo()
        if following is None:
            return False
        self.store.replace(following)
        log_success(
            f"Redo -> snapshot {self.history.current_index + 1}/{self.history.history_length}"
        )
        return True

    def reset(self) -> None:
        """Remove every object and start a fresh history from the empty map."""

        self.store.replace([])
        self.history.reset([])
        log_info("Map cleared, history restarted")

    def clear_history(self) -> None:
        """Keep the current objects but forget how we got here."""

        self.history.reset(self.store.objects)
        log_info(f"History cleared, keeping {len(self.store)} objects")
