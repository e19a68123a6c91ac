"""
SpatialObjectStore: the single owner of placed objects.

Every user-driven mutation (add, update, remove) is validated against the
GridIndex before it is committed, so the collection always satisfies:

1. Each object's grid rectangle lies inside the map
2. No two objects' grid rectangles overlap
3. Object ids are unique

Expected failures (collisions, out-of-bounds moves, exhausted placement
search) never raise. They leave the collection untouched, print a warning via
``log_warning``, and surface through the return value. Only malformed input
raises (pydantic ``ValidationError`` or ``ValueError``).

Two kinds of writes:
- User mutations (add_object/place_object/update_object/remove_object) notify
  commit listeners with a ``StoreCommit``. HistoryManager listens here.
- ``replace(objects)`` swaps the whole collection (undo/redo, loading) and
  never notifies, so history can't observe its own restores.

Usage:
    store = SpatialObjectStore(MapBounds(grid_width=32, grid_height=24, tile_size=32))
    object_id = store.add_object(get_template("npc-guard"), PixelPosition(x=40, y=70))
    store.update_object(object_id, {"grid_position": GridPosition(grid_x=5, grid_y=5)})
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Literal, Mapping, Optional, Type, TypeVar
from uuid import uuid4

from pydantic import BaseModel

from .config import Config
from .environment import (
    CollisionResult,
    CollisionVisualization,
    GridIndex,
    GridPosition,
    GridSize,
    MapBounds,
    PixelPosition,
    PixelRect,
    chebyshev_distance,
    rectangle_contains,
)
from .logging_utils import log_deterministic, log_error, log_info, log_warning
from .schemas import (
    ModelTemplate,
    PlacedObject,
    PlacementError,
    PlacementResult,
)
from .templates import build_details

M = TypeVar("M", bound=BaseModel)

CommitKind = Literal["add", "update", "remove"]

# Fields update_object accepts. "position" is kept as an alias for callers
# that speak in plain pixel positions.
_UPDATABLE_FIELDS = {
    "name",
    "pixel_position",
    "grid_position",
    "grid_size",
    "pixel_size",
    "is_placed",
    "details",
}
_FIELD_ALIASES = {"position": "pixel_position"}


@dataclass(frozen=True)
class StoreCommit:
    """A committed user mutation, delivered to commit listeners.

    ``objects`` is the collection right after the commit. Listeners must treat
    it as read-only; HistoryManager copies it before keeping anything.
    """

    kind: CommitKind
    object_id: str
    objects: List[PlacedObject] = field(default_factory=list)


CommitListener = Callable[[StoreCommit], None]


def _coerce(model: Type[M], value: Any) -> M:
    """Accept either a model instance or its plain-dict form."""

    if isinstance(value, model):
        return value
    return model.model_validate(value)


class SpatialObjectStore:
    """Authoritative, validated collection of placed objects."""

    def __init__(
        self,
        bounds: Optional[MapBounds] = None,
        objects: Optional[Iterable[PlacedObject]] = None,
        *,
        max_search_radius: Optional[int] = None,
    ):
        """Create a store for one map.

        Args:
            bounds: Map dimensions. Defaults to ``Config.default_bounds()``
            objects: Initial objects; must already satisfy the invariants
            max_search_radius: Ring-scan radius used when a placement lands on
                an invalid cell. Defaults to ``Config.MAX_SEARCH_RADIUS``

        Raises:
            ValueError: If the initial objects overlap, leave the map, or
                repeat an id
        """
        self.bounds = bounds or Config.default_bounds()
        self.index = GridIndex(self.bounds)
        self.max_search_radius = (
            Config.MAX_SEARCH_RADIUS if max_search_radius is None else max_search_radius
        )
        self._objects: List[PlacedObject] = self._validated(objects or [])
        self._listeners: List[CommitListener] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def objects(self) -> List[PlacedObject]:
        """Live objects in collection order. Read-only for callers."""

        return list(self._objects)

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, object_id: object) -> bool:
        return any(obj.id == object_id for obj in self._objects)

    def get_object(self, object_id: str) -> Optional[PlacedObject]:
        for obj in self._objects:
            if obj.id == object_id:
                return obj
        return None

    def get_object_at(self, cell: GridPosition) -> Optional[PlacedObject]:
        """Return the first object whose rectangle contains ``cell``.

        With no overlaps there is at most one match, so collection order only
        matters if the invariant was broken from outside.
        """
        cell = _coerce(GridPosition, cell)
        for obj in self._objects:
            if rectangle_contains(obj.grid_position, obj.grid_size, cell):
                return obj
        return None

    def check_collision(
        self,
        grid_pos: GridPosition,
        grid_size: GridSize,
        exclude_id: Optional[str] = None,
    ) -> bool:
        """Return True if the rectangle is blocked (overlap or out of bounds)."""

        return not self.get_collision_info(grid_pos, grid_size, exclude_id).valid_position

    def get_collision_info(
        self,
        grid_pos: GridPosition,
        grid_size: GridSize,
        exclude_id: Optional[str] = None,
    ) -> CollisionResult:
        return self.index.check_collision(
            _coerce(GridPosition, grid_pos),
            _coerce(GridSize, grid_size),
            self._objects,
            exclude_id,
        )

    def get_collision_visualization(self) -> CollisionVisualization:
        return self.index.get_collision_visualization(self._objects)

    def has_pixel_overlap(self, rect: PixelRect, exclude_id: Optional[str] = None) -> bool:
        return self.index.has_pixel_overlap(_coerce(PixelRect, rect), self._objects, exclude_id)

    # ------------------------------------------------------------------
    # Commit listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: CommitListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: CommitListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, kind: CommitKind, object_id: str) -> None:
        commit = StoreCommit(kind=kind, object_id=object_id, objects=list(self._objects))
        for listener in list(self._listeners):
            listener(commit)

    # ------------------------------------------------------------------
    # User mutations
    # ------------------------------------------------------------------

    def add_object(self, template: ModelTemplate, pixel_position: PixelPosition) -> Optional[str]:
        """Place an object from ``template`` near ``pixel_position``.

        Returns the new id, or None when no valid cell exists within the
        search radius (nothing is created in that case). Use ``place_object``
        to learn why a placement failed or whether it was relocated.
        """
        return self.place_object(template, pixel_position).object_id

    def place_object(self, template: ModelTemplate, pixel_position: PixelPosition) -> PlacementResult:
        """Place an object and report the outcome explicitly.

        Data flow:
        1. Snap the pixel position to its cell
        2. If that cell is blocked, ring-scan for the nearest free one
        3. Build the object (category details come from the template) and
           append it under a fresh id
        """
        template = _coerce(ModelTemplate, template)
        pixel_position = _coerce(PixelPosition, pixel_position)
        grid_size = template.default_grid_size

        snapped = self.index.snap_to_grid(pixel_position)
        grid_position = self.index.pixel_to_grid(snapped)

        relocated = False
        if not self.index.check_collision(grid_position, grid_size, self._objects).valid_position:
            nearest = self.index.find_nearest_valid_position(
                grid_position,
                grid_size,
                self._objects,
                max_search_radius=self.max_search_radius,
            )
            if nearest is None:
                log_warning(
                    f"Cannot place '{template.name}': no valid position within "
                    f"{self.max_search_radius} cells of ({grid_position.grid_x}, {grid_position.grid_y})"
                )
                return PlacementResult(error=PlacementError.PLACEMENT_EXHAUSTED)
            log_info(
                f"'{template.name}' blocked at ({grid_position.grid_x}, {grid_position.grid_y}), "
                f"moved {chebyshev_distance(nearest, grid_position)} cell(s) to "
                f"({nearest.grid_x}, {nearest.grid_y})"
            )
            grid_position = nearest
            relocated = True

        placed = PlacedObject(
            id=self._generate_id(),
            name=template.name,
            grid_position=grid_position,
            grid_size=grid_size,
            pixel_position=self.index.grid_to_pixel(grid_position),
            pixel_size=template.default_size,
            details=build_details(template),
        )
        self._objects.append(placed)
        log_deterministic(
            f"Placed '{placed.name}' ({placed.id}) at "
            f"({grid_position.grid_x}, {grid_position.grid_y})"
        )
        self._notify("add", placed.id)

        return PlacementResult(
            object_id=placed.id,
            grid_position=grid_position,
            relocated=relocated,
        )

    def update_object(self, object_id: str, updates: Mapping[str, Any]) -> bool:
        """Apply a partial update to one object.

        Moving via ``pixel_position`` snaps to the grid and derives
        ``grid_position``; moving via ``grid_position`` derives
        ``pixel_position``. Moves and resizes are re-validated with the object
        excluded from its own collision test. A rejected update leaves the
        object exactly as it was.

        Returns:
            True if the update was committed, False if the id is unknown or
            the new rectangle is blocked

        Raises:
            ValueError: If both pixel_position and grid_position are given,
                if ``id`` would change, or if a field is not updatable
            pydantic.ValidationError: If a value has the wrong shape
        """
        normalized = self._normalize_updates(object_id, updates)

        position = next((i for i, obj in enumerate(self._objects) if obj.id == object_id), None)
        if position is None:
            log_warning(f"Cannot update '{object_id}': no such object")
            return False
        current = self._objects[position]

        data = current.model_dump()
        data.update(normalized)
        if "pixel_position" in normalized:
            snapped = self.index.snap_to_grid(_coerce(PixelPosition, normalized["pixel_position"]))
            data["pixel_position"] = snapped
            data["grid_position"] = self.index.pixel_to_grid(snapped)
        elif "grid_position" in normalized:
            data["pixel_position"] = self.index.grid_to_pixel(
                _coerce(GridPosition, normalized["grid_position"])
            )
        candidate = PlacedObject.model_validate(data)

        geometry_changed = (
            candidate.grid_position != current.grid_position
            or candidate.grid_size != current.grid_size
        )
        if geometry_changed:
            result = self.index.check_collision(
                candidate.grid_position,
                candidate.grid_size,
                self._objects,
                exclude_id=object_id,
            )
            if not result.valid_position:
                reason = "out of bounds" if result.is_out_of_bounds else "would collide"
                log_warning(f"Cannot move '{current.name}' ({object_id}): position {reason}")
                return False

        if candidate == current:
            return True

        self._objects[position] = candidate
        self._notify("update", object_id)
        return True

    def remove_object(self, object_id: str) -> bool:
        """Delete an object by id. Returns False (and does nothing) if absent."""

        remaining = [obj for obj in self._objects if obj.id != object_id]
        if len(remaining) == len(self._objects):
            return False
        self._objects = remaining
        self._notify("remove", object_id)
        return True

    # ------------------------------------------------------------------
    # Whole-collection replacement
    # ------------------------------------------------------------------

    def replace(self, objects: Iterable[PlacedObject]) -> None:
        """Swap in a complete collection without notifying listeners.

        Used for undo/redo and for loading saved maps. The incoming objects
        are validated and copied, so the caller keeps no handle on live state.

        Raises:
            ValueError: If the objects break an invariant
        """
        try:
            self._objects = self._validated(objects)
        except ValueError as exc:
            log_error(f"Rejected object collection: {exc}")
            raise

    def to_records(self) -> List[Dict[str, Any]]:
        """Plain JSON-compatible dicts for storage or share-link collaborators."""

        return [obj.model_dump(mode="json") for obj in self._objects]

    @classmethod
    def from_records(
        cls,
        bounds: MapBounds,
        records: Iterable[Mapping[str, Any]],
        **kwargs: Any,
    ) -> SpatialObjectStore:
        return cls(bounds, [PlacedObject.model_validate(record) for record in records], **kwargs)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _generate_id(self) -> str:
        existing = {obj.id for obj in self._objects}
        while True:
            candidate = f"model_{uuid4().hex[:12]}"
            if candidate not in existing:
                return candidate

    def _normalize_updates(self, object_id: str, updates: Mapping[str, Any]) -> Dict[str, Any]:
        normalized: Dict[str, Any] = {}
        for key, value in updates.items():
            if key == "id":
                if value != object_id:
                    raise ValueError("update_object cannot change an object's id")
                continue
            key = _FIELD_ALIASES.get(key, key)
            if key not in _UPDATABLE_FIELDS:
                raise ValueError(f"Field '{key}' cannot be updated")
            normalized[key] = value

        if "pixel_position" in normalized and "grid_position" in normalized:
            raise ValueError("Provide either pixel_position or grid_position, not both")
        return normalized

    def _validated(self, objects: Iterable[PlacedObject]) -> List[PlacedObject]:
        """Copy ``objects`` and check ids, bounds and overlaps."""

        accepted: List[PlacedObject] = []
        seen_ids = set()
        for obj in objects:
            obj = _coerce(PlacedObject, obj).model_copy(deep=True)
            if obj.id in seen_ids:
                raise ValueError(f"Duplicate object id '{obj.id}'")
            result = self.index.check_collision(obj.grid_position, obj.grid_size, accepted)
            if result.is_out_of_bounds:
                raise ValueError(f"Object '{obj.id}' lies outside the map")
            if result.has_collision:
                other = result.colliding_objects[0].id
                raise ValueError(f"Object '{obj.id}' overlaps '{other}'")
            seen_ids.add(obj.id)
            accepted.append(obj)
        return accepted
