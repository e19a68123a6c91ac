"""Grid index for rectangular placements.

``GridIndex`` is the stateless geometry tier: pixel/grid conversion, bounds
checks, overlap tests, the ring-scan search for the nearest free cell, and a
pixel-space overlap test for entities that are not grid-snapped. It never
holds objects itself; every query takes the current collection as an
argument, so the store above it stays the single owner of state.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Sequence, Set

from .helpers import (
    cell_key,
    hit_test_aabb,
    occupied_cells,
    rectangles_overlap,
    ring_offsets,
)
from .schemas import (
    GridPosition,
    GridSize,
    MapBounds,
    PixelPosition,
    PixelRect,
    PixelSize,
)

DEFAULT_SEARCH_RADIUS = 10


class Placeable(Protocol):
    """Anything the index can test: an id plus a grid rectangle."""

    id: str
    grid_position: GridPosition
    grid_size: GridSize


@dataclass
class CollisionResult:
    """Outcome of testing one rectangle against the map and other objects."""

    has_collision: bool
    colliding_objects: List[Any] = field(default_factory=list)
    is_out_of_bounds: bool = False
    valid_position: bool = True


@dataclass
class ObjectBounds:
    """Cells covered by one object, for renderers drawing footprints."""

    object: Any
    cells: List[GridPosition] = field(default_factory=list)


@dataclass
class CollisionVisualization:
    """Read-only occupancy view. Renderers draw it; nothing mutates through it."""

    occupied_cells: Set[str] = field(default_factory=set)
    per_object_bounds: List[ObjectBounds] = field(default_factory=list)


class GridIndex:
    """Geometry service parameterized by map size and tile size."""

    def __init__(self, bounds: MapBounds):
        self.bounds = bounds

    @property
    def grid_width(self) -> int:
        return self.bounds.grid_width

    @property
    def grid_height(self) -> int:
        return self.bounds.grid_height

    @property
    def tile_size(self) -> int:
        return self.bounds.tile_size

    # ------------------------------------------------------------------
    # Coordinate conversion
    # ------------------------------------------------------------------

    def pixel_to_grid(self, pixel: PixelPosition) -> GridPosition:
        return GridPosition(
            grid_x=math.floor(pixel.x / self.tile_size),
            grid_y=math.floor(pixel.y / self.tile_size),
        )

    def grid_to_pixel(self, grid: GridPosition) -> PixelPosition:
        return PixelPosition(
            x=grid.grid_x * self.tile_size,
            y=grid.grid_y * self.tile_size,
        )

    def snap_to_grid(self, pixel: PixelPosition) -> PixelPosition:
        """Move a pixel position to the top-left corner of its cell."""

        return self.grid_to_pixel(self.pixel_to_grid(pixel))

    def grid_size_to_pixels(self, size: GridSize) -> PixelSize:
        return PixelSize(
            width=size.grid_width * self.tile_size,
            height=size.grid_height * self.tile_size,
        )

    # ------------------------------------------------------------------
    # Rectangle tests
    # ------------------------------------------------------------------

    def is_within_bounds(self, grid_pos: GridPosition, grid_size: GridSize) -> bool:
        return (
            grid_pos.grid_x >= 0
            and grid_pos.grid_y >= 0
            and grid_pos.grid_x + grid_size.grid_width <= self.grid_width
            and grid_pos.grid_y + grid_size.grid_height <= self.grid_height
        )

    @staticmethod
    def rectangles_overlap(
        pos_a: GridPosition,
        size_a: GridSize,
        pos_b: GridPosition,
        size_b: GridSize,
    ) -> bool:
        return rectangles_overlap(pos_a, size_a, pos_b, size_b)

    @staticmethod
    def occupied_cells(grid_pos: GridPosition, grid_size: GridSize) -> List[GridPosition]:
        return occupied_cells(grid_pos, grid_size)

    def check_collision(
        self,
        grid_pos: GridPosition,
        grid_size: GridSize,
        objects: Sequence[Placeable],
        exclude_id: Optional[str] = None,
    ) -> CollisionResult:
        """Test a rectangle against the map edges and every object.

        ``exclude_id`` lets an object being moved ignore its own footprint.
        """

        is_out_of_bounds = not self.is_within_bounds(grid_pos, grid_size)
        colliding = [
            obj
            for obj in objects
            if not (exclude_id is not None and obj.id == exclude_id)
            and rectangles_overlap(grid_pos, grid_size, obj.grid_position, obj.grid_size)
        ]
        has_collision = bool(colliding)

        return CollisionResult(
            has_collision=has_collision,
            colliding_objects=colliding,
            is_out_of_bounds=is_out_of_bounds,
            valid_position=not has_collision and not is_out_of_bounds,
        )

    def find_nearest_valid_position(
        self,
        target: GridPosition,
        grid_size: GridSize,
        objects: Sequence[Placeable],
        max_search_radius: int = DEFAULT_SEARCH_RADIUS,
        exclude_id: Optional[str] = None,
    ) -> Optional[GridPosition]:
        """Return the first free position found by the ring scan, or None.

        The target itself is tried first, then the perimeter of each square
        ring for radius 1..max_search_radius. The result therefore has the
        smallest Chebyshev radius available; ties within a ring are broken by
        scan order (dx outer, dy inner), not by Euclidean distance.
        """

        if self.check_collision(target, grid_size, objects, exclude_id).valid_position:
            return target

        for radius in range(1, max_search_radius + 1):
            for dx, dy in ring_offsets(radius):
                candidate = GridPosition(grid_x=target.grid_x + dx, grid_y=target.grid_y + dy)
                if self.check_collision(candidate, grid_size, objects, exclude_id).valid_position:
                    return candidate

        return None

    def get_collision_visualization(self, objects: Sequence[Placeable]) -> CollisionVisualization:
        view = CollisionVisualization()
        for obj in objects:
            cells = occupied_cells(obj.grid_position, obj.grid_size)
            view.per_object_bounds.append(ObjectBounds(object=obj, cells=cells))
            view.occupied_cells.update(cell_key(cell) for cell in cells)
        return view

    # ------------------------------------------------------------------
    # Pixel space
    # ------------------------------------------------------------------

    def pixel_rect_of(self, obj: Placeable) -> PixelRect:
        """Pixel rectangle of an object, derived from its grid rectangle if needed."""

        position = getattr(obj, "pixel_position", None) or self.grid_to_pixel(obj.grid_position)
        size = getattr(obj, "pixel_size", None) or self.grid_size_to_pixels(obj.grid_size)
        return PixelRect(x=position.x, y=position.y, width=size.width, height=size.height)

    @staticmethod
    def hit_test_aabb(a: PixelRect, b: PixelRect) -> bool:
        return hit_test_aabb(a, b)

    def has_pixel_overlap(
        self,
        rect: PixelRect,
        objects: Sequence[Placeable],
        exclude_id: Optional[str] = None,
    ) -> bool:
        """Precise pixel-space test for entities that are not grid-snapped.

        Uses each object's rendered pixel rectangle rather than its cells, so
        it catches visual overlaps a coarse grid check lets through.
        """

        for obj in objects:
            if exclude_id is not None and obj.id == exclude_id:
                continue
            if hit_test_aabb(rect, self.pixel_rect_of(obj)):
                return True
        return False
