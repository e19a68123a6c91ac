"""Grid geometry tier for Tilesmith."""

from .grid import (
    DEFAULT_SEARCH_RADIUS,
    CollisionResult,
    CollisionVisualization,
    GridIndex,
    ObjectBounds,
    Placeable,
)
from .schemas import (
    GridPosition,
    GridSize,
    MapBounds,
    PixelPosition,
    PixelRect,
    PixelSize,
)
from .helpers import (
    cell_key,
    chebyshev_distance,
    hit_test_aabb,
    occupied_cells,
    rectangle_contains,
    rectangles_overlap,
    ring_offsets,
)

__all__ = [
    "DEFAULT_SEARCH_RADIUS",
    "CollisionResult",
    "CollisionVisualization",
    "GridIndex",
    "ObjectBounds",
    "Placeable",
    "GridPosition",
    "GridSize",
    "MapBounds",
    "PixelPosition",
    "PixelRect",
    "PixelSize",
    "cell_key",
    "chebyshev_distance",
    "hit_test_aabb",
    "occupied_cells",
    "rectangle_contains",
    "rectangles_overlap",
    "ring_offsets",
]
