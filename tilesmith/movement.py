"""Movement checks for entities that are not grid-snapped (e.g. the player avatar).

An avatar moves in pixel space, so a cell-level test alone is too coarse: it
looks at the cell under the avatar's top-left corner only. ``can_occupy``
runs the coarse grid check first and then the precise pixel-space overlap
test against each object's rendered rectangle.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from .environment import GridIndex, GridSize, PixelRect, Placeable


@dataclass(frozen=True)
class MoveResult:
    rect: PixelRect
    moved: bool


def can_occupy(
    index: GridIndex,
    rect: PixelRect,
    objects: Sequence[Placeable],
    exclude_id: Optional[str] = None,
) -> bool:
    """Return True if ``rect`` fits on the map without touching any object."""

    bounds = index.bounds
    if (
        rect.x < 0
        or rect.y < 0
        or rect.x + rect.width > bounds.pixel_width
        or rect.y + rect.height > bounds.pixel_height
    ):
        return False

    grid_pos = index.pixel_to_grid(rect.position)
    grid_size = GridSize(
        grid_width=math.ceil(rect.width / index.tile_size),
        grid_height=math.ceil(rect.height / index.tile_size),
    )
    if not index.check_collision(grid_pos, grid_size, objects, exclude_id).valid_position:
        return False

    return not index.has_pixel_overlap(rect, objects, exclude_id)


def step_avatar(
    index: GridIndex,
    rect: PixelRect,
    dx: float,
    dy: float,
    objects: Sequence[Placeable],
    exclude_id: Optional[str] = None,
) -> MoveResult:
    """Advance ``rect`` by ``(dx, dy)``, one axis at a time.

    The x step is tried first, then the y step from wherever x ended up, so an
    avatar blocked on one axis still slides along the other.
    """

    moved = False

    if dx:
        candidate = rect.moved_to(rect.x + dx, rect.y)
        if can_occupy(index, candidate, objects, exclude_id):
            rect = candidate
            moved = True

    if dy:
        candidate = rect.moved_to(rect.x, rect.y + dy)
        if can_occupy(index, candidate, objects, exclude_id):
            rect = candidate
            moved = True

    return MoveResult(rect=rect, moved=moved)
