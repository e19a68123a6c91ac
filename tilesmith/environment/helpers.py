"""Pure geometry helpers shared by the grid index and movement checks."""

from __future__ import annotations

from typing import Iterator, List, Tuple

from .schemas import GridPosition, GridSize, PixelRect


def rectangles_overlap(
    pos_a: GridPosition,
    size_a: GridSize,
    pos_b: GridPosition,
    size_b: GridSize,
) -> bool:
    """Half-open AABB test on grid rectangles.

    Rectangle A covers ``[x, x + w) x [y, y + h)``. Rectangles that only share
    an edge do not overlap.
    """

    return not (
        pos_a.grid_x >= pos_b.grid_x + size_b.grid_width
        or pos_a.grid_x + size_a.grid_width <= pos_b.grid_x
        or pos_a.grid_y >= pos_b.grid_y + size_b.grid_height
        or pos_a.grid_y + size_a.grid_height <= pos_b.grid_y
    )


def rectangle_contains(pos: GridPosition, size: GridSize, cell: GridPosition) -> bool:
    """Return True if ``cell`` lies inside the half-open rectangle."""

    return (
        pos.grid_x <= cell.grid_x < pos.grid_x + size.grid_width
        and pos.grid_y <= cell.grid_y < pos.grid_y + size.grid_height
    )


def occupied_cells(pos: GridPosition, size: GridSize) -> List[GridPosition]:
    """List every cell covered by a rectangle, x-major then y."""

    return [
        GridPosition(grid_x=x, grid_y=y)
        for x in range(pos.grid_x, pos.grid_x + size.grid_width)
        for y in range(pos.grid_y, pos.grid_y + size.grid_height)
    ]


def cell_key(cell: GridPosition) -> str:
    """Render a cell as the ``"x,y"`` key used by collision visualizations."""

    return f"{cell.grid_x},{cell.grid_y}"


def hit_test_aabb(a: PixelRect, b: PixelRect) -> bool:
    """Center-distance AABB test in pixel space.

    Two rectangles overlap when the distance between their centers is strictly
    less than the sum of their half extents on both axes.
    """

    # Half extents and center offsets per axis
    half_widths = a.width / 2 + b.width / 2
    half_heights = a.height / 2 + b.height / 2
    vx = (a.x + a.width / 2) - (b.x + b.width / 2)
    vy = (a.y + a.height / 2) - (b.y + b.height / 2)

    return abs(vx) < half_widths and abs(vy) < half_heights


def ring_offsets(radius: int) -> Iterator[Tuple[int, int]]:
    """Yield the perimeter offsets of the square ring at Chebyshev ``radius``.

    Iterates ``dx`` in ``[-radius, radius]`` and, inside it, ``dy`` in the
    same range, keeping only cells where ``|dx| == radius`` or
    ``|dy| == radius``. Placement search depends on this exact order to pick
    between equally distant candidates.
    """

    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            if abs(dx) != radius and abs(dy) != radius:
                continue
            yield dx, dy


def chebyshev_distance(a: GridPosition, b: GridPosition) -> int:
    return max(abs(a.grid_x - b.grid_x), abs(a.grid_y - b.grid_y))
