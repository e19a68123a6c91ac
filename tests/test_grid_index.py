"""Tests for GridIndex geometry: conversion, bounds, overlap and ring-scan search."""

import random

from tilesmith.environment import (
    GridIndex,
    GridPosition,
    GridSize,
    MapBounds,
    PixelPosition,
    PixelRect,
    PixelSize,
    chebyshev_distance,
    ring_offsets,
)
from tilesmith.schemas import PlacedObject, PlantDetails


def make_index(grid_width: int = 32, grid_height: int = 24, tile_size: int = 32) -> GridIndex:
    return GridIndex(MapBounds(grid_width=grid_width, grid_height=grid_height, tile_size=tile_size))


def make_object(object_id: str, x: int, y: int, w: int = 1, h: int = 1, tile: int = 32) -> PlacedObject:
    return PlacedObject(
        id=object_id,
        name=object_id,
        grid_position=GridPosition(grid_x=x, grid_y=y),
        grid_size=GridSize(grid_width=w, grid_height=h),
        pixel_position=PixelPosition(x=x * tile, y=y * tile),
        pixel_size=PixelSize(width=w * tile, height=h * tile),
        details=PlantDetails(plant_type="tree-oak"),
    )


def test_pixel_grid_conversion():
    index = make_index()

    assert index.pixel_to_grid(PixelPosition(x=40, y=70)) == GridPosition(grid_x=1, grid_y=2)
    assert index.pixel_to_grid(PixelPosition(x=31.9, y=32)) == GridPosition(grid_x=0, grid_y=1)
    # Floor, not truncation, for negative coordinates
    assert index.pixel_to_grid(PixelPosition(x=-1, y=-33)) == GridPosition(grid_x=-1, grid_y=-2)

    assert index.grid_to_pixel(GridPosition(grid_x=3, grid_y=4)) == PixelPosition(x=96, y=128)


def test_snap_to_grid_is_idempotent():
    index = make_index()
    rng = random.Random(7)

    for _ in range(200):
        pixel = PixelPosition(x=rng.uniform(-200, 1200), y=rng.uniform(-200, 900))
        once = index.snap_to_grid(pixel)
        assert index.snap_to_grid(once) == once

    assert index.snap_to_grid(PixelPosition(x=47, y=95)) == PixelPosition(x=32, y=64)


def test_grid_pixel_round_trip():
    index = make_index(tile_size=16)
    for gx in range(-3, 40):
        for gy in (-2, 0, 5, 23):
            grid = GridPosition(grid_x=gx, grid_y=gy)
            assert index.pixel_to_grid(index.grid_to_pixel(grid)) == grid


def test_is_within_bounds_edges():
    index = make_index()
    one = GridSize(grid_width=1, grid_height=1)
    tall = GridSize(grid_width=1, grid_height=2)

    assert index.is_within_bounds(GridPosition(grid_x=0, grid_y=0), one) is True
    assert index.is_within_bounds(GridPosition(grid_x=31, grid_y=23), one) is True
    assert index.is_within_bounds(GridPosition(grid_x=31, grid_y=0), GridSize(grid_width=2, grid_height=1)) is False
    assert index.is_within_bounds(GridPosition(grid_x=-1, grid_y=0), one) is False
    assert index.is_within_bounds(GridPosition(grid_x=0, grid_y=22), tall) is True
    assert index.is_within_bounds(GridPosition(grid_x=0, grid_y=23), tall) is False


def test_rectangles_overlap_is_half_open():
    size = GridSize(grid_width=2, grid_height=2)
    origin = GridPosition(grid_x=0, grid_y=0)

    # Sharing an edge is not an overlap
    assert GridIndex.rectangles_overlap(origin, size, GridPosition(grid_x=2, grid_y=0), size) is False
    assert GridIndex.rectangles_overlap(origin, size, GridPosition(grid_x=0, grid_y=2), size) is False
    # One shared cell is
    assert GridIndex.rectangles_overlap(origin, size, GridPosition(grid_x=1, grid_y=1), size) is True


def test_check_collision_reports_objects_and_bounds():
    index = make_index()
    house = make_object("house", 4, 4, w=4, h=3)
    well = make_object("well", 10, 4, w=2, h=2)
    objects = [house, well]

    result = index.check_collision(GridPosition(grid_x=6, grid_y=5), GridSize(grid_width=5, grid_height=1), objects)
    assert result.has_collision is True
    assert [obj.id for obj in result.colliding_objects] == ["house", "well"]
    assert result.is_out_of_bounds is False
    assert result.valid_position is False

    # An object being moved ignores itself
    result = index.check_collision(GridPosition(grid_x=5, grid_y=4), house.grid_size, objects, exclude_id="house")
    assert result.valid_position is True

    result = index.check_collision(GridPosition(grid_x=31, grid_y=0), GridSize(grid_width=2, grid_height=1), [])
    assert result.is_out_of_bounds is True
    assert result.has_collision is False
    assert result.valid_position is False


def test_find_nearest_returns_target_when_free():
    index = make_index()
    target = GridPosition(grid_x=5, grid_y=5)
    assert index.find_nearest_valid_position(target, GridSize(grid_width=1, grid_height=1), []) == target


def test_find_nearest_follows_ring_scan_order():
    index = make_index()
    size = GridSize(grid_width=1, grid_height=2)
    objects = [make_object("merchant", 0, 0, w=1, h=2)]

    # Radius 1 scan from (0,0): x=-1 and y=-1 cells are off the map, (0,1)
    # still overlaps the merchant, so (1,0) is the first free perimeter cell.
    found = index.find_nearest_valid_position(GridPosition(grid_x=0, grid_y=0), size, objects)
    assert found == GridPosition(grid_x=1, grid_y=0)


def test_find_nearest_returns_none_when_exhausted():
    index = make_index(grid_width=3, grid_height=3)
    objects = [make_object("block", 0, 0, w=3, h=3)]

    found = index.find_nearest_valid_position(
        GridPosition(grid_x=1, grid_y=1), GridSize(grid_width=1, grid_height=1), objects
    )
    assert found is None


def test_find_nearest_respects_search_radius():
    index = make_index()
    size = GridSize(grid_width=4, grid_height=3)
    target = GridPosition(grid_x=30, grid_y=0)

    # Needs two columns of shift to fit inside 32 columns
    assert index.find_nearest_valid_position(target, size, [], max_search_radius=1) is None
    assert index.find_nearest_valid_position(target, size, [], max_search_radius=2) == GridPosition(grid_x=28, grid_y=0)


def test_find_nearest_has_minimal_chebyshev_radius():
    index = make_index(grid_width=12, grid_height=10)
    rng = random.Random(42)

    for _ in range(40):
        objects = []
        for i in range(rng.randint(3, 12)):
            candidate = make_object(f"o{i}", rng.randrange(0, 11), rng.randrange(0, 9), w=rng.randint(1, 2), h=rng.randint(1, 2))
            if index.check_collision(candidate.grid_position, candidate.grid_size, objects).valid_position:
                objects.append(candidate)

        size = GridSize(grid_width=rng.randint(1, 3), grid_height=rng.randint(1, 3))
        target = GridPosition(grid_x=rng.randrange(-2, 13), grid_y=rng.randrange(-2, 11))
        found = index.find_nearest_valid_position(target, size, objects, max_search_radius=6)

        def valid_at(radius: int) -> bool:
            cells = [(0, 0)] if radius == 0 else list(ring_offsets(radius))
            return any(
                index.check_collision(
                    GridPosition(grid_x=target.grid_x + dx, grid_y=target.grid_y + dy), size, objects
                ).valid_position
                for dx, dy in cells
            )

        if found is None:
            assert not any(valid_at(r) for r in range(0, 7))
            continue

        assert index.check_collision(found, size, objects).valid_position
        radius = chebyshev_distance(found, target)
        assert radius <= 6
        assert not any(valid_at(r) for r in range(0, radius))


def test_ring_offsets_cover_only_the_perimeter():
    offsets = list(ring_offsets(2))
    assert len(offsets) == 16
    assert all(max(abs(dx), abs(dy)) == 2 for dx, dy in offsets)
    assert offsets[0] == (-2, -2)
    assert offsets[-1] == (2, 2)


def test_collision_visualization():
    index = make_index()
    objects = [make_object("guard", 0, 0, w=1, h=2), make_object("well", 3, 3, w=2, h=2)]

    view = index.get_collision_visualization(objects)

    assert view.occupied_cells == {"0,0", "0,1", "3,3", "3,4", "4,3", "4,4"}
    assert [bounds.object.id for bounds in view.per_object_bounds] == ["guard", "well"]
    assert view.per_object_bounds[0].cells == [
        GridPosition(grid_x=0, grid_y=0),
        GridPosition(grid_x=0, grid_y=1),
    ]


def test_has_pixel_overlap_uses_rendered_rectangles():
    index = make_index()
    tree = make_object("tree", 2, 2, w=1, h=2)  # pixels (64, 64) to (96, 128)
    objects = [tree]

    # Touching the right edge does not count
    assert index.has_pixel_overlap(PixelRect(x=96, y=64, width=32, height=32), objects) is False
    assert index.has_pixel_overlap(PixelRect(x=80, y=100, width=20, height=20), objects) is True
    assert index.has_pixel_overlap(PixelRect(x=80, y=100, width=20, height=20), objects, exclude_id="tree") is False


def test_hit_test_aabb_is_symmetric():
    a = PixelRect(x=0, y=0, width=10, height=10)
    b = PixelRect(x=9.5, y=9.5, width=4, height=4)
    c = PixelRect(x=10, y=0, width=4, height=4)

    assert GridIndex.hit_test_aabb(a, b) is True
    assert GridIndex.hit_test_aabb(b, a) is True
    assert GridIndex.hit_test_aabb(a, c) is False
