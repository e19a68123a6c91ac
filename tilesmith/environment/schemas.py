"""Pydantic schemas for grid geometry.

Grid coordinates address whole tiles; pixel coordinates are what renderers
and continuously moving entities work in. All geometry models are frozen so
they can be shared between placed objects and snapshots without aliasing
surprises.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field


class GridPosition(BaseModel):
    """Top-left cell of a rectangle in grid coordinates.

    Not bounds-checked on its own; ``GridIndex.is_within_bounds`` decides
    whether a position is usable on a given map.
    """

    model_config = ConfigDict(frozen=True)

    grid_x: int
    grid_y: int


class GridSize(BaseModel):
    """Footprint of an object in whole cells."""

    model_config = ConfigDict(frozen=True)

    grid_width: int = Field(..., gt=0)
    grid_height: int = Field(..., gt=0)


class PixelPosition(BaseModel):
    """Top-left corner in pixel space."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class PixelSize(BaseModel):
    """Rendered size in pixels."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)


class PixelRect(BaseModel):
    """Axis-aligned rectangle in pixel space (used for off-grid entities)."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)

    @property
    def position(self) -> PixelPosition:
        return PixelPosition(x=self.x, y=self.y)

    def moved_to(self, x: float, y: float) -> PixelRect:
        return self.model_copy(update={"x": x, "y": y})


class MapBounds(BaseModel):
    """Map dimensions supplied by map configuration. Read-only to the core."""

    model_config = ConfigDict(frozen=True)

    grid_width: int = Field(..., gt=0, description="Map width in cells")
    grid_height: int = Field(..., gt=0, description="Map height in cells")
    tile_size: int = Field(..., gt=0, description="Edge length of one cell in pixels")

    @property
    def pixel_width(self) -> int:
        return self.grid_width * self.tile_size

    @property
    def pixel_height(self) -> int:
        return self.grid_height * self.tile_size

    @classmethod
    def from_pixels(cls, width: float, height: float, tile_size: int) -> MapBounds:
        """Derive grid dimensions from a pixel canvas, dropping partial tiles."""

        return cls(
            grid_width=math.floor(width / tile_size),
            grid_height=math.floor(height / tile_size),
            tile_size=tile_size,
        )
