"""
Tilesmith Configuration

Loads placement defaults from environment variables with sensible defaults.
"""

import os

from dotenv import load_dotenv

from .environment.schemas import MapBounds

# Load .env file if it exists
load_dotenv()


class Config:
    """Placement defaults loaded from environment variables.

    Values only seed defaults. Anything passed explicitly to a constructor
    (MapEditor, SpatialObjectStore, HistoryManager) wins over these.
    """

    # Map geometry (the forest-village preset: 1024x768 px at 32 px tiles)
    GRID_WIDTH: int = int(os.getenv("TILESMITH_GRID_WIDTH", "32"))
    GRID_HEIGHT: int = int(os.getenv("TILESMITH_GRID_HEIGHT", "24"))
    TILE_SIZE: int = int(os.getenv("TILESMITH_TILE_SIZE", "32"))

    # Undo/redo depth, oldest snapshots are evicted past this
    MAX_HISTORY_SIZE: int = int(os.getenv("TILESMITH_MAX_HISTORY", "50"))

    # Chebyshev radius scanned when a placement lands on an invalid cell
    MAX_SEARCH_RADIUS: int = int(os.getenv("TILESMITH_SEARCH_RADIUS", "10"))

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors if values are unusable."""
        for name in ("GRID_WIDTH", "GRID_HEIGHT", "TILE_SIZE", "MAX_HISTORY_SIZE"):
            if getattr(cls, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(cls, name)}")

        if cls.MAX_SEARCH_RADIUS < 0:
            raise ValueError(
                f"MAX_SEARCH_RADIUS must be >= 0, got {cls.MAX_SEARCH_RADIUS}"
            )

    @classmethod
    def default_bounds(cls) -> MapBounds:
        """Build the MapBounds described by the current configuration."""
        return MapBounds(
            grid_width=cls.GRID_WIDTH,
            grid_height=cls.GRID_HEIGHT,
            tile_size=cls.TILE_SIZE,
        )

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "Tilesmith Configuration:",
            f"  Grid: {cls.GRID_WIDTH}x{cls.GRID_HEIGHT} cells",
            f"  Tile Size: {cls.TILE_SIZE}px",
            f"  Max History: {cls.MAX_HISTORY_SIZE} snapshots",
            f"  Search Radius: {cls.MAX_SEARCH_RADIUS} cells",
        ]
        return "\n".join(lines)
