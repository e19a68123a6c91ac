"""
Tilesmith - collision-safe object placement for tile-grid map editors.

Places rectangular objects on a fixed-size grid, guarantees they never
overlap or leave the map, and keeps a bounded undo/redo history of edits.

Pure library: synchronous, single caller, no I/O.
Renderers, storage and chat layers consume the plain records it returns.
"""

__version__ = "0.1.0"

# Geometry tier
from .environment import (
    CollisionResult,
    CollisionVisualization,
    GridIndex,
    GridPosition,
    GridSize,
    MapBounds,
    ObjectBounds,
    PixelPosition,
    PixelRect,
    PixelSize,
)

# Core schemas
from .schemas import (
    BuildingDetails,
    CharacterDetails,
    ModelCategory,
    ModelTemplate,
    PlacedObject,
    PlacementError,
    PlacementResult,
    PlantDetails,
    Snapshot,
)

# State and history
from .store import SpatialObjectStore, StoreCommit
from .history import HistoryManager
from .editor import MapEditor

# Catalogs and helpers
from .config import Config
from .templates import (
    ALL_TEMPLATES,
    BUILDING_TEMPLATES,
    CHARACTER_TEMPLATES,
    PLANT_TEMPLATES,
    TEMPLATES_BY_CATEGORY,
    build_details,
    get_template,
)
from .maps import DEFAULT_MAP, PRESET_MAPS, MapPreset, get_map_preset
from .movement import MoveResult, can_occupy, step_avatar

__all__ = [
    # Geometry
    "CollisionResult",
    "CollisionVisualization",
    "GridIndex",
    "GridPosition",
    "GridSize",
    "MapBounds",
    "ObjectBounds",
    "PixelPosition",
    "PixelRect",
    "PixelSize",
    # Schemas
    "BuildingDetails",
    "CharacterDetails",
    "ModelCategory",
    "ModelTemplate",
    "PlacedObject",
    "PlacementError",
    "PlacementResult",
    "PlantDetails",
    "Snapshot",
    # State and history
    "SpatialObjectStore",
    "StoreCommit",
    "HistoryManager",
    "MapEditor",
    # Catalogs and helpers
    "Config",
    "ALL_TEMPLATES",
    "BUILDING_TEMPLATES",
    "CHARACTER_TEMPLATES",
    "PLANT_TEMPLATES",
    "TEMPLATES_BY_CATEGORY",
    "build_details",
    "get_template",
    "DEFAULT_MAP",
    "PRESET_MAPS",
    "MapPreset",
    "get_map_preset",
    "MoveResult",
    "can_occupy",
    "step_avatar",
]
