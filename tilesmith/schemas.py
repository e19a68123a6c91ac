"""
Pydantic schemas for the Tilesmith placement core.

All records exchanged with collaborators (renderers, storage, share links) are
defined here.

Design Philosophy:
- Placed objects are plain, acyclic records that dump straight to JSON
- Category-specific data lives in a tagged union discriminated on ``category``
- The placement core only reads ``id``, ``grid_position`` and ``grid_size``;
  category details travel along untouched
- Placed objects are frozen; snapshots are frozen and hand out deep copies
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from tilesmith.environment import GridPosition, GridSize, PixelPosition, PixelSize


# ============================================================================
# Categories
# ============================================================================


class ModelCategory(str, Enum):
    """Kinds of objects an editor can place."""

    CHARACTER = "character"
    PLANT = "plant"
    BUILDING = "building"


class CharacterDetails(BaseModel):
    """Fields only characters carry (dialogue, chat persona)."""

    model_config = ConfigDict(frozen=True)

    category: Literal["character"] = "character"
    character_name: str
    can_dialogue: bool = True
    default_dialogue: str = ""
    ai_prompt: str = ""
    is_interactable: bool = True
    character_color: Optional[str] = None
    template_id: Optional[str] = None


class PlantDetails(BaseModel):
    """Fields only plants carry."""

    model_config = ConfigDict(frozen=True)

    category: Literal["plant"] = "plant"
    plant_type: str
    growth_stage: int = Field(3, ge=0, description="3 means fully grown")
    is_harvestable: bool = False


class BuildingDetails(BaseModel):
    """Fields only buildings carry."""

    model_config = ConfigDict(frozen=True)

    category: Literal["building"] = "building"
    building_type: str
    is_enterable: bool = False
    capacity: Optional[int] = Field(None, ge=0, description="None means no occupancy limit")


# The discriminator lets pydantic pick the right variant when records come
# back from storage as plain dicts.
ObjectDetails = Annotated[
    Union[CharacterDetails, PlantDetails, BuildingDetails],
    Field(discriminator="category"),
]


# ============================================================================
# Templates and placed objects
# ============================================================================


class ModelTemplate(BaseModel):
    """Catalog entry an editor places from."""

    id: str
    name: str
    category: ModelCategory
    default_size: PixelSize
    default_grid_size: GridSize
    icon: str = ""
    description: str = ""


class PlacedObject(BaseModel):
    """An object occupying a rectangle of cells on the map.

    ``pixel_position`` always equals ``grid_position * tile_size`` for objects
    created or moved through the store. ``pixel_size`` is the rendered size
    and may differ from the cell footprint (e.g. a 32x64 sprite on 1x2 cells).

    Frozen: the store hands these out directly, so every change has to go
    through ``update_object`` and its collision checks.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    grid_position: GridPosition
    grid_size: GridSize
    pixel_position: PixelPosition
    pixel_size: PixelSize
    is_placed: bool = True
    details: ObjectDetails

    @property
    def category(self) -> ModelCategory:
        return ModelCategory(self.details.category)


# ============================================================================
# History
# ============================================================================


class Snapshot(BaseModel):
    """Frozen copy of every placed object at one point in the edit history."""

    model_config = ConfigDict(frozen=True)

    objects: Tuple[PlacedObject, ...] = ()
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def capture(cls, objects: List[PlacedObject]) -> Snapshot:
        """Deep-copy ``objects`` so later edits to the live store never leak in."""

        return cls(objects=tuple(obj.model_copy(deep=True) for obj in objects))

    def restore(self) -> List[PlacedObject]:
        """Return fresh deep copies so callers can't mutate the stored state."""

        return [obj.model_copy(deep=True) for obj in self.objects]

    def matches(self, objects: List[PlacedObject]) -> bool:
        """Value comparison against a live collection, order included."""

        return list(self.objects) == list(objects)


# ============================================================================
# Placement results
# ============================================================================


class PlacementError(str, Enum):
    """Why a placement produced no object."""

    PLACEMENT_EXHAUSTED = "placement_exhausted"


class PlacementResult(BaseModel):
    """Outcome of ``place_object``.

    Either ``object_id`` is set (the object exists, possibly relocated from
    the requested cell) or ``error`` is set and nothing was created.
    """

    object_id: Optional[str] = None
    grid_position: Optional[GridPosition] = None
    relocated: bool = False
    error: Optional[PlacementError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.object_id is not None
