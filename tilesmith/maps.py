"""Preset maps the editor can start from."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field

from .environment import MapBounds


class MapPreset(BaseModel):
    """A named map layout. Only ``bounds`` matters to placement."""

    id: str
    name: str
    background_type: str = "grass"
    bounds: MapBounds = Field(..., description="Grid dimensions and tile size")


DEFAULT_MAP = MapPreset(
    id="forest-village",
    name="Forest Village",
    background_type="forest",
    bounds=MapBounds.from_pixels(1024, 768, tile_size=32),
)

PRESET_MAPS: List[MapPreset] = [
    DEFAULT_MAP,
    MapPreset(
        id="desert-oasis",
        name="Desert Oasis",
        background_type="desert",
        bounds=MapBounds.from_pixels(1024, 768, tile_size=32),
    ),
    MapPreset(
        id="snowy-mountain",
        name="Snowy Mountain",
        background_type="snow",
        bounds=MapBounds.from_pixels(1024, 768, tile_size=32),
    ),
]

_PRESETS_BY_ID: Dict[str, MapPreset] = {preset.id: preset for preset in PRESET_MAPS}


def get_map_preset(preset_id: str) -> MapPreset:
    """Return the preset with ``preset_id``.

    Raises:
        KeyError: If no preset has that id
    """
    try:
        return _PRESETS_BY_ID[preset_id]
    except KeyError:
        raise KeyError(f"Unknown map preset '{preset_id}'") from None
