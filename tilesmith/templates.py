"""
Model template catalog and category detail builders.

Templates describe what an editor can place: a category, a rendered size and
a cell footprint. ``build_details`` is the one place that knows how each
category's extra fields are derived from a template. The store calls it when
it creates an object and never looks at the result again.
"""

from typing import Dict, List

from .environment import GridSize, PixelSize
from .schemas import (
    BuildingDetails,
    CharacterDetails,
    ModelCategory,
    ModelTemplate,
    ObjectDetails,
    PlantDetails,
)


def _template(
    template_id: str,
    name: str,
    category: ModelCategory,
    grid_width: int,
    grid_height: int,
    icon: str,
    description: str,
    tile_size: int = 32,
) -> ModelTemplate:
    return ModelTemplate(
        id=template_id,
        name=name,
        category=category,
        default_size=PixelSize(width=grid_width * tile_size, height=grid_height * tile_size),
        default_grid_size=GridSize(grid_width=grid_width, grid_height=grid_height),
        icon=icon,
        description=description,
    )


CHARACTER_TEMPLATES: List[ModelTemplate] = [
    _template("npc-merchant", "Merchant", ModelCategory.CHARACTER, 1, 2, "🧙", "Friendly trader, open to deals and conversation"),
    _template("npc-guard", "Guard", ModelCategory.CHARACTER, 1, 2, "🛡️", "Village guard keeping the peace"),
    _template("npc-villager", "Villager", ModelCategory.CHARACTER, 1, 2, "👨‍🌾", "Ordinary villager with news and errands"),
    _template("npc-elder", "Elder", ModelCategory.CHARACTER, 1, 2, "🧓", "Respected elder who knows the old legends"),
    _template("npc-child", "Child", ModelCategory.CHARACTER, 1, 2, "🧒", "Lively child who runs all over the village"),
    _template("npc-artisan", "Artisan", ModelCategory.CHARACTER, 1, 2, "🔨", "Seasoned weaponsmith with a blunt manner"),
]

PLANT_TEMPLATES: List[ModelTemplate] = [
    _template("tree-oak", "Oak Tree", ModelCategory.PLANT, 1, 2, "🌳", "Tall oak that gives shade"),
    _template("tree-pine", "Pine Tree", ModelCategory.PLANT, 1, 2, "🌲", "Evergreen pine"),
    _template("bush-berry", "Berry Bush", ModelCategory.PLANT, 1, 1, "🫐", "Bush with ripe berries"),
    _template("flower-patch", "Flower Patch", ModelCategory.PLANT, 1, 1, "🌸", "Colourful patch of flowers"),
]

BUILDING_TEMPLATES: List[ModelTemplate] = [
    _template("house-small", "Small House", ModelCategory.BUILDING, 4, 3, "🏠", "Cosy family home"),
    _template("shop-general", "General Store", ModelCategory.BUILDING, 5, 4, "🏪", "Store selling everyday goods"),
    _template("tower-watch", "Watch Tower", ModelCategory.BUILDING, 2, 4, "🗼", "Lookout over the surrounding land"),
    _template("well", "Well", ModelCategory.BUILDING, 2, 2, "🪣", "Village water well"),
]

ALL_TEMPLATES: List[ModelTemplate] = [*CHARACTER_TEMPLATES, *PLANT_TEMPLATES, *BUILDING_TEMPLATES]

TEMPLATES_BY_CATEGORY: Dict[ModelCategory, List[ModelTemplate]] = {
    ModelCategory.CHARACTER: CHARACTER_TEMPLATES,
    ModelCategory.PLANT: PLANT_TEMPLATES,
    ModelCategory.BUILDING: BUILDING_TEMPLATES,
}

_TEMPLATES_BY_ID: Dict[str, ModelTemplate] = {template.id: template for template in ALL_TEMPLATES}


def get_template(template_id: str) -> ModelTemplate:
    """Look up a catalog template by id.

    Raises:
        KeyError: If the id is not in the catalog
    """
    try:
        return _TEMPLATES_BY_ID[template_id]
    except KeyError:
        raise KeyError(f"Unknown template '{template_id}'") from None


def default_ai_prompt(template: ModelTemplate) -> str:
    return (
        f"You are a friendly {template.name.lower()} living in this village. "
        "Stay in character when you answer."
    )


def build_details(template: ModelTemplate) -> ObjectDetails:
    """Derive the category-specific fields for a freshly placed object.

    Raises:
        ValueError: If the template's category has no builder
    """

    category = ModelCategory(template.category)

    if category is ModelCategory.CHARACTER:
        return CharacterDetails(
            character_name=template.name,
            can_dialogue=True,
            default_dialogue=f"Hello! I'm the {template.name.lower()}.",
            ai_prompt=default_ai_prompt(template),
            is_interactable=True,
            template_id=template.id,
        )

    if category is ModelCategory.PLANT:
        return PlantDetails(
            plant_type=template.id,
            growth_stage=3,
            is_harvestable="berry" in template.id,
        )

    if category is ModelCategory.BUILDING:
        if "house" in template.id:
            capacity = 4
        elif "shop" in template.id:
            capacity = 10
        else:
            capacity = None
        return BuildingDetails(
            building_type=template.id,
            is_enterable="house" in template.id or "shop" in template.id,
            capacity=capacity,
        )

    raise ValueError(f"Unknown model category: {template.category}")
