"""Pydantic models for dishes, households, menus and shopping lists."""

from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IngredientCategory(str, Enum):
    """Shopping categories, in the order they are listed."""

    PRODUCE = "produce"
    DAIRY = "dairy"
    PANTRY = "pantry"
    MEAT_FISH = "meat_fish"
    SPICES = "spices"


class BaseUnit(str, Enum):
    """Units all ingredient amounts are stored in."""

    GRAM = "g"
    MILLILITER = "ml"
    PIECE = "piece"


class MatchMode(str, Enum):
    """How a raw ingredient name was resolved to a canonical ingredient."""

    EXACT = "exact"
    FUZZY = "fuzzy"
    FALLBACK = "fallback"


class FrozenModel(BaseModel):
    """Base class for records that never change after creation."""

    model_config = ConfigDict(frozen=True)


# =============================================================================
# Ingredients
# =============================================================================


class CanonicalCatalogEntry(FrozenModel):
    """A canonical ingredient and the raw spellings that map to it."""

    canonical_name: str
    display_name: str
    category: IngredientCategory
    aliases: tuple[str, ...] = ()


class NormalizedIngredient(FrozenModel):
    """An ingredient line resolved to a canonical ingredient and base unit."""

    canonical_name: str
    display_name: str
    category: IngredientCategory
    amount: float = Field(ge=0)
    unit: BaseUnit
    confidence: float = Field(ge=0.0, le=1.0)
    match_mode: MatchMode
    needs_review: bool = False

    # Provenance
    cleaned_line: str = ""
    raw_name: str = ""


# =============================================================================
# Dishes and households
# =============================================================================

MoodTag = Literal["comfort", "fresh", "spicy", "budget"]


class Dish(FrozenModel):
    """A dish from the catalog, read-only to the engine."""

    id: str
    title: str
    cuisine_tags: list[str] = Field(default_factory=list)
    protein_tag: str
    prep_time_minutes: int = Field(ge=0)
    difficulty: Literal["easy", "medium", "hard"] = "easy"
    kid_friendly_score: float = Field(default=50.0, ge=0, le=100)
    ingredients: list[NormalizedIngredient] = Field(default_factory=list)
    allergens: list[str] = Field(default_factory=list)
    mood_tags: list[MoodTag] = Field(default_factory=list)
    instructions_short: str = ""
    source_url: str | None = None
    image_url: str | None = None

    @field_validator("mood_tags")
    @classmethod
    def at_most_two_mood_tags(cls, v: list[str]) -> list[str]:
        """A dish carries at most two mood tags."""
        if len(v) > 2:
            raise ValueError("a dish can have at most two mood tags")
        return v


class Profile(FrozenModel):
    """A person eating with the household."""

    id: str
    name: str
    type: Literal["adult", "child"] = "adult"
    pickiness: int = Field(default=0, ge=0, le=2)
    weight: float = Field(default=1.0, ge=0)

    @property
    def is_child(self) -> bool:
        return self.type == "child"


class HouseholdPreferences(FrozenModel):
    """Household-wide preferences used for scoring and filtering."""

    cuisines: list[str] = Field(default_factory=list)
    proteins: list[str] = Field(default_factory=list)
    avoid_allergens: list[str] = Field(default_factory=list)
    avoid_ingredients: list[str] = Field(default_factory=list)
    max_time_minutes: Literal[15, 30, 45] = 30
    dinners_per_week: int = Field(default=5, ge=3, le=7)
    mood_tags: list[str] = Field(default_factory=list)


class Household(FrozenModel):
    """A household with its profiles and preferences."""

    id: str
    name: str
    profiles: list[Profile] = Field(default_factory=list)
    preferences: HouseholdPreferences = Field(default_factory=HouseholdPreferences)
    child_weight_boost: float | None = Field(default=None, gt=0)


class ScoreContext(FrozenModel):
    """Recent history supplied per request."""

    recent_dish_ids: list[str] = Field(default_factory=list)
    recent_protein_tags: list[str] = Field(default_factory=list)
    likes_by_profile: dict[str, list[str]] = Field(default_factory=dict)
    dislikes_by_profile: dict[str, list[str]] = Field(default_factory=dict)


# =============================================================================
# Scores and menus
# =============================================================================


class ProfileDishScore(FrozenModel):
    """Score of one dish for one profile, with the terms that contributed."""

    profile_id: str
    score: float = Field(ge=0, le=100)
    reasons: list[str] = Field(default_factory=list)


class ScoredDish(FrozenModel):
    """A dish with its household score breakdown."""

    dish: Dish
    profile_scores: list[ProfileDishScore] = Field(default_factory=list)
    total_score: float = Field(ge=0, le=100)


class MenuDay(FrozenModel):
    """One dinner in a weekly menu."""

    day_index: int = Field(ge=0)
    dish: Dish
    score: float
    profile_scores: list[ProfileDishScore] = Field(default_factory=list)
    locked: bool = False


class WeeklyMenu(FrozenModel):
    """A week of dinners for a household."""

    household_id: str
    created_at: datetime = Field(default_factory=_utcnow)
    days: list[MenuDay] = Field(default_factory=list)

    @property
    def dish_ids(self) -> list[str]:
        return [day.dish.id for day in self.days]

    def day(self, day_index: int) -> MenuDay | None:
        """Get the dinner planned for a day index, if any."""
        for day in self.days:
            if day.day_index == day_index:
                return day
        return None


# =============================================================================
# Shopping
# =============================================================================


class ShoppingItem(FrozenModel):
    """A single row in the shopping list."""

    name: str
    canonical_name: str
    amount: float
    unit: str
    category: IngredientCategory
    in_pantry: bool = False
    dish_ids: list[str] = Field(default_factory=list)


class ShoppingList(FrozenModel):
    """Shopping list for a set of dishes, grouped by category."""

    household_id: str
    items_by_category: dict[IngredientCategory, list[ShoppingItem]] = Field(default_factory=dict)

    @property
    def item_count(self) -> int:
        return sum(len(items) for items in self.items_by_category.values())

    def items(self) -> list[ShoppingItem]:
        """All items in category order."""
        return [item for items in self.items_by_category.values() for item in items]
