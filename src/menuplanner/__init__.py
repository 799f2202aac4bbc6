"""Menuplanner - dinner menu recommendations and ingredient normalization."""

from menuplanner.models import (
    BaseUnit,
    CanonicalCatalogEntry,
    Dish,
    Household,
    HouseholdPreferences,
    IngredientCategory,
    MatchMode,
    MenuDay,
    NormalizedIngredient,
    Profile,
    ProfileDishScore,
    ScoreContext,
    ScoredDish,
    ShoppingItem,
    ShoppingList,
    WeeklyMenu,
)
from menuplanner.normalize import normalize_ingredient
from menuplanner.plan import (
    build_shopping_list,
    generate_weekly_menu,
    get_swap_candidates,
    rank_dishes,
    score_household,
    swap_dish,
)

__version__ = "0.1.0"

__all__ = [
    "BaseUnit",
    "CanonicalCatalogEntry",
    "Dish",
    "Household",
    "HouseholdPreferences",
    "IngredientCategory",
    "MatchMode",
    "MenuDay",
    "NormalizedIngredient",
    "Profile",
    "ProfileDishScore",
    "ScoreContext",
    "ScoredDish",
    "ShoppingItem",
    "ShoppingList",
    "WeeklyMenu",
    "build_shopping_list",
    "generate_weekly_menu",
    "get_swap_candidates",
    "normalize_ingredient",
    "rank_dishes",
    "score_household",
    "swap_dish",
]
