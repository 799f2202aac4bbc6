"""Pytest configuration and shared fixtures."""

import random

import pytest

from menuplanner.config import get_settings
from menuplanner.models import (
    BaseUnit,
    Dish,
    Household,
    HouseholdPreferences,
    IngredientCategory,
    MatchMode,
    NormalizedIngredient,
    Profile,
    ScoreContext,
)

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow running")
    config.addinivalue_line(
        "markers", "property: marks tests that check an invariant over many random seeds"
    )


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test read settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Ingredient Fixtures
# =============================================================================


def make_ingredient(
    canonical_name: str,
    display_name: str,
    amount: float,
    unit: BaseUnit,
    category: IngredientCategory = IngredientCategory.PANTRY,
    match_mode: MatchMode = MatchMode.EXACT,
) -> NormalizedIngredient:
    """Build a normalized ingredient without going through the parser."""
    return NormalizedIngredient(
        canonical_name=canonical_name,
        display_name=display_name,
        category=category,
        amount=amount,
        unit=unit,
        confidence=1.0 if match_mode is MatchMode.EXACT else 0.45,
        match_mode=match_mode,
    )


def make_dish(
    dish_id: str,
    protein: str,
    cuisines: list[str] | None = None,
    prep_time: int = 25,
    allergens: list[str] | None = None,
    kid_score: float = 50.0,
    ingredients: list[NormalizedIngredient] | None = None,
    mood_tags: list[str] | None = None,
) -> Dish:
    """Build a dish with sensible defaults."""
    return Dish(
        id=dish_id,
        title=dish_id.replace("-", " ").title(),
        cuisine_tags=cuisines or [],
        protein_tag=protein,
        prep_time_minutes=prep_time,
        kid_friendly_score=kid_score,
        allergens=allergens or [],
        ingredients=ingredients or [],
        mood_tags=mood_tags or [],
    )


# =============================================================================
# Household Fixtures
# =============================================================================


@pytest.fixture
def family_household():
    """Two adults and a picky child who avoid nuts and like Italian food."""
    return Household(
        id="hh-1",
        name="Familjen Berg",
        profiles=[
            Profile(id="anna", name="Anna"),
            Profile(id="erik", name="Erik"),
            Profile(id="lisa", name="Lisa", type="child", pickiness=2),
        ],
        preferences=HouseholdPreferences(
            cuisines=["italian"],
            proteins=["chicken"],
            avoid_allergens=["nötter"],
            max_time_minutes=30,
            dinners_per_week=5,
            mood_tags=["comfort"],
        ),
    )


@pytest.fixture
def empty_context():
    """Context without history or ratings."""
    return ScoreContext()


@pytest.fixture
def rng():
    """Seeded random source for reproducible menus."""
    return random.Random(42)


# =============================================================================
# Dish Fixtures
# =============================================================================


@pytest.fixture
def sample_dishes():
    """A varied catalog of twelve dishes, one of them containing nuts."""
    return [
        make_dish("kyckling-pasta", "chicken", ["italian"], 25, ["gluten"], kid_score=85),
        make_dish("kyckling-curry", "chicken", ["indian"], 35, [], kid_score=60),
        make_dish("kyckling-wok", "chicken", ["asian"], 20, ["soja"], kid_score=70),
        make_dish("lax-ugn", "fish", ["nordic"], 30, [], kid_score=55),
        make_dish("torsk-gryta", "fish", ["nordic"], 40, ["laktos"], kid_score=45),
        make_dish("linsgryta", "vegetarian", ["indian"], 30, [], kid_score=40),
        make_dish("gnocchi-tomat", "vegetarian", ["italian"], 15, ["gluten"], kid_score=80),
        make_dish("nötfärs-tacos", "beef", ["mexican"], 25, ["gluten"], kid_score=90),
        make_dish("köttbullar", "beef", ["nordic"], 30, ["gluten", "ägg"], kid_score=95),
        make_dish("fläskfilé", "pork", ["nordic"], 35, [], kid_score=50),
        make_dish("jordnöt-nudlar", "vegetarian", ["asian"], 20, ["nötter", "soja"], kid_score=65),
        make_dish("räkpasta", "shellfish", ["italian"], 20, ["gluten", "skaldjur"], kid_score=50),
    ]


@pytest.fixture
def chicken_only_dishes():
    """Dishes that all share one protein."""
    return [make_dish(f"kyckling-{i}", "chicken", ["italian"]) for i in range(6)]
