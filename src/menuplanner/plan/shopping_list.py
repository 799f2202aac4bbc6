"""Shopping list generation from the dishes of a menu."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from fractions import Fraction

from menuplanner.config import get_settings
from menuplanner.logging_config import LoggingContext, get_logger
from menuplanner.models import (
    BaseUnit,
    Dish,
    IngredientCategory,
    MatchMode,
    ShoppingItem,
    ShoppingList,
)
from menuplanner.normalize.catalog import WATER_CANONICAL_NAME
from menuplanner.normalize.service import IngredientNormalizer, get_normalizer
from menuplanner.normalize.units import as_fraction, prettify, round_amount, to_base_unit

logger = get_logger(__name__)


@dataclass
class AggregatedIngredient:
    """Running total for one canonical ingredient in one base unit."""

    canonical_name: str
    display_name: str
    category: IngredientCategory
    unit: BaseUnit
    total: Fraction = field(default_factory=Fraction)
    dish_ids: list[str] = field(default_factory=list)

    def add(self, amount: float, dish_id: str) -> None:
        self.total += as_fraction(amount)
        if dish_id not in self.dish_ids:
            self.dish_ids.append(dish_id)


def aggregate_ingredients(
    dishes: Iterable[Dish],
    normalizer: IngredientNormalizer,
) -> dict[tuple[str, BaseUnit], AggregatedIngredient]:
    """
    Sum ingredient amounts across dishes by canonical name and base unit.

    Each ingredient is re-keyed through the catalog by its display name so
    that records normalized against an older catalog still merge. Water is
    left out.
    """
    aggregated: dict[tuple[str, BaseUnit], AggregatedIngredient] = {}

    for dish in dishes:
        for ingredient in dish.ingredients:
            match = normalizer.canonicalize(ingredient.display_name)
            if match.canonical_name == WATER_CANONICAL_NAME:
                continue

            base = to_base_unit(ingredient.amount, ingredient.unit.value)
            # Unresolved names keep the spelling and category they were stored with
            if match.match_mode is MatchMode.FALLBACK:
                display_name, category = ingredient.display_name, ingredient.category
            else:
                display_name, category = match.display_name, match.category

            key = (match.canonical_name, base.unit)
            entry = aggregated.get(key)
            if entry is None:
                entry = AggregatedIngredient(
                    canonical_name=match.canonical_name,
                    display_name=display_name,
                    category=category,
                    unit=base.unit,
                )
                aggregated[key] = entry
            entry.add(base.amount, dish.id)

    return aggregated


def suppress_placeholder_counts(
    aggregated: dict[tuple[str, BaseUnit], AggregatedIngredient],
) -> dict[tuple[str, BaseUnit], AggregatedIngredient]:
    """Drop piece rows for ingredients that also have a gram or milliliter row."""
    concrete = {name for name, unit in aggregated if unit is not BaseUnit.PIECE}
    return {
        key: entry
        for key, entry in aggregated.items()
        if not (key[1] is BaseUnit.PIECE and key[0] in concrete)
    }


def build_shopping_list(
    household_id: str,
    dishes: Iterable[Dish],
    pantry_state: Mapping[str, bool] | None = None,
    keep_placeholder_counts: bool | None = None,
    normalizer: IngredientNormalizer | None = None,
) -> ShoppingList:
    """
    Build a categorized shopping list for a set of dishes.

    Args:
        household_id: Household the list belongs to.
        dishes: Dishes to shop for, typically the dishes of a weekly menu.
        pantry_state: Items already at home, keyed by canonical name or
            lowercased display name.
        keep_placeholder_counts: Keep piece rows next to gram/milliliter rows
            for the same ingredient. Defaults to the configured value, which
            is False: "1 st pasta" and "400 g pasta" give a single 400 g row.
        normalizer: Normalizer used to re-key ingredients. Defaults to the
            shared one.

    Returns:
        ShoppingList with every category present, items sorted by name.
    """
    normalizer = normalizer or get_normalizer()
    pantry_state = pantry_state or {}
    if keep_placeholder_counts is None:
        keep_placeholder_counts = get_settings().keep_placeholder_counts

    dishes = list(dishes)
    with LoggingContext(household_id=household_id):
        shopping_list = _build(household_id, dishes, pantry_state, keep_placeholder_counts, normalizer)
        logger.info(
            f"Built shopping list: {shopping_list.item_count} items from {len(dishes)} dishes"
        )
    return shopping_list


def _build(
    household_id: str,
    dishes: list[Dish],
    pantry_state: Mapping[str, bool],
    keep_placeholder_counts: bool,
    normalizer: IngredientNormalizer,
) -> ShoppingList:
    aggregated = aggregate_ingredients(dishes, normalizer)
    if not keep_placeholder_counts:
        before = len(aggregated)
        aggregated = suppress_placeholder_counts(aggregated)
        if before != len(aggregated):
            logger.debug(f"Suppressed {before - len(aggregated)} piece rows with concrete amounts")

    items_by_category: dict[IngredientCategory, list[ShoppingItem]] = {
        category: [] for category in IngredientCategory
    }
    for entry in aggregated.values():
        display = prettify(
            entry.total,
            entry.unit.value,
            spoons=entry.category is IngredientCategory.SPICES,
        )
        in_pantry = bool(
            pantry_state.get(entry.canonical_name) or pantry_state.get(entry.display_name.lower())
        )
        items_by_category[entry.category].append(
            ShoppingItem(
                name=entry.display_name,
                canonical_name=entry.canonical_name,
                amount=round_amount(display.amount),
                unit=display.unit,
                category=entry.category,
                in_pantry=in_pantry,
                dish_ids=entry.dish_ids,
            )
        )

    for items in items_by_category.values():
        items.sort(key=lambda item: item.name.casefold())

    return ShoppingList(household_id=household_id, items_by_category=items_by_category)
