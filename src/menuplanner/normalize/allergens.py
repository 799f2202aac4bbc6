"""Allergen inference from normalized ingredients."""

import re
from collections.abc import Iterable

from menuplanner.models import NormalizedIngredient
from menuplanner.normalize.text import fold_text

# Checked against folded canonical and display names; order is the output order.
ALLERGEN_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("gluten", re.compile(r"mjol\b|vetemjol|pasta|spaghetti|gnocchi|brod|bulgur|tortilla|panko")),
    ("laktos", re.compile(r"(?<!kokos)mjolk|gradde|\bsmor\b|\bost\b|yoghurt|creme fraiche|parmesan|mozzarella")),
    ("ägg", re.compile(r"\bagg")),
    ("nötter", re.compile(r"not(?:ter|ssmor)|mandel|cashew|hasselnot|valnot")),
    ("soja", re.compile(r"\bsoja|tofu")),
    ("skaldjur", re.compile(r"\brak|scampi|hummer|krabba")),
)


def infer_allergens(ingredients: Iterable[NormalizedIngredient]) -> list[str]:
    """
    Infer the allergens of a dish from its ingredients.

    Returns:
        Allergen names in a stable order, without duplicates.
    """
    names = [fold_text(f"{i.canonical_name} {i.display_name}") for i in ingredients]
    return [allergen for allergen, pattern in ALLERGEN_PATTERNS if any(pattern.search(n) for n in names)]
