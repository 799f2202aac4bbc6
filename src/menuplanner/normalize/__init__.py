"""Normalize raw ingredient lines into canonical, unit-consistent records."""

from menuplanner.normalize.allergens import infer_allergens
from menuplanner.normalize.catalog import CanonicalCatalog, get_catalog
from menuplanner.normalize.diagnostics import AliasReport, build_alias_report
from menuplanner.normalize.matching import CatalogMatcher, MatchResult, infer_category
from menuplanner.normalize.service import IngredientNormalizer, normalize_ingredient
from menuplanner.normalize.text import (
    clean_ingredient_line,
    fold_text,
    normalize_name,
    parse_amount,
    split_amount_unit,
)
from menuplanner.normalize.units import (
    can_aggregate,
    from_base_unit,
    prettify,
    to_base_unit,
)

__all__ = [
    "AliasReport",
    "CanonicalCatalog",
    "CatalogMatcher",
    "IngredientNormalizer",
    "MatchResult",
    "build_alias_report",
    "can_aggregate",
    "clean_ingredient_line",
    "fold_text",
    "from_base_unit",
    "get_catalog",
    "infer_allergens",
    "infer_category",
    "normalize_ingredient",
    "normalize_name",
    "parse_amount",
    "prettify",
    "split_amount_unit",
    "to_base_unit",
]
