"""Dish scoring, weekly menus, swaps and shopping lists."""

from menuplanner.plan.menu import generate_weekly_menu, violates_protein_rule
from menuplanner.plan.scoring import has_avoided_allergen, rank_dishes, score_household, score_profile
from menuplanner.plan.shopping_list import build_shopping_list
from menuplanner.plan.swap import get_swap_candidates, replace_day, swap_dish

__all__ = [
    "build_shopping_list",
    "generate_weekly_menu",
    "get_swap_candidates",
    "has_avoided_allergen",
    "rank_dishes",
    "replace_day",
    "score_household",
    "score_profile",
    "swap_dish",
    "violates_protein_rule",
]
