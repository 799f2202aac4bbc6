"""Weekly menu generation under allergen, duplicate and protein-variety constraints."""

import random
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timezone
from typing import TypeVar

from menuplanner.config import get_settings
from menuplanner.logging_config import LoggingContext, get_logger
from menuplanner.models import Dish, Household, MenuDay, ScoreContext, ScoredDish, WeeklyMenu
from menuplanner.plan.scoring import has_avoided_allergen, rank_dishes

logger = get_logger(__name__)

T = TypeVar("T")

# No more than this many consecutive days may share a protein tag
MAX_SAME_PROTEIN_RUN = 2


def violates_protein_rule(
    placed: Sequence[Dish], candidate: Dish, upcoming: Sequence[Dish] = ()
) -> bool:
    """
    Check if placing a dish would make three days in a row share a protein.

    The run is counted back through the most recently placed dishes and
    forward through ``upcoming``, the dishes already fixed on the days right
    after the candidate.
    """
    run = 1
    for dish in reversed(placed):
        if dish.protein_tag != candidate.protein_tag:
            break
        run += 1
    for dish in upcoming:
        if dish.protein_tag != candidate.protein_tag:
            break
        run += 1
    return run > MAX_SAME_PROTEIN_RUN


def pick_from_top_k(items: Sequence[T], top_k: int, rng: random.Random) -> T:
    """
    Pick uniformly among the first ``top_k`` items.

    Raises:
        ValueError: If there are no items to pick from.
    """
    if not items:
        raise ValueError("Cannot pick from an empty candidate list")
    limit = max(1, min(top_k, len(items)))
    return items[rng.randrange(limit)]


def is_eligible(
    scored: ScoredDish,
    household: Household,
    placed: Sequence[Dish],
    used_dish_ids: set[str],
    upcoming: Sequence[Dish] = (),
) -> bool:
    """Check the hard constraints for placing a dish between ``placed`` and ``upcoming``."""
    dish = scored.dish
    if dish.id in used_dish_ids:
        return False
    if has_avoided_allergen(dish, household):
        return False
    if violates_protein_rule(placed, dish, upcoming):
        return False
    return True


def _upcoming_locked_dishes(locked_by_day: Mapping[int, MenuDay], day_index: int) -> list[Dish]:
    """Locked dishes on the consecutive days right after ``day_index``."""
    upcoming: list[Dish] = []
    for offset in range(1, MAX_SAME_PROTEIN_RUN + 1):
        locked = locked_by_day.get(day_index + offset)
        if locked is None:
            break
        upcoming.append(locked.dish)
    return upcoming


def generate_weekly_menu(
    dishes: Iterable[Dish],
    household: Household,
    context: ScoreContext,
    locked_days: Iterable[MenuDay] | None = None,
    top_k: int | None = None,
    rng: random.Random | None = None,
) -> WeeklyMenu:
    """
    Generate a week of dinners for a household.

    Days are filled in order. A locked day keeps its dish. Every other day
    draws at random among the ``top_k`` best-ranked dishes that are unused,
    free of avoided allergens and do not create a third same-protein day in
    a row, counting the locked days that follow.

    Args:
        dishes: Candidate dishes.
        household: Household to plan for; its preferences set the number of dinners.
        context: Recent history and ratings.
        locked_days: Days pinned by the caller, keyed by their day index.
        top_k: Size of the pool sampled for each day. Defaults to the configured value.
        rng: Random source. A private generator is created when omitted.

    Returns:
        WeeklyMenu. When no dish satisfies the constraints for a day, that day
        is left out and the menu has fewer dinners than requested.
    """
    dinners_count = household.preferences.dinners_per_week
    top_k = top_k if top_k is not None else get_settings().menu_top_k
    rng = rng or random.Random()

    with LoggingContext(household_id=household.id):
        ranked = rank_dishes(dishes, household, context)
        locked_by_day = {
            day.day_index: day for day in locked_days or [] if day.day_index < dinners_count
        }
        days = _fill_days(ranked, household, dinners_count, locked_by_day, top_k, rng)
        logger.info(
            f"Generated menu: {len(days)}/{dinners_count} dinners from {len(ranked)} dishes"
        )

    return WeeklyMenu(
        household_id=household.id,
        created_at=datetime.now(timezone.utc),
        days=days,
    )


def _fill_days(
    ranked: Sequence[ScoredDish],
    household: Household,
    dinners_count: int,
    locked_by_day: Mapping[int, MenuDay],
    top_k: int,
    rng: random.Random,
) -> list[MenuDay]:
    days: list[MenuDay] = []
    # Locked dishes are reserved for their own day
    used_dish_ids: set[str] = {day.dish.id for day in locked_by_day.values()}

    for day_index in range(dinners_count):
        locked = locked_by_day.get(day_index)
        if locked is not None:
            days.append(locked.model_copy(update={"locked": True}))
            continue

        placed = [day.dish for day in days]
        upcoming = _upcoming_locked_dishes(locked_by_day, day_index)
        eligible = [
            s for s in ranked if is_eligible(s, household, placed, used_dish_ids, upcoming)
        ]
        if not eligible:
            logger.warning(f"No eligible dish for day {day_index}, leaving it empty")
            continue

        chosen = pick_from_top_k(eligible, top_k, rng)
        days.append(
            MenuDay(
                day_index=day_index,
                dish=chosen.dish,
                score=chosen.total_score,
                profile_scores=chosen.profile_scores,
            )
        )
        used_dish_ids.add(chosen.dish.id)

    return days
