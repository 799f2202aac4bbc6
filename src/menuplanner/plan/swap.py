"""Replacing a single dinner in an existing weekly menu."""

import random
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from menuplanner.config import get_settings
from menuplanner.logging_config import LoggingContext, get_logger
from menuplanner.models import Dish, Household, MenuDay, ScoreContext, WeeklyMenu
from menuplanner.plan.menu import MAX_SAME_PROTEIN_RUN, generate_weekly_menu
from menuplanner.plan.scoring import has_avoided_allergen, rank_dishes

logger = get_logger(__name__)

# Swap candidate bonuses relative to the dish being replaced
PROTEIN_MATCH_BONUS = 8.0
CUISINE_OVERLAP_BONUS = 5.0
TIME_DIFF_PENALTY = 0.2


def replace_day(menu: WeeklyMenu, day: MenuDay) -> WeeklyMenu:
    """
    Return a copy of the menu with the dinner for ``day.day_index`` replaced.

    Raises:
        KeyError: If the menu has no dinner on that day.
    """
    if menu.day(day.day_index) is None:
        raise KeyError(f"Menu has no dinner on day {day.day_index}")
    days = [day if d.day_index == day.day_index else d for d in menu.days]
    return menu.model_copy(update={"days": days, "created_at": datetime.now(timezone.utc)})


def swap_dish(
    menu: WeeklyMenu,
    day_index: int,
    dishes: Iterable[Dish],
    household: Household,
    context: ScoreContext,
    rng: random.Random | None = None,
) -> WeeklyMenu:
    """
    Replace the dinner on one day with a freshly generated choice.

    The week is regenerated with every other locked day pinned and the
    dishes already planned on other days left out of the candidate pool.
    Dishes that would give three same-protein dinners in a row next to the
    days that stay in the menu are left out as well.
    The replacement may be the dish currently on that day.

    Returns:
        A new menu with the day replaced, or ``menu`` itself when no
        replacement could be produced.
    """
    with LoggingContext(household_id=household.id):
        current = menu.day(day_index)
        if current is None:
            logger.warning(f"Swap requested for missing day {day_index}")
            return menu

        locks = [d for d in menu.days if d.locked and d.day_index != day_index]
        blocked_ids = {d.dish.id for d in menu.days if d.day_index != day_index}
        # Only the target day is kept, so candidates are checked against the real menu
        pool = [
            dish
            for dish in dishes
            if dish.id not in blocked_ids
            and not creates_protein_triplet(menu.days, day_index, dish)
        ]

        regenerated = generate_weekly_menu(
            pool,
            household,
            context,
            locked_days=locks,
            top_k=get_settings().swap_top_k,
            rng=rng,
        )
        replacement = regenerated.day(day_index)
        if replacement is None:
            logger.info(f"No replacement found for day {day_index}")
            return menu

        logger.info(f"Swapped day {day_index}: {current.dish.id} -> {replacement.dish.id}")
        return replace_day(menu, replacement.model_copy(update={"locked": current.locked}))


def creates_protein_triplet(days: Sequence[MenuDay], day_index: int, candidate: Dish) -> bool:
    """
    Check if placing ``candidate`` on ``day_index`` gives three consecutive
    dinners with the same protein anywhere around that day.
    """
    ordered = sorted(days, key=lambda d: d.day_index)
    proteins = [candidate.protein_tag if d.day_index == day_index else d.dish.protein_tag for d in ordered]
    positions = [i for i, d in enumerate(ordered) if d.day_index == day_index]
    if not positions:
        return False

    position = positions[0]
    window = MAX_SAME_PROTEIN_RUN + 1
    for start in range(position - window + 1, position + 1):
        end = start + window
        if start < 0 or end > len(proteins):
            continue
        if len(set(proteins[start:end])) == 1:
            return True
    return False


def get_swap_candidates(
    menu: WeeklyMenu,
    day_index: int,
    dishes: Iterable[Dish],
    household: Household,
    context: ScoreContext,
    limit: int | None = None,
) -> list[MenuDay]:
    """
    List alternative dinners for one day of a menu, best first.

    Candidates exclude the current dish, dishes planned on other days, dishes
    with avoided allergens and dishes that would make three same-protein
    dinners in a row. Dishes close to the current one rank higher: same
    protein and shared cuisines add a bonus, a different prep time costs a
    little per minute.

    Returns:
        MenuDay records for the target day, scored with the household total.
        Empty when the menu has no dinner on that day.
    """
    current = menu.day(day_index)
    if current is None:
        return []

    limit = limit if limit is not None else get_settings().swap_candidate_limit
    used_ids = {d.dish.id for d in menu.days}

    ranked: list[tuple[float, MenuDay]] = []
    for scored in rank_dishes(dishes, household, context):
        dish = scored.dish
        if dish.id in used_ids:
            continue
        if has_avoided_allergen(dish, household):
            continue
        if creates_protein_triplet(menu.days, day_index, dish):
            continue

        swap_score = scored.total_score
        if dish.protein_tag == current.dish.protein_tag:
            swap_score += PROTEIN_MATCH_BONUS
        if set(dish.cuisine_tags) & set(current.dish.cuisine_tags):
            swap_score += CUISINE_OVERLAP_BONUS
        swap_score -= TIME_DIFF_PENALTY * abs(dish.prep_time_minutes - current.dish.prep_time_minutes)

        ranked.append(
            (
                swap_score,
                MenuDay(
                    day_index=day_index,
                    dish=dish,
                    score=scored.total_score,
                    profile_scores=scored.profile_scores,
                    locked=current.locked,
                ),
            )
        )

    ranked.sort(key=lambda pair: pair[0], reverse=True)
    candidates = [day for _, day in ranked[:limit]]
    logger.debug(f"Found {len(ranked)} swap candidates for day {day_index}, returning {len(candidates)}")
    return candidates
