"""Dish scoring per profile and per household."""

from collections.abc import Iterable
from dataclasses import dataclass

from menuplanner.config import get_settings
from menuplanner.logging_config import get_logger
from menuplanner.models import Dish, Household, Profile, ProfileDishScore, ScoreContext, ScoredDish

logger = get_logger(__name__)

MIN_SCORE = 0.0
MAX_SCORE = 100.0


@dataclass(frozen=True)
class ScoringWeights:
    """Points added or subtracted by each scoring term."""

    base: float = 50.0
    cuisine_match: float = 16.0
    protein_match: float = 12.0
    within_time: float = 10.0
    over_time: float = -8.0
    mood_match: float = 6.0
    avoided_allergen: float = -45.0
    avoided_ingredient: float = -30.0
    # Child term: kid_friendly_score * (kid_factor - pickiness * picky_step * picky_scale)
    kid_factor: float = 0.14
    picky_step: float = 0.2
    picky_scale: float = 0.08
    recent_dish: float = -14.0
    recent_protein: float = -6.0
    liked: float = 20.0
    disliked: float = -28.0


DEFAULT_WEIGHTS = ScoringWeights()


def clamp_score(value: float) -> float:
    return max(MIN_SCORE, min(MAX_SCORE, value))


def has_avoided_allergen(dish: Dish, household: Household) -> bool:
    """Check if a dish contains any allergen the household avoids."""
    avoided = set(household.preferences.avoid_allergens)
    return any(allergen in avoided for allergen in dish.allergens)


def has_avoided_ingredient(dish: Dish, household: Household) -> bool:
    """Check if a dish uses an ingredient the household avoids (case-insensitive)."""
    avoided = {name.strip().lower() for name in household.preferences.avoid_ingredients}
    return any(ingredient.display_name.lower() in avoided for ingredient in dish.ingredients)


def score_profile(
    dish: Dish,
    profile: Profile,
    household: Household,
    context: ScoreContext,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> ProfileDishScore:
    """
    Score how well a dish suits one profile.

    Starts from the base score and applies preference, time, allergen,
    child-friendliness, history and rating terms. Clamped to [0, 100].
    """
    prefs = household.preferences
    score = weights.base
    reasons: list[str] = []

    if any(cuisine in prefs.cuisines for cuisine in dish.cuisine_tags):
        score += weights.cuisine_match
        reasons.append("preferred cuisine")

    if dish.protein_tag in prefs.proteins:
        score += weights.protein_match
        reasons.append("preferred protein")

    if dish.prep_time_minutes <= prefs.max_time_minutes:
        score += weights.within_time
        reasons.append("quick to cook")
    else:
        score += weights.over_time
        reasons.append("takes too long")

    if any(tag in prefs.mood_tags for tag in dish.mood_tags):
        score += weights.mood_match
        reasons.append("matches mood")

    if has_avoided_allergen(dish, household):
        score += weights.avoided_allergen
        reasons.append("contains avoided allergen")

    if has_avoided_ingredient(dish, household):
        score += weights.avoided_ingredient
        reasons.append("contains avoided ingredient")

    if profile.is_child:
        picky_penalty = profile.pickiness * weights.picky_step
        score += dish.kid_friendly_score * (weights.kid_factor - picky_penalty * weights.picky_scale)
        reasons.append("kid friendliness")

    if dish.id in context.recent_dish_ids:
        score += weights.recent_dish
        reasons.append("eaten recently")

    if dish.protein_tag in context.recent_protein_tags:
        score += weights.recent_protein
        reasons.append("protein used recently")

    if dish.id in context.likes_by_profile.get(profile.id, []):
        score += weights.liked
        reasons.append("liked before")

    if dish.id in context.dislikes_by_profile.get(profile.id, []):
        score += weights.disliked
        reasons.append("disliked before")

    return ProfileDishScore(
        profile_id=profile.id,
        score=round(clamp_score(score), 2),
        reasons=reasons,
    )


def effective_weight(profile: Profile, household: Household) -> float:
    """Profile weight, boosted for children."""
    if profile.is_child:
        boost = household.child_weight_boost
        if boost is None:
            boost = get_settings().child_weight_boost
        return profile.weight * boost
    return profile.weight


def score_household(
    dish: Dish,
    household: Household,
    context: ScoreContext,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> ScoredDish:
    """
    Score a dish for the whole household.

    The total is the mean of the profile scores weighted by each profile's
    effective weight. The divisor never drops below 1, so a household
    without profiles scores 0.
    """
    profile_scores = [score_profile(dish, p, household, context, weights) for p in household.profiles]

    weighted_total = 0.0
    total_weight = 0.0
    for profile, profile_score in zip(household.profiles, profile_scores):
        weight = effective_weight(profile, household)
        weighted_total += profile_score.score * weight
        total_weight += weight

    total = clamp_score(weighted_total / max(total_weight, 1.0))
    return ScoredDish(dish=dish, profile_scores=profile_scores, total_score=round(total, 2))


def rank_dishes(
    dishes: Iterable[Dish],
    household: Household,
    context: ScoreContext,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> list[ScoredDish]:
    """Score all dishes and sort them best first (stable for equal scores)."""
    scored = [score_household(dish, household, context, weights) for dish in dishes]
    ranked = sorted(scored, key=lambda s: s.total_score, reverse=True)
    if ranked:
        logger.debug(
            f"Ranked {len(ranked)} dishes for household {household.id}, "
            f"best {ranked[0].dish.id} ({ranked[0].total_score})"
        )
    return ranked
