"""Ingredient name to canonical catalog matching using exact and fuzzy lookup."""

import re
from dataclasses import dataclass

from rapidfuzz.distance import Levenshtein

from menuplanner.config import Settings, get_settings
from menuplanner.logging_config import get_logger
from menuplanner.models import CanonicalCatalogEntry, IngredientCategory, MatchMode
from menuplanner.normalize.catalog import CanonicalCatalog, get_catalog
from menuplanner.normalize.text import normalize_name

logger = get_logger(__name__)


UNKNOWN_CANONICAL_NAME = "okand ingrediens"
UNKNOWN_DISPLAY_NAME = "Okänd ingrediens"

# Keyword hints for names the catalog does not know, checked in order.
# Patterns run against folded, normalized names. Produce and dairy stems are
# unanchored so compounds such as "korsbarstomater" and "getost" match.
CATEGORY_HINTS: tuple[tuple[IngredientCategory, re.Pattern[str]], ...] = (
    (
        IngredientCategory.MEAT_FISH,
        re.compile(
            r"\b(?:kyckling|lax|fisk|notkott|notfars|fars|flask|skinka|rak|scampi"
            r"|torsk|bacon|korv|kott|lamm|biff)"
        ),
    ),
    (
        IngredientCategory.DAIRY,
        re.compile(
            r"(?:mjolk|gradde|yoghurt|smor|creme fraiche|kvarg|keso|halloumi|feta|\bost|ost\b)"
        ),
    ),
    (
        IngredientCategory.SPICES,
        re.compile(
            r"\b(?:salt|peppar|chili|oregano|kanel|krydd|spiskummin|paprikapulver|curry"
            r"|timjan|rosmarin|kardemumma)"
        ),
    ),
    (
        IngredientCategory.PRODUCE,
        re.compile(
            r"(?:tomat|lok|morot|potatis|broccoli|spenat|gurka|zucchini|vitlok|citron|lime"
            r"|basilika|koriander|persilja|dill|avokado|sallad|svamp|champinjon|apple|paron)"
        ),
    ),
)


@dataclass(frozen=True)
class MatchResult:
    """Result of matching an ingredient name against the catalog."""

    raw_name: str
    normalized_name: str
    canonical_name: str
    display_name: str
    category: IngredientCategory
    confidence: float
    match_mode: MatchMode
    matched_alias: str | None = None
    needs_review: bool = False


def infer_category(name: str) -> IngredientCategory:
    """Guess the shopping category of an uncatalogued ingredient name."""
    normalized = normalize_name(name)
    for category, pattern in CATEGORY_HINTS:
        if pattern.search(normalized):
            return category
    return IngredientCategory.PANTRY


def jaccard_similarity(a: str, b: str) -> float:
    """Jaccard similarity of the whitespace-separated token sets."""
    tokens_a, tokens_b = set(a.split()), set(b.split())
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)


def combined_similarity(a: str, b: str) -> float:
    """
    Weighted similarity of two normalized names.

    0.6 x token-set Jaccard + 0.4 x (1 - normalized edit distance).
    """
    edit_similarity = 1.0 - Levenshtein.normalized_distance(a, b)
    return (
        CatalogMatcher.JACCARD_WEIGHT * jaccard_similarity(a, b)
        + CatalogMatcher.EDIT_WEIGHT * edit_similarity
    )


class CatalogMatcher:
    """Service for resolving ingredient names to canonical catalog entries."""

    EXACT_MATCH_SCORE = 1.0
    JACCARD_WEIGHT = 0.6
    EDIT_WEIGHT = 0.4

    def __init__(self, catalog: CanonicalCatalog | None = None, settings: Settings | None = None):
        self.catalog = catalog or get_catalog()
        self.settings = settings or get_settings()

    def match(self, raw_name: str) -> MatchResult:
        """
        Match an ingredient name to the catalog.

        Tries an exact alias lookup first, then fuzzy similarity over all
        aliases, and finally falls back to the normalized name itself.

        Args:
            raw_name: Ingredient name without amount and unit.

        Returns:
            Match result; never raises for unparseable names.
        """
        normalized = normalize_name(raw_name)

        if normalized:
            entry = self.catalog.lookup(normalized)
            if entry is not None:
                return self._result(raw_name, normalized, entry, self.EXACT_MATCH_SCORE, MatchMode.EXACT, normalized)

            fuzzy = self.best_fuzzy_match(normalized)
            if fuzzy is not None:
                alias, entry, score = fuzzy
                if score >= self.settings.fuzzy_accept_threshold:
                    logger.debug(f"Fuzzy match '{normalized}' -> '{entry.canonical_name}' ({score:.3f})")
                    return self._result(raw_name, normalized, entry, round(score, 4), MatchMode.FUZZY, alias)
                logger.debug(
                    f"Rejected fuzzy match '{normalized}' -> '{entry.canonical_name}' ({score:.3f})"
                )

        return self._fallback(raw_name, normalized)

    def best_fuzzy_match(self, normalized: str) -> tuple[str, CanonicalCatalogEntry, float] | None:
        """
        Find the most similar alias in the catalog.

        Returns:
            Tuple of (alias, entry, score), or None for an empty name. Ties keep
            the alias that comes first in catalog order.
        """
        if not normalized:
            return None

        best: tuple[str, CanonicalCatalogEntry, float] | None = None
        for alias, entry in self.catalog.alias_pairs():
            score = combined_similarity(normalized, alias)
            if best is None or score > best[2]:
                best = (alias, entry, score)
        return best

    def _result(
        self,
        raw_name: str,
        normalized: str,
        entry: CanonicalCatalogEntry,
        confidence: float,
        mode: MatchMode,
        alias: str,
    ) -> MatchResult:
        return MatchResult(
            raw_name=raw_name,
            normalized_name=normalized,
            canonical_name=entry.canonical_name,
            display_name=entry.display_name,
            category=entry.category,
            confidence=confidence,
            match_mode=mode,
            matched_alias=alias,
            needs_review=confidence < self.settings.review_threshold,
        )

    def _fallback(self, raw_name: str, normalized: str) -> MatchResult:
        if normalized:
            canonical = normalized
            display = normalized[0].upper() + normalized[1:]
            category = infer_category(normalized)
            confidence = self.settings.fallback_confidence
        else:
            canonical = UNKNOWN_CANONICAL_NAME
            display = UNKNOWN_DISPLAY_NAME
            category = IngredientCategory.PANTRY
            confidence = 0.0

        needs_review = confidence < self.settings.review_threshold
        if needs_review:
            logger.info(f"Unresolved ingredient '{raw_name}' -> '{canonical}' flagged for review")

        return MatchResult(
            raw_name=raw_name,
            normalized_name=normalized,
            canonical_name=canonical,
            display_name=display,
            category=category,
            confidence=confidence,
            match_mode=MatchMode.FALLBACK,
            needs_review=needs_review,
        )
