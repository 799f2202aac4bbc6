"""Single-call normalization of raw ingredient lines."""

from functools import lru_cache

from menuplanner.config import Settings, get_settings
from menuplanner.logging_config import get_logger
from menuplanner.models import BaseUnit, MatchMode, NormalizedIngredient
from menuplanner.normalize.catalog import CanonicalCatalog
from menuplanner.normalize.matching import CatalogMatcher, MatchResult
from menuplanner.normalize.text import clean_ingredient_line, split_amount_unit
from menuplanner.normalize.units import to_base_unit

logger = get_logger(__name__)


class IngredientNormalizer:
    """
    Turns raw ingredient lines into NormalizedIngredient records.

    Combines line cleaning, amount/unit segmentation, catalog matching and
    base-unit conversion. Unparseable lines become low-confidence fallback
    records so a batch import never stops on a single bad line.
    """

    def __init__(self, catalog: CanonicalCatalog | None = None, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.matcher = CatalogMatcher(catalog, self.settings)

    @property
    def catalog(self) -> CanonicalCatalog:
        return self.matcher.catalog

    def normalize(self, raw_line: str | None) -> NormalizedIngredient:
        """
        Normalize one raw ingredient line.

        Args:
            raw_line: Free text such as ``"2 klyftor vitlök, finhackad"``.

        Returns:
            NormalizedIngredient with the amount in its base unit.
        """
        cleaned = clean_ingredient_line(raw_line)
        if not cleaned:
            logger.warning(f"Unparseable ingredient line {raw_line!r}, returning fallback record")
            match = self.matcher.match("")
            return NormalizedIngredient(
                canonical_name=match.canonical_name,
                display_name=match.display_name,
                category=match.category,
                amount=0.0,
                unit=BaseUnit.PIECE,
                confidence=0.0,
                match_mode=MatchMode.FALLBACK,
                needs_review=True,
                cleaned_line="",
                raw_name="",
            )

        parsed = split_amount_unit(cleaned)
        match = self.matcher.match(parsed.name)
        base = to_base_unit(parsed.amount, parsed.unit)

        return NormalizedIngredient(
            canonical_name=match.canonical_name,
            display_name=match.display_name,
            category=match.category,
            amount=base.amount,
            unit=base.unit,
            confidence=match.confidence,
            match_mode=match.match_mode,
            needs_review=match.needs_review,
            cleaned_line=cleaned,
            raw_name=parsed.name,
        )

    def normalize_many(self, raw_lines: list[str]) -> list[NormalizedIngredient]:
        """Normalize several lines, logging how many need review."""
        results = [self.normalize(line) for line in raw_lines]
        flagged = sum(1 for r in results if r.needs_review)
        logger.info(f"Normalized {len(results)} ingredient lines, {flagged} flagged for review")
        return results

    def canonicalize(self, name: str) -> MatchResult:
        """Resolve a bare ingredient name (no amount or unit) to its canonical entry."""
        return self.matcher.match(name)


@lru_cache
def get_normalizer() -> IngredientNormalizer:
    """Get the shared normalizer over the default catalog."""
    return IngredientNormalizer()


def normalize_ingredient(raw_line: str | None) -> NormalizedIngredient:
    """
    Normalize a raw ingredient line with the default catalog.

    This is a convenience function for callers that do not manage their own
    IngredientNormalizer.
    """
    return get_normalizer().normalize(raw_line)
