"""Alias diagnostics for reviewing how raw ingredient lines were canonicalized."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from menuplanner.models import MatchMode, NormalizedIngredient
from menuplanner.normalize.service import IngredientNormalizer, get_normalizer

MAX_RAW_EXAMPLES = 25


@dataclass
class AliasReportEntry:
    """How often a canonical ingredient was produced and from which raw lines."""

    canonical_name: str
    display_name: str
    count: int = 0
    units: set[str] = field(default_factory=set)
    match_modes: set[str] = field(default_factory=set)
    raw_examples: list[str] = field(default_factory=list)
    lowest_confidence: float = 1.0

    def add(self, raw_line: str, ingredient: NormalizedIngredient) -> None:
        self.count += 1
        self.units.add(ingredient.unit.value)
        self.match_modes.add(ingredient.match_mode.value)
        self.lowest_confidence = min(self.lowest_confidence, ingredient.confidence)
        if len(self.raw_examples) < MAX_RAW_EXAMPLES and raw_line not in self.raw_examples:
            self.raw_examples.append(raw_line)


@dataclass
class AliasReport:
    """Canonicalization summary over a batch of raw ingredient lines."""

    total_lines: int = 0
    entries: dict[str, AliasReportEntry] = field(default_factory=dict)
    review_lines: list[str] = field(default_factory=list)

    @property
    def total_canonical_ingredients(self) -> int:
        return len(self.entries)

    @property
    def unresolved(self) -> list[AliasReportEntry]:
        """Entries that were never matched against the catalog."""
        return [e for e in self.sorted_entries() if e.match_modes == {MatchMode.FALLBACK.value}]

    def sorted_entries(self) -> list[AliasReportEntry]:
        """Entries by descending count, then canonical name."""
        return sorted(self.entries.values(), key=lambda e: (-e.count, e.canonical_name))

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "total_lines": self.total_lines,
            "total_canonical_ingredients": self.total_canonical_ingredients,
            "review_lines": list(self.review_lines),
            "aliases": [
                {
                    "canonical_name": e.canonical_name,
                    "display_name": e.display_name,
                    "count": e.count,
                    "units": sorted(e.units),
                    "match_modes": sorted(e.match_modes),
                    "lowest_confidence": e.lowest_confidence,
                    "raw_examples": sorted(e.raw_examples),
                }
                for e in self.sorted_entries()
            ],
        }


def build_alias_report(
    raw_lines: Iterable[str],
    normalizer: IngredientNormalizer | None = None,
) -> AliasReport:
    """
    Build an alias report for a batch of raw ingredient lines.

    Pure with respect to the engine: every call starts from an empty report,
    so an import job can call it per batch and merge or write the results.
    """
    normalizer = normalizer or get_normalizer()
    report = AliasReport()

    for raw_line in raw_lines:
        ingredient = normalizer.normalize(raw_line)
        report.total_lines += 1

        entry = report.entries.get(ingredient.canonical_name)
        if entry is None:
            entry = AliasReportEntry(
                canonical_name=ingredient.canonical_name,
                display_name=ingredient.display_name,
            )
            report.entries[ingredient.canonical_name] = entry
        entry.add(raw_line, ingredient)

        if ingredient.needs_review:
            report.review_lines.append(raw_line)

    return report
