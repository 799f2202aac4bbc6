"""Tests for the alias diagnostics report."""

from menuplanner.normalize import build_alias_report
from menuplanner.normalize.diagnostics import MAX_RAW_EXAMPLES


class TestBuildAliasReport:
    """Tests for build_alias_report function."""

    def test_groups_by_canonical_name(self):
        """Test that different spellings of one ingredient share an entry."""
        report = build_alias_report(["2 klyftor vitlök", "1 vitlöksklyfta", "400 g gnocchi"])
        assert report.total_lines == 3
        assert report.total_canonical_ingredients == 2

        garlic = report.entries["vitlok"]
        assert garlic.count == 2
        assert garlic.raw_examples == ["2 klyftor vitlök", "1 vitlöksklyfta"]
        assert garlic.units == {"piece"}
        assert garlic.match_modes == {"exact"}

    def test_review_lines_and_unresolved(self):
        """Test that low-confidence lines are listed for review."""
        report = build_alias_report(["200 g quinoa", "2 tomater"])
        assert report.review_lines == ["200 g quinoa"]
        assert [e.canonical_name for e in report.unresolved] == ["quinoa"]
        assert report.entries["quinoa"].lowest_confidence == 0.45

    def test_raw_examples_are_capped(self):
        """Test that the number of raw examples per entry is bounded."""
        lines = [f"{i} tomater" for i in range(1, MAX_RAW_EXAMPLES + 10)]
        report = build_alias_report(lines)
        entry = report.entries["tomat"]
        assert entry.count == len(lines)
        assert len(entry.raw_examples) == MAX_RAW_EXAMPLES

    def test_each_call_starts_empty(self):
        """Test that reports do not accumulate across calls."""
        build_alias_report(["2 tomater"])
        report = build_alias_report(["1 citron"])
        assert list(report.entries) == ["citron"]

    def test_to_dict(self):
        """Test the JSON-ready summary sorted by count."""
        data = build_alias_report(["1 citron", "2 tomater", "3 tomater"]).to_dict()
        assert data["total_lines"] == 3
        assert data["total_canonical_ingredients"] == 2
        assert [a["canonical_name"] for a in data["aliases"]] == ["tomat", "citron"]
        assert data["aliases"][0]["count"] == 2
        assert data["aliases"][0]["units"] == ["piece"]
