"""Tests for allergen inference from normalized ingredients."""

from menuplanner.normalize import infer_allergens, normalize_ingredient


def _allergens(*lines: str) -> list[str]:
    return infer_allergens([normalize_ingredient(line) for line in lines])


class TestInferAllergens:
    """Tests for infer_allergens function."""

    def test_no_allergens(self):
        """Test a dish of plain produce."""
        assert _allergens("2 tomater", "1 gul lök") == []

    def test_gluten(self):
        """Test wheat-based pantry goods."""
        assert _allergens("400 g pasta") == ["gluten"]
        assert _allergens("2 dl vetemjöl") == ["gluten"]
        assert _allergens("500 g gnocchi") == ["gluten"]

    def test_lactose(self):
        """Test dairy ingredients."""
        assert _allergens("2 dl grädde") == ["laktos"]
        assert _allergens("25 g smör") == ["laktos"]
        assert _allergens("1 dl riven parmesan") == ["laktos"]

    def test_coconut_milk_is_not_dairy(self):
        """Test that coconut milk does not count as milk."""
        assert _allergens("4 dl kokosmjölk") == []

    def test_peanut_butter(self):
        """Test that peanut butter is a nut, not butter."""
        assert _allergens("2 msk jordnötssmör") == ["nötter"]

    def test_egg_soy_shellfish(self):
        """Test the remaining allergen groups."""
        assert _allergens("2 ägg") == ["ägg"]
        assert _allergens("1 msk soja") == ["soja"]
        assert _allergens("200 g räkor") == ["skaldjur"]

    def test_stable_order_without_duplicates(self):
        """Test that allergens come out once each, in a fixed order."""
        result = _allergens("2 ägg", "400 g pasta", "2 dl mjölk", "1 dl mjölk", "1 msk soja")
        assert result == ["gluten", "laktos", "ägg", "soja"]
