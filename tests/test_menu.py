"""Tests for weekly menu generation."""

import logging
import random

import pytest
from conftest import make_dish

from menuplanner.models import MenuDay
from menuplanner.plan.menu import generate_weekly_menu, pick_from_top_k, violates_protein_rule

SEEDS = range(50)


def _assert_no_protein_triplet(menu):
    proteins = [day.dish.protein_tag for day in sorted(menu.days, key=lambda d: d.day_index)]
    for i in range(len(proteins) - 2):
        assert len(set(proteins[i : i + 3])) > 1, f"three {proteins[i]} dinners in a row"


class TestHelpers:
    """Tests for the protein rule and top-K picking."""

    def test_protein_rule(self):
        """Test that only a third same-protein day in a row is rejected."""
        chicken = [make_dish("a", "chicken"), make_dish("b", "chicken")]
        assert violates_protein_rule(chicken, make_dish("c", "chicken"))
        assert not violates_protein_rule(chicken, make_dish("c", "fish"))
        assert not violates_protein_rule(chicken[:1], make_dish("c", "chicken"))
        mixed = [make_dish("a", "chicken"), make_dish("b", "fish")]
        assert not violates_protein_rule(mixed, make_dish("c", "fish"))

    def test_protein_rule_with_upcoming_days(self):
        """Test that fixed dishes after the candidate count towards the run."""
        fish = make_dish("f", "fish")
        beef = make_dish("b", "beef")
        assert violates_protein_rule([], make_dish("c", "fish"), [fish, fish])
        assert violates_protein_rule([fish], make_dish("c", "fish"), [fish])
        assert not violates_protein_rule([beef], make_dish("c", "fish"), [fish])
        assert not violates_protein_rule([fish], make_dish("c", "fish"), [beef, fish])

    def test_pick_from_top_k(self):
        """Test that picks stay within the first K items."""
        rng = random.Random(3)
        items = list(range(20))
        picks = {pick_from_top_k(items, 4, rng) for _ in range(200)}
        assert picks <= {0, 1, 2, 3}

    def test_pick_with_small_pool(self):
        """Test K larger than the pool and K of zero."""
        rng = random.Random(3)
        assert pick_from_top_k(["only"], 8, rng) == "only"
        assert pick_from_top_k(["a", "b"], 0, rng) == "a"

    def test_pick_from_empty_raises(self):
        """Test that an empty pool is an error."""
        with pytest.raises(ValueError):
            pick_from_top_k([], 3, random.Random())


class TestGenerateWeeklyMenu:
    """Tests for generate_weekly_menu function."""

    def test_number_of_dinners(self, family_household, sample_dishes, empty_context, rng):
        """Test that the menu has one dinner per requested day."""
        menu = generate_weekly_menu(sample_dishes, family_household, empty_context, rng=rng)
        assert menu.household_id == "hh-1"
        assert [day.day_index for day in menu.days] == [0, 1, 2, 3, 4]

    def test_seeded_menus_are_reproducible(self, family_household, sample_dishes, empty_context):
        """Test that equal seeds give equal menus."""
        first = generate_weekly_menu(
            sample_dishes, family_household, empty_context, rng=random.Random(7)
        )
        second = generate_weekly_menu(
            sample_dishes, family_household, empty_context, rng=random.Random(7)
        )
        assert first.dish_ids == second.dish_ids

    def test_top_one_is_greedy(self, family_household, sample_dishes, empty_context, rng):
        """Test that K=1 always takes the best eligible dish."""
        menu = generate_weekly_menu(sample_dishes, family_household, empty_context, top_k=1, rng=rng)
        assert menu.days[0].dish.id == "kyckling-pasta"

    def test_global_random_state_untouched(self, family_household, sample_dishes, empty_context):
        """Test that the module-level random generator is never used."""
        random.seed(1)
        state = random.getstate()
        generate_weekly_menu(sample_dishes, family_household, empty_context)
        assert random.getstate() == state

    @pytest.mark.property
    def test_avoided_allergens_never_planned(self, family_household, sample_dishes, empty_context):
        """Test that no seed produces a dish with an avoided allergen."""
        for seed in SEEDS:
            menu = generate_weekly_menu(
                sample_dishes, family_household, empty_context, rng=random.Random(seed)
            )
            assert all("nötter" not in day.dish.allergens for day in menu.days)

    @pytest.mark.property
    def test_no_three_same_protein_in_a_row(self, family_household, sample_dishes, empty_context):
        """Test the protein variety rule over many seeds and a full week."""
        household = family_household.model_copy(
            update={
                "preferences": family_household.preferences.model_copy(
                    update={"dinners_per_week": 7}
                )
            }
        )
        for seed in SEEDS:
            rng = random.Random(seed)
            menu = generate_weekly_menu(sample_dishes, household, empty_context, rng=rng)
            assert len(menu.days) == 7
            _assert_no_protein_triplet(menu)

    @pytest.mark.property
    def test_no_duplicate_dishes(self, family_household, sample_dishes, empty_context):
        """Test that a dish is planned at most once per week."""
        for seed in SEEDS:
            menu = generate_weekly_menu(
                sample_dishes, family_household, empty_context, rng=random.Random(seed)
            )
            assert len(menu.dish_ids) == len(set(menu.dish_ids))

    def test_locked_day_kept(self, family_household, sample_dishes, empty_context, rng):
        """Test that a locked day keeps its dish and is not planned twice."""
        salmon = next(d for d in sample_dishes if d.id == "lax-ugn")
        lock = MenuDay(day_index=2, dish=salmon, score=0.0)
        menu = generate_weekly_menu(
            sample_dishes, family_household, empty_context, locked_days=[lock], rng=rng
        )
        assert menu.day(2).dish.id == "lax-ugn"
        assert menu.day(2).locked
        assert menu.dish_ids.count("lax-ugn") == 1
        assert not any(day.locked for day in menu.days if day.day_index != 2)

    def test_lock_outside_week_ignored(self, family_household, sample_dishes, empty_context, rng):
        """Test that locks beyond the number of dinners are not placed."""
        salmon = next(d for d in sample_dishes if d.id == "lax-ugn")
        lock = MenuDay(day_index=6, dish=salmon, score=0.0)
        menu = generate_weekly_menu(
            sample_dishes, family_household, empty_context, locked_days=[lock], rng=rng
        )
        assert menu.day(6) is None
        assert len(menu.days) == 5

    def test_exhaustion_leaves_days_out(self, family_household, chicken_only_dishes, empty_context, rng):
        """Test that days without an eligible dish are skipped."""
        menu = generate_weekly_menu(chicken_only_dishes, family_household, empty_context, rng=rng)
        assert [day.day_index for day in menu.days] == [0, 1]

    def test_no_dishes(self, family_household, empty_context, rng):
        """Test that an empty catalog gives an empty menu."""
        menu = generate_weekly_menu([], family_household, empty_context, rng=rng)
        assert menu.days == []

    def test_day_scores_come_from_ranking(self, family_household, sample_dishes, empty_context, rng):
        """Test that each day carries its household score and breakdown."""
        menu = generate_weekly_menu(sample_dishes, family_household, empty_context, rng=rng)
        for day in menu.days:
            assert 0.0 <= day.score <= 100.0
            assert len(day.profile_scores) == len(family_household.profiles)

    def test_logs_with_household_context(self, family_household, sample_dishes, empty_context, caplog):
        """Test that log records carry the household id."""
        caplog.set_level(logging.INFO, logger="menuplanner")
        generate_weekly_menu(sample_dishes, family_household, empty_context, rng=random.Random(0))
        assert any(getattr(r, "household_id", None) == "hh-1" for r in caplog.records)


def _with_dinners(household, dinners):
    preferences = household.preferences.model_copy(update={"dinners_per_week": dinners})
    return household.model_copy(update={"preferences": preferences})


class TestLockedDaysAndProteinRule:
    """Tests for the protein rule next to locked days."""

    @pytest.mark.property
    def test_no_triplet_before_locked_day(self, family_household, empty_context):
        """Test that generated days do not run into a locked day with the same protein."""
        household = _with_dinners(family_household, 3)
        dishes = [
            make_dish("lax", "fish"),
            make_dish("torsk", "fish"),
            make_dish("sej", "fish"),
            make_dish("biff", "beef"),
        ]
        lock = MenuDay(day_index=2, dish=dishes[2], score=0.0)
        for seed in SEEDS:
            menu = generate_weekly_menu(
                dishes, household, empty_context, locked_days=[lock], rng=random.Random(seed)
            )
            assert len(menu.days) == 3
            _assert_no_protein_triplet(menu)

    @pytest.mark.property
    def test_no_triplet_with_two_locked_days_ahead(self, family_household, empty_context):
        """Test a generated day in front of two locked days sharing a protein."""
        household = _with_dinners(family_household, 4)
        dishes = [make_dish(f"fisk-{i}", "fish") for i in range(4)] + [
            make_dish("biff", "beef"),
            make_dish("kyckling", "chicken"),
        ]
        locks = [
            MenuDay(day_index=1, dish=dishes[0], score=0.0),
            MenuDay(day_index=2, dish=dishes[1], score=0.0),
        ]
        for seed in SEEDS:
            menu = generate_weekly_menu(
                dishes, household, empty_context, locked_days=locks, rng=random.Random(seed)
            )
            assert menu.day(0).dish.protein_tag != "fish"
            _assert_no_protein_triplet(menu)
