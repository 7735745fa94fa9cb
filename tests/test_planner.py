"""
Tests for row layout planning.
"""

from dataclasses import replace

import pytest

from core.planner import CANONICAL_LAYOUTS, max_grid_capacity, max_safe_cards, plan_rows, recommended_card_count
from core.space import calculate_available_space
from models import AvailableSpace, LayoutCapacity, LayoutConstraints, LayoutRequest, RowPlan


def plan_tuple(plan: RowPlan) -> tuple[int, int]:
    return plan.rows, plan.cards_per_row


@pytest.mark.unit
class TestGridCapacity:
    def test_wide_capacity(self, wide_space, wide_profile, default_constraints):
        """
        Safety box 875.52 x 364.8 with 60x90 cards, 16 px card and 20 px row spacing.
        Expected: 11 cards per row, 3 rows.
        """
        capacity = max_grid_capacity(
            wide_space,
            default_constraints.min_card_width,
            default_constraints.min_card_height,
            wide_profile.card_spacing,
            wide_profile.row_spacing,
            default_constraints.safety_factor,
        )
        assert capacity == (11, 3)

    def test_compact_capacity(self, compact_space, compact_profile, default_constraints):
        capacity = max_grid_capacity(
            compact_space,
            default_constraints.min_card_width,
            default_constraints.min_card_height,
            compact_profile.card_spacing,
            compact_profile.row_spacing,
            default_constraints.safety_factor,
        )
        assert capacity == (4, 1)


@pytest.mark.unit
class TestPlanRows:
    @pytest.mark.parametrize("count", [1, 2, 3])
    def test_small_counts_single_row(self, wide_space, wide_profile, default_constraints, count):
        plan = plan_rows(count, wide_space, default_constraints, wide_profile)
        assert plan_tuple(plan) == (1, count)

    @pytest.mark.parametrize(
        "count,expected",
        [(4, (2, 2)), (6, (2, 3)), (9, (3, 3)), (12, (3, 4))],
    )
    def test_canonical_layouts(self, wide_space, wide_profile, default_constraints, count, expected):
        """
        Canonical counts that fit take their preferred rectangle.
        Expected: 6 and 12 prefer the wider of the two near-square plans.
        """
        plan = plan_rows(count, wide_space, default_constraints, wide_profile)
        assert plan_tuple(plan) == expected

    def test_canonical_table_has_full_candidates(self):
        for count, candidates in CANONICAL_LAYOUTS.items():
            for rows, per_row in candidates:
                assert RowPlan(rows, per_row).is_complete_for(count)

    def test_canonical_alternative_when_preferred_does_not_fit(
        self, compact_space, compact_profile, default_constraints
    ):
        """
        Only one row fits in the compact space.
        Expected: 4 cards fall back to the 1x4 candidate.
        """
        plan = plan_rows(4, compact_space, default_constraints, compact_profile)
        assert plan_tuple(plan) == (1, 4)

    @pytest.mark.parametrize("count,expected", [(5, (1, 5)), (7, (2, 5)), (8, (2, 5)), (10, (2, 5))])
    def test_general_rule_prefers_device_row_width(
        self, wide_space, wide_profile, default_constraints, count, expected
    ):
        plan = plan_rows(count, wide_space, default_constraints, wide_profile)
        assert plan_tuple(plan) == expected

    def test_large_count_on_large_screen(self, wide_profile, default_constraints):
        space = calculate_available_space(1920, 1080, wide_profile)
        assert plan_tuple(plan_rows(16, space, default_constraints, wide_profile)) == (4, 4)
        assert plan_tuple(plan_rows(20, space, default_constraints, wide_profile)) == (4, 5)

    def test_collapse_to_single_row(self, wide_space, wide_profile, default_constraints):
        """
        16 cards need 4 rows but only 3 fit.
        Expected: Single row of all cards; the solver scales them.
        """
        plan = plan_rows(16, wide_space, default_constraints, wide_profile)
        assert plan_tuple(plan) == (1, 16)

    def test_looser_minimum_allows_more_rows(self, wide_space, wide_profile):
        constraints = LayoutConstraints(min_card_width=40, scale_floor_width=30)
        plan = plan_rows(16, wide_space, constraints, wide_profile)
        assert plan_tuple(plan) == (4, 4)


@pytest.mark.edge_case
class TestPlanRowsEdgeCases:
    def test_zero_cards(self, wide_space, wide_profile, default_constraints):
        plan = plan_rows(0, wide_space, default_constraints, wide_profile)
        assert plan.is_empty
        assert plan.is_complete_for(0)

    @pytest.mark.parametrize("count", range(1, 51))
    def test_plan_always_complete(self, compact_space, compact_profile, default_constraints, count):
        """
        Any count on a cramped space.
        Expected: Every card placed, no fully empty row, never zero rows or columns.
        """
        plan = plan_rows(count, compact_space, default_constraints, compact_profile)
        assert plan.rows >= 1 and plan.cards_per_row >= 1
        assert plan.is_complete_for(count)


@pytest.mark.unit
class TestMaxSafeCards:
    def test_wide_capped_by_device(self, wide_space, wide_profile, default_constraints):
        """
        11 x 3 minimum-size cards fit the 1024x768 wide space.
        Expected: 33 capped to the wide device limit of 20.
        """
        capacity = max_safe_cards(wide_space, wide_profile, default_constraints)

        assert capacity == LayoutCapacity(max_cards_per_row=11, max_rows=3, max_safe_cards=20)
        assert capacity.fits_one_card

    def test_compact_limited_by_space(self, compact_space, compact_profile, default_constraints):
        capacity = max_safe_cards(compact_space, compact_profile, default_constraints)

        assert capacity == LayoutCapacity(max_cards_per_row=4, max_rows=1, max_safe_cards=4)

    def test_medium_capped_by_device(self, medium_profile, default_constraints):
        space = calculate_available_space(800, 600, medium_profile)
        capacity = max_safe_cards(space, medium_profile, default_constraints)

        assert (capacity.max_cards_per_row, capacity.max_rows) == (9, 2)
        assert capacity.max_safe_cards == 12

    def test_profile_without_limit(self, wide_space, wide_profile, default_constraints):
        unbounded = replace(wide_profile, max_cards=None)

        assert max_safe_cards(wide_space, unbounded, default_constraints).max_safe_cards == 33

    def test_nothing_fits(self, wide_profile, default_constraints):
        space = AvailableSpace(width=50, height=50, center_x=25, center_y=25)
        capacity = max_safe_cards(space, wide_profile, default_constraints)

        assert capacity.max_safe_cards == 0
        assert not capacity.fits_one_card

    def test_engine_capacity_for_request(self, engine):
        assert engine.capacity_for(LayoutRequest(5, 1024, 768)).max_safe_cards == 20
        assert engine.capacity_for(engine.request_for_viewport(0, 400, 300)).max_safe_cards == 4


@pytest.mark.unit
class TestRecommendedCardCount:
    @pytest.mark.parametrize(
        "requested,max_safe,item_count,expected",
        [
            (10, 20, 50, 12),
            (3, 20, 50, 4),
            (10, 11, 50, 11),
            (10, 20, 8, 8),
            (0, 0, 0, 1),
        ],
    )
    def test_recommendation(self, requested, max_safe, item_count, expected):
        assert recommended_card_count(requested, max_safe, item_count) == expected
