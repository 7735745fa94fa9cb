"""
End-to-end tests of the layout engine pipeline.
"""

import logging

import pytest

import core.engine
from conftest import assert_fits_safety_box, assert_no_overlaps, assert_rows_centered, rows_of
from core.cache import LayoutCache
from models import (
    DegradedLayout,
    DeviceClass,
    LayoutEngineConfig,
    LayoutRequest,
    OptimalLayout,
)


@pytest.mark.integration
class TestLayoutScenarios:
    def test_five_cards_single_row(self, engine):
        """
        5 cards on 1024x768, wide device.
        Expected: Single centered row of 5 at maximum size.
        """
        request = LayoutRequest(5, 1024, 768, DeviceClass.WIDE)
        result = engine.compute_layout(request)
        space = engine.available_space(request)

        assert result.is_optimal
        assert (result.row_plan.rows, result.row_plan.cards_per_row) == (1, 5)
        assert (result.card_size.width, result.card_size.height) == (100, 150)
        assert_rows_centered(result, space)

    def test_eight_cards_five_plus_three(self, engine):
        request = LayoutRequest(8, 1024, 768, DeviceClass.WIDE)
        result = engine.compute_layout(request)
        space = engine.available_space(request)

        assert result.is_optimal
        assert [len(cards) for cards in rows_of(result).values()] == [5, 3]
        last_row = rows_of(result)[1]
        assert (last_row[0].left + last_row[-1].right) / 2 == pytest.approx(space.center_x)

    def test_nine_cards_three_by_three(self, engine):
        result = engine.compute_for_viewport(9, 1024, 768)

        assert result.is_optimal
        assert (result.row_plan.rows, result.row_plan.cards_per_row) == (3, 3)
        assert result.card_size.ratio == pytest.approx(1.5)

    def test_nine_cards_small_container_degrades(self, engine):
        """
        9 cards on 400x300: the primary single-row plan overflows.
        Expected: Fallback engages, 2-row layout with reduced cards, not optimal.
        """
        request = engine.request_for_viewport(9, 400, 300)
        outcome = engine.plan_layout(request)

        assert request.device_class == DeviceClass.COMPACT
        assert isinstance(outcome, DegradedLayout)
        assert not outcome.rejected.is_valid
        assert any("overflow" in v for v in outcome.rejected.violations)

        result = outcome.result
        assert not result.is_optimal
        assert result.row_plan.rows == 2
        assert result.card_size.width < engine.constraints.min_card_width
        assert engine.validate_layout(result, outcome.space).is_valid

    def test_outcome_carries_space(self, engine):
        request = LayoutRequest(4, 1024, 768)
        outcome = engine.plan_layout(request)

        assert isinstance(outcome, OptimalLayout)
        assert outcome.space == engine.available_space(request)

    def test_result_fits_and_is_disjoint(self, engine):
        request = LayoutRequest(12, 1280, 900)
        result = engine.compute_layout(request)
        space = engine.available_space(request)

        assert_fits_safety_box(result, space)
        assert_no_overlaps(result)


@pytest.mark.edge_case
class TestEngineEdgeCases:
    def test_zero_cards(self, engine):
        result = engine.compute_layout(LayoutRequest(0, 1024, 768))

        assert result.positions == ()
        assert result.row_plan.is_empty
        assert result.is_optimal
        assert (result.total_width, result.total_height) == (0.0, 0.0)

    @pytest.mark.parametrize("width,height", [(0, 0), (-1, 500), (float("nan"), 800)])
    def test_degenerate_container(self, engine, width, height):
        """
        Test unusable container dimensions.
        Expected: Layout on the floor space, valid, no exception.
        """
        outcome = engine.plan_layout(engine.request_for_viewport(6, width, height))

        assert outcome.result.card_count == 6
        assert engine.validate_layout(outcome.result, outcome.space).is_valid

    def test_primary_failure_routes_to_fallback(self, engine, monkeypatch, caplog):
        def broken_plan(*args, **kwargs):
            raise ZeroDivisionError("boom")

        monkeypatch.setattr(core.engine, "plan_rows", broken_plan)
        with caplog.at_level(logging.ERROR, logger="core.engine"):
            outcome = engine.plan_layout(LayoutRequest(6, 1024, 768))

        assert isinstance(outcome, DegradedLayout)
        assert "primary pipeline error: boom" in outcome.rejected.violations[0]
        assert "Primary layout pipeline failed" in caplog.text
        assert engine.validate_layout(outcome.result, outcome.space).is_valid


@pytest.mark.unit
class TestDeterminismAndCache:
    def test_identical_requests_identical_results(self, engine_factory):
        engine = engine_factory(cache_enabled=False)
        request = LayoutRequest(17, 1366, 768)

        first = engine.compute_layout(request)
        second = engine.compute_layout(request)

        assert first == second
        assert first is not second

    def test_cache_returns_same_object(self, engine):
        request = LayoutRequest(7, 1024, 768)
        first = engine.compute_layout(request)
        second = engine.compute_layout(request)

        assert first is second
        stats = engine.cache_stats()
        assert (stats["hits"], stats["misses"]) == (1, 1)

    def test_cache_key_distinguishes_device(self, engine):
        engine.compute_layout(LayoutRequest(7, 1024, 768, DeviceClass.WIDE))
        engine.compute_layout(LayoutRequest(7, 1024, 768, DeviceClass.COMPACT))

        assert engine.cache_stats()["size"] == 2

    def test_cache_disabled(self, engine_factory):
        engine = engine_factory(cache_enabled=False)
        engine.compute_layout(LayoutRequest(3, 800, 600))

        assert engine.cache is None
        assert engine.cache_stats() == {}

    def test_injected_cache(self):
        cache = LayoutCache(max_entries=2)
        engine = core.engine.LayoutEngine(cache=cache)
        for count in range(4):
            engine.compute_layout(LayoutRequest(count, 800, 600))

        assert len(cache) == 2
        assert cache.stats()["evictions"] == 2

    def test_clear_and_dispose(self, engine):
        engine.compute_layout(LayoutRequest(3, 800, 600))
        engine.clear_cache()
        assert engine.cache_stats()["size"] == 0

        engine.dispose()
        assert engine.get_performance_metrics() == {}


@pytest.mark.unit
class TestPerformanceMetrics:
    def test_metrics_recorded_per_call(self, engine):
        for count in (1, 5, 9):
            engine.compute_for_viewport(count, 1024, 768)

        metrics = engine.get_performance_metrics()["plan_layout"]
        assert metrics["calls"] == 3
        assert 0 <= metrics["mean_ms"] <= metrics["max_ms"]

        engine.reset_performance_metrics()
        assert engine.get_performance_metrics() == {}

    def test_budget_warning(self, engine_factory, caplog):
        engine = engine_factory(LayoutEngineConfig(performance_budget_ms=0))
        with caplog.at_level(logging.WARNING, logger="core.engine"):
            engine.compute_layout(LayoutRequest(9, 1024, 768))

        assert "over the 0 ms budget" in caplog.text


@pytest.mark.performance
class TestEnginePerformance:
    def test_realistic_counts_are_fast(self, engine_factory, performance_monitor):
        engine = engine_factory(cache_enabled=False)

        def run_all():
            for count in range(1, 51):
                engine.compute_for_viewport(count, 1440, 900)

        performance_monitor.time_operation("fifty_layouts", run_all)
        report = performance_monitor.get_performance_report()

        assert report["timings"]["fifty_layouts"] < 1.0
