"""
Adaptive card-layout engine.

This module contains the LayoutEngine class which runs the full pipeline:
device profile -> available space -> row plan -> card size -> positions ->
validation, with the emergency fallback when validation fails. Every call is a
pure function of its request; the only state kept between calls is the
optional memoization cache and performance metrics of the engine instance.
"""

import logging
import time
from functools import wraps
from typing import Any, Optional

from core.cache import LayoutCache
from core.device import classify_device, get_spacing_profile
from core.fallback import plan_emergency_layout
from core.planner import max_safe_cards, plan_rows
from core.positions import generate_positions
from core.sizing import grid_footprint, solve_card_size
from core.space import DEFAULT_CHROME, ChromeReservation, calculate_available_space
from core.validator import validate_layout
from models import (
    AvailableSpace,
    CardSize,
    DegradedLayout,
    LayoutCapacity,
    LayoutEngineConfig,
    LayoutOutcome,
    LayoutRequest,
    LayoutResult,
    OptimalLayout,
    RowPlan,
    SpacingProfile,
    ValidationResult,
)


# Performance monitoring decorator
def _layout_performance_monitor(func_name: str):
    """Decorator for monitoring layout computation time against the soft budget"""

    def decorator(func):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = func(self, *args, **kwargs)
            except Exception as e:
                elapsed_ms = (time.perf_counter() - start_time) * 1000
                self.logger.error(
                    f"LayoutEngine.{func_name} failed after {elapsed_ms:.3f} ms: {str(e)}"
                )
                raise

            elapsed_ms = (time.perf_counter() - start_time) * 1000
            self._performance_metrics.setdefault(func_name, []).append(elapsed_ms)

            if elapsed_ms > self.config.performance_budget_ms:
                self.logger.warning(
                    f"LayoutEngine.{func_name} took {elapsed_ms:.3f} ms, over the "
                    f"{self.config.performance_budget_ms:.0f} ms budget"
                )
            else:
                self.logger.debug(f"LayoutEngine.{func_name} executed in {elapsed_ms:.3f} ms")
            return result

        return wrapper

    return decorator


class LayoutEngine:
    """Pure geometric layout planner for a set of uniform cards"""

    def __init__(
        self,
        config: Optional[LayoutEngineConfig] = None,
        cache: Optional[LayoutCache] = None,
        chrome: ChromeReservation = DEFAULT_CHROME,
    ):
        self.config = config or LayoutEngineConfig()
        self.chrome = chrome
        self.logger = logging.getLogger(__name__)
        self._performance_metrics: dict[str, list[float]] = {}

        if cache is not None:
            self.cache: Optional[LayoutCache] = cache
        elif self.config.cache_enabled:
            self.cache = LayoutCache(self.config.cache_max_entries)
        else:
            self.cache = None

    @property
    def constraints(self):
        return self.config.constraints

    def request_for_viewport(
        self, card_count: int, container_width: float, container_height: float
    ) -> LayoutRequest:
        """Build a request with the device class taken from the container width"""
        breakpoint = classify_device(container_width)
        return LayoutRequest(
            card_count=card_count,
            container_width=container_width,
            container_height=container_height,
            device_class=breakpoint.device_class,
        )

    def available_space(self, request: LayoutRequest) -> AvailableSpace:
        profile = get_spacing_profile(request.device_class)
        return calculate_available_space(
            request.container_width, request.container_height, profile, self.chrome
        )

    def capacity_for(self, request: LayoutRequest) -> LayoutCapacity:
        """How many minimum-size cards the request's container holds; ``card_count`` is ignored"""
        profile = get_spacing_profile(request.device_class)
        return max_safe_cards(self.available_space(request), profile, self.constraints)

    def compute_layout(self, request: LayoutRequest) -> LayoutResult:
        """
        Compute the layout for a request.

        Always returns a usable result; ``is_optimal`` is False when the
        emergency fallback produced it.
        """
        return self.plan_layout(request).result

    def compute_for_viewport(
        self, card_count: int, container_width: float, container_height: float
    ) -> LayoutResult:
        return self.compute_layout(
            self.request_for_viewport(card_count, container_width, container_height)
        )

    @_layout_performance_monitor("plan_layout")
    def plan_layout(self, request: LayoutRequest) -> LayoutOutcome:
        """
        Compute the layout and report how it was obtained.

        Returns:
            OptimalLayout when the primary plan passed validation, otherwise
            DegradedLayout carrying the rejected validation
        """
        key = request.cache_key
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                self.logger.debug(f"Layout cache hit for {key}")
                return cached

        outcome = self._compute(request)

        if self.cache is not None:
            self.cache.put(key, outcome)
        return outcome

    def validate_layout(
        self,
        result: LayoutResult,
        space: AvailableSpace,
        min_size: Optional[CardSize] = None,
    ) -> ValidationResult:
        return validate_layout(result, space, min_size, self.constraints.safety_factor)

    def _compute(self, request: LayoutRequest) -> LayoutOutcome:
        profile = get_spacing_profile(request.device_class)
        space = calculate_available_space(
            request.container_width, request.container_height, profile, self.chrome
        )

        if request.card_count == 0:
            return OptimalLayout(result=self._empty_result(profile), space=space)

        try:
            primary = self._primary_layout(request.card_count, space, profile)
            validation = self.validate_layout(primary, space)
        except Exception as e:
            self.logger.exception(f"Primary layout pipeline failed for {request}: {e}")
            validation = ValidationResult.from_violations([f"primary pipeline error: {e}"])
        else:
            if validation.is_valid:
                self.logger.debug(f"Primary layout accepted: {primary.describe()}")
                return OptimalLayout(result=primary, space=space)

        self.logger.info(
            f"Primary layout for {request.card_count} cards rejected "
            f"({'; '.join(validation.violations)}), engaging fallback"
        )
        degraded = plan_emergency_layout(request.card_count, space, profile, self.constraints)
        return DegradedLayout(result=degraded, space=space, rejected=validation)

    def _primary_layout(
        self, card_count: int, space: AvailableSpace, profile: SpacingProfile
    ) -> LayoutResult:
        constraints = self.constraints
        plan = plan_rows(card_count, space, constraints, profile)
        size = solve_card_size(plan, space, profile, constraints)
        positions = generate_positions(
            card_count, plan, size, space, profile.card_spacing, profile.row_spacing
        )
        total_width, total_height = grid_footprint(
            plan, size, profile.card_spacing, profile.row_spacing
        )
        return LayoutResult(
            positions=positions,
            card_size=size,
            row_plan=plan,
            total_width=total_width,
            total_height=total_height,
            is_optimal=True,
            card_spacing=profile.card_spacing,
            row_spacing=profile.row_spacing,
            min_card_size=CardSize(constraints.min_card_width, constraints.min_card_height),
        )

    @staticmethod
    def _empty_result(profile: SpacingProfile) -> LayoutResult:
        return LayoutResult(
            positions=(),
            card_size=CardSize(0.0, 0.0),
            row_plan=RowPlan.empty(),
            total_width=0.0,
            total_height=0.0,
            is_optimal=True,
            card_spacing=profile.card_spacing,
            row_spacing=profile.row_spacing,
        )

    def get_performance_metrics(self) -> dict[str, dict[str, Any]]:
        """Per-operation call count, mean and max execution time in ms"""
        metrics = {}
        for name, timings in self._performance_metrics.items():
            metrics[name] = {
                "calls": len(timings),
                "mean_ms": sum(timings) / len(timings),
                "max_ms": max(timings),
                "last_ms": timings[-1],
            }
        return metrics

    def reset_performance_metrics(self) -> None:
        self._performance_metrics.clear()

    def clear_cache(self) -> None:
        if self.cache is not None:
            self.cache.clear()

    def cache_stats(self) -> dict[str, Any]:
        return self.cache.stats() if self.cache is not None else {}

    def dispose(self) -> None:
        """Release cached results and metrics at teardown"""
        self.clear_cache()
        self.reset_performance_metrics()
        self.logger.debug("Layout engine disposed")
