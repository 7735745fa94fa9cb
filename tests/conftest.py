"""
Test Configuration and Fixtures for the Card Layout Engine
==========================================================

Central fixtures, geometry helpers and marker registration for the test suite.

Test Architecture:
- conftest.py: This file - central fixtures and utilities
- test_<component>.py: One module per pipeline component
- test_engine.py: End-to-end pipeline scenarios
- test_layout_properties.py: Property sweeps over card counts and container sizes
"""

import logging
import os

# Import system under test
import sys
import time
from typing import Any

import numpy as np
import pytest

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.device import get_spacing_profile
from core.engine import LayoutEngine
from core.space import calculate_available_space
from models import (
    AvailableSpace,
    CardPosition,
    DeviceClass,
    LayoutConstraints,
    LayoutEngineConfig,
    LayoutResult,
)

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

GEOMETRY_TOLERANCE = 1e-6

# =============================================================================
# PERFORMANCE MONITORING UTILITIES
# =============================================================================


class PerformanceMonitor:
    """Performance monitoring for tests."""

    def __init__(self):
        self.timings = {}

    def time_operation(self, operation_name: str, func, *args, **kwargs):
        """Time an operation and store the result."""
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        self.timings[operation_name] = time.perf_counter() - start_time
        return result

    def get_performance_report(self) -> dict[str, Any]:
        """Get performance report."""
        if not self.timings:
            return {"message": "No performance data collected"}

        return {
            "timings": self.timings,
            "total_time": sum(self.timings.values()),
            "slowest_operation": max(self.timings.items(), key=lambda x: x[1]),
            "average_time": np.mean(list(self.timings.values())),
        }


# =============================================================================
# STANDARD TEST FIXTURES
# =============================================================================


@pytest.fixture
def default_constraints():
    """Default card size constraints."""
    return LayoutConstraints()


@pytest.fixture(scope="session")
def wide_profile():
    return get_spacing_profile(DeviceClass.WIDE)


@pytest.fixture(scope="session")
def medium_profile():
    return get_spacing_profile(DeviceClass.MEDIUM)


@pytest.fixture(scope="session")
def compact_profile():
    return get_spacing_profile(DeviceClass.COMPACT)


@pytest.fixture
def wide_space(wide_profile):
    """Available space of a 1024x768 container on the wide profile (921.6 x 384)."""
    return calculate_available_space(1024, 768, wide_profile)


@pytest.fixture
def compact_space(compact_profile):
    """Available space of a 400x300 container on the compact profile (360 x 160)."""
    return calculate_available_space(400, 300, compact_profile)


@pytest.fixture
def engine_factory():
    """Factory for creating isolated LayoutEngine instances."""
    created = []

    def _create_engine(config: LayoutEngineConfig = None, **config_overrides) -> LayoutEngine:
        if config is None:
            config = LayoutEngineConfig(**config_overrides)
        engine = LayoutEngine(config)
        created.append(engine)
        return engine

    yield _create_engine

    for engine in created:
        engine.dispose()


@pytest.fixture
def engine(engine_factory):
    """Engine with the default configuration."""
    return engine_factory()


@pytest.fixture
def performance_monitor():
    """Performance monitoring fixture for timing tests."""
    return PerformanceMonitor()


# =============================================================================
# GEOMETRY HELPERS
# =============================================================================


def make_position(index: int, x: float, y: float, width: float = 60, height: float = 90, row=0, column=0):
    """Single card position for hand-built results."""
    return CardPosition(
        index=index, x=x, y=y, card_width=width, card_height=height, row=row, column=column
    )


def rows_of(result: LayoutResult) -> dict[int, list[CardPosition]]:
    """Positions grouped by row, each row in column order."""
    rows: dict[int, list[CardPosition]] = {}
    for position in result.positions:
        rows.setdefault(position.row, []).append(position)
    return {row: sorted(cards, key=lambda p: p.column) for row, cards in sorted(rows.items())}


def assert_fits_safety_box(result: LayoutResult, space: AvailableSpace, safety_factor: float = 0.95):
    """Card footprint never exceeds the safety box of the available space."""
    box_width, box_height = space.safe_box(safety_factor)
    assert result.total_width <= box_width + GEOMETRY_TOLERANCE, (
        f"width {result.total_width} exceeds {box_width}"
    )
    assert result.total_height <= box_height + GEOMETRY_TOLERANCE, (
        f"height {result.total_height} exceeds {box_height}"
    )


def assert_no_overlaps(result: LayoutResult):
    """Pairwise footprint check, independent of the validator."""
    positions = result.positions
    for i, a in enumerate(positions):
        for b in positions[i + 1 :]:
            overlap_x = min(a.right, b.right) - max(a.left, b.left)
            overlap_y = min(a.bottom, b.bottom) - max(a.top, b.top)
            assert overlap_x <= GEOMETRY_TOLERANCE or overlap_y <= GEOMETRY_TOLERANCE, (
                f"cards {a.index} and {b.index} overlap"
            )


def assert_rows_centered(result: LayoutResult, space: AvailableSpace):
    """Every row, complete or not, is centered on the available space."""
    for row, cards in rows_of(result).items():
        row_center = (cards[0].left + cards[-1].right) / 2
        assert row_center == pytest.approx(space.center_x), f"row {row} is off center"


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest markers for organized test execution."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for end-to-end flows")
    config.addinivalue_line("markers", "performance: Performance and scalability tests")
    config.addinivalue_line("markers", "edge_case: Edge cases and boundary condition tests")
    config.addinivalue_line("markers", "property: Property sweeps over the input domain")
    config.addinivalue_line("markers", "slow: Tests that take longer than 5 seconds")


def pytest_collection_modifyitems(config, items):
    """Automatically mark slow tests."""
    for item in items:
        if "performance" in item.keywords:
            item.add_marker(pytest.mark.slow)
