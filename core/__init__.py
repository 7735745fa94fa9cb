"""
Core Layout Engine Module for the Card Layout Engine
====================================================

This module contains the card-layout pipeline and its services:
- LayoutEngine: Pipeline entry point (plan, size, position, validate, fallback)
- LayoutCache: Memoization of computed layouts
- ResizeCoordinator: Debounced re-layout on container resize
- LayoutConfigManager: Configuration management
- Report helpers: pandas position tables and polars layout sweeps

Usage:
    from core import LayoutEngine, ResizeCoordinator, LayoutConfigManager
"""

from .cache import LayoutCache
from .config_manager import LayoutConfigManager
from .device import DEVICE_BREAKPOINTS, classify_device, get_spacing_profile
from .engine import LayoutEngine
from .fallback import plan_emergency_layout
from .planner import CANONICAL_LAYOUTS, max_safe_cards, plan_rows, recommended_card_count
from .positions import generate_positions
from .report import positions_frame, summarize_sweep, sweep_layouts
from .resize import ResizeCoordinator
from .sizing import solve_card_size
from .space import DEFAULT_CHROME, ChromeReservation, calculate_available_space
from .validator import find_overlaps, validate_layout

__all__ = [
    "CANONICAL_LAYOUTS",
    "DEFAULT_CHROME",
    "DEVICE_BREAKPOINTS",
    "ChromeReservation",
    "LayoutCache",
    "LayoutConfigManager",
    "LayoutEngine",
    "ResizeCoordinator",
    "calculate_available_space",
    "classify_device",
    "find_overlaps",
    "generate_positions",
    "get_spacing_profile",
    "max_safe_cards",
    "plan_emergency_layout",
    "plan_rows",
    "positions_frame",
    "recommended_card_count",
    "solve_card_size",
    "summarize_sweep",
    "sweep_layouts",
    "validate_layout",
]
