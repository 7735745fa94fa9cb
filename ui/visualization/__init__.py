"""
Visualization modules for the card layout engine.

This package contains the LayoutVisualizer preview figures and the
theme/layout classes they share.
"""

from .layout import LayoutConfig
from .themes import ColorPalette, TypographySystem
from .visualizer import LayoutVisualizer

__all__ = [
    "LayoutVisualizer",
    "ColorPalette",
    "TypographySystem",
    "LayoutConfig",
]
