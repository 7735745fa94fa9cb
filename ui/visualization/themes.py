"""
Theme System for the Card Layout Preview
========================================

Color palette and typography shared by the layout preview figures.

Classes:
    ColorPalette: Semantic and dark-mode colors, per-state card colors
    TypographySystem: Font sizes and weights

Usage:
    from ui.visualization.themes import ColorPalette, TypographySystem
    colors = ColorPalette()
    typography = TypographySystem()
"""

import re
from typing import Any, Optional


class ColorPalette:
    """WCAG 2.1 AA compliant color palette for the layout preview"""

    SEMANTIC = {
        "primary": "#3B82F6",  # Blue
        "secondary": "#6B7280",  # Gray
        "success": "#10B981",  # Green
        "warning": "#F59E0B",  # Amber
        "error": "#EF4444",  # Red
        "neutral": "#6B7280",  # Gray
    }

    DARK_MODE = {
        "background": "#0F172A",  # Slate-900
        "surface": "#1E293B",  # Slate-800
        "surface_light": "#334155",  # Slate-700
        "text_primary": "#F8FAFC",  # Slate-50
        "text_secondary": "#E2E8F0",  # Slate-200
        "text_muted": "#94A3B8",  # Slate-400
        "border": "#475569",  # Slate-600
        "grid": "rgba(148, 163, 184, 0.2)",
    }

    LIGHT_MODE = {
        "background": "#FFFFFF",
        "surface": "#F1F5F9",
        "surface_light": "#E2E8F0",
        "text_primary": "#1F2937",
        "text_secondary": "#374151",
        "text_muted": "#6B7280",
        "border": "#CBD5E1",
        "grid": "rgba(107, 114, 128, 0.2)",
    }

    # Card fill per layout state
    CARD_STATES = {
        "optimal": "#3B82F6",
        "degraded": "#F59E0B",
        "violation": "#EF4444",
    }

    # Fill-ratio scale for sweep heatmaps, low to high
    FILL_SCALE = [
        [0.0, "#1F2937"],
        [0.25, "#1E40AF"],
        [0.5, "#3B82F6"],
        [0.75, "#10B981"],
        [1.0, "#FDE047"],
    ]

    @staticmethod
    def get_color_with_opacity(color: str, opacity: float) -> str:
        """Convert hex color to rgba with specified opacity"""
        if color.startswith("rgba("):
            rgba_match = re.match(r"rgba\((\d+),\s*(\d+),\s*(\d+),\s*[\d.]+\)", color)
            if rgba_match:
                r, g, b = rgba_match.groups()
                return f"rgba({r}, {g}, {b}, {opacity})"

        if color.startswith("#"):
            color = color[1:]

        if len(color) == 6:
            r = int(color[0:2], 16)
            g = int(color[2:4], 16)
            b = int(color[4:6], 16)
            return f"rgba({r}, {g}, {b}, {opacity})"

        # Unparseable, return as is
        return color

    @classmethod
    def mode(cls, theme: str) -> dict[str, str]:
        return cls.DARK_MODE if theme == "dark" else cls.LIGHT_MODE


class TypographySystem:
    """Typography scale for figure titles, labels and card indices"""

    SCALE = {
        "xs": 10,
        "sm": 12,
        "base": 14,
        "lg": 16,
        "xl": 20,
        "2xl": 24,
    }

    WEIGHTS = {"normal": 400, "medium": 500, "bold": 700}

    FAMILY = '"Inter", -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif'

    @staticmethod
    def get_font_config(
        size: str = "base",
        weight: str = "normal",
        color: Optional[str] = None,
    ) -> dict[str, Any]:
        """Get complete font configuration"""
        config = {
            "size": TypographySystem.SCALE[size],
            "weight": TypographySystem.WEIGHTS[weight],
            "family": TypographySystem.FAMILY,
        }

        if color:
            config["color"] = color

        return config

    @staticmethod
    def index_font_size(card_width: float) -> int:
        """Card index label size that fits inside a card of ``card_width`` pixels"""
        return int(max(TypographySystem.SCALE["xs"], min(TypographySystem.SCALE["xl"], card_width / 4)))
