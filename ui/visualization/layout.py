"""
Figure Layout Configuration for the Card Layout Preview
=======================================================

Spacing grid and figure sizing for the preview charts.

Classes:
    LayoutConfig: 8px grid system and preview figure sizing

Usage:
    from ui.visualization.layout import LayoutConfig
    layout = LayoutConfig()
    height = layout.get_preview_height(1280, 800)
"""


class LayoutConfig:
    """8px grid system and preview figure sizing"""

    # 8px grid system
    SPACING = {
        "xs": 8,
        "sm": 16,
        "md": 24,
        "lg": 32,
        "xl": 48,
    }

    PREVIEW_WIDTH = 900
    MIN_PREVIEW_HEIGHT = 320
    MAX_PREVIEW_HEIGHT = 900

    @staticmethod
    def get_preview_height(container_width: float, container_height: float) -> int:
        """Figure height that keeps the container's proportions at the preview width"""
        if container_width <= 0 or container_height <= 0:
            return LayoutConfig.MIN_PREVIEW_HEIGHT

        height = LayoutConfig.PREVIEW_WIDTH * container_height / container_width
        return int(max(LayoutConfig.MIN_PREVIEW_HEIGHT, min(height, LayoutConfig.MAX_PREVIEW_HEIGHT)))

    @staticmethod
    def get_heatmap_height(row_count: int) -> int:
        """Heatmap height growing with the number of rows, capped"""
        return int(max(LayoutConfig.MIN_PREVIEW_HEIGHT, min(120 + 28 * row_count, 800)))

    @staticmethod
    def get_margins(size: str = "md") -> dict[str, int]:
        """Get standard margins for charts"""
        base = LayoutConfig.SPACING[size]
        return {
            "l": base * 2,  # Left margin for y-axis labels
            "r": base,
            "t": base * 2,  # Top margin for title
            "b": base,
        }
