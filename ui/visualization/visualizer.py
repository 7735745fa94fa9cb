"""
Layout preview visualization.

This module contains the LayoutVisualizer class which draws computed card
layouts and layout sweeps with Plotly: the container, the available space,
the safety box and every card with its index, colored by layout state.
"""

import math
from typing import Optional

import plotly.graph_objects as go
import polars as pl

from core.validator import DEFAULT_SAFETY_FACTOR, find_overlaps
from models import AvailableSpace, LayoutResult
from ui.visualization.layout import LayoutConfig
from ui.visualization.themes import ColorPalette, TypographySystem

# Above this many cards index labels are left to the hover text
MAX_LABELED_CARDS = 60


class LayoutVisualizer:
    """Plotly figures for layout results and sweep reports"""

    def __init__(self, theme: str = "dark"):
        self.theme = theme
        self.color_palette = ColorPalette()
        self.typography = TypographySystem()
        self.layout = LayoutConfig()

        self._setup_theme()

    def _setup_theme(self):
        """Setup theme-specific configurations"""
        mode = self.color_palette.mode(self.theme)
        self.background_color = mode["background"]
        self.surface_color = mode["surface"]
        self.text_color = mode["text_primary"]
        self.secondary_text_color = mode["text_secondary"]
        self.border_color = mode["border"]
        self.grid_color = mode["grid"]

    def create_layout_figure(
        self,
        result: LayoutResult,
        space: AvailableSpace,
        container_width: Optional[float] = None,
        container_height: Optional[float] = None,
        safety_factor: float = DEFAULT_SAFETY_FACTOR,
    ) -> go.Figure:
        """
        Draw a layout the way the rendering layer would place it.

        Args:
            result: Layout to draw
            space: Available space the layout was computed for
            container_width: Container width; the container outline is drawn when
                both dimensions are finite and positive
            container_height: Container height
            safety_factor: Fraction of the space drawn as the safety box

        Returns:
            Plotly figure in container pixel coordinates, y pointing down
        """
        fig = go.Figure()
        draw_container = _is_drawable(container_width) and _is_drawable(container_height)

        if draw_container:
            fig.add_shape(
                type="rect",
                x0=0,
                y0=0,
                x1=container_width,
                y1=container_height,
                line={"color": self.border_color, "width": 2},
                fillcolor=self.surface_color,
                layer="below",
            )

        fig.add_shape(
            type="rect",
            x0=space.left,
            y0=space.top,
            x1=space.left + space.width,
            y1=space.top + space.height,
            line={"color": self.secondary_text_color, "width": 1, "dash": "dot"},
            layer="below",
        )

        box_width, box_height = space.safe_box(safety_factor)
        fig.add_shape(
            type="rect",
            x0=space.center_x - box_width / 2,
            y0=space.center_y - box_height / 2,
            x1=space.center_x + box_width / 2,
            y1=space.center_y + box_height / 2,
            line={"color": self.color_palette.SEMANTIC["success"], "width": 1, "dash": "dash"},
            layer="below",
        )

        if not result.positions:
            fig.add_annotation(
                x=space.center_x,
                y=space.center_y,
                text="No cards to place",
                showarrow=False,
                font={"size": 16, "color": self.secondary_text_color},
            )
        else:
            self._draw_cards(fig, result)

        width_extent = container_width if draw_container else space.left + space.width
        height_extent = container_height if draw_container else space.top + space.height
        height = self.layout.get_preview_height(width_extent, height_extent)

        fig.update_xaxes(range=[0, width_extent], showgrid=False, zeroline=False, visible=False)
        fig.update_yaxes(
            range=[height_extent, 0],
            showgrid=False,
            zeroline=False,
            visible=False,
            scaleanchor="x",
            scaleratio=1,
        )

        state = "Optimal layout" if result.is_optimal else "Degraded layout"
        subtitle = result.describe()
        if result.warnings:
            subtitle += f" | {len(result.warnings)} warning(s)"
        return self.apply_theme(fig, state, subtitle, height)

    def _draw_cards(self, fig: go.Figure, result: LayoutResult) -> None:
        overlapping = {index for pair in find_overlaps(result.positions) for index in pair}
        state_key = "optimal" if result.is_optimal else "degraded"

        for position in result.positions:
            color_key = "violation" if position.index in overlapping else state_key
            color = self.color_palette.CARD_STATES[color_key]
            fig.add_shape(
                type="rect",
                x0=position.left,
                y0=position.top,
                x1=position.right,
                y1=position.bottom,
                line={"color": color, "width": 1},
                fillcolor=self.color_palette.get_color_with_opacity(color, 0.35),
            )

        show_labels = len(result.positions) <= MAX_LABELED_CARDS
        fig.add_trace(
            go.Scatter(
                x=[p.x for p in result.positions],
                y=[p.y for p in result.positions],
                mode="text" if show_labels else "markers",
                text=[str(p.index) for p in result.positions],
                textfont={
                    "size": self.typography.index_font_size(result.card_size.width),
                    "color": self.text_color,
                    "family": self.typography.FAMILY,
                },
                marker={"size": 4, "color": self.text_color},
                customdata=[[p.row, p.column] for p in result.positions],
                hovertemplate=(
                    "<b>Card %{text}</b><br>Row %{customdata[0]}, column %{customdata[1]}"
                    "<br>Center: (%{x:.1f}, %{y:.1f})<extra></extra>"
                ),
                name="Cards",
                showlegend=False,
            )
        )

    def create_sweep_heatmap(self, frame: pl.DataFrame, value: str = "fill_ratio") -> go.Figure:
        """
        Heatmap of a sweep metric by container width and card count.

        Args:
            frame: Output of ``core.report.sweep_layouts``
            value: Numeric or boolean column to plot; averaged over container heights

        Returns:
            Plotly heatmap figure
        """
        title = f"Layout sweep: {value.replace('_', ' ')}"
        if frame.height == 0:
            fig = go.Figure()
            fig.add_annotation(
                x=0.5,
                y=0.5,
                xref="paper",
                yref="paper",
                text="No sweep data to display",
                showarrow=False,
                font={"size": 16, "color": self.secondary_text_color},
            )
            return self.apply_theme(fig, title)

        grouped = (
            frame.group_by(["container_width", "card_count"])
            .agg(pl.col(value).cast(pl.Float64).mean().alias("value"))
            .sort(["container_width", "card_count"])
        )
        widths = sorted(grouped["container_width"].unique().to_list())
        counts = sorted(grouped["card_count"].unique().to_list())
        lookup = {
            (row["container_width"], row["card_count"]): row["value"]
            for row in grouped.iter_rows(named=True)
        }
        z_data = [[lookup.get((width, count)) for count in counts] for width in widths]

        fig = go.Figure(
            data=go.Heatmap(
                z=z_data,
                x=counts,
                y=[f"{width:.0f}px" for width in widths],
                colorscale=self.color_palette.FILL_SCALE,
                hovertemplate="<b>%{y}</b><br>Cards: %{x}<br>Value: %{z:.3f}<extra></extra>",
                colorbar={"title": {"text": value, "side": "right"}},
            )
        )
        fig.update_layout(xaxis_title="Card count", yaxis_title="Container width")
        return self.apply_theme(fig, title, height=self.layout.get_heatmap_height(len(widths)))

    def apply_theme(
        self,
        fig: go.Figure,
        title: Optional[str] = None,
        subtitle: Optional[str] = None,
        height: Optional[int] = None,
    ) -> go.Figure:
        """Apply theme styling"""
        if height is None:
            height = self.layout.MIN_PREVIEW_HEIGHT

        title_font = self.typography.get_font_config("xl", "bold", color=self.text_color)
        body_font = self.typography.get_font_config("base", color=self.secondary_text_color)

        layout_config = {
            "plot_bgcolor": self.background_color,
            "paper_bgcolor": "rgba(0,0,0,0)",
            "autosize": True,
            "font": {
                "family": body_font["family"],
                "size": body_font["size"],
                "color": self.text_color,
            },
            "title": {
                "text": title,
                "font": {
                    "family": title_font["family"],
                    "size": title_font["size"],
                    "color": title_font["color"],
                },
                "x": 0.5,
                "xanchor": "center",
            },
            "height": height,
            "margin": self.layout.get_margins("md"),
            "hoverlabel": {
                "bgcolor": self.color_palette.get_color_with_opacity(self.surface_color, 0.95),
                "bordercolor": self.border_color,
                "font": {"size": 13, "color": self.text_color},
                "align": "left",
            },
        }

        if subtitle:
            layout_config["annotations"] = list(fig.layout.annotations) + [
                {
                    "text": subtitle,
                    "xref": "paper",
                    "yref": "paper",
                    "x": 0.5,
                    "y": -0.02,
                    "xanchor": "center",
                    "yanchor": "top",
                    "showarrow": False,
                    "font": {"size": 12, "color": self.secondary_text_color},
                }
            ]

        fig.update_layout(**layout_config)
        return fig


def _is_drawable(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0
