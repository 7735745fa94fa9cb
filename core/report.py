"""
Tabular reports over layout results.

``positions_frame`` turns one result into a pandas table for display.
``sweep_layouts`` runs the engine over a grid of card counts and container
sizes and collects one polars row per computation; ``summarize_sweep``
aggregates such a frame per device class.
"""

import logging
from collections.abc import Iterable
from typing import Optional

import pandas as pd
import polars as pl

from core.engine import LayoutEngine
from core.validator import validate_layout
from models import DegradedLayout, DeviceClass, LayoutRequest, LayoutResult

logger = logging.getLogger(__name__)

POSITION_COLUMNS = ["index", "row", "column", "x", "y", "card_width", "card_height", "left", "top"]

SWEEP_SCHEMA = {
    "card_count": pl.Int64,
    "container_width": pl.Float64,
    "container_height": pl.Float64,
    "device_class": pl.Utf8,
    "rows": pl.Int64,
    "cards_per_row": pl.Int64,
    "card_width": pl.Float64,
    "card_height": pl.Float64,
    "fill_ratio": pl.Float64,
    "is_optimal": pl.Boolean,
    "is_valid": pl.Boolean,
}


def positions_frame(result: LayoutResult) -> pd.DataFrame:
    """One row per card, ordered by index"""
    if not result.positions:
        return pd.DataFrame(columns=POSITION_COLUMNS)

    records = [
        {
            "index": p.index,
            "row": p.row,
            "column": p.column,
            "x": p.x,
            "y": p.y,
            "card_width": p.card_width,
            "card_height": p.card_height,
            "left": p.left,
            "top": p.top,
        }
        for p in result.positions
    ]
    return pd.DataFrame.from_records(records, columns=POSITION_COLUMNS)


def sweep_layouts(
    engine: LayoutEngine,
    card_counts: Iterable[int],
    widths: Iterable[float],
    heights: Iterable[float],
    device_class: Optional[DeviceClass] = None,
) -> pl.DataFrame:
    """
    Compute a layout for every (count, width, height) combination.

    Args:
        engine: Engine to run; its cache is used as usual
        card_counts: Card counts to try
        widths: Container widths to try
        heights: Container heights to try
        device_class: Force one device class instead of classifying each width

    Returns:
        polars DataFrame with one row per computation, see ``SWEEP_SCHEMA``
    """
    card_counts = list(card_counts)
    widths = list(widths)
    heights = list(heights)

    rows = []
    for width in widths:
        for height in heights:
            for count in card_counts:
                if device_class is None:
                    request = engine.request_for_viewport(count, width, height)
                else:
                    request = LayoutRequest(count, width, height, device_class)

                outcome = engine.plan_layout(request)
                result = outcome.result
                validation = validate_layout(
                    result, outcome.space, safety_factor=engine.constraints.safety_factor
                )
                rows.append(
                    {
                        "card_count": count,
                        "container_width": float(width),
                        "container_height": float(height),
                        "device_class": request.device_class.value,
                        "rows": result.row_plan.rows,
                        "cards_per_row": result.row_plan.cards_per_row,
                        "card_width": result.card_size.width,
                        "card_height": result.card_size.height,
                        "fill_ratio": result.fill_ratio(outcome.space),
                        "is_optimal": not isinstance(outcome, DegradedLayout),
                        "is_valid": validation.is_valid,
                    }
                )

    logger.debug(f"Layout sweep produced {len(rows)} rows")
    return pl.DataFrame(rows, schema=SWEEP_SCHEMA)


def summarize_sweep(frame: pl.DataFrame) -> pl.DataFrame:
    """Per device class: layouts computed, fallback rate, mean fill ratio, invalid count"""
    if frame.height == 0:
        return pl.DataFrame(
            schema={
                "device_class": pl.Utf8,
                "layouts": pl.UInt32,
                "fallback_rate": pl.Float64,
                "mean_fill_ratio": pl.Float64,
                "mean_card_width": pl.Float64,
                "invalid": pl.UInt32,
            }
        )

    return (
        frame.filter(pl.col("card_count") > 0)
        .group_by("device_class")
        .agg(
            pl.len().alias("layouts"),
            (~pl.col("is_optimal")).cast(pl.Float64).mean().alias("fallback_rate"),
            pl.col("fill_ratio").mean().alias("mean_fill_ratio"),
            pl.col("card_width").mean().alias("mean_card_width"),
            (~pl.col("is_valid")).cast(pl.UInt32).sum().alias("invalid"),
        )
        .sort("device_class")
    )
