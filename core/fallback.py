"""
Emergency fallback planning.

Used only after the validator rejects the primary plan. Re-plans with relaxed
minimum sizes and tighter spacing, preferring as few rows as possible. If even
the relaxed plan does not fit, cards and spacing are shrunk together until it
does: a tight but complete layout is always returned.
"""

import logging
import math

from core.positions import generate_positions
from core.sizing import OVERFLOW_TOLERANCE, grid_footprint, solve_card_size
from core.planner import max_grid_capacity
from models import (
    AvailableSpace,
    CardSize,
    LayoutConstraints,
    LayoutResult,
    RowPlan,
    SpacingProfile,
)

logger = logging.getLogger(__name__)

MAX_FALLBACK_ROWS = 2


def plan_fallback_rows(
    card_count: int,
    space: AvailableSpace,
    constraints: LayoutConstraints,
    profile: SpacingProfile,
) -> RowPlan:
    """
    Row search of the fallback: one row when everything fits across, otherwise
    cards spread evenly over at most two rows, more only when forced.
    """
    if card_count <= 0:
        return RowPlan.empty()

    max_cards_per_row, max_rows = max_grid_capacity(
        space,
        constraints.min_card_width,
        constraints.min_card_height,
        profile.card_spacing,
        profile.row_spacing,
        constraints.safety_factor,
    )
    max_cards_per_row = max(1, max_cards_per_row)
    max_rows = max(1, max_rows)

    if card_count <= max_cards_per_row:
        return RowPlan(rows=1, cards_per_row=card_count)

    target_rows = min(max_rows, MAX_FALLBACK_ROWS)
    cards_per_row = min(max_cards_per_row, math.ceil(card_count / target_rows))
    plan = RowPlan.for_count(card_count, cards_per_row)

    if plan.rows > max_rows:
        plan = RowPlan.for_count(card_count, math.ceil(card_count / max_rows))

    return plan


def plan_emergency_layout(
    card_count: int,
    space: AvailableSpace,
    profile: SpacingProfile,
    constraints: LayoutConstraints,
) -> LayoutResult:
    """
    Build a degraded layout that always fits the safety box.

    Args:
        card_count: Number of cards
        space: Available space for cards
        profile: Spacing profile of the active device class (relaxed here)
        constraints: Normal constraints (relaxed here)

    Returns:
        LayoutResult with ``is_optimal=False``
    """
    relaxed = constraints.relaxed()
    relaxed_profile = profile.relaxed(constraints.fallback_spacing_factor)
    card_spacing = relaxed_profile.card_spacing
    row_spacing = relaxed_profile.row_spacing

    plan = plan_fallback_rows(card_count, space, relaxed, relaxed_profile)
    size = solve_card_size(plan, space, relaxed_profile, relaxed)
    min_size = CardSize(relaxed.min_card_width, relaxed.min_card_height)
    warnings = []

    box_width, box_height = space.safe_box(constraints.safety_factor)
    total_width, total_height = grid_footprint(plan, size, card_spacing, row_spacing)

    if total_width > box_width + OVERFLOW_TOLERANCE or total_height > box_height + OVERFLOW_TOLERANCE:
        # Cards and gaps shrink together so the grid lands exactly on the box
        squeeze = min(box_width / total_width, box_height / total_height)
        size = size.scaled(squeeze)
        card_spacing *= squeeze
        row_spacing *= squeeze
        total_width, total_height = grid_footprint(plan, size, card_spacing, row_spacing)
        if size.width < min_size.width or size.height < min_size.height:
            message = (
                f"{card_count} cards cannot reach the relaxed minimum "
                f"{min_size.width:.1f}x{min_size.height:.1f}; shrunk to "
                f"{size.width:.1f}x{size.height:.1f}"
            )
            logger.warning(f"Irrecoverable layout constraint: {message}")
            warnings.append(message)
            min_size = size

    positions = generate_positions(card_count, plan, size, space, card_spacing, row_spacing)

    logger.warning(
        f"Using emergency layout: {card_count} cards as {plan.rows}x{plan.cards_per_row}, "
        f"card {size.width:.1f}x{size.height:.1f}, total {total_width:.1f}x{total_height:.1f} "
        f"in {space.width:.1f}x{space.height:.1f}"
    )

    return LayoutResult(
        positions=positions,
        card_size=size,
        row_plan=plan,
        total_width=total_width,
        total_height=total_height,
        is_optimal=False,
        card_spacing=card_spacing,
        row_spacing=row_spacing,
        min_card_size=min_size,
        warnings=tuple(warnings),
    )
