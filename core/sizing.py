"""
Card size solving.

Derives one card size shared by every card of a row plan: it fills the
safety box, keeps the fixed aspect ratio and respects the size bounds. When
the minimum size pushes the grid past the box, a uniform scale-down is
applied; whatever still overflows is left for the validator to report.
"""

import logging

from models import AvailableSpace, CardSize, LayoutConstraints, RowPlan, SpacingProfile

logger = logging.getLogger(__name__)

# Overflow below this many pixels is rounding noise
OVERFLOW_TOLERANCE = 1e-6


def grid_footprint(
    plan: RowPlan, size: CardSize, card_spacing: float, row_spacing: float
) -> tuple[float, float]:
    """Total width and height of a full grid of ``plan`` at ``size``"""
    if plan.is_empty:
        return 0.0, 0.0
    width = plan.cards_per_row * size.width + (plan.cards_per_row - 1) * card_spacing
    height = plan.rows * size.height + (plan.rows - 1) * row_spacing
    return width, height


def _clamp_to_floor(width: float, height: float, floor_width: float, floor_height: float):
    return max(width, floor_width), max(height, floor_height)


def solve_card_size(
    plan: RowPlan,
    space: AvailableSpace,
    profile: SpacingProfile,
    constraints: LayoutConstraints,
) -> CardSize:
    """
    Solve the uniform card size for a row plan.

    Args:
        plan: Row plan to size
        space: Available space for cards
        profile: Spacing between cards and rows
        constraints: Bounds, aspect ratio and scale factors

    Returns:
        CardSize with ``height / width == aspect_ratio``
    """
    if plan.is_empty:
        return CardSize(0.0, 0.0)

    ratio = constraints.aspect_ratio
    box_width, box_height = space.safe_box(constraints.safety_factor)

    # Largest cell the box allows per axis
    width = (box_width - (plan.cards_per_row - 1) * profile.card_spacing) / plan.cards_per_row
    height = (box_height - (plan.rows - 1) * profile.row_spacing) / plan.rows

    width = min(width, constraints.max_card_width)
    height = min(height, constraints.max_card_height)

    # Shrink the axis that would exceed its limit
    if width * ratio > height:
        width = height / ratio
    else:
        height = width * ratio

    width, height = _clamp_to_floor(
        width, height, constraints.min_card_width, constraints.min_card_height
    )

    total_width, total_height = grid_footprint(
        plan, CardSize(width, height), profile.card_spacing, profile.row_spacing
    )
    if (
        total_width > box_width + OVERFLOW_TOLERANCE
        or total_height > box_height + OVERFLOW_TOLERANCE
    ):
        scale = min(
            box_width / total_width,
            box_height / total_height,
            constraints.overflow_scale_cap,
        )
        logger.debug(
            f"Grid {total_width:.1f}x{total_height:.1f} overflows box "
            f"{box_width:.1f}x{box_height:.1f}, scaling cards by {scale:.3f}"
        )
        width, height = _clamp_to_floor(
            width * scale,
            height * scale,
            constraints.scale_floor_width,
            constraints.scale_floor_height,
        )

    return CardSize(width, height)
