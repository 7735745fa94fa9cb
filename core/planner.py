"""
Row layout planning.

Decides how many rows a set of cards is split into and how many cards go in
each row. Decision order, first match wins:

1. One to three cards: a single row.
2. Canonical counts (see ``CANONICAL_LAYOUTS``): among the candidates that
   fit, the one with the fewest unused trailing slots, then the earliest in
   the table.
3. General rule: ``ceil(sqrt(n))`` cards per row, widened to the device's
   preferred row width and capped by what fits horizontally. If the resulting
   rows do not fit vertically, every card goes into one row and the size
   solver scales them down.
"""

import logging
import math

from models import AvailableSpace, LayoutCapacity, LayoutConstraints, RowPlan, SpacingProfile

logger = logging.getLogger(__name__)

# card count -> candidate (rows, cards_per_row) plans, most preferred first
CANONICAL_LAYOUTS: dict[int, tuple[tuple[int, int], ...]] = {
    4: ((2, 2), (1, 4)),
    6: ((2, 3), (3, 2)),
    9: ((3, 3),),
    12: ((3, 4), (4, 3)),
    16: ((4, 4),),
}

SINGLE_ROW_LIMIT = 3


def max_grid_capacity(
    space: AvailableSpace,
    min_width: float,
    min_height: float,
    card_spacing: float,
    row_spacing: float,
    safety_factor: float,
) -> tuple[int, int]:
    """
    Largest grid of minimum-size cards that fits the safety box.

    Returns:
        Tuple of (max_cards_per_row, max_rows); either can be zero when not
        even one minimum-size card fits on that axis.
    """
    box_width, box_height = space.safe_box(safety_factor)
    max_cards_per_row = math.floor((box_width + card_spacing) / (min_width + card_spacing))
    max_rows = math.floor((box_height + row_spacing) / (min_height + row_spacing))
    return max(0, max_cards_per_row), max(0, max_rows)


def max_safe_cards(
    space: AvailableSpace,
    profile: SpacingProfile,
    constraints: LayoutConstraints,
) -> LayoutCapacity:
    """
    Number of minimum-size cards the space holds without scaling, capped by
    the device class's ``max_cards``.

    ``max_safe_cards`` is zero when not even one minimum-size card fits.
    """
    max_cards_per_row, max_rows = max_grid_capacity(
        space,
        constraints.min_card_width,
        constraints.min_card_height,
        profile.card_spacing,
        profile.row_spacing,
        constraints.safety_factor,
    )
    safe = max_cards_per_row * max_rows
    if profile.max_cards is not None:
        safe = min(safe, profile.max_cards)
    return LayoutCapacity(max_cards_per_row=max_cards_per_row, max_rows=max_rows, max_safe_cards=safe)


def recommended_card_count(requested: int, max_safe: int, item_count: int) -> int:
    """
    Cards to offer for ``requested``: 20% headroom above the request, never
    more than fit or than there are items, and at least one.
    """
    with_headroom = max(requested, math.ceil(requested * 6 / 5))
    return max(1, min(with_headroom, max_safe, item_count))


def _canonical_plan(card_count: int, max_cards_per_row: int, max_rows: int):
    candidates = CANONICAL_LAYOUTS.get(card_count)
    if not candidates:
        return None

    fitting = [
        (rows, per_row)
        for rows, per_row in candidates
        if rows * per_row >= card_count and rows <= max_rows and per_row <= max_cards_per_row
    ]
    if not fitting:
        return None

    # min() keeps the first of equal candidates, so table order breaks ties
    rows, per_row = min(fitting, key=lambda c: c[0] * c[1] - card_count)
    return RowPlan(rows=rows, cards_per_row=per_row)


def plan_rows(
    card_count: int,
    space: AvailableSpace,
    constraints: LayoutConstraints,
    profile: SpacingProfile,
) -> RowPlan:
    """
    Choose the row plan for ``card_count`` cards.

    Args:
        card_count: Number of cards to place
        space: Available space for cards
        constraints: Card bounds, used for the minimum card size
        profile: Spacing profile of the active device class

    Returns:
        RowPlan satisfying ``rows * cards_per_row >= card_count`` with no empty
        row. ``RowPlan.empty()`` for zero cards.
    """
    if card_count <= 0:
        return RowPlan.empty()

    if card_count <= SINGLE_ROW_LIMIT:
        return RowPlan(rows=1, cards_per_row=card_count)

    max_cards_per_row, max_rows = max_grid_capacity(
        space,
        constraints.min_card_width,
        constraints.min_card_height,
        profile.card_spacing,
        profile.row_spacing,
        constraints.safety_factor,
    )

    canonical = _canonical_plan(card_count, max_cards_per_row, max_rows)
    if canonical is not None:
        return canonical

    target_per_row = max(math.ceil(math.sqrt(card_count)), profile.preferred_cards_per_row)
    cards_per_row = max(1, min(max_cards_per_row, target_per_row))
    plan = RowPlan.for_count(card_count, cards_per_row)

    if plan.rows > max_rows:
        logger.debug(
            f"{card_count} cards need {plan.rows} rows but only {max_rows} fit, "
            "collapsing to a single row"
        )
        return RowPlan(rows=1, cards_per_row=card_count)

    return plan
