"""
Card position generation.

Rows are stacked top to bottom and the whole block is vertically centered in
the available space; each row is horizontally centered on its own footprint,
so an incomplete last row sits in the middle rather than on the left edge.
"""

from models import AvailableSpace, CardPosition, CardSize, RowPlan


def generate_positions(
    card_count: int,
    plan: RowPlan,
    size: CardSize,
    space: AvailableSpace,
    card_spacing: float,
    row_spacing: float,
) -> tuple[CardPosition, ...]:
    """
    Emit one position per card index, in index order.

    Args:
        card_count: Number of cards
        plan: Row plan holding every card
        size: Uniform card size
        space: Available space; its center anchors the block
        card_spacing: Horizontal gap between neighbouring cards
        row_spacing: Vertical gap between rows

    Returns:
        Tuple of CardPosition with center coordinates
    """
    if card_count <= 0 or plan.is_empty:
        return ()

    block_height = plan.rows * size.height + (plan.rows - 1) * row_spacing
    block_top = space.center_y - block_height / 2
    step_x = size.width + card_spacing
    step_y = size.height + row_spacing

    positions = []
    index = 0
    for row in range(plan.rows):
        in_row = plan.cards_in_row(row, card_count)
        row_width = in_row * size.width + (in_row - 1) * card_spacing
        row_left = space.center_x - row_width / 2
        y = block_top + row * step_y + size.height / 2

        for column in range(in_row):
            positions.append(
                CardPosition(
                    index=index,
                    x=row_left + column * step_x + size.width / 2,
                    y=y,
                    card_width=size.width,
                    card_height=size.height,
                    row=row,
                    column=column,
                )
            )
            index += 1

    return tuple(positions)
