"""
Layout validation.

Re-derives the footprint of a generated plan from its positions and checks it
against the available space. Pure re-check: nothing is corrected here.
"""

import logging
from typing import Optional

import numpy as np

from models import AvailableSpace, CardPosition, CardSize, LayoutResult, ValidationResult

logger = logging.getLogger(__name__)

DEFAULT_SAFETY_FACTOR = 0.95
TOLERANCE = 1e-6


def _edges(positions: tuple[CardPosition, ...]) -> np.ndarray:
    """Array of shape (n, 4): left, right, top, bottom"""
    return np.array([(p.left, p.right, p.top, p.bottom) for p in positions], dtype=float)


def find_overlaps(positions: tuple[CardPosition, ...]) -> list[tuple[int, int]]:
    """
    Find every pair of cards whose footprints intersect.

    Touching edges do not count as an overlap. Cards are swept in order along
    the axis with more distinct start coordinates, and each card is only
    compared with the cards that start before it ends on that axis. For a
    generated grid that is its neighbours, not every other card.

    Returns:
        Sorted list of (index_a, index_b) pairs with index_a < index_b
    """
    if len(positions) < 2:
        return []

    edges = _edges(positions)
    if len(np.unique(edges[:, 0])) >= len(np.unique(edges[:, 2])):
        along, across = edges[:, 0:2], edges[:, 2:4]
    else:
        along, across = edges[:, 2:4], edges[:, 0:2]

    order = np.argsort(along[:, 0], kind="stable")
    start, end = along[order, 0], along[order, 1]
    other_start, other_end = across[order, 0], across[order, 1]
    stops = np.searchsorted(start, end - TOLERANCE, side="left")

    indices = [p.index for p in positions]
    pairs = []
    for i in range(len(order) - 1):
        stop = int(stops[i])
        if stop <= i + 1:
            continue
        j = np.arange(i + 1, stop)
        overlap_along = np.minimum(end[i], end[j]) - start[j]
        overlap_across = np.minimum(other_end[i], other_end[j]) - np.maximum(other_start[i], other_start[j])
        for k in j[(overlap_along > TOLERANCE) & (overlap_across > TOLERANCE)].tolist():
            a, b = indices[order[i]], indices[order[k]]
            pairs.append((min(a, b), max(a, b)))
    return sorted(pairs)


def validate_layout(
    result: LayoutResult,
    space: AvailableSpace,
    min_size: Optional[CardSize] = None,
    safety_factor: float = DEFAULT_SAFETY_FACTOR,
) -> ValidationResult:
    """
    Check a layout result against the available space.

    Args:
        result: Layout to check
        space: Available space the layout was planned for
        min_size: Minimum card size; defaults to the minimum the result
            committed to (``result.min_card_size``)
        safety_factor: Fraction of the available space a plan may occupy

    Returns:
        ValidationResult listing every violated constraint
    """
    positions = result.positions
    if not positions:
        return ValidationResult(is_valid=True)

    violations = []
    box_width, box_height = space.safe_box(safety_factor)

    indices = sorted(p.index for p in positions)
    if indices != list(range(len(positions))):
        violations.append(f"card indices are not contiguous from 0: {indices}")

    edges = _edges(positions)
    derived_width = float(edges[:, 1].max() - edges[:, 0].min())
    derived_height = float(edges[:, 3].max() - edges[:, 2].min())

    if derived_width > box_width + TOLERANCE:
        violations.append(
            f"horizontal overflow: plan width {derived_width:.2f} exceeds {box_width:.2f}"
        )
    if derived_height > box_height + TOLERANCE:
        violations.append(
            f"vertical overflow: plan height {derived_height:.2f} exceeds {box_height:.2f}"
        )
    if abs(derived_width - result.total_width) > TOLERANCE:
        violations.append(
            f"declared width {result.total_width:.2f} does not match positions ({derived_width:.2f})"
        )
    if abs(derived_height - result.total_height) > TOLERANCE:
        violations.append(
            f"declared height {result.total_height:.2f} does not match positions "
            f"({derived_height:.2f})"
        )

    outside = (
        (edges[:, 0] < space.left - TOLERANCE)
        | (edges[:, 1] > space.left + space.width + TOLERANCE)
        | (edges[:, 2] < space.top - TOLERANCE)
        | (edges[:, 3] > space.top + space.height + TOLERANCE)
    )
    if outside.any():
        out_indices = [positions[i].index for i in np.nonzero(outside)[0].tolist()]
        violations.append(f"cards outside available space: {out_indices}")

    minimum = min_size if min_size is not None else result.min_card_size
    if minimum is not None:
        if result.card_size.width < minimum.width - TOLERANCE:
            violations.append(
                f"undersized cards: width {result.card_size.width:.2f} "
                f"below minimum {minimum.width:.2f}"
            )
        if result.card_size.height < minimum.height - TOLERANCE:
            violations.append(
                f"undersized cards: height {result.card_size.height:.2f} "
                f"below minimum {minimum.height:.2f}"
            )

    overlaps = find_overlaps(positions)
    if overlaps:
        violations.append(f"overlapping cards: {overlaps[:10]}")

    validation = ValidationResult.from_violations(violations)
    if not validation.is_valid:
        logger.debug(f"Layout validation failed: {'; '.join(violations)}")
    return validation
