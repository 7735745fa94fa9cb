"""
Available-space calculation.

Subtracts the chrome reserved above and below the card area (info panel,
status line, action button) and the device margins from the container, then
clamps the result to a fraction of the container and to a hard floor.
"""

import logging
import math
from dataclasses import dataclass

from models import AvailableSpace, SpacingProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChromeReservation:
    """Fixed vertical space taken by non-card UI"""

    info_panel: float = 120.0
    status_line: float = 40.0
    action_button: float = 80.0
    max_width_fraction: float = 0.9
    max_height_fraction: float = 0.5
    floor_width: float = 320.0

    @property
    def top(self) -> float:
        return self.info_panel + self.status_line

    @property
    def bottom(self) -> float:
        return self.action_button


DEFAULT_CHROME = ChromeReservation()


def _is_usable_dimension(value: float) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def calculate_available_space(
    container_width: float,
    container_height: float,
    profile: SpacingProfile,
    chrome: ChromeReservation = DEFAULT_CHROME,
) -> AvailableSpace:
    """
    Compute the rectangle usable for cards.

    Args:
        container_width: Container width in pixels
        container_height: Container height in pixels
        profile: Spacing profile of the active device class
        chrome: Reserved chrome heights and clamp fractions

    Returns:
        AvailableSpace; width and height are never below the floor, which is
        ``chrome.floor_width`` x ``profile.min_card_area_height`` capped at the
        container size. Degenerate containers get the full floor.
    """
    margins = profile.container_margins
    floor_height = profile.min_card_area_height

    if not (_is_usable_dimension(container_width) and _is_usable_dimension(container_height)):
        logger.warning(
            f"Degenerate container {container_width}x{container_height}, using floor space"
        )
        return AvailableSpace(
            width=chrome.floor_width,
            height=floor_height,
            center_x=chrome.floor_width / 2,
            center_y=chrome.top + margins.top + floor_height / 2,
        )

    raw_width = container_width - margins.horizontal
    raw_height = container_height - chrome.top - chrome.bottom - margins.vertical

    width = min(raw_width, container_width * chrome.max_width_fraction)
    height = min(raw_height, container_height * chrome.max_height_fraction)

    width = max(min(chrome.floor_width, container_width), width)
    height = max(min(floor_height, container_height), height)

    if width > raw_width or height > raw_height:
        logger.debug(
            f"Limited card space: raw {raw_width:.1f}x{raw_height:.1f}, "
            f"using {width:.1f}x{height:.1f}"
        )

    top_offset = chrome.top + margins.top
    return AvailableSpace(
        width=width,
        height=height,
        center_x=container_width / 2,
        center_y=top_offset + height / 2,
    )
