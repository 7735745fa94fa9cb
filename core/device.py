"""
Device classification for the card-layout engine.

Maps a raw viewport width to a coarse device class and its default spacing
profile. The breakpoints live in a data table so they can be tuned without
touching the lookup.
"""

import math
from dataclasses import dataclass

from models import DeviceClass, Margins, SpacingProfile


@dataclass(frozen=True)
class DeviceBreakpoint:
    """Widths strictly below ``max_width`` belong to ``device_class``"""

    max_width: float
    device_class: DeviceClass
    profile: SpacingProfile


DEVICE_BREAKPOINTS: tuple[DeviceBreakpoint, ...] = (
    DeviceBreakpoint(
        max_width=768,
        device_class=DeviceClass.COMPACT,
        profile=SpacingProfile(
            container_margins=Margins(top=30, bottom=16, left=16, right=16),
            row_spacing=12,
            card_spacing=12,
            min_card_area_height=160,
            preferred_cards_per_row=2,
            max_cards=6,
        ),
    ),
    DeviceBreakpoint(
        max_width=1024,
        device_class=DeviceClass.MEDIUM,
        profile=SpacingProfile(
            container_margins=Margins(top=32, bottom=20, left=24, right=24),
            row_spacing=16,
            card_spacing=14,
            min_card_area_height=180,
            preferred_cards_per_row=3,
            max_cards=12,
        ),
    ),
    DeviceBreakpoint(
        max_width=math.inf,
        device_class=DeviceClass.WIDE,
        profile=SpacingProfile(
            container_margins=Margins(top=36, bottom=24, left=32, right=32),
            row_spacing=20,
            card_spacing=16,
            min_card_area_height=200,
            preferred_cards_per_row=5,
            max_cards=20,
        ),
    ),
)


def classify_device(container_width: float) -> DeviceBreakpoint:
    """
    Find the breakpoint entry for a container width.

    Total over all inputs: NaN and non-positive widths fall into the
    narrowest class, +inf into the widest.
    """
    if container_width is None or math.isnan(container_width) or container_width <= 0:
        return DEVICE_BREAKPOINTS[0]
    for breakpoint in DEVICE_BREAKPOINTS:
        if container_width < breakpoint.max_width:
            return breakpoint
    return DEVICE_BREAKPOINTS[-1]


def get_spacing_profile(device_class: DeviceClass) -> SpacingProfile:
    for breakpoint in DEVICE_BREAKPOINTS:
        if breakpoint.device_class == device_class:
            return breakpoint.profile
    raise KeyError(f"No spacing profile for device class {device_class!r}")
