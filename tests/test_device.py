"""
Tests for device classification and spacing profiles.
"""

import math

import pytest

from core.device import DEVICE_BREAKPOINTS, classify_device, get_spacing_profile
from models import DeviceClass


@pytest.mark.unit
class TestClassifyDevice:
    @pytest.mark.parametrize(
        "width,expected",
        [
            (320, DeviceClass.COMPACT),
            (767.9, DeviceClass.COMPACT),
            (768, DeviceClass.MEDIUM),
            (1023, DeviceClass.MEDIUM),
            (1024, DeviceClass.WIDE),
            (3840, DeviceClass.WIDE),
        ],
    )
    def test_breakpoints(self, width, expected):
        """
        Widths strictly below a breakpoint belong to the narrower class.
        Expected: 768 and 1024 start the medium and wide classes.
        """
        assert classify_device(width).device_class == expected

    def test_breakpoints_are_ordered(self):
        widths = [breakpoint.max_width for breakpoint in DEVICE_BREAKPOINTS]
        assert widths == sorted(widths)
        assert math.isinf(widths[-1])

    def test_every_class_has_a_breakpoint(self):
        classes = {breakpoint.device_class for breakpoint in DEVICE_BREAKPOINTS}
        assert classes == set(DeviceClass)


@pytest.mark.edge_case
class TestClassifyDeviceDegenerate:
    @pytest.mark.parametrize("width", [0, -100, float("nan"), None])
    def test_degenerate_width_is_compact(self, width):
        """
        Test classification of unusable widths.
        Expected: Narrowest class, no exception.
        """
        assert classify_device(width).device_class == DeviceClass.COMPACT

    def test_infinite_width_is_wide(self):
        assert classify_device(float("inf")).device_class == DeviceClass.WIDE


@pytest.mark.unit
class TestSpacingProfiles:
    def test_profile_lookup_matches_table(self):
        for breakpoint in DEVICE_BREAKPOINTS:
            assert get_spacing_profile(breakpoint.device_class) is breakpoint.profile

    def test_spacing_grows_with_device_class(self):
        compact = get_spacing_profile(DeviceClass.COMPACT)
        medium = get_spacing_profile(DeviceClass.MEDIUM)
        wide = get_spacing_profile(DeviceClass.WIDE)

        assert compact.card_spacing < medium.card_spacing < wide.card_spacing
        assert compact.row_spacing < medium.row_spacing < wide.row_spacing
        assert (
            compact.preferred_cards_per_row
            < medium.preferred_cards_per_row
            < wide.preferred_cards_per_row
        )

    def test_relaxed_profile_scales_spacing_only(self):
        wide = get_spacing_profile(DeviceClass.WIDE)
        relaxed = wide.relaxed(0.5)

        assert relaxed.card_spacing == wide.card_spacing * 0.5
        assert relaxed.row_spacing == wide.row_spacing * 0.5
        assert relaxed.container_margins == wide.container_margins
        assert relaxed.min_card_area_height == wide.min_card_area_height
