"""
Tests for the available-space calculation.
"""

import pytest

from core.space import DEFAULT_CHROME, ChromeReservation, calculate_available_space


@pytest.mark.unit
class TestAvailableSpace:
    def test_wide_container(self, wide_profile):
        """
        1024x768 on the wide profile.
        Expected: Width clamped to 90% of the container, height to 50%.
        """
        space = calculate_available_space(1024, 768, wide_profile)

        assert space.width == pytest.approx(921.6)
        assert space.height == pytest.approx(384.0)
        assert space.center_x == pytest.approx(512.0)
        assert space.center_y == pytest.approx(160 + 36 + 192)

    def test_medium_container(self, medium_profile):
        space = calculate_available_space(800, 600, medium_profile)

        assert space.width == pytest.approx(720.0)
        assert space.height == pytest.approx(300.0)
        assert space.center_y == pytest.approx(160 + 32 + 150)

    def test_margins_limit_before_fraction(self, wide_profile):
        """
        On a short container the chrome and margins leave less than the 50% clamp.
        Expected: Height is the raw remainder.
        """
        space = calculate_available_space(1280, 560, wide_profile)
        raw_height = 560 - DEFAULT_CHROME.top - DEFAULT_CHROME.bottom - 60

        assert raw_height < 560 * DEFAULT_CHROME.max_height_fraction

        assert space.height == pytest.approx(raw_height)

    def test_space_is_inside_container(self, wide_profile):
        space = calculate_available_space(1920, 1080, wide_profile)

        assert space.left >= 0
        assert space.left + space.width <= 1920
        assert space.top >= DEFAULT_CHROME.top
        assert space.top + space.height <= 1080

    def test_custom_chrome(self, wide_profile):
        chrome = ChromeReservation(info_panel=0, status_line=0, action_button=0, max_height_fraction=1.0)
        space = calculate_available_space(1024, 768, wide_profile, chrome)

        assert space.height == pytest.approx(768 - 60)
        assert space.center_y == pytest.approx(36 + space.height / 2)

    def test_describe(self, wide_space):
        assert wide_space.describe() == "Available: 921.6x384.0 | Center: 512.0,388.0"


@pytest.mark.edge_case
class TestAvailableSpaceFloor:
    def test_small_container_uses_floor(self, compact_profile):
        """
        400x300 leaves almost no height after chrome.
        Expected: Height raised to the profile's minimum card area.
        """
        space = calculate_available_space(400, 300, compact_profile)

        assert space.width == pytest.approx(360.0)
        assert space.height == pytest.approx(compact_profile.min_card_area_height)

    def test_floor_never_exceeds_container(self, compact_profile):
        space = calculate_available_space(200, 120, compact_profile)

        assert space.width <= 200
        assert space.height <= 120

    @pytest.mark.parametrize(
        "width,height",
        [(0, 768), (1024, 0), (-5, -5), (float("nan"), 600), (800, float("inf"))],
    )
    def test_degenerate_container(self, compact_profile, width, height):
        """
        Test unusable container dimensions.
        Expected: Full floor rectangle, no exception.
        """
        space = calculate_available_space(width, height, compact_profile)

        assert space.width == DEFAULT_CHROME.floor_width
        assert space.height == compact_profile.min_card_area_height
        assert space.center_x == pytest.approx(DEFAULT_CHROME.floor_width / 2)
