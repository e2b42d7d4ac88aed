"""Tests for color parsing and contrast helpers."""

import pytest

from core.colors import (
    BLACK,
    WHITE,
    contrast_ratio,
    contrast_text_color,
    hex_to_rgb,
    meets_wcag_aa,
    parse_color,
    relative_luminance,
)


class TestParseColor:
    def test_six_digit_hex(self):
        assert parse_color("#1677ff") == (22, 119, 255)

    def test_hex_without_hash(self):
        assert parse_color("1677ff") == (22, 119, 255)

    def test_three_digit_hex(self):
        assert parse_color("#fff") == (255, 255, 255)
        assert hex_to_rgb("0f0") == (0, 255, 0)

    def test_rgb_and_rgba(self):
        assert parse_color("rgb(28, 28, 29)") == (28, 28, 29)
        assert parse_color("rgba(28,28,29,0.5)") == (28, 28, 29)

    @pytest.mark.parametrize("value", ["", "#12345", "#ggg", "blue", "rgb(300, 0, 0)"])
    def test_invalid_colors(self, value):
        assert parse_color(value) is None


class TestContrast:
    def test_luminance_bounds(self):
        assert relative_luminance(0, 0, 0) == 0
        assert relative_luminance(255, 255, 255) == pytest.approx(1.0)

    def test_light_background_gets_black_text(self):
        assert contrast_text_color("#ffffff") == BLACK
        assert contrast_text_color("#ffe58f") == BLACK

    def test_dark_background_gets_white_text(self):
        assert contrast_text_color("#000000") == WHITE
        assert contrast_text_color("rgb(28, 28, 29)") == WHITE

    def test_invalid_or_missing_color_defaults_to_white(self):
        assert contrast_text_color("not-a-color") == WHITE
        assert contrast_text_color(None) == WHITE

    def test_threshold_is_respected(self):
        # Mid grey has luminance ~0.22
        assert contrast_text_color("#808080") == WHITE
        assert contrast_text_color("#808080", threshold=0.1) == BLACK

    def test_contrast_ratio_black_on_white(self):
        assert contrast_ratio("#000000", "#ffffff") == pytest.approx(21.0)
        assert contrast_ratio("#ffffff", "#000000") == pytest.approx(21.0)

    def test_contrast_ratio_invalid_input(self):
        assert contrast_ratio("nope", "#ffffff") == 1.0

    def test_wcag_aa(self):
        assert meets_wcag_aa("#000000", "#ffffff")
        assert not meets_wcag_aa("#777777", "#888888")
        # ~3.4:1 passes only for large text
        assert not meets_wcag_aa("#8c8c8c", "#ffffff")
        assert meets_wcag_aa("#8c8c8c", "#ffffff", large_text=True)
