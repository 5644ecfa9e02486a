"""
Display Buffer Unit Tests
=========================

Tests for the 64x32 XOR framebuffer: sprite drawing, collision,
edge wrapping/clipping, redraw signalling and rendering.

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

import pytest

from chip8_sdk.emulator import Display


@pytest.fixture
def display():
    return Display()


class TestDisplayInit:
    """Test display initialization."""

    def test_dimensions(self, display):
        assert display.width == 64
        assert display.height == 32
        assert len(display.get_pixels()) == 2048

    def test_starts_blank(self, display):
        assert display.lit_count() == 0

    def test_no_redraw_initially(self, display):
        assert display.needs_redraw() is False


class TestSpriteDrawing:
    """Test draw_sprite()."""

    def test_draw_single_row(self, display):
        collision = display.draw_sprite(0, 0, [0b10100000])
        assert collision is False
        assert display.pixel(0, 0) == 1
        assert display.pixel(1, 0) == 0
        assert display.pixel(2, 0) == 1

    def test_row_major_layout(self, display):
        display.draw_sprite(3, 2, [0x80])
        assert display.get_pixels()[2 * 64 + 3] == 1

    def test_double_draw_collides_and_clears(self, display):
        sprite = [0xF0, 0x90, 0x90, 0x90, 0xF0]
        assert display.draw_sprite(10, 5, sprite) is False
        assert display.lit_count() == 14
        assert display.draw_sprite(10, 5, sprite) is True
        assert display.lit_count() == 0

    def test_partial_overlap_collision(self, display):
        display.draw_sprite(0, 0, [0x80])
        assert display.draw_sprite(0, 0, [0xC0]) is True
        assert display.pixel(0, 0) == 0
        assert display.pixel(1, 0) == 1

    def test_no_collision_when_disjoint(self, display):
        display.draw_sprite(0, 0, [0x80])
        assert display.draw_sprite(8, 0, [0x80]) is False

    def test_origin_wraps(self, display):
        display.draw_sprite(64 + 1, 32 + 2, [0x80])
        assert display.pixel(1, 2) == 1

    def test_pixels_wrap_by_default(self, display):
        display.draw_sprite(62, 31, [0xF0, 0xF0])
        assert display.pixel(62, 31) == 1
        assert display.pixel(63, 31) == 1
        assert display.pixel(0, 31) == 1
        assert display.pixel(1, 31) == 1
        assert display.pixel(0, 0) == 1  # second row wrapped to top

    def test_pixels_clip_when_enabled(self):
        display = Display(clip_sprites=True)
        display.draw_sprite(62, 31, [0xF0, 0xF0])
        assert display.lit_count() == 2
        assert display.pixel(0, 31) == 0
        assert display.pixel(0, 0) == 0

    def test_empty_sprite(self, display):
        assert display.draw_sprite(0, 0, []) is False
        assert display.lit_count() == 0

    def test_too_many_rows(self, display):
        with pytest.raises(ValueError):
            display.draw_sprite(0, 0, [0xFF] * 16)


class TestClearAndRedraw:
    """Test clear() and the one-shot redraw flag."""

    def test_clear_zeroes_all_pixels(self, display):
        for y in range(0, 32, 4):
            display.draw_sprite(y, y, [0xFF, 0xFF])
        display.clear()
        assert display.get_pixels() == bytes(2048)

    def test_redraw_is_one_shot(self, display):
        display.draw_sprite(0, 0, [0x80])
        assert display.needs_redraw() is True
        assert display.needs_redraw() is False

    def test_clear_sets_redraw(self, display):
        display.clear()
        assert display.needs_redraw() is True


class TestRendering:
    """Test text and image rendering."""

    def test_render_text(self, display):
        display.draw_sprite(0, 0, [0xC0])
        lines = display.render_text()
        assert len(lines) == 32
        assert all(len(line) == 64 for line in lines)
        assert lines[0].startswith("##.")
        assert lines[1] == "." * 64

    def test_render_text_custom_chars(self, display):
        display.draw_sprite(0, 0, [0x80])
        assert display.render_text(on="X", off=" ")[0][:2] == "X "

    def test_render_image_png(self, display):
        display.draw_sprite(0, 0, [0xFF])
        img = display.render_image(scale=2)
        assert img[:4] == b'\x89PNG'

    def test_render_image_size(self, display):
        from PIL import Image
        import io

        img = Image.open(io.BytesIO(display.render_image(scale=4)))
        assert img.size == (256, 128)

    def test_render_image_invalid_scale(self, display):
        with pytest.raises(ValueError):
            display.render_image(scale=0)

    def test_load_pixels(self, display):
        pixels = bytes([1]) + bytes(2047)
        display.load_pixels(pixels)
        assert display.pixel(0, 0) == 1
        assert display.lit_count() == 1
