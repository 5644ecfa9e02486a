"""
Display Buffer for CHIP-8 Emulator
==================================

The CHIP-8 screen is a 64 x 32 monochrome grid. There is exactly one
drawing primitive: a sprite of up to 15 rows of 8 pixels is XORed onto
the screen, and the caller learns whether any lit pixel was switched
off (a "collision").

Pixels are stored one byte per cell (0 = off, 1 = on), row-major, so the
cell for (x, y) lives at index y * 64 + x.

Sprite edge handling:
- wrap (default): pixels past the right/bottom edge reappear on the
  opposite side.
- clip: pixels past the edge are dropped. The sprite origin itself
  still wraps onto the screen.

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

import io
from typing import List, Sequence

WIDTH = 64
HEIGHT = 32


class Display:
    """
    64 x 32 XOR framebuffer.

    The display tracks a "redraw pending" flag which is set by every
    clear and draw, and consumed by needs_redraw(). Hosts call
    needs_redraw() once per frame to decide whether to repaint.

    Attributes:
        clip_sprites: Drop out-of-bounds sprite pixels instead of wrapping
    """

    MAX_SPRITE_ROWS = 15

    def __init__(self, clip_sprites: bool = False):
        self.clip_sprites = clip_sprites
        self._pixels = bytearray(WIDTH * HEIGHT)
        self._redraw = False

    @property
    def width(self) -> int:
        return WIDTH

    @property
    def height(self) -> int:
        return HEIGHT

    def clear(self) -> None:
        """Switch every pixel off."""
        self._pixels = bytearray(WIDTH * HEIGHT)
        self._redraw = True

    def draw_sprite(self, x: int, y: int, rows: Sequence[int]) -> bool:
        """
        XOR a sprite onto the screen.

        Args:
            x: Left column (taken modulo 64)
            y: Top row (taken modulo 32)
            rows: Up to 15 sprite bytes, MSB is the leftmost pixel

        Returns:
            True if any pixel went from on to off
        """
        if len(rows) > self.MAX_SPRITE_ROWS:
            raise ValueError(f"Sprite has {len(rows)} rows, maximum is {self.MAX_SPRITE_ROWS}")

        x0 = x % WIDTH
        y0 = y % HEIGHT
        collision = False

        for row, bits in enumerate(rows):
            py = y0 + row
            if py >= HEIGHT:
                if self.clip_sprites:
                    break
                py %= HEIGHT
            for bit in range(8):
                if not bits & (0x80 >> bit):
                    continue
                px = x0 + bit
                if px >= WIDTH:
                    if self.clip_sprites:
                        break
                    px %= WIDTH
                index = py * WIDTH + px
                if self._pixels[index]:
                    collision = True
                self._pixels[index] ^= 1

        self._redraw = True
        return collision

    def pixel(self, x: int, y: int) -> int:
        """Return pixel state (0/1) at (x, y)."""
        return self._pixels[y * WIDTH + x]

    def needs_redraw(self) -> bool:
        """
        Return whether the screen changed since the last call.

        Reading the flag resets it.
        """
        pending = self._redraw
        self._redraw = False
        return pending

    def get_pixels(self) -> bytes:
        """Snapshot of the framebuffer: 2048 bytes of 0/1, row-major."""
        return bytes(self._pixels)

    def load_pixels(self, pixels: bytes) -> None:
        """Replace the framebuffer contents (nonzero = on)."""
        if len(pixels) != WIDTH * HEIGHT:
            raise ValueError(f"Expected {WIDTH * HEIGHT} pixels, got {len(pixels)}")
        self._pixels = bytearray(1 if p else 0 for p in pixels)
        self._redraw = True

    def lit_count(self) -> int:
        """Number of pixels switched on."""
        return sum(self._pixels)

    # =========================================================================
    # Rendering
    # =========================================================================

    def render_text(self, on: str = "#", off: str = ".") -> List[str]:
        """
        Render the screen as text, one string per row.

        Args:
            on: Character for lit pixels
            off: Character for dark pixels
        """
        lines = []
        for y in range(HEIGHT):
            row = self._pixels[y * WIDTH:(y + 1) * WIDTH]
            lines.append("".join(on if p else off for p in row))
        return lines

    def render_image(self, scale: int = 8, format: str = "PNG") -> bytes:
        """
        Render the screen as an image using Pillow.

        Args:
            scale: Pixel scale factor (default 8, giving 512x256)
            format: Any format Pillow can write (default PNG)

        Returns:
            Encoded image bytes
        """
        from PIL import Image

        if scale < 1:
            raise ValueError(f"Scale must be at least 1, got {scale}")

        img = Image.new("L", (WIDTH, HEIGHT))
        img.putdata([255 if p else 0 for p in self._pixels])
        if scale != 1:
            img = img.resize((WIDTH * scale, HEIGHT * scale), Image.Resampling.NEAREST)

        buffer = io.BytesIO()
        img.save(buffer, format=format)
        return buffer.getvalue()

    def save_image(self, path, scale: int = 8) -> None:
        """Write a PNG screenshot to path."""
        data = self.render_image(scale=scale)
        with open(path, "wb") as f:
            f.write(data)
