"""Bitmap font rendering of 8x16 glyphs."""

from __future__ import annotations

from itertools import takewhile
from typing import Optional, Union

from mikankernel.graphics import PixelColor, PixelWriter, Vector2D

GLYPH_WIDTH = 8
GLYPH_HEIGHT = 16


def _code(c: Union[str, int]) -> int:
    return ord(c) if isinstance(c, str) else c


class Font:
    """An 8x16 font stored as 16 bytes per character code."""

    def __init__(self, glyphs: bytes) -> None:
        self._glyphs = bytes(glyphs)

    def glyph(self, c: Union[str, int]) -> Optional[bytes]:
        """Return the 16 row bitmaps of c, or None when the font lacks it."""
        code = _code(c)
        if code < 0:
            return None
        index = GLYPH_HEIGHT * code
        if index >= len(self._glyphs):
            return None
        return self._glyphs[index : index + GLYPH_HEIGHT]


def write_ascii(
    writer: PixelWriter, pos: Vector2D, c: Union[str, int], color: PixelColor, font: Font
) -> None:
    """Draw one character with its top-left corner at pos."""
    rows = font.glyph(c)
    if rows is None:
        return
    for dy, row in enumerate(rows):
        for dx in range(GLYPH_WIDTH):
            if (row << dx) & 0x80:
                writer.write(pos + Vector2D(dx, dy), color)


def write_string(
    writer: PixelWriter, pos: Vector2D, s: str, color: PixelColor, font: Font
) -> None:
    """Draw a string left to right, stopping at the first NUL character."""
    for i, ch in enumerate(takewhile(lambda ch: ch != "\0", s)):
        write_ascii(writer, pos + Vector2D(GLYPH_WIDTH * i, 0), ch, color, font)