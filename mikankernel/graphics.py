"""Pixel colours, 2D geometry and pixel writers for linear frame buffers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


@dataclass(frozen=True)
class PixelColor:
    """An 8-bit-per-channel RGB colour."""

    r: int
    g: int
    b: int


def to_color(c: int) -> PixelColor:
    """Convert a 0xRRGGBB integer into a PixelColor."""
    return PixelColor((c >> 16) & 0xFF, (c >> 8) & 0xFF, c & 0xFF)


@dataclass(frozen=True)
class Vector2D:
    """An integer 2D vector or point."""

    x: int
    y: int

    def __add__(self, other: Vector2D) -> Vector2D:
        if not isinstance(other, Vector2D):
            return NotImplemented
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2D) -> Vector2D:
        if not isinstance(other, Vector2D):
            return NotImplemented
        return Vector2D(self.x - other.x, self.y - other.y)


def element_max(lhs: Vector2D, rhs: Vector2D) -> Vector2D:
    """Component-wise maximum of two vectors."""
    return Vector2D(max(lhs.x, rhs.x), max(lhs.y, rhs.y))


def element_min(lhs: Vector2D, rhs: Vector2D) -> Vector2D:
    """Component-wise minimum of two vectors."""
    return Vector2D(min(lhs.x, rhs.x), min(lhs.y, rhs.y))


@dataclass(frozen=True)
class Rectangle:
    """An axis-aligned rectangle given by its origin and size."""

    pos: Vector2D
    size: Vector2D

    def __and__(self, other: Rectangle) -> Rectangle:
        if not isinstance(other, Rectangle):
            return NotImplemented
        lhs_end = self.pos + self.size
        rhs_end = other.pos + other.size
        if (
            lhs_end.x < other.pos.x
            or lhs_end.y < other.pos.y
            or rhs_end.x < self.pos.x
            or rhs_end.y < self.pos.y
        ):
            return Rectangle(Vector2D(0, 0), Vector2D(0, 0))
        new_pos = element_max(self.pos, other.pos)
        new_size = element_min(lhs_end, rhs_end) - new_pos
        return Rectangle(new_pos, new_size)


class PixelFormat(IntEnum):
    """Byte layout of a pixel in the frame buffer."""

    RGB_RESV_8BIT_PER_COLOR = 0
    BGR_RESV_8BIT_PER_COLOR = 1


@dataclass
class FrameBufferConfig:
    """Description of a linear frame buffer."""

    frame_buffer: Optional[bytearray] = None
    pixels_per_scan_line: int = 0
    horizontal_resolution: int = 0
    vertical_resolution: int = 0
    pixel_format: PixelFormat = PixelFormat.RGB_RESV_8BIT_PER_COLOR


class PixelWriter(ABC):
    """Something pixels can be drawn onto."""

    @abstractmethod
    def write(self, pos: Vector2D, color: PixelColor) -> None:
        """Set the pixel at pos to color."""

    @abstractmethod
    def width(self) -> int:
        """Width in pixels."""

    @abstractmethod
    def height(self) -> int:
        """Height in pixels."""


class FrameBufferWriter(PixelWriter):
    """A pixel writer backed by a 4-byte-per-pixel frame buffer."""

    def __init__(self, config: FrameBufferConfig) -> None:
        self._config = config

    def width(self) -> int:
        return self._config.horizontal_resolution

    def height(self) -> int:
        return self._config.vertical_resolution

    def pixel_offset(self, pos: Vector2D) -> int:
        """Byte offset of the pixel at pos within the frame buffer."""
        return 4 * (self._config.pixels_per_scan_line * pos.y + pos.x)

    def _store(self, pos: Vector2D, first: int, second: int, third: int) -> None:
        buf = self._config.frame_buffer
        if buf is None:
            raise ValueError("frame buffer has no memory attached")
        offset = self.pixel_offset(pos)
        if offset < 0 or offset + 3 > len(buf):
            raise IndexError(f"pixel {pos} lies outside the frame buffer")
        buf[offset : offset + 3] = bytes((first, second, third))


class RGBResv8BitPerColorPixelWriter(FrameBufferWriter):
    """Writes pixels in R, G, B, reserved byte order."""

    def write(self, pos: Vector2D, color: PixelColor) -> None:
        self._store(pos, color.r, color.g, color.b)


class BGRResv8BitPerColorPixelWriter(FrameBufferWriter):
    """Writes pixels in B, G, R, reserved byte order."""

    def write(self, pos: Vector2D, color: PixelColor) -> None:
        self._store(pos, color.b, color.g, color.r)


def make_pixel_writer(config: FrameBufferConfig) -> FrameBufferWriter:
    """Create the pixel writer matching the config's pixel format."""
    if config.pixel_format == PixelFormat.RGB_RESV_8BIT_PER_COLOR:
        return RGBResv8BitPerColorPixelWriter(config)
    if config.pixel_format == PixelFormat.BGR_RESV_8BIT_PER_COLOR:
        return BGRResv8BitPerColorPixelWriter(config)
    raise ValueError(f"unknown pixel format: {config.pixel_format!r}")


def draw_rectangle(
    writer: PixelWriter, pos: Vector2D, size: Vector2D, color: PixelColor
) -> None:
    """Draw the outline of a rectangle."""
    for dx in range(size.x):
        writer.write(pos + Vector2D(dx, 0), color)
        writer.write(pos + Vector2D(dx, size.y - 1), color)
    for dy in range(1, size.y - 1):
        writer.write(pos + Vector2D(0, dy), color)
        writer.write(pos + Vector2D(size.x - 1, dy), color)


def fill_rectangle(
    writer: PixelWriter, pos: Vector2D, size: Vector2D, color: PixelColor
) -> None:
    """Fill a rectangle with a solid colour."""
    for dy in range(size.y):
        for dx in range(size.x):
            writer.write(pos + Vector2D(dx, dy), color)


DESKTOP_BG_COLOR = PixelColor(45, 118, 237)
DESKTOP_FG_COLOR = PixelColor(255, 255, 255)


def draw_desktop(writer: PixelWriter) -> None:
    """Draw the desktop background and task bar."""
    width = writer.width()
    height = writer.height()
    fill_rectangle(writer, Vector2D(0, 0), Vector2D(width, height - 50), DESKTOP_BG_COLOR)
    fill_rectangle(writer, Vector2D(0, height - 50), Vector2D(width, 50), PixelColor(1, 8, 17))
    fill_rectangle(
        writer, Vector2D(0, height - 50), Vector2D(width // 5, 50), PixelColor(80, 80, 80)
    )
    draw_rectangle(
        writer, Vector2D(10, height - 40), Vector2D(30, 30), PixelColor(160, 160, 160)
    )