"""Frame buffers with block copy and in-place move."""

from __future__ import annotations

from dataclasses import replace

from mikankernel.graphics import (
    FrameBufferConfig,
    FrameBufferWriter,
    PixelFormat,
    Rectangle,
    Vector2D,
    make_pixel_writer,
)


class UnknownPixelFormatError(ValueError):
    """The pixel format is unknown or the two buffers' formats differ."""


def bytes_per_pixel(pixel_format: PixelFormat) -> int:
    """Number of bytes one pixel takes in the given format."""
    if pixel_format in (
        PixelFormat.RGB_RESV_8BIT_PER_COLOR,
        PixelFormat.BGR_RESV_8BIT_PER_COLOR,
    ):
        return 4
    raise UnknownPixelFormatError(f"unknown pixel format: {pixel_format!r}")


class FrameBuffer:
    """A frame buffer, either over given memory or over its own allocation."""

    def __init__(self, config: FrameBufferConfig) -> None:
        self._config = replace(config)
        bpp = bytes_per_pixel(self._config.pixel_format)
        if self._config.frame_buffer is None:
            self._config.frame_buffer = bytearray(
                bpp
                * self._config.horizontal_resolution
                * self._config.vertical_resolution
            )
            self._config.pixels_per_scan_line = self._config.horizontal_resolution
        try:
            self._writer = make_pixel_writer(self._config)
        except ValueError as exc:
            raise UnknownPixelFormatError(str(exc)) from exc

    @property
    def writer(self) -> FrameBufferWriter:
        """Pixel writer drawing into this buffer."""
        return self._writer

    @property
    def config(self) -> FrameBufferConfig:
        """The configuration in use, including the backing memory."""
        return self._config

    @property
    def size(self) -> Vector2D:
        """Resolution as a vector."""
        return Vector2D(
            self._config.horizontal_resolution, self._config.vertical_resolution
        )

    def _offset(self, pos: Vector2D) -> int:
        bpp = bytes_per_pixel(self._config.pixel_format)
        return bpp * (self._config.pixels_per_scan_line * pos.y + pos.x)

    def _scan_line_bytes(self) -> int:
        return bytes_per_pixel(self._config.pixel_format) * self._config.pixels_per_scan_line

    def copy(self, dst_pos: Vector2D, src: FrameBuffer, src_area: Rectangle) -> None:
        """Copy src_area of src to dst_pos, clipped to both buffers."""
        if self._config.pixel_format != src._config.pixel_format:
            raise UnknownPixelFormatError("pixel formats of the two buffers differ")
        bpp = bytes_per_pixel(self._config.pixel_format)

        src_area_shifted = Rectangle(dst_pos, src_area.size)
        src_outline = Rectangle(dst_pos - src_area.pos, src.size)
        dst_outline = Rectangle(Vector2D(0, 0), self.size)
        copy_area = dst_outline & src_outline & src_area_shifted
        src_start = copy_area.pos - (dst_pos - src_area.pos)

        dst_buf = self._config.frame_buffer
        src_buf = src._config.frame_buffer
        dst_off = self._offset(copy_area.pos)
        src_off = src._offset(src_start)
        row_bytes = bpp * copy_area.size.x
        for _ in range(copy_area.size.y):
            dst_buf[dst_off : dst_off + row_bytes] = src_buf[src_off : src_off + row_bytes]
            dst_off += self._scan_line_bytes()
            src_off += src._scan_line_bytes()

    def move(self, dst_pos: Vector2D, src: Rectangle) -> None:
        """Move the src area within this buffer so it starts at dst_pos."""
        bpp = bytes_per_pixel(self._config.pixel_format)
        line = self._scan_line_bytes()
        row_bytes = bpp * src.size.x
        buf = self._config.frame_buffer

        if dst_pos.y < src.pos.y:
            dst_off = self._offset(dst_pos)
            src_off = self._offset(src.pos)
            step = line
        else:
            last = Vector2D(0, src.size.y - 1)
            dst_off = self._offset(dst_pos + last)
            src_off = self._offset(src.pos + last)
            step = -line
        for _ in range(src.size.y):
            buf[dst_off : dst_off + row_bytes] = buf[src_off : src_off + row_bytes]
            dst_off += step
            src_off += step