import pytest

from mikankernel.graphics import (
    BGRResv8BitPerColorPixelWriter,
    DESKTOP_BG_COLOR,
    FrameBufferConfig,
    PixelColor,
    PixelFormat,
    PixelWriter,
    Rectangle,
    RGBResv8BitPerColorPixelWriter,
    Vector2D,
    draw_desktop,
    draw_rectangle,
    element_max,
    element_min,
    fill_rectangle,
    make_pixel_writer,
    to_color,
)


class RecordingWriter(PixelWriter):
    def __init__(self, w=64, h=64):
        self._w = w
        self._h = h
        self.pixels = {}

    def write(self, pos, color):
        self.pixels[(pos.x, pos.y)] = color

    def width(self):
        return self._w

    def height(self):
        return self._h


def make_config(fmt, w=4, h=3, ppsl=None):
    ppsl = w if ppsl is None else ppsl
    return FrameBufferConfig(bytearray(4 * ppsl * h), ppsl, w, h, fmt)


def test_to_color_splits_channels():
    assert to_color(0x123456) == PixelColor(0x12, 0x34, 0x56)
    assert to_color(0) == PixelColor(0, 0, 0)
    assert to_color(0xFFFFFF) == PixelColor(255, 255, 255)


def test_vector_add_sub_roundtrip():
    a = Vector2D(3, -7)
    b = Vector2D(10, 4)
    assert (a + b) - b == a
    assert (a - a) == Vector2D(0, 0)


def test_element_min_max():
    a = Vector2D(1, 9)
    b = Vector2D(5, 2)
    assert element_max(a, b) == Vector2D(5, 9)
    assert element_min(a, b) == Vector2D(1, 2)


def test_rectangle_intersection_is_commutative_and_idempotent():
    a = Rectangle(Vector2D(0, 0), Vector2D(10, 10))
    b = Rectangle(Vector2D(5, 3), Vector2D(10, 10))
    assert a & b == b & a
    assert a & a == a


def test_rectangle_intersection_contained():
    big = Rectangle(Vector2D(0, 0), Vector2D(100, 100))
    small = Rectangle(Vector2D(10, 20), Vector2D(5, 6))
    assert big & small == small


def test_rectangle_intersection_disjoint_is_zero():
    a = Rectangle(Vector2D(0, 0), Vector2D(5, 5))
    b = Rectangle(Vector2D(50, 50), Vector2D(5, 5))
    assert a & b == Rectangle(Vector2D(0, 0), Vector2D(0, 0))


def test_rgb_writer_byte_order():
    config = make_config(PixelFormat.RGB_RESV_8BIT_PER_COLOR)
    writer = RGBResv8BitPerColorPixelWriter(config)
    color = PixelColor(11, 22, 33)
    writer.write(Vector2D(1, 0), color)
    assert bytes(config.frame_buffer[4:7]) == bytes([11, 22, 33])


def test_bgr_writer_byte_order():
    config = make_config(PixelFormat.BGR_RESV_8BIT_PER_COLOR)
    writer = BGRResv8BitPerColorPixelWriter(config)
    writer.write(Vector2D(0, 0), PixelColor(11, 22, 33))
    assert bytes(config.frame_buffer[0:3]) == bytes([33, 22, 11])


def test_pixel_offset_uses_scan_line():
    config = make_config(PixelFormat.RGB_RESV_8BIT_PER_COLOR, w=4, h=3, ppsl=8)
    writer = make_pixel_writer(config)
    assert writer.pixel_offset(Vector2D(0, 0)) == 0
    assert writer.pixel_offset(Vector2D(1, 0)) == 4
    assert writer.pixel_offset(Vector2D(0, 1)) == 4 * config.pixels_per_scan_line
    assert writer.width() == 4
    assert writer.height() == 3


def test_make_pixel_writer_selects_order():
    config = make_config(PixelFormat.BGR_RESV_8BIT_PER_COLOR)
    make_pixel_writer(config).write(Vector2D(0, 0), PixelColor(1, 2, 3))
    assert bytes(config.frame_buffer[0:3]) == bytes([3, 2, 1])


def test_make_pixel_writer_unknown_format():
    config = make_config(PixelFormat.RGB_RESV_8BIT_PER_COLOR)
    config.pixel_format = 99
    with pytest.raises(ValueError):
        make_pixel_writer(config)


def test_writer_out_of_range_raises():
    config = make_config(PixelFormat.RGB_RESV_8BIT_PER_COLOR)
    writer = make_pixel_writer(config)
    with pytest.raises(IndexError):
        writer.write(Vector2D(0, 10), PixelColor(1, 1, 1))


def test_fill_rectangle_covers_area():
    writer = RecordingWriter()
    color = PixelColor(9, 9, 9)
    fill_rectangle(writer, Vector2D(2, 3), Vector2D(5, 4), color)
    assert len(writer.pixels) == 5 * 4
    assert set(writer.pixels.values()) == {color}
    xs = [p[0] for p in writer.pixels]
    ys = [p[1] for p in writer.pixels]
    assert (min(xs), max(xs), min(ys), max(ys)) == (2, 6, 3, 6)


def test_draw_rectangle_outline_only():
    writer = RecordingWriter()
    color = PixelColor(1, 2, 3)
    draw_rectangle(writer, Vector2D(0, 0), Vector2D(5, 5), color)
    assert (0, 0) in writer.pixels
    assert (4, 4) in writer.pixels
    assert (4, 0) in writer.pixels
    assert (0, 4) in writer.pixels
    assert (2, 2) not in writer.pixels


def test_draw_desktop_colors():
    writer = RecordingWriter(200, 120)
    draw_desktop(writer)
    h = writer.height()
    assert writer.pixels[(0, 0)] == DESKTOP_BG_COLOR
    assert writer.pixels[(0, h - 1)] == PixelColor(80, 80, 80)
    assert writer.pixels[(199, h - 1)] == PixelColor(1, 8, 17)
    assert writer.pixels[(10, h - 40)] == PixelColor(160, 160, 160)