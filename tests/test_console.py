import pytest

from mikankernel.console import Console
from mikankernel.font import Font
from mikankernel.graphics import PixelColor, PixelWriter, Rectangle, Vector2D

FG = PixelColor(255, 255, 255)
BG = PixelColor(10, 20, 30)
FULL_FONT = Font(bytes([0xFF]) * 16 * 128)


class RecordingWriter(PixelWriter):
    def __init__(self):
        self.pixels = {}
        self.count = 0

    def write(self, pos, color):
        self.pixels[pos] = color
        self.count += 1

    def width(self):
        return 640

    def height(self):
        return 400


class FakeWindow:
    def __init__(self):
        self.writer = RecordingWriter()
        self.moves = []

    def move(self, dst_pos, src):
        self.moves.append((dst_pos, src))


class FakeLayerManager:
    def __init__(self):
        self.drawn = []

    def draw_layer(self, layer_id, area=None):
        self.drawn.append(layer_id)


@pytest.fixture
def console_and_writer():
    console = Console(FG, BG, FULL_FONT)
    writer = RecordingWriter()
    console.set_writer(writer)
    return console, writer


def test_put_string_stores_text(console_and_writer):
    console, _ = console_and_writer
    console.put_string("hello")
    assert console.lines()[0] == "hello"
    assert console.lines()[1] == ""


def test_newline_moves_to_next_row(console_and_writer):
    console, _ = console_and_writer
    console.put_string("ab\ncd")
    assert console.lines()[:2] == ["ab", "cd"]


def test_long_line_is_cut(console_and_writer):
    console, _ = console_and_writer
    console.put_string("x" * 100)
    assert console.lines()[0] == "x" * (Console.COLUMNS - 1)


def test_refresh_fills_background(console_and_writer):
    _, writer = console_and_writer
    assert writer.pixels[Vector2D(0, 0)] == BG
    assert writer.count > 0


def test_put_string_draws_glyph(console_and_writer):
    console, writer = console_and_writer
    console.put_string("A")
    assert writer.pixels[Vector2D(0, 0)] == FG
    assert writer.pixels[Vector2D(7, 15)] == FG
    assert writer.pixels[Vector2D(8, 0)] == BG


def test_set_same_writer_does_not_redraw(console_and_writer):
    console, writer = console_and_writer
    before = writer.count
    console.set_writer(writer)
    assert writer.count == before


def test_scroll_without_window(console_and_writer):
    console, _ = console_and_writer
    text = "\n".join(f"L{i}" for i in range(Console.ROWS))
    console.put_string(text)
    assert console.lines()[0] == "L0"
    console.put_string("\nX")
    lines = console.lines()
    assert len(lines) == Console.ROWS
    assert lines[0] == "L1"
    assert lines[-2] == f"L{Console.ROWS - 1}"
    assert lines[-1] == "X"


def test_scroll_with_window_moves_contents():
    console = Console(FG, BG, FULL_FONT)
    window = FakeWindow()
    console.set_window(window)
    console.put_string("\n" * (Console.ROWS - 1))
    assert window.moves == []
    console.put_string("\n")
    assert len(window.moves) == 1
    dst, src = window.moves[0]
    assert dst == Vector2D(0, 0)
    assert src.pos == Vector2D(0, 16)
    assert isinstance(src, Rectangle)


def test_layer_is_redrawn_after_put_string():
    manager = FakeLayerManager()
    console = Console(FG, BG, FULL_FONT, manager)
    console.set_window(FakeWindow())
    console.layer_id = 4
    console.put_string("hi")
    assert manager.drawn == [4]


def test_put_string_without_writer_raises():
    console = Console(FG, BG, FULL_FONT)
    with pytest.raises(RuntimeError):
        console.put_string("x")