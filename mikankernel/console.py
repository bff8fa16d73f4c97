"""A fixed-size text console drawn with a bitmap font."""

from __future__ import annotations

from typing import List, Optional, Protocol

from mikankernel.font import Font, write_ascii, write_string
from mikankernel.graphics import (
    PixelColor,
    PixelWriter,
    Rectangle,
    Vector2D,
    fill_rectangle,
)


class ConsoleWindow(Protocol):
    """What the console needs from a window it draws into."""

    @property
    def writer(self) -> PixelWriter:
        """Pixel writer drawing into the window."""

    def move(self, dst_pos: Vector2D, src: Rectangle) -> None:
        """Move an area of the window's contents to dst_pos."""


class _Redrawer(Protocol):
    def draw_layer(self, layer_id: int, area: Optional[Rectangle] = None) -> None:
        """Redraw a layer."""


class Console:
    """A text console of ROWS x COLUMNS characters that scrolls at the bottom."""

    ROWS = 25
    COLUMNS = 80

    def __init__(
        self,
        fg_color: PixelColor,
        bg_color: PixelColor,
        font: Font,
        layer_manager: Optional[_Redrawer] = None,
    ) -> None:
        self._fg_color = fg_color
        self._bg_color = bg_color
        self._font = font
        self._layer_manager = layer_manager
        self._writer: Optional[PixelWriter] = None
        self._window: Optional[ConsoleWindow] = None
        self._buffer: List[List[str]] = [self._blank_row() for _ in range(self.ROWS)]
        self._cursor_row = 0
        self._cursor_column = 0
        self.layer_id = 0

    @classmethod
    def _blank_row(cls) -> List[str]:
        return ["\0"] * (cls.COLUMNS + 1)

    def put_string(self, s: str) -> None:
        """Write text; characters past the last usable column are dropped."""
        writer = self._require_writer()
        for ch in s:
            if ch == "\n":
                self._newline()
            elif self._cursor_column < self.COLUMNS - 1:
                pos = Vector2D(8 * self._cursor_column, 16 * self._cursor_row)
                write_ascii(writer, pos, ch, self._fg_color, self._font)
                self._buffer[self._cursor_row][self._cursor_column] = ch
                self._cursor_column += 1
        if self._layer_manager is not None:
            self._layer_manager.draw_layer(self.layer_id)

    def set_writer(self, writer: PixelWriter) -> None:
        """Draw directly through writer, detaching any window, and redraw."""
        if writer is self._writer:
            return
        self._writer = writer
        self._window = None
        self._refresh()

    def set_window(self, window: ConsoleWindow) -> None:
        """Draw into window and redraw."""
        if window is self._window:
            return
        self._window = window
        self._writer = window.writer
        self._refresh()

    def lines(self) -> List[str]:
        """The text held in each row."""
        return ["".join(row).split("\0", 1)[0] for row in self._buffer]

    def _require_writer(self) -> PixelWriter:
        if self._writer is None:
            raise RuntimeError("console has no writer")
        return self._writer

    def _newline(self) -> None:
        self._cursor_column = 0
        if self._cursor_row < self.ROWS - 1:
            self._cursor_row += 1
            return

        writer = self._require_writer()
        if self._window is not None:
            move_src = Rectangle(
                Vector2D(0, 16), Vector2D(8 * self.COLUMNS, 16 * (self.ROWS - 1))
            )
            self._window.move(Vector2D(0, 0), move_src)
            fill_rectangle(
                writer,
                Vector2D(0, 16 * (self.ROWS - 1)),
                Vector2D(8 * self.COLUMNS, 16),
                self._bg_color,
            )
        else:
            fill_rectangle(
                writer,
                Vector2D(0, 0),
                Vector2D(8 * self.COLUMNS, 16 * self.ROWS),
                self._bg_color,
            )
            self._buffer = self._buffer[1:] + [self._blank_row()]
            for row, chars in enumerate(self._buffer[:-1]):
                write_string(
                    writer, Vector2D(0, 16 * row), "".join(chars), self._fg_color, self._font
                )

    def _refresh(self) -> None:
        writer = self._require_writer()
        fill_rectangle(
            writer,
            Vector2D(0, 0),
            Vector2D(8 * self.COLUMNS, 16 * self.ROWS),
            self._bg_color,
        )
        for row, chars in enumerate(self._buffer):
            write_string(
                writer, Vector2D(0, 16 * row), "".join(chars), self._fg_color, self._font
            )