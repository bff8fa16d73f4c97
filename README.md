# mikankernel

`mikankernel` models pieces of a small x86-64 hobby kernel as plain
Python objects. Each part works on ordinary Python data (byte strings,
bytearrays, integers and callables), so it can be explored, tested and
reused without any hardware.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## What is inside

| Module | Contents |
| --- | --- |
| `mikankernel.graphics` | `PixelColor`, `to_color`, `Vector2D`, `Rectangle` (with `&` for intersection), `PixelFormat`, `FrameBufferConfig`, the RGB and BGR pixel writers, `make_pixel_writer`, `fill_rectangle`, `draw_rectangle`, `draw_desktop` |
| `mikankernel.font` | `Font` (16 bytes per 8x16 glyph), `write_ascii`, `write_string` |
| `mikankernel.frame_buffer` | `FrameBuffer` with a clipped `copy` between buffers and an in-place `move`; `bytes_per_pixel`; `UnknownPixelFormatError` |
| `mikankernel.logger` | `LogLevel` and `Logger`, which formats printf-style and drops messages above its threshold |
| `mikankernel.console` | `Console`, an 80x25 text console that draws with a `Font` and scrolls at the bottom |
| `mikankernel.memory_manager` | `BitmapMemoryManager`, a 4 KiB frame allocator backed by a bitmap; `NoEnoughMemoryError` |
| `mikankernel.paging` | `LinearAddress4Level`, `PageMapEntry` and `identity_page_directories` |
| `mikankernel.timer` | `Timer` and a tick-driven `TimerManager` with self-rescheduling task-switch timers |
| `mikankernel.task` | `Task` and a multi-level round-robin `TaskManager` with per-task message queues |
| `mikankernel.keyboard` | `keycode_to_ascii` and `make_key_push` for USB HID keycodes, with shift handling |
| `mikankernel.acpi` | `RSDP`, `DescriptionHeader`, `XSDT`, `FADT` parsing and checksum validation, `find_fadt`, PM timer waits |
| `mikankernel.pci` | `PciBus` for configuration-register access, bus scanning, BARs and MSI set-up over an in-memory `ConfigSpace` |

## Examples

Colours and rectangles:

```python
from mikankernel.graphics import Rectangle, Vector2D, to_color

color = to_color(0x2D76ED)
print(color.r, color.g, color.b)  # 45 118 237

a = Rectangle(Vector2D(0, 0), Vector2D(10, 10))
b = Rectangle(Vector2D(5, 5), Vector2D(10, 10))
overlap = a & b
print(overlap.pos, overlap.size)  # Vector2D(x=5, y=5) Vector2D(x=5, y=5)
```

Drawing into a frame buffer that owns its memory:

```python
from mikankernel.frame_buffer import FrameBuffer
from mikankernel.graphics import FrameBufferConfig, PixelFormat, draw_desktop

screen = FrameBuffer(
    FrameBufferConfig(
        horizontal_resolution=320,
        vertical_resolution=200,
        pixel_format=PixelFormat.BGR_RESV_8BIT_PER_COLOR,
    )
)
draw_desktop(screen.writer)
```

Allocating physical frames:

```python
from mikankernel.memory_manager import BitmapMemoryManager

manager = BitmapMemoryManager()
manager.set_memory_range(1, 1024)
first = manager.allocate(4)   # frames 1..4
manager.free(first, 4)
```

Scheduling tasks and passing messages:

```python
from mikankernel.task import TaskManager

manager = TaskManager()
worker = manager.new_task()
manager.send_message(worker.id, "hello")  # wakes the worker
print(worker.receive_message())           # hello
```

## What the package does not do

- It ships no commands; everything is used as a library.
- It has no file-system support: there is no way to read files or
  directories from a disk image.
- It has no window stacking, mouse cursor or mouse handling; `Console`
  accepts any object with a `writer` and a `move` method as its window,
  and any object with a `draw_layer` method for redraws.
- It does not load or run executables and has no boot-loader helpers.
- Nothing here touches real hardware: PCI registers live in a
  `ConfigSpace` object, ACPI tables are read from a byte buffer, and the
  PM timer is read through a callable you supply.