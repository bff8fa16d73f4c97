"""Physical memory frame allocation with a bitmap."""

from __future__ import annotations

KIB = 1024
MIB = 1024 * KIB
GIB = 1024 * MIB

BYTES_PER_FRAME = 4 * KIB
NULL_FRAME = 2**64 - 1


class NoEnoughMemoryError(MemoryError):
    """No run of free frames of the requested length exists."""


def frame_address(frame_id: int) -> int:
    """Physical address where frame frame_id starts."""
    return frame_id * BYTES_PER_FRAME


class BitmapMemoryManager:
    """Tracks frames with one bit each: 0 free, 1 in use."""

    MAX_PHYSICAL_MEMORY_BYTES = 128 * GIB
    FRAME_COUNT = MAX_PHYSICAL_MEMORY_BYTES // BYTES_PER_FRAME

    def __init__(self) -> None:
        self._alloc_map = bytearray(self.FRAME_COUNT // 8)
        self._range_begin = 0
        self._range_end = self.FRAME_COUNT

    def allocate(self, num_frames: int) -> int:
        """Allocate num_frames contiguous frames and return the first frame id."""
        start = self._range_begin
        while True:
            for i in range(num_frames):
                if start + i >= self._range_end:
                    raise NoEnoughMemoryError(
                        f"no {num_frames} contiguous free frames available"
                    )
                if self.is_allocated(start + i):
                    break
            else:
                self.mark_allocated(start, num_frames)
                return start
            start += i + 1

    def free(self, start_frame: int, num_frames: int) -> None:
        """Release num_frames frames starting at start_frame."""
        for frame in range(start_frame, start_frame + num_frames):
            self._set_bit(frame, False)

    def mark_allocated(self, start_frame: int, num_frames: int) -> None:
        """Mark num_frames frames starting at start_frame as in use."""
        for frame in range(start_frame, start_frame + num_frames):
            self._set_bit(frame, True)

    def set_memory_range(self, range_begin: int, range_end: int) -> None:
        """Restrict allocation to frames in [range_begin, range_end)."""
        self._range_begin = range_begin
        self._range_end = range_end

    def is_allocated(self, frame: int) -> bool:
        """Whether frame is in use."""
        index, mask = self._locate(frame)
        return bool(self._alloc_map[index] & mask)

    def _locate(self, frame: int) -> tuple[int, int]:
        if not 0 <= frame < self.FRAME_COUNT:
            raise IndexError(f"frame {frame} is outside managed memory")
        return frame // 8, 1 << (frame % 8)

    def _set_bit(self, frame: int, allocated: bool) -> None:
        index, mask = self._locate(frame)
        if allocated:
            self._alloc_map[index] |= mask
        else:
            self._alloc_map[index] &= ~mask & 0xFF