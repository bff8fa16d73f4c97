"""x86-64 4-level paging structures and the identity page map."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

PAGE_SIZE_4K = 4096
PAGE_SIZE_2M = 512 * PAGE_SIZE_4K
PAGE_SIZE_1G = 512 * PAGE_SIZE_2M
PAGE_DIRECTORY_COUNT = 64
ENTRIES_PER_TABLE = 512


class _BitField:
    """A bit range of an integer attribute, readable and writable."""

    def __init__(self, storage: str, shift: int, width: int) -> None:
        self._storage = storage
        self._shift = shift
        self._mask = (1 << width) - 1

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        return (getattr(obj, self._storage) >> self._shift) & self._mask

    def __set__(self, obj, value) -> None:
        raw = getattr(obj, self._storage)
        raw &= ~(self._mask << self._shift)
        raw |= (int(value) & self._mask) << self._shift
        setattr(obj, self._storage, raw)


_LEVEL_FIELDS = {0: "offset", 1: "page", 2: "dir", 3: "pdp", 4: "pml4"}


@dataclass
class LinearAddress4Level:
    """A virtual address split into the indices of the four paging levels."""

    value: int = 0

    offset = _BitField("value", 0, 12)
    page = _BitField("value", 12, 9)
    dir = _BitField("value", 21, 9)
    pdp = _BitField("value", 30, 9)
    pml4 = _BitField("value", 39, 9)

    def part(self, page_map_level: int) -> int:
        """Index for the given level (0 is the page offset); 0 for unknown levels."""
        name = _LEVEL_FIELDS.get(page_map_level)
        return getattr(self, name) if name else 0

    def set_part(self, page_map_level: int, value: int) -> None:
        """Set the index for the given level; unknown levels are ignored."""
        name = _LEVEL_FIELDS.get(page_map_level)
        if name:
            setattr(self, name, value)


@dataclass
class PageMapEntry:
    """One 64-bit entry of a page map table."""

    data: int = 0

    present = _BitField("data", 0, 1)
    writable = _BitField("data", 1, 1)
    user = _BitField("data", 2, 1)
    write_through = _BitField("data", 3, 1)
    cache_disable = _BitField("data", 4, 1)
    accessed = _BitField("data", 5, 1)
    dirty = _BitField("data", 6, 1)
    huge_page = _BitField("data", 7, 1)
    global_ = _BitField("data", 8, 1)
    addr = _BitField("data", 12, 40)

    def pointer(self) -> int:
        """Physical address of the next-level table."""
        return self.addr << 12

    def set_pointer(self, address: int) -> None:
        """Point the entry at the table at address (low 12 bits dropped)."""
        self.addr = address >> 12


def identity_page_directories(count: int = PAGE_DIRECTORY_COUNT) -> List[List[int]]:
    """Page directory entries mapping the first count GiB with 2 MiB pages."""
    return [
        [
            (i_pdpt * PAGE_SIZE_1G + i_pd * PAGE_SIZE_2M) | 0x083
            for i_pd in range(ENTRIES_PER_TABLE)
        ]
        for i_pdpt in range(count)
    ]