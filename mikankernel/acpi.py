"""ACPI table parsing (RSDP, XSDT, FADT) and the PM timer busy wait."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from typing import Callable, Tuple, Union

_log = logging.getLogger(__name__)

PM_TIMER_FREQ = 3579545

_RSDP_FORMAT = struct.Struct("<8sB6sBIIQB3s")
_HEADER_FORMAT = struct.Struct("<4sIBB6s8sIII")
HEADER_SIZE = _HEADER_FORMAT.size
_FADT_PM_TMR_BLK_OFFSET = 76
_FADT_FLAGS_OFFSET = 112
_FADT_MIN_SIZE = _FADT_FLAGS_OFFSET + 4

Buffer = Union[bytes, bytearray, memoryview]


class AcpiError(Exception):
    """A required ACPI table is missing or invalid."""


def sum_bytes(data: Buffer) -> int:
    """Sum of the bytes modulo 256."""
    return sum(bytes(data)) & 0xFF


@dataclass(frozen=True)
class RSDP:
    """Root System Description Pointer."""

    signature: bytes
    checksum: int
    oem_id: bytes
    revision: int
    rsdt_address: int
    length: int
    xsdt_address: int
    extended_checksum: int
    reserved: bytes
    raw: bytes = field(repr=False)

    @classmethod
    def from_bytes(cls, data: Buffer) -> RSDP:
        """Parse the 36-byte RSDP structure."""
        if len(data) < _RSDP_FORMAT.size:
            raise ValueError(f"RSDP needs {_RSDP_FORMAT.size} bytes, got {len(data)}")
        raw = bytes(data[: _RSDP_FORMAT.size])
        return cls(*_RSDP_FORMAT.unpack(raw), raw=raw)

    def is_valid(self) -> bool:
        """Check signature, revision 2 and both checksums."""
        if self.signature != b"RSD PTR ":
            _log.debug("invalid signature: %r", self.signature)
            return False
        if self.revision != 2:
            _log.debug("ACPI revision must be 2: %d", self.revision)
            return False
        if (s := sum_bytes(self.raw[:20])) != 0:
            _log.debug("sum of 20 bytes must be 0: %d", s)
            return False
        if (s := sum_bytes(self.raw[:36])) != 0:
            _log.debug("sum of 36 bytes must be 0: %d", s)
            return False
        return True


@dataclass(frozen=True)
class DescriptionHeader:
    """The header common to all system description tables."""

    signature: bytes
    length: int
    revision: int
    checksum: int
    oem_id: bytes
    oem_table_id: bytes
    oem_revision: int
    creator_id: int
    creator_revision: int
    raw: bytes = field(repr=False)

    @classmethod
    def from_bytes(cls, data: Buffer) -> DescriptionHeader:
        """Parse a header; data must hold the whole table of `length` bytes."""
        if len(data) < HEADER_SIZE:
            raise ValueError(f"table header needs {HEADER_SIZE} bytes, got {len(data)}")
        fields = _HEADER_FORMAT.unpack_from(data)
        length = fields[1]
        if len(data) < length:
            raise ValueError(f"table claims {length} bytes, only {len(data)} available")
        return cls(*fields, raw=bytes(data[:length]))

    def is_valid(self, expected_signature: Union[str, bytes]) -> bool:
        """Check the signature and that the table's bytes sum to zero."""
        if isinstance(expected_signature, str):
            expected_signature = expected_signature.encode("ascii")
        if self.signature != expected_signature[:4]:
            _log.debug("invalid signature: %r", self.signature)
            return False
        if (s := sum_bytes(self.raw)) != 0:
            _log.debug("sum of %u bytes must be 0: %d", self.length, s)
            return False
        return True


@dataclass(frozen=True)
class XSDT:
    """Extended System Description Table: a list of table addresses."""

    header: DescriptionHeader
    entries: Tuple[int, ...]

    @classmethod
    def from_bytes(cls, data: Buffer) -> XSDT:
        """Parse the XSDT and its 64-bit entry addresses."""
        header = DescriptionHeader.from_bytes(data)
        count = max(header.length - HEADER_SIZE, 0) // 8
        entries = struct.unpack_from(f"<{count}Q", data, HEADER_SIZE)
        return cls(header, tuple(entries))

    def count(self) -> int:
        """Number of table addresses."""
        return len(self.entries)

    def __getitem__(self, index: int) -> int:
        return self.entries[index]


@dataclass(frozen=True)
class FADT:
    """Fixed ACPI Description Table (the fields this kernel uses)."""

    header: DescriptionHeader
    pm_tmr_blk: int
    flags: int

    @classmethod
    def from_bytes(cls, data: Buffer) -> FADT:
        """Parse a FADT."""
        header = DescriptionHeader.from_bytes(data)
        if len(data) < _FADT_MIN_SIZE:
            raise ValueError(f"FADT needs at least {_FADT_MIN_SIZE} bytes, got {len(data)}")
        (pm_tmr_blk,) = struct.unpack_from("<I", data, _FADT_PM_TMR_BLK_OFFSET)
        (flags,) = struct.unpack_from("<I", data, _FADT_FLAGS_OFFSET)
        return cls(header, pm_tmr_blk, flags)

    @property
    def pm_timer_32(self) -> bool:
        """Whether the PM timer counter is 32 bits wide (else 24)."""
        return bool((self.flags >> 8) & 1)


def find_fadt(memory: Buffer, rsdp_address: int) -> FADT:
    """Follow RSDP -> XSDT in memory (indexed by physical address) to the FADT."""
    view = memoryview(memory)
    try:
        rsdp = RSDP.from_bytes(view[rsdp_address:])
    except ValueError as exc:
        raise AcpiError("RSDP is not valid") from exc
    if not rsdp.is_valid():
        raise AcpiError("RSDP is not valid")

    try:
        xsdt = XSDT.from_bytes(view[rsdp.xsdt_address :])
    except (ValueError, struct.error) as exc:
        raise AcpiError("XSDT is not valid") from exc
    if not xsdt.header.is_valid("XSDT"):
        raise AcpiError("XSDT is not valid")

    for address in xsdt.entries:
        try:
            entry = DescriptionHeader.from_bytes(view[address:])
        except ValueError:
            continue
        if entry.is_valid("FACP"):
            try:
                return FADT.from_bytes(view[address:])
            except ValueError as exc:
                raise AcpiError("FADT is truncated") from exc
    raise AcpiError("FADT is not found")


def pm_timer_deadline(start: int, msec: int, pm_timer_32: bool) -> int:
    """PM timer count at which msec milliseconds after start have passed."""
    end = (start + PM_TIMER_FREQ * msec // 1000) & 0xFFFFFFFF
    if not pm_timer_32:
        end &= 0x00FFFFFF
    return end


def wait_milliseconds(fadt: FADT, read_timer: Callable[[int], int], msec: int) -> None:
    """Busy-wait msec milliseconds; read_timer(port) returns the PM timer count."""
    start = read_timer(fadt.pm_tmr_blk)
    end = pm_timer_deadline(start, msec, fadt.pm_timer_32)
    if end < start:
        while read_timer(fadt.pm_tmr_blk) >= start:
            pass
    while read_timer(fadt.pm_tmr_blk) < end:
        pass