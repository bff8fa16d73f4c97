"""PCI configuration space access, bus enumeration, BARs and MSI set-up."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Mapping, Optional

CONFIG_ADDRESS = 0x0CF8
CONFIG_DATA = 0x0CFC

CAPABILITY_MSI = 0x05
CAPABILITY_MSIX = 0x11

MAX_DEVICES = 32
_ABSENT_VENDOR = 0xFFFF


class PciError(Exception):
    """A PCI operation failed."""


class DeviceTableFullError(PciError):
    """More devices were found than the device table holds."""


class NoPciMsiError(PciError):
    """The device has neither an MSI nor an MSI-X capability."""


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
        setattr(obj, self._storage, raw & 0xFFFFFFFF)


@dataclass(frozen=True)
class ClassCode:
    """Base class, sub class and programming interface of a function."""

    base: int
    sub: int
    interface: int

    def match(
        self, base: int, sub: Optional[int] = None, interface: Optional[int] = None
    ) -> bool:
        """True when the given parts (base, then sub, then interface) all match."""
        if base != self.base:
            return False
        if sub is not None and sub != self.sub:
            return False
        if interface is not None and interface != self.interface:
            return False
        return True


@dataclass(frozen=True)
class Device:
    """A PCI function located by bus, device and function number."""

    bus: int
    device: int
    function: int
    header_type: int
    class_code: ClassCode


class ConfigSpace:
    """Configuration registers reached through CONFIG_ADDRESS / CONFIG_DATA.

    This implementation keeps the registers in memory, keyed by the
    CONFIG_ADDRESS value; registers never written read as all ones, as
    an absent function does.
    """

    def __init__(self, registers: Optional[Mapping[int, int]] = None) -> None:
        self._registers: Dict[int, int] = dict(registers or {})

    def read(self, address: int) -> int:
        """Read the 32-bit register selected by address."""
        return self._registers.get(address, 0xFFFFFFFF)

    def write(self, address: int, value: int) -> None:
        """Write a 32-bit value to the register selected by address."""
        self._registers[address] = value & 0xFFFFFFFF


def make_address(bus: int, device: int, function: int, reg_addr: int) -> int:
    """Build the CONFIG_ADDRESS value for a register of a function."""
    return (
        (1 << 31)
        | ((bus & 0xFF) << 16)
        | ((device & 0xFF) << 11)
        | ((function & 0xFF) << 8)
        | (reg_addr & 0xFC)
    )


def is_single_function_device(header_type: int) -> bool:
    """True when the header type says the device has a single function."""
    return (header_type & 0x80) == 0


def calc_bar_address(bar_index: int) -> int:
    """Configuration space offset of base address register bar_index."""
    return (0x10 + 4 * bar_index) & 0xFF


@dataclass
class CapabilityHeader:
    """The common first dword of a capability structure."""

    data: int = 0

    cap_id = _BitField("data", 0, 8)
    next_ptr = _BitField("data", 8, 8)
    cap = _BitField("data", 16, 16)


@dataclass
class MSICapability:
    """An MSI capability structure, sized for its largest variant."""

    header: int = 0
    msg_addr: int = 0
    msg_upper_addr: int = 0
    msg_data: int = 0
    mask_bits: int = 0
    pending_bits: int = 0

    cap_id = _BitField("header", 0, 8)
    next_ptr = _BitField("header", 8, 8)
    msi_enable = _BitField("header", 16, 1)
    multi_msg_capable = _BitField("header", 17, 3)
    multi_msg_enable = _BitField("header", 20, 3)
    addr_64_capable = _BitField("header", 23, 1)
    per_vector_mask_capable = _BitField("header", 24, 1)


class MSITriggerMode(IntEnum):
    """Interrupt trigger mode of an MSI message."""

    EDGE = 0
    LEVEL = 1


class MSIDeliveryMode(IntEnum):
    """Delivery mode of an MSI message."""

    FIXED = 0b000
    LOWEST_PRIORITY = 0b001
    SMI = 0b010
    NMI = 0b100
    INIT = 0b101
    EXT_INT = 0b111


@dataclass
class PciBus:
    """Reads and writes configuration registers and enumerates devices."""

    config_space: ConfigSpace
    devices: List[Device] = field(default_factory=list)

    def read_vendor_id(self, bus: int, device: int, function: int) -> int:
        """Vendor id of a function; 0xffff when it is absent."""
        return self._read(bus, device, function, 0x00) & 0xFFFF

    def read_device_id(self, bus: int, device: int, function: int) -> int:
        """Device id of a function."""
        return self._read(bus, device, function, 0x00) >> 16

    def read_header_type(self, bus: int, device: int, function: int) -> int:
        """Header type register of a function."""
        return (self._read(bus, device, function, 0x0C) >> 16) & 0xFF

    def read_class_code(self, bus: int, device: int, function: int) -> ClassCode:
        """Class code register of a function."""
        reg = self._read(bus, device, function, 0x08)
        return ClassCode((reg >> 24) & 0xFF, (reg >> 16) & 0xFF, (reg >> 8) & 0xFF)

    def read_bus_numbers(self, bus: int, device: int, function: int) -> int:
        """Bus number register of a bridge (header type 1)."""
        return self._read(bus, device, function, 0x18)

    def read_conf_reg(self, dev: Device, reg_addr: int) -> int:
        """Read a 32-bit configuration register of dev."""
        return self._read(dev.bus, dev.device, dev.function, reg_addr)

    def write_conf_reg(self, dev: Device, reg_addr: int, value: int) -> None:
        """Write a 32-bit configuration register of dev."""
        self.config_space.write(
            make_address(dev.bus, dev.device, dev.function, reg_addr), value
        )

    def _read(self, bus: int, device: int, function: int, reg_addr: int) -> int:
        return self.config_space.read(make_address(bus, device, function, reg_addr))

    def scan_all_bus(self) -> List[Device]:
        """Enumerate every function reachable from bus 0 and return them."""
        self.devices = []
        if is_single_function_device(self.read_header_type(0, 0, 0)):
            self._scan_bus(0)
            return self.devices
        for function in range(8):
            if self.read_vendor_id(0, 0, function) == _ABSENT_VENDOR:
                continue
            self._scan_bus(function)
        return self.devices

    def _add_device(self, device: Device) -> None:
        if len(self.devices) >= MAX_DEVICES:
            raise DeviceTableFullError(f"more than {MAX_DEVICES} PCI devices found")
        self.devices.append(device)

    def _scan_function(self, bus: int, device: int, function: int) -> None:
        class_code = self.read_class_code(bus, device, function)
        header_type = self.read_header_type(bus, device, function)
        self._add_device(Device(bus, device, function, header_type, class_code))
        if class_code.match(0x06, 0x04):
            secondary_bus = (self.read_bus_numbers(bus, device, function) >> 8) & 0xFF
            self._scan_bus(secondary_bus)

    def _scan_device(self, bus: int, device: int) -> None:
        self._scan_function(bus, device, 0)
        if is_single_function_device(self.read_header_type(bus, device, 0)):
            return
        for function in range(1, 8):
            if self.read_vendor_id(bus, device, function) == _ABSENT_VENDOR:
                continue
            self._scan_function(bus, device, function)

    def _scan_bus(self, bus: int) -> None:
        for device in range(32):
            if self.read_vendor_id(bus, device, 0) == _ABSENT_VENDOR:
                continue
            self._scan_device(bus, device)

    def read_bar(self, dev: Device, bar_index: int) -> int:
        """Value of base address register bar_index, joined with the next for 64-bit BARs."""
        if not 0 <= bar_index < 6:
            raise IndexError(f"BAR index must be in 0..5, got {bar_index}")
        addr = calc_bar_address(bar_index)
        bar = self.read_conf_reg(dev, addr)
        if (bar & 4) == 0:
            return bar
        if bar_index >= 5:
            raise IndexError("a 64-bit BAR cannot start at index 5")
        upper = self.read_conf_reg(dev, addr + 4)
        return bar | (upper << 32)

    def read_capability_header(self, dev: Device, addr: int) -> CapabilityHeader:
        """The capability header at configuration address addr."""
        return CapabilityHeader(self.read_conf_reg(dev, addr))

    def read_msi_capability(self, dev: Device, cap_addr: int) -> MSICapability:
        """Read the MSI capability structure at cap_addr."""
        msi_cap = MSICapability()
        msi_cap.header = self.read_conf_reg(dev, cap_addr)
        msi_cap.msg_addr = self.read_conf_reg(dev, (cap_addr + 4) & 0xFF)

        msg_data_addr = (cap_addr + 8) & 0xFF
        if msi_cap.addr_64_capable:
            msi_cap.msg_upper_addr = self.read_conf_reg(dev, (cap_addr + 8) & 0xFF)
            msg_data_addr = (cap_addr + 12) & 0xFF

        msi_cap.msg_data = self.read_conf_reg(dev, msg_data_addr)

        if msi_cap.per_vector_mask_capable:
            msi_cap.mask_bits = self.read_conf_reg(dev, (msg_data_addr + 4) & 0xFF)
            msi_cap.pending_bits = self.read_conf_reg(dev, (msg_data_addr + 8) & 0xFF)
        return msi_cap

    def write_msi_capability(
        self, dev: Device, cap_addr: int, msi_cap: MSICapability
    ) -> None:
        """Write an MSI capability structure to cap_addr."""
        self.write_conf_reg(dev, cap_addr, msi_cap.header)
        self.write_conf_reg(dev, (cap_addr + 4) & 0xFF, msi_cap.msg_addr)

        msg_data_addr = (cap_addr + 8) & 0xFF
        if msi_cap.addr_64_capable:
            self.write_conf_reg(dev, (cap_addr + 8) & 0xFF, msi_cap.msg_upper_addr)
            msg_data_addr = (cap_addr + 12) & 0xFF

        self.write_conf_reg(dev, msg_data_addr, msi_cap.msg_data)

        if msi_cap.per_vector_mask_capable:
            self.write_conf_reg(dev, (msg_data_addr + 4) & 0xFF, msi_cap.mask_bits)
            self.write_conf_reg(dev, (msg_data_addr + 8) & 0xFF, msi_cap.pending_bits)

    def _configure_msi_register(
        self,
        dev: Device,
        cap_addr: int,
        msg_addr: int,
        msg_data: int,
        num_vector_exponent: int,
    ) -> None:
        msi_cap = self.read_msi_capability(dev, cap_addr)
        if msi_cap.multi_msg_capable <= num_vector_exponent:
            msi_cap.multi_msg_enable = msi_cap.multi_msg_capable
        else:
            msi_cap.multi_msg_enable = num_vector_exponent
        msi_cap.msi_enable = 1
        msi_cap.msg_addr = msg_addr
        msi_cap.msg_data = msg_data
        self.write_msi_capability(dev, cap_addr, msi_cap)

    def configure_msi(
        self, dev: Device, msg_addr: int, msg_data: int, num_vector_exponent: int
    ) -> None:
        """Enable MSI on dev with the given message address and data.

        num_vector_exponent asks for 2**n vectors.
        """
        cap_addr = self.read_conf_reg(dev, 0x34) & 0xFF
        msi_cap_addr = 0
        msix_cap_addr = 0
        while cap_addr != 0:
            header = self.read_capability_header(dev, cap_addr)
            if header.cap_id == CAPABILITY_MSI:
                msi_cap_addr = cap_addr
            elif header.cap_id == CAPABILITY_MSIX:
                msix_cap_addr = cap_addr
            cap_addr = header.next_ptr

        if msi_cap_addr:
            self._configure_msi_register(
                dev, msi_cap_addr, msg_addr, msg_data, num_vector_exponent
            )
            return
        if msix_cap_addr:
            raise PciError("MSI-X configuration is not supported")
        raise NoPciMsiError(
            f"device {dev.bus}.{dev.device}.{dev.function} has no MSI capability"
        )

    def configure_msi_fixed_destination(
        self,
        dev: Device,
        apic_id: int,
        trigger_mode: MSITriggerMode,
        delivery_mode: MSIDeliveryMode,
        vector: int,
        num_vector_exponent: int,
    ) -> None:
        """Configure MSI to deliver vector to the local APIC apic_id."""
        msg_addr = 0xFEE00000 | ((apic_id & 0xFF) << 12)
        msg_data = (int(delivery_mode) << 8) | (vector & 0xFF)
        if trigger_mode == MSITriggerMode.LEVEL:
            msg_data |= 0xC000
        self.configure_msi(dev, msg_addr, msg_data, num_vector_exponent)