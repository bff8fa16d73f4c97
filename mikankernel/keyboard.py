"""Translation of USB HID keyboard reports into key-push events."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag

_KEYPAD_AND_TAIL = (
    "\0" * 8
    + "\0" * 8
    + "\0" * 8
    + "\0\0\0\0/*-+"
    + "\n1234567"
    + "890.\\\0\0="
)

_KEYCODE_MAP = (
    "\0\0\0\0abcd"
    "efghijkl"
    "mnopqrst"
    "uvwxyz12"
    "34567890"
    "\n\b\b\t -=["
    "]\\#;'`,."
    "/\0\0\0\0\0\0\0"
) + _KEYPAD_AND_TAIL

_KEYCODE_MAP_SHIFTED = (
    "\0\0\0\0ABCD"
    "EFGHIJKL"
    "MNOPQRST"
    "UVWXYZ!@"
    "#$%^&*()"
    "\n\b\b\t _+{"
    "}|~:\"~<>"
    "?\0\0\0\0\0\0\0"
) + _KEYPAD_AND_TAIL

_TABLE_SIZE = 256


class Modifier(IntFlag):
    """Bits of the HID keyboard modifier byte."""

    L_CONTROL = 0b00000001
    L_SHIFT = 0b00000010
    L_ALT = 0b00000100
    L_GUI = 0b00001000
    R_CONTROL = 0b00010000
    R_SHIFT = 0b00100000
    R_ALT = 0b01000000
    R_GUI = 0b10000000


@dataclass(frozen=True)
class KeyPush:
    """A key press with its ASCII character ("\\0" when it has none)."""

    modifier: int
    keycode: int
    ascii: str


def keycode_to_ascii(modifier: int, keycode: int) -> str:
    """Map a HID keycode to its character, honouring either shift key."""
    if not 0 <= keycode < _TABLE_SIZE:
        raise ValueError(f"keycode must be in 0..255, got {keycode}")
    shift = (modifier & (Modifier.L_SHIFT | Modifier.R_SHIFT)) != 0
    table = _KEYCODE_MAP_SHIFTED if shift else _KEYCODE_MAP
    return table[keycode] if keycode < len(table) else "\0"


def make_key_push(modifier: int, keycode: int) -> KeyPush:
    """Build the key-push event for a keyboard report."""
    return KeyPush(modifier, keycode, keycode_to_ascii(modifier, keycode))