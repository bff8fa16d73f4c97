import pytest

from mikankernel.keyboard import KeyPush, Modifier, keycode_to_ascii, make_key_push


def test_letter_without_and_with_shift():
    assert keycode_to_ascii(0, 4) == "a"
    assert keycode_to_ascii(Modifier.L_SHIFT, 4) == "A"
    assert keycode_to_ascii(Modifier.R_SHIFT, 4) == "A"


def test_control_does_not_shift():
    assert keycode_to_ascii(Modifier.L_CONTROL, 4) == keycode_to_ascii(0, 4)


def test_shifted_digit():
    assert keycode_to_ascii(0, 30) == "1"
    assert keycode_to_ascii(Modifier.L_SHIFT, 30) == "!"


def test_enter_and_backspace():
    assert keycode_to_ascii(0, 40) == "\n"
    assert keycode_to_ascii(0, 42) == "\b"


def test_keys_without_character_map_to_nul():
    assert keycode_to_ascii(0, 0) == "\0"
    assert keycode_to_ascii(0, 0x51) == "\0"
    assert keycode_to_ascii(Modifier.L_SHIFT, 200) == "\0"


def test_keypad_same_with_and_without_shift():
    for keycode in range(84, 104):
        assert keycode_to_ascii(0, keycode) == keycode_to_ascii(Modifier.R_SHIFT, keycode)


def test_keycode_out_of_range_raises():
    with pytest.raises(ValueError):
        keycode_to_ascii(0, 256)


def test_make_key_push():
    push = make_key_push(Modifier.L_SHIFT, 4)
    assert push == KeyPush(Modifier.L_SHIFT, 4, "A")