"""
Key values returned by the console driver.

A read produces either a single character (a one-character str with a code
point in 0x0000-0xFFFF) or one of the KeySentinel members. Sentinels are
enum members, so they never compare equal to a character and callers can
match on plain strings without special-casing them:

    key = console.read_and_reset(True)
    if key in ("w", "W"):
        ...
    elif key is KeySentinel.END_OF_INPUT:
        ...
"""

from enum import Enum
from typing import Union

from .constants import (
    END_OF_INPUT_CODE,
    EXTENDED_KEY_BASE,
    EXTENDED_KEY_MAX_SCAN,
    INVALID_KEY_CODE,
    MAX_KEY_CODE,
    NO_KEY_CODE,
    SCAN_DOWN,
    SCAN_LEFT,
    SCAN_RIGHT,
    SCAN_UP,
)


class KeySentinel(Enum):
    """Non-character outcomes of a read."""

    NO_KEY = NO_KEY_CODE
    INVALID_KEY = INVALID_KEY_CODE
    END_OF_INPUT = END_OF_INPUT_CODE

    @property
    def code(self) -> int:
        """The numeric code traditionally used for this outcome."""
        return self.value


Key = Union[str, KeySentinel]


def key_from_code(code: int) -> Key:
    """
    Turn a decoded code point into a Key.

    Code points outside 0x0000-0xFFFF can't be represented as a single key
    and become INVALID_KEY.
    """
    if 0 <= code <= MAX_KEY_CODE:
        return chr(code)
    return KeySentinel.INVALID_KEY


def extended_key(scan_code: int) -> Key:
    """
    Build the key for a Windows function/arrow key scan code.

    The scan code is folded into the private use area at 0xE000. Scan codes
    beyond 0x18FF would leave the private use area and are invalid.
    """
    if 0 <= scan_code <= EXTENDED_KEY_MAX_SCAN:
        return chr(EXTENDED_KEY_BASE + scan_code)
    return KeySentinel.INVALID_KEY


def is_extended_key(key: Key) -> bool:
    """Check whether a key was produced by extended_key()."""
    if isinstance(key, KeySentinel):
        return False
    return EXTENDED_KEY_BASE <= ord(key) <= EXTENDED_KEY_BASE + EXTENDED_KEY_MAX_SCAN


def key_code(key: Key) -> int:
    """Numeric code of a key or sentinel."""
    if isinstance(key, KeySentinel):
        return key.code
    return ord(key)


ARROW_UP = extended_key(SCAN_UP)
ARROW_DOWN = extended_key(SCAN_DOWN)
ARROW_LEFT = extended_key(SCAN_LEFT)
ARROW_RIGHT = extended_key(SCAN_RIGHT)

_ARROW_NAMES = {
    ARROW_UP: "Up",
    ARROW_DOWN: "Down",
    ARROW_LEFT: "Left",
    ARROW_RIGHT: "Right",
}


def describe_key(key: Key) -> str:
    """Human readable description, used by the `keys` diagnostic command."""
    if isinstance(key, KeySentinel):
        return f"{key.name} ({key.code})"
    code = ord(key)
    if key in _ARROW_NAMES:
        return f"{_ARROW_NAMES[key]} arrow (0x{code:04X})"
    if is_extended_key(key):
        return f"extended scan 0x{code - EXTENDED_KEY_BASE:02X} (0x{code:04X})"
    if key.isprintable():
        return f"{key!r} (0x{code:04X})"
    return f"control (0x{code:04X})"
