"""
Raw console input.

This package reads single key presses from the terminal without line
buffering or echo, on both POSIX terminals (termios) and the Windows console
(console mode flags + the C runtime's _getwch).

Main classes:
- ConsoleInput: The driver. Selects a backend and guarantees the terminal
  mode is restored.
- KeySentinel: Non-character read outcomes (no key, invalid key, end of input)
"""

from .driver import ConsoleInput, select_backend
from .errors import ConsoleError
from .keys import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    Key,
    KeySentinel,
    describe_key,
    extended_key,
    is_extended_key,
    key_code,
)

__all__ = [
    "ConsoleInput",
    "ConsoleError",
    "select_backend",
    "Key",
    "KeySentinel",
    "describe_key",
    "extended_key",
    "is_extended_key",
    "key_code",
    "ARROW_UP",
    "ARROW_DOWN",
    "ARROW_LEFT",
    "ARROW_RIGHT",
]
