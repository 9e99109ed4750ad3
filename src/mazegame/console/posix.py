"""
POSIX terminal backend.

Reading single keys on Linux/macOS means taking the terminal out of its
default "canonical" mode:
- Canonical mode buffers input until Enter; we want each key immediately
- Echo prints typed keys; the maze would get scribbled over
- ISIG turns Ctrl+C into SIGINT; we want the key instead

We only hold the terminal fully raw for the duration of one read. Between
reads it sits in an intermediate mode: canonical processing is back on, but
echo stays off so keys typed while the maze redraws don't show up on screen.
"""

import copy
import logging
import os
import select
import termios
from functools import partial

from .backend import ConsoleBackend
from .constants import TC_CC, TC_LFLAG
from .decoder import CharDecoder
from .errors import ConsoleError
from .keys import Key, KeySentinel

logger = logging.getLogger(__name__)

# Local mode flags cleared for raw reads
RAW_CLEARED_LFLAGS = termios.ICANON | termios.ECHO | termios.ECHONL | termios.ISIG


def raw_attributes(attrs: list) -> list:
    """
    Derive raw mode from a tcgetattr() attribute list.

    Only the local flags and VMIN/VTIME change:
    - Input flags: unchanged
    - Output flags: keep OPOST so "\\n" still returns to column 0
    - Control flags: unchanged
    - Local flags: clear ICANON, ECHO, ECHONL and ISIG
    - VMIN=1, VTIME=0: read() returns as soon as one byte is there
    """
    raw = copy.deepcopy(attrs)
    raw[TC_LFLAG] &= ~RAW_CLEARED_LFLAGS
    raw[TC_CC][termios.VMIN] = 1
    raw[TC_CC][termios.VTIME] = 0
    return raw


def intermediate_attributes(raw: list) -> list:
    """Derive the between-reads mode: raw mode with canonical input back on."""
    intermediate = copy.deepcopy(raw)
    intermediate[TC_LFLAG] |= termios.ICANON
    return intermediate


class PosixTerminalBackend(ConsoleBackend):
    """
    termios based backend for a terminal file descriptor.

    The original attributes are captured once, in the constructor. Raw and
    intermediate modes are derived from them and never change afterwards.

    Usage:
        backend = PosixTerminalBackend(sys.stdin.fileno())
        key = backend.read(wait=True)   # terminal left in intermediate mode
        backend.restore()               # back to the original mode
    """

    def __init__(self, fd: int, decoder: CharDecoder | None = None):
        """
        Capture the terminal's current mode.

        Args:
            fd: File descriptor of the terminal (normally stdin)
            decoder: Character decoder. A new one is created if not given.

        Raises:
            ConsoleError: If the terminal attributes can't be read.
        """
        self._fd = fd
        self._decoder = decoder if decoder is not None else CharDecoder()

        try:
            self._original_attrs = termios.tcgetattr(fd)
        except termios.error as e:
            raise ConsoleError(f"Failed to read terminal attributes of fd {fd}: {e}") from e

        self._raw_attrs = raw_attributes(self._original_attrs)
        self._intermediate_attrs = intermediate_attributes(self._raw_attrs)
        self._read_bytes = partial(os.read, fd)

        logger.debug(
            f"Captured terminal mode of fd {fd}: "
            f"lflag=0x{self._original_attrs[TC_LFLAG]:x}"
        )

    @property
    def name(self) -> str:
        return "posix"

    @property
    def fd(self) -> int:
        """Get the file descriptor for use with select()."""
        return self._fd

    @property
    def original_attributes(self) -> list:
        """A copy of the attributes captured at startup."""
        return copy.deepcopy(self._original_attrs)

    def read(self, wait: bool) -> Key:
        self._set_attributes(self._raw_attrs)
        try:
            if not wait and not self.has_input():
                return KeySentinel.NO_KEY
            return self._decoder.read_char(self._read_bytes)
        finally:
            # Leave echo off until the caller resets the mode
            self._set_attributes(self._intermediate_attrs)

    def has_input(self, timeout: float = 0.0) -> bool:
        """
        Check if a byte can be read without blocking.

        Args:
            timeout: Seconds to wait. 0 polls and returns immediately.
        """
        ready, _, _ = select.select([self._fd], [], [], timeout)
        return bool(ready)

    def restore(self) -> None:
        # TCSADRAIN waits for output to drain before applying
        self._set_attributes(self._original_attrs, termios.TCSADRAIN)
        logger.debug(f"Restored original terminal mode of fd {self._fd}")

    def _set_attributes(self, attrs: list, when: int = termios.TCSANOW) -> None:
        try:
            termios.tcsetattr(self._fd, when, attrs)
        except termios.error as e:
            raise ConsoleError(f"Failed to set terminal attributes of fd {self._fd}: {e}") from e
