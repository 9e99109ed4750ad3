"""
Base class for console input backends.

A backend owns the platform-specific half of the driver: how to switch the
terminal into raw mode, how to read one key, and how to put the original
mode back. Exactly one backend is selected when the driver starts:

- StreamBackend: stdin is a file or pipe, no mode switching at all
- PosixTerminalBackend: stdin is a tty, termios based (posix.py)
- WindowsConsoleBackend: stdin is a Windows console (windows.py)
"""

import logging
from abc import ABC, abstractmethod

from .decoder import ByteReader, CharDecoder
from .keys import Key

logger = logging.getLogger(__name__)


class ConsoleBackend(ABC):
    """
    Base class for all console input backends.

    Subclasses must implement:
    - name: Human-readable backend name
    - read(): Read one key, switching to raw mode as needed
    - restore(): Put the terminal back into its original mode

    The driver (ConsoleInput) decides when restore() is needed; backends
    don't track whether they altered the mode.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable backend name for logging."""
        pass

    @property
    def interactive(self) -> bool:
        """Whether this backend talks to a real terminal and changes its mode."""
        return True

    @abstractmethod
    def read(self, wait: bool) -> Key:
        """
        Read one key.

        Args:
            wait: True to block until a key is available, False to return
                  NO_KEY immediately if nothing is pending.

        Returns:
            A character, or a KeySentinel.

        Raises:
            ConsoleError: If the terminal mode can't be changed.
        """
        pass

    @abstractmethod
    def restore(self) -> None:
        """
        Restore the terminal mode captured when the backend was created.

        Raises:
            ConsoleError: If the terminal mode can't be changed.
        """
        pass


class StreamBackend(ConsoleBackend):
    """
    Backend for input that isn't an interactive terminal.

    When stdin is redirected from a file or a pipe there is no terminal mode
    to change; we just decode bytes as they come. The wait flag is ignored
    because a pipe has no notion of "a key is pending".

    Usage:
        backend = StreamBackend(io.BytesIO(b"wasd").read)
        backend.read(True)  # 'w'
    """

    def __init__(self, read: ByteReader, decoder: CharDecoder | None = None):
        """
        Create a stream backend.

        Args:
            read: Byte source; called with 1, returns b"" at end of input.
            decoder: Character decoder. A new one is created if not given.
        """
        self._read = read
        self._decoder = decoder if decoder is not None else CharDecoder()

    @property
    def name(self) -> str:
        return "stream"

    @property
    def interactive(self) -> bool:
        return False

    def read(self, wait: bool) -> Key:
        return self._decoder.read_char(self._read)

    def restore(self) -> None:
        pass
