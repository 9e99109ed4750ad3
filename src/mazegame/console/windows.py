"""
Windows console backend.

The Windows console has no termios. Instead, the input handle has a mode
word of ENABLE_* flags (SetConsoleMode), and the C runtime provides
_getwch()/_kbhit() which already read single keys without echo or line
buffering.

The one thing we must change is ENABLE_PROCESSED_INPUT: while it is set
the system turns Ctrl+C into a break signal instead of handing it to us.
"""

import logging
from typing import Any

from .backend import ConsoleBackend
from .bindings import (
    get_last_error,
    handle_from_value,
    handle_value,
    load_kernel32,
    new_mode_pointer,
)
from .constants import (
    CONSOLE_MODE_MASK,
    ENABLE_PROCESSED_INPUT,
    EXTENDED_KEY_PREFIXES,
    INVALID_HANDLE_VALUE,
    STD_INPUT_HANDLE,
)
from .errors import ConsoleError
from .keys import Key, KeySentinel, extended_key, key_from_code

logger = logging.getLogger(__name__)


def get_console_mode(kernel32: Any, handle: Any) -> int:
    """
    Read the mode word of a console handle.

    Raises:
        ConsoleError: If GetConsoleMode() fails.
    """
    mode = new_mode_pointer()
    if not kernel32.GetConsoleMode(handle, mode):
        raise ConsoleError(f"GetConsoleMode() failed: {get_last_error()}")
    return mode[0]


def set_console_mode(kernel32: Any, handle: Any, mode: int) -> None:
    """
    Set the mode word of a console handle.

    Raises:
        ConsoleError: If SetConsoleMode() fails.
    """
    if not kernel32.SetConsoleMode(handle, mode & CONSOLE_MODE_MASK):
        raise ConsoleError(f"SetConsoleMode(0x{mode:x}) failed: {get_last_error()}")


def get_std_input_handle(kernel32: Any) -> Any:
    """
    Get the standard input handle.

    Raises:
        ConsoleError: If there is no usable standard input handle.
    """
    handle = kernel32.GetStdHandle(STD_INPUT_HANDLE)
    value = handle_value(handle)
    if value == 0 or value == INVALID_HANDLE_VALUE:
        raise ConsoleError(f"GetStdHandle(STD_INPUT_HANDLE) failed: {get_last_error()}")
    return handle


def get_fd_handle(crt: Any, fd: int) -> Any:
    """
    Get the OS handle behind a C runtime file descriptor.

    Raises:
        ConsoleError: If fd is not an open descriptor.
    """
    try:
        return handle_from_value(crt.get_osfhandle(fd))
    except OSError as e:
        raise ConsoleError(f"No OS handle for fd {fd}: {e}") from e


class WindowsConsoleBackend(ConsoleBackend):
    """
    Console-mode based backend for a Windows console input handle.

    Unlike the POSIX backend there is no intermediate mode: _getwch() never
    echoes, so the console stays with Ctrl+C processing disabled until the
    driver resets it.

    Usage:
        backend = WindowsConsoleBackend.probe()
        if backend is not None:
            key = backend.read(wait=True)
            backend.restore()
    """

    def __init__(self, handle: Any, original_mode: int, kernel32: Any, crt: Any):
        """
        Create a backend for an already probed console handle.

        Args:
            handle: Console input handle (GetStdHandle or get_osfhandle)
            original_mode: Mode word captured with GetConsoleMode
            kernel32: kernel32 library (cffi) providing SetConsoleMode
            crt: Module providing getwch() and kbhit(), normally msvcrt
        """
        self._handle = handle
        self._original_mode = original_mode
        # Keeping ENABLE_PROCESSED_INPUT off even between _getwch() calls
        # stops Ctrl+C from being swallowed by the system.
        self._raw_mode = original_mode & ~ENABLE_PROCESSED_INPUT
        self._kernel32 = kernel32
        self._crt = crt

    @classmethod
    def probe(
        cls, fd: int | None = None, kernel32: Any = None, crt: Any = None
    ) -> "WindowsConsoleBackend | None":
        """
        Create a backend if a file descriptor refers to a console.

        Keys are always read with getwch(), which reads the process's
        console, so a console fd other than stdin only decides which
        handle's mode is switched.

        Args:
            fd: File descriptor to check. Standard input if not given.
            kernel32: kernel32 library. Loaded with cffi if not given.
            crt: getwch()/kbhit()/get_osfhandle() provider. msvcrt if not given.

        Returns:
            The backend, or None if the input is redirected (no handle, or
            GetConsoleMode fails on it).
        """
        if kernel32 is None:
            kernel32 = load_kernel32()
        if crt is None:
            import msvcrt
            crt = msvcrt

        try:
            if fd is None:
                handle = get_std_input_handle(kernel32)
            else:
                handle = get_fd_handle(crt, fd)
            original_mode = get_console_mode(kernel32, handle)
        except ConsoleError as e:
            logger.info(f"Input is not a console: {e}")
            return None

        logger.debug(f"Captured console mode 0x{original_mode:x}")
        return cls(handle, original_mode, kernel32, crt)

    @property
    def name(self) -> str:
        return "windows"

    @property
    def original_mode(self) -> int:
        """The console mode word captured at startup."""
        return self._original_mode

    def read(self, wait: bool) -> Key:
        set_console_mode(self._kernel32, self._handle, self._raw_mode)

        if not wait and not self._crt.kbhit():
            return KeySentinel.NO_KEY

        code = ord(self._crt.getwch())
        if code in EXTENDED_KEY_PREFIXES:
            # Function or arrow key: the scan code follows
            key = extended_key(ord(self._crt.getwch()))
            if key is KeySentinel.INVALID_KEY:
                logger.warning("Extended key scan code out of range")
            return key
        return key_from_code(code)

    def restore(self) -> None:
        set_console_mode(self._kernel32, self._handle, self._original_mode)
        logger.debug(f"Restored console mode 0x{self._original_mode:x}")
