"""
Raw console input driver.

ConsoleInput is the one object the rest of the program talks to. It picks a
backend when it is created, tracks whether the terminal mode is currently
altered, and makes sure the original mode comes back:

- read_and_reset() restores it after every key
- close() (or leaving the `with` block) restores it on normal shutdown
- an atexit hook restores it if the program exits without closing
- SIGTERM/SIGHUP handlers restore it before the process is killed

Usage:
    with ConsoleInput() as console:
        while True:
            key = console.read_and_reset(wait=True)
            if key == "q" or key is KeySentinel.END_OF_INPUT:
                break
"""

import atexit
import logging
import os
import signal
import sys
import threading
from functools import partial
from typing import BinaryIO, TextIO

from .backend import ConsoleBackend, StreamBackend
from .decoder import CharDecoder
from .errors import ConsoleError
from .keys import Key

logger = logging.getLogger(__name__)

# Signals that would otherwise kill us without running atexit handlers
RESTORE_ON_SIGNALS = ("SIGTERM", "SIGHUP")


def _fileno(stream: TextIO | BinaryIO) -> int | None:
    """Get a stream's file descriptor, or None if it doesn't have one."""
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def select_backend(stream: TextIO | BinaryIO, decoder: CharDecoder | None = None) -> ConsoleBackend:
    """
    Pick the backend for a stream.

    Platform is decided by os.name, interactivity by asking the platform
    whether the stream is a terminal:
    - POSIX: isatty(fd)
    - Windows: GetConsoleMode succeeds on the fd's OS handle

    Streams without a file descriptor (io.BytesIO, test runners) are read
    directly through their binary buffer.

    Raises:
        ConsoleError: If the stream is a terminal but its mode can't be read.
    """
    fd = _fileno(stream)
    if fd is None:
        source = getattr(stream, "buffer", stream)
        return StreamBackend(source.read, decoder)

    if os.name == "nt":
        from .windows import WindowsConsoleBackend

        backend = WindowsConsoleBackend.probe(fd)
        if backend is not None:
            return backend
    elif os.isatty(fd):
        from .posix import PosixTerminalBackend

        return PosixTerminalBackend(fd, decoder)

    return StreamBackend(partial(os.read, fd), decoder)


class ConsoleInput:
    """
    Reads single key presses from the terminal without echo.

    The terminal mode is only changed while a read is in progress (and, on
    POSIX, kept echo-free until the next reset). Whether it is currently
    altered is tracked in mode_altered; reset_console_mode() puts the
    original mode back and is safe to call any number of times.

    When stdin is not a terminal, reads just decode bytes from the stream
    and no mode is ever touched.
    """

    def __init__(
        self,
        stream: TextIO | BinaryIO | None = None,
        backend: ConsoleBackend | None = None,
        install_signal_handlers: bool = True,
    ):
        """
        Open the console for raw input.

        Args:
            stream: Input stream (default: sys.stdin). Ignored if backend
                    is given.
            backend: Use this backend instead of selecting one.
            install_signal_handlers: Restore the terminal on SIGTERM/SIGHUP
                    (POSIX, main thread only).

        Raises:
            ConsoleError: If stdin is a terminal but its mode can't be read.
        """
        if backend is None:
            backend = select_backend(stream if stream is not None else sys.stdin)
        self._backend = backend
        self._mode_altered = False
        self._closed = False
        self._previous_handlers: dict[int, object] = {}

        if self._backend.interactive:
            # Register cleanup handler in case of unexpected exit
            atexit.register(self._cleanup)
            if install_signal_handlers:
                self._install_signal_handlers()

        logger.info(f"Console input opened ({self._backend.name} backend)")

    @property
    def backend(self) -> ConsoleBackend:
        """The backend selected at startup."""
        return self._backend

    @property
    def interactive(self) -> bool:
        """Whether input comes from an interactive terminal."""
        return self._backend.interactive

    @property
    def mode_altered(self) -> bool:
        """Check if the terminal is currently not in its original mode."""
        return self._mode_altered

    def read(self, wait: bool) -> Key:
        """
        Read one key without echo.

        The terminal is left in a partially altered mode afterwards; call
        reset_console_mode() (or use read_and_reset()) when done.

        Args:
            wait: True to block until a key is available, False to return
                  KeySentinel.NO_KEY immediately if none is.

        Returns:
            A one-character str (code point 0x0000-0xFFFF) or a KeySentinel.

        Raises:
            ConsoleError: If the console input is closed or the terminal
                mode can't be changed.
        """
        if self._closed:
            # The exit hooks are gone, nothing would restore the mode
            raise ConsoleError("console input is closed")
        if self._backend.interactive:
            # Set before switching, so a failed switch is still undone at exit
            self._mode_altered = True
        return self._backend.read(wait)

    def read_and_reset(self, wait: bool) -> Key:
        """Read one key, then restore the original terminal mode."""
        try:
            return self.read(wait)
        finally:
            self.reset_console_mode()

    def reset_console_mode(self) -> None:
        """
        Restore the original terminal mode.

        On POSIX this switches echo and canonical input back on; on Windows
        it re-enables Ctrl+C processing. Does nothing if the mode isn't
        altered.

        Raises:
            ConsoleError: If the terminal mode can't be changed.
        """
        if not self._mode_altered:
            return
        self._backend.restore()
        self._mode_altered = False

    def close(self) -> None:
        """
        Restore the terminal and remove the exit hooks.

        The context manager calls this automatically. Reading after
        closing raises ConsoleError.
        """
        if self._closed:
            return
        self.reset_console_mode()
        if self._backend.interactive:
            atexit.unregister(self._cleanup)
            self._restore_signal_handlers()
        self._closed = True
        logger.info("Console input closed")

    def _cleanup(self) -> None:
        """Cleanup handler for atexit - restores terminal mode."""
        self.reset_console_mode()

    def _install_signal_handlers(self) -> None:
        if os.name == "nt":
            return
        # signal.signal() only works in the main thread
        if threading.current_thread() is not threading.main_thread():
            return
        for name in RESTORE_ON_SIGNALS:
            signum = getattr(signal, name, None)
            if signum is None:
                continue
            # Don't take over handlers the application installed itself
            if signal.getsignal(signum) is not signal.SIG_DFL:
                continue
            self._previous_handlers[signum] = signal.signal(signum, self._handle_signal)

    def _restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()

    def _handle_signal(self, signum: int, frame) -> None:
        """Restore the terminal, then let the signal kill us as it would have."""
        logger.warning(f"Received signal {signum}, restoring terminal mode")
        self.reset_console_mode()
        self._restore_signal_handlers()
        os.kill(os.getpid(), signum)

    def __enter__(self) -> "ConsoleInput":
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context manager - restore terminal mode."""
        self.close()
