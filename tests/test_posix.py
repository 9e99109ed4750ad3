"""
Test the termios backend against a real pseudo-terminal.
"""

import os
import time

import pytest

from conftest import posix_only
from mazegame.console.constants import TC_CC, TC_LFLAG
from mazegame.console.decoder import CharDecoder
from mazegame.console.errors import ConsoleError
from mazegame.console.keys import KeySentinel

pytestmark = posix_only

if os.name != "nt":
    import termios

    from mazegame.console.posix import (
        PosixTerminalBackend,
        intermediate_attributes,
        raw_attributes,
    )


class TestDerivedModes:
    """Raw and intermediate modes computed from the original attributes."""

    def test_raw_clears_canonical_echo_and_signals(self, pty_pair):
        _, slave = pty_pair
        original = termios.tcgetattr(slave)
        raw = raw_attributes(original)

        for flag in (termios.ICANON, termios.ECHO, termios.ECHONL, termios.ISIG):
            assert not raw[TC_LFLAG] & flag
        assert raw[TC_CC][termios.VMIN] == 1
        assert raw[TC_CC][termios.VTIME] == 0

    def test_raw_keeps_other_flags(self, pty_pair):
        _, slave = pty_pair
        original = termios.tcgetattr(slave)
        raw = raw_attributes(original)
        assert raw[:TC_LFLAG] == original[:TC_LFLAG]

    def test_original_not_modified(self, pty_pair):
        _, slave = pty_pair
        original = termios.tcgetattr(slave)
        snapshot = termios.tcgetattr(slave)
        raw_attributes(original)
        assert original == snapshot

    def test_intermediate_is_canonical_without_echo(self, pty_pair):
        _, slave = pty_pair
        intermediate = intermediate_attributes(raw_attributes(termios.tcgetattr(slave)))
        assert intermediate[TC_LFLAG] & termios.ICANON
        assert not intermediate[TC_LFLAG] & termios.ECHO
        assert not intermediate[TC_LFLAG] & termios.ISIG


class TestPosixTerminalBackend:
    """Reads and mode switching on a pseudo-terminal."""

    def test_blocking_read(self, pty_pair):
        master, slave = pty_pair
        backend = PosixTerminalBackend(slave, CharDecoder("utf-8"))
        os.write(master, b"w")

        assert backend.read(wait=True) == "w"

    def test_read_multibyte(self, pty_pair):
        master, slave = pty_pair
        backend = PosixTerminalBackend(slave, CharDecoder("utf-8"))
        os.write(master, "é".encode("utf-8"))

        assert backend.read(wait=True) == "é"

    def test_leaves_intermediate_mode(self, pty_pair):
        master, slave = pty_pair
        backend = PosixTerminalBackend(slave, CharDecoder("utf-8"))
        os.write(master, b"a")
        backend.read(wait=True)

        lflag = termios.tcgetattr(slave)[TC_LFLAG]
        assert lflag & termios.ICANON
        assert not lflag & termios.ECHO

    def test_poll_without_input_does_not_block(self, pty_pair):
        _, slave = pty_pair
        backend = PosixTerminalBackend(slave, CharDecoder("utf-8"))

        started = time.monotonic()
        assert backend.read(wait=False) is KeySentinel.NO_KEY
        assert time.monotonic() - started < 1.0

        # Still switched to intermediate mode on the early return
        assert not termios.tcgetattr(slave)[TC_LFLAG] & termios.ECHO

    def test_poll_with_input(self, pty_pair):
        master, slave = pty_pair
        backend = PosixTerminalBackend(slave, CharDecoder("utf-8"))
        os.write(master, b"x")

        assert backend.read(wait=False) == "x"
        assert not backend.has_input()

    def test_restore(self, pty_pair):
        master, slave = pty_pair
        original = termios.tcgetattr(slave)
        backend = PosixTerminalBackend(slave, CharDecoder("utf-8"))
        os.write(master, b"s")
        backend.read(wait=True)
        backend.restore()

        restored = termios.tcgetattr(slave)
        assert restored[TC_LFLAG] == original[TC_LFLAG]
        assert restored[TC_CC] == original[TC_CC]

    def test_original_attributes_is_a_copy(self, pty_pair):
        _, slave = pty_pair
        backend = PosixTerminalBackend(slave)
        attrs = backend.original_attributes
        attrs[TC_LFLAG] = 0
        assert backend.original_attributes[TC_LFLAG] != 0

    def test_not_a_terminal(self):
        read_fd, write_fd = os.pipe()
        try:
            with pytest.raises(ConsoleError, match="terminal attributes"):
                PosixTerminalBackend(read_fd)
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_set_failure_is_fatal(self, pty_pair, monkeypatch):
        _, slave = pty_pair
        backend = PosixTerminalBackend(slave)

        def failing_tcsetattr(fd, when, attrs):
            raise termios.error(5, "Input/output error")

        monkeypatch.setattr(termios, "tcsetattr", failing_tcsetattr)
        with pytest.raises(ConsoleError, match="Failed to set"):
            backend.read(wait=False)
