"""
Byte-to-character decoding for raw terminal input.

In raw mode the terminal hands us bytes, not characters. A key like 'é'
arrives as two bytes in UTF-8, so we read one byte at a time and try to
decode after each one until a full character comes out.

The decoder object keeps internal state between calls, so decoding is
serialized with a lock.
"""

import codecs
import locale
import logging
import threading
from typing import Callable

from .constants import MAX_ENCODED_CHAR_BYTES
from .keys import Key, KeySentinel, key_from_code

logger = logging.getLogger(__name__)

# Reads up to n bytes, returns b"" at end of file (os.read, BinaryIO.read)
ByteReader = Callable[[int], bytes]


class CharDecoder:
    """
    Decodes single characters from a byte stream.

    Usage:
        decoder = CharDecoder()
        key = decoder.read_char(functools.partial(os.read, fd))

    Malformed bytes never raise out of the decoder. They are skipped while
    looking for the next real character. If no character comes out within
    MAX_ENCODED_CHAR_BYTES bytes, INVALID_KEY is returned, which bounds how
    much input a single read can consume.
    """

    def __init__(self, encoding: str | None = None):
        """
        Create a decoder.

        Args:
            encoding: Input encoding. Defaults to the locale's preferred
                      encoding, which is what the terminal sends.
        """
        self._encoding = encoding or locale.getpreferredencoding(False)
        self._decoder = codecs.getincrementaldecoder(self._encoding)()
        self._lock = threading.Lock()

    @property
    def encoding(self) -> str:
        """Name of the encoding used to decode input bytes."""
        return self._encoding

    def read_char(self, read: ByteReader) -> Key:
        """
        Read bytes until they decode to one character.

        Args:
            read: Called with 1 to get the next byte; returns b"" at EOF.

        Returns:
            The decoded character, END_OF_INPUT if the stream ended before
            any byte was read, or INVALID_KEY if the bytes don't form a
            character (buffer overflow or EOF in the middle of a sequence).
        """
        buffer = bytearray()
        while True:
            if len(buffer) >= MAX_ENCODED_CHAR_BYTES:
                logger.warning(f"No character in {bytes(buffer)!r}, reporting invalid key")
                return KeySentinel.INVALID_KEY

            byte = read(1)
            if not byte:
                if buffer:
                    logger.warning(f"End of input inside byte sequence {bytes(buffer)!r}")
                    return KeySentinel.INVALID_KEY
                return KeySentinel.END_OF_INPUT

            buffer += byte
            key = self.decode(bytes(buffer))
            if key is not None:
                return key

    def decode(self, data: bytes) -> Key | None:
        """
        Try to decode one character from a complete or partial byte sequence.

        Returns:
            The first real character in data, or None if data is an
            incomplete sequence or contains only malformed bytes.
        """
        with self._lock:
            while data:
                self._decoder.reset()
                try:
                    text = self._decoder.decode(data, final=False)
                except UnicodeDecodeError as e:
                    # Anything before the malformed bytes decoded cleanly
                    self._decoder.reset()
                    text = self._decoder.decode(data[:e.start], final=False)
                    if not text:
                        logger.debug(f"Skipping malformed bytes {data[e.start:e.end]!r}")
                        data = data[e.end:]
                        continue
                if text:
                    return key_from_code(ord(text[0]))
                return None
        return None
