"""
Console driver constants.

Key codes reported by the driver, the layout of termios attribute lists and
the Win32 console constants we need. The Win32 values come from the Windows
SDK headers (wincon.h, processenv.h, handleapi.h).
"""

# ============================================================================
# Key codes
# ============================================================================
# Sentinel codes live in the Unicode noncharacter range so that they never
# collide with a key a user can actually type.

NO_KEY_CODE = 0xFFFF        # wait=False and nothing pending
INVALID_KEY_CODE = 0xFFFE   # undecodable byte sequence or out-of-range key
END_OF_INPUT_CODE = -1      # input stream exhausted

# Largest code point a key may have. Anything above is reported as invalid.
MAX_KEY_CODE = 0xFFFF

# Function and arrow keys on Windows arrive as a 0x00 or 0xE0 prefix followed
# by a scan code. We fold them into the private use area: 0xE000 + scan code.
EXTENDED_KEY_PREFIXES = (0x00, 0xE0)
EXTENDED_KEY_BASE = 0xE000
EXTENDED_KEY_MAX_SCAN = 0x18FF  # 0xE000 + 0x18FF == 0xF8FF, end of the BMP PUA

# Scan codes of the arrow keys as reported after the prefix
SCAN_UP = 0x48
SCAN_LEFT = 0x4B
SCAN_RIGHT = 0x4D
SCAN_DOWN = 0x50

# ============================================================================
# Byte decoding
# ============================================================================
# Upper bound on the number of bytes one character may occupy in the input
# encoding. UTF-8 needs at most 4 bytes for any code point, and every other
# locale encoding we expect on a terminal needs fewer. A sequence that does
# not produce a character within this many bytes is reported as invalid.
MAX_ENCODED_CHAR_BYTES = 4

# ============================================================================
# termios attribute list layout
# ============================================================================
# termios.tcgetattr() returns
#   [iflag, oflag, cflag, lflag, ispeed, ospeed, cc]
# Only the local mode flags are touched by the driver.

TC_IFLAG = 0
TC_OFLAG = 1
TC_CFLAG = 2
TC_LFLAG = 3
TC_ISPEED = 4
TC_OSPEED = 5
TC_CC = 6

# ============================================================================
# Win32 console
# ============================================================================

# (DWORD)-10. GetStdHandle() takes an unsigned 32-bit value.
STD_INPUT_HANDLE = -10 & 0xFFFFFFFF

# Returned by GetStdHandle() on failure: (HANDLE)-1
INVALID_HANDLE_VALUE = -1

# Console input mode flags (SetConsoleMode on an input handle)
ENABLE_PROCESSED_INPUT = 0x0001  # system handles Ctrl-C

# Console mode words are DWORDs
CONSOLE_MODE_MASK = 0xFFFFFFFF
