"""
Low-level cffi bindings for the Win32 console API.

The Windows backend needs three functions from kernel32.dll:
- GetStdHandle: find the console input handle
- GetConsoleMode / SetConsoleMode: read and change the input mode flags

The cdef is parsed on every platform so the types are available (and
testable) everywhere, but kernel32.dll is only opened when
load_kernel32() is called, which only happens on Windows.
"""

import os

from cffi import FFI

# Create the FFI instance that we'll use throughout
ffi = FFI()

# Declarations from the Windows SDK:
# - processenv.h (GetStdHandle)
# - consoleapi.h (GetConsoleMode, SetConsoleMode)
ffi.cdef("""
    // Win32 base types. DWORD is 32 bits on every Windows ABI.
    typedef void *HANDLE;
    typedef uint32_t DWORD;
    typedef int BOOL;

    // Returns INVALID_HANDLE_VALUE on failure, NULL if there is no console
    HANDLE GetStdHandle(DWORD nStdHandle);

    // Both return 0 on failure; GetLastError() has the reason
    BOOL GetConsoleMode(HANDLE hConsoleHandle, DWORD *lpMode);
    BOOL SetConsoleMode(HANDLE hConsoleHandle, DWORD dwMode);
""")


def load_kernel32():
    """
    Open kernel32.dll.

    Returns:
        A cffi library object exposing the functions declared above.
    """
    return ffi.dlopen("kernel32.dll")


def new_mode_pointer():
    """Allocate a DWORD for GetConsoleMode() to write into."""
    return ffi.new("DWORD *")


def handle_from_value(value: int):
    """Wrap an integer OS handle (e.g. from msvcrt.get_osfhandle()) as a HANDLE."""
    return ffi.cast("HANDLE", value)


def handle_value(handle) -> int:
    """
    Get the integer value of a HANDLE.

    Used to compare against NULL and INVALID_HANDLE_VALUE, which is -1
    when read back as a signed pointer-sized integer.
    """
    return int(ffi.cast("intptr_t", handle))


def get_last_error() -> str:
    """
    Describe the last Win32 error (GetLastError()) for error messages.

    ffi.getwinerror() only exists on Windows.
    """
    if os.name != "nt":
        return "no Win32 error information on this platform"
    code, message = ffi.getwinerror()
    return f"{message} (error {code})"
