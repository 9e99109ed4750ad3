"""Errors raised by the console driver."""


class ConsoleError(Exception):
    """
    Exception raised when the terminal mode cannot be queried or changed.

    This is always fatal: without the original mode we cannot guarantee the
    terminal is usable again once we exit, so callers should let it
    propagate and terminate the program.
    """

    pass
