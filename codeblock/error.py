"""
Provide error handling utilities.
"""


class UserFacingError(Exception):
    """
    A user-facing error.

    This type of error is fatal, but fixing it does not require knowledge of the highlighter's internals or the stack
    trace leading to the error. It must therefore have an end-user-friendly message, and its stack trace must not be
    shown.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self._message = message

    def __str__(self) -> str:
        return self._message
