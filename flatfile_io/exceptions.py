"""
Flat error taxonomy for flatfile-io.

Every error raised by the stores carries the same triple:

- ``kind``: one of the ``ErrorKind`` members (parsing, invalid argument,
  not found, already exists, saving, loading).
- ``source``: the component that raised it (e.g. ``"SettingsINI"``).
- ``message``: a human-readable description.

Callers can catch a specific subclass (e.g. ``ParsingError``) or catch
``FileIOError`` and branch on ``err.kind``.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Kinds of failure shared by all stores."""

    PARSING = "Parsing Error"
    INVALID_ARGUMENT = "Invalid Argument"
    NOT_FOUND = "Not Found"
    ALREADY_EXISTS = "Already Exists"
    SAVING = "Saving Error"
    LOADING = "Loading Error"

    def __str__(self) -> str:
        return self.value


class FileIOError(Exception):
    """Base exception for all flatfile-io errors."""

    kind: ErrorKind

    def __init__(self, source: str, message: str) -> None:
        super().__init__(source, message)
        self.source = source
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind}[{self.source}]:{self.message}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(source={self.source!r}, "
            f"message={self.message!r})"
        )


class ParsingError(FileIOError):
    """Raised when file content (or a stored value) cannot be parsed.

    For example, an unterminated ``[header`` line, a key/value line
    without ``=``, or a non-numeric value passed through ``get_int``.
    """

    kind = ErrorKind.PARSING


class InvalidArgumentError(FileIOError):
    """Raised when a caller supplies an unusable argument.

    This includes an empty filename with nothing remembered, a
    non-positive buffer size, an empty delimiter, or a negative cell
    coordinate.
    """

    kind = ErrorKind.INVALID_ARGUMENT


class NotFoundError(FileIOError):
    """Raised when ``set`` targets a section or key that does not exist."""

    kind = ErrorKind.NOT_FOUND


class AlreadyExistsError(FileIOError):
    """Raised when ``add`` targets a key that is already present."""

    kind = ErrorKind.ALREADY_EXISTS


class SavingError(FileIOError):
    """Raised when a file cannot be created, written, or closed."""

    kind = ErrorKind.SAVING


class LoadingError(FileIOError):
    """Raised when a file cannot be opened, read, decoded, or closed."""

    kind = ErrorKind.LOADING
