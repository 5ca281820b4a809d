"""
Base store contracts for flatfile-io.

All stores implement this interface. The contract is:
1. ``load()`` replaces the in-memory structure with a file's contents.
2. ``save()`` writes the whole structure back out.
3. Both accept an empty filename, meaning "the file I used last".

Two specialised contracts sit on top of ``FileStore``:
- ``Settings``: sectioned key/value access (``header_exists``,
  ``value_exists``, ``add``, ``set``, ``get``).
- ``Spreadsheet``: cell access by ``(row, col)`` (``set``, ``get``).

Both expose the same typed getters. A typed getter never raises for a
bad value; it returns a ``Lookup`` with the conversion error attached,
so a caller can tell "absent" from "present but malformed".
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, NamedTuple

import numpy as np

from flatfile_io.exceptions import InvalidArgumentError, ParsingError
from flatfile_io.numbers import parse_float32, parse_float64, parse_int, parse_uint


class Lookup(NamedTuple):
    """Result of a typed getter.

    Attributes:
        value: The converted value, or the type's zero value when the
            entry is absent or fails to convert.
        found: Whether the entry exists in the store.
        error: A ``ParsingError`` when the entry exists but could not be
            converted, otherwise ``None``.
    """
    value: Any
    found: bool
    error: ParsingError | None = None


class FileStore(ABC):
    """Abstract base class for file-backed stores.

    Attributes:
        filename: The remembered filename, updated by ``load()`` and by
            ``save()`` when given an explicit name. Empty if none yet.
    """

    #: Component name reported in every error this store raises.
    source: str = "FileStore"

    def __init__(self, filename: str | os.PathLike[str] = "") -> None:
        self.filename = os.fspath(filename) if filename else ""

    @abstractmethod
    def load(self, filename: str | os.PathLike[str] = "") -> None:
        """Replace the store's contents with those of *filename*.

        Raises:
            InvalidArgumentError: If no filename is given or remembered.
            LoadingError: If the file cannot be opened, read, or closed.
        """

    @abstractmethod
    def save(self, filename: str | os.PathLike[str] = "") -> None:
        """Write the store's contents to *filename*.

        Raises:
            InvalidArgumentError: If no filename is given or remembered.
            SavingError: If the file cannot be created, written, or closed.
        """

    def _resolve_filename(self, filename: str | os.PathLike[str] | None, action: str) -> str:
        """Pick the filename to use for *action* ("load" or "save").

        A non-empty argument wins and becomes the remembered name; an
        empty one falls back to the remembered name.
        """
        if filename:
            self.filename = os.fspath(filename)
            return self.filename
        if not self.filename:
            raise InvalidArgumentError(
                self.source, f"No filename specified to {action}"
            )
        return self.filename

    def _convert(
        self,
        lookup: tuple[str, bool],
        parse: Callable[[str], Any],
        zero: Any,
    ) -> Lookup:
        text, found = lookup
        if not found:
            return Lookup(zero, False, None)
        try:
            return Lookup(parse(text), True, None)
        except ValueError as exc:
            return Lookup(zero, True, ParsingError(self.source, str(exc)))


class Settings(FileStore):
    """Contract for sectioned key/value settings files.

    Setting a value that does not exist is not allowed, and neither is
    adding a value that already exists. Adding a value to a missing
    section creates the section.
    """

    @abstractmethod
    def header_exists(self, header: str) -> bool:
        """Return whether *header* is a section in the store."""

    @abstractmethod
    def value_exists(self, header: str, name: str) -> bool:
        """Return whether *name* exists inside section *header*."""

    @abstractmethod
    def add(self, header: str, name: str, value: str) -> None:
        """Insert a new value, creating *header* if needed."""

    @abstractmethod
    def set(self, header: str, name: str, value: str) -> None:
        """Overwrite an existing value."""

    @abstractmethod
    def get(self, header: str, name: str) -> tuple[str, bool]:
        """Return ``(value, found)``."""

    def get_int(self, header: str, name: str) -> Lookup:
        return self._convert(self.get(header, name), parse_int, 0)

    def get_uint(self, header: str, name: str) -> Lookup:
        return self._convert(self.get(header, name), parse_uint, 0)

    def get_float32(self, header: str, name: str) -> Lookup:
        return self._convert(self.get(header, name), parse_float32, np.float32(0))

    def get_float64(self, header: str, name: str) -> Lookup:
        return self._convert(self.get(header, name), parse_float64, 0.0)


class Spreadsheet(FileStore):
    """Contract for spreadsheet-like files addressed by ``(row, col)``.

    Setting a cell beyond the current bounds creates every row and
    column between the last existing one and the target.
    """

    @abstractmethod
    def set(self, row: int, col: int, value: str) -> None:
        """Assign *value* to the cell, growing the table as needed."""

    @abstractmethod
    def get(self, row: int, col: int) -> tuple[str, bool]:
        """Return ``(value, found)`` without growing the table."""

    def get_int(self, row: int, col: int) -> Lookup:
        return self._convert(self.get(row, col), parse_int, 0)

    def get_uint(self, row: int, col: int) -> Lookup:
        return self._convert(self.get(row, col), parse_uint, 0)

    def get_float32(self, row: int, col: int) -> Lookup:
        return self._convert(self.get(row, col), parse_float32, np.float32(0))

    def get_float64(self, row: int, col: int) -> Lookup:
        return self._convert(self.get(row, col), parse_float64, 0.0)
