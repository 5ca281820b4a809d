"""
Sectioned key/value store (INI-style) for flatfile-io.

File format, one construct per line (surrounding whitespace ignored)::

    // a comment
    top_level = value        <- before any header: unnamed section ""
    [Section]
    key = value

Rules enforced on load:
- ``[name]`` must be closed by ``]``, must have a non-empty name, and
  may appear only once per file.
- Every other non-blank, non-comment line must contain ``=``; the text
  before the first ``=`` is the key, the rest is the value, both
  trimmed and both required.
- A repeated key within a section overwrites the earlier value.

There is no escaping, no multi-line value and no inline comment.

On save the unnamed section is written first. Any pair written after a
header would be read back as belonging to that header, so the unnamed
section has to precede every ``[name]`` line.
"""

from __future__ import annotations

import logging
import os

import pandas as pd
from pydantic import ValidationError

from flatfile_io.config import IniConfig
from flatfile_io.exceptions import (
    AlreadyExistsError,
    InvalidArgumentError,
    LoadingError,
    NotFoundError,
    ParsingError,
    SavingError,
)
from flatfile_io.linereader import DEFAULT_BUFFER_SIZE, LineReader
from flatfile_io.stores.base import Settings

logger = logging.getLogger(__name__)

_COMMENT_PREFIX = "//"


class SettingsINI(Settings):
    """In-memory view of an INI-style settings file.

    Attributes:
        filename: The remembered filename (see ``FileStore``).
        headers: Section name -> {key -> value}. The unnamed section is
            stored under ``""``.
    """

    source = "SettingsINI"

    def __init__(
        self,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        filename: str | os.PathLike[str] = "",
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(filename)
        try:
            self.options = IniConfig(buffer_size=buffer_size, encoding=encoding)
        except ValidationError as exc:
            raise InvalidArgumentError(self.source, f"Invalid options: {exc}") from exc
        self.headers: dict[str, dict[str, str]] = {}

    @classmethod
    def from_config(
        cls, config: IniConfig, filename: str | os.PathLike[str] = ""
    ) -> SettingsINI:
        return cls(
            buffer_size=config.buffer_size,
            filename=filename,
            encoding=config.encoding,
        )

    def __repr__(self) -> str:
        return (
            f"SettingsINI(sections={self.sections}, "
            f"filename={self.filename!r})"
        )

    def __len__(self) -> int:
        return len(self.headers)

    def __contains__(self, header: object) -> bool:
        return header in self.headers

    @property
    def sections(self) -> list[str]:
        """Section names in insertion order (``""`` for the unnamed one)."""
        return list(self.headers)

    # -- Load / save --------------------------------------------------------

    def load(self, filename: str | os.PathLike[str] = "") -> None:
        """Load an INI-style file, replacing the current contents.

        The store is emptied before reading and stays empty if the file
        turns out to be malformed.

        Raises:
            InvalidArgumentError: If no filename is given or remembered.
            LoadingError: If the file cannot be opened, read, decoded,
                or closed.
            ParsingError: If a line violates the format rules.
        """
        path = self._resolve_filename(filename, "load")

        try:
            fp = open(path, "rb")
        except OSError as exc:
            raise LoadingError(self.source, f"Failed to open the file {path}: {exc}") from exc

        self.headers = {}
        try:
            with fp:
                headers = self._parse(LineReader(fp, self.options.buffer_size))
        except OSError as exc:
            raise LoadingError(self.source, f"Failed to read {path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise LoadingError(
                self.source, f"Failed to decode {path} as {self.options.encoding}: {exc}"
            ) from exc

        self.headers = headers
        logger.info(
            "Loaded %d section(s), %d value(s) from %s",
            len(headers),
            sum(len(values) for values in headers.values()),
            path,
        )

    def _parse(self, reader: LineReader) -> dict[str, dict[str, str]]:
        headers: dict[str, dict[str, str]] = {}
        current: dict[str, str] | None = None
        line_no = 0
        eof = False

        while not eof:
            raw, eof = reader.read_line()
            line_no += 1
            line = raw.decode(self.options.encoding).strip()

            if not line or line.startswith(_COMMENT_PREFIX):
                continue

            if line.startswith("["):
                if len(line) < 2 or not line.endswith("]"):
                    raise ParsingError(
                        self.source, f"line {line_no}: Invalid header syntax encountered"
                    )
                name = line[1:-1]
                if not name:
                    raise ParsingError(
                        self.source, f"line {line_no}: No header name specified between brackets"
                    )
                if name in headers:
                    raise ParsingError(
                        self.source, f"line {line_no}: Header name {name!r} is specified twice"
                    )
                current = headers[name] = {}
                continue

            key, sep, value = line.partition("=")
            if not sep:
                raise ParsingError(
                    self.source, f"line {line_no}: Expected to find an equal-character"
                )
            key = key.strip()
            value = value.strip()
            if not key:
                raise ParsingError(
                    self.source, f"line {line_no}: Value pair encountered without name"
                )
            if not value:
                raise ParsingError(
                    self.source, f"line {line_no}: Value pair encountered without value"
                )

            if current is None:
                current = headers[""] = {}
            current[key] = value

        return headers

    def save(self, filename: str | os.PathLike[str] = "") -> None:
        """Write the store to an INI-style file.

        Pairs are written as ``key = value``. The unnamed section comes
        first, followed by each named section under its ``[name]`` line.

        Raises:
            InvalidArgumentError: If no filename is given or remembered.
            SavingError: If the file cannot be created, written, or closed.
        """
        path = self._resolve_filename(filename, "save")

        try:
            fp = open(path, "w", encoding=self.options.encoding, newline="")
        except OSError as exc:
            raise SavingError(
                self.source, f"Failed to open file {path} for writing: {exc}"
            ) from exc

        try:
            with fp:
                unnamed = self.headers.get("")
                if unnamed:
                    self._write_pairs(fp, unnamed)
                for header, values in self.headers.items():
                    if not header:
                        continue
                    fp.write(f"[{header}]\n")
                    self._write_pairs(fp, values)
        except (OSError, UnicodeEncodeError) as exc:
            raise SavingError(self.source, f"Failed to write {path}: {exc}") from exc

        logger.info("Saved %d section(s) to %s", len(self.headers), path)

    @staticmethod
    def _write_pairs(fp, values: dict[str, str]) -> None:
        for name, value in values.items():
            fp.write(f"{name} = {value}\n")

    # -- Accessors ----------------------------------------------------------

    def header_exists(self, header: str) -> bool:
        return header in self.headers

    def value_exists(self, header: str, name: str) -> bool:
        values = self.headers.get(header)
        return values is not None and name in values

    def add(self, header: str, name: str, value: str) -> None:
        """Store a new value under *header*, creating the section if needed.

        Raises:
            AlreadyExistsError: If *name* already exists in *header*.
        """
        values = self.headers.setdefault(header, {})
        if name in values:
            raise AlreadyExistsError(
                self.source,
                f"Value pair {name!r} already exists in header {header!r}",
            )
        values[name] = value

    def set(self, header: str, name: str, value: str) -> None:
        """Overwrite an existing value.

        Raises:
            NotFoundError: If *header* or *name* does not exist.
        """
        values = self.headers.get(header)
        if values is None:
            raise NotFoundError(
                self.source, f"Could not find header {header!r} while setting value"
            )
        if name not in values:
            raise NotFoundError(
                self.source,
                f"Could not find value pair {name!r} in header {header!r} while setting value",
            )
        values[name] = value

    def get(self, header: str, name: str) -> tuple[str, bool]:
        values = self.headers.get(header)
        if values is None or name not in values:
            return "", False
        return values[name], True

    # -- Interop ------------------------------------------------------------

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Return a deep copy of the section mapping."""
        return {header: dict(values) for header, values in self.headers.items()}

    def to_dataframe(self) -> pd.DataFrame:
        """Return the store as a long-form DataFrame.

        Columns: ``section``, ``key``, ``value``; one row per pair, in
        section then key insertion order. Empty sections contribute no
        rows.
        """
        records = [
            (header, name, value)
            for header, values in self.headers.items()
            for name, value in values.items()
        ]
        return pd.DataFrame(records, columns=["section", "key", "value"], dtype=str)
