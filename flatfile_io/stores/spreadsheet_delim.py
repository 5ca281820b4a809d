"""
Delimited table store (CSV-style) for flatfile-io.

Rows are separated by newlines and cells by a caller-chosen delimiter
string. There is no quoting: a delimiter inside a cell cannot be
represented. Rows may have different lengths.

Loading:
- The first ``skip_rows`` lines are dropped whatever they contain
  (blank lines included).
- Blank lines after that are ignored and never become rows.
- Each remaining line is split on the delimiter and its first
  ``skip_cols`` cells are dropped; a line that has no cells left after
  that is ignored.

The in-memory table is a list of lists of ``str``. ``set()`` grows it
on demand (padding with empty strings); ``get()`` never does.
"""

from __future__ import annotations

import logging
import os

import pandas as pd
from pydantic import ValidationError

from flatfile_io.config import DelimConfig
from flatfile_io.exceptions import InvalidArgumentError, LoadingError, SavingError
from flatfile_io.linereader import DEFAULT_BUFFER_SIZE, LineReader
from flatfile_io.stores.base import Spreadsheet

logger = logging.getLogger(__name__)


class SpreadsheetDelim(Spreadsheet):
    """In-memory view of a delimiter-separated file.

    Attributes:
        filename: The remembered filename (see ``FileStore``).
        data: Row-major table of string cells (may be jagged).
    """

    source = "SpreadsheetDelim"

    def __init__(
        self,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        delimiter: str = ",",
        filename: str | os.PathLike[str] = "",
        encoding: str = "utf-8",
        skip_cols: int = 0,
        skip_rows: int = 0,
    ) -> None:
        super().__init__(filename)
        try:
            self.options = DelimConfig(
                buffer_size=buffer_size,
                delimiter=delimiter,
                encoding=encoding,
                skip_cols=skip_cols,
                skip_rows=skip_rows,
            )
        except ValidationError as exc:
            raise InvalidArgumentError(self.source, f"Invalid options: {exc}") from exc
        self.data: list[list[str]] = []

    @classmethod
    def from_config(
        cls, config: DelimConfig, filename: str | os.PathLike[str] = ""
    ) -> SpreadsheetDelim:
        return cls(
            buffer_size=config.buffer_size,
            delimiter=config.delimiter,
            filename=filename,
            encoding=config.encoding,
            skip_cols=config.skip_cols,
            skip_rows=config.skip_rows,
        )

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        delimiter: str = ",",
        include_header: bool = True,
        filename: str | os.PathLike[str] = "",
    ) -> SpreadsheetDelim:
        """Build a sheet from a DataFrame.

        Cells are converted with ``str()``; missing values become ``""``.
        With *include_header* the column labels form the first row.
        """
        sheet = cls(delimiter=delimiter, filename=filename)
        if include_header:
            sheet.data.append([str(c) for c in df.columns])
        for record in df.itertuples(index=False, name=None):
            sheet.data.append(["" if pd.isna(v) else str(v) for v in record])
        return sheet

    def __repr__(self) -> str:
        return (
            f"SpreadsheetDelim(rows={self.row_count}, "
            f"delimiter={self.delimiter!r}, filename={self.filename!r})"
        )

    def __len__(self) -> int:
        return len(self.data)

    # -- Properties ---------------------------------------------------------

    @property
    def delimiter(self) -> str:
        return self.options.delimiter

    @property
    def rows(self) -> list[list[str]]:
        """A copy of the table."""
        return [list(row) for row in self.data]

    @property
    def row_count(self) -> int:
        return len(self.data)

    @property
    def max_columns(self) -> int:
        """Length of the longest row (0 for an empty table)."""
        return max((len(row) for row in self.data), default=0)

    # -- Load / save --------------------------------------------------------

    def load(
        self,
        filename: str | os.PathLike[str] = "",
        skip_cols: int | None = None,
        skip_rows: int | None = None,
    ) -> None:
        """Load a delimited file, replacing the current table.

        Skip counts left as ``None`` fall back to the store options
        (``options.skip_cols`` / ``options.skip_rows``).

        If reading fails midway the rows read so far remain in ``data``;
        they should not be relied upon.

        Raises:
            InvalidArgumentError: If no filename is given or remembered,
                or a skip count is negative.
            LoadingError: If the file cannot be opened, read, decoded,
                or closed.
        """
        if skip_cols is None:
            skip_cols = self.options.skip_cols
        if skip_rows is None:
            skip_rows = self.options.skip_rows
        if skip_cols < 0 or skip_rows < 0:
            raise InvalidArgumentError(
                self.source,
                f"Skip counts must not be negative (skip_cols={skip_cols}, skip_rows={skip_rows})",
            )
        path = self._resolve_filename(filename, "load")

        try:
            fp = open(path, "rb")
        except OSError as exc:
            raise LoadingError(self.source, f"Failed to load file {path}: {exc}") from exc

        self.data = []
        try:
            with fp:
                self._parse(LineReader(fp, self.options.buffer_size), skip_cols, skip_rows)
        except OSError as exc:
            raise LoadingError(self.source, f"Failed to read a new line from {path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise LoadingError(
                self.source, f"Failed to decode {path} as {self.options.encoding}: {exc}"
            ) from exc

        logger.info(
            "Loaded %d row(s) from %s (skip_cols=%d, skip_rows=%d)",
            len(self.data), path, skip_cols, skip_rows,
        )

    def _parse(self, reader: LineReader, skip_cols: int, skip_rows: int) -> None:
        delimiter = self.options.delimiter
        encoding = self.options.encoding
        skipped = 0
        eof = False

        while not eof:
            raw, eof = reader.read_line()

            if skipped < skip_rows:
                skipped += 1
                continue
            if not raw:
                continue

            cells = raw.decode(encoding).split(delimiter)
            if len(cells) <= skip_cols:
                continue
            self.data.append(cells[skip_cols:])

    def save(self, filename: str | os.PathLike[str] = "") -> None:
        """Write the table, one delimiter-joined line per row.

        Raises:
            InvalidArgumentError: If no filename is given or remembered.
            SavingError: If the file cannot be created, written, or closed.
        """
        path = self._resolve_filename(filename, "save")

        try:
            fp = open(path, "w", encoding=self.options.encoding, newline="")
        except OSError as exc:
            raise SavingError(
                self.source, f"Failed to create/open file {path} for writing: {exc}"
            ) from exc

        delimiter = self.options.delimiter
        try:
            with fp:
                for row in self.data:
                    fp.write(delimiter.join(row))
                    fp.write("\n")
        except (OSError, UnicodeEncodeError) as exc:
            raise SavingError(self.source, f"Failed to write data row to {path}: {exc}") from exc

        logger.info("Saved %d row(s) to %s", len(self.data), path)

    # -- Accessors ----------------------------------------------------------

    def set(self, row: int, col: int, value: str) -> None:
        """Assign *value* at ``(row, col)``.

        Missing rows up to and including *row* are appended empty, and
        the target row is padded with ``""`` up to and including *col*.

        Raises:
            InvalidArgumentError: If *row* or *col* is negative.
        """
        if row < 0 or col < 0:
            raise InvalidArgumentError(
                self.source, f"Cell coordinates must not be negative, got ({row}, {col})"
            )
        while len(self.data) <= row:
            self.data.append([])
        cells = self.data[row]
        if len(cells) <= col:
            cells.extend([""] * (col + 1 - len(cells)))
        cells[col] = value

    def get(self, row: int, col: int) -> tuple[str, bool]:
        if row < 0 or col < 0 or row >= len(self.data):
            return "", False
        cells = self.data[row]
        if col >= len(cells):
            return "", False
        return cells[col], True

    # -- Interop ------------------------------------------------------------

    def to_dataframe(self, header: bool = False) -> pd.DataFrame:
        """Return the table as a DataFrame of strings.

        Jagged rows are padded with ``""`` to the widest row. With
        *header* the first row supplies the column labels (padded
        labels are named by their position).
        """
        width = self.max_columns
        padded = [row + [""] * (width - len(row)) for row in self.data]
        if not header:
            return pd.DataFrame(padded, columns=range(width), dtype=str)
        if not padded:
            return pd.DataFrame(dtype=str)
        labels = [label or str(i) for i, label in enumerate(padded[0])]
        return pd.DataFrame(padded[1:], columns=labels, dtype=str)
