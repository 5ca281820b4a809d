"""
Exporter for flatfile-io.

Writes a store's DataFrame view to disk as CSV or Parquet, for use by
tools that expect a standard tabular file rather than the store's own
format.

- SettingsINI exports its long form (``section``, ``key``, ``value``).
- SpreadsheetDelim exports its padded table (integer column labels, or
  the first row as labels when ``header=True``).

CSV is written with a header row and no index. Parquet uses the
``pyarrow`` engine and requires string column labels, so integer
labels are converted with ``str()`` before writing.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

import pandas as pd

from flatfile_io.exceptions import SavingError
from flatfile_io.stores.base import FileStore
from flatfile_io.stores.spreadsheet_delim import SpreadsheetDelim

logger = logging.getLogger(__name__)

_SUPPORTED_FORMATS = {"csv", "parquet"}


def _write_dataframe(df: pd.DataFrame, path: Path, output_format: str) -> None:
    """Write a single DataFrame to disk in the specified format.

    Raises:
        SavingError: If writing fails for any reason.
    """
    try:
        if output_format == "csv":
            df.to_csv(path, index=False, encoding="utf-8")
        else:  # parquet
            df = df.rename(columns=str)
            df.to_parquet(path, index=False, engine="pyarrow")
    except Exception as exc:
        raise SavingError(
            "export", f"Failed to write {path.name} as {output_format}: {exc}"
        ) from exc


def export_store(
    store: FileStore,
    path: str | os.PathLike[str],
    output_format: Literal["csv", "parquet"] = "csv",
    header: bool = False,
) -> str:
    """Write a store's DataFrame view to *path*.

    Args:
        store: A ``SettingsINI`` or ``SpreadsheetDelim``.
        path: Destination file; parent directories are created.
        output_format: ``"csv"`` or ``"parquet"``.
        header: For spreadsheets, use the first row as column labels.
            Ignored for settings stores.

    Returns:
        The written path as a string.

    Raises:
        SavingError: If *output_format* is unsupported, the store has
            no DataFrame view, or the write fails.
    """
    if output_format not in _SUPPORTED_FORMATS:
        raise SavingError(
            "export",
            f"Unsupported output format: '{output_format}'. "
            f"Supported formats: {sorted(_SUPPORTED_FORMATS)}",
        )

    if isinstance(store, SpreadsheetDelim):
        df = store.to_dataframe(header=header)
    elif hasattr(store, "to_dataframe"):
        df = store.to_dataframe()
    else:
        raise SavingError(
            "export", f"{type(store).__name__} does not provide a DataFrame view"
        )

    out = Path(path)
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise SavingError("export", f"Failed to create {out.parent}: {exc}") from exc

    _write_dataframe(df, out, output_format)
    logger.info(
        "Exported %s -> %s (%d rows, %d cols)",
        type(store).__name__,
        out.name,
        len(df),
        len(df.columns),
    )
    return str(out)
