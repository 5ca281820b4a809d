"""
flatfile-io: in-memory stores for simple flat-file formats.

Public API surface:

- ``open(path, ...)`` -- **recommended entry point**. Picks the store
  for *path* from its suffix (``.ini`` -> ``SettingsINI``, ``.csv`` ->
  ``SpreadsheetDelim``, ...), builds it from a ``FileIOConfig`` and
  loads the file.

- ``SettingsINI`` -- sectioned key/value store for INI-style files.

- ``SpreadsheetDelim`` -- row/column store for delimiter-separated files.

- ``LineReader`` -- the buffered line reader both stores read through.

Errors are raised as subclasses of ``FileIOError``, each carrying a
``kind``, the ``source`` component, and a ``message``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, TypeVar

from pydantic import ValidationError

from flatfile_io.config import (
    DelimConfig,
    FileIOConfig,
    IniConfig,
    load_config,
    save_config,
)
from flatfile_io.exceptions import (
    AlreadyExistsError,
    ErrorKind,
    FileIOError,
    InvalidArgumentError,
    LoadingError,
    NotFoundError,
    ParsingError,
    SavingError,
)
from flatfile_io.export import export_store
from flatfile_io.linereader import LineReader
from flatfile_io.stores import Lookup, SettingsINI, SpreadsheetDelim

__all__ = [
    "open",
    "SettingsINI",
    "SpreadsheetDelim",
    "LineReader",
    "Lookup",
    "export_store",
    "FileIOConfig",
    "IniConfig",
    "DelimConfig",
    "load_config",
    "save_config",
    "ErrorKind",
    "FileIOError",
    "ParsingError",
    "InvalidArgumentError",
    "NotFoundError",
    "AlreadyExistsError",
    "SavingError",
    "LoadingError",
]

logger = logging.getLogger(__name__)

ConfigT = TypeVar("ConfigT", IniConfig, DelimConfig)


def open(
    path: str | os.PathLike[str],
    config: FileIOConfig | str | os.PathLike[str] | None = None,
    **overrides: Any,
) -> SettingsINI | SpreadsheetDelim:
    """Open a flat file with the store matching its suffix.

    Args:
        path: The file to load.
        config: A ``FileIOConfig``, a path to a YAML config, or ``None``
            for defaults. Its ``extensions`` map decides which store is
            used; its ``ini`` / ``delim`` sections configure that store.
            For ``.tsv`` files a default ``","`` delimiter is replaced by
            a tab.
        **overrides: Options applied on top of the selected section
            (e.g. ``delimiter=";"``, ``skip_rows=1``, ``encoding="latin-1"``).

    Returns:
        A loaded ``SettingsINI`` or ``SpreadsheetDelim``.

    Raises:
        InvalidArgumentError: If the suffix is not mapped to a store, or
            an override is unknown or invalid for that store.
        LoadingError: If the config or the file cannot be read.
        ParsingError: If an INI file is malformed.

    Examples::

        settings = flatfile_io.open("app.ini")
        port = settings.get_int("server", "port")

        sheet = flatfile_io.open("prices.csv", config="flatfile.yaml")
        cell, found = sheet.get(0, 1)

        sheet = flatfile_io.open("report.csv", delimiter=";", skip_rows=2)
    """
    if config is None:
        config = FileIOConfig()
    elif not isinstance(config, FileIOConfig):
        config = load_config(config)

    kind = config.kind_for(path)
    if kind is None:
        raise InvalidArgumentError(
            "open",
            f"No store registered for suffix {Path(path).suffix!r} "
            f"(known: {sorted(config.extensions)})",
        )

    logger.info("open() -- %s as %s", path, kind)

    if kind == "ini":
        settings = SettingsINI.from_config(_apply_overrides(config.ini, overrides))
        settings.load(path)
        return settings

    delim = _apply_overrides(config.delim, overrides)
    if Path(path).suffix.lower() == ".tsv" and "delimiter" not in delim.model_fields_set:
        delim = delim.model_copy(update={"delimiter": "\t"})
    sheet = SpreadsheetDelim.from_config(delim)
    sheet.load(path)
    return sheet


def _apply_overrides(section: ConfigT, overrides: dict[str, Any]) -> ConfigT:
    """Return *section* revalidated with *overrides* applied.

    Fields set in *section* or in *overrides* stay in ``model_fields_set``.
    """
    if not overrides:
        return section
    unknown = sorted(set(overrides) - set(type(section).model_fields))
    if unknown:
        raise InvalidArgumentError(
            "open", f"Unknown option(s) for {type(section).__name__}: {unknown}"
        )
    data = section.model_dump(include=section.model_fields_set)
    data.update(overrides)
    try:
        return type(section).model_validate(data)
    except ValidationError as exc:
        raise InvalidArgumentError("open", f"Invalid option override: {exc}") from exc
