"""
Configuration models and YAML I/O for flatfile-io.

This module defines the Pydantic models that describe how each store
reads and writes its files, plus helpers for loading and saving them
as YAML.

Key models:
- IniConfig: Options for the sectioned key/value store (SettingsINI).
- DelimConfig: Options for the delimited table store (SpreadsheetDelim),
  including the delimiter and the default column/row skips.
- FileIOConfig: Top-level config (ini + delim + extension mapping) used
  by ``flatfile_io.open()`` to pick and build a store for a path.

Key functions:
- load_config(path) -> FileIOConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.

Store constructors validate their keyword arguments through these same
models, so an invalid buffer size or an empty delimiter is rejected in
one place.
"""

from __future__ import annotations

import codecs
import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from flatfile_io.exceptions import InvalidArgumentError, LoadingError, SavingError
from flatfile_io.linereader import DEFAULT_BUFFER_SIZE

logger = logging.getLogger(__name__)

StoreKind = Literal["ini", "delim"]

_DEFAULT_EXTENSIONS: dict[str, StoreKind] = {
    ".ini": "ini",
    ".cfg": "ini",
    ".conf": "ini",
    ".csv": "delim",
    ".tsv": "delim",
    ".txt": "delim",
}


def _check_encoding(value: str) -> str:
    """Reject unknown codecs and codecs that do not encode "\\n" as one byte.

    Lines are split on the raw ``b"\\n"`` byte before decoding, so only
    ASCII-compatible encodings (UTF-8, Latin-1, cp1252, ...) can be read.
    """
    try:
        codecs.lookup(value)
    except LookupError as exc:
        raise ValueError(f"Unknown encoding {value!r}") from exc
    if "\n".encode(value) != b"\n":
        raise ValueError(
            f"Encoding {value!r} is not ASCII-compatible; lines could not be split"
        )
    return value


class IniConfig(BaseModel):
    """Options for SettingsINI."""

    buffer_size: int = Field(
        DEFAULT_BUFFER_SIZE, gt=0, description="Read chunk size in bytes"
    )
    encoding: str = Field("utf-8", description="Text encoding of the file")

    @field_validator("encoding")
    @classmethod
    def _validate_encoding(cls, value: str) -> str:
        return _check_encoding(value)


class DelimConfig(BaseModel):
    """Options for SpreadsheetDelim."""

    buffer_size: int = Field(
        DEFAULT_BUFFER_SIZE, gt=0, description="Read chunk size in bytes"
    )
    encoding: str = Field("utf-8", description="Text encoding of the file")
    delimiter: str = Field(",", min_length=1, description="Column separator")
    skip_cols: int = Field(0, ge=0, description="Leading columns to drop on load")
    skip_rows: int = Field(0, ge=0, description="Leading lines to drop on load")

    @field_validator("encoding")
    @classmethod
    def _validate_encoding(cls, value: str) -> str:
        return _check_encoding(value)


class FileIOConfig(BaseModel):
    """Top-level configuration for flatfile-io.

    Maps 1:1 to a YAML file such as::

        ini:
          buffer_size: 4096
        delim:
          delimiter: ";"
          skip_rows: 1
        extensions:
          .properties: ini
    """

    ini: IniConfig = Field(default_factory=IniConfig)
    delim: DelimConfig = Field(default_factory=DelimConfig)
    extensions: dict[str, StoreKind] = Field(
        default_factory=lambda: dict(_DEFAULT_EXTENSIONS),
        description="File suffix -> store kind used by open()",
    )

    @field_validator("extensions")
    @classmethod
    def _normalize_suffixes(cls, value: dict[str, StoreKind]) -> dict[str, StoreKind]:
        """Lower-case suffixes and make sure each starts with a dot."""
        normalized: dict[str, StoreKind] = {}
        for suffix, kind in value.items():
            suffix = suffix.strip().lower()
            if not suffix:
                raise ValueError("Extension keys must not be empty")
            if not suffix.startswith("."):
                suffix = "." + suffix
            normalized[suffix] = kind
        return normalized

    def kind_for(self, path: str | Path) -> StoreKind | None:
        """Return the store kind mapped to *path*'s suffix, if any."""
        return self.extensions.get(Path(path).suffix.lower())


def load_config(path: str | Path) -> FileIOConfig:
    """Load and validate a YAML config into a FileIOConfig model.

    Raises:
        LoadingError: If the config file cannot be read.
        InvalidArgumentError: If the config file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as exc:
        raise LoadingError("config", f"Failed to read config {path}: {exc}") from exc
    if raw is None:
        raise InvalidArgumentError("config", f"Config file is empty: {path}")
    logger.info("Loaded config from %s", path)
    return FileIOConfig.model_validate(raw)


def save_config(config: FileIOConfig, path: str | Path) -> None:
    """Serialize a FileIOConfig to YAML.

    Writes a human-readable YAML file with a header comment.

    Raises:
        SavingError: If the file cannot be written.
    """
    path = Path(path)
    data = config.model_dump(mode="json")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write("# flatfile-io configuration\n")
            f.write("# Options used by flatfile_io.open() when building stores.\n\n")
            yaml.dump(
                data,
                f,
                allow_unicode=True,
                default_flow_style=False,
                sort_keys=False,
            )
    except OSError as exc:
        raise SavingError("config", f"Failed to write config {path}: {exc}") from exc
    logger.info("Saved config to %s", path)
