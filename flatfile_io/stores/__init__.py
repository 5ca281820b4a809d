"""
Stores sub-package for flatfile-io.

Contains one store per flat-file format. Each store owns an in-memory
structure and loads / saves it wholesale.

- base.py defines the FileStore ABC and the Settings / Spreadsheet
  contracts, including the shared typed getters.
- settings_ini.py implements SettingsINI for INI-style key/value files.
- spreadsheet_delim.py implements SpreadsheetDelim for delimited tables.
"""

from flatfile_io.stores.base import FileStore, Lookup, Settings, Spreadsheet
from flatfile_io.stores.settings_ini import SettingsINI
from flatfile_io.stores.spreadsheet_delim import SpreadsheetDelim

__all__ = [
    "FileStore",
    "Lookup",
    "Settings",
    "SettingsINI",
    "Spreadsheet",
    "SpreadsheetDelim",
]
