"""
Demo script: open flat files via the public API and log their contents.

Usage:
    python scripts/inspect_file.py settings.ini data.csv
    python scripts/inspect_file.py data.csv --config flatfile.yaml
    python scripts/inspect_file.py data.csv --export out/data.parquet

Each path is opened with ``flatfile_io.open()``, which picks the store
from the file suffix. INI files are summarised per section, delimited
files per row. With ``--export`` the (single) opened store is also
written out as CSV or Parquet, depending on the export suffix.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("inspect_file")

_PREVIEW_ROWS = 10


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _describe_settings(settings) -> None:
    for header, values in settings.headers.items():
        log.info("  [%s]  %d value(s)", header or "<unnamed>", len(values))
        for name, value in values.items():
            log.info("    %s = %s", name, value)


def _describe_sheet(sheet) -> None:
    log.info("  %d row(s), widest row %d cell(s)", sheet.row_count, sheet.max_columns)
    for i, row in enumerate(sheet.data[:_PREVIEW_ROWS]):
        log.info("  %4d: %s", i, sheet.delimiter.join(row))
    if sheet.row_count > _PREVIEW_ROWS:
        log.info("  ... %d more row(s)", sheet.row_count - _PREVIEW_ROWS)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    import flatfile_io

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("paths", nargs="+", help="INI or delimited files to open")
    parser.add_argument("--config", help="YAML config for flatfile_io.open()")
    parser.add_argument("--export", help="Export the opened store (.csv or .parquet)")
    args = parser.parse_args()

    if args.export and len(args.paths) != 1:
        parser.error("--export takes exactly one input path")

    status = 0
    for path in args.paths:
        log.info("=" * 70)
        log.info("Opening: %s", path)
        try:
            store = flatfile_io.open(path, config=args.config)
        except flatfile_io.FileIOError as exc:
            log.error("FAILED  %s  (%s)", path, exc)
            status = 1
            continue

        if isinstance(store, flatfile_io.SettingsINI):
            _describe_settings(store)
        else:
            _describe_sheet(store)

        if args.export:
            fmt = "parquet" if Path(args.export).suffix.lower() == ".parquet" else "csv"
            written = flatfile_io.export_store(store, args.export, output_format=fmt)
            log.info("Exported to %s", written)

    return status


if __name__ == "__main__":
    raise SystemExit(main())
