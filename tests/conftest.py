"""
Shared test fixtures for flatfile-io tests.

All tests write their input files to pytest's ``tmp_path``; no files
outside the temporary directory are read or written.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (save/load cycles through the public API)",
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def write_file(tmp_path: Path) -> Callable[[str, str | bytes], Path]:
    """Return a helper that writes *content* to ``tmp_path / name``.

    ``str`` content is written as UTF-8 with newlines untouched;
    ``bytes`` are written verbatim.
    """
    def _write(name: str, content: str | bytes) -> Path:
        path = tmp_path / name
        if isinstance(content, str):
            content = content.encode("utf-8")
        path.write_bytes(content)
        return path

    return _write
