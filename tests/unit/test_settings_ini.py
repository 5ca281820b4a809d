"""
Unit tests for the sectioned key/value store (flatfile_io.stores.settings_ini).

Covers the load rules (headers, comments, pairs, error cases), the save
layout, the accessor contract (add / set / get / exists) and the typed
getters. All files live under ``tmp_path``.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from flatfile_io.exceptions import (
    AlreadyExistsError,
    ErrorKind,
    InvalidArgumentError,
    LoadingError,
    NotFoundError,
    ParsingError,
    SavingError,
)
from flatfile_io.stores.settings_ini import SettingsINI


def _load(write_file, content: str, buffer_size: int = 4096) -> SettingsINI:
    path = write_file("test.ini", content)
    si = SettingsINI(buffer_size)
    si.load(path)
    return si


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    """Tests for SettingsINI() options."""

    def test_starts_empty(self):
        si = SettingsINI()
        assert si.headers == {}
        assert si.filename == ""
        assert len(si) == 0

    def test_invalid_buffer(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            SettingsINI(buffer_size=0)
        assert exc_info.value.source == "SettingsINI"

    @pytest.mark.parametrize("encoding", ["utf-16", "utf-32", "no-such-codec"])
    def test_unsupported_encoding(self, encoding):
        with pytest.raises(InvalidArgumentError, match="encoding"):
            SettingsINI(encoding=encoding)

    def test_remembered_filename(self, tmp_path):
        si = SettingsINI(filename=tmp_path / "a.ini")
        assert si.filename == str(tmp_path / "a.ini")


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------

class TestLoad:
    """Tests for SettingsINI.load()."""

    def test_two_sections(self, write_file):
        si = _load(write_file, "[A]\nx = 1\n[B]\ny = 2\n")
        assert si.sections == ["A", "B"]
        assert si.get("A", "x") == ("1", True)
        assert si.get("B", "y") == ("2", True)

    def test_pairs_before_header_go_to_unnamed_section(self, write_file):
        si = _load(write_file, "top = level\n[A]\nx = 1\n")
        assert si.get("", "top") == ("level", True)
        assert si.header_exists("")
        assert not si.value_exists("A", "top")

    def test_whitespace_trimmed(self, write_file):
        si = _load(write_file, "   [A]   \n\t key   =   some value  \n")
        assert si.get("A", "key") == ("some value", True)

    def test_header_name_not_trimmed(self, write_file):
        si = _load(write_file, "[ A ]\nx = 1\n")
        assert si.header_exists(" A ")

    def test_comments_and_blank_lines_skipped(self, write_file):
        si = _load(write_file, "// comment\n\n[A]\n   // indented comment\nx = 1\n\n")
        assert si.to_dict() == {"A": {"x": "1"}}

    def test_value_may_contain_equals(self, write_file):
        si = _load(write_file, "[A]\nexpr = a=b\n")
        assert si.get("A", "expr") == ("a=b", True)

    def test_duplicate_key_overwrites(self, write_file):
        si = _load(write_file, "[A]\nx = 1\nx = 2\n")
        assert si.get("A", "x") == ("2", True)

    def test_empty_section_kept(self, write_file):
        si = _load(write_file, "[Empty]\n[A]\nx = 1\n")
        assert si.header_exists("Empty")
        assert si.headers["Empty"] == {}

    def test_no_trailing_newline(self, write_file):
        si = _load(write_file, "[A]\nx = 1")
        assert si.get("A", "x") == ("1", True)

    def test_crlf_line_endings(self, write_file):
        si = _load(write_file, "[A]\r\nx = 1\r\n")
        assert si.get("A", "x") == ("1", True)

    def test_small_buffer(self, write_file):
        long_key = "ThisIsAnAttemptAtQuiteTheLongVariableName" * 3
        si = _load(write_file, f"[LongHeader{'x' * 50}]\n{long_key} = 42\n", buffer_size=4)
        assert si.get(f"LongHeader{'x' * 50}", long_key) == ("42", True)

    def test_load_replaces_previous_contents(self, write_file):
        si = _load(write_file, "[A]\nx = 1\n")
        si.load(write_file("other.ini", "[B]\ny = 2\n"))
        assert si.sections == ["B"]

    def test_load_remembers_filename(self, write_file):
        path = write_file("test.ini", "[A]\nx = 1\n")
        si = SettingsINI()
        si.load(path)
        assert si.filename == str(path)
        path.write_text("[A]\nx = 2\n", encoding="utf-8")
        si.load()
        assert si.get("A", "x") == ("2", True)


class TestLoadErrors:
    """Malformed input and I/O failures."""

    @pytest.mark.parametrize(
        "content, match",
        [
            ("[]\n", "No header name"),
            ("[A\n", "Invalid header syntax"),
            ("[\n", "Invalid header syntax"),
            ("[A]\n[A]\n", "specified twice"),
            ("[A]\njust text\n", "equal-character"),
            ("x\n", "equal-character"),
            ("[A]\n = value\n", "without name"),
            ("[A]\nkey = \n", "without value"),
            ("[A]\nkey =\n", "without value"),
        ],
    )
    def test_parsing_errors(self, write_file, content, match):
        path = write_file("bad.ini", content)
        si = SettingsINI()
        with pytest.raises(ParsingError, match=match) as exc_info:
            si.load(path)
        assert exc_info.value.kind is ErrorKind.PARSING
        assert exc_info.value.source == "SettingsINI"

    def test_error_reports_line_number(self, write_file):
        path = write_file("bad.ini", "[A]\nx = 1\n\n[B\n")
        with pytest.raises(ParsingError, match="line 4"):
            SettingsINI().load(path)

    def test_failed_load_leaves_store_empty(self, write_file):
        si = _load(write_file, "[Keep]\nx = 1\n")
        path = write_file("bad.ini", "[A]\nx = 1\n[A]\n")
        with pytest.raises(ParsingError):
            si.load(path)
        assert si.headers == {}

    def test_no_filename(self):
        with pytest.raises(InvalidArgumentError, match="No filename"):
            SettingsINI().load()

    def test_missing_file(self, tmp_path):
        si = SettingsINI()
        with pytest.raises(LoadingError):
            si.load(tmp_path / "missing.ini")
        # the name is still remembered for a later retry
        assert si.filename == str(tmp_path / "missing.ini")

    def test_undecodable_file(self, write_file):
        path = write_file("latin.ini", b"[A]\nx = \xff\xfe\n")
        with pytest.raises(LoadingError, match="decode"):
            SettingsINI().load(path)

    def test_custom_encoding(self, write_file):
        path = write_file("latin.ini", "[A]\nname = café\n".encode("latin-1"))
        si = SettingsINI(encoding="latin-1")
        si.load(path)
        assert si.get("A", "name") == ("café", True)


# ---------------------------------------------------------------------------
# Save
# ---------------------------------------------------------------------------

class TestSave:
    """Tests for SettingsINI.save()."""

    def test_layout(self, tmp_path):
        si = SettingsINI()
        si.add("A", "x", "1")
        si.add("", "top", "level")
        si.add("B", "y", "2")
        path = tmp_path / "out.ini"
        si.save(path)
        assert path.read_text(encoding="utf-8") == (
            "top = level\n[A]\nx = 1\n[B]\ny = 2\n"
        )

    def test_unnamed_section_written_first(self, tmp_path):
        """Unnamed pairs added last still precede every header on disk."""
        si = SettingsINI()
        si.add("A", "x", "1")
        si.add("", "late", "value")
        path = tmp_path / "out.ini"
        si.save(path)
        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "late = value"

        reloaded = SettingsINI()
        reloaded.load(path)
        assert reloaded.get("", "late") == ("value", True)
        assert not reloaded.value_exists("A", "late")

    def test_save_empty_store(self, tmp_path):
        path = tmp_path / "out.ini"
        SettingsINI().save(path)
        assert path.read_text(encoding="utf-8") == ""

    def test_save_uses_remembered_filename(self, write_file):
        si = _load(write_file, "[A]\nx = 1\n")
        si.set("A", "x", "9")
        si.save()
        reloaded = SettingsINI()
        reloaded.load(si.filename)
        assert reloaded.get("A", "x") == ("9", True)

    def test_save_remembers_explicit_filename(self, tmp_path):
        si = SettingsINI()
        si.add("A", "x", "1")
        si.save(tmp_path / "first.ini")
        assert si.filename == str(tmp_path / "first.ini")

    def test_no_filename(self):
        with pytest.raises(InvalidArgumentError):
            SettingsINI().save("")

    def test_unwritable_path(self, tmp_path):
        si = SettingsINI()
        si.add("A", "x", "1")
        with pytest.raises(SavingError) as exc_info:
            si.save(tmp_path / "no" / "such" / "dir" / "out.ini")
        assert exc_info.value.kind is ErrorKind.SAVING


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------

class TestAccessors:
    """Tests for header_exists / value_exists / add / set / get."""

    def test_add_creates_section(self):
        si = SettingsINI()
        si.add("New", "k", "v")
        assert si.header_exists("New")
        assert "New" in si
        assert si.value_exists("New", "k")

    def test_add_existing_fails_and_keeps_value(self):
        si = SettingsINI()
        si.add("A", "k", "old")
        with pytest.raises(AlreadyExistsError):
            si.add("A", "k", "new")
        assert si.get("A", "k") == ("old", True)

    def test_set_overwrites(self):
        si = SettingsINI()
        si.add("A", "k", "old")
        si.set("A", "k", "new")
        assert si.get("A", "k") == ("new", True)

    def test_set_missing_section_creates_nothing(self):
        si = SettingsINI()
        with pytest.raises(NotFoundError, match="header"):
            si.set("A", "k", "v")
        assert not si.header_exists("A")

    def test_set_missing_key_creates_nothing(self):
        si = SettingsINI()
        si.add("A", "other", "v")
        with pytest.raises(NotFoundError, match="value pair"):
            si.set("A", "k", "v")
        assert not si.value_exists("A", "k")

    def test_get_absent(self):
        si = SettingsINI()
        si.add("A", "k", "v")
        assert si.get("B", "k") == ("", False)
        assert si.get("A", "missing") == ("", False)
        # lookups never create sections or keys
        assert si.sections == ["A"]
        assert si.headers["A"] == {"k": "v"}

    def test_value_exists_missing_section(self):
        assert SettingsINI().value_exists("nope", "k") is False


# ---------------------------------------------------------------------------
# Typed getters
# ---------------------------------------------------------------------------

class TestTypedGetters:
    """Tests for get_int / get_uint / get_float32 / get_float64."""

    @pytest.fixture()
    def si(self) -> SettingsINI:
        si = SettingsINI()
        si.add("N", "int", "-12")
        si.add("N", "uint", "34")
        si.add("N", "float", "2.5")
        si.add("N", "text", "x")
        return si

    def test_get_int(self, si):
        assert si.get_int("N", "int") == (-12, True, None)

    def test_get_uint(self, si):
        assert si.get_uint("N", "uint") == (34, True, None)

    def test_get_uint_negative(self, si):
        value, found, error = si.get_uint("N", "int")
        assert (value, found) == (0, True)
        assert isinstance(error, ParsingError)

    def test_get_float32(self, si):
        result = si.get_float32("N", "float")
        assert result.value == np.float32(2.5)
        assert result.found is True
        assert result.error is None

    def test_get_float64(self, si):
        assert si.get_float64("N", "int") == (-12.0, True, None)

    def test_non_numeric_returns_error(self, si):
        value, found, error = si.get_int("N", "text")
        assert value == 0
        assert found is True
        assert isinstance(error, ParsingError)
        assert error.source == "SettingsINI"
        assert "'x'" in error.message

    @pytest.mark.parametrize("getter", ["get_int", "get_uint", "get_float32", "get_float64"])
    def test_absent_returns_not_found_without_error(self, si, getter):
        value, found, error = getattr(si, getter)("N", "missing")
        assert value == 0
        assert found is False
        assert error is None


# ---------------------------------------------------------------------------
# Interop
# ---------------------------------------------------------------------------

class TestInterop:
    """Tests for to_dict() / to_dataframe()."""

    def test_to_dict_is_a_copy(self):
        si = SettingsINI()
        si.add("A", "k", "v")
        d = si.to_dict()
        d["A"]["k"] = "changed"
        assert si.get("A", "k") == ("v", True)

    def test_to_dataframe(self):
        si = SettingsINI()
        si.add("", "top", "1")
        si.add("A", "k", "v")
        df = si.to_dataframe()
        assert list(df.columns) == ["section", "key", "value"]
        assert df.values.tolist() == [["", "top", "1"], ["A", "k", "v"]]

    def test_to_dataframe_empty(self):
        df = SettingsINI().to_dataframe()
        assert isinstance(df, pd.DataFrame)
        assert len(df) == 0
        assert list(df.columns) == ["section", "key", "value"]
