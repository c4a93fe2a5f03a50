"""
Unit tests for the call records CSV reader.

Tests row parsing, line-attributed errors and the skip-invalid policy.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

import pytest

from domain.call import Call
from scripts.call_records import (
    CallRecordError,
    CallsFileError,
    parse_call_timestamp,
    parse_calls,
    parse_duration,
    read_calls,
)

HEADER = "numero origen,numero destino,duracion,fecha\n"


class TestParseCalls:
    """Tests for parsing CSV content into calls."""

    def test_reads_calls_in_file_order(self):
        """Rows become Calls, header skipped"""
        content = HEADER + (
            "+5491167980950,+191167980952,462,2020-11-10T04:02:45Z\n"
            "+5491167910920,+191167980952,392,2020-08-09T04:45:25Z\n"
        )

        assert parse_calls(content) == [
            Call(
                source_phone="+5491167980950",
                destination_phone="+191167980952",
                duration=462,
                timestamp=datetime(2020, 11, 10, 4, 2, 45, tzinfo=timezone.utc),
            ),
            Call(
                source_phone="+5491167910920",
                destination_phone="+191167980952",
                duration=392,
                timestamp=datetime(2020, 8, 9, 4, 45, 25, tzinfo=timezone.utc),
            ),
        ]

    def test_header_only(self):
        """A file with only the header has no calls"""
        assert parse_calls(HEADER) == []

    def test_empty_content(self):
        """An empty file has no calls"""
        assert parse_calls("") == []

    def test_surrounding_whitespace_and_blank_lines(self):
        """Whitespace around fields and blank lines are ignored"""
        content = HEADER + "  +5491167980950, +191167980952 ,462,2020-11-10T04:02:45Z\n\n"

        calls = parse_calls(content)

        assert len(calls) == 1
        assert calls[0].source_phone == "+5491167980950"
        assert calls[0].destination_phone == "+191167980952"

    def test_wrong_number_of_fields(self):
        """Line 3 doesn't have the duration field"""
        content = HEADER + (
            "+5491167980950,+191167980952,462,2020-11-10T04:02:45Z\n"
            "+5491167980950,+191167980952,2020-11-10T04:02:45Z\n"
            "+5491167910920,+191167980952,392,2020-08-09T04:45:25Z\n"
        )

        with pytest.raises(CallRecordError) as exc_info:
            parse_calls(content)

        assert exc_info.value.line == 3
        assert str(exc_info.value) == "record on line 3: wrong number of fields"

    def test_invalid_duration(self):
        """Duration must be whole seconds"""
        content = HEADER + (
            "+5491167980950,+191167980952,462,2020-11-10T04:02:45Z\n"
            "+5491167980950,+191167980952,esto-no-es-duracion,2020-11-10T04:02:45Z\n"
        )

        with pytest.raises(CallRecordError, match=r"record on line 3: parsing duration"):
            parse_calls(content)

    def test_negative_duration(self):
        """Negative durations are rejected"""
        content = HEADER + "+5491167980950,+191167980952,-5,2020-11-10T04:02:45Z\n"

        with pytest.raises(CallRecordError, match=r"record on line 2: parsing duration"):
            parse_calls(content)

    def test_invalid_date(self):
        """Date must be YYYY-MM-DDTHH:MM:SSZ"""
        content = HEADER + (
            "+5491167980950,+191167980952,462,2020-11-10T04:02:45Z\n"
            "+5491167980950,+191167980952,400,2020-11-10T:02:45Z\n"
        )

        with pytest.raises(CallRecordError, match=r"record on line 3: parsing date"):
            parse_calls(content)

    def test_invalid_destination_number(self):
        """Malformed destination number fails the whole read"""
        content = HEADER + (
            "+5491167980950,+191167980952,462,2020-11-10T04:02:45Z\n"
            "+5491167980950,+191167980,400,2020-11-10T04:02:45Z\n"
        )

        with pytest.raises(CallRecordError) as exc_info:
            parse_calls(content)

        assert str(exc_info.value).startswith("record on line 3: destination phone: invalid format")

    def test_invalid_source_number(self):
        """Malformed source number fails the whole read"""
        content = HEADER + (
            "+5491167980950,+191167980952,462,2020-11-10T04:02:45Z\n"
            "+5491167980,+5491167980950,400,2020-11-10T04:02:45Z\n"
        )

        with pytest.raises(CallRecordError) as exc_info:
            parse_calls(content)

        assert str(exc_info.value).startswith("record on line 3: source phone: invalid format")

    def test_skip_invalid_drops_bad_rows(self, caplog):
        """With skip_invalid, malformed rows are logged and dropped"""
        content = HEADER + (
            "+5491167980950,+191167980952,462,2020-11-10T04:02:45Z\n"
            "+5491167980,+5491167980950,400,2020-11-10T04:02:45Z\n"
            "+5491167980950,+191167980952,2020-11-10T04:02:45Z\n"
            "+5491167910920,+191167980952,392,2020-08-09T04:45:25Z\n"
        )

        with caplog.at_level(logging.WARNING, logger="scripts.call_records"):
            calls = parse_calls(content, skip_invalid=True)

        assert [call.duration for call in calls] == [462, 392]
        skipped = [r for r in caplog.records if r.getMessage() == "Skipping invalid call record"]
        assert [r.line for r in skipped] == [3, 4]

    def test_field_over_size_limit(self):
        """A field the csv module refuses is a record error, not a crash"""
        content = HEADER + "+5491167980950," + "1" * 200_000 + ",462,2020-11-10T04:02:45Z\n"

        with pytest.raises(CallRecordError, match=r"field larger than field limit") as exc_info:
            parse_calls(content)

        assert exc_info.value.line == 2

    def test_field_over_size_limit_fails_even_when_skipping(self):
        """The csv module cannot resume after refusing a field"""
        content = HEADER + "+5491167980950," + "1" * 200_000 + ",462,2020-11-10T04:02:45Z\n"

        with pytest.raises(CallRecordError):
            parse_calls(content, skip_invalid=True)


class TestFieldParsers:
    """Tests for the individual field parsers."""

    @pytest.mark.parametrize("raw, expected", [("0", 0), ("462", 462), (" 60 ", 60)])
    def test_parse_duration(self, raw, expected):
        assert parse_duration(raw) == expected

    @pytest.mark.parametrize("raw", ["", "1.5", "-1", "abc", "²"])
    def test_parse_duration_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_duration(raw)

    def test_parse_call_timestamp_is_utc(self):
        result = parse_call_timestamp("2020-11-10T04:02:45Z")

        assert result == datetime(2020, 11, 10, 4, 2, 45, tzinfo=timezone.utc)
        assert result.tzinfo == timezone.utc

    @pytest.mark.parametrize("raw", ["2020-11-10", "2020-11-10T04:02:45", "2020-11-10 04:02:45Z"])
    def test_parse_call_timestamp_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_call_timestamp(raw)


class TestReadCalls:
    """Tests for reading calls from disk."""

    def test_read_calls_from_file(self, tmp_path: Path):
        csv_file = tmp_path / "calls.csv"
        csv_file.write_text(
            HEADER + "+5491167980950,+191167980952,462,2020-11-10T04:02:45Z\n",
            encoding="utf-8",
        )

        calls = read_calls(csv_file)

        assert len(calls) == 1
        assert calls[0].duration == 462

    def test_read_calls_handles_utf8_bom(self, tmp_path: Path):
        csv_file = tmp_path / "calls.csv"
        csv_file.write_text(
            HEADER + "+5491167980950,+191167980952,462,2020-11-10T04:02:45Z\n",
            encoding="utf-8-sig",
        )

        assert len(read_calls(str(csv_file))) == 1

    def test_read_calls_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            read_calls(tmp_path / "missing.csv")

    def test_read_calls_invalid_utf8(self, tmp_path: Path):
        csv_file = tmp_path / "calls.csv"
        csv_file.write_bytes(
            HEADER.encode() + b"+5491167980950,+191167980952,4\xff2,2020-11-10T04:02:45Z\n"
        )

        with pytest.raises(CallsFileError) as exc_info:
            read_calls(csv_file)

        assert exc_info.value.path == csv_file
        assert str(exc_info.value).startswith(f"reading {csv_file}: ")
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_read_calls_directory(self, tmp_path: Path):
        with pytest.raises(CallsFileError) as exc_info:
            read_calls(tmp_path)

        assert isinstance(exc_info.value.__cause__, OSError)
