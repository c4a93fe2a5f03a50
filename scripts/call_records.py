"""
Call records CSV reader.

Reads the calls file handed to the invoice generator. The first row is a
header; every following row has four columns:

    numero origen,numero destino,duracion,fecha
    +5491167980950,+191167980952,462,2020-11-10T04:02:45Z

- Source phone number
- Destination phone number
- Duration (whole seconds)
- Date (ISO8601 in UTC)

By default the first malformed row aborts the whole read with a CallRecordError
naming its line. With skip_invalid=True malformed rows are logged and dropped.
"""

from __future__ import annotations

import csv
import logging
from datetime import datetime, timezone
from io import StringIO
from pathlib import Path
from typing import List

from domain.call import Call
from domain.time import ISO8601_UTC_FORMAT

logger = logging.getLogger(__name__)

CALL_RECORD_FIELDS = 4


class CallRecordError(ValueError):
    """Raised when a CSV row cannot be turned into a Call."""

    def __init__(self, line: int, message: str) -> None:
        self.line = line
        self.message = message
        super().__init__(f"record on line {line}: {message}")


class CallsFileError(ValueError):
    """Raised when the calls file exists but cannot be read as UTF-8 text."""

    def __init__(self, path: Path, cause: Exception) -> None:
        self.path = path
        super().__init__(f"reading {path}: {cause}")


def parse_duration(raw_duration: str) -> int:
    """
    Parse a duration in whole seconds.

    Raises:
        ValueError: If the value is not a non-negative integer
    """
    text = raw_duration.strip()
    if not (text.isascii() and text.isdigit()):
        raise ValueError(f"invalid duration {raw_duration!r}, expected whole seconds")
    return int(text)


def parse_call_timestamp(raw_timestamp: str) -> datetime:
    """
    Parse a 2020-11-10T04:02:45Z timestamp into a UTC datetime.

    Raises:
        ValueError: If the value does not follow the format
    """
    try:
        parsed = datetime.strptime(raw_timestamp.strip(), ISO8601_UTC_FORMAT)
    except ValueError:
        raise ValueError(
            f"invalid date {raw_timestamp!r}, expected YYYY-MM-DDTHH:MM:SSZ"
        ) from None
    return parsed.replace(tzinfo=timezone.utc)


def record_to_call(record: List[str]) -> Call:
    """
    Create a Call from the fields of a CSV row.

    Raises:
        ValueError: If duration or date cannot be parsed
        InvalidPhoneNumberError: If either phone number is malformed
    """
    source_phone, destination_phone, raw_duration, raw_timestamp = (
        field.strip() for field in record
    )

    try:
        duration = parse_duration(raw_duration)
    except ValueError as e:
        raise ValueError(f"parsing duration: {e}") from e

    try:
        timestamp = parse_call_timestamp(raw_timestamp)
    except ValueError as e:
        raise ValueError(f"parsing date: {e}") from e

    return Call(
        destination_phone=destination_phone,
        source_phone=source_phone,
        duration=duration,
        timestamp=timestamp,
    )


def parse_calls(content: str, skip_invalid: bool = False) -> List[Call]:
    """
    Parse the content of a calls CSV file.

    Args:
        content: Full CSV text, header row included
        skip_invalid: Drop malformed rows instead of failing

    Returns:
        Calls in file order

    Raises:
        CallRecordError: On the first malformed row, unless skip_invalid.
            Rows the csv module itself cannot tokenize always fail.
    """
    reader = csv.reader(StringIO(content))
    calls: List[Call] = []

    try:
        # Skip the header row
        next(reader, None)

        for record in reader:
            line = reader.line_num

            if not record or all(not field.strip() for field in record):
                continue

            try:
                if len(record) != CALL_RECORD_FIELDS:
                    raise ValueError("wrong number of fields")
                calls.append(record_to_call(record))

            except ValueError as e:
                if not skip_invalid:
                    raise CallRecordError(line, str(e)) from e

                logger.warning(
                    "Skipping invalid call record",
                    extra={"line": line, "error": str(e), "csv_row": record},
                )

    except csv.Error as e:
        raise CallRecordError(reader.line_num, str(e)) from e

    return calls


def read_calls(csv_path: str | Path, skip_invalid: bool = False) -> List[Call]:
    """
    Read calls from a CSV file.

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        CallsFileError: If the file cannot be read or is not valid UTF-8
        CallRecordError: On the first malformed row, unless skip_invalid
    """
    csv_file = Path(csv_path)
    if not csv_file.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    try:
        with open(csv_file, "r", encoding="utf-8-sig", newline="") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise CallsFileError(csv_file, e) from e

    calls = parse_calls(content, skip_invalid=skip_invalid)
    logger.info(
        "Read call records",
        extra={"csv_path": str(csv_file), "calls": len(calls)},
    )
    return calls


__all__ = [
    "CallRecordError",
    "CallsFileError",
    "parse_call_timestamp",
    "parse_calls",
    "parse_duration",
    "read_calls",
    "record_to_call",
]
