"""
Record reader for converting a contacts CSV export into Record objects.
Handles header mapping, birthday normalization and best-effort row filtering.
"""

import csv
import io
import re
import sys
from datetime import date
from typing import BinaryIO, Dict, Iterator, List, Mapping, Optional

from dateutil import parser as dateutil_parser

from birthday_ics.logging_helper import Log
from birthday_ics.record_models import Record
from birthday_ics.settings import resolve_settings


FIRST_NAME_COLUMN = "First Name"
LAST_NAME_COLUMN = "Last Name"
BIRTHDAY_COLUMN = "Birthday"

YEAR_OMITTED_PREFIX = "--"
_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")

# Contact exports can carry very long notes; the csv default is 131072 characters.
CSV_FIELD_SIZE_LIMIT = sys.maxsize


def parse_birthday(value: Optional[str], settings: Optional[Mapping] = None) -> Optional[date]:
    """
    Parse a birthday cell into a date.

    Year-omitted values ('--MM-DD') get the placeholder year, so '--06-15'
    becomes 1900-06-15 with the default settings.

    Args:
        value: Raw cell text, or None if the column is missing
        settings: Optional setting overrides

    Returns:
        date, or None if the value is missing or not a valid YYYY-M-D date
        (month and day may be one or two digits)
    """
    if value is None:
        return None

    text = value.strip()
    if text.startswith(YEAR_OMITTED_PREFIX):
        year = resolve_settings(settings)["placeholder_year"]
        text = f"{year}-{text[len(YEAR_OMITTED_PREFIX):]}"

    match = _ISO_DATE_RE.match(text)
    if not match:
        return None

    year, month, day = match.groups()
    try:
        return dateutil_parser.isoparse(f"{year}-{int(month):02d}-{int(day):02d}").date()
    except ValueError:
        # e.g. 1900-02-29
        return None


def to_record(row: Mapping[str, str], settings: Optional[Mapping] = None) -> Optional[Record]:
    """
    Build a Record from one header-mapped CSV row.

    Args:
        row: Column name -> cell text
        settings: Optional setting overrides

    Returns:
        Record, or None if the row has no usable birthday
    """
    birthday = parse_birthday(row.get(BIRTHDAY_COLUMN), settings)
    if birthday is None:
        return None

    first_name = row.get(FIRST_NAME_COLUMN) or ""
    last_name = row.get(LAST_NAME_COLUMN) or ""
    return Record(name=(first_name + " " + last_name).strip(), birthday=birthday)


def _has_undecodable_bytes(values: List[str]) -> bool:
    for value in values:
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            return True
    return False


def read_rows(text: str) -> Iterator[Dict[str, str]]:
    """
    Yield each data row of CSV text as a column name -> value mapping.

    The first row is the header. Rows the csv module cannot parse, rows with a
    different number of fields than the header, and rows with bytes that were
    not valid UTF-8 are skipped. Fields of any size are accepted.
    """
    previous_limit = csv.field_size_limit(CSV_FIELD_SIZE_LIMIT)
    try:
        reader = csv.reader(io.StringIO(text, newline=""))
        try:
            header = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            Log.warn(f"Unreadable CSV header: {e}")
            return

        while True:
            try:
                values = next(reader)
            except StopIteration:
                return
            except csv.Error:
                # the reader resumes on the next physical line
                continue

            if len(values) != len(header):
                continue
            if _has_undecodable_bytes(values):
                continue
            yield dict(zip(header, values))
    finally:
        csv.field_size_limit(previous_limit)


def read_records(stream: Optional[BinaryIO] = None, settings: Optional[Mapping] = None) -> List[Record]:
    """
    Read the whole CSV export from a binary stream and extract Records.

    Args:
        stream: Binary input stream (defaults to stdin)
        settings: Optional setting overrides

    Returns:
        Records in input order; rows without a usable birthday are left out

    Raises:
        OSError: if the stream cannot be read
    """
    Log.section("Record Reader")
    if stream is None:
        stream = sys.stdin.buffer

    data = stream.read()
    text = data.decode("utf-8-sig", errors="surrogateescape")

    records = []
    for row in read_rows(text):
        record = to_record(row, settings)
        if record is not None:
            records.append(record)

    Log.info(f"Read {len(records)} birthday record(s)")
    Log.kv({"stage": "read", "records": len(records)})
    return records
