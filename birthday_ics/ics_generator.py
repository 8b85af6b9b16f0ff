"""
ICS Generator for creating iCalendar (.ics) files.
Generates an RFC5545-compliant calendar with one yearly recurring event per birthday.
"""

import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from dateutil import tz as dateutil_tz

from birthday_ics.logging_helper import Log
from birthday_ics.record_models import Record
from birthday_ics.settings import resolve_settings


MAX_LINE_OCTETS = 75
CRLF = "\r\n"


def escape_ical_text(text: Optional[str]) -> str:
    """
    Escape text for iCalendar format (RFC5545).
    Escapes commas, semicolons, backslashes, and newlines.

    Args:
        text: Text to escape

    Returns:
        Escaped text safe for iCalendar
    """
    if text is None:
        return ""

    # Replace backslashes first (before other replacements)
    text = text.replace('\\', '\\\\')
    text = text.replace(';', '\\;')
    text = text.replace(',', '\\,')
    text = text.replace('\r\n', '\\n')
    text = text.replace('\n', '\\n')
    text = text.replace('\r', '')
    return text


def fold_ical_line(line: str) -> str:
    """
    Fold a content line to at most 75 octets per physical line.
    Continuation lines start with a single space; UTF-8 characters are never split.

    Args:
        line: Unfolded content line

    Returns:
        Folded line, physical lines joined with CRLF
    """
    lines = []
    current_line = ""

    for char in line:
        test_line = current_line + char
        if len(test_line.encode('utf-8')) <= MAX_LINE_OCTETS:
            current_line = test_line
        else:
            lines.append(current_line)
            current_line = " " + char

    lines.append(current_line)
    return CRLF.join(lines)


def format_ical_date(d: date) -> str:
    """Format a date as an iCalendar DATE value (YYYYMMDD)."""
    return d.strftime('%Y%m%d')


def format_ical_datetime(dt: datetime) -> str:
    """
    Format datetime to iCalendar format (UTC).

    Args:
        dt: UTC datetime object

    Returns:
        Formatted datetime string (YYYYMMDDTHHMMSSZ)
    """
    return dt.strftime('%Y%m%dT%H%M%SZ')


def build_event_lines(record: Record, stamp: datetime, settings: Optional[Mapping] = None) -> List[str]:
    """
    Build the unfolded VEVENT lines for one birthday record.

    Args:
        record: Record to convert
        stamp: UTC creation timestamp used for DTSTAMP
        settings: Optional setting overrides

    Returns:
        Content lines from BEGIN:VEVENT to END:VEVENT, with exactly one VALARM
    """
    config = resolve_settings(settings)
    summary = config["summary_template"].format(name=record.name)

    return [
        "BEGIN:VEVENT",
        f"UID:{uuid.uuid4()}",
        f"DTSTAMP:{format_ical_datetime(stamp)}",
        f"DTSTART;VALUE=DATE:{format_ical_date(record.birthday)}",
        f"SUMMARY:{escape_ical_text(summary)}",
        "RRULE:FREQ=YEARLY",
        "BEGIN:VALARM",
        "ACTION:AUDIO",
        f"TRIGGER;RELATED=END:{config['alarm_trigger']}",
        "END:VALARM",
        "END:VEVENT",
    ]


def build_calendar(records: Iterable[Record], settings: Optional[Mapping] = None) -> str:
    """
    Build the full VCALENDAR document for the given records.

    Events keep the order of the records. An empty input still produces a
    valid calendar with no events.

    Args:
        records: Records to convert
        settings: Optional setting overrides

    Returns:
        Serialized calendar text with CRLF line endings
    """
    config = resolve_settings(settings)
    stamp = datetime.now(dateutil_tz.tzutc())

    ics_lines = []
    ics_lines.append("BEGIN:VCALENDAR")
    ics_lines.append("VERSION:2.0")
    ics_lines.append(f"PRODID:{config['product_id']}")
    ics_lines.append("CALSCALE:GREGORIAN")
    for record in records:
        ics_lines.extend(build_event_lines(record, stamp, config))
    ics_lines.append("END:VCALENDAR")

    return CRLF.join(fold_ical_line(line) for line in ics_lines) + CRLF


def write_calendar(
    records: Iterable[Record],
    path: Optional[Path] = None,
    settings: Optional[Mapping] = None,
) -> Path:
    """
    Generate the calendar and write it, replacing any existing file.

    Args:
        records: Records to convert
        path: Output path (defaults to the configured file name in the working directory)
        settings: Optional setting overrides

    Returns:
        Path of the written file

    Raises:
        OSError: if the file cannot be opened or written
    """
    Log.section("ICS Generator")
    config = resolve_settings(settings)
    records = list(records)
    ics_path = Path(path) if path is not None else Path.cwd() / config["output_filename"]

    ics_content = build_calendar(records, config)
    ics_path.write_bytes(ics_content.encode('utf-8'))

    Log.info(f"ICS file generated: {ics_path}")
    Log.kv({
        "stage": "ics",
        "result": "success",
        "ics_path": str(ics_path),
        "events": len(records),
    })
    return ics_path
