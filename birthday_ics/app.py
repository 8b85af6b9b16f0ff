"""
Main entry point for the birthday calendar converter.
Reads a contacts CSV export from stdin and writes birthdays.ics.
"""

import sys

from birthday_ics.ics_generator import write_calendar
from birthday_ics.logging_helper import Log
from birthday_ics.record_reader import read_records


def main() -> int:
    """Main entry point for the converter. Returns the process exit status."""
    Log.section("Birthday ICS")

    try:
        records = read_records()
    except OSError as e:
        Log.error(f"Failed to read input: {e}")
        return 1

    try:
        write_calendar(records)
    except OSError as e:
        Log.error(f"Failed to write calendar: {e}")
        Log.kv({"stage": "ics", "result": "failed", "error": str(e)})
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
