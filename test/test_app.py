import io
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import icalendar

from birthday_ics import app


CONTACTS_CSV = (
    "First Name,Last Name,Birthday\n"
    "Anna,,1990-06-15\n"
    "Ben,Meyer,not-a-date\n"
    "Carla,Klein,--06-15\n"
)


class TestMain(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        cwd = os.getcwd()
        os.chdir(self.tmp.name)
        self.addCleanup(os.chdir, cwd)
        self.output = Path(self.tmp.name) / "birthdays.ics"

    def _run(self, text):
        stdin = io.TextIOWrapper(io.BytesIO(text.encode("utf-8")), encoding="utf-8")
        with mock.patch.object(sys, "stdin", stdin):
            return app.main()

    def test_converts_stdin_to_birthdays_ics(self):
        self.assertEqual(self._run(CONTACTS_CSV), 0)

        cal = icalendar.Calendar.from_ical(self.output.read_bytes())
        events = cal.walk("VEVENT")
        self.assertEqual([str(e["SUMMARY"]) for e in events],
                         ["Geburtstag Anna", "Geburtstag Carla Klein"])
        self.assertEqual([e.decoded("DTSTART").isoformat() for e in events],
                         ["1990-06-15", "1900-06-15"])
        for event in events:
            self.assertEqual(len(event.walk("VALARM")), 1)

    def test_no_valid_rows_still_writes_calendar(self):
        self.assertEqual(self._run("First Name,Birthday\nAnna,unknown\n"), 0)
        cal = icalendar.Calendar.from_ical(self.output.read_bytes())
        self.assertEqual(len(cal.walk("VEVENT")), 0)

    def test_unwritable_output_fails(self):
        self.output.mkdir()
        self.assertEqual(self._run(CONTACTS_CSV), 1)

    def test_unreadable_input_fails(self):
        stdin = mock.Mock()
        stdin.buffer.read.side_effect = OSError("Input/output error")
        with mock.patch.object(sys, "stdin", stdin):
            self.assertEqual(app.main(), 1)
        self.assertFalse(self.output.exists())
