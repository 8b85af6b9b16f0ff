"""
Record data model for birthday extraction.
Defines Record (one person with a birthday, ready for ICS generation).
"""

from dataclasses import dataclass
from datetime import date


@dataclass
class Record:
    """
    One person read from the contacts export.
    The birthday is always a valid date; rows without one never become a Record.
    """
    name: str
    birthday: date
