"""
Converter settings for birthday calendar generation.

There is no settings file: the defaults below are what the command line tool
uses. Library callers may pass a partial mapping of overrides (for example a
different summary template for another locale).
"""

from __future__ import annotations

from typing import Mapping, Optional, TypedDict

from birthday_ics.logging_helper import Log


OUTPUT_FILENAME = "birthdays.ics"
PRODUCT_ID = "-//birthday-ics//Birthday Calendar//EN"
SUMMARY_TEMPLATE = "Geburtstag {name}"
ALARM_TRIGGER = "PT8H"
PLACEHOLDER_YEAR = 1900


class ConverterSettings(TypedDict, total=False):
    output_filename: str
    product_id: str
    summary_template: str
    alarm_trigger: str
    placeholder_year: int


DEFAULT_SETTINGS: ConverterSettings = {
    "output_filename": OUTPUT_FILENAME,
    "product_id": PRODUCT_ID,
    "summary_template": SUMMARY_TEMPLATE,
    "alarm_trigger": ALARM_TRIGGER,
    "placeholder_year": PLACEHOLDER_YEAR,
}


def resolve_settings(overrides: Optional[Mapping] = None) -> ConverterSettings:
    """
    Merge overrides onto the defaults.

    Unknown keys are ignored with a warning so a typo never silently changes
    the output.
    """
    merged: ConverterSettings = DEFAULT_SETTINGS.copy()
    if not overrides:
        return merged

    for key, value in overrides.items():
        if key in DEFAULT_SETTINGS:
            merged[key] = value  # type: ignore[literal-required]
        else:
            Log.warn(f"Ignoring unknown setting '{key}'")
    return merged
