"""
Progress and failure logging for the birthday converter.

Each stage (reading the CSV, writing birthdays.ics) prints a section header
and one '[KV]' summary such as 'stage=read | records=3'; fatal I/O problems
are reported as '[ERROR]' lines. Skipped rows are never logged. Everything
goes to stderr, so stdout stays untouched.
"""

import sys


def _log(message: str):
    """Write message to stderr."""
    print(message, file=sys.stderr)


class Log:
    """Simple logging class that outputs to stderr with formatted prefixes."""

    @staticmethod
    def section(title: str):
        """Print a section header: blank line + '===== TITLE ====='"""
        _log("")
        _log(f"===== {title} =====")

    @staticmethod
    def info(message: str):
        """Print an info message: '[INFO] message'"""
        _log(f"[INFO] {message}")

    @staticmethod
    def warn(message: str):
        """Print a warning message: '[WARN] message'"""
        _log(f"[WARN] {message}")

    @staticmethod
    def error(message: str):
        """Print an error message: '[ERROR] message'"""
        _log(f"[ERROR] {message}")

    @staticmethod
    def kv(pairs: dict):
        """
        Print key-value pairs: '[KV] key=value | key2=value2'

        Args:
            pairs: Dictionary of key-value pairs to print
        """
        kv_string = " | ".join([f"{k}={v}" for k, v in pairs.items()])
        _log(f"[KV] {kv_string}")
