"""
Communication log formatting: timestamped entries prepended to a lead's notes.
"""

from datetime import datetime

NOTE_SEPARATOR = "\n\n"
NOTE_TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M"
UNKNOWN_REP = "Unknown Rep"


def format_note(text: str, rep_name: str | None, now: datetime | None = None) -> str:
    """Build a log entry: '<dd/mm/yyyy HH:MM> - <rep>: <text>'."""
    timestamp = (now or datetime.now()).strftime(NOTE_TIMESTAMP_FORMAT)
    return f"{timestamp} - {rep_name or UNKNOWN_REP}: {text}"


def prepend_note(entry: str, existing: str | None) -> str:
    """Put the newest entry first, separated from older ones by a blank line."""
    if not existing:
        return entry
    return f"{entry}{NOTE_SEPARATOR}{existing}"
