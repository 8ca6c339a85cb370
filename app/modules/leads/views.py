"""
Read-side helpers for the lead list: relative times, ordering and the reminder panel.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime

from app.models.lead import Lead

logger = logging.getLogger(__name__)

_INTERVALS = (
    ("year", 31536000),
    ("month", 2592000),
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse the sheet/reminder timestamp formats into a naive local datetime."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_distance_to_now(value: str | None, now: datetime | None = None) -> str:
    """Human relative time, e.g. '3 days ago' or '2 hours from now'."""
    date = parse_timestamp(value)
    if date is None:
        if value:
            logger.debug("Could not parse date: %s", value)
        return ""

    now = now or datetime.now()
    seconds = math.floor((now - date).total_seconds())
    if abs(seconds) < 5:
        return "just now"

    suffix = " ago" if seconds > 0 else " from now"
    abs_seconds = abs(seconds)

    for unit, length in _INTERVALS:
        interval = abs_seconds / length
        if interval > 1:
            count = math.floor(interval)
            return f"{count} {unit}{'s' if count > 1 else ''}{suffix}"

    return f"{abs_seconds} second{'s' if abs_seconds > 1 else ''}{suffix}"


def sort_by_last_updated(leads: list[Lead]) -> list[Lead]:
    """Most recently updated first; leads without a LastUpdated go last."""
    def key(lead: Lead) -> float:
        updated = parse_timestamp(lead.LastUpdated)
        return updated.timestamp() if updated else 0.0

    return sorted(leads, key=key, reverse=True)


@dataclass
class ReminderView:
    lead: Lead
    due_at: datetime
    overdue: bool
    relative: str


def upcoming_reminders(leads: list[Lead], now: datetime | None = None) -> list[ReminderView]:
    """Leads with a reminder, soonest first. Overdue reminders stay listed, just flagged."""
    now = now or datetime.now()
    views = []
    for lead in leads:
        due_at = parse_timestamp(lead.ReminderDateTime)
        if due_at is None:
            continue
        views.append(ReminderView(
            lead=lead,
            due_at=due_at,
            overdue=due_at < now,
            relative=format_distance_to_now(lead.ReminderDateTime, now=now),
        ))
    views.sort(key=lambda v: v.due_at)
    return views
