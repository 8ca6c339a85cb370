"""
Unit tests for note formatting and the lead list view helpers.
"""
from datetime import datetime, timedelta

from app.models.lead import Lead
from app.modules.leads.notes import format_note, prepend_note
from app.modules.leads.views import (
    format_distance_to_now,
    sort_by_last_updated,
    upcoming_reminders,
)

NOW = datetime(2024, 6, 1, 12, 0, 0)


def ago(**kwargs) -> str:
    return (NOW - timedelta(**kwargs)).isoformat()


def ahead(**kwargs) -> str:
    return (NOW + timedelta(**kwargs)).isoformat()


class TestNotes:
    """Tests for format_note / prepend_note."""

    def test_format_note(self):
        entry = format_note("Called, no answer", "Alice", now=datetime(2024, 3, 5, 9, 4))
        assert entry == "05/03/2024 09:04 - Alice: Called, no answer"

    def test_format_note_unknown_rep(self):
        assert format_note("hi", None, now=NOW) == "01/06/2024 12:00 - Unknown Rep: hi"

    def test_prepend_to_existing(self):
        assert prepend_note("new", "old") == "new\n\nold"

    def test_prepend_to_empty(self):
        assert prepend_note("new", "") == "new"
        assert prepend_note("new", None) == "new"


class TestFormatDistanceToNow:
    """Tests for format_distance_to_now."""

    def test_just_now(self):
        assert format_distance_to_now(ago(seconds=3), now=NOW) == "just now"
        assert format_distance_to_now(ahead(seconds=4), now=NOW) == "just now"

    def test_past_units(self):
        assert format_distance_to_now(ago(seconds=30), now=NOW) == "30 seconds ago"
        assert format_distance_to_now(ago(minutes=1, seconds=30), now=NOW) == "1 minute ago"
        assert format_distance_to_now(ago(hours=5), now=NOW) == "5 hours ago"
        assert format_distance_to_now(ago(days=3), now=NOW) == "3 days ago"
        assert format_distance_to_now(ago(days=400), now=NOW) == "1 year ago"

    def test_future_units(self):
        assert format_distance_to_now(ahead(hours=2, minutes=5), now=NOW) == "2 hours from now"
        assert format_distance_to_now(ahead(days=45), now=NOW) == "1 month from now"

    def test_exact_boundary_falls_to_smaller_unit(self):
        """A whole day is reported in hours, as the interval must exceed one unit."""
        assert format_distance_to_now(ago(days=1), now=NOW) == "24 hours ago"

    def test_sheet_timestamp_format(self):
        assert format_distance_to_now("2024-06-01 11:00:00", now=NOW) == "60 minutes ago"

    def test_empty_and_invalid(self):
        assert format_distance_to_now("", now=NOW) == ""
        assert format_distance_to_now(None, now=NOW) == ""
        assert format_distance_to_now("not a date", now=NOW) == ""


class TestViews:
    """Tests for sorting and the reminder panel."""

    def test_sort_by_last_updated(self):
        leads = [
            Lead(LeadID="old", LastUpdated="2024-01-01 10:00:00"),
            Lead(LeadID="never"),
            Lead(LeadID="new", LastUpdated="2024-05-01 10:00:00"),
        ]
        assert [lead.LeadID for lead in sort_by_last_updated(leads)] == ["new", "old", "never"]

    def test_upcoming_reminders_sorted_and_flagged(self):
        leads = [
            Lead(LeadID="later", ReminderDateTime="2024-06-03T09:00"),
            Lead(LeadID="none"),
            Lead(LeadID="overdue", ReminderDateTime="2024-05-30T09:00", ReminderNote="call back"),
            Lead(LeadID="soon", ReminderDateTime="2024-06-01T15:00"),
        ]
        views = upcoming_reminders(leads, now=NOW)

        assert [v.lead.LeadID for v in views] == ["overdue", "soon", "later"]
        assert [v.overdue for v in views] == [True, False, False]
        assert views[0].relative == "2 days ago"
        assert views[1].relative == "3 hours from now"
