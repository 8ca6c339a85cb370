"""
Unit tests for the record cache and the reminder overlay.
"""
import json

import pytest

from app.errors import ValidationError
from app.models.lead import Lead, Reminder
from app.modules.offline.cache import RecordCache
from app.modules.offline.reminders import ReminderStore, validate_reminder
from app.modules.offline.storage import LEADS_KEY, REMINDERS_KEY, LocalStorage


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path)


@pytest.fixture
def reminders(storage) -> ReminderStore:
    return ReminderStore(storage)


@pytest.fixture
def cache(storage, reminders) -> RecordCache:
    return RecordCache(storage, reminders)


class TestReminderStore:
    """Tests for ReminderStore."""

    def test_set_and_get(self, reminders):
        reminders.set("L1", Reminder(ReminderDateTime="2024-12-25T10:30", ReminderNote="follow up"))
        assert reminders.get() == {"L1": Reminder(ReminderDateTime="2024-12-25T10:30", ReminderNote="follow up")}

    def test_none_deletes(self, reminders):
        reminders.set("L1", Reminder(ReminderDateTime="2024-12-25T10:30"))
        reminders.set("L1", None)
        assert reminders.get() == {}

    def test_delete_missing_is_noop(self, reminders):
        reminders.set("nope", None)
        assert reminders.get() == {}

    def test_last_write_wins(self, reminders):
        reminders.set("L1", Reminder(ReminderDateTime="2024-12-25T10:30"))
        reminders.set("L1", Reminder(ReminderDateTime="2025-01-02T08:00", ReminderNote="new"))
        assert reminders.get()["L1"].ReminderDateTime == "2025-01-02T08:00"

    def test_malformed_entries_skipped(self, storage, reminders):
        storage.set(REMINDERS_KEY, {"L1": {"ReminderNote": "no date"}, "L2": {"ReminderDateTime": "2024-01-01T00:00"}})
        assert list(reminders.get()) == ["L2"]

    def test_validate_requires_date(self):
        """Saving a reminder without a date is rejected."""
        with pytest.raises(ValidationError, match="date and time"):
            validate_reminder("", "note")
        assert validate_reminder("2024-12-25T10:30", None).ReminderNote == ""


class TestRecordCache:
    """Tests for RecordCache."""

    def test_load_empty(self, cache):
        assert cache.load() == []

    def test_replace_persists_without_overlay_fields(self, cache, storage):
        """The durable blob never carries reminder fields."""
        cache.replace([Lead(LeadID="L1", ReminderDateTime="2024-12-25T10:30", ReminderNote="x")])
        stored = storage.get(LEADS_KEY, [])
        assert stored[0]["LeadID"] == "L1"
        assert "ReminderDateTime" not in stored[0]
        assert "ReminderNote" not in stored[0]

    def test_reminder_overlay_on_load(self, cache, reminders):
        """A saved reminder shows up on load; clearing it removes both fields."""
        cache.replace([Lead(LeadID="L1"), Lead(LeadID="L2")])
        reminders.set("L1", Reminder(ReminderDateTime="2024-12-25T10:30", ReminderNote="follow up"))

        loaded = {lead.LeadID: lead for lead in cache.load()}
        assert loaded["L1"].ReminderDateTime == "2024-12-25T10:30"
        assert loaded["L1"].ReminderNote == "follow up"
        assert loaded["L2"].ReminderDateTime is None

        reminders.set("L1", None)
        reloaded = cache.load()[0]
        assert reloaded.ReminderDateTime is None
        assert reloaded.ReminderNote is None

    def test_apply_patch_is_memory_only(self, cache, storage):
        """Patches change the in-memory view but not the durable copy."""
        cache.replace([Lead(LeadID="L1", LeadStatus="New")])
        updated = cache.apply_patch("L1", {"LeadStatus": "Closed"})

        assert updated[0].LeadStatus == "Closed"
        assert cache.get("L1").LeadStatus == "Closed"
        assert storage.get(LEADS_KEY, [])[0]["LeadStatus"] == "New"

        cache.persist()
        assert storage.get(LEADS_KEY, [])[0]["LeadStatus"] == "Closed"

    def test_apply_patch_unknown_id(self, cache):
        cache.replace([Lead(LeadID="L1")])
        assert cache.apply_patch("missing", {"LeadName": "X"}) == [Lead(LeadID="L1")]

    def test_load_drops_malformed_records(self, cache, storage, tmp_path):
        storage.set(LEADS_KEY, [{"LeadName": "no id"}, {"LeadID": "L9", "LeadName": "ok"}])
        assert [lead.LeadID for lead in cache.load()] == ["L9"]

    def test_load_corrupt_blob(self, cache, tmp_path):
        """A corrupt cache file loads as empty rather than failing."""
        (tmp_path / f"{LEADS_KEY}.json").write_text("[{", encoding="utf-8")
        assert cache.load() == []

    def test_records_returns_copy(self, cache):
        cache.replace([Lead(LeadID="L1")])
        cache.records.clear()
        assert len(cache.records) == 1

    def test_stored_blob_is_plain_json(self, cache, tmp_path):
        cache.replace([Lead(LeadID="L1", Called=True)])
        stored = json.loads((tmp_path / f"{LEADS_KEY}.json").read_text())
        assert stored[0]["Called"] is True
