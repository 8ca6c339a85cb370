"""
Record cache: the device's copy of every lead, persisted to local storage and
shown with the reminder overlay applied.
"""

import logging

from pydantic import ValidationError as PydanticValidationError

from app.models.lead import REMINDER_FIELDS, Lead
from app.modules.offline.reminders import ReminderStore
from app.modules.offline.storage import LEADS_KEY, LocalStorage

logger = logging.getLogger(__name__)


class RecordCache:
    def __init__(self, storage: LocalStorage, reminders: ReminderStore):
        self.storage = storage
        self.reminders = reminders
        self._records: list[Lead] = []

    @property
    def records(self) -> list[Lead]:
        return list(self._records)

    def get(self, lead_id: str) -> Lead | None:
        for lead in self._records:
            if lead.LeadID == lead_id:
                return lead
        return None

    def load(self) -> list[Lead]:
        """Read the durable copy, merge reminders, and make it the in-memory state."""
        raw = self.storage.get(LEADS_KEY, [])
        if not isinstance(raw, list):
            logger.error("Cached leads are not a list, starting empty")
            raw = []

        leads = []
        for entry in raw:
            try:
                leads.append(Lead.model_validate(entry))
            except PydanticValidationError:
                logger.warning("Dropping malformed cached lead: %r", entry)

        self._records = self.reminders.overlay(leads)
        return self.records

    def replace(self, records: list[Lead]) -> None:
        """Full overwrite of the in-memory state and the durable copy."""
        self._records = list(records)
        self.persist()

    def apply_patch(self, lead_id: str, fields: dict) -> list[Lead]:
        """Merge fields into one record in memory only. Unknown ids are ignored.

        The merged record is validated, so a bad value raises pydantic's
        ValidationError and leaves the cache untouched.
        """
        fields = {k: v for k, v in fields.items() if k != "LeadID"}
        self._records = [
            Lead.model_validate({**lead.model_dump(), **fields}) if lead.LeadID == lead_id else lead
            for lead in self._records
        ]
        return self.records

    def persist(self) -> bool:
        """Write the in-memory state durably. Reminder fields stay in the overlay store."""
        payload = [lead.model_dump(exclude=set(REMINDER_FIELDS)) for lead in self._records]
        return self.storage.set(LEADS_KEY, payload)

    def clear(self) -> None:
        self._records = []
