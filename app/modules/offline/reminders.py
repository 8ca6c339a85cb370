"""
Reminder overlay: per-lead follow-up reminders kept only on this device and
merged onto lead records whenever they are loaded.
"""

import logging

from pydantic import ValidationError as PydanticValidationError

from app.errors import ValidationError
from app.models.lead import Lead, Reminder
from app.modules.offline.storage import REMINDERS_KEY, LocalStorage

logger = logging.getLogger(__name__)


def validate_reminder(due_at: str | None, note: str | None = None) -> Reminder:
    if not due_at or not due_at.strip():
        raise ValidationError("Please select a date and time for the reminder.")
    return Reminder(ReminderDateTime=due_at, ReminderNote=note or "")


class ReminderStore:
    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def get(self) -> dict[str, Reminder]:
        raw = self.storage.get(REMINDERS_KEY, {})
        if not isinstance(raw, dict):
            logger.error("Reminder store is not a mapping, ignoring it")
            return {}

        reminders = {}
        for lead_id, entry in raw.items():
            try:
                reminders[lead_id] = Reminder.model_validate(entry)
            except PydanticValidationError:
                logger.warning("Dropping malformed reminder for lead %s", lead_id)
        return reminders

    def set(self, lead_id: str, reminder: Reminder | None) -> None:
        """Save or (with None) delete the reminder for a lead. Last write wins."""
        reminders = self.get()
        if reminder is None:
            reminders.pop(lead_id, None)
        else:
            reminders[lead_id] = reminder
        self.storage.set(REMINDERS_KEY, {k: v.model_dump() for k, v in reminders.items()})

    def overlay(self, leads: list[Lead]) -> list[Lead]:
        """Copies of the leads with reminder fields taken from the store."""
        reminders = self.get()
        merged = []
        for lead in leads:
            reminder = reminders.get(lead.LeadID)
            merged.append(lead.model_copy(update={
                "ReminderDateTime": reminder.ReminderDateTime if reminder else None,
                "ReminderNote": reminder.ReminderNote if reminder else None,
            }))
        return merged
