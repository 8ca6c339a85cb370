"""
Optimistic update controller: every edit lands in the local view at once,
then goes to the remote store (online) or the offline queue (offline).

A remote failure is reported but never rolled back locally. The durable cache
is only written on success, so the next full refresh reconciles the view
with the sheet.
"""

import asyncio
import logging

from pydantic import ValidationError as PydanticValidationError

from app.errors import RemoteError, SyncInProgressError, ValidationError
from app.models.lead import (
    SERVER_OWNED_FIELDS,
    AddNoteAction,
    AddNotePayload,
    Lead,
    Reminder,
    UpdateLeadAction,
    UpdateLeadPayload,
)
from app.modules.leads.notes import format_note, prepend_note
from app.modules.offline.cache import RecordCache
from app.modules.offline.queue import OfflineQueue
from app.modules.offline.remote import LeadsRemote
from app.modules.offline.reminders import ReminderStore, validate_reminder
from app.modules.offline.session import SessionContext
from app.modules.offline.sync import SyncEngine

logger = logging.getLogger(__name__)

UPDATE_FAILED_NOTICE = "Failed to save update. Please check your connection."
NOTE_FAILED_NOTICE = "Failed to add note. Please check your connection."


class LeadController:
    def __init__(
        self,
        session: SessionContext,
        cache: RecordCache,
        queue: OfflineQueue,
        reminders: ReminderStore,
        remote: LeadsRemote,
        engine: SyncEngine,
        note_refresh_delay: float | None = 1.0,
    ):
        self.session = session
        self.cache = cache
        self.queue = queue
        self.reminders = reminders
        self.remote = remote
        self.engine = engine
        self.note_refresh_delay = note_refresh_delay
        self._pending_refresh: asyncio.Task | None = None

    @property
    def leads(self) -> list[Lead]:
        return self.cache.records

    @property
    def selected(self) -> Lead | None:
        return self.session.selected

    def select(self, lead_id: str | None) -> Lead | None:
        self.session.selected = self.cache.get(lead_id) if lead_id else None
        return self.session.selected

    def _ensure_unlocked(self) -> None:
        if self.session.syncing:
            raise SyncInProgressError("Syncing offline changes, please wait")

    def _apply_locally(self, lead_id: str, fields: dict) -> None:
        self.cache.apply_patch(lead_id, fields)
        selected = self.session.selected
        if selected is not None and selected.LeadID == lead_id:
            self.session.selected = Lead.model_validate({**selected.model_dump(), **fields})

    def _checked_fields(self, lead_id: str, fields: dict) -> dict:
        """Drop server-owned keys, turn None into a cleared cell, and reject values a Lead cannot hold."""
        fields = {k: ("" if v is None else v) for k, v in fields.items() if k not in SERVER_OWNED_FIELDS}
        current = self.cache.get(lead_id)
        base = current.model_dump() if current else {"LeadID": lead_id}
        try:
            Lead.model_validate({**base, **fields})
        except PydanticValidationError as e:
            fields_in_error = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            raise ValidationError(f"Invalid value for {', '.join(fields_in_error)}") from e
        return fields

    async def update_lead(self, lead_id: str, fields: dict) -> None:
        self._ensure_unlocked()
        fields = self._checked_fields(lead_id, fields)
        if not fields:
            return
        self._apply_locally(lead_id, fields)

        if not self.session.online:
            self.queue.enqueue(UpdateLeadAction(payload=UpdateLeadPayload(id=lead_id, fields=fields)))
            return

        try:
            await self.remote.patch_fields(lead_id, fields)
        except RemoteError as e:
            logger.error("Failed to save update for lead %s: %s", lead_id, e)
            self.session.notify(UPDATE_FAILED_NOTICE)
            return
        self.cache.persist()

    async def add_note(self, lead_id: str, text: str, rep_name: str) -> None:
        self._ensure_unlocked()
        if not text or not text.strip():
            raise ValidationError("Note text required")

        current = self.cache.get(lead_id)
        notes = prepend_note(format_note(text, rep_name), current.Notes if current else "")
        self._apply_locally(lead_id, {"Notes": notes})

        if not self.session.online:
            self.queue.enqueue(AddNoteAction(payload=AddNotePayload(id=lead_id, noteText=text, repName=rep_name)))
            return

        try:
            await self.remote.append_note(lead_id, text, rep_name)
        except RemoteError as e:
            logger.error("Failed to add note for lead %s: %s", lead_id, e)
            self.session.notify(NOTE_FAILED_NOTICE)
            return
        self.cache.persist()
        self._schedule_refresh()

    def _schedule_refresh(self) -> None:
        if self.note_refresh_delay is None:
            return
        if self._pending_refresh is not None and not self._pending_refresh.done():
            self._pending_refresh.cancel()
        self._pending_refresh = asyncio.create_task(self._delayed_refresh(self.note_refresh_delay))

    async def _delayed_refresh(self, delay: float) -> None:
        await asyncio.sleep(delay)
        await self.engine.refresh()

    async def aclose(self) -> None:
        """Cancel a follow-up refresh that has not fired yet."""
        task, self._pending_refresh = self._pending_refresh, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def update_reminder(self, lead_id: str, due_at: str | None, note: str | None = None) -> None:
        """Save a reminder, or clear it when due_at is None. Local only, never queued."""
        self._ensure_unlocked()
        reminder: Reminder | None = None
        if due_at is not None:
            reminder = validate_reminder(due_at, note)

        self.reminders.set(lead_id, reminder)
        self._apply_locally(lead_id, {
            "ReminderDateTime": reminder.ReminderDateTime if reminder else None,
            "ReminderNote": reminder.ReminderNote if reminder else None,
        })

    def logout(self) -> None:
        self.session.role = "guest"
        self.session.selected = None
        self.cache.clear()
