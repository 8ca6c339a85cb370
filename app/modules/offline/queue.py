"""
Offline action queue: mutations recorded while disconnected, replayed in
submission order once the remote store is reachable again.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from pydantic import ValidationError as PydanticValidationError

from app.errors import RemoteError
from app.models.lead import OfflineAction, offline_action_adapter
from app.modules.offline.storage import QUEUE_KEY, LocalStorage

logger = logging.getLogger(__name__)

Executor = Callable[[OfflineAction], Awaitable[object]]


@dataclass
class DrainResult:
    ok: bool
    applied: int = 0
    failed_action: OfflineAction | None = None
    error: Exception | None = None


class OfflineQueue:
    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def pending(self) -> list[OfflineAction]:
        raw = self.storage.get(QUEUE_KEY, [])
        if not isinstance(raw, list):
            logger.error("Offline queue is not a list, treating it as empty")
            return []

        actions = []
        for entry in raw:
            try:
                actions.append(offline_action_adapter.validate_python(entry))
            except PydanticValidationError:
                logger.warning("Dropping malformed offline action: %r", entry)
        return actions

    def __len__(self) -> int:
        return len(self.pending())

    def _save(self, actions: list[OfflineAction]) -> None:
        self.storage.set(QUEUE_KEY, [offline_action_adapter.dump_python(a) for a in actions])

    def enqueue(self, action: OfflineAction) -> None:
        actions = self.pending()
        actions.append(action)
        self._save(actions)
        logger.info("Queued %s for lead %s (%d pending)", action.type, action.payload.id, len(actions))

    async def drain(self, executor: Executor) -> DrainResult:
        """Replay every action in order, stopping at the first failure.

        Applied actions leave the queue; the failed action and everything after
        it stay queued untouched for the next drain. Nothing is retried here.
        """
        actions = self.pending()
        if not actions:
            return DrainResult(ok=True)

        applied = 0
        try:
            for action in actions:
                try:
                    await executor(action)
                except RemoteError as e:
                    logger.error("Failed to sync action %s for lead %s: %s", action.type, action.payload.id, e)
                    return DrainResult(ok=False, applied=applied, failed_action=action, error=e)
                applied += 1
            return DrainResult(ok=True, applied=applied)
        finally:
            # drain always consumes from the head, so anything enqueued meanwhile survives
            self._save(self.pending()[applied:])
