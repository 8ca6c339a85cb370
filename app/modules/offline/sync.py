"""
Sync engine: drains the offline queue when connectivity comes back, then
reloads every lead from the remote store.

    IDLE --online, queue non-empty--> DRAINING --ok--> REFRESHING --> IDLE
    IDLE --online, queue empty--> REFRESHING --> IDLE
    DRAINING --failure--> IDLE   (queue kept, user notified)

Only one cycle runs at a time. The session's syncing flag is held while
draining so the UI can lock out edits.
"""

import logging
from enum import Enum

from app.errors import RemoteError
from app.models.lead import Lead
from app.modules.offline.cache import RecordCache
from app.modules.offline.queue import DrainResult, OfflineQueue
from app.modules.offline.remote import LeadsRemote
from app.modules.offline.session import SessionContext

logger = logging.getLogger(__name__)

SYNC_FAILED_NOTICE = "An error occurred while syncing. Please try again later."
REFRESH_FAILED_NOTICE = "Error loading leads. Showing cached data."


class SyncState(str, Enum):
    IDLE = "idle"
    DRAINING = "draining"
    REFRESHING = "refreshing"


class SyncEngine:
    def __init__(
        self,
        session: SessionContext,
        cache: RecordCache,
        queue: OfflineQueue,
        remote: LeadsRemote,
    ):
        self.session = session
        self.cache = cache
        self.queue = queue
        self.remote = remote
        self.state = SyncState.IDLE
        self.last_drain: DrainResult | None = None
        session.subscribe(self._on_connectivity_change)

    async def _on_connectivity_change(self, previous: bool, current: bool) -> None:
        if not previous and current:
            await self.sync()

    async def start(self) -> list[Lead]:
        """Show cached leads right away, then sync if we are online."""
        self.cache.load()
        if self.session.online:
            await self.sync()
        return self.cache.records

    async def sync(self) -> bool:
        """Drain queued actions (if any) and refresh. False when skipped or the drain failed."""
        if self.state is not SyncState.IDLE:
            logger.info("Sync already in progress (%s), skipping", self.state.value)
            return False

        if not self.queue.pending():
            return await self._refresh()

        self.state = SyncState.DRAINING
        self.session.syncing = True
        try:
            result = await self.queue.drain(self.remote.execute)
        finally:
            self.session.syncing = False
            self.state = SyncState.IDLE
        self.last_drain = result

        if not result.ok:
            self.session.notify(SYNC_FAILED_NOTICE)
            return False

        logger.info("Synced %d offline actions", result.applied)
        await self._refresh()
        return True

    async def refresh(self) -> bool:
        """Reload from the remote store unless a cycle is already running."""
        if self.state is not SyncState.IDLE:
            logger.info("Refresh skipped, sync in progress (%s)", self.state.value)
            return False
        return await self._refresh()

    async def _refresh(self) -> bool:
        if not self.session.signed_in or not self.session.online:
            return False

        self.state = SyncState.REFRESHING
        try:
            leads = await self.remote.fetch_all()
        except RemoteError as e:
            logger.error("Failed to fetch leads: %s", e)
            self.session.notify(REFRESH_FAILED_NOTICE)
            return False
        finally:
            self.state = SyncState.IDLE

        self.cache.replace(self.cache.reminders.overlay(leads))
        logger.info("Refreshed %d leads", len(leads))
        return True
