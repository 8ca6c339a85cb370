"""
Wires the offline client core together from settings.
"""

from dataclasses import dataclass

import httpx

from app.config import Settings, get_settings
from app.modules.offline.cache import RecordCache
from app.modules.offline.controller import LeadController
from app.modules.offline.queue import OfflineQueue
from app.modules.offline.remote import LeadsRemote
from app.modules.offline.reminders import ReminderStore
from app.modules.offline.session import Role, SessionContext
from app.modules.offline.storage import LocalStorage
from app.modules.offline.sync import SyncEngine


@dataclass
class OfflineClient:
    session: SessionContext
    storage: LocalStorage
    cache: RecordCache
    reminders: ReminderStore
    queue: OfflineQueue
    remote: LeadsRemote
    engine: SyncEngine
    controller: LeadController

    async def aclose(self) -> None:
        await self.controller.aclose()
        await self.remote.aclose()


def create_offline_client(
    settings: Settings | None = None,
    role: Role = "rep",
    online: bool = True,
    http_client: httpx.AsyncClient | None = None,
) -> OfflineClient:
    settings = settings or get_settings()

    session = SessionContext(online=online, role=role)
    storage = LocalStorage(settings.data_dir)
    reminders = ReminderStore(storage)
    cache = RecordCache(storage, reminders)
    queue = OfflineQueue(storage)
    remote = LeadsRemote(settings.api_base_url, client=http_client)
    engine = SyncEngine(session, cache, queue, remote)
    controller = LeadController(
        session,
        cache,
        queue,
        reminders,
        remote,
        engine,
        note_refresh_delay=settings.note_refresh_delay,
    )
    return OfflineClient(
        session=session,
        storage=storage,
        cache=cache,
        reminders=reminders,
        queue=queue,
        remote=remote,
        engine=engine,
        controller=controller,
    )
