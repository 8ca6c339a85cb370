"""
Connectivity monitor: probes the lead API health endpoint and feeds the
result into the session, which fans it out to the sync engine.
"""

import asyncio
import logging

from app.modules.offline.remote import LeadsRemote
from app.modules.offline.session import SessionContext

logger = logging.getLogger(__name__)


async def check_connectivity(session: SessionContext, remote: LeadsRemote) -> bool:
    online = await remote.probe()
    await session.set_online(online)
    return online


async def watch_connectivity(session: SessionContext, remote: LeadsRemote, interval: float) -> None:
    """Probe forever; cancel the task to stop."""
    logger.info("Watching connectivity every %.1fs", interval)
    while True:
        await check_connectivity(session, remote)
        await asyncio.sleep(interval)
