"""
Session context: connectivity, the syncing lock, the signed-in role and the
lead currently on screen, plus the notices shown to the user.
"""

import logging
from typing import Awaitable, Callable, Literal

from app.models.lead import Lead

logger = logging.getLogger(__name__)

Role = Literal["guest", "rep", "admin"]
ConnectivityListener = Callable[[bool, bool], Awaitable[None]]
NoticeListener = Callable[[str], None]


class SessionContext:
    def __init__(self, online: bool = True, role: Role = "guest"):
        self.online = online
        self.syncing = False
        self.role: Role = role
        self.selected: Lead | None = None
        self.notices: list[str] = []
        self._connectivity_listeners: list[ConnectivityListener] = []
        self._notice_listeners: list[NoticeListener] = []

    @property
    def signed_in(self) -> bool:
        return self.role != "guest"

    def subscribe(self, listener: ConnectivityListener) -> None:
        """Register an async callback invoked with (previous, current) on every transition."""
        self._connectivity_listeners.append(listener)

    def on_notice(self, listener: NoticeListener) -> None:
        self._notice_listeners.append(listener)

    async def set_online(self, online: bool) -> None:
        previous = self.online
        if previous == online:
            return
        self.online = online
        logger.info("Connectivity changed: %s", "online" if online else "offline")
        for listener in list(self._connectivity_listeners):
            await listener(previous, online)

    def notify(self, message: str) -> None:
        logger.warning("Notice: %s", message)
        self.notices.append(message)
        for listener in list(self._notice_listeners):
            listener(message)
