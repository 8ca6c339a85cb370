"""
HTTP client for the lead API, as seen from the offline client core.
"""

import logging

import httpx

from app.errors import RemoteError
from app.models.lead import AddNoteAction, Lead, OfflineAction, UpdateLeadAction

logger = logging.getLogger(__name__)


class LeadsRemote:
    def __init__(self, base_url: str, client: httpx.AsyncClient | None = None):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=base_url)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteError(f"{method} {path} failed: {e}") from e
        if response.is_error:
            try:
                detail = response.json().get("error", response.text)
            except (ValueError, AttributeError):
                detail = response.text
            raise RemoteError(f"{method} {path} returned {response.status_code}: {detail}", response.status_code)
        return response

    async def fetch_all(self) -> list[Lead]:
        response = await self._request("GET", "/api/leads")
        try:
            return [Lead.model_validate(item) for item in response.json()]
        except ValueError as e:
            raise RemoteError(f"Unexpected lead payload: {e}") from e

    async def patch_fields(self, lead_id: str, fields: dict) -> None:
        await self._request("PATCH", f"/api/leads/{lead_id}", json={"fields": fields})

    async def append_note(self, lead_id: str, text: str, rep_name: str) -> None:
        await self._request("POST", f"/api/leads/{lead_id}/notes", json={"noteText": text, "repName": rep_name})

    async def execute(self, action: OfflineAction) -> None:
        """Replay one queued action."""
        if isinstance(action, UpdateLeadAction):
            await self.patch_fields(action.payload.id, action.payload.fields)
        elif isinstance(action, AddNoteAction):
            await self.append_note(action.payload.id, action.payload.noteText, action.payload.repName)
        else:
            raise TypeError(f"Unknown offline action: {action!r}")

    async def probe(self) -> bool:
        try:
            await self._request("GET", "/health")
        except RemoteError as e:
            logger.debug("Health probe failed: %s", e)
            return False
        return True
