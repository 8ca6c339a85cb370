"""
Shared fixtures: an in-memory stand-in for the lead API served through
httpx.MockTransport, and an offline client wired against it.
"""
import json
import re
from typing import Callable

import httpx
import pytest

from app.config import Settings
from app.models.lead import Lead
from app.modules.leads.notes import format_note, prepend_note
from app.modules.offline.factory import create_offline_client

BASE_URL = "http://leads.test"

LEAD_PATH = re.compile(r"^/api/leads/(?P<id>[^/]+)$")
NOTE_PATH = re.compile(r"^/api/leads/(?P<id>[^/]+)/notes$")


class FakeLeadServer:
    """Behaves like the sheet-backed API: server-side LastUpdated and note formatting."""

    def __init__(self, leads: list[Lead]):
        self.leads = {
            lead.LeadID: lead.model_dump(exclude={"ReminderDateTime", "ReminderNote"})
            for lead in leads
        }
        self.requests: list[tuple[str, str, dict | None]] = []
        self.fail_when: Callable[[httpx.Request], bool] | None = None
        self.reachable = True
        self.clock = 0

    def _stamp(self) -> str:
        self.clock += 1
        return f"2024-06-01 12:00:{self.clock:02d}"

    def writes(self) -> list[tuple[str, str, dict | None]]:
        return [r for r in self.requests if r[0] != "GET"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        if not self.reachable:
            raise httpx.ConnectError("network down", request=request)

        body = json.loads(request.content) if request.content else None
        path = request.url.path
        self.requests.append((request.method, path, body))

        if self.fail_when and self.fail_when(request):
            return httpx.Response(500, json={"error": "boom"})

        if request.method == "GET" and path == "/health":
            return httpx.Response(200, json={"status": "ok"})

        if request.method == "GET" and path == "/api/leads":
            return httpx.Response(200, json=list(self.leads.values()))

        match = LEAD_PATH.match(path)
        if request.method == "PATCH" and match:
            lead = self.leads.get(match["id"])
            if lead is None:
                return httpx.Response(404, json={"error": "Lead not found"})
            lead.update(body["fields"])
            lead["LastUpdated"] = self._stamp()
            return httpx.Response(200, json={"success": True})

        match = NOTE_PATH.match(path)
        if request.method == "POST" and match:
            lead = self.leads.get(match["id"])
            if lead is None:
                return httpx.Response(404, json={"error": "Lead not found"})
            entry = format_note(body["noteText"], body["repName"])
            lead["Notes"] = prepend_note(entry, lead["Notes"])
            lead["LastUpdated"] = self._stamp()
            return httpx.Response(200, json={"success": True})

        return httpx.Response(404, json={"error": "not found"})


@pytest.fixture
def sample_leads() -> list[Lead]:
    return [
        Lead(LeadID="L1", LeadName="Alex Brown", Address="1 Main St", Notes="01/01/2024 09:00 - Bob: Intro call"),
        Lead(LeadID="L2", LeadName="Sam Green", LeadStatus="Callback"),
    ]


@pytest.fixture
def server(sample_leads) -> FakeLeadServer:
    return FakeLeadServer(sample_leads)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(data_dir=str(tmp_path / "data"), api_base_url=BASE_URL, note_refresh_delay=None)


@pytest.fixture
def offline_client(settings, server):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(server.handler), base_url=BASE_URL)
    return create_offline_client(settings, role="rep", online=True, http_client=http_client)
