"""
Lead repository on top of the LEADS sheet: row mapping, row lookup by LeadID,
field patches and note appends.

Column order (A..N):
Date, LeadName, Address, ContactNumber, Notes, Called, RenterOwner,
Superannuation, RepName, LeadStatus, CallTimestamp, CallResult, LeadID, LastUpdated
"""

import asyncio
import logging
import uuid
from datetime import datetime

from app.errors import LeadNotFoundError
from app.models.lead import EDITABLE_FIELDS, Lead
from app.modules.leads.notes import prepend_note
from app.modules.sheets import client as sheets

logger = logging.getLogger(__name__)

COLUMNS = (
    "Date",
    "LeadName",
    "Address",
    "ContactNumber",
    "Notes",
    "Called",
    "RenterOwner",
    "Superannuation",
    "RepName",
    "LeadStatus",
    "CallTimestamp",
    "CallResult",
    "LeadID",
    "LastUpdated",
)
COLUMN_LETTERS = {name: chr(ord("A") + i) for i, name in enumerate(COLUMNS)}

DATA_RANGE = "A2:N"  # skip header row
LEAD_ID_RANGE = "M2:M"
FIRST_DATA_ROW = 2
LAST_UPDATED_FORMAT = "%Y-%m-%d %H:%M:%S"

_background_tasks: set[asyncio.Task] = set()
# sheet row -> LeadID generated for it, until the backfill write settles
_pending_ids: dict[int, str] = {}


def _now() -> str:
    return datetime.now().strftime(LAST_UPDATED_FORMAT)


def row_to_lead(row: list, lead_id: str | None = None) -> Lead:
    padded = list(row) + [""] * (len(COLUMNS) - len(row))
    cells = dict(zip(COLUMNS, padded))
    renter_owner = cells["RenterOwner"] if cells["RenterOwner"] in ("Renter", "Owner") else ""
    return Lead(
        Date=cells["Date"] or "",
        LeadName=cells["LeadName"] or "",
        Address=cells["Address"] or "",
        ContactNumber=cells["ContactNumber"] or "",
        Notes=cells["Notes"] or "",
        Called=cells["Called"] == "TRUE",
        RenterOwner=renter_owner,
        Superannuation=cells["Superannuation"] or "",
        RepName=cells["RepName"] or "",
        LeadStatus=cells["LeadStatus"] or "New",
        CallTimestamp=cells["CallTimestamp"] or "",
        CallResult=cells["CallResult"] or "",
        LeadID=lead_id or cells["LeadID"],
        LastUpdated=cells["LastUpdated"] or "",
    )


def lead_to_row(lead: Lead) -> list:
    values = lead.model_dump()
    row = []
    for name in COLUMNS:
        value = values[name]
        if name == "Called":
            value = "TRUE" if value else "FALSE"
        row.append(value)
    return row


async def get_all_leads() -> list[Lead]:
    """Fetch every lead. Rows without a LeadID get one, written back in the background."""
    rows = await sheets.get_values(DATA_RANGE)

    leads = []
    backfill: list[tuple[int, str]] = []
    for index, row in enumerate(rows):
        row_number = index + FIRST_DATA_ROW
        lead_id = row[COLUMNS.index("LeadID")] if len(row) > COLUMNS.index("LeadID") else ""
        if not lead_id:
            lead_id = _pending_ids.get(row_number)
        if not lead_id:
            lead_id = str(uuid.uuid4())
            _pending_ids[row_number] = lead_id
            backfill.append((row_number, lead_id))
        leads.append(row_to_lead(row, lead_id=lead_id))

    if backfill:
        spawn_id_backfill(backfill)

    return leads


def spawn_id_backfill(items: list[tuple[int, str]]) -> asyncio.Task:
    """Persist generated LeadIDs without holding up the caller."""
    task = asyncio.create_task(_write_lead_ids(items))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task


async def _write_lead_ids(items: list[tuple[int, str]]) -> None:
    try:
        results = await asyncio.gather(
            *(
                sheets.update_values(f"{COLUMN_LETTERS['LeadID']}{row}", [[lead_id]])
                for row, lead_id in items
            ),
            return_exceptions=True,
        )
    finally:
        for row, lead_id in items:
            if _pending_ids.get(row) == lead_id:
                del _pending_ids[row]
    failed = [(item, r) for item, r in zip(items, results) if isinstance(r, Exception)]
    for (row, lead_id), error in failed:
        logger.error("Failed to backfill LeadID %s on row %s: %s", lead_id, row, error)
    if len(failed) < len(items):
        logger.info("Backfilled %d LeadIDs", len(items) - len(failed))


async def find_row_index(lead_id: str) -> int | None:
    """Sheet row (1-based) holding this LeadID, or None."""
    rows = await sheets.get_values(LEAD_ID_RANGE)
    for offset, row in enumerate(rows):
        if row and row[0] == lead_id:
            return offset + FIRST_DATA_ROW
    return None


async def update_lead_fields(lead_id: str, fields: dict) -> None:
    """Write the given editable fields and stamp LastUpdated."""
    row_index = await find_row_index(lead_id)
    if not row_index:
        raise LeadNotFoundError(lead_id)

    updates = [
        {"range": f"{COLUMN_LETTERS[name]}{row_index}", "values": [["" if fields[name] is None else fields[name]]]}
        for name in EDITABLE_FIELDS
        if name in fields
    ]
    updates.append({"range": f"{COLUMN_LETTERS['LastUpdated']}{row_index}", "values": [[_now()]]})

    await sheets.batch_update(updates)
    logger.info("Lead %s updated: %s", lead_id, [u["range"] for u in updates])


async def append_lead_note(lead_id: str, formatted_note: str) -> None:
    """Prepend a formatted entry to the lead's Notes cell and stamp LastUpdated."""
    row_index = await find_row_index(lead_id)
    if not row_index:
        raise LeadNotFoundError(lead_id)

    notes_cell = f"{COLUMN_LETTERS['Notes']}{row_index}"
    current = await sheets.get_values(notes_cell)
    existing = current[0][0] if current and current[0] else ""

    await sheets.batch_update([
        {"range": notes_cell, "values": [[prepend_note(formatted_note, existing)]]},
        {"range": f"{COLUMN_LETTERS['LastUpdated']}{row_index}", "values": [[_now()]]},
    ])
    logger.info("Note appended to lead %s", lead_id)


async def append_leads(leads: list[Lead]) -> None:
    await sheets.append_values(DATA_RANGE, [lead_to_row(lead) for lead in leads])
