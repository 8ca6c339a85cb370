"""
Lead API: the three operations the offline client depends on.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.errors import LeadNotFoundError
from app.models.lead import LeadUpdatePayload, NotePayload
from app.modules.leads.notes import format_note
from app.modules.sheets import leads as repository

logger = logging.getLogger(__name__)

router = APIRouter()


def error_response(error: Exception, status_code: int = 500) -> JSONResponse:
    return JSONResponse({"error": str(error)}, status_code=status_code)


@router.get("/leads")
async def list_leads():
    """Return every lead in the sheet."""
    try:
        leads = await repository.get_all_leads()
    except Exception as e:
        logger.exception("Error fetching leads: %s", e)
        return error_response(e)
    return [lead.model_dump(exclude={"ReminderDateTime", "ReminderNote"}) for lead in leads]


@router.patch("/leads/{lead_id}")
async def update_lead(lead_id: str, body: LeadUpdatePayload):
    """Patch a subset of fields. Body: {"fields": {"LeadStatus": "Closed", ...}}"""
    try:
        await repository.update_lead_fields(lead_id, body.fields)
    except LeadNotFoundError as e:
        return error_response(e, status_code=404)
    except Exception as e:
        logger.exception("Error updating lead %s: %s", lead_id, e)
        return error_response(e)
    return {"success": True}


@router.post("/leads/{lead_id}/notes")
async def add_note(lead_id: str, body: NotePayload):
    """Append a timestamped note. Body: {"noteText": "...", "repName": "..."}"""
    if not body.noteText:
        return JSONResponse({"error": "Note text required"}, status_code=400)

    try:
        await repository.append_lead_note(lead_id, format_note(body.noteText, body.repName))
    except LeadNotFoundError as e:
        return error_response(e, status_code=404)
    except Exception as e:
        logger.exception("Error appending note to lead %s: %s", lead_id, e)
        return error_response(e)
    return {"success": True}
