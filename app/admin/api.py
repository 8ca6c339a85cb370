"""
Admin API: credential check for the admin role and the CSV export of all leads.
"""

import csv
import io
import logging
import secrets
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse, Response

from app.config import get_settings
from app.models.lead import AdminLogin, Lead
from app.modules.sheets import leads as repository

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Auth ---

@router.post("/auth/admin")
async def admin_login(body: AdminLogin):
    """Check admin credentials. Body: {"email": "...", "password": "..."}"""
    settings = get_settings()
    if (
        settings.admin_email
        and secrets.compare_digest(body.email.encode(), settings.admin_email.encode())
        and secrets.compare_digest(body.password.encode(), settings.admin_password_hash.encode())
    ):
        logger.info("Admin login for %s", body.email)
        return {"success": True, "role": "admin"}

    logger.warning("Rejected admin login for %s", body.email)
    return JSONResponse({"error": "Invalid credentials"}, status_code=401)


# --- CSV export ---

EXPORT_HEADERS = [
    "LeadID", "Date", "LeadName", "Address", "ContactNumber",
    "LeadStatus", "RenterOwner", "Superannuation", "RepName",
    "Called", "CallResult", "LastUpdated", "Notes",
]


def _csv_value(value) -> str:
    if value is True:
        return "true"
    return str(value or "")


def build_leads_csv(leads: list[Lead]) -> str:
    """Bare header line, then every value quoted with falsy values exported as empty."""
    buffer = io.StringIO()
    buffer.write(",".join(EXPORT_HEADERS) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for lead in leads:
        values = lead.model_dump()
        writer.writerow([_csv_value(values.get(header)) for header in EXPORT_HEADERS])
    return buffer.getvalue().rstrip("\n")


@router.get("/export/csv")
async def export_csv():
    """Download all leads as CSV."""
    try:
        leads = await repository.get_all_leads()
    except Exception as e:
        logger.exception("CSV export failed: %s", e)
        return JSONResponse({"error": str(e)}, status_code=500)

    filename = f"leads_export_{int(time.time() * 1000)}.csv"
    logger.info("Exporting %d leads to %s", len(leads), filename)
    return Response(
        content=build_leads_csv(leads),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
