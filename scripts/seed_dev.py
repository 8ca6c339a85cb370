"""
Seed script: appends a few demo leads to the configured LEADS sheet.
Run: python -m scripts.seed_dev
"""

import asyncio
import sys
import uuid

from dotenv import load_dotenv

load_dotenv()

from app.config import get_settings
from app.errors import LeadAppError
from app.models.lead import Lead
from app.modules.sheets import leads as repository

LEADS = [
    {"LeadName": "Jordan Smith", "Address": "12 Harbour St, Sydney", "ContactNumber": "0400000001", "RenterOwner": "Owner"},
    {"LeadName": "Casey Nguyen", "Address": "4/88 King St, Newtown", "ContactNumber": "0400000002", "RenterOwner": "Renter"},
    {"LeadName": "Riley Patel", "Address": "7 Ocean Rd, Manly", "ContactNumber": "0400000003", "LeadStatus": "Callback"},
]


async def seed():
    settings = get_settings()
    if not settings.leads_spreadsheet_id:
        print("ERROR: LEADS_SPREADSHEET_ID not set in .env")
        sys.exit(1)

    existing = {lead.LeadName for lead in await repository.get_all_leads()}
    new_leads = [
        Lead(LeadID=str(uuid.uuid4()), **fields)
        for fields in LEADS
        if fields["LeadName"] not in existing
    ]
    if not new_leads:
        print("Demo leads already present. Skipping seed.")
        return

    await repository.append_leads(new_leads)
    for lead in new_leads:
        print(f"Created lead: {lead.LeadName} (id={lead.LeadID})")
    print("\nSeed complete!")


if __name__ == "__main__":
    try:
        asyncio.run(seed())
    except LeadAppError as e:
        print(f"ERROR: {e}")
        sys.exit(1)
