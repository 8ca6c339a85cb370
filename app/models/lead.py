from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter


class Lead(BaseModel):
    LeadID: str
    Date: str = ""  # YYYY-MM-DD
    LeadName: str = ""
    Address: str = ""
    ContactNumber: str = ""
    Notes: str = ""  # newest first, entries separated by a blank line
    Called: bool = False
    RenterOwner: Literal["Renter", "Owner", ""] = ""
    Superannuation: str = ""
    RepName: str = ""
    LeadStatus: str = "New"
    CallTimestamp: str = ""  # YYYY-MM-DD HH:mm:ss
    CallResult: str = ""
    LastUpdated: str = ""  # YYYY-MM-DD HH:mm:ss, server-assigned
    ReminderDateTime: str | None = None  # e.g. 2024-12-25T10:30
    ReminderNote: str | None = None

    model_config = {"extra": "ignore"}


# Columns the user may edit. LeadID is immutable, LastUpdated belongs to the
# server, and the reminder fields only live in the local overlay.
EDITABLE_FIELDS = (
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
)

REMINDER_FIELDS = ("ReminderDateTime", "ReminderNote")

SERVER_OWNED_FIELDS = ("LeadID", "LastUpdated")


class Reminder(BaseModel):
    ReminderDateTime: str
    ReminderNote: str = ""


class LeadUpdatePayload(BaseModel):
    fields: dict[str, Any] = {}


class NotePayload(BaseModel):
    noteText: str = ""
    repName: str = ""


class AdminLogin(BaseModel):
    email: str = ""
    password: str = ""


class UpdateLeadPayload(BaseModel):
    id: str
    fields: dict[str, Any]


class AddNotePayload(BaseModel):
    id: str
    noteText: str
    repName: str = ""


class UpdateLeadAction(BaseModel):
    type: Literal["UPDATE_LEAD"] = "UPDATE_LEAD"
    payload: UpdateLeadPayload


class AddNoteAction(BaseModel):
    type: Literal["ADD_NOTE"] = "ADD_NOTE"
    payload: AddNotePayload


OfflineAction = Annotated[UpdateLeadAction | AddNoteAction, Field(discriminator="type")]

offline_action_adapter: TypeAdapter[OfflineAction] = TypeAdapter(OfflineAction)
