"""
Google Sheets v4 REST client: service-account auth and the handful of
values.* calls the lead repository needs.
"""

import asyncio
import logging
from urllib.parse import quote

import httpx
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

from app.config import get_settings
from app.errors import RemoteError, SheetsConfigError

logger = logging.getLogger(__name__)

SHEETS_API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"
SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"

_credentials = None


def _get_credentials():
    global _credentials
    if _credentials is None:
        settings = get_settings()
        if (
            not settings.google_service_account_email
            or not settings.google_service_account_private_key
            or not settings.leads_spreadsheet_id
        ):
            raise SheetsConfigError("Missing Google Sheets environment variables")
        _credentials = service_account.Credentials.from_service_account_info(
            {
                "client_email": settings.google_service_account_email,
                "private_key": settings.google_private_key,
                "token_uri": TOKEN_URI,
            },
            scopes=SHEETS_SCOPES,
        )
    return _credentials


def reset_credentials() -> None:
    global _credentials
    _credentials = None


async def _access_token() -> str:
    credentials = _get_credentials()
    if not credentials.valid:
        # google-auth only ships a blocking transport
        await asyncio.to_thread(credentials.refresh, GoogleAuthRequest())
    return credentials.token


def _values_url(suffix: str) -> str:
    settings = get_settings()
    return f"{SHEETS_API_BASE}/{settings.leads_spreadsheet_id}/values{suffix}"


def sheet_range(cells: str) -> str:
    """Prefix a cell range with the configured sheet name, e.g. 'LEADS!A2:N'."""
    return f"{get_settings().leads_sheet_name}!{cells}"


async def _request(method: str, url: str, **kwargs) -> dict:
    token = await _access_token()
    headers = {"Authorization": f"Bearer {token}"}
    try:
        async with httpx.AsyncClient() as client:
            response = await client.request(method, url, headers=headers, **kwargs)
    except httpx.HTTPError as e:
        raise RemoteError(f"Sheets request failed: {e}") from e

    if response.is_error:
        logger.error("Sheets API error %s on %s %s: %s", response.status_code, method, url, response.text)
        raise RemoteError(
            f"Sheets API returned {response.status_code}",
            status_code=response.status_code,
        )
    return response.json() if response.content else {}


async def get_values(cells: str) -> list[list[str]]:
    data = await _request("GET", _values_url(f"/{quote(sheet_range(cells))}"))
    return data.get("values", [])


async def update_values(cells: str, values: list[list], value_input_option: str = "RAW") -> dict:
    return await _request(
        "PUT",
        _values_url(f"/{quote(sheet_range(cells))}"),
        params={"valueInputOption": value_input_option},
        json={"values": values},
    )


async def batch_update(data: list[dict], value_input_option: str = "USER_ENTERED") -> dict:
    """Write several ranges in one call. Each item: {"range": "E5", "values": [[...]]}."""
    return await _request(
        "POST",
        _values_url(":batchUpdate"),
        json={
            "valueInputOption": value_input_option,
            "data": [
                {"range": sheet_range(item["range"]), "values": item["values"]}
                for item in data
            ],
        },
    )


async def append_values(cells: str, values: list[list], value_input_option: str = "USER_ENTERED") -> dict:
    return await _request(
        "POST",
        _values_url(f"/{quote(sheet_range(cells))}:append"),
        params={"valueInputOption": value_input_option, "insertDataOption": "INSERT_ROWS"},
        json={"values": values},
    )
