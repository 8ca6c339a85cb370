from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    environment: str = "development"

    # Google Sheets (system of record)
    google_service_account_email: str = ""
    google_service_account_private_key: str = ""  # literal "\n" sequences allowed
    leads_spreadsheet_id: str = ""
    leads_sheet_name: str = "LEADS"

    # Admin login
    admin_email: str = ""
    admin_password_hash: str = ""

    # Client: where the lead API lives and where the local cache is kept
    api_base_url: str = "http://localhost:8000"
    data_dir: str = ".leadapp"

    # Client: delay before the follow-up refresh after an online note append
    note_refresh_delay: float | None = 1.0

    # Client: seconds between health probes when watching connectivity
    connectivity_probe_interval: float = 15.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def google_private_key(self) -> str:
        return self.google_service_account_private_key.replace("\\n", "\n")


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from .env (called on module reload by uvicorn --reload)."""
    global _settings
    _settings = None
    return get_settings()
