import logging

from fastapi import FastAPI

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from app.config import get_settings, reload_settings

reload_settings()
from app.api.leads import router as leads_router
from app.admin.api import router as admin_router

settings = get_settings()

app = FastAPI(
    title="Lead Manager",
    description="Lead tracking backed by a Google Sheet",
    version="0.1.0",
)

app.include_router(leads_router, prefix="/api", tags=["leads"])
app.include_router(admin_router, prefix="/api", tags=["admin"])


@app.get("/health")
async def health():
    return {"status": "ok", "environment": settings.environment}
