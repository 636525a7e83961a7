from fastapi import APIRouter, Depends
from typing import Any, Dict

from app.api.deps import get_app_settings, get_index_now_client, get_website_store
from app.database import reset_websites_table
from app.schemas.indexing import MessageResponse, StatsResponse
from app.services.external.index_now import IndexNowClient
from app.services.settings_store import is_google_configured
from app.services.websites import WebsiteStore

router = APIRouter()


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    store: WebsiteStore = Depends(get_website_store),
    app_settings: Dict[str, Any] = Depends(get_app_settings),
    index_now: IndexNowClient = Depends(get_index_now_client),
):
    """Dashboard summary: website count and which integrations are configured."""
    return StatsResponse(
        totalWebsites=store.count(),
        isGoogleConfigured=is_google_configured(app_settings),
        isIndexNowConfigured=index_now.configured,
    )


@router.post("/setup", response_model=MessageResponse)
def setup_database(store: WebsiteStore = Depends(get_website_store)):
    """Drop and recreate the websites table. Saved settings are kept."""
    bind = store.db.get_bind()
    store.db.close()
    reset_websites_table(bind)
    return MessageResponse(message="Database schema initialized successfully.")
