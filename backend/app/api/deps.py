"""FastAPI dependencies shared by the routers."""

from typing import Any, Dict

from fastapi import Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.enrichment import EnrichmentJob
from app.services.external.google_search import GoogleCustomSearchClient
from app.services.external.index_now import IndexNowClient
from app.services.scraper.google_results import GoogleResultsScraper
from app.services.settings_store import SettingsStore
from app.services.websites import WebsiteStore


def get_website_store(db: Session = Depends(get_db)) -> WebsiteStore:
    return WebsiteStore(db)


def get_settings_store(db: Session = Depends(get_db)) -> SettingsStore:
    return SettingsStore(db)


def get_app_settings(store: SettingsStore = Depends(get_settings_store)) -> Dict[str, Any]:
    """Saved app settings, loaded fresh for each request."""
    return store.get()


def get_google_search_client(app_settings: Dict[str, Any] = Depends(get_app_settings)) -> GoogleCustomSearchClient:
    return GoogleCustomSearchClient(app_settings)


def get_results_scraper() -> GoogleResultsScraper:
    return GoogleResultsScraper()


def get_index_now_client() -> IndexNowClient:
    return IndexNowClient()


def get_enrichment_job(store: WebsiteStore = Depends(get_website_store)) -> EnrichmentJob:
    return EnrichmentJob(store)
