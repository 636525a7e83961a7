from fastapi import APIRouter, Depends
from typing import Optional

from app.api.deps import get_google_search_client, get_index_now_client, get_results_scraper
from app.errors import InvalidRequestError
from app.schemas.indexing import IndexCountResponse, IndexNowRequest, MessageResponse
from app.services.external.google_search import GoogleCustomSearchClient
from app.services.external.index_now import IndexNowClient
from app.services.scraper.google_results import GoogleResultsScraper

router = APIRouter()


def _require_domain(domain: Optional[str]) -> str:
    domain = (domain or "").strip()
    if not domain:
        raise InvalidRequestError("Domain parameter is required.")
    return domain


@router.get("/check-indexing", response_model=IndexCountResponse)
def check_indexing(
    domain: Optional[str] = None,
    client: GoogleCustomSearchClient = Depends(get_google_search_client),
):
    """Indexed page count from the Google Custom Search API (needs saved credentials)."""
    return client.indexed_count(_require_domain(domain))


@router.get("/scrape-google", response_model=IndexCountResponse)
def scrape_google(
    domain: Optional[str] = None,
    scraper: GoogleResultsScraper = Depends(get_results_scraper),
):
    """Indexed page count read from a Google results page (no credentials)."""
    return scraper.indexed_count(_require_domain(domain))


@router.post("/index-now", response_model=MessageResponse)
def index_now(payload: IndexNowRequest, client: IndexNowClient = Depends(get_index_now_client)):
    """Submit {url} or {urlList} to IndexNow in one request."""
    if payload.urlList:
        return client.push(payload.urlList)
    if payload.url:
        return client.push(payload.url)
    raise InvalidRequestError("URL to submit is required.")
