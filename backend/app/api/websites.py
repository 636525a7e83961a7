from fastapi import APIRouter, Body, Depends, Response
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ValidationError
from typing import Any, List, Type

from app.api.deps import get_enrichment_job, get_website_store
from app.errors import InvalidRequestError, validation_message
from app.schemas.website import WebsiteCreate, WebsiteResponse, WebsiteUpdate
from app.services.enrichment import EnrichmentJob
from app.services.websites import WebsiteStore

router = APIRouter()

ENRICH_ACTION = "enrich"


def _validate(model: Type[BaseModel], payload: Any) -> BaseModel:
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object.")
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise InvalidRequestError(validation_message(e.errors())) from e


@router.get("", response_model=List[WebsiteResponse])
def list_websites(store: WebsiteStore = Depends(get_website_store)):
    """Get all websites, newest first."""
    return [WebsiteResponse.model_validate(w) for w in store.list_all()]


@router.post("", response_model=WebsiteResponse)
async def create_or_update_website(
    response: Response,
    payload: Any = Body(...),
    store: WebsiteStore = Depends(get_website_store),
    job: EnrichmentJob = Depends(get_enrichment_job),
):
    """
    Create a website (201). When the body carries an `id` this updates that
    website instead (200), or runs enrichment when `action` is "enrich".
    """
    if isinstance(payload, dict) and payload.get("id"):
        website_id = str(payload["id"])
        if payload.get("action") == ENRICH_ACTION:
            website = await job.run(website_id, payload.get("url"))
            return WebsiteResponse.model_validate(website)

        update = _validate(WebsiteUpdate, payload)
        website = await run_in_threadpool(store.update, website_id, update.model_dump(exclude_unset=True))
        return WebsiteResponse.model_validate(website)

    create = _validate(WebsiteCreate, payload)
    website = await run_in_threadpool(store.create, create.model_dump())
    response.status_code = 201
    return WebsiteResponse.model_validate(website)


@router.get("/{website_id}", response_model=WebsiteResponse)
def get_website(website_id: str, store: WebsiteStore = Depends(get_website_store)):
    """Get a single website by ID."""
    return WebsiteResponse.model_validate(store.get(website_id))


@router.put("/{website_id}", response_model=WebsiteResponse)
def update_website(
    website_id: str,
    payload: Any = Body(...),
    store: WebsiteStore = Depends(get_website_store),
):
    """Partial update: only the fields present in the body are changed; null clears a field."""
    update = _validate(WebsiteUpdate, payload)
    website = store.update(website_id, update.model_dump(exclude_unset=True))
    return WebsiteResponse.model_validate(website)


@router.delete("/{website_id}", status_code=204)
def delete_website(website_id: str, store: WebsiteStore = Depends(get_website_store)):
    """Delete a website. Deleting an unknown ID also succeeds."""
    store.delete(website_id)
    return Response(status_code=204)
