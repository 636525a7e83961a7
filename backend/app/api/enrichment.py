from fastapi import APIRouter, Depends

from app.api.deps import get_enrichment_job
from app.schemas.website import EnrichRequest, WebsiteResponse
from app.services.enrichment import EnrichmentJob

router = APIRouter()


@router.post("/enrich-website", response_model=WebsiteResponse)
async def enrich_website(payload: EnrichRequest, job: EnrichmentJob = Depends(get_enrichment_job)):
    """Render the website, detect WordPress, store title/description/screenshot."""
    website = await job.run(payload.id, payload.url)
    return WebsiteResponse.model_validate(website)
