from app.schemas.website import (
    WebsiteCreate,
    WebsiteUpdate,
    WebsiteResponse,
    EnrichRequest,
    PROTECTED_FIELDS,
)
from app.schemas.indexing import (
    IndexCountResponse,
    IndexNowRequest,
    MessageResponse,
    StatsResponse,
)
