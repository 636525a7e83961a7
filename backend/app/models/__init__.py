from app.models.website import Website, WEBSITE_STATUSES
from app.models.kv_store import KeyValue

__all__ = ["Website", "WEBSITE_STATUSES", "KeyValue"]
