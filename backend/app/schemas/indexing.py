from pydantic import BaseModel
from typing import Optional, List


class IndexCountResponse(BaseModel):
    domain: str
    indexedCount: int


class IndexNowRequest(BaseModel):
    url: Optional[str] = None
    urlList: Optional[List[str]] = None


class MessageResponse(BaseModel):
    message: str


class StatsResponse(BaseModel):
    totalWebsites: int
    isGoogleConfigured: bool
    isIndexNowConfigured: bool
