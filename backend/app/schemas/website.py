from pydantic import BaseModel, field_validator, model_validator
from typing import Optional, Literal, Any
from datetime import datetime

WebsiteStatus = Literal["active", "inactive", "error"]

# Keys the client may send but never writes: identity, server timestamps, transport control
PROTECTED_FIELDS = ("id", "created_at", "action")


def _drop_protected(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: v for k, v in data.items() if k not in PROTECTED_FIELDS}
    return data


class WebsiteCreate(BaseModel):
    url: str
    name: Optional[str] = None
    status: WebsiteStatus = "active"
    is_wordpress: Optional[bool] = None
    screenshot_url: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    gsc_url: Optional[str] = None
    bing_url: Optional[str] = None
    yandex_url: Optional[str] = None
    twitter_url: Optional[str] = None
    facebook_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    instagram_url: Optional[str] = None
    youtube_url: Optional[str] = None

    class Config:
        extra = "forbid"

    @model_validator(mode="before")
    @classmethod
    def drop_protected(cls, data: Any) -> Any:
        return _drop_protected(data)

    @field_validator("url")
    @classmethod
    def url_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("URL is required.")
        return v


class WebsiteUpdate(BaseModel):
    """Partial update. Only keys the client actually sent are applied (exclude_unset)."""

    url: Optional[str] = None
    name: Optional[str] = None
    status: Optional[WebsiteStatus] = None
    is_wordpress: Optional[bool] = None
    screenshot_url: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    gsc_url: Optional[str] = None
    bing_url: Optional[str] = None
    yandex_url: Optional[str] = None
    twitter_url: Optional[str] = None
    facebook_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    instagram_url: Optional[str] = None
    youtube_url: Optional[str] = None

    class Config:
        extra = "forbid"

    @model_validator(mode="before")
    @classmethod
    def drop_protected(cls, data: Any) -> Any:
        return _drop_protected(data)

    @field_validator("url")
    @classmethod
    def url_not_cleared(cls, v: Optional[str]) -> str:
        if v is None or not v.strip():
            raise ValueError("URL cannot be empty.")
        return v.strip()

    @field_validator("status")
    @classmethod
    def status_not_cleared(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("Status cannot be null.")
        return v


class WebsiteResponse(BaseModel):
    id: str
    url: str
    name: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None
    is_wordpress: Optional[bool] = None
    screenshot_url: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    gsc_url: Optional[str] = None
    bing_url: Optional[str] = None
    yandex_url: Optional[str] = None
    twitter_url: Optional[str] = None
    facebook_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    instagram_url: Optional[str] = None
    youtube_url: Optional[str] = None

    class Config:
        from_attributes = True


class EnrichRequest(BaseModel):
    id: str
    url: Optional[str] = None
