"""
Website record store.
All writes to base_websites go through here: create, partial update, delete.
Column names in UPDATE statements only ever come from UPDATABLE_FIELDS;
values are always bound parameters.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from sqlalchemy import update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.sql.dml import Update

from app.errors import ConflictError, InvalidRequestError, NotFoundError
from app.models.website import Website, WEBSITE_STATUSES
from app.schemas.website import PROTECTED_FIELDS

logger = logging.getLogger(__name__)

# SET clause order follows this tuple
UPDATABLE_FIELDS = (
    "url",
    "name",
    "status",
    "is_wordpress",
    "screenshot_url",
    "meta_title",
    "meta_description",
    "gsc_url",
    "bing_url",
    "yandex_url",
    "twitter_url",
    "facebook_url",
    "linkedin_url",
    "instagram_url",
    "youtube_url",
)

LINK_FIELDS = (
    "gsc_url",
    "bing_url",
    "yandex_url",
    "twitter_url",
    "facebook_url",
    "linkedin_url",
    "instagram_url",
    "youtube_url",
)

# Written on create exactly as supplied, null when absent
OPTIONAL_FIELDS = ("is_wordpress", "screenshot_url", "meta_title", "meta_description") + LINK_FIELDS

DUPLICATE_URL_MESSAGE = "This URL already exists in the database."


def host_from_url(url: str) -> Optional[str]:
    """Return the host component of a URL, or None when there isn't one."""
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


def _is_unique_violation(exc: IntegrityError) -> bool:
    # sqlite: "UNIQUE constraint failed", postgres: "duplicate key value violates unique constraint"
    text = str(exc.orig).lower()
    return "unique" in text or "duplicate" in text


def build_update(website_id: str, fields: Dict[str, Any]) -> Update:
    """
    Build a single UPDATE touching exactly the fields present in `fields`.

    Protected keys (id, created_at, action) are dropped. Unknown keys are rejected.
    A key present with value None is kept: it clears the column.
    Raises InvalidRequestError when nothing is left to update.
    """
    unknown = sorted(k for k in fields if k not in UPDATABLE_FIELDS and k not in PROTECTED_FIELDS)
    if unknown:
        raise InvalidRequestError(f"Unknown field(s): {', '.join(unknown)}")

    if "url" in fields:
        url = fields["url"]
        if not url or not host_from_url(url):
            raise InvalidRequestError("A valid URL is required.")
    if "status" in fields and fields["status"] not in WEBSITE_STATUSES:
        raise InvalidRequestError(f"Status must be one of: {', '.join(WEBSITE_STATUSES)}")

    columns = Website.__table__.c
    assignments = [(columns[name], fields[name]) for name in UPDATABLE_FIELDS if name in fields]
    if not assignments:
        raise InvalidRequestError("Nothing to update.")

    return update(Website.__table__).where(columns.id == website_id).ordered_values(*assignments)


class WebsiteStore:
    """Record store adapter for base_websites."""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[Website]:
        return self.db.query(Website).order_by(Website.created_at.desc()).all()

    def count(self) -> int:
        return self.db.query(func.count(Website.id)).scalar() or 0

    def get(self, website_id: str) -> Website:
        website = self.db.query(Website).filter(Website.id == website_id).first()
        if not website:
            raise NotFoundError("Website not found.")
        return website

    def create(self, data: Dict[str, Any]) -> Website:
        """
        Insert a new website. `url` is required; `name` defaults to the URL host,
        `status` to "active". Other supplied fields are stored exactly as given
        (an empty string stays an empty string); absent ones are null.
        """
        unknown = sorted(k for k in data if k not in UPDATABLE_FIELDS and k not in PROTECTED_FIELDS)
        if unknown:
            raise InvalidRequestError(f"Unknown field(s): {', '.join(unknown)}")

        url = (data.get("url") or "").strip()
        if not url:
            raise InvalidRequestError("URL is required.")
        host = host_from_url(url)
        if not host:
            raise InvalidRequestError("A valid URL is required.")

        website = Website(
            url=url,
            name=host if data.get("name") is None else data["name"],
            status=data.get("status") or "active",
            **{field: data.get(field) for field in OPTIONAL_FIELDS},
        )
        self.db.add(website)
        try:
            self.db.commit()
        except IntegrityError as e:
            self._translate_integrity_error(e)
        self.db.refresh(website)
        logger.info(f"Created website {website.id} ({url})")
        return website

    def update(self, website_id: str, fields: Dict[str, Any]) -> Website:
        """Apply a partial update and return the reloaded record."""
        stmt = build_update(website_id, fields)
        self.get(website_id)

        try:
            self.db.execute(stmt)
            self.db.commit()
        except IntegrityError as e:
            self._translate_integrity_error(e)
        # Session objects are expired on commit, so this reads the new row
        return self.get(website_id)

    def delete(self, website_id: str) -> bool:
        """Hard delete. Returns False if there was nothing to delete."""
        deleted = self.db.query(Website).filter(Website.id == website_id).delete(synchronize_session=False)
        self.db.commit()
        if not deleted:
            logger.info(f"Delete of unknown website {website_id} ignored")
        return bool(deleted)

    def _translate_integrity_error(self, exc: IntegrityError) -> None:
        self.db.rollback()
        if _is_unique_violation(exc):
            raise ConflictError(DUPLICATE_URL_MESSAGE) from exc
        raise exc
