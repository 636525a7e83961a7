import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime, Boolean

from app.database import Base

WEBSITE_STATUSES = ("active", "inactive", "error")


class Website(Base):
    __tablename__ = "base_websites"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    url = Column(Text, unique=True, nullable=False)
    name = Column(String, nullable=True)
    status = Column(String, default="active")  # active, inactive, error
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), index=True)

    # Enrichment
    is_wordpress = Column(Boolean, nullable=True)
    screenshot_url = Column(Text, nullable=True)  # data:image/jpeg;base64,...
    meta_title = Column(Text, nullable=True)
    meta_description = Column(Text, nullable=True)

    # Webmaster tools
    gsc_url = Column(Text, nullable=True)
    bing_url = Column(Text, nullable=True)
    yandex_url = Column(Text, nullable=True)

    # Social profiles
    twitter_url = Column(Text, nullable=True)
    facebook_url = Column(Text, nullable=True)
    linkedin_url = Column(Text, nullable=True)
    instagram_url = Column(Text, nullable=True)
    youtube_url = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Website {self.id}: {self.name or self.url}>"
