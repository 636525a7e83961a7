from sqlalchemy import Column, String, Text, DateTime
from datetime import datetime, timezone
from app.database import Base


class KeyValue(Base):
    """Opaque JSON values stored under fixed keys."""

    __tablename__ = "kv_store"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<KeyValue {self.key}>"
