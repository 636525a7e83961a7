import logging

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import sessionmaker, declarative_base
from app.config import settings

logger = logging.getLogger(__name__)

engine = create_engine(
    settings.database_url,
    connect_args={"check_same_thread": False} if "sqlite" in settings.database_url else {},
    echo=False,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# Enrichment/link columns that older base_websites tables were created without
_WEBSITE_EXTRA_COLUMNS = {
    "is_wordpress": "BOOLEAN",
    "screenshot_url": "TEXT",
    "meta_title": "TEXT",
    "meta_description": "TEXT",
    "gsc_url": "TEXT",
    "bing_url": "TEXT",
    "yandex_url": "TEXT",
    "twitter_url": "TEXT",
    "facebook_url": "TEXT",
    "linkedin_url": "TEXT",
    "instagram_url": "TEXT",
    "youtube_url": "TEXT",
}


def get_db():
    """FastAPI dependency that provides a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create all database tables."""
    import app.models  # noqa: F401  (register tables on Base.metadata)

    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    _run_migrations(bind)


def _run_migrations(bind):
    """Add enrichment columns missing from an existing base_websites table."""
    columns = {c["name"] for c in inspect(bind).get_columns("base_websites")}
    missing = [name for name in _WEBSITE_EXTRA_COLUMNS if name not in columns]
    if not missing:
        return
    with bind.begin() as conn:
        for name in missing:
            conn.execute(text(f"ALTER TABLE base_websites ADD COLUMN {name} {_WEBSITE_EXTRA_COLUMNS[name]}"))
    logger.info(f"Added columns to base_websites: {', '.join(missing)}")


def reset_websites_table(bind=None):
    """Drop and recreate base_websites. Settings (kv_store) are preserved."""
    from app.models.website import Website

    bind = bind or engine
    Website.__table__.drop(bind=bind, checkfirst=True)
    Website.__table__.create(bind=bind)
    logger.warning("base_websites table dropped and recreated")
