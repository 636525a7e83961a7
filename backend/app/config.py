from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./seo_admin.db"

    # IndexNow
    indexnow_key: Optional[str] = None  # Key file must be served at https://<host>/<key>.txt
    indexnow_endpoint: str = "https://api.indexnow.org/indexnow"

    # Google
    google_search_api_url: str = "https://www.googleapis.com/customsearch/v1"
    google_search_url: str = "https://www.google.com/search"

    # Outbound HTTP
    request_timeout_seconds: int = 15

    # Enrichment (headless browser)
    enrich_navigation_timeout_ms: int = 20000
    enrich_screenshot_quality: int = 60  # JPEG quality, 0-100
    enrich_viewport_width: int = 1280
    enrich_viewport_height: int = 720
    browser_headless: bool = True

    # CORS
    frontend_url: str = "http://localhost:5173"

    # Logging
    log_file: str = ""  # Path relative to backend dir; empty to disable file logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
