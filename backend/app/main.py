import logging
import sys
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.database import init_db
from app.errors import SEOAdminError, validation_message
from app.api import websites, indexing, enrichment, dashboard
from app.api.settings import router as settings_router

# Configure logging so all loggers output to console
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    stream=sys.stdout,
)
logging.getLogger("app").setLevel(logging.DEBUG)

if settings.log_file:
    _log_path = Path(__file__).resolve().parent.parent / settings.log_file
    _log_path.parent.mkdir(parents=True, exist_ok=True)
    _file_handler = logging.FileHandler(_log_path, encoding="utf-8")
    _file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    logging.getLogger().addHandler(_file_handler)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="SEO Admin",
    description="Website registry with Google index checks, IndexNow submission and page enrichment",
    version="1.0.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(websites.router, prefix="/api/websites", tags=["Websites"])
app.include_router(settings_router, prefix="/api/settings", tags=["Settings"])
app.include_router(indexing.router, prefix="/api", tags=["Indexing"])
app.include_router(enrichment.router, prefix="/api", tags=["Enrichment"])
app.include_router(dashboard.router, prefix="/api", tags=["Dashboard"])


@app.exception_handler(SEOAdminError)
async def seo_admin_error_handler(request: Request, exc: SEOAdminError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"message": validation_message(exc.errors())})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"message": "An internal server error occurred."})


@app.on_event("startup")
async def startup_event():
    """Create tables and add any missing enrichment columns."""
    init_db()


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "version": "1.0.0"}
