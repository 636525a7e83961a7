"""
Application error taxonomy.
Services raise these; app.main renders them as {"message": ..., "fixUrl": ...}.
"""

from typing import Any, Dict, List, Optional


class SEOAdminError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500

    def __init__(self, message: str, fix_url: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.fix_url = fix_url

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.fix_url:
            body["fixUrl"] = self.fix_url
        return body


class InvalidRequestError(SEOAdminError):
    status_code = 400


class ConfigurationError(SEOAdminError):
    status_code = 401


class NotFoundError(SEOAdminError):
    status_code = 404


class ConflictError(SEOAdminError):
    status_code = 409


class ServiceUnavailableError(SEOAdminError):
    status_code = 503


class UpstreamError(SEOAdminError):
    """A third-party service answered with a non-success status."""

    def __init__(self, status_code: int, message: str, fix_url: Optional[str] = None):
        super().__init__(message, fix_url=fix_url)
        self.status_code = status_code


class EnrichmentError(SEOAdminError):
    status_code = 500


def validation_message(errors: List[Dict[str, Any]]) -> str:
    """Flatten pydantic validation errors into one human-readable line."""
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = str(err.get("msg", "Invalid value")).replace("Value error, ", "")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request."
