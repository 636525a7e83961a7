"""
Google Custom Search JSON API client.
Reports how many pages Google has indexed for a domain (site: query).
Requires googleApiKey and googleCxId from the saved app settings.
"""

import logging
from typing import Any, Dict, Optional

import requests

from app.config import settings
from app.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

HELP_DETAIL_TYPE = "type.googleapis.com/google.rpc.Help"


def extract_fix_url(error_payload: Any) -> Optional[str]:
    """
    Pull the remediation link out of a Google API error body, e.g. the
    "enable this API" link returned with accessNotConfigured. Best-effort.
    """
    try:
        details = error_payload["error"]["details"]
    except (KeyError, TypeError):
        return None
    if not isinstance(details, list):
        return None

    for detail in details:
        if not isinstance(detail, dict) or detail.get("@type") != HELP_DETAIL_TYPE:
            continue
        links = detail.get("links") or []
        if links and isinstance(links[0], dict) and links[0].get("url"):
            return links[0]["url"]
    return None


def _parse_total_results(data: Dict[str, Any]) -> int:
    raw = (data.get("searchInformation") or {}).get("totalResults") or "0"
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning(f"Unexpected totalResults value: {raw!r}")
        return 0


class GoogleCustomSearchClient:
    """Authenticated index-count lookup via the Custom Search API."""

    def __init__(self, app_settings: Dict[str, Any], session: Optional[requests.Session] = None):
        self.api_key = app_settings.get("googleApiKey")
        self.cx_id = app_settings.get("googleCxId")
        self.session = session or requests.Session()

    def indexed_count(self, domain: str) -> Dict[str, Any]:
        """
        Returns {"domain": domain, "indexedCount": n}.
        Raises ConfigurationError before any network call if credentials are missing,
        UpstreamError (with fix_url when Google supplies one) on a non-success response.
        """
        if not self.api_key or not self.cx_id:
            raise ConfigurationError("Google API Key or CX ID not configured in settings.")

        try:
            resp = self.session.get(
                settings.google_search_api_url,
                params={
                    "key": self.api_key,
                    "cx": self.cx_id,
                    "q": f"site:{domain}",
                    "alt": "json",
                },
                timeout=settings.request_timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error(f"Google API request failed for {domain}: {e}")
            raise UpstreamError(502, f"Could not reach Google API: {e}") from e

        if not resp.ok:
            try:
                error_data = resp.json()
            except ValueError:
                error_data = {}
            logger.error(f"Google API error for {domain}: {resp.status_code} {error_data}")

            error_message = None
            if isinstance(error_data, dict) and isinstance(error_data.get("error"), dict):
                error_message = error_data["error"].get("message")
            message = f"Google API failed: {error_message or resp.reason}"
            raise UpstreamError(resp.status_code, message, fix_url=extract_fix_url(error_data))

        count = _parse_total_results(resp.json())
        logger.info(f"Google API reports {count} indexed pages for {domain}")
        return {"domain": domain, "indexedCount": count}
