"""
Google results-page scraper.
Unauthenticated fallback for the indexed-page count: runs a site: query against
google.com and reads the "About N results" line. Fragile by nature; when the
phrase is missing (CAPTCHA, consent page, layout change) we report the service
as unavailable instead of claiming zero results.
"""

import re
import logging
from typing import Any, Dict, Optional

import requests

from app.config import settings
from app.errors import ServiceUnavailableError, UpstreamError

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36",
    "Accept-Language": "en-US,en;q=0.9",
}

RESULT_COUNT_RE = re.compile(r"About ([\d,]+) results")


def parse_result_count(html: str) -> Optional[int]:
    """Return the result count from a results page, or None if the phrase is absent."""
    match = RESULT_COUNT_RE.search(html or "")
    if not match:
        return None
    return int(match.group(1).replace(",", ""))


class GoogleResultsScraper:
    """Unauthenticated index-count lookup."""

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()

    def indexed_count(self, domain: str) -> Dict[str, Any]:
        try:
            resp = self.session.get(
                settings.google_search_url,
                params={"q": f"site:{domain}", "hl": "en"},
                headers=HEADERS,
                timeout=settings.request_timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error(f"Google search request failed for {domain}: {e}")
            raise UpstreamError(502, f"Could not reach Google: {e}") from e

        if not resp.ok:
            logger.warning(f"Google search responded {resp.status_code} for {domain}")
            raise UpstreamError(resp.status_code, f"Google responded with status: {resp.status_code}")

        count = parse_result_count(resp.text)
        if count is None:
            logger.warning(f"No result count on Google page for {domain} (blocked or layout changed)")
            raise ServiceUnavailableError(
                "Could not parse result count. Google may have blocked the request or changed its page layout."
            )

        logger.info(f"Google results page reports {count} indexed pages for {domain}")
        return {"domain": domain, "indexedCount": count}
