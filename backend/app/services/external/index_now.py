"""
IndexNow submission client.
Pushes one URL or a batch to the IndexNow endpoint in a single request.
The key file is expected at https://<host>/<key>.txt, where <host> is the
host of the first submitted URL.
"""

import logging
from typing import Any, Dict, List, Optional, Union

import requests

from app.config import settings
from app.errors import ConfigurationError, InvalidRequestError, UpstreamError
from app.services.websites import host_from_url

logger = logging.getLogger(__name__)


def build_payload(urls: List[str], key: str) -> Dict[str, Any]:
    """Build the IndexNow JSON body. Key verification uses the first URL's host."""
    host = host_from_url(urls[0])
    return {
        "host": host,
        "key": key,
        "keyLocation": f"https://{host}/{key}.txt",
        "urlList": urls,
    }


class IndexNowClient:
    """Client for the IndexNow bulk submission API."""

    def __init__(self, key: Optional[str] = None, endpoint: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        self.key = key if key is not None else settings.indexnow_key
        self.endpoint = endpoint or settings.indexnow_endpoint
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.key)

    def push(self, url_or_urls: Union[str, List[str]]) -> Dict[str, Any]:
        """
        Submit a URL or a list of URLs. Returns {"message": ...} on success.
        No retry; a non-success response is raised with the upstream status and body.
        """
        urls = [url_or_urls] if isinstance(url_or_urls, str) else list(url_or_urls or [])
        urls = [u.strip() for u in urls if u and u.strip()]
        if not urls:
            raise InvalidRequestError("URL to submit is required.")

        bad = [u for u in urls if not host_from_url(u)]
        if bad:
            raise InvalidRequestError(f"Invalid URL: {bad[0]}")

        if not self.configured:
            raise ConfigurationError("IndexNow key not configured. Set INDEXNOW_KEY.")

        hosts = {host_from_url(u) for u in urls}
        if len(hosts) > 1:
            logger.warning(
                f"IndexNow batch spans {len(hosts)} hosts; key is verified against {host_from_url(urls[0])} only"
            )

        payload = build_payload(urls, self.key)
        try:
            resp = self.session.post(
                self.endpoint,
                json=payload,
                headers={"Content-Type": "application/json; charset=utf-8"},
                timeout=settings.request_timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error(f"IndexNow request failed: {e}")
            raise UpstreamError(502, f"Could not reach IndexNow: {e}") from e

        if not resp.ok:
            logger.error(f"IndexNow API error {resp.status_code}: {resp.text}")
            raise UpstreamError(resp.status_code, f"IndexNow API failed with status: {resp.status_code}. {resp.text}")

        logger.info(f"Submitted {len(urls)} URL(s) for {payload['host']} to IndexNow")
        if len(urls) == 1:
            return {"message": f"Successfully submitted {urls[0]} to IndexNow."}
        return {"message": f"Successfully submitted {len(urls)} URLs to IndexNow."}
