"""
Website enrichment job.
Renders a website in headless Chromium, detects WordPress, extracts the
<title> and meta description, captures a JPEG screenshot and stores the
results on the website record.

States: idle -> fetching -> extracting -> persisting -> done, with `failed`
reachable from every non-idle state. The browser is always closed, whichever
way the job ends.
"""

import asyncio
import base64
import html as html_lib
import logging
import re
from contextlib import asynccontextmanager
from enum import Enum
from typing import Callable, Optional, Tuple
from urllib.parse import urlparse

import requests
from playwright.async_api import async_playwright, Error as PlaywrightError

from app.config import settings
from app.errors import EnrichmentError, SEOAdminError
from app.models.website import Website
from app.services.websites import WebsiteStore

logger = logging.getLogger(__name__)

WP_PROBE_PATH = "/wp-login.php"
PROBE_TIMEOUT = 10

TITLE_RE = re.compile(r"<title[^>]*>([^<]*)</title>", re.IGNORECASE)
DESCRIPTION_RES = (
    re.compile(r"<meta\s+name=[\"']description[\"']\s+content=[\"']([^\"']*)[\"'][^>]*>", re.IGNORECASE),
    re.compile(r"<meta\s+content=[\"']([^\"']*)[\"']\s+name=[\"']description[\"'][^>]*>", re.IGNORECASE),
)


class EnrichmentState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


def detect_wordpress(url: str) -> bool:
    """
    Probe <origin>/wp-login.php without following redirects.
    200 or any 3xx counts as WordPress. Probe errors mean "not detected".
    """
    parsed = urlparse(url)
    probe_url = f"{parsed.scheme or 'https'}://{parsed.netloc}{WP_PROBE_PATH}"
    try:
        resp = requests.get(
            probe_url,
            allow_redirects=False,
            headers={"User-Agent": "Mozilla/5.0"},
            timeout=PROBE_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.debug(f"WordPress probe failed for {probe_url}: {e}")
        return False
    return resp.status_code == 200 or 300 <= resp.status_code < 400


def extract_meta(page_html: str) -> Tuple[str, str]:
    """Return (title, description) from rendered HTML; empty strings when absent."""
    title_match = TITLE_RE.search(page_html)
    title = html_lib.unescape(title_match.group(1)).strip() if title_match else ""

    description = ""
    for pattern in DESCRIPTION_RES:
        match = pattern.search(page_html)
        if match:
            description = html_lib.unescape(match.group(1)).strip()
            break
    return title, description


@asynccontextmanager
async def browser_session():
    """Yield a fresh Chromium page; the browser is closed on every exit path."""
    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=settings.browser_headless)
        try:
            page = await browser.new_page(viewport={
                "width": settings.enrich_viewport_width,
                "height": settings.enrich_viewport_height,
            })
            yield page
        finally:
            await browser.close()


class EnrichmentJob:
    """One enrichment run for one website record."""

    def __init__(
        self,
        store: WebsiteStore,
        session_factory: Callable = browser_session,
        probe: Callable[[str], bool] = detect_wordpress,
    ):
        self.store = store
        self.session_factory = session_factory
        self.probe = probe
        self.state = EnrichmentState.IDLE
        self.error: Optional[str] = None

    async def run(self, website_id: str, url: Optional[str] = None) -> Website:
        """
        Enrich a website and return the reloaded record.

        Raises NotFoundError (before opening a browser) for an unknown id and
        EnrichmentError when the page cannot be loaded or rendered.
        """
        website = await asyncio.to_thread(self.store.get, website_id)
        target = url or website.url
        logger.info(f"Enriching website {website_id}: {target}")

        try:
            self._enter(EnrichmentState.FETCHING)
            is_wordpress = await asyncio.to_thread(self.probe, target)

            async with self.session_factory() as page:
                await page.goto(target, wait_until="networkidle", timeout=settings.enrich_navigation_timeout_ms)

                self._enter(EnrichmentState.EXTRACTING)
                title, description = extract_meta(await page.content())
                screenshot = await page.screenshot(type="jpeg", quality=settings.enrich_screenshot_quality)

            screenshot_url = "data:image/jpeg;base64," + base64.b64encode(screenshot).decode("ascii")

            self._enter(EnrichmentState.PERSISTING)
            updated = await asyncio.to_thread(self.store.update, website_id, {
                "is_wordpress": is_wordpress,
                "screenshot_url": screenshot_url,
                "meta_title": title,
                "meta_description": description,
            })
        except PlaywrightError as e:
            self._fail(str(e))
            raise EnrichmentError(f"Failed to enrich {target}: {e}") from e
        except SEOAdminError as e:
            self._fail(e.message)
            raise
        except Exception as e:
            self._fail(str(e))
            raise

        self._enter(EnrichmentState.DONE)
        logger.info(f"Enriched website {website_id} (wordpress={is_wordpress}, title={title!r})")
        return updated

    def _enter(self, state: EnrichmentState) -> None:
        logger.debug(f"Enrichment {self.state.value} -> {state.value}")
        self.state = state

    def _fail(self, reason: str) -> None:
        logger.error(f"Enrichment failed while {self.state.value}: {reason}")
        self.state = EnrichmentState.FAILED
        self.error = reason
