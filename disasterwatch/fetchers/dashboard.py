# disasterwatch/fetchers/dashboard.py
# Disaster dashboard fetcher: rendered page first (Playwright), JSON endpoint second.
# Produces Update records, newest first, in page order.
#
# Public API:
#   DashboardFetcher(url, api_url).fetch_primary() -> List[Update]
#   DashboardFetcher(url, api_url).fetch_secondary() -> List[Update]
#   parse_dashboard(html, reveal=None) -> List[Update]   (no browser needed)
#   map_api_items(data) -> List[Update]
#
# Dependencies: playwright, beautifulsoup4, lxml, requests

from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import requests
from bs4 import BeautifulSoup, Tag
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page
from playwright.sync_api import TimeoutError as PlaywrightTimeout
from playwright.sync_api import sync_playwright

from .base import Fetcher, Update
from ..config import (
    API_TIMEOUT,
    API_URL,
    BROWSER_UA,
    NAV_TIMEOUT_MS,
    SCRAPE_URL,
    SELECTOR_TIMEOUT_MS,
)
from ..net import make_session
from ..utils.text import find_last_updated, truncate

LOG = logging.getLogger("disasterwatch")

# ---------------------------------------------------------------------
# Page structure
# ---------------------------------------------------------------------
READY_SELECTOR = "#NewsWarningContent, .contentItem, .divToAppend1"
ITEM_SELECTOR = ".contentItem"
ITEM_TITLE_SELECTOR = ".contentTitle a"
ITEM_TIMESTAMP_SELECTOR = ".updateInfo"
ITEM_CONTENT_SELECTOR = ".contentDetail"
CLICK_SELECTOR = ".contentTitle a, .conItem, .newsItem"
MODAL_SELECTOR = ".modal.fade.in, .modal-body, #newsModal"
MODAL_BODY_SELECTOR = ".modal-body"
MODAL_CLOSE_SELECTOR = ".modal .close, .modal-footer button"
HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6", "a", "strong"]
HAZARD_WORDS = ("cyclone", "flood", "disaster")

CONTENT_LIMIT = 500
TITLE_LIMIT = 200
MIN_TITLE_LEN = 5
MODAL_SETTLE_MS = 1000
MODAL_CLOSE_MS = 500
VIEWPORT = {"width": 1280, "height": 800}
LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

# API field aliases, tried in order; first non-empty value wins
TITLE_FIELDS = ("title", "heading")
TIMESTAMP_FIELDS = ("timestamp", "date", "updatedAt")
CONTENT_FIELDS = ("content", "description")
UNTITLED = "Untitled"

RevealFn = Callable[[int, str], Optional[str]]

_CLICK_JS = """([selector, index]) => {
    const elements = document.querySelectorAll(selector);
    if (elements.length > index) {
        elements[index].click();
    }
}"""
_MODAL_BODY_JS = """(selector) => {
    const body = document.querySelector(selector);
    return body ? body.innerHTML : '';
}"""
_MODAL_CLOSE_JS = """(selector) => {
    const button = document.querySelector(selector);
    if (button) {
        button.click();
    }
}"""


# ---------------------------------------------------------------------
# HTML parsing
# ---------------------------------------------------------------------

def _text(el: Optional[Tag]) -> str:
    return el.get_text().strip() if el is not None else ""


def parse_content_item(el: Tag) -> Optional[Update]:
    """Turn one .contentItem block into an Update (without modal detail)."""
    title = _text(el.select_one(ITEM_TITLE_SELECTOR))
    if not title:
        return None
    timestamp = _text(el.select_one(ITEM_TIMESTAMP_SELECTOR))
    detail = el.select_one(ITEM_CONTENT_SELECTOR)
    content = detail.decode_contents() if detail is not None else ""
    return Update(
        title=title,
        timestamp=timestamp,
        content=truncate(content, CONTENT_LIMIT),
    )


def parse_heuristic(soup: BeautifulSoup) -> List[Update]:
    """Scan generic divs that mention an update marker and a hazard."""
    updates: List[Update] = []
    for div in soup.find_all("div"):
        full_text = div.get_text().strip()
        lowered = full_text.lower()
        if "last updated" not in lowered or not any(w in lowered for w in HAZARD_WORDS):
            continue

        heading = div.find(HEADING_TAGS)
        if heading is not None:
            title = heading.get_text().strip()
        else:
            title = full_text.split("\n")[0].strip()

        timestamp = find_last_updated(full_text) if "Last Updated" in full_text else ""

        content = full_text.replace(title, "", 1)
        if timestamp:
            content = content.replace(timestamp, "", 1)
        content = truncate(content.strip(), CONTENT_LIMIT)

        if title and len(title) > MIN_TITLE_LEN:
            updates.append(Update(title=title[:TITLE_LIMIT], timestamp=timestamp, content=content))
            LOG.info("Extracted update: %r (%s)", title[:50], timestamp)
    return updates


def parse_dashboard(html: str, reveal: Optional[RevealFn] = None) -> List[Update]:
    """Parse rendered dashboard HTML.

    reveal(index, title) is called for every titled .contentItem and may
    return the expanded detail HTML; the heuristic path never calls it.
    """
    soup = BeautifulSoup(html, "lxml")
    items = soup.select(ITEM_SELECTOR)
    LOG.info("Found %d contentItem elements", len(items))
    if not items:
        LOG.info("No contentItem elements found, trying heuristic scan")
        return parse_heuristic(soup)

    updates: List[Update] = []
    for idx, el in enumerate(items):
        update = parse_content_item(el)
        if update is None:
            continue
        if reveal is not None:
            update.full_content = reveal(idx, update.title)
        updates.append(update)
        LOG.info("Found update: %r (%s)", update.title, update.timestamp)
    return updates


# ---------------------------------------------------------------------
# API mapping
# ---------------------------------------------------------------------

def _first(item: Dict[str, Any], fields: Sequence[str]) -> Optional[str]:
    for name in fields:
        value = item.get(name)
        if value not in (None, ""):
            return str(value)
    return None


def map_api_items(data: Iterable[Any]) -> List[Update]:
    updates: List[Update] = []
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            LOG.debug("API item[%d] is not an object; skipping. Item=%r", idx, item)
            continue
        updates.append(Update(
            title=_first(item, TITLE_FIELDS) or UNTITLED,
            timestamp=_first(item, TIMESTAMP_FIELDS),
            content=_first(item, CONTENT_FIELDS),
        ))
    return updates


# ---------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------

class DashboardFetcher(Fetcher):
    name = "dashboard"

    def __init__(
        self,
        url: str = SCRAPE_URL,
        api_url: str = API_URL,
        nav_timeout_ms: int = NAV_TIMEOUT_MS,
        selector_timeout_ms: int = SELECTOR_TIMEOUT_MS,
        api_timeout: int = API_TIMEOUT,
        user_agent: str = BROWSER_UA,
        headless: bool = True,
    ):
        self.url = url
        self.api_url = api_url
        self.nav_timeout_ms = nav_timeout_ms
        self.selector_timeout_ms = selector_timeout_ms
        self.api_timeout = api_timeout
        self.user_agent = user_agent
        self.headless = headless

    # ----------------------- primary -----------------------

    def fetch_primary(self) -> List[Update]:
        LOG.info("Launching headless browser to fetch %s", self.url)
        try:
            with sync_playwright() as pw:
                browser = pw.chromium.launch(headless=self.headless, args=LAUNCH_ARGS)
                try:
                    page = browser.new_page(viewport=VIEWPORT, user_agent=self.user_agent)
                    updates = self._scrape(page)
                finally:
                    browser.close()
                    LOG.debug("Browser closed")
        except Exception:
            LOG.exception("Rendered scrape of %s failed", self.url)
            return []
        LOG.info("Successfully parsed %d updates", len(updates))
        return updates

    def _scrape(self, page: Page) -> List[Update]:
        page.goto(self.url, timeout=self.nav_timeout_ms, wait_until="networkidle")
        LOG.info("Page loaded, waiting for content to render...")
        try:
            page.wait_for_selector(READY_SELECTOR, timeout=self.selector_timeout_ms)
        except PlaywrightTimeout:
            LOG.info("Content selectors not found, continuing with page content")

        LOG.info("Page title: %s", page.title())
        html = page.content()
        LOG.info("Retrieved %d bytes of rendered HTML", len(html))
        return parse_dashboard(html, reveal=lambda idx, title: self._reveal_detail(page, idx, title))

    def _reveal_detail(self, page: Page, index: int, title: str) -> Optional[str]:
        """Click the index-th title, read the modal body, close it again."""
        try:
            LOG.debug("Opening detail for %r", title)
            page.wait_for_selector(CLICK_SELECTOR, timeout=self.selector_timeout_ms)
            page.evaluate(_CLICK_JS, [CLICK_SELECTOR, index])
            page.wait_for_selector(MODAL_SELECTOR, timeout=self.selector_timeout_ms)
            page.wait_for_timeout(MODAL_SETTLE_MS)
            body = page.evaluate(_MODAL_BODY_JS, MODAL_BODY_SELECTOR)
            LOG.debug("Extracted %d bytes of modal content", len(body or ""))
            page.evaluate(_MODAL_CLOSE_JS, MODAL_CLOSE_SELECTOR)
            page.wait_for_timeout(MODAL_CLOSE_MS)
        except PlaywrightError as e:
            LOG.info("Could not extract modal content for %r: %s", title, e)
            return None
        return body or None

    # ---------------------- secondary ----------------------

    def fetch_secondary(self) -> List[Update]:
        LOG.info("Trying alternative approach: %s", self.api_url)
        try:
            with make_session(self.user_agent) as s:
                r = s.get(self.api_url, timeout=self.api_timeout)
                r.raise_for_status()
                data = r.json()
        except (requests.RequestException, ValueError) as e:
            LOG.info("Alternative approach failed, expected if no API exists: %s", e)
            return []

        if not isinstance(data, list):
            LOG.info("Alternative approach returned %s, not a list; ignoring", type(data).__name__)
            return []

        updates = map_api_items(data)
        LOG.info("Alternative approach returned %d updates", len(updates))
        return updates
