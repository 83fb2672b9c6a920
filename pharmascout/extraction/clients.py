"""
Registry Table Clients

Two ways to load a registry page and read its table rows:
- HttpTableClient: plain HTTP with requests, parsed with BeautifulSoup
- BrowserTableClient: headless Chromium via Playwright, for pages whose
  table is rendered by JavaScript

Both raise NavigationError / SelectorNotFound; the extractor turns these
into per-page error strings.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from .parsers.table_parser import RegistryTableParser

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)


class TableClientError(Exception):
    """Base class for registry page loading failures."""


class NavigationError(TableClientError):
    """Page could not be loaded (timeout, HTTP error, browser error)."""


class SelectorNotFound(TableClientError):
    """None of the candidate row selectors matched the page."""


@dataclass
class PageHandle:
    """A loaded registry page. ``html`` for HTTP pages, ``page`` for browser pages."""
    url: str
    html: str = ""
    page: Any = None


class TableClient:
    """Interface for loading registry pages and reading table rows."""

    # Whether navigate/read_rows may be called from several threads at once
    thread_safe = True

    def navigate(self, url: str, wait_until: str = "networkidle", timeout_ms: int = 30000) -> PageHandle:
        raise NotImplementedError

    def read_rows(self, handle: PageHandle, selectors: Sequence[str],
                  timeout_ms: int = 5000) -> List[List[str]]:
        raise NotImplementedError

    def total_records(self, handle: PageHandle) -> Optional[int]:
        """Total record count shown on the page, if any."""
        return None

    def release(self, handle: PageHandle) -> None:
        """Free per-page resources."""

    def close(self) -> None:
        """Free client resources."""

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class HttpTableClient(TableClient):
    """
    Loads registry pages with requests and parses rows with BeautifulSoup.

    ``wait_until`` is accepted for interface compatibility; a plain HTTP
    fetch has nothing to wait for.
    """

    def __init__(self, session: Optional[requests.Session] = None,
                 user_agent: str = DEFAULT_USER_AGENT):
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml",
        })

    def navigate(self, url: str, wait_until: str = "networkidle", timeout_ms: int = 30000) -> PageHandle:
        try:
            response = self.session.get(url, timeout=timeout_ms / 1000.0)
        except requests.exceptions.Timeout as e:
            raise NavigationError(f"Timeout after {timeout_ms}ms loading {url}") from e
        except requests.exceptions.RequestException as e:
            raise NavigationError(f"Request failed for {url}: {e}") from e

        if response.status_code >= 400:
            raise NavigationError(f"HTTP {response.status_code} loading {url}")

        return PageHandle(url=url, html=response.text)

    def read_rows(self, handle: PageHandle, selectors: Sequence[str],
                  timeout_ms: int = 5000) -> List[List[str]]:
        rows = RegistryTableParser(handle.html).extract_rows(selectors)
        if rows is None:
            raise SelectorNotFound(f"No table rows found on {handle.url}")
        return rows

    def total_records(self, handle: PageHandle) -> Optional[int]:
        return RegistryTableParser(handle.html).extract_total_records()

    def close(self) -> None:
        self.session.close()


class BrowserTableClient(TableClient):
    """
    Loads registry pages in headless Chromium (Playwright sync API).

    The browser is started lazily on first navigation. Playwright's sync
    API is bound to one thread, so the extractor runs this client with a
    single worker.
    """

    thread_safe = False

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT, headless: bool = True):
        self.user_agent = user_agent
        self.headless = headless
        self._playwright = None
        self._browser = None
        self._context = None

    def _ensure_browser(self) -> None:
        if self._context is not None:
            return
        logger.debug("Launching headless Chromium")
        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.launch(headless=self.headless)
        self._context = self._browser.new_context(user_agent=self.user_agent)

    def navigate(self, url: str, wait_until: str = "networkidle", timeout_ms: int = 30000) -> PageHandle:
        try:
            self._ensure_browser()
            page = self._context.new_page()
        except PlaywrightError as e:
            raise NavigationError(f"Browser unavailable: {e}") from e

        try:
            page.goto(url, wait_until=wait_until, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            page.close()
            raise NavigationError(f"Timeout after {timeout_ms}ms loading {url}") from e
        except PlaywrightError as e:
            page.close()
            raise NavigationError(f"Navigation failed for {url}: {e}") from e

        return PageHandle(url=url, page=page)

    def read_rows(self, handle: PageHandle, selectors: Sequence[str],
                  timeout_ms: int = 5000) -> List[List[str]]:
        page = handle.page
        for selector in selectors:
            try:
                page.wait_for_selector(selector, timeout=timeout_ms)
            except PlaywrightTimeoutError:
                logger.debug("Selector %s not found on %s", selector, handle.url)
                continue
            except PlaywrightError as e:
                raise NavigationError(f"Page error on {handle.url}: {e}") from e

            try:
                rows = page.query_selector_all(selector)
                if rows:
                    logger.debug("Found %d rows with selector %s", len(rows), selector)
                    return [
                        [cell.inner_text().strip() for cell in row.query_selector_all("td")]
                        for row in rows
                    ]
            except PlaywrightError as e:
                # Page closed or navigated away while reading
                raise NavigationError(f"Page error on {handle.url}: {e}") from e

        raise SelectorNotFound(f"No table rows found on {handle.url}")

    def total_records(self, handle: PageHandle) -> Optional[int]:
        try:
            html = handle.page.content()
        except PlaywrightError as e:
            logger.debug("Could not read page content: %s", e)
            return None
        return RegistryTableParser(html).extract_total_records()

    def release(self, handle: PageHandle) -> None:
        if handle.page is not None:
            try:
                handle.page.close()
            except PlaywrightError as e:
                logger.debug("Error closing page: %s", e)

    def close(self) -> None:
        if self._browser is not None:
            self._browser.close()
        if self._playwright is not None:
            self._playwright.stop()
        self._browser = None
        self._context = None
        self._playwright = None


CLIENTS = {
    'http': HttpTableClient,
    'browser': BrowserTableClient,
}


def get_table_client(name: str, **kwargs) -> TableClient:
    """
    Create a table client by name.

    Raises:
        ValueError: If the client name is unknown
    """
    try:
        client_class = CLIENTS[name]
    except KeyError:
        supported = ', '.join(CLIENTS)
        raise ValueError(f"Unknown table client: {name}. Supported: {supported}") from None
    return client_class(**kwargs)
