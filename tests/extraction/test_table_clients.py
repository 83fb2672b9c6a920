"""Tests for pharmascout/extraction/clients.py"""

from unittest.mock import MagicMock

import pytest
import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from pharmascout.extraction.clients import (
    BrowserTableClient,
    HttpTableClient,
    NavigationError,
    PageHandle,
    SelectorNotFound,
    get_table_client,
)

TABLE_HTML = """
<html><body><table><tbody>
<tr><td>Paracetamol 500mg tablete N123456-01</td><td>Paracetamolum</td></tr>
</tbody></table><p>1 entries selected</p></body></html>
"""


def _session(status_code=200, text=TABLE_HTML):
    session = MagicMock()
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    session.get.return_value = response
    return session


class TestHttpTableClient:
    def test_navigate_and_read_rows(self):
        client = HttpTableClient(session=_session())
        handle = client.navigate("https://registry.example/?page=1", timeout_ms=30000)
        assert client.read_rows(handle, ["table tbody tr"]) == [
            ["Paracetamol 500mg tablete N123456-01", "Paracetamolum"]]
        assert client.total_records(handle) == 1

    def test_timeout_in_seconds(self):
        session = _session()
        HttpTableClient(session=session).navigate("https://registry.example/", timeout_ms=30000)
        assert session.get.call_args.kwargs["timeout"] == 30.0

    def test_http_error_raises_navigation_error(self):
        client = HttpTableClient(session=_session(status_code=503))
        with pytest.raises(NavigationError, match="HTTP 503"):
            client.navigate("https://registry.example/")

    def test_request_timeout_raises_navigation_error(self):
        session = _session()
        session.get.side_effect = requests.exceptions.Timeout("read timed out")
        with pytest.raises(NavigationError, match="Timeout"):
            HttpTableClient(session=session).navigate("https://registry.example/")

    def test_connection_error_raises_navigation_error(self):
        session = _session()
        session.get.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(NavigationError):
            HttpTableClient(session=session).navigate("https://registry.example/")

    def test_no_rows_raises_selector_not_found(self):
        client = HttpTableClient(session=_session(text="<html><body></body></html>"))
        handle = client.navigate("https://registry.example/")
        with pytest.raises(SelectorNotFound):
            client.read_rows(handle, ["table tbody tr"])

    def test_context_manager_closes_session(self):
        session = _session()
        with HttpTableClient(session=session):
            pass
        session.close.assert_called_once()


class TestBrowserTableClient:
    def test_not_thread_safe(self):
        assert BrowserTableClient.thread_safe is False

    def test_read_rows_tries_next_selector_after_timeout(self):
        cell = MagicMock()
        cell.inner_text.return_value = "  Paracetamolum "
        row = MagicMock()
        row.query_selector_all.return_value = [cell]
        page = MagicMock()
        page.wait_for_selector.side_effect = [PlaywrightTimeoutError("timeout"), None]
        page.query_selector_all.return_value = [row]

        rows = BrowserTableClient().read_rows(PageHandle(url="u", page=page), ["#missing tr", "table tbody tr"])

        assert rows == [["Paracetamolum"]]
        page.query_selector_all.assert_called_once_with("table tbody tr")

    def test_read_rows_raises_when_no_selector_matches(self):
        page = MagicMock()
        page.wait_for_selector.side_effect = PlaywrightTimeoutError("timeout")
        with pytest.raises(SelectorNotFound):
            BrowserTableClient().read_rows(PageHandle(url="u", page=page), ["table tbody tr"])

    def test_read_rows_closed_page_is_navigation_error(self):
        page = MagicMock()
        page.wait_for_selector.side_effect = PlaywrightError("Target page, context or browser has been closed")
        with pytest.raises(NavigationError, match="Page error on u"):
            BrowserTableClient().read_rows(PageHandle(url="u", page=page), ["table tbody tr"])

    def test_read_rows_detached_cell_is_navigation_error(self):
        cell = MagicMock()
        cell.inner_text.side_effect = PlaywrightError("Element is not attached to the DOM")
        row = MagicMock()
        row.query_selector_all.return_value = [cell]
        page = MagicMock()
        page.query_selector_all.return_value = [row]
        with pytest.raises(NavigationError):
            BrowserTableClient().read_rows(PageHandle(url="u", page=page), ["table tbody tr"])

    def test_release_closes_page(self):
        page = MagicMock()
        BrowserTableClient().release(PageHandle(url="u", page=page))
        page.close.assert_called_once()


class TestGetTableClient:
    def test_known_client(self):
        assert isinstance(get_table_client("http", session=_session()), HttpTableClient)

    def test_unknown_client(self):
        with pytest.raises(ValueError, match="Unknown table client"):
            get_table_client("ftp")
