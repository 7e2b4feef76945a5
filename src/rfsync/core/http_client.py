"""HTTP client for the remote test-management service.

Every request carries the caller's token in the CLIENT_TOKEN header and a
user agent naming this tool. Certificate verification is disabled; callers
using a self-hosted or proxied endpoint must provide a trusted channel.

Two read conventions exist:
- get() is lenient: a non-200 answer means "no data" and returns None.
  Use it only for lookups whose absence is harmless.
- Everything else is strict and raises RemoteError on any HTTP or
  transport failure.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests
import urllib3
from requests.adapters import HTTPAdapter

from .. import __version__
from .batch import THREADS
from .errors import RemoteError
from .models import RemoteTest

logger = logging.getLogger(__name__)

__all__ = ["DEFAULT_API_URL", "PAGE_SIZE", "RemoteClient"]

DEFAULT_API_URL = "https://app.rainforestqa.com/api/1"
PAGE_SIZE = 1000
TOKEN_HEADER = "CLIENT_TOKEN"
USER_AGENT = f"rfml-sync-{__version__}"

urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)


class RemoteClient:
    """Client for the remote tests API.

    One requests.Session is shared by all worker threads; its connection
    pool holds one connection per worker.
    """

    def __init__(
        self,
        token: str,
        api_url: Optional[str] = None,
        timeout: float = 60.0,
        pool_size: int = THREADS,
    ) -> None:
        """Initialize the client.

        Args:
            token: API token sent with every request
            api_url: Base URL of the API (default: DEFAULT_API_URL)
            timeout: Per-request timeout in seconds
            pool_size: Connections kept per host (default: one per worker)
        """
        self.api_url = (api_url or DEFAULT_API_URL).rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.verify = False
        adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        self.session.headers.update(
            {
                TOKEN_HEADER: token,
                "User-Agent": USER_AGENT,
            }
        )

    def make_url(self, path: str) -> str:
        return f"{self.api_url}/{path.lstrip('/')}"

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make a strict request.

        Returns:
            Decoded JSON body, or None for an empty body

        Raises:
            RemoteError: On transport failure, non-2xx status or invalid JSON
        """
        url = self.make_url(path)
        try:
            response = self.session.request(
                method, url, params=params, json=data, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise RemoteError(f"Connection failed to {url}: {e}", url=url) from e

        if not response.ok:
            error_msg = f"HTTP {response.status_code}: {response.reason}"
            try:
                body = response.json()
                if isinstance(body, dict) and body.get("error"):
                    error_msg = f"{error_msg} ({body['error']})"
            except ValueError:
                pass
            logger.error(f"{method} {url} failed: {error_msg}")
            raise RemoteError(error_msg, status_code=response.status_code, url=url)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(
                f"Invalid JSON from {url}", status_code=response.status_code, url=url
            ) from e

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Lenient read: decoded body on HTTP 200, None otherwise.

        Transport failures still raise RemoteError.
        """
        url = self.make_url(path)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteError(f"Connection failed to {url}: {e}", url=url) from e

        if response.status_code != 200:
            logger.debug(f"GET {url} returned {response.status_code}, treating as no data")
            return None
        try:
            return response.json()
        except ValueError:
            return None

    def post(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("POST", path, data=data)

    def put(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("PUT", path, data=data)

    def delete(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("DELETE", path, data=data)

    # ===== Tests API =====

    def list_tests(self, page_size: int = PAGE_SIZE) -> List[RemoteTest]:
        """List every remote test (summaries, without elements).

        Pages through the listing until a short page is returned.
        """
        tests: List[RemoteTest] = []
        page = 1
        while True:
            batch = self._request(
                "GET", "tests", params={"page_size": page_size, "page": page}
            ) or []
            tests.extend(RemoteTest.from_api(item) for item in batch)
            if len(batch) < page_size:
                break
            page += 1
        logger.debug(f"Listed {len(tests)} remote tests in {page} page(s)")
        return tests

    def retrieve(self, test_id: int) -> RemoteTest:
        """Fetch one test including its element tree."""
        return RemoteTest.from_api(self._request("GET", f"tests/{test_id}"))

    def create(self, payload: Dict[str, Any]) -> RemoteTest:
        return RemoteTest.from_api(self.post("tests", payload))

    def update(self, test_id: int, payload: Dict[str, Any]) -> RemoteTest:
        return RemoteTest.from_api(self.put(f"tests/{test_id}", payload))

    def count_tests(self) -> Optional[int]:
        """Number of remote tests, or None when the service gives no data.

        Uses the lenient read; this only feeds the status display.
        """
        count = 0
        page = 1
        while True:
            batch = self.get("tests", params={"page_size": PAGE_SIZE, "page": page})
            if batch is None:
                return None if page == 1 else count
            count += len(batch)
            if len(batch) < PAGE_SIZE:
                return count
            page += 1
