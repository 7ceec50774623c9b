"""
Docker Hub tag source
"""

import requests
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from . import __version__
from .base import TagSource, Page, parse_page
from .errors import (
    HTTPStatusError,
    MalformedPageError,
    MissingRetryAfterError,
    RetryAfterParseError,
    TransportError,
)

DEFAULT_HOST = 'hub.docker.com'
DEFAULT_PAGE_SIZE = 100
RETRY_AFTER_HEADER = 'x-retry-after'


class DockerHubTagSource(TagSource):
    """Tag source for the Docker Hub v2 namespaces API"""

    def __init__(
        self,
        namespace: str,
        repo: str,
        host: str = DEFAULT_HOST,
        page_size: int = DEFAULT_PAGE_SIZE,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
        verbose: bool = False,
    ):
        """
        Initialize Docker Hub tag source

        Args:
            namespace: Repository namespace (e.g., "library", "istio")
            repo: Repository name (e.g., "python", "proxyv2")
            host: Registry host (default: hub.docker.com)
            page_size: Tags requested per page (default: 100)
            timeout: Per-request timeout in seconds (default: None, no timeout)
            session: requests session to send requests with (default: a new one)
            clock: Returns the current time in epoch seconds
            sleep: Blocks for the given number of seconds
            verbose: Print progress messages to stderr
        """
        self.host = host
        self.namespace = namespace
        self.repo = repo
        self.api_base = f"https://{host}/v2"
        super().__init__(
            f"{self.api_base}/namespaces/{namespace}/repositories/{repo}/tags?page_size={page_size}",
            verbose=verbose,
        )
        self.timeout = timeout
        self.clock = clock
        self.sleep = sleep
        self.rate_limited = 0

        if session is None:
            session = requests.Session()
            session.headers.update({
                'User-Agent': f'registry-versions/{__version__}'
            })
        self.session = session

    def _request(self, url: str) -> Page:
        """
        Fetch one page, waiting out 429 responses

        The same URL is retried for as long as the registry keeps answering
        429 with a retry time.

        Args:
            url: Page URL

        Returns:
            Parsed Page
        """
        while True:
            try:
                response = self.session.get(url, timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                raise TransportError(f"Error fetching {url}: {e}") from e

            if response.status_code == 429:
                self._wait_for_retry(url, response.headers.get(RETRY_AFTER_HEADER))
                continue

            if not 200 <= response.status_code < 300:
                raise HTTPStatusError(response.status_code, url, response.reason)

            try:
                data = response.json()
            except ValueError as e:
                raise MalformedPageError(f"Invalid JSON from {url}: {e}") from e

            return parse_page(data)

    def _wait_for_retry(self, url: str, retry_after: Optional[str]):
        """
        Block until the time given by an x-retry-after header

        Args:
            url: URL that was throttled
            retry_after: Header value, an integer epoch timestamp
        """
        if retry_after is None:
            raise MissingRetryAfterError(url)

        try:
            retry_at = int(retry_after.strip())
            # Must be representable as a platform timestamp
            datetime.fromtimestamp(retry_at, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            raise RetryAfterParseError(retry_after) from None

        self.rate_limited += 1
        delay = retry_at - self.clock()
        if delay > 0:
            self.log(f"Rate limited on {url}, retrying in {delay:.1f}s")
            try:
                self.sleep(delay)
            except OverflowError:
                raise RetryAfterParseError(retry_after) from None
        else:
            self.log(f"Rate limited on {url}, retrying now")
