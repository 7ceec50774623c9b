"""
Base paginated tag source
"""

import sys
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Iterator, List, Optional
from urllib.parse import urljoin

from .errors import FetchError, MalformedPageError


@dataclass
class Page:
    """One page of a tag listing"""
    tags: List[str] = field(default_factory=list)
    next: Optional[str] = None


def parse_page(data: Any) -> Page:
    """
    Parse a decoded tag listing body

    Args:
        data: Decoded JSON body, expected to look like
            {"next": "https://..." | null, "results": [{"name": "1.2.3"}, ...]}

    Returns:
        Page with the tag names in server order

    Raises:
        MalformedPageError: if the body does not have that shape
    """
    if not isinstance(data, dict):
        raise MalformedPageError(f"expected a JSON object, got {type(data).__name__}")

    next_url = data.get('next')
    if next_url is not None and not isinstance(next_url, str):
        raise MalformedPageError(f"'next' must be a string or null, got {next_url!r}")

    results = data.get('results')
    if not isinstance(results, list):
        raise MalformedPageError(f"'results' must be a list, got {results!r}")

    tags = []
    for tag_data in results:
        name = tag_data.get('name') if isinstance(tag_data, dict) else None
        if not isinstance(name, str):
            raise MalformedPageError(f"tag entry without a string 'name': {tag_data!r}")
        tags.append(name)

    # An empty string is treated like null
    return Page(tags=tags, next=next_url or None)


class TagSource(ABC):
    """
    Abstract base class for cursor-paginated tag sources

    Iterating a source yields tag names one at a time. Pages are fetched
    lazily, only when the buffer from the previous page has been drained,
    so at most one page is held in memory. Any FetchError raised while
    fetching closes the source.
    """

    def __init__(self, first_url: str, verbose: bool = False):
        """
        Initialize source

        Args:
            first_url: URL of the first page of the listing
            verbose: Print progress messages to stderr
        """
        self.next_url: Optional[str] = first_url
        self.verbose = verbose
        self.pages_fetched = 0
        self._buffer: Deque[str] = deque()
        self._closed = False

    @abstractmethod
    def _request(self, url: str) -> Page:
        """
        Fetch and parse one page

        Args:
            url: Page URL

        Returns:
            Parsed Page

        Raises:
            FetchError: on any failure that prevents returning the page
        """
        pass

    def log(self, message: str):
        if self.verbose:
            print(message, file=sys.stderr)

    @property
    def exhausted(self) -> bool:
        """True once no more tags will be produced"""
        return self._closed or (not self._buffer and self.next_url is None)

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        while not self._buffer:
            if self._closed or self.next_url is None:
                raise StopIteration
            self._refill()
        return self._buffer.popleft()

    def _refill(self):
        url = self.next_url
        try:
            page = self._request(url)
        except FetchError:
            self._closed = True
            self._buffer.clear()
            raise

        self.pages_fetched += 1
        self.log(f"Fetched page {self.pages_fetched} ({len(page.tags)} tags) from {url}")

        self._buffer = deque(page.tags)
        self.next_url = urljoin(url, page.next) if page.next else None
