"""
Errors raised while enumerating registry tags
"""

from typing import Optional


class FetchError(Exception):
    """Base class for fatal errors raised by a tag source"""


class TransportError(FetchError):
    """The HTTP request itself failed (connection, DNS, TLS, timeout)"""


class MalformedPageError(FetchError):
    """The registry answered with a body that is not a tag page"""


class RetryAfterParseError(FetchError):
    """A 429 response carried an x-retry-after header that is not an epoch timestamp"""

    def __init__(self, value: str):
        super().__init__(f"could not parse x-retry-after {value!r}")
        self.value = value


class MissingRetryAfterError(FetchError):
    """A 429 response carried no x-retry-after header"""

    def __init__(self, url: str):
        super().__init__(f"got 429 from {url}, but no x-retry-after header")
        self.url = url


class HTTPStatusError(FetchError):
    """The registry answered with a non-success status other than 429"""

    def __init__(self, status_code: int, url: str, reason: Optional[str] = None):
        message = f"{status_code} error fetching {url}"
        if reason:
            message = f"{status_code} {reason} error fetching {url}"
        super().__init__(message)
        self.status_code = status_code
        self.url = url
