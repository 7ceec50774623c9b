"""
Registry Versions - latest release per major.minor line

Lists the tags of a container image repository and reports the highest
semantic version published for each major.minor line.
"""

__version__ = '0.1.0'

from .base import TagSource, Page, parse_page
from .docker_hub import DockerHubTagSource
from .errors import (
    FetchError,
    TransportError,
    MalformedPageError,
    RetryAfterParseError,
    MissingRetryAfterError,
    HTTPStatusError,
)
from .versions import MajorMinor, VersionAggregator, parse_version

__all__ = [
    'TagSource',
    'Page',
    'parse_page',
    'DockerHubTagSource',
    'FetchError',
    'TransportError',
    'MalformedPageError',
    'RetryAfterParseError',
    'MissingRetryAfterError',
    'HTTPStatusError',
    'MajorMinor',
    'VersionAggregator',
    'parse_version',
]
