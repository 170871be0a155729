"""Helper utilities for scraping operations."""

from typing import Iterator, Sequence, TypeVar
from urllib.parse import parse_qsl, urlencode, urljoin, urlparse, urlunparse

T = TypeVar("T")


def build_page_url(base_url: str, page_number: int) -> str:
    """Build the listing URL for a page number.

    Handles base URLs with and without an existing query string:
    - https://ethglobal.com/showcase -> https://ethglobal.com/showcase?page=2
    - https://ethglobal.com/showcase?event=x -> ...?event=x&page=2

    Args:
        base_url: Listing URL
        page_number: 1-based page number

    Returns:
        Listing URL with the ``page`` query parameter set
    """
    if page_number < 1:
        raise ValueError(f"page_number must be >= 1, got {page_number}")

    parsed = urlparse(base_url)
    query = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if k != 'page']
    query.append(('page', str(page_number)))
    return urlunparse(parsed._replace(query=urlencode(query)))


def to_absolute_url(href: str, origin: str) -> str:
    """Resolve an item link against the site origin.

    Args:
        href: Link as found in the markup (usually a root-relative path)
        origin: Scheme and host, e.g. ``https://ethglobal.com``

    Returns:
        Absolute URL
    """
    return urljoin(origin.rstrip('/') + '/', href.strip())


def name_from_url(url: str) -> str:
    """Derive a readable name from the last path segment of a URL.

    - https://ethglobal.com/showcase/my-cool-dapp-abc12 -> "my cool dapp abc12"
    """
    path = urlparse(url).path.rstrip('/')
    return path.rsplit('/', 1)[-1].replace('-', ' ')


def chunked(values: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of ``values`` with at most ``size`` elements."""
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")
    for idx in range(0, len(values), size):
        yield values[idx:idx + size]


def unique(values) -> list:
    """Drop repeated values, keeping first-seen order."""
    return list(dict.fromkeys(values))
