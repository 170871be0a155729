"""Web scraping components for project showcases.

This module provides the complete scraping pipeline:
- Fetcher: aiohttp GET with fixed User-Agent and timeout
- with_retry: bounded retry combinator for async operations
- PageDiscoverer / PaginationDriver: listing pagination and URL discovery
- ShowcaseParser: BeautifulSoup extraction of listing and project pages
- BatchProcessor: concurrent project scraping with failure partitioning
- Storage utilities: CSV/JSON export of successes and failures
- ShowcaseScraper: orchestrates the full run

Usage:
    from showcase_scraper.scraper import ShowcaseScraper

    async with ShowcaseScraper() as scraper:
        summary = await scraper.run()
"""

from .discovery import PageDiscoverer, PaginationDriver
from .fetcher import FetchResponse, Fetcher
from .models import (
    FailureRecord,
    PageResult,
    ProcessingResult,
    ProjectFailure,
    ProjectRecord,
    ProjectSuccess,
    RunSummary,
)
from .parsers import ShowcaseParser, extract_technologies
from .processor import BatchProcessor
from .retry import RetryResult, with_retry
from .showcase_scraper import ShowcaseScraper
from .storage import export_failures_to_json, export_projects_to_csv, load_failures, save_results

__all__ = [
    "BatchProcessor",
    "FailureRecord",
    "FetchResponse",
    "Fetcher",
    "PageDiscoverer",
    "PageResult",
    "PaginationDriver",
    "ProcessingResult",
    "ProjectFailure",
    "ProjectRecord",
    "ProjectSuccess",
    "RetryResult",
    "RunSummary",
    "ShowcaseParser",
    "ShowcaseScraper",
    "export_failures_to_json",
    "export_projects_to_csv",
    "extract_technologies",
    "load_failures",
    "save_results",
    "with_retry",
]
