"""aiohttp-based scraper for project showcase listings.

This module wires the pipeline together: paginated URL discovery, batched
project scraping with retries, and export of successes and failures.

Example:
    >>> async with ShowcaseScraper(config) as scraper:
    ...     summary = await scraper.run()
    ...     print(f"{summary.succeeded}/{summary.discovered} projects scraped")
"""

import logging
import time
from pathlib import Path
from typing import Optional, Sequence

from showcase_scraper.utils import AppConfig, get_config, get_logger, log_execution_time

from .discovery import PageDiscoverer, PaginationDriver
from .fetcher import Fetcher
from .models import ProcessingResult, RunSummary
from .parsers import ShowcaseParser
from .processor import BatchProcessor
from .storage import save_results

logger = get_logger(__name__)


class ShowcaseScraper:
    """Asynchronous scraper for a paginated project showcase."""

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        fetcher: Optional[Fetcher] = None,
        parser: Optional[ShowcaseParser] = None,
        log: Optional[logging.Logger] = None,
    ):
        """Initialize the scraper.

        Args:
            config: Application configuration (default: loaded via get_config)
            fetcher: Fetcher to use (default: one built from the config)
            parser: HTML parser shared by discovery and processing
            log: Logger for pipeline progress
        """
        self.config = config or get_config()
        self.scraper_config = self.config.scraper
        self.log = log or logger

        self.fetcher = fetcher or Fetcher(
            user_agent=self.scraper_config.user_agent,
            timeout=self.scraper_config.timeout,
        )
        self.parser = parser or ShowcaseParser()

        self.discoverer = PageDiscoverer(self.fetcher, self.scraper_config, self.parser, self.log)
        self.pagination = PaginationDriver(self.discoverer, self.scraper_config, self.log)
        self.processor = BatchProcessor(self.fetcher, self.scraper_config, self.parser, self.log)

        self.log.debug("ShowcaseScraper initialized")

    async def __aenter__(self) -> "ShowcaseScraper":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def discover_project_urls(self) -> list[str]:
        """Discover all project URLs on the listing."""
        self.log.info("Discovering project URLs...")
        with log_execution_time(self.log, "project discovery"):
            urls = await self.pagination.discover_all_urls()
        self.log.info(f"Found {len(urls)} projects to scrape.")
        return urls

    async def scrape_projects(self, urls: Sequence[str]) -> ProcessingResult:
        """Scrape the given project pages."""
        self.log.info("Scraping project details...")
        with log_execution_time(self.log, "project scraping"):
            return await self.processor.process_all(urls)

    async def run(self, urls: Optional[Sequence[str]] = None) -> RunSummary:
        """Run the full pipeline and export results.

        Args:
            urls: Project URLs to scrape instead of discovering them

        Returns:
            RunSummary with counts, duration and written paths
        """
        self.log.info("Starting showcase scraper...")
        start_time = time.monotonic()

        if urls is None:
            urls = await self.discover_project_urls()
        else:
            urls = list(dict.fromkeys(urls))
            self.log.info(f"Scraping {len(urls)} provided project URLs")

        result = await self.scrape_projects(urls)
        written = save_results(result, self.config.output)

        summary = RunSummary(
            discovered=len(urls),
            succeeded=len(result.successes),
            failed=len(result.failures),
            duration_seconds=time.monotonic() - start_time,
            csv_path=_as_str(written['csv']),
            failures_path=_as_str(written['failures']),
        )

        self.log.info(f"Scraping completed in {summary.duration_minutes:.2f} minutes")
        self.log.info(
            f"Success rate: {summary.succeeded}/{summary.succeeded + summary.failed} "
            f"({summary.success_rate:.1f}%)"
        )
        return summary

    async def close(self) -> None:
        """Close network resources."""
        await self.fetcher.close()


def _as_str(path: Optional[Path]) -> Optional[str]:
    return str(path) if path is not None else None
