"""Project URL discovery across the paginated showcase listing.

``PageDiscoverer`` handles a single listing page; ``PaginationDriver`` walks
pages in concurrency-bounded batches until the listing runs out or the page
ceiling is reached.
"""

import asyncio
import logging
from typing import Optional

from showcase_scraper.utils import ScraperConfig, get_logger

from .exceptions import ScraperError
from .fetcher import Fetcher
from .models import PageResult
from .parsers import ShowcaseParser
from .retry import with_retry
from .utils import build_page_url

logger = get_logger(__name__)


class PageDiscoverer:
    """Fetches one listing page and extracts its project links."""

    def __init__(
        self,
        fetcher: Fetcher,
        config: ScraperConfig,
        parser: Optional[ShowcaseParser] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.fetcher = fetcher
        self.config = config
        self.parser = parser or ShowcaseParser()
        self.log = log or logger

    async def _fetch_and_parse(self, page_number: int) -> PageResult:
        url = build_page_url(self.config.base_url, page_number)
        response = await self.fetcher.fetch(url)
        return self.parser.parse_listing_page(response.body, page_number, self.config.origin)

    async def discover_page(self, page_number: int) -> PageResult:
        """Discover project URLs on one listing page.

        A page that still fails after every retry is reported as empty with
        no next page, which ends pagination when it decides the batch.

        Args:
            page_number: 1-based listing page number

        Returns:
            PageResult for the page
        """
        self.log.info(f"Fetching page {page_number}...")

        result = await with_retry(
            lambda: self._fetch_and_parse(page_number),
            max_retries=self.config.max_retries,
            retry_delay=self.config.retry_delay,
            retry_on=(ScraperError,),
            description=f"page {page_number}",
            log=self.log,
        )

        if not result.ok:
            self.log.error(f"Failed to fetch page {page_number}: {result.reason}")
            return PageResult(urls=[], has_next_page=False)

        return result.value


class PaginationDriver:
    """Drives page discovery in parallel batches and collects unique URLs."""

    def __init__(
        self,
        discoverer: PageDiscoverer,
        config: ScraperConfig,
        log: Optional[logging.Logger] = None,
    ):
        self.discoverer = discoverer
        self.config = config
        self.log = log or logger

    def _should_continue(self, results: list[PageResult]) -> bool:
        """Decide whether another batch is needed.

        Under the "last" policy every result overwrites the flag in turn, so
        the last page of the batch decides. Under "any" a single page with a
        next-page link keeps pagination going.
        """
        if not results:
            return False
        if self.config.pagination_policy == "any":
            return any(result.has_next_page for result in results)
        has_more = False
        for result in results:
            has_more = result.has_next_page
        return has_more

    async def discover_all_urls(
        self,
        max_pages: Optional[int] = None,
        concurrency: Optional[int] = None,
        batch_delay: Optional[float] = None,
    ) -> list[str]:
        """Discover project URLs across listing pages.

        Args:
            max_pages: Page ceiling (default: config.max_pages)
            concurrency: Pages fetched per batch (default: config.page_concurrency)
            batch_delay: Seconds between batches (default: config.batch_delay)

        Returns:
            Unique project URLs in first-seen order
        """
        max_pages = max_pages if max_pages is not None else self.config.max_pages
        concurrency = concurrency if concurrency is not None else self.config.page_concurrency
        batch_delay = batch_delay if batch_delay is not None else self.config.batch_delay

        if max_pages < 1:
            raise ValueError(f"max_pages must be >= 1, got {max_pages}")
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")

        collected: dict[str, None] = {}
        current_page = 1
        has_more = True

        while has_more and current_page <= max_pages:
            pages_to_process = min(concurrency, max_pages - current_page + 1)
            page_numbers = range(current_page, current_page + pages_to_process)

            results = await asyncio.gather(
                *(self.discoverer.discover_page(page) for page in page_numbers)
            )

            for result in results:
                for url in result.urls:
                    collected.setdefault(url, None)
            has_more = self._should_continue(results)

            last_page = current_page + pages_to_process - 1
            percent = last_page / max_pages * 100
            self.log.info(
                f"Scraping pages: {last_page}/{max_pages} ({percent:.1f}%), "
                f"{len(collected)} project URLs so far"
            )

            current_page += pages_to_process

            if has_more and current_page <= max_pages:
                await asyncio.sleep(batch_delay)

        return list(collected)
