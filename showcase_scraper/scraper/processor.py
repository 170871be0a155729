"""Batch processing of project pages.

Runs fetch + extract for every discovered URL in fixed-size concurrent
batches and partitions the outcomes into successes and failures.
"""

import asyncio
import logging
from typing import Optional, Sequence

from tqdm import tqdm

from showcase_scraper.utils import ScraperConfig, get_logger

from .exceptions import ScraperError
from .fetcher import Fetcher
from .models import (
    FailureRecord,
    ItemOutcome,
    ProcessingResult,
    ProjectFailure,
    ProjectRecord,
    ProjectSuccess,
)
from .parsers import ShowcaseParser
from .retry import with_retry
from .utils import chunked

logger = get_logger(__name__)


class BatchProcessor:
    """Scrapes project pages in concurrency-bounded batches."""

    def __init__(
        self,
        fetcher: Fetcher,
        config: ScraperConfig,
        parser: Optional[ShowcaseParser] = None,
        log: Optional[logging.Logger] = None,
    ):
        """Initialize batch processor.

        Args:
            fetcher: Fetcher used for project pages
            config: Scraper configuration (retries, batch size, delays)
            parser: Project page parser
            log: Logger for progress and failures
        """
        self.fetcher = fetcher
        self.config = config
        self.parser = parser or ShowcaseParser()
        self.log = log or logger

    async def _fetch_and_parse(self, url: str) -> ProjectRecord:
        response = await self.fetcher.fetch(url)
        return self.parser.parse_project_page(response.body, url)

    async def process_project(self, url: str) -> ItemOutcome:
        """Scrape one project page, retrying transient failures.

        Args:
            url: Project page URL

        Returns:
            ProjectSuccess with the record, or ProjectFailure once retries are spent
        """
        self.log.debug(f"Fetching project: {url}")

        result = await with_retry(
            lambda: self._fetch_and_parse(url),
            max_retries=self.config.max_retries,
            retry_delay=self.config.retry_delay,
            retry_on=(ScraperError,),
            description=f"project {url}",
            log=self.log,
        )

        if result.ok:
            return ProjectSuccess(record=result.value)

        self.log.error(f"Failed to fetch project: {url} ({result.reason})")
        return ProjectFailure(record=FailureRecord(url=url, error=result.reason))

    async def process_all(
        self,
        urls: Sequence[str],
        batch_size: Optional[int] = None,
        batch_delay: Optional[float] = None,
    ) -> ProcessingResult:
        """Scrape all project URLs in batches.

        Args:
            urls: Project page URLs
            batch_size: Projects per batch (default: config.project_concurrency)
            batch_delay: Seconds between batches (default: config.batch_delay)

        Returns:
            ProcessingResult whose successes and failures together cover every URL once
        """
        batch_size = batch_size if batch_size is not None else self.config.project_concurrency
        batch_delay = batch_delay if batch_delay is not None else self.config.batch_delay

        result = ProcessingResult()
        total = len(urls)
        if total == 0:
            self.log.info("No projects to scrape")
            return result

        processed = 0
        with tqdm(total=total, desc="Scraping projects", unit="project",
                  disable=not self.config.show_progress) as progress:
            for batch in chunked(urls, batch_size):
                outcomes = await asyncio.gather(*(self.process_project(url) for url in batch))

                for outcome in outcomes:
                    result.add(outcome)

                processed += len(outcomes)
                progress.update(len(outcomes))
                self.log.info(
                    f"Scraping projects: {processed}/{total} ({processed / total * 100:.1f}%)"
                )

                if processed < total:
                    await asyncio.sleep(batch_delay)

        return result
