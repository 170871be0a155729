"""Unit tests for page discovery and the pagination driver."""

import pytest

from showcase_scraper.scraper.discovery import PageDiscoverer, PaginationDriver
from showcase_scraper.scraper.exceptions import RequestTimeoutError

from tests.helpers import FakeFetcher, batch_started_after, listing_html, page_url, project_url


def make_driver(fetcher, config):
    return PaginationDriver(PageDiscoverer(fetcher, config), config)


class TestPageDiscoverer:
    """Test single-page discovery."""

    @pytest.mark.asyncio
    async def test_discovers_urls_and_next_flag(self, scraper_config):
        fetcher = FakeFetcher({page_url(1): [listing_html(["a-1", "b-2"], next_page=2)]})

        result = await PageDiscoverer(fetcher, scraper_config).discover_page(1)

        assert result.urls == [project_url("a-1"), project_url("b-2")]
        assert result.has_next_page is True
        assert fetcher.calls == [page_url(1)]

    @pytest.mark.asyncio
    async def test_transient_failure_is_retried(self, scraper_config):
        fetcher = FakeFetcher({
            page_url(1): [RequestTimeoutError(page_url(1), 5), listing_html(["a-1"])],
        })

        result = await PageDiscoverer(fetcher, scraper_config).discover_page(1)

        assert result.urls == [project_url("a-1")]
        assert fetcher.count(page_url(1)) == 2

    @pytest.mark.asyncio
    async def test_exhausted_page_is_empty_without_next(self, scraper_config):
        fetcher = FakeFetcher({page_url(1): [RequestTimeoutError(page_url(1), 5)]})

        result = await PageDiscoverer(fetcher, scraper_config).discover_page(1)

        assert result.urls == []
        assert result.has_next_page is False
        assert fetcher.count(page_url(1)) == scraper_config.max_retries + 1


class TestPaginationDriver:
    """Test batched pagination."""

    @pytest.mark.asyncio
    async def test_overlapping_pages_single_batch(self, scraper_config):
        fetcher = FakeFetcher({
            page_url(1): [listing_html(["a-1", "b-2", "c-3"], next_page=2)],
            page_url(2): [listing_html(["d-4", "e-5", "a-1"], next_page=None)],
        })

        urls = await make_driver(fetcher, scraper_config).discover_all_urls(
            max_pages=2, concurrency=2
        )

        assert urls == [project_url(s) for s in ("a-1", "b-2", "c-3", "d-4", "e-5")]
        assert sorted(fetcher.calls) == [page_url(1), page_url(2)]

    @pytest.mark.asyncio
    async def test_each_url_returned_once_across_batches(self, scraper_config):
        fetcher = FakeFetcher({
            page_url(1): [listing_html(["a-1", "b-2"], next_page=2)],
            page_url(2): [listing_html(["b-2", "c-3"], next_page=3)],
            page_url(3): [listing_html(["c-3", "a-1", "d-4"], next_page=None)],
        })

        urls = await make_driver(fetcher, scraper_config).discover_all_urls(concurrency=2)

        assert len(urls) == len(set(urls)) == 4

    @pytest.mark.asyncio
    async def test_last_page_of_batch_decides_continuation(self, scraper_config):
        # Page 1 links onward but page 2 (last of the batch) does not
        fetcher = FakeFetcher({
            page_url(1): [listing_html(["a-1"], next_page=2)],
            page_url(2): [listing_html(["b-2"], next_page=None)],
            page_url(3): [listing_html(["c-3"], next_page=4)],
        })

        urls = await make_driver(fetcher, scraper_config).discover_all_urls(concurrency=2)

        assert urls == [project_url("a-1"), project_url("b-2")]
        assert page_url(3) not in fetcher.calls

    @pytest.mark.asyncio
    async def test_any_policy_continues_if_any_page_has_next(self, scraper_config):
        config = scraper_config.model_copy(update={"pagination_policy": "any"})
        fetcher = FakeFetcher({
            page_url(1): [listing_html(["a-1"], next_page=2)],
            page_url(2): [listing_html(["b-2"], next_page=None)],
            page_url(3): [listing_html(["c-3"], next_page=None)],
            page_url(4): [listing_html([], next_page=None)],
        })

        urls = await make_driver(fetcher, config).discover_all_urls(concurrency=2)

        assert urls == [project_url("a-1"), project_url("b-2"), project_url("c-3")]
        assert page_url(5) not in fetcher.calls

    @pytest.mark.asyncio
    async def test_failed_last_page_ends_pagination(self, scraper_config):
        fetcher = FakeFetcher({
            page_url(1): [listing_html(["a-1"], next_page=2)],
            page_url(2): [RequestTimeoutError(page_url(2), 5)],
        })

        urls = await make_driver(fetcher, scraper_config).discover_all_urls(concurrency=2)

        assert urls == [project_url("a-1")]
        assert page_url(3) not in fetcher.calls

    @pytest.mark.asyncio
    async def test_stops_at_max_pages(self, scraper_config):
        fetcher = FakeFetcher({
            page_url(n): [listing_html([f"p-{n}"], next_page=n + 1)] for n in range(1, 10)
        })

        urls = await make_driver(fetcher, scraper_config).discover_all_urls(
            max_pages=3, concurrency=2
        )

        assert urls == [project_url(f"p-{n}") for n in (1, 2, 3)]
        assert sorted(set(fetcher.calls)) == [page_url(1), page_url(2), page_url(3)]

    @pytest.mark.asyncio
    async def test_batches_bounded_by_concurrency(self, scraper_config):
        fetcher = FakeFetcher({
            page_url(n): [listing_html([f"p-{n}"], next_page=n + 1)] for n in range(1, 10)
        })

        await make_driver(fetcher, scraper_config).discover_all_urls(max_pages=5, concurrency=2)

        assert fetcher.max_in_flight == 2

    @pytest.mark.asyncio
    async def test_next_batch_starts_after_previous_finishes(self, scraper_config):
        fetcher = FakeFetcher({
            page_url(n): [listing_html([f"p-{n}"], next_page=n + 1)] for n in range(1, 10)
        })

        await make_driver(fetcher, scraper_config).discover_all_urls(max_pages=5, concurrency=2)

        first = [page_url(1), page_url(2)]
        second = [page_url(3), page_url(4)]
        third = [page_url(5)]
        assert batch_started_after(fetcher.events, first, second)
        assert batch_started_after(fetcher.events, second, third)

    @pytest.mark.asyncio
    async def test_delay_only_between_batches(self, scraper_config, sleep_recorder):
        fetcher = FakeFetcher({
            page_url(n): [listing_html([f"p-{n}"], next_page=n + 1)] for n in range(1, 10)
        })

        await make_driver(fetcher, scraper_config).discover_all_urls(
            max_pages=5, concurrency=2, batch_delay=0.25
        )

        # Batches [1, 2], [3, 4], [5]: two pauses, none after the final batch
        assert sleep_recorder.delays == [0.25, 0.25]

    @pytest.mark.asyncio
    async def test_invalid_arguments_rejected(self, scraper_config):
        driver = make_driver(FakeFetcher(), scraper_config)

        with pytest.raises(ValueError):
            await driver.discover_all_urls(max_pages=0)
        with pytest.raises(ValueError):
            await driver.discover_all_urls(concurrency=0)
