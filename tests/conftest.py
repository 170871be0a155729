"""Pytest fixtures for showcase-scraper tests."""

import asyncio
from pathlib import Path

import pytest

from showcase_scraper.utils.config import AppConfig, OutputConfig, ScraperConfig, reset_config

from tests.helpers import BASE_URL, SleepRecorder


@pytest.fixture
def scraper_config() -> ScraperConfig:
    """Scraper configuration with small batches and no waiting."""
    return ScraperConfig(
        base_url=BASE_URL,
        max_pages=5,
        page_concurrency=2,
        project_concurrency=2,
        batch_delay=0.0,
        max_retries=3,
        retry_delay=0.0,
        timeout=5.0,
        show_progress=False,
    )


@pytest.fixture
def app_config(scraper_config, tmp_path: Path) -> AppConfig:
    """Application configuration writing into a temporary directory."""
    return AppConfig(
        scraper=scraper_config,
        output=OutputConfig(
            csv_path=str(tmp_path / "projects.csv"),
            failed_json_path=str(tmp_path / "failed.json"),
        ),
        log_level="DEBUG",
    )


@pytest.fixture
def sleep_recorder(monkeypatch) -> SleepRecorder:
    """Replace asyncio.sleep with a recorder for the duration of a test."""
    recorder = SleepRecorder()
    monkeypatch.setattr(asyncio, "sleep", recorder)
    return recorder


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the cached configuration between tests."""
    reset_config()
    yield
    reset_config()
