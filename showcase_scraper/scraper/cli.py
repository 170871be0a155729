"""Command-line interface for the showcase scraper.

Usage:
    python -m showcase_scraper.scraper.cli --max-pages 5
    showcase-scraper --retry-failed ethglobal_failed_projects.json
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from showcase_scraper.utils import AppConfig, configure_logging, get_logger, load_config
from showcase_scraper.utils.config import build_config

from .models import RunSummary
from .showcase_scraper import ShowcaseScraper
from .storage import load_failures

logger = get_logger(__name__)


# CLI flag destination -> (config section, config key)
CONFIG_OVERRIDES = {
    'base_url': ('scraper', 'base_url'),
    'max_pages': ('scraper', 'max_pages'),
    'page_concurrency': ('scraper', 'page_concurrency'),
    'project_concurrency': ('scraper', 'project_concurrency'),
    'batch_delay': ('scraper', 'batch_delay'),
    'max_retries': ('scraper', 'max_retries'),
    'retry_delay': ('scraper', 'retry_delay'),
    'timeout': ('scraper', 'timeout'),
    'user_agent': ('scraper', 'user_agent'),
    'pagination_policy': ('scraper', 'pagination_policy'),
    'output_csv': ('output', 'csv_path'),
    'output_failed_json': ('output', 'failed_json_path'),
}


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list (default: sys.argv[1:])

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Scrape project records from a paginated showcase listing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scrape the whole showcase with default settings
  python -m showcase_scraper.scraper.cli

  # First 20 pages, gentler pacing, debug logging
  python -m showcase_scraper.scraper.cli --max-pages 20 --page-concurrency 5 --batch-delay 5 --log-level DEBUG

  # Re-scrape the projects that failed last time
  python -m showcase_scraper.scraper.cli --retry-failed ethglobal_failed_projects.json
        """
    )

    parser.add_argument('--config', type=Path, default=None,
                        help='Path to configuration file (default: config/config.yaml if present)')
    parser.add_argument('--base-url', type=str, default=None, help='Paginated listing URL')
    parser.add_argument('--max-pages', type=int, default=None, help='Maximum listing pages to visit')
    parser.add_argument('--page-concurrency', type=int, default=None,
                        help='Listing pages fetched in parallel')
    parser.add_argument('--project-concurrency', type=int, default=None,
                        help='Project pages fetched in parallel')
    parser.add_argument('--batch-delay', type=float, default=None,
                        help='Seconds to wait between batches')
    parser.add_argument('--max-retries', type=int, default=None,
                        help='Re-attempts after a failed request')
    parser.add_argument('--retry-delay', type=float, default=None,
                        help='Seconds to wait between attempts')
    parser.add_argument('--timeout', type=float, default=None, help='Per-request timeout in seconds')
    parser.add_argument('--user-agent', type=str, default=None, help='User-Agent header')
    parser.add_argument('--pagination-policy', choices=['last', 'any'], default=None,
                        help="Continue when the last page of a batch ('last') "
                             "or any page of it ('any') links to a next page")
    parser.add_argument('--output-csv', type=str, default=None, help='CSV output file')
    parser.add_argument('--output-failed-json', type=str, default=None,
                        help='JSON output file for failed projects')
    parser.add_argument('--retry-failed', type=Path, default=None,
                        help='Skip discovery and re-scrape the URLs listed in a failures JSON file')
    parser.add_argument('--no-progress', action='store_true', help='Hide progress bars')
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default=None, help='Override log level')

    return parser.parse_args(argv)


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Return a validated copy of ``config`` with CLI values applied."""
    data = config.model_dump()

    for dest, (section, key) in CONFIG_OVERRIDES.items():
        value = getattr(args, dest, None)
        if value is not None:
            data[section][key] = value

    if args.no_progress:
        data['scraper']['show_progress'] = False
    if args.log_level:
        data['log_level'] = args.log_level

    return build_config(data, source="command line")


def print_summary(summary: RunSummary, config: AppConfig) -> None:
    """Print the end-of-run summary block."""
    print("\n" + "=" * 60)
    print("SCRAPING SUMMARY")
    print("=" * 60)
    print(f"Listing: {config.scraper.base_url}")
    print(f"Projects Found: {summary.discovered}")
    print(f"Succeeded: {summary.succeeded}")
    print(f"Failed: {summary.failed}")
    print(f"Success Rate: {summary.success_rate:.1f}%")
    print(f"Duration: {summary.duration_minutes:.2f} minutes")
    print(f"CSV: {summary.csv_path or '(not written)'}")
    if summary.failures_path:
        print(f"Failures: {summary.failures_path}")
    print("=" * 60)


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_args(argv)

    try:
        config = apply_overrides(load_config(args.config), args)
        configure_logging(config.log_level, config.log_dir)

        logger.info("=" * 60)
        logger.info("Showcase Scraper")
        logger.info("=" * 60)
        logger.info(f"Listing: {config.scraper.base_url}")
        logger.info(f"Max pages: {config.scraper.max_pages}")
        logger.info(
            f"Concurrency: {config.scraper.page_concurrency} pages / "
            f"{config.scraper.project_concurrency} projects"
        )
        logger.info(f"Output: {config.output.csv_path}")
        logger.info("=" * 60)

        urls = None
        if args.retry_failed:
            urls = [failure.url for failure in load_failures(args.retry_failed)]

        async with ShowcaseScraper(config) as scraper:
            summary = await scraper.run(urls=urls)

        print_summary(summary, config)
        return 0

    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        print(f"\n✗ Scraping failed: {e}")
        return 1


def run() -> None:
    """Console-script entry point.

    Ctrl-C cancels the running task and surfaces here as KeyboardInterrupt
    once asyncio.run has torn the loop down.
    """
    try:
        code = asyncio.run(main())
    except KeyboardInterrupt:
        logger.warning("Scraping interrupted by user")
        print("\n✗ Scraping cancelled by user")
        code = 1
    sys.exit(code)


if __name__ == '__main__':
    run()
