"""HTML parsing utilities for showcase pages.

This module extracts data from two page types:
1. Listing pages: project card links and the "next page" signal
2. Project pages: name, write-ups, social links, sponsors, event and
   technology keywords

CSS selectors are isolated in ``SELECTORS`` for easy maintenance when the
site updates its DOM. Missing elements yield empty strings rather than
errors, so partial pages still produce a complete record.
"""

import re
from datetime import datetime, timezone
from typing import Optional

from bs4 import BeautifulSoup, Tag
from pydantic import ValidationError

from showcase_scraper.utils import get_logger

from .exceptions import ExtractionError
from .models import PageResult, ProjectRecord
from .utils import name_from_url, to_absolute_url, unique

logger = get_logger(__name__)


TECH_KEYWORDS = (
    'Ethereum', 'Solidity', 'Polygon', 'zkSync', 'Starknet', 'IPFS', 'The Graph',
    'React', 'Next.js', 'Hardhat', 'Foundry', 'Wagmi', 'Ethers.js', 'Web3.js',
    'NFT', 'DeFi', 'Smart Contracts', 'ZK-SNARKs', 'ERC-20', 'ERC-721',
)

_TECH_PATTERNS = tuple(
    (keyword, re.compile(rf'\b{re.escape(keyword)}\b', re.IGNORECASE))
    for keyword in TECH_KEYWORDS
)

UNKNOWN_EVENT = "Unknown Event"


def extract_technologies(text: str) -> list[str]:
    """Return the known technology keywords mentioned in ``text``.

    Matching is whole-word and case-insensitive; the result follows the
    order of ``TECH_KEYWORDS`` and holds each keyword at most once.
    """
    if not text:
        return []
    return [keyword for keyword, pattern in _TECH_PATTERNS if pattern.search(text)]


class ShowcaseParser:
    """Parser for extracting structured data from showcase HTML pages."""

    SELECTORS = {
        'listing': {
            'project_card': 'a.block.border-2.border-black.rounded.overflow-hidden.relative',
        },
        'project': {
            'name': 'h1.text-4xl, h2.text-2xl',
            'section_headings': ['h2', 'h3'],
            'external_links': 'a[target="_blank"]',
            'sponsor_images': 'img[alt^="prize"], img[alt^="sponsor"]',
            'event': 'a[href^="/events"]',
        },
    }

    SECTION_TITLES = {
        'description': "project description",
        'how_its_made': "how it's made",
    }

    def __init__(self, features: str = 'lxml'):
        """Initialize parser.

        Args:
            features: BeautifulSoup tree builder
        """
        self.features = features

    def parse_listing_page(self, html: str, page_number: int, site_origin: str) -> PageResult:
        """Extract project URLs from a listing page.

        Args:
            html: HTML content of the listing page
            page_number: Number of the page being parsed
            site_origin: Origin used to absolutize card links

        Returns:
            PageResult with unique absolute URLs and the next-page flag
        """
        soup = BeautifulSoup(html, self.features)

        hrefs = [
            card.get('href')
            for card in soup.select(self.SELECTORS['listing']['project_card'])
        ]
        urls = unique(to_absolute_url(href, site_origin) for href in hrefs if href)

        next_marker = f"page={page_number + 1}"
        has_next_page = soup.select_one(f'a[href*="{next_marker}"]') is not None

        logger.debug(f"Page {page_number}: {len(urls)} project links, next page: {has_next_page}")
        return PageResult(urls=urls, has_next_page=has_next_page)

    def parse_project_page(self, html: str, url: str) -> ProjectRecord:
        """Extract a project record from a project page.

        Args:
            html: HTML content of the project page
            url: Project page URL

        Returns:
            ProjectRecord with every string field populated (possibly empty)

        Raises:
            ExtractionError: If the record cannot be built
        """
        soup = BeautifulSoup(html, self.features)
        selectors = self.SELECTORS['project']

        name = self._text(soup.select_one(selectors['name'])) or name_from_url(url)
        description = self._section_text(soup, self.SECTION_TITLES['description'])
        how_its_made = self._section_text(soup, self.SECTION_TITLES['how_its_made'])
        links = self._extract_links(soup)
        sponsors = [img.get('alt', '') for img in soup.select(selectors['sponsor_images'])]
        event = self._text(soup.select_one(selectors['event'])) or UNKNOWN_EVENT

        try:
            return ProjectRecord(
                name=name,
                url=url,
                event=event,
                description=description,
                how_its_made=how_its_made,
                technologies=extract_technologies(f"{description} {how_its_made}"),
                github=links.get('github', ''),
                twitter=links.get('twitter', ''),
                website=links.get('website', ''),
                discord=links.get('discord', ''),
                linkedin=links.get('linkedin', ''),
                sponsors=sponsors,
                last_updated=datetime.now(timezone.utc),
            )
        except ValidationError as e:
            raise ExtractionError(f"Could not build project record: {e}", url=url) from e

    @staticmethod
    def _text(elem: Optional[Tag]) -> str:
        if elem is None:
            return ''
        return elem.get_text(' ', strip=True)

    def _section_text(self, soup: BeautifulSoup, title: str) -> str:
        """Text of the div right after the first heading containing ``title``."""
        for heading in soup.find_all(self.SELECTORS['project']['section_headings']):
            heading_text = heading.get_text(' ', strip=True).replace('’', "'").lower()
            if title not in heading_text:
                continue
            sibling = heading.find_next_sibling()
            if sibling is not None and sibling.name == 'div':
                return self._text(sibling)
            return ''
        return ''

    def _extract_links(self, soup: BeautifulSoup) -> dict[str, str]:
        """Classify external links; the first link of each category wins."""
        links: dict[str, str] = {}

        for anchor in soup.select(self.SELECTORS['project']['external_links']):
            href = anchor.get('href')
            if not href:
                continue
            category = self._classify_link(href.strip(), anchor.get_text(' ', strip=True).lower())
            if category and category not in links:
                links[category] = href.strip()

        return links

    @staticmethod
    def _classify_link(href: str, text: str) -> Optional[str]:
        lowered = href.lower()
        if 'github.com' in lowered:
            return 'github'
        if 'twitter.com' in lowered or 'x.com' in lowered:
            return 'twitter'
        if 'discord.gg' in lowered or 'discord' in text:
            return 'discord'
        if 'website' in text or 'site' in text or 'live demo' in text:
            return 'website'
        if 'linkedin.com' in lowered:
            return 'linkedin'
        return None
