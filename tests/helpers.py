"""Shared test doubles and HTML builders for showcase-scraper tests."""

import asyncio
from typing import Optional, Union

from showcase_scraper.scraper.exceptions import HttpStatusError
from showcase_scraper.scraper.fetcher import FetchResponse


BASE_URL = "https://example.com/showcase"
ORIGIN = "https://example.com"

# Bound at import so tests that patch asyncio.sleep don't see these yields
_yield_to_loop = asyncio.sleep

CARD_CLASSES = "block border-2 border-black rounded overflow-hidden relative"


def page_url(page_number: int) -> str:
    return f"{BASE_URL}?page={page_number}"


def project_url(slug: str) -> str:
    return f"{ORIGIN}/showcase/{slug}"


def listing_html(slugs: list[str], next_page: Optional[int] = None) -> str:
    """Build a listing page with one card per slug and an optional next link."""
    cards = "\n".join(
        f'<a class="{CARD_CLASSES}" href="/showcase/{slug}"><h2>{slug}</h2></a>'
        for slug in slugs
    )
    nav = f'<nav><a href="/showcase?page={next_page}">Next</a></nav>' if next_page else ""
    return f"<html><body><div class='grid'>{cards}</div>{nav}</body></html>"


def project_html(
    name: str = "Chain Pals",
    description: Optional[str] = "Built with Solidity and React on Polygon.",
    how_its_made: Optional[str] = "We used Hardhat for testing and IPFS for storage.",
) -> str:
    """Build a project page resembling the showcase detail layout."""
    sections = ""
    if description is not None:
        sections += f"<h3>Project Description</h3><div>{description}</div>"
    if how_its_made is not None:
        sections += f"<h3>How it's Made</h3><div>{how_its_made}</div>"
    return f"""
    <html><body>
      <a href="/events/ethglobal-bangkok">ETHGlobal Bangkok</a>
      <h1 class="text-4xl">{name}</h1>
      {sections}
      <a target="_blank" href="https://github.com/chainpals/app">Source Code</a>
      <a target="_blank" href="https://twitter.com/chainpals">Twitter</a>
      <a target="_blank" href="https://chainpals.xyz">Live Demo</a>
      <a target="_blank" href="https://discord.gg/chainpals">Join us</a>
      <a target="_blank" href="https://www.linkedin.com/company/chainpals">LinkedIn</a>
      <img alt="prize Polygon Best DeFi" src="/p1.png">
      <img alt="team photo" src="/t.png">
      <img alt="sponsor Chainlink" src="/s1.png">
    </body></html>
    """


Scripted = Union[str, BaseException]


class FakeFetcher:
    """Fetcher double that replays scripted responses per URL.

    Each URL maps to a list of bodies or exceptions consumed in order; the
    last entry repeats once the list is exhausted. Unknown URLs answer 404.
    ``events`` logs ("start", url) and ("end", url) in the order they happen.
    """

    def __init__(self, responses: Optional[dict[str, list[Scripted]]] = None):
        self.responses = {url: list(script) for url, script in (responses or {}).items()}
        self.calls: list[str] = []
        self.events: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def fetch(self, url: str) -> FetchResponse:
        self.calls.append(url)
        self.events.append(("start", url))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await _yield_to_loop(0)
            script = self.responses.get(url)
            if not script:
                raise HttpStatusError(url, 404)
            entry = script.pop(0) if len(script) > 1 else script[0]
            if isinstance(entry, BaseException):
                raise entry
            return FetchResponse(url=url, status=200, body=entry)
        finally:
            self.in_flight -= 1
            self.events.append(("end", url))

    def count(self, url: str) -> int:
        return self.calls.count(url)

    async def close(self) -> None:
        self.closed = True


class SleepRecorder:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float, *args, **kwargs) -> None:
        self.delays.append(delay)


def batch_started_after(events: list[tuple[str, str]], earlier: list[str], later: list[str]) -> bool:
    """True when every request for ``earlier`` ended before any ``later`` request started."""
    last_end = max(i for i, (kind, url) in enumerate(events) if kind == "end" and url in earlier)
    first_start = min(i for i, (kind, url) in enumerate(events) if kind == "start" and url in later)
    return last_end < first_start
