"""showcase-scraper: concurrent discovery and extraction of showcase projects."""

__version__ = "0.1.0"
