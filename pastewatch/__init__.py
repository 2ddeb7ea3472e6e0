"""pastewatch: watch the Pastebin scraping API for configured keywords."""

__version__ = "1.0.0"
