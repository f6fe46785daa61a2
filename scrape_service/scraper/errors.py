"""Scraper exception hierarchy."""


class ScraperError(Exception):
    """Base class for every error raised inside the scraper core."""


class NetworkError(ScraperError):
    """The target HTML could not be retrieved from any endpoint."""


class ResolutionError(ScraperError):
    """A relative URL found in the document could not be made absolute."""


class SerializationError(ScraperError):
    """Scraped data could not be rendered to the requested format."""
