"""
Base Scraper
Abstract base for listing scrapers
"""
from abc import ABC, abstractmethod
import logging

from models import FetchOutcome


logger = logging.getLogger(__name__)


class BaseScraper(ABC):
    """
    Scraper base class
    Owns the HTTP session; subclasses implement the actual fetch
    """

    def __init__(self):
        self._session = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Scraper name used in logs"""
        pass

    @abstractmethod
    async def fetch_collection(self, collection: str, data_saver: bool) -> FetchOutcome:
        """
        Resolve one collection into media items

        Args:
            collection: collection identifier
            data_saver: reduced-bandwidth extraction

        Returns:
            Success or failure outcome; per-source failures are never raised
        """
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Release the HTTP session"""
        if self._session:
            await self._session.close()
            self._session = None

    def _log_fetch(self, collection: str, via: str, count: int):
        logger.info(f"[{self.name}] r/{collection} via {via} returned {count} media items")

    def _log_error(self, message: str, error: Exception):
        logger.warning(f"[{self.name}] {message}: {error}")
