"""
Feed Aggregator
Resolves many collections concurrently and ranks the merged media feed
"""
import asyncio
from typing import List, Optional
import logging

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from config import Settings, get_settings
from models import FeedRequest, FeedResult, FetchOutcome, MediaItem
from processing import dedupe_collections
from scrapers import ListingScraper
from storage import ListingCache, get_listing_cache


logger = logging.getLogger(__name__)
console = Console()

NOTHING_FOUND = "No media found in the selected collections."


def partial_failure_message(failed: int) -> str:
    noun = "source" if failed == 1 else "sources"
    return f"Loaded partial results. {failed} {noun} failed."


class FeedAggregator:
    """
    Feed aggregator

    Every requested collection is resolved concurrently and each one settles
    into its own outcome; a failing collection never cancels the others.
    """

    def __init__(
        self,
        scraper: Optional[ListingScraper] = None,
        cache: Optional[ListingCache] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Args:
            scraper: resolver to use; built from settings when omitted
            cache: cache for a scraper built here; the process-wide cache when
                omitted, or a fresh one when settings are overridden
            settings: settings override
        """
        self.settings = settings or get_settings()
        self._owns_scraper = scraper is None
        if scraper is None:
            if cache is None:
                cache = get_listing_cache() if settings is None else ListingCache.from_settings(self.settings.cache)
            scraper = ListingScraper(cache=cache, settings=self.settings.listing)
        self.scraper = scraper

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        if self._owns_scraper:
            await self.scraper.close()

    async def _run_source_task(self, collection: str, data_saver: bool) -> FetchOutcome:
        try:
            return await self.scraper.fetch_collection(collection, data_saver)
        except Exception as exc:
            # the resolver reports failures as outcomes; anything else is a bug, kept per-source
            logger.exception(f"r/{collection} resolution raised")
            return FetchOutcome.failure(collection, f"r/{collection}: {exc}")

    async def _gather(self, collections: List[str], data_saver: bool, show_progress: bool) -> List[FetchOutcome]:
        tasks = [self._run_source_task(name, data_saver) for name in collections]

        if not show_progress:
            return list(await asyncio.gather(*tasks))

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task(f"[cyan]Fetching {len(tasks)} collections...", total=None)
            outcomes = await asyncio.gather(*tasks)
            progress.update(task, completed=True)
        return list(outcomes)

    async def aggregate(self, request: FeedRequest, show_progress: bool = False) -> FeedResult:
        """
        Build the ranked feed for a request

        Args:
            request: collections plus fetch mode
            show_progress: show a spinner while fetching

        Returns:
            Merged items sorted by score, with provenance and diagnostic text
        """
        collections = dedupe_collections(request.identifiers)
        if not collections:
            return FeedResult()

        outcomes = await self._gather(collections, request.data_saver, show_progress)
        result = self._build_result(outcomes)
        logger.info(
            f"Feed ready: {result.total_count} items from {len(outcomes) - result.failed_sources}"
            f"/{len(outcomes)} collections"
        )
        return result

    @staticmethod
    def _build_result(outcomes: List[FetchOutcome]) -> FeedResult:
        succeeded = [outcome for outcome in outcomes if outcome.ok]
        failed = [outcome for outcome in outcomes if not outcome.ok]

        merged: List[MediaItem] = []
        for outcome in succeeded:
            merged.extend(outcome.items)
        # sorted() is stable, so equal scores keep request order
        merged = sorted(merged, key=lambda item: item.score, reverse=True)

        labels: List[str] = []
        for outcome in succeeded:
            if outcome.provenance and outcome.provenance not in labels:
                labels.append(outcome.provenance)

        provenance_summary = ""
        if succeeded:
            provenance_summary = f"Loaded via: {', '.join(labels)} • {len(merged)} media items"

        diagnostic = None
        if not merged and failed:
            diagnostic = failed[0].diagnostic
        elif not merged:
            diagnostic = NOTHING_FOUND
        elif failed:
            diagnostic = partial_failure_message(len(failed))

        return FeedResult(
            items=merged,
            provenance_summary=provenance_summary,
            diagnostic=diagnostic,
            failed_sources=len(failed),
            outcomes=list(outcomes),
        )


async def aload_feed(
    request: FeedRequest,
    aggregator: Optional[FeedAggregator] = None,
    show_progress: bool = False,
    settings: Optional[Settings] = None,
    cache: Optional[ListingCache] = None,
) -> FeedResult:
    """Async entrypoint; closes the aggregator only if it created it"""
    if aggregator is not None:
        return await aggregator.aggregate(request, show_progress=show_progress)

    async with FeedAggregator(cache=cache, settings=settings) as owned:
        return await owned.aggregate(request, show_progress=show_progress)


def load_feed(
    request: FeedRequest,
    show_progress: bool = False,
    settings: Optional[Settings] = None,
    cache: Optional[ListingCache] = None,
) -> FeedResult:
    """
    Blocking entrypoint for presentation code

    Snapshots outlive the call: by default every call shares the
    process-wide listing cache.
    """
    return asyncio.run(aload_feed(request, show_progress=show_progress, settings=settings, cache=cache))
