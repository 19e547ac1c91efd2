"""
Listing Scraper
Fetches collection listings with cache lookup and proxy fallback
"""
import asyncio
from dataclasses import dataclass
import json
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote
import logging

import aiohttp

from .base import BaseScraper
from config import ListingSettings, get_settings
from models import FetchOutcome
from processing import extract_listing
from storage import ListingCache
from utils.exceptions import ConfigurationError, ListingFetchError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListingEndpoint:
    """
    A transport path to a listing document

    ``url_template`` receives ``{target}`` (the canonical listing URL) and
    ``{escaped}`` (the same URL percent-encoded for use as a query value).
    """
    name: str
    provenance: str
    url_template: str
    embeds_preamble: bool = False

    def build_url(self, target: str) -> str:
        return self.url_template.format(target=target, escaped=quote(target, safe=""))


CANONICAL_ENDPOINT = ListingEndpoint(name="reddit", provenance="reddit", url_template="{target}")

ALTERNATE_ENDPOINTS: Dict[str, ListingEndpoint] = {
    # generic pass-through proxy
    "allorigins": ListingEndpoint(
        name="allorigins",
        provenance="proxy(allorigins)",
        url_template="https://api.allorigins.win/raw?url={escaped}",
    ),
    # text-extraction proxy; the JSON document follows a plain-text header
    "jina": ListingEndpoint(
        name="jina",
        provenance="proxy(jina)",
        url_template="https://r.jina.ai/{target}",
        embeds_preamble=True,
    ),
}


class ListingScraper(BaseScraper):
    """
    Listing scraper

    Resolution order for one collection:
    - live cache snapshot (no network access)
    - canonical listing endpoint
    - each configured alternate endpoint, in order, until one answers

    Every request is bounded by ``request_timeout``; a timed-out request is
    cancelled, which closes its response and returns the connection.
    """

    def __init__(
        self,
        cache: Optional[ListingCache] = None,
        settings: Optional[ListingSettings] = None,
        endpoints: Optional[List[ListingEndpoint]] = None,
    ):
        super().__init__()
        self._settings = settings or get_settings().listing
        self.cache = cache if cache is not None else ListingCache.from_settings()
        self.endpoints = list(endpoints) if endpoints is not None else self._build_endpoints(self._settings)
        self.timeout = float(self._settings.request_timeout)

    @property
    def name(self) -> str:
        return "Listing"

    @staticmethod
    def _build_endpoints(settings: ListingSettings) -> List[ListingEndpoint]:
        endpoints = [CANONICAL_ENDPOINT]
        if not settings.fallback_enabled:
            return endpoints

        for endpoint_name in settings.fallback_endpoints:
            endpoint = ALTERNATE_ENDPOINTS.get(endpoint_name)
            if endpoint is None:
                raise ConfigurationError(
                    f"Unknown fallback endpoint: {endpoint_name}",
                    {"available": sorted(ALTERNATE_ENDPOINTS)},
                )
            endpoints.append(endpoint)
        return endpoints

    def listing_url(self, collection: str) -> str:
        base = self._settings.base_url.rstrip("/")
        return f"{base}/r/{quote(collection, safe='')}/hot.json?raw_json=1&limit={self._settings.fetch_limit}"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the HTTP session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "Accept": "application/json",
                    "User-Agent": self._settings.user_agent,
                },
            )
        return self._session

    async def _request_text(self, url: str) -> Tuple[int, str]:
        """GET ``url`` and return (status, body)"""
        session = await self._get_session()
        async with session.get(url) as response:
            return response.status, await response.text()

    async def fetch_collection(self, collection: str, data_saver: bool) -> FetchOutcome:
        cached = self.cache.lookup(collection, data_saver)
        if cached is not None:
            entry, provenance = cached
            return FetchOutcome.success(collection, entry.items, provenance)

        diagnostic = None
        for endpoint in self.endpoints:
            try:
                payload = await self._fetch_from_endpoint(collection, endpoint)
            except ListingFetchError as exc:
                diagnostic = str(exc)
                self._log_error(f"{endpoint.name} failed for r/{collection}", exc)
                continue

            items = extract_listing(payload, data_saver, collection=collection)
            self.cache.store(collection, data_saver, items)
            self._log_fetch(collection, endpoint.name, len(items))
            return FetchOutcome.success(collection, items, endpoint.provenance)

        return FetchOutcome.failure(collection, diagnostic or f"r/{collection}: no listing endpoint configured")

    async def _fetch_from_endpoint(self, collection: str, endpoint: ListingEndpoint) -> Any:
        url = endpoint.build_url(self.listing_url(collection))

        try:
            status, body = await asyncio.wait_for(self._request_text(url), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ListingFetchError(
                f"r/{collection}: timed out after {self.timeout:g}s",
                source=collection,
                endpoint=endpoint.name,
            ) from e
        except (aiohttp.ClientError, ValueError) as e:
            raise ListingFetchError(
                f"r/{collection}: {str(e) or type(e).__name__}",
                source=collection,
                endpoint=endpoint.name,
            ) from e

        if not 200 <= status < 300:
            raise ListingFetchError(
                f"r/{collection}: HTTP {status}",
                source=collection,
                endpoint=endpoint.name,
                status=status,
            )

        return self._decode_body(collection, endpoint, body)

    @staticmethod
    def _decode_body(collection: str, endpoint: ListingEndpoint, body: str) -> Any:
        text = body or ""
        if endpoint.embeds_preamble:
            start = text.find("{")
            if start < 0:
                raise ListingFetchError(
                    f"r/{collection}: no JSON document in {endpoint.name} response",
                    source=collection,
                    endpoint=endpoint.name,
                )
            text = text[start:]

        try:
            # raw_decode tolerates trailing text after the document
            payload, _ = json.JSONDecoder().raw_decode(text.lstrip())
        except ValueError as e:
            raise ListingFetchError(
                f"r/{collection}: invalid JSON from {endpoint.name}",
                source=collection,
                endpoint=endpoint.name,
            ) from e
        return payload
