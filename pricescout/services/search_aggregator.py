# pricescout/services/search_aggregator.py

"""Fans a query out to the platform extractors and merges the results."""

import asyncio
import importlib
import logging
from typing import Any

from pricescout.browser.browser_manager import BrowserManager
from pricescout.config.settings import Settings
from pricescout.errors import ExtractionFailure, InvalidRequest
from pricescout.extractors.base_extractor import SiteExtractor
from pricescout.models.product import ProductRecord
from pricescout.storage.result_cache import CacheKey, ResultCache

logger = logging.getLogger("pricescout.aggregator")


def _load_extractor_class(dotted_path: str) -> type[Any]:
    """Dynamically import an extractor class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


class SearchAggregator:
    """Coordinates cache lookups, per-platform extraction and merging."""

    def __init__(
        self,
        browser_manager: BrowserManager | None = None,
        cache: ResultCache | None = None,
        sources: list[dict[str, str]] | None = None,
    ) -> None:
        self.settings = Settings()
        self.browser_manager = browser_manager or BrowserManager()
        self.cache = cache if cache is not None else ResultCache()
        self.sources = (
            sources
            if sources is not None
            else self.settings.AVAILABLE_SOURCES
        )
        self._extractors: dict[str, SiteExtractor] = {}
        self._inflight: dict[
            CacheKey, asyncio.Task[list[ProductRecord]]
        ] = {}

    # ── Registry ─────────────────────────────────────────

    @property
    def platform_ids(self) -> list[str]:
        """Registered platform ids in registry order."""
        return [src["id"] for src in self.sources]

    def get_extractor(self, platform_id: str) -> SiteExtractor:
        """Instantiate (once) the extractor registered for a platform."""
        extractor = self._extractors.get(platform_id)
        if extractor is None:
            source = next(
                src for src in self.sources if src["id"] == platform_id
            )
            extractor_cls = _load_extractor_class(source["extractor"])
            extractor = extractor_cls()
            self._extractors[platform_id] = extractor
        return extractor

    def parse_platforms(self, platforms_csv: str | None) -> list[str]:
        """Turn ``"Amazon, myntra"`` into known ids, keeping request order.

        Input with no ids at all (blank, or only commas) selects every
        registered platform.
        """
        tokens = [
            raw.strip().lower()
            for raw in (platforms_csv or "").split(",")
            if raw.strip()
        ]
        if not tokens:
            return self.platform_ids

        known = set(self.platform_ids)
        selected: list[str] = []
        for platform_id in tokens:
            if platform_id in selected:
                continue
            if platform_id not in known:
                logger.warning(
                    "Ignoring unknown platform '%s'", platform_id
                )
                continue
            selected.append(platform_id)
        return selected

    # ── Fan-out ──────────────────────────────────────────

    async def _run_extractor(
        self, platform_id: str, query: str,
    ) -> list[ProductRecord]:
        """One branch: own a page for the duration of one extraction."""
        extractor = self.get_extractor(platform_id)
        async with self.browser_manager.page() as page:
            return await extractor.extract(page, query)

    async def _run_extractors(
        self, query: str, platforms: list[str],
    ) -> list[ProductRecord]:
        """Run all branches concurrently and merge in request order."""
        batches = await asyncio.gather(
            *(self._run_extractor(p, query) for p in platforms),
            return_exceptions=True,
        )

        merged: list[ProductRecord] = []
        for platform_id, batch in zip(platforms, batches):
            if isinstance(batch, BaseException):
                failure = ExtractionFailure(
                    platform_id, query, str(batch)
                )
                logger.error("%s", failure, exc_info=batch)
                continue
            merged.extend(batch)
        return merged

    def _fallback_records(
        self, query: str, platforms: list[str],
    ) -> list[ProductRecord]:
        """Placeholder rows pointing at each platform's search page."""
        records: list[ProductRecord] = []
        for platform_id in platforms:
            extractor = self.get_extractor(platform_id)
            records.append(
                ProductRecord(
                    platform=extractor.PLATFORM_LABEL,
                    name=f"{query} (sample result)",
                    price="₹0",
                    rating=0.0,
                    reviews=0,
                    url=extractor.build_search_url(query),
                    image=self.settings.PLACEHOLDER_IMAGE,
                )
            )
        return records

    async def _aggregate(
        self, key: CacheKey, query: str, platforms: list[str],
    ) -> list[ProductRecord]:
        records = await self._run_extractors(query, platforms)
        self.cache.set(key, records)
        return records

    async def _join_or_start(
        self, key: CacheKey, query: str, platforms: list[str],
    ) -> list[ProductRecord]:
        """Share one aggregation among concurrent requests for ``key``."""
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.create_task(
                self._aggregate(key, query, platforms)
            )
            self._inflight[key] = task

            def _forget(done: asyncio.Task[list[ProductRecord]]) -> None:
                if self._inflight.get(key) is done:
                    del self._inflight[key]

            task.add_done_callback(_forget)
        else:
            logger.info(
                "Joining in-flight search for '%s' on %s",
                key[0],
                ", ".join(key[1]),
            )
        # Shielded so one disconnecting client does not cancel the others
        records = await asyncio.shield(task)
        return list(records)

    # ── Entry point ──────────────────────────────────────

    async def search(
        self, query: str, platforms: list[str] | None = None,
    ) -> list[ProductRecord]:
        """Search the requested platforms, serving from cache when fresh.

        Raises:
            InvalidRequest: ``query`` is empty or whitespace.
        """
        if not query or not query.strip():
            raise InvalidRequest("Query parameter is required")
        query = query.strip()

        known = set(self.platform_ids)
        candidates = (
            platforms if platforms is not None else self.platform_ids
        )
        requested = list(
            dict.fromkeys(
                p.strip().lower()
                for p in candidates
                if p.strip().lower() in known
            )
        )
        logger.info(
            "Search request for '%s' on %s",
            query,
            ", ".join(requested) or "no platforms",
        )

        key = self.cache.make_key(query, requested)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        records = await self._join_or_start(key, query, requested)
        if records:
            return records

        logger.info("No extractor results for '%s'", query)
        if self.settings.FALLBACK_SAMPLE_DATA:
            return self._fallback_records(query, requested)
        return []
