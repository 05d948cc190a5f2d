"""Ingestion coordinator: one pass over all active sources."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Iterator, List, Optional

from ..db.base import EntityStore
from ..errors import FetchError, StoreUnavailableError
from ..ingestion import DeduplicatingIngestor, FeedFetcher, ParsedItem, parse_feed
from ..models import Source, SourceStatus
from .report import RunReport, SourceResult

logger = logging.getLogger(__name__)

FeedParser = Callable[[str], Iterator[ParsedItem]]


class IngestionCoordinator:
    """Run fetch, parse and ingest for every active source.

    A failing source is marked as errored and reported; it never stops
    the others. An unreachable store aborts the whole run.
    """

    def __init__(
        self,
        store: EntityStore,
        fetcher: FeedFetcher,
        ingestor: Optional[DeduplicatingIngestor] = None,
        max_concurrent: int = 1,
        parser: FeedParser = parse_feed,
    ) -> None:
        """
        Initialize coordinator.

        Args:
            store: Entity store holding sources and articles
            fetcher: Feed fetcher
            ingestor: Ingestor to use (defaults to one over the store)
            max_concurrent: Number of sources processed at once
            parser: Function turning feed text into items
        """
        self.store = store
        self.fetcher = fetcher
        self.ingestor = ingestor or DeduplicatingIngestor(store)
        self.max_concurrent = max(1, max_concurrent)
        self.parser = parser

    async def run(self) -> RunReport:
        """
        Ingest all active sources and aggregate the outcomes.

        Raises:
            StoreUnavailableError: if the store cannot be reached at any
                point of the run
        """
        run_at = datetime.now(timezone.utc)
        sources = await asyncio.to_thread(self.store.list_sources)
        active = [s for s in sources if s.is_active]
        logger.info("Starting ingestion run over %d active source(s)", len(active))

        if self.max_concurrent == 1:
            results = [await self.ingest_source(source) for source in active]
        else:
            semaphore = asyncio.Semaphore(self.max_concurrent)

            async def ingest_with_semaphore(source: Source) -> SourceResult:
                async with semaphore:
                    return await self.ingest_source(source)

            results = list(await asyncio.gather(*(ingest_with_semaphore(s) for s in active)))

        report = RunReport(results=results, run_at=run_at)
        logger.info(
            "Ingestion run finished: %d succeeded, %d failed, %d new article(s)",
            len(report.succeeded),
            len(report.failed),
            report.total_new,
        )
        return report

    async def ingest_source(self, source: Source) -> SourceResult:
        """Fetch, parse and ingest one source, then record its status."""
        attempted_at = datetime.now(timezone.utc)

        try:
            text = await self.fetcher.fetch(source.url)
            items: List[ParsedItem] = list(self.parser(text))
            result = await asyncio.to_thread(self.ingestor.ingest, source, items)
        except FetchError as e:
            logger.warning("Failed to fetch %s (%s): %s", source.name, source.url, e.reason)
            return await self._record_failure(source, e.reason)
        except StoreUnavailableError:
            logger.error("Store unavailable while ingesting %s; aborting run", source.name)
            raise
        except Exception as e:
            logger.exception("Unexpected error ingesting %s", source.name)
            return await self._record_failure(source, f"Unexpected error: {e}")

        await self._record_status(source, SourceStatus.ONLINE, attempted_at)
        logger.info(
            "%s: %d new, %d already stored, %d failed item(s)",
            source.name,
            result.new_count,
            result.skipped_count,
            result.failed_count,
        )
        return SourceResult(
            source_name=source.name,
            status="success",
            articles_count=result.new_count,
        )

    async def _record_failure(self, source: Source, reason: str) -> SourceResult:
        await self._record_status(source, SourceStatus.ERROR)
        return SourceResult(source_name=source.name, status="error", error=reason)

    async def _record_status(
        self,
        source: Source,
        status: SourceStatus,
        last_fetched: Optional[datetime] = None,
    ) -> None:
        await asyncio.to_thread(self.store.update_source_status, source.id, status, last_fetched)
