"""Operations exposed to an outer request layer."""

from typing import List, Optional

from .config import Config
from .db import EntityStore, create_store
from .ingestion import FeedFetcher
from .models import Article, Source
from .pipeline import IngestionCoordinator, IngestionScheduler, RunReport


class NewsService:
    """Article and source queries plus the manual refresh entry point."""

    def __init__(self, store: EntityStore, scheduler: IngestionScheduler) -> None:
        """Initialize with a store and the scheduler owning the run gate."""
        self.store = store
        self.scheduler = scheduler

    def list_articles(
        self,
        limit: int = 50,
        offset: int = 0,
        source: Optional[str] = None,
    ) -> List[Article]:
        """List stored articles, newest first."""
        return self.store.list_articles(limit=limit, offset=offset, source=source)

    def list_sources(self) -> List[Source]:
        """List sources with their health."""
        return self.store.list_sources()

    async def run_ingestion(self) -> RunReport:
        """
        Refresh all feeds now and wait for the report.

        Shares the scheduler's single-flight gate, so a refresh during a
        scheduled run returns that run's report.

        Raises:
            StoreUnavailableError: if the store cannot be reached
        """
        return await self.scheduler.trigger()

    def close(self) -> None:
        """Release store resources."""
        self.store.close()


def build_service(config: Config, store: Optional[EntityStore] = None) -> NewsService:
    """Wire store, fetcher, coordinator and scheduler from configuration."""
    settings = config.config.ingestion
    store = store or create_store(config)

    fetcher = FeedFetcher(timeout=settings.fetch_timeout, user_agent=settings.user_agent)
    coordinator = IngestionCoordinator(store, fetcher, max_concurrent=settings.max_concurrent)
    scheduler = IngestionScheduler(
        coordinator,
        interval=settings.interval_minutes * 60,
        initial_delay=settings.initial_delay_seconds,
    )
    return NewsService(store, scheduler)
