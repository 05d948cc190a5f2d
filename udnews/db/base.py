"""Entity store interface shared by the memory and Postgres backends."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..config import SourceConfig
from ..models import Article, NewArticle, Source, SourceStatus


class EntityStore(ABC):
    """Durable keyed storage for articles and sources.

    Every method is a single atomic operation and must be safe to call
    from concurrent ingestors. Backends raise ``StoreUnavailableError``
    when the underlying storage cannot be reached.
    """

    # Articles

    @abstractmethod
    def list_articles(
        self,
        limit: int = 50,
        offset: int = 0,
        source: Optional[str] = None,
    ) -> List[Article]:
        """List articles newest first, optionally filtered by source identifier."""

    @abstractmethod
    def get_article_by_link(self, link: str) -> Optional[Article]:
        """Look up an article by exact link."""

    @abstractmethod
    def create_article(self, article: NewArticle) -> Optional[Article]:
        """
        Insert an article unless its link is already stored.

        Returns:
            The stored article, or None if another article owns the link
        """

    @abstractmethod
    def update_article(self, article_id: int, **fields: Any) -> Optional[Article]:
        """Update fields of an article. Returns None if it does not exist."""

    @abstractmethod
    def delete_article(self, article_id: int) -> bool:
        """Delete an article. Returns whether a row was removed."""

    # Sources

    @abstractmethod
    def list_sources(self) -> List[Source]:
        """List all sources."""

    @abstractmethod
    def get_source(self, source_id: int) -> Optional[Source]:
        """Get a source by ID."""

    @abstractmethod
    def create_source(self, source: SourceConfig) -> Source:
        """Create a source with unknown status."""

    @abstractmethod
    def update_source(self, source_id: int, **fields: Any) -> Optional[Source]:
        """Update fields of a source. Returns None if it does not exist."""

    @abstractmethod
    def update_source_status(
        self,
        source_id: int,
        status: SourceStatus,
        last_fetched: Optional[datetime] = None,
    ) -> Optional[Source]:
        """
        Record the outcome of an ingestion attempt.

        Status and timestamp are written together. When last_fetched is
        None the stored timestamp is left unchanged.
        """

    @abstractmethod
    def delete_source(self, source_id: int) -> bool:
        """Delete a source. Returns whether a row was removed."""

    @abstractmethod
    def sync_sources(self, sources: List[SourceConfig]) -> Dict[str, int]:
        """
        Upsert configured sources keyed by URL.

        Name and active flag follow the configuration; status and
        last_fetched of existing sources are preserved.

        Returns:
            Mapping of source URL to store ID
        """

    def close(self) -> None:
        """Release backend resources."""
