"""In-process entity store."""

import itertools
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..config import SourceConfig
from ..models import Article, NewArticle, Source, SourceStatus
from .base import EntityStore


def _sort_key(article: Article) -> datetime:
    published = article.published_at
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return published


class MemoryStore(EntityStore):
    """Entity store backed by dicts guarded by a single lock."""

    def __init__(self) -> None:
        """Initialize empty maps."""
        self._lock = threading.Lock()
        self._articles: Dict[int, Article] = {}
        self._article_ids_by_link: Dict[str, int] = {}
        self._sources: Dict[int, Source] = {}
        self._article_ids = itertools.count(1)
        self._source_ids = itertools.count(1)

    def list_articles(
        self,
        limit: int = 50,
        offset: int = 0,
        source: Optional[str] = None,
    ) -> List[Article]:
        """List articles newest first."""
        with self._lock:
            articles = list(self._articles.values())

        if source:
            articles = [a for a in articles if a.source == source]

        articles.sort(key=_sort_key, reverse=True)
        return articles[offset:offset + limit]

    def get_article_by_link(self, link: str) -> Optional[Article]:
        """Look up an article by exact link."""
        with self._lock:
            article_id = self._article_ids_by_link.get(link)
            return self._articles.get(article_id) if article_id is not None else None

    def create_article(self, article: NewArticle) -> Optional[Article]:
        """Insert an article unless its link is already stored."""
        with self._lock:
            if article.link in self._article_ids_by_link:
                return None

            article_id = next(self._article_ids)
            now = datetime.now(timezone.utc)
            stored = Article(
                id=article_id,
                created_at=now,
                updated_at=now,
                **article.model_dump(),
            )
            self._articles[article_id] = stored
            self._article_ids_by_link[stored.link] = article_id
            return stored

    def update_article(self, article_id: int, **fields: Any) -> Optional[Article]:
        """Update fields of an article."""
        with self._lock:
            existing = self._articles.get(article_id)
            if existing is None:
                return None

            new_link = fields.get("link")
            if new_link and new_link != existing.link:
                if new_link in self._article_ids_by_link:
                    raise ValueError(f"Link already stored: {new_link}")
                del self._article_ids_by_link[existing.link]
                self._article_ids_by_link[new_link] = article_id

            fields["updated_at"] = datetime.now(timezone.utc)
            updated = existing.model_copy(update=fields)
            self._articles[article_id] = updated
            return updated

    def delete_article(self, article_id: int) -> bool:
        """Delete an article."""
        with self._lock:
            article = self._articles.pop(article_id, None)
            if article is None:
                return False
            self._article_ids_by_link.pop(article.link, None)
            return True

    def list_sources(self) -> List[Source]:
        """List all sources in creation order."""
        with self._lock:
            return list(self._sources.values())

    def get_source(self, source_id: int) -> Optional[Source]:
        """Get a source by ID."""
        with self._lock:
            return self._sources.get(source_id)

    def create_source(self, source: SourceConfig) -> Source:
        """Create a source with unknown status."""
        with self._lock:
            return self._insert_source(source)

    def _insert_source(self, source: SourceConfig) -> Source:
        if any(s.url == source.url for s in self._sources.values()):
            raise ValueError(f"Source URL already exists: {source.url}")

        source_id = next(self._source_ids)
        now = datetime.now(timezone.utc)
        stored = Source(
            id=source_id,
            name=source.name,
            url=source.url,
            is_active=source.is_active,
            status=SourceStatus.UNKNOWN,
            created_at=now,
            updated_at=now,
        )
        self._sources[source_id] = stored
        return stored

    def update_source(self, source_id: int, **fields: Any) -> Optional[Source]:
        """Update fields of a source."""
        with self._lock:
            existing = self._sources.get(source_id)
            if existing is None:
                return None

            fields["updated_at"] = datetime.now(timezone.utc)
            updated = existing.model_copy(update=fields)
            self._sources[source_id] = updated
            return updated

    def update_source_status(
        self,
        source_id: int,
        status: SourceStatus,
        last_fetched: Optional[datetime] = None,
    ) -> Optional[Source]:
        """Record the outcome of an ingestion attempt."""
        fields: Dict[str, Any] = {"status": status}
        if last_fetched is not None:
            fields["last_fetched"] = last_fetched
        return self.update_source(source_id, **fields)

    def delete_source(self, source_id: int) -> bool:
        """Delete a source."""
        with self._lock:
            return self._sources.pop(source_id, None) is not None

    def sync_sources(self, sources: List[SourceConfig]) -> Dict[str, int]:
        """Upsert configured sources keyed by URL."""
        source_map = {}

        with self._lock:
            for source in sources:
                existing = next((s for s in self._sources.values() if s.url == source.url), None)
                if existing is None:
                    stored = self._insert_source(source)
                else:
                    stored = existing.model_copy(
                        update={
                            "name": source.name,
                            "is_active": source.is_active,
                            "updated_at": datetime.now(timezone.utc),
                        }
                    )
                    self._sources[stored.id] = stored
                source_map[source.url] = stored.id

        return source_map
