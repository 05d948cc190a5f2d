"""Postgres-backed entity store."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from ..config import SourceConfig
from ..models import Article, NewArticle, Source, SourceStatus
from .articles import ArticleStorage
from .base import EntityStore
from .connection import close_connection_pool, get_connection
from .sources import SourceManager


class PostgresStore(EntityStore):
    """Entity store on top of the shared psycopg connection pool.

    Each method borrows one pooled connection and commits before
    returning it.
    """

    def __init__(self, db_config: Dict[str, Any]) -> None:
        """Initialize with a database config dict."""
        self.db_config = db_config
        self.articles = ArticleStorage()
        self.sources = SourceManager()

    def list_articles(
        self,
        limit: int = 50,
        offset: int = 0,
        source: Optional[str] = None,
    ) -> List[Article]:
        with get_connection(self.db_config) as conn:
            return self.articles.get_articles(conn, limit=limit, offset=offset, source=source)

    def get_article_by_link(self, link: str) -> Optional[Article]:
        with get_connection(self.db_config) as conn:
            return self.articles.get_article_by_link(conn, link)

    def create_article(self, article: NewArticle) -> Optional[Article]:
        with get_connection(self.db_config) as conn:
            return self.articles.insert_article(conn, article)

    def update_article(self, article_id: int, **fields: Any) -> Optional[Article]:
        with get_connection(self.db_config) as conn:
            return self.articles.update_article(conn, article_id, fields)

    def delete_article(self, article_id: int) -> bool:
        with get_connection(self.db_config) as conn:
            return self.articles.delete_article(conn, article_id)

    def list_sources(self) -> List[Source]:
        with get_connection(self.db_config) as conn:
            return self.sources.get_sources(conn)

    def get_source(self, source_id: int) -> Optional[Source]:
        with get_connection(self.db_config) as conn:
            return self.sources.get_source(conn, source_id)

    def create_source(self, source: SourceConfig) -> Source:
        with get_connection(self.db_config) as conn:
            return self.sources.create_source(conn, source)

    def update_source(self, source_id: int, **fields: Any) -> Optional[Source]:
        with get_connection(self.db_config) as conn:
            return self.sources.update_source(conn, source_id, fields)

    def update_source_status(
        self,
        source_id: int,
        status: SourceStatus,
        last_fetched: Optional[datetime] = None,
    ) -> Optional[Source]:
        with get_connection(self.db_config) as conn:
            return self.sources.update_source_status(conn, source_id, status, last_fetched)

    def delete_source(self, source_id: int) -> bool:
        with get_connection(self.db_config) as conn:
            return self.sources.delete_source(conn, source_id)

    def sync_sources(self, sources: List[SourceConfig]) -> Dict[str, int]:
        with get_connection(self.db_config) as conn:
            return self.sources.sync_sources(conn, sources)

    def close(self) -> None:
        close_connection_pool()
