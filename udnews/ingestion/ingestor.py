"""Per-source deduplicating ingestion."""

import logging
from typing import Iterable

from psycopg import DatabaseError
from pydantic import ValidationError

from ..db.base import EntityStore
from ..errors import ItemPersistError
from ..models import NewArticle, Source
from .models import IngestResult, ParsedItem

logger = logging.getLogger(__name__)


def build_article(source: Source, item: ParsedItem) -> NewArticle:
    """Map a parsed item to the validated insert shape."""
    return NewArticle(
        title=item.title,
        description=item.description,
        content=item.description,
        link=item.link,
        source=source.name.lower(),
        image_url=item.image_url,
        published_at=item.published_at,
    )


class DeduplicatingIngestor:
    """Store items whose link has not been seen before."""

    def __init__(self, store: EntityStore) -> None:
        """Initialize with the entity store."""
        self.store = store

    def ingest(self, source: Source, items: Iterable[ParsedItem]) -> IngestResult:
        """
        Persist new items for a source.

        Existing links are skipped without touching the stored article.
        A failing item is recorded and does not stop the others;
        StoreUnavailableError is not an item failure and propagates.
        """
        result = IngestResult()

        for item in items:
            try:
                if self.store.get_article_by_link(item.link) is not None:
                    result.skipped_count += 1
                    continue

                article = build_article(source, item)
                stored = self.store.create_article(article)
            except ValidationError as e:
                result.failures.append(
                    ItemPersistError(item.link, f"invalid article: {e.error_count()} validation error(s)")
                )
                continue
            except (ValueError, DatabaseError) as e:
                result.failures.append(ItemPersistError(item.link, str(e)))
                continue

            if stored is None:
                # Another ingestor stored the link after our existence check
                result.skipped_count += 1
            else:
                result.new_count += 1

        for failure in result.failures:
            logger.warning("Skipped item from %s: %s", source.name, failure)

        logger.debug(
            "Ingested %s: %d new, %d existing, %d failed",
            source.name,
            result.new_count,
            result.skipped_count,
            result.failed_count,
        )
        return result
