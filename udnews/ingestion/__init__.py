"""Feed fetching, parsing and deduplicating ingestion."""

from .fetcher import FeedFetcher
from .ingestor import DeduplicatingIngestor, build_article
from .models import IngestResult, ParsedItem
from .parser import decode_entities, parse_date, parse_feed

__all__ = [
    "FeedFetcher",
    "DeduplicatingIngestor",
    "IngestResult",
    "ParsedItem",
    "build_article",
    "decode_entities",
    "parse_date",
    "parse_feed",
]
