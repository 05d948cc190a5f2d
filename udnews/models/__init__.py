"""Data models for the news aggregator."""

from .article import Article, NewArticle
from .source import Source, SourceStatus

__all__ = ["Article", "NewArticle", "Source", "SourceStatus"]
