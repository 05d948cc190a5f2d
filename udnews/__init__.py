"""UD News - RSS feed ingestion pipeline."""

__version__ = "1.0.0"
