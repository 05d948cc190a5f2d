"""Exception types for the ingestion pipeline."""

from typing import Optional


class UDNewsError(Exception):
    """Base class for all udnews errors."""


class FetchError(UDNewsError):
    """A feed could not be retrieved (network failure, non-2xx or timeout)."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(reason)

    @property
    def is_timeout(self) -> bool:
        return self.reason == "timeout"


class ItemPersistError(UDNewsError):
    """A single feed item could not be validated or stored."""

    def __init__(self, link: str, reason: str) -> None:
        self.link = link
        self.reason = reason
        super().__init__(f"{link}: {reason}")


class StoreUnavailableError(UDNewsError):
    """The entity store cannot be reached."""
