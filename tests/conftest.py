"""Shared fixtures."""

from typing import Callable, Dict, Optional

import httpx
import pytest

from udnews.config import SourceConfig
from udnews.db import MemoryStore


def _item(
    title: Optional[str] = "Story",
    link: Optional[str] = "https://example.com/story",
    description: Optional[str] = None,
    pub_date: Optional[str] = "Mon, 01 Jan 2024 12:00:00 GMT",
    extra: str = "",
) -> str:
    parts = ["<item>"]
    if title is not None:
        parts.append(f"<title>{title}</title>")
    if link is not None:
        parts.append(f"<link>{link}</link>")
    if description is not None:
        parts.append(f"<description>{description}</description>")
    if pub_date is not None:
        parts.append(f"<pubDate>{pub_date}</pubDate>")
    parts.append(extra)
    parts.append("</item>")
    return "\n".join(parts)


def _feed(*items: str) -> str:
    body = "\n".join(items)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">\n'
        "<channel>\n"
        "<title>Test Feed</title>\n"
        "<link>https://example.com</link>\n"
        f"{body}\n"
        "</channel>\n"
        "</rss>\n"
    )


@pytest.fixture
def rss_item() -> Callable[..., str]:
    """Builder for one <item> block."""
    return _item


@pytest.fixture
def rss_feed() -> Callable[..., str]:
    """Builder wrapping item blocks in an RSS document."""
    return _feed


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def make_source(store: MemoryStore):
    """Create a source in the memory store."""

    def _make(name: str = "Matichon", url: str = "https://feeds.example.com/a", is_active: bool = True):
        return store.create_source(SourceConfig(name=name, url=url, is_active=is_active))

    return _make


def routing_transport(routes: Dict[str, Callable[[httpx.Request], httpx.Response]]) -> httpx.MockTransport:
    """Mock transport dispatching on the full request URL."""

    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(str(request.url))
        if route is None:
            return httpx.Response(404)
        return route(request)

    return httpx.MockTransport(handler)


@pytest.fixture
def make_transport():
    return routing_transport
