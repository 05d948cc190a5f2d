"""Tests for the in-process entity store."""

from datetime import datetime, timezone

import pytest

from udnews.config import SourceConfig
from udnews.models import NewArticle, SourceStatus


def _article(link: str, day: int = 1, source: str = "matichon") -> NewArticle:
    return NewArticle(
        title=f"Story {day}",
        link=link,
        source=source,
        published_at=datetime(2024, 1, day, tzinfo=timezone.utc),
    )


class TestArticles:
    def test_duplicate_link_is_not_inserted(self, store) -> None:
        first = store.create_article(_article("https://example.com/1"))
        again = store.create_article(_article("https://example.com/1", day=2))

        assert first is not None
        assert again is None
        assert len(store.list_articles()) == 1
        assert store.get_article_by_link("https://example.com/1").title == "Story 1"

    def test_list_is_newest_first_with_paging(self, store) -> None:
        for day in (3, 1, 2):
            store.create_article(_article(f"https://example.com/{day}", day=day))

        assert [a.link[-1] for a in store.list_articles()] == ["3", "2", "1"]
        assert [a.link[-1] for a in store.list_articles(limit=1, offset=1)] == ["2"]

    def test_list_filters_by_source(self, store) -> None:
        store.create_article(_article("https://example.com/1", source="tnn"))
        store.create_article(_article("https://example.com/2", source="matichon"))

        assert [a.source for a in store.list_articles(source="tnn")] == ["tnn"]

    def test_update_to_taken_link_is_rejected(self, store) -> None:
        store.create_article(_article("https://example.com/1"))
        second = store.create_article(_article("https://example.com/2"))

        with pytest.raises(ValueError):
            store.update_article(second.id, link="https://example.com/1")

    def test_update_moves_link_index(self, store) -> None:
        article = store.create_article(_article("https://example.com/old"))
        store.update_article(article.id, link="https://example.com/new")

        assert store.get_article_by_link("https://example.com/old") is None
        assert store.get_article_by_link("https://example.com/new").id == article.id

    def test_delete_frees_link(self, store) -> None:
        article = store.create_article(_article("https://example.com/1"))

        assert store.delete_article(article.id)
        assert not store.delete_article(article.id)
        assert store.create_article(_article("https://example.com/1")) is not None


class TestSources:
    def test_new_source_starts_unknown(self, store, make_source) -> None:
        source = make_source()
        assert source.status is SourceStatus.UNKNOWN
        assert source.last_fetched is None

    def test_duplicate_url_is_rejected(self, store, make_source) -> None:
        make_source(url="https://feeds.example.com/a")
        with pytest.raises(ValueError):
            make_source(name="Other", url="https://feeds.example.com/a")

    def test_status_update_keeps_last_fetched_when_omitted(self, store, make_source) -> None:
        source = make_source()
        fetched = datetime(2024, 2, 1, tzinfo=timezone.utc)

        store.update_source_status(source.id, SourceStatus.ONLINE, fetched)
        updated = store.update_source_status(source.id, SourceStatus.ERROR)

        assert updated.status is SourceStatus.ERROR
        assert updated.last_fetched == fetched

    def test_sync_preserves_health(self, store) -> None:
        ids = store.sync_sources([SourceConfig(name="TNN", url="https://feeds.example.com/tnn")])
        source_id = ids["https://feeds.example.com/tnn"]
        store.update_source_status(source_id, SourceStatus.ONLINE, datetime.now(timezone.utc))

        again = store.sync_sources(
            [
                SourceConfig(name="TNN Thailand", url="https://feeds.example.com/tnn", is_active=False),
                SourceConfig(name="Matichon", url="https://feeds.example.com/matichon"),
            ]
        )

        assert again["https://feeds.example.com/tnn"] == source_id
        synced = store.get_source(source_id)
        assert synced.name == "TNN Thailand"
        assert not synced.is_active
        assert synced.status is SourceStatus.ONLINE
        assert len(store.list_sources()) == 2

    def test_missing_source_updates_return_none(self, store) -> None:
        assert store.get_source(99) is None
        assert store.update_source_status(99, SourceStatus.ERROR) is None
        assert not store.delete_source(99)
