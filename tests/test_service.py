"""Tests for the service facade and run report."""

import asyncio
from datetime import datetime, timezone

import httpx

from udnews.config import Config, ConfigModel
from udnews.ingestion import FeedFetcher
from udnews.pipeline import RunReport, SourceResult
from udnews.service import build_service

FEED_URL = "https://feeds.example.com/a"


def _service(store, tmp_path):
    model = ConfigModel()
    model.ingestion.interval_minutes = 15
    model.ingestion.max_concurrent = 2
    return build_service(Config.from_model(model, tmp_path / "config.yaml"), store=store)


def test_build_service_wires_settings(store, tmp_path) -> None:
    service = _service(store, tmp_path)

    assert service.store is store
    assert service.scheduler.interval == 15 * 60
    assert service.scheduler.coordinator.max_concurrent == 2
    assert service.scheduler.coordinator.fetcher.timeout == 10.0


def test_run_ingestion_refreshes_and_lists(store, make_source, rss_feed, rss_item, make_transport, tmp_path) -> None:
    make_source(name="TNN", url=FEED_URL)
    feed = rss_feed(
        rss_item(title="Older", link="https://example.com/1", pub_date="Mon, 01 Jan 2024 08:00:00 GMT"),
        rss_item(title="Newer", link="https://example.com/2", pub_date="Tue, 02 Jan 2024 08:00:00 GMT"),
    )
    service = _service(store, tmp_path)
    transport = make_transport({FEED_URL: lambda request: httpx.Response(200, text=feed)})
    service.scheduler.coordinator.fetcher = FeedFetcher(transport=transport)

    report = asyncio.run(service.run_ingestion())

    assert report.total_new == 2
    assert [a.title for a in service.list_articles()] == ["Newer", "Older"]
    assert [a.title for a in service.list_articles(source="tnn", limit=1)] == ["Newer"]
    assert service.list_sources()[0].status.value == "online"


def test_report_serializes_camel_case() -> None:
    report = RunReport(
        results=[
            SourceResult(source_name="A", status="success", articles_count=3),
            SourceResult(source_name="B", status="error", error="HTTP 404: Not Found"),
        ],
        run_at=datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc),
    )

    data = report.to_dict()

    assert data["runAt"].startswith("2024-01-01T09:00:00")
    assert data["perSourceResults"][1] == {
        "sourceName": "B",
        "status": "error",
        "error": "HTTP 404: Not Found",
    }
    assert report.total_new == 3
    assert [r.source_name for r in report.failed] == ["B"]
