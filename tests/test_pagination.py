"""Unit tests for the paginated fetcher.

Tests paginate() and the stream/page bridge with:
- Stop conditions (empty page, short page, exact multiples)
- Completion-time totals
- Record filtering versus raw page length
- since watermarks
- Failure propagation and early stop
- StreamPager / StreamListModel page loading
"""

from typing import Any, AsyncIterator, Mapping

import pytest

from github_fakes import make_records, paged
from github_models.client import GitHubClientError
from github_models.pagination import StreamListModel, StreamPager, StreamSource, paginate


class RecordingSource:
    """fetch_page implementation over an in-memory list."""

    def __init__(self, records: list[dict], start_page: int = 1):
        self.records = records
        self.start_page = start_page
        self.requests: list[tuple[int, int, Any]] = []

    async def fetch_page(self, page: int, per_page: int, since: Any) -> list[dict]:
        self.requests.append((page, per_page, since))
        offset = (page - self.start_page) * per_page
        return self.records[offset : offset + per_page]


async def _collect(stream) -> list:
    return [record async for record in stream]


class TestPaginate:
    """Stream mode of the paginated fetcher."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "total,page_size",
        [(0, 3), (1, 3), (3, 3), (7, 3), (9, 3), (10, 1), (5, 100)],
    )
    async def test_yields_every_record_and_reports_total(self, total, page_size):
        source = RecordingSource(make_records(total))
        reported = []

        records = await _collect(
            paginate(source.fetch_page, page_size, on_complete=reported.append)
        )

        assert [r["id"] for r in records] == list(range(1, total + 1))
        assert reported == [total]

    @pytest.mark.asyncio
    async def test_short_page_stops_without_extra_request(self):
        source = RecordingSource(make_records(7))

        await _collect(paginate(source.fetch_page, 3))

        assert [page for page, _, _ in source.requests] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_full_last_page_ends_on_empty_page(self):
        source = RecordingSource(make_records(6))

        await _collect(paginate(source.fetch_page, 3))

        assert [page for page, _, _ in source.requests] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_start_page_zero(self):
        source = RecordingSource(make_records(4), start_page=0)

        records = await _collect(paginate(source.fetch_page, 2, start_page=0))

        assert len(records) == 4
        assert [page for page, _, _ in source.requests] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_keep_filters_before_counting(self):
        records = [{"id": i, "drop": i % 2 == 0} for i in range(1, 6)]
        source = RecordingSource(records)
        reported = []

        kept = await _collect(
            paginate(
                source.fetch_page,
                2,
                keep=lambda r: not r["drop"],
                on_complete=reported.append,
            )
        )

        assert [r["id"] for r in kept] == [1, 3, 5]
        assert reported == [3]

    @pytest.mark.asyncio
    async def test_fully_dropped_page_still_advances(self):
        records = [{"id": 1, "drop": True}, {"id": 2, "drop": True}, {"id": 3, "drop": False}]
        source = RecordingSource(records)
        reported = []

        kept = await _collect(
            paginate(
                source.fetch_page,
                2,
                keep=lambda r: not r["drop"],
                on_complete=reported.append,
            )
        )

        assert [r["id"] for r in kept] == [3]
        assert [page for page, _, _ in source.requests] == [1, 2]
        assert reported == [1]

    @pytest.mark.asyncio
    async def test_watermark_carries_last_id(self):
        source = RecordingSource(make_records(5))

        await _collect(paginate(source.fetch_page, 2, watermark_key="id"))

        assert [since for _, _, since in source.requests] == [None, 2, 4]

    @pytest.mark.asyncio
    async def test_failure_propagates_after_partial_results(self):
        calls = []

        async def fetch_page(page, per_page, since):
            calls.append(page)
            if page == 2:
                raise GitHubClientError("boom", status=500)
            return make_records(2)

        reported = []
        received = []
        with pytest.raises(GitHubClientError):
            async for record in paginate(fetch_page, 2, on_complete=reported.append):
                received.append(record)

        assert len(received) == 2
        assert reported == []
        assert calls == [1, 2]

    @pytest.mark.asyncio
    async def test_early_stop_makes_no_further_requests(self):
        source = RecordingSource(make_records(10))
        reported = []

        stream = paginate(source.fetch_page, 2, on_complete=reported.append)
        first = await stream.__anext__()
        await stream.aclose()

        assert first["id"] == 1
        assert len(source.requests) == 1
        assert reported == []

    @pytest.mark.asyncio
    async def test_each_call_restarts(self):
        source = RecordingSource(make_records(3))

        first = await _collect(paginate(source.fetch_page, 2))
        second = await _collect(paginate(source.fetch_page, 2))

        assert first == second
        assert [page for page, _, _ in source.requests] == [1, 2, 1, 2]


class NumberStream:
    """Minimal StreamSource."""

    def __init__(self, count: int):
        self.count = count
        self.opened: list[dict] = []

    async def open_stream(self, filter: Mapping[str, Any]) -> AsyncIterator[int]:
        self.opened.append(dict(filter))
        for number in range(self.count):
            yield number


class FlakyNumberStream(NumberStream):
    """NumberStream whose first stream fails before yielding ``fail_at``."""

    def __init__(self, count: int, fail_at: int):
        super().__init__(count)
        self.fail_at = fail_at

    async def open_stream(self, filter: Mapping[str, Any]) -> AsyncIterator[int]:
        self.opened.append(dict(filter))
        failing = len(self.opened) == 1
        for number in range(self.count):
            if failing and number == self.fail_at:
                raise GitHubClientError("Bad Gateway", status=502)
            yield number


class TestStreamPager:
    def test_source_protocol(self):
        assert isinstance(NumberStream(1), StreamSource)

    @pytest.mark.asyncio
    async def test_pages_are_sliced_from_one_stream(self):
        source = NumberStream(5)
        pager = StreamPager(source)

        first = await pager.load_page(1, 2, {})
        second = await pager.load_page(2, 2, {})
        third = await pager.load_page(3, 2, {})

        assert first.records == [0, 1]
        assert second.records == [2, 3]
        assert third.records == [4]
        assert third.is_last is True
        assert len(source.opened) == 1

    @pytest.mark.asyncio
    async def test_filter_change_reopens(self):
        source = NumberStream(4)
        pager = StreamPager(source)

        await pager.load_page(1, 2, {"state": "open"})
        page = await pager.load_page(1, 2, {"state": "closed"})

        assert page.records == [0, 1]
        assert source.opened == [{"state": "open"}, {"state": "closed"}]

    @pytest.mark.asyncio
    async def test_out_of_order_page_rejected(self):
        pager = StreamPager(NumberStream(10))
        await pager.load_page(1, 2, {})

        with pytest.raises(ValueError):
            await pager.load_page(3, 2, {})

    @pytest.mark.asyncio
    async def test_failed_page_resumes_where_it_stopped(self):
        source = FlakyNumberStream(6, fail_at=3)
        pager = StreamPager(source)

        await pager.load_page(1, 2, {})
        with pytest.raises(GitHubClientError):
            await pager.load_page(2, 2, {})
        retried = await pager.load_page(2, 2, {})
        last = await pager.load_page(3, 2, {})

        assert retried.records == [2, 3]
        assert retried.is_last is None
        assert last.records == [4, 5]
        assert len(source.opened) == 2

    @pytest.mark.asyncio
    async def test_failed_first_page_starts_over(self):
        source = FlakyNumberStream(3, fail_at=0)
        pager = StreamPager(source)

        with pytest.raises(GitHubClientError):
            await pager.load_page(1, 2, {})
        page = await pager.load_page(1, 2, {})

        assert page.records == [0, 1]


class ItemModel(StreamListModel[dict]):
    base_uri = "items"

    def open_stream(self, filter=None):
        return self.paginate_uri(self.base_uri, filter)


def failing_once(handler, page: int):
    """Route handler answering ``page`` with a 502 the first time it is asked."""
    failed = []

    def route(params: dict, body: Any):
        if int(params["page"]) == page and not failed:
            failed.append(page)
            return GitHubClientError("Bad Gateway", status=502)
        return handler(params, body)

    return route


class TestStreamListModel:
    @pytest.mark.asyncio
    async def test_get_all_reports_total(self, github_client, fake_github):
        fake_github.add("items", paged(make_records(7)))
        model = ItemModel(github_client, page_size=3)

        records = await model.get_all({"state": "open"})

        assert len(records) == 7
        assert model.total_count == 7
        assert model.no_more is True
        assert model.all_items == records
        assert [p["page"] for p in fake_github.requests_for("items")] == [1, 2, 3]
        assert all(p["state"] == "open" and p["per_page"] == 3 for p in fake_github.requests_for("items"))

    @pytest.mark.asyncio
    async def test_get_list_pages_through_stream(self, github_client, fake_github):
        fake_github.add("items", paged(make_records(5)))
        model = ItemModel(github_client, page_size=2)

        first = await model.get_list()
        second = await model.get_list()
        third = await model.get_list()

        assert [r["id"] for r in first] == [1, 2]
        assert [r["id"] for r in second] == [3, 4]
        assert [r["id"] for r in third] == [5]
        assert model.no_more is True
        assert model.total_count == 5
        assert len(model.all_items) == 5

    @pytest.mark.asyncio
    async def test_no_since_sent_without_watermark(self, github_client, fake_github):
        fake_github.add("items", paged(make_records(1)))
        model = ItemModel(github_client, page_size=2)

        await model.get_all({"since": "2026-01-01T00:00:00Z"})

        assert fake_github.requests_for("items")[0]["since"] == "2026-01-01T00:00:00Z"

    @pytest.mark.asyncio
    async def test_get_list_retry_after_failed_page(self, github_client, fake_github):
        fake_github.add("items", failing_once(paged(make_records(6)), page=2))
        model = ItemModel(github_client, page_size=2)

        await model.get_list()
        with pytest.raises(GitHubClientError):
            await model.get_list()
        retried = await model.get_list()

        assert [r["id"] for r in retried] == [3, 4]
        assert model.no_more is False
        assert model.total_count is None

        while not model.no_more:
            await model.get_list()

        assert [r["id"] for r in model.all_items] == [1, 2, 3, 4, 5, 6]
        assert model.total_count == 6

    @pytest.mark.asyncio
    async def test_get_list_after_get_all_is_empty(self, github_client, fake_github):
        fake_github.add("items", paged(make_records(3)))
        model = ItemModel(github_client, page_size=2)

        records = await model.get_all()
        requests = len(fake_github.requests_for("items"))

        assert await model.get_list() == []
        assert model.no_more is True
        assert model.all_items == records
        assert len(fake_github.requests_for("items")) == requests
