"""Paginated fetching and incremental streams.

``paginate()`` is the page-fetch loop behind every streaming model: it walks
page numbers (optionally carrying a ``since`` watermark), yields records one
by one and reports the number of yielded records once the stream completes.

``StreamPager`` turns any object implementing ``StreamSource`` into page
loads for ``ListModel.get_list()``, and ``StreamListModel`` wires the two
together by delegation.
"""

import logging
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Generic,
    Mapping,
    Protocol,
    TypeVar,
    runtime_checkable,
)

from .client import GitHubClient
from .metrics import records_streamed_total
from .store import ListModel, PageData, toggle

logger = logging.getLogger("github_models.pagination")

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

# fetch_page(page, per_page, since) -> raw page records
FetchPage = Callable[[int, int, Any], Awaitable[list[Any]]]


async def paginate(
    fetch_page: FetchPage,
    page_size: int,
    *,
    start_page: int = 1,
    watermark_key: str | None = None,
    keep: Callable[[Any], bool] | None = None,
    on_complete: Callable[[int], Any] | None = None,
    label: str = "stream",
) -> AsyncIterator[Any]:
    """Yield every record of a paged collection, one page request at a time.

    Stops on an empty page or on a page shorter than ``page_size``. With
    ``keep``, records failing the predicate are dropped after the page is
    fetched; the stop decision still uses the raw page length, so a full
    page of dropped records leads to another request.

    Args:
        fetch_page: Coroutine function returning the raw records of one page
        page_size: Records requested per page
        start_page: First page number (1 for most endpoints, 0 for a few)
        watermark_key: Record field carried forward as ``since`` after each page
        keep: Optional predicate selecting the records to yield
        on_complete: Called with the number of yielded records once the
            whole collection has been read
        label: Resource name for logs and metrics

    Yields:
        Records in server order

    Raises:
        Whatever fetch_page raises; records yielded before remain yielded
        and on_complete is not called.
    """
    count = 0
    since = None
    page = start_page

    while True:
        records = await fetch_page(page, page_size, since)
        if not records:
            break

        if watermark_key:
            since = records[-1].get(watermark_key)

        kept = [record for record in records if keep(record)] if keep else records
        logger.debug(
            "page_fetched",
            extra={"resource": label, "page": page, "raw": len(records), "kept": len(kept)},
        )
        records_streamed_total.labels(resource=label).inc(len(kept))

        for record in kept:
            count += 1
            yield record

        if len(records) < page_size:
            break
        page += 1

    logger.debug("stream_completed", extra={"resource": label, "total_count": count})
    if on_complete:
        on_complete(count)


@runtime_checkable
class StreamSource(Protocol[T_co]):
    """Anything that can open a fresh record stream for a filter."""

    def open_stream(self, filter: Mapping[str, Any]) -> AsyncIterator[T_co]: ...


class StreamPager(Generic[T]):
    """Serve sequential pages out of a StreamSource.

    Keeps one open stream per filter and pulls ``per_page`` records from it
    for each requested page. Requesting page 1 or changing the filter opens a
    new stream. Pages can only be read in order.

    A failed page drops its stream. Loading the same page again reopens the
    stream and skips the records already served, so a transient error never
    reads as the end of the collection.
    """

    def __init__(self, source: StreamSource[T]) -> None:
        self.source = source
        self._stream: AsyncIterator[T] | None = None
        self._filter: dict[str, Any] | None = None
        self._next_page = 1
        self._served = 0
        self.exhausted = False

    async def close(self) -> None:
        """Stop the open stream; no further requests are made for it."""
        if self._stream is not None and hasattr(self._stream, "aclose"):
            await self._stream.aclose()
        self._stream = None
        self._filter = None
        self._next_page = 1
        self._served = 0
        self.exhausted = False

    async def mark_drained(self, filter: Mapping[str, Any], count: int) -> None:
        """Record that the stream for ``filter`` was read to its end elsewhere.

        Later pages for the same filter come back empty instead of reopening it.
        """
        await self.close()
        self._filter = dict(filter)
        self._next_page = 2
        self._served = count
        self.exhausted = True

    async def _pull(self) -> T | None:
        try:
            return await self._stream.__anext__()
        except StopAsyncIteration:
            self.exhausted = True
            return None

    async def load_page(
        self, page: int, per_page: int, filter: Mapping[str, Any]
    ) -> PageData[T]:
        """Pull the records of ``page`` from the stream.

        Raises:
            ValueError: If pages are requested out of order
        """
        filter = dict(filter)

        if page == 1 or filter != self._filter:
            await self.close()

        if page != self._next_page:
            raise ValueError(
                f"Stream pages must be loaded in order: expected {self._next_page}, got {page}"
            )

        records: list[T] = []
        if self.exhausted:
            self._next_page += 1
            return PageData(records=records, is_last=True)

        skip = 0
        if self._stream is None:
            self._stream = self.source.open_stream(filter)
            self._filter = filter
            skip = self._served

        try:
            # Replay what earlier pages already served after a reopen
            while skip and not self.exhausted:
                await self._pull()
                skip -= 1
            while not self.exhausted and len(records) < per_page:
                record = await self._pull()
                if not self.exhausted:
                    records.append(record)
        except BaseException:
            self._stream = None
            raise

        self._served += len(records)
        self._next_page += 1
        return PageData(records=records, is_last=self.exhausted or None)


class StreamListModel(ListModel[T]):
    """ListModel whose pages come from ``open_stream``.

    Subclasses implement ``open_stream(filter)`` (usually via
    ``paginate_uri``) and set ``total_count`` when their stream completes.
    """

    # Page number of the first page for this endpoint
    start_page = 1
    # Record field used as the ``since`` watermark, for id-ordered endpoints
    watermark_key: str | None = None

    def __init__(self, client: GitHubClient, page_size: int | None = None) -> None:
        super().__init__(client, page_size)
        self.pager: StreamPager[T] = StreamPager(self)

    def open_stream(self, filter: Mapping[str, Any]) -> AsyncIterator[T]:
        raise NotImplementedError

    def _set_total_count(self, count: int) -> None:
        self.total_count = count

    def paginate_uri(
        self,
        uri: str,
        filter: Mapping[str, Any] | None = None,
        keep: Callable[[Any], bool] | None = None,
    ) -> AsyncIterator[T]:
        """Stream a bare-array list endpoint with the model's paging settings."""
        query = dict(filter or {})

        async def fetch_page(page: int, per_page: int, since: Any) -> list[T]:
            params = {**query, "per_page": per_page, "page": page}
            if since is not None:
                params["since"] = since
            response = await self.client.get(uri, params=params)
            return response.body or []

        return paginate(
            fetch_page,
            self.page_size,
            start_page=self.start_page,
            watermark_key=self.watermark_key,
            keep=keep,
            on_complete=self._set_total_count,
            label=type(self).__name__,
        )

    async def load_page(
        self, page: int, per_page: int, filter: Mapping[str, Any]
    ) -> PageData[T]:
        return await self.pager.load_page(page, per_page, filter)

    @toggle("downloading")
    async def get_all(self, filter: Mapping[str, Any] | None = None) -> list[T]:
        """Drain a fresh stream for ``filter`` into the store."""
        await self.pager.close()
        self.clear()
        self.filter = dict(filter or {})

        records = [record async for record in self.open_stream(self.filter)]
        await self.pager.mark_drained(self.filter, len(records))

        self.page_list = [records]
        self.page_index = 1
        self.no_more = True
        return records
