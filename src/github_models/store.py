"""List-store base classes shared by every resource model.

A model owns its loading state (``downloading``/``uploading`` counters),
the pages loaded so far, the last known ``total_count`` and the record most
recently fetched through ``get_one`` (``current_one``). Subclasses provide
``base_uri`` and ``load_page``.
"""

import logging
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Awaitable, Callable, Generic, Mapping, TypeVar

from .client import GitHubClient
from .config import get_config

logger = logging.getLogger("github_models.store")

T = TypeVar("T")


@dataclass
class PageData(Generic[T]):
    """One loaded page plus whatever the endpoint says about the total.

    Attributes:
        records: Records of the page, in server order
        total_count: Total across all pages, or None when unknown
        is_last: True/False when the source knows whether more pages follow
    """

    records: list[T] = field(default_factory=list)
    total_count: int | None = None
    is_last: bool | None = None


def toggle(flag: str) -> Callable:
    """Count in-flight calls of an async method on the ``flag`` attribute.

    Example:
        @toggle("downloading")
        async def get_one(self, id): ...
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @wraps(func)
        async def wrapper(self, *args: Any, **kwargs: Any) -> Any:
            setattr(self, flag, getattr(self, flag, 0) + 1)
            try:
                return await func(self, *args, **kwargs)
            finally:
                setattr(self, flag, getattr(self, flag) - 1)

        return wrapper

    return decorator


class BaseModel:
    """Model bound to a GitHubClient, with loading counters."""

    def __init__(self, client: GitHubClient) -> None:
        self.client = client
        self.downloading = 0
        self.uploading = 0

    @property
    def loading(self) -> bool:
        return self.downloading > 0 or self.uploading > 0


class ListModel(BaseModel, Generic[T]):
    """Paged list store over one REST collection.

    Attributes:
        base_uri: Collection path relative to the API root
        index_key: Record field that identifies a record (used by get_one)
        page_size: Records requested per page
        page_index: Last loaded page (0 before the first load)
        total_count: Total reported by the endpoint or the stream, if known
        filter: Filter the loaded pages belong to
        current_one: Record loaded by the last get_one call
        no_more: True once the last page has been loaded
    """

    base_uri = ""
    index_key = "id"

    def __init__(self, client: GitHubClient, page_size: int | None = None) -> None:
        super().__init__(client)
        self.page_size = page_size or get_config().page_size
        self.page_index = 0
        self.total_count: int | None = None
        self.filter: dict[str, Any] = {}
        self.page_list: list[list[T]] = []
        self.current_one: Any = {}
        self.no_more = False

    @property
    def all_items(self) -> list[T]:
        return [record for page in self.page_list for record in page]

    def clear(self) -> None:
        """Forget loaded pages, totals and the current record."""
        self.page_index = 0
        self.total_count = None
        self.page_list = []
        self.current_one = {}
        self.no_more = False

    async def load_page(
        self, page: int, per_page: int, filter: Mapping[str, Any]
    ) -> PageData[T]:
        """Fetch one page; implemented by each model."""
        raise NotImplementedError

    @toggle("downloading")
    async def get_list(
        self,
        filter: Mapping[str, Any] | None = None,
        page_index: int | None = None,
        page_size: int | None = None,
    ) -> list[T]:
        """Load one page into the store.

        Without ``page_index`` the page after the last loaded one is fetched.
        Changing the filter resets the store first.

        Args:
            filter: Query filter; None keeps the current filter
            page_index: 1-based page to load
            page_size: Page size override

        Returns:
            Records of the loaded page
        """
        filter = self.filter if filter is None else dict(filter)
        if filter != self.filter:
            self.clear()
            self.filter = filter

        page_index = page_index or self.page_index + 1
        page_size = page_size or self.page_size

        data = await self.load_page(page_index, page_size, filter)

        self.page_index = page_index
        self.page_size = page_size
        del self.page_list[page_index - 1 :]
        while len(self.page_list) < page_index - 1:
            self.page_list.append([])
        self.page_list.append(data.records)

        if data.total_count is not None:
            self.total_count = data.total_count

        if data.is_last is not None:
            self.no_more = data.is_last
        else:
            self.no_more = len(data.records) < page_size or (
                self.total_count is not None and len(self.all_items) >= self.total_count
            )
        logger.debug(
            "page_loaded",
            extra={
                "model": type(self).__name__,
                "page": page_index,
                "records": len(data.records),
                "total_count": self.total_count,
            },
        )
        return data.records

    async def get_all(self, filter: Mapping[str, Any] | None = None) -> list[T]:
        """Load every page for ``filter`` and return all records."""
        self.clear()
        self.filter = dict(filter or {})

        while not self.no_more:
            await self.get_list(self.filter)

        return self.all_items

    @toggle("downloading")
    async def get_one(self, id: Any) -> Any:
        """Fetch one record from ``{base_uri}/{id}`` into ``current_one``."""
        response = await self.client.get(f"{self.base_uri}/{id}")
        self.current_one = response.body
        return self.current_one
