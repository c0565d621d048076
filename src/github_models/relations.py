"""Named side-queries resolved concurrently and merged into a parent record.

A ``RelationResolver`` holds relation functions (``uri -> value``) and
memoizes each resolved value per relation and URI. Resolving several
relations for one parent runs them concurrently and fails as a whole when
any of them fails.

Cache policy: a successful lookup is kept for the lifetime of the resolver
(no expiry, no size bound); failed or cancelled lookups are dropped so the
next call retries them. ``clear()`` forgets everything. The cache is only
correct for short-lived or read-only sessions.
"""

import asyncio
import logging
from functools import partial
from typing import Any, Awaitable, Callable, Iterable, Mapping

logger = logging.getLogger("github_models.relations")

RelationFunction = Callable[[str], Awaitable[Any]]


def primary_languages(byte_counts: Mapping[str, int]) -> list[str]:
    """Languages whose byte count is at or above the mean, largest first.

    Args:
        byte_counts: Bytes of code per language, as returned by
            ``GET repos/{owner}/{repo}/languages``

    Returns:
        Language names sorted by byte count, descending

    Example:
        >>> primary_languages({"TypeScript": 800, "HTML": 100, "CSS": 100})
        ['TypeScript']
    """
    if not byte_counts:
        return []

    average = sum(byte_counts.values()) / len(byte_counts)

    significant = [(name, count) for name, count in byte_counts.items() if count >= average]
    significant.sort(key=lambda item: item[1], reverse=True)

    return [name for name, _ in significant]


class RelationResolver:
    """Memoizing, concurrent resolver for named relations.

    Attributes:
        relations: Relation name -> coroutine function of the parent URI
        cache: Relation name -> parent URI -> future of the resolved value
    """

    def __init__(self, relations: Mapping[str, RelationFunction]) -> None:
        self.relations = dict(relations)
        self.cache: dict[str, dict[str, asyncio.Future]] = {name: {} for name in self.relations}

    def clear(self) -> None:
        """Drop every memoized value."""
        for entries in self.cache.values():
            entries.clear()

    def _forget_failure(self, name: str, uri: str, future: asyncio.Future) -> None:
        if future.cancelled() or future.exception() is not None:
            entries = self.cache.get(name, {})
            if entries.get(uri) is future:
                del entries[uri]

    async def resolve(self, name: str, uri: str) -> Any:
        """Resolve one relation for ``uri``, fetching at most once.

        Concurrent callers for the same relation and URI share one request.

        Raises:
            KeyError: If ``name`` is not a known relation
        """
        function = self.relations[name]
        entries = self.cache[name]

        future = entries.get(uri)
        if future is None:
            future = asyncio.ensure_future(function(uri))
            entries[uri] = future
            future.add_done_callback(partial(self._forget_failure, name, uri))
        # shield: an abandoned caller must not cancel a lookup others share
        return await asyncio.shield(future)

    async def resolve_many(self, uri: str, names: Iterable[str]) -> dict[str, Any]:
        """Resolve several relations for one parent concurrently.

        All-or-nothing: the first failure propagates, sibling lookups keep
        running and their results only land in the cache.

        Returns:
            Relation name -> resolved value, for every requested name
        """
        names = list(dict.fromkeys(names))
        for name in names:
            if name not in self.relations:
                raise KeyError(f"Unknown relation: {name}")

        values = await asyncio.gather(*(self.resolve(name, uri) for name in names))

        logger.debug("relation_resolved", extra={"uri": uri, "relations": names})
        return dict(zip(names, values))
