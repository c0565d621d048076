"""Depth-first traversal of directory-style resources.

Directories are listed on demand, one listing request per directory, and
entries are yielded in pre-order. Every entry is annotated with the path of
its parent (``parent_path``) and with a cumulative ``full_path`` whose
segments have filesystem-unsafe characters removed.

A failing directory listing propagates and ends the traversal; entries
yielded before the failure stay valid.
"""

import logging
import re
from typing import Any, AsyncIterator, Awaitable, Callable

logger = logging.getLogger("github_models.tree")

# Characters rejected by common filesystems, plus ASCII control characters
UNSAFE_PATH_CHARACTERS = re.compile(r'[\\/:*?"<>|\x00-\x1f\x7f]')

ListDirectory = Callable[[str], Awaitable[list[dict[str, Any]]]]
OnCount = Callable[[int], Any]


def sanitize_path_segment(name: str) -> str:
    """Strip characters that cannot appear in a local file name."""
    return UNSAFE_PATH_CHARACTERS.sub("", name)


def sanitize_path(path: str) -> str:
    """Sanitize every segment of a slash-separated path."""
    segments = (sanitize_path_segment(segment) for segment in path.split("/"))
    return "/".join(segment for segment in segments if segment)


class TreeTraverser:
    """Walk a tree exposed through a single-directory listing primitive.

    Args:
        list_directory: Coroutine function returning the entries of one
            directory path ("" for the root)
    """

    def __init__(self, list_directory: ListDirectory) -> None:
        self.list_directory = list_directory

    async def traverse_children(
        self,
        parent_path: str = "",
        parent_full_path: str | None = None,
        on_count: OnCount | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield the direct children of ``parent_path``.

        Args:
            parent_path: Repository path of the directory
            parent_full_path: Sanitized path of the directory; derived from
                parent_path when omitted
            on_count: Receives the number of entries in the listing
        """
        if parent_full_path is None:
            parent_full_path = sanitize_path(parent_path)

        contents = await self.list_directory(parent_path)

        if on_count:
            on_count(len(contents))

        for content in contents:
            name = sanitize_path_segment(content.get("name", ""))
            content["parent_path"] = parent_path
            content["full_path"] = f"{parent_full_path}/{name}" if parent_full_path else name
            yield content

    async def traverse_tree(
        self,
        node: dict[str, Any] | None = None,
        on_count: OnCount | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield ``node`` and everything below it, depth first, in pre-order.

        Without ``node`` the traversal starts at the children of the root.
        ``on_count`` receives the number of yielded entries once the whole
        subtree has been walked.
        """
        total = 0

        def add(count: int) -> None:
            nonlocal total
            total += count

        if node is None:
            children = self.traverse_children("")
        else:
            total += 1
            yield node

            if node.get("type") != "dir":
                if on_count:
                    on_count(total)
                return

            node_path = node.get("path", "")
            children = self.traverse_children(
                node_path, node.get("full_path") or sanitize_path(node_path)
            )

        async for child in children:
            async for content in self.traverse_tree(child, add):
                yield content

        logger.debug(
            "tree_traversed",
            extra={"root": node.get("path") if node else "", "total_count": total},
        )
        if on_count:
            on_count(total)
