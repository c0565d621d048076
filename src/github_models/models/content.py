"""Repository file contents as a browsable, streamable tree.

See https://docs.github.com/en/rest/repos/contents
"""

import base64
import logging
import re
from typing import Any, AsyncIterator

from ..client import GitHubClient, NotFoundError
from ..metrics import records_streamed_total
from ..pagination import StreamListModel
from ..store import toggle
from ..tree import TreeTraverser
from ..types import Content, ContentFilter

logger = logging.getLogger("github_models.models.content")


def make_list(body: Any) -> list[Any]:
    """Directory listings are arrays, single files are objects."""
    if body is None:
        return []
    return body if isinstance(body, list) else [body]


def encode_content(content: str | bytes) -> str:
    """Base64 text as expected by the contents API."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return base64.b64encode(content).decode("ascii")


class ContentModel(StreamListModel[Content]):
    """Reads, writes and walks the files of one repository.

    ``open_stream`` filter keys:
        path: list only the direct children of this directory
        name: regular expression searched in entry names; applied to the
            flattened output, directories that do not match are still walked

    Without ``path`` the whole tree is streamed depth first.
    """

    index_key = "path"

    def __init__(
        self,
        client: GitHubClient,
        owner: str,
        repository: str,
        page_size: int | None = None,
    ) -> None:
        super().__init__(client, page_size)
        self.owner = owner
        self.repository = repository
        self.base_uri = f"repos/{owner}/{repository}/contents"
        self.traverser = TreeTraverser(self.list_directory)

    async def list_directory(self, path: str = "") -> list[Content]:
        """Entries of one directory ("" is the repository root)."""
        uri = f"{self.base_uri}/{path}" if path else self.base_uri
        response = await self.client.get(uri)
        return make_list(response.body)

    @toggle("downloading")
    async def get_one(self, path: str) -> Content:
        """Get repository content at a specific path.

        See https://docs.github.com/en/rest/repos/contents#get-repository-content
        """
        response = await self.client.get(f"{self.base_uri}/{path}")
        contents = make_list(response.body)
        if not contents:
            raise NotFoundError(f"No content at {path}", status=404)

        self.current_one = contents[0]
        return self.current_one

    @toggle("uploading")
    async def update_one(
        self, content: str | bytes, path: str, message: str | None = None
    ) -> Content:
        """Create or update a file.

        The current ``sha`` is looked up first; a missing file is created.
        """
        try:
            sha = (await self.get_one(path)).get("sha")
        except NotFoundError:
            sha = None

        payload: dict[str, Any] = {
            "message": message or f"[update] {path}",
            "content": encode_content(content),
        }
        if sha:
            payload["sha"] = sha

        response = await self.client.put(f"{self.base_uri}/{path}", payload)

        logger.info("content_updated", extra={"path": path, "created": sha is None})
        return response.body["content"]

    async def open_stream(self, filter: ContentFilter | None = None) -> AsyncIterator[Content]:
        filter = filter or {}
        path = filter.get("path")
        name = filter.get("name")
        name_pattern = re.compile(name) if name else None

        stream = (
            self.traverser.traverse_children(path)
            if path
            else self.traverser.traverse_tree()
        )
        count = 0

        async for content in stream:
            if name_pattern is None or name_pattern.search(content.get("name", "")):
                count += 1
                records_streamed_total.labels(resource=type(self).__name__).inc()
                yield content

        self.total_count = count
