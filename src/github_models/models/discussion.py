"""Repository discussions and their comments."""

from typing import AsyncIterator

from ..client import GitHubClient
from ..pagination import StreamListModel
from ..types import BaseFilter, Discussion, DiscussionComment


class DiscussionModel(StreamListModel[Discussion]):
    index_key = "number"

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
        self.base_uri = f"repos/{owner}/{repository}/discussions"

    def open_stream(self, filter: BaseFilter | None = None) -> AsyncIterator[Discussion]:
        return self.paginate_uri(self.base_uri, filter)


class DiscussionCommentModel(StreamListModel[DiscussionComment]):
    """Streams the comments of one discussion.

    The parent discussion is read first: its ``comments`` field becomes the
    provisional ``total_count`` (available while streaming), and no comment
    page is requested when it is zero. A completed stream replaces it with
    the number of comments actually yielded.
    """

    def __init__(
        self,
        client: GitHubClient,
        owner: str,
        repository: str,
        discussion: int,
        page_size: int | None = None,
    ) -> None:
        super().__init__(client, page_size)
        self.owner = owner
        self.repository = repository
        self.discussion = discussion
        self.discussion_uri = f"repos/{owner}/{repository}/discussions/{discussion}"
        self.base_uri = f"{self.discussion_uri}/comments"

    async def open_stream(
        self, filter: BaseFilter | None = None
    ) -> AsyncIterator[DiscussionComment]:
        response = await self.client.get(self.discussion_uri)

        self.total_count = (response.body or {}).get("comments") or 0

        if not self.total_count:
            return

        async for comment in self.paginate_uri(self.base_uri, filter):
            yield comment
