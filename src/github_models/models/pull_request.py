"""Repository pull requests."""

from typing import AsyncIterator

from ..client import GitHubClient
from ..pagination import StreamListModel
from ..types import PullRequest, PullRequestFilter


class PullRequestModel(StreamListModel[PullRequest]):
    """Streams pull requests; filter keys are passed through as query parameters."""

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
        self.base_uri = f"repos/{owner}/{repository}/pulls"

    def open_stream(self, filter: PullRequestFilter | None = None) -> AsyncIterator[PullRequest]:
        return self.paginate_uri(self.base_uri, filter)
