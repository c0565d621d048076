"""Repository contributors.

See https://docs.github.com/en/rest/repos/repos#list-repository-contributors
"""

from typing import AsyncIterator

from ..client import GitHubClient
from ..pagination import StreamListModel
from ..types import Contributor, ContributorFilter


class ContributorModel(StreamListModel[Contributor]):
    """Streams the contributors of one repository.

    Filter keys: ``affiliation``, ``permission``.
    """

    index_key = "login"

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
        self.base_uri = f"repos/{owner}/{repository}/contributors"

    def open_stream(self, filter: ContributorFilter | None = None) -> AsyncIterator[Contributor]:
        filter = filter or {}
        return self.paginate_uri(
            self.base_uri,
            {"affiliation": filter.get("affiliation"), "permission": filter.get("permission")},
        )
