"""Organizations of the authenticated user or of a named user."""

from typing import Any, AsyncIterator, Mapping

from ..client import GitHubClient
from ..pagination import StreamListModel
from ..store import toggle
from ..types import Organization


class OrganizationModel(StreamListModel[Organization]):
    """Streams organization memberships.

    Organization listings are ordered by id, so besides the page number the
    stream carries a ``since`` watermark (the last id seen), which keeps
    paging stable while organizations are being created.
    """

    index_key = "login"
    start_page = 0
    watermark_key = "id"

    def __init__(self, client: GitHubClient, user: str = "", page_size: int | None = None) -> None:
        super().__init__(client, page_size)
        self.user = user
        self.base_uri = f"users/{user}/orgs" if user else "user/orgs"

    def open_stream(self, filter: Mapping[str, Any] | None = None) -> AsyncIterator[Organization]:
        return self.paginate_uri(self.base_uri)

    @toggle("downloading")
    async def get_one(self, login: str) -> Organization:
        """Full organization profile, reusing ``current_one`` when it matches."""
        if self.current_one and self.current_one.get("login") == login:
            return self.current_one

        response = await self.client.get(f"orgs/{login}")
        self.current_one = response.body
        return self.current_one
