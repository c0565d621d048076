"""The authenticated user and the namespaces it can act in."""

import logging

from ..client import GitHubClient
from ..store import BaseModel, toggle
from ..types import User
from .organization import OrganizationModel

logger = logging.getLogger("github_models.models.user")


class UserModel(BaseModel):
    """Session holder for the authenticated user.

    Attributes:
        session: The authenticated user, once loaded
    """

    def __init__(self, client: GitHubClient) -> None:
        super().__init__(client)
        self.session: User | None = None
        self._organization_store: OrganizationModel | None = None

    @property
    def organization_store(self) -> OrganizationModel:
        """Organizations of the session user (of the token owner before login)."""
        login = self.session.get("login", "") if self.session else ""

        if self._organization_store is None or self._organization_store.user != login:
            self._organization_store = OrganizationModel(self.client, login)
        return self._organization_store

    @property
    def namespaces(self) -> list[dict]:
        """The user followed by every loaded organization."""
        return [
            namespace
            for namespace in [self.session, *self.organization_store.all_items]
            if namespace
        ]

    @toggle("downloading")
    async def get_session(self) -> User:
        """Load the authenticated user and its organizations once."""
        if self.session:
            return self.session

        response = await self.client.get("user")
        self.session = response.body

        await self.organization_store.get_all()

        logger.info(
            "session_loaded",
            extra={
                "login": self.session.get("login"),
                "organizations": len(self.organization_store.all_items),
            },
        )
        return self.session
