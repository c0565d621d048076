"""Repositories of an organization or of the authenticated user.

Besides plain listing, a repository can be decorated with relations, side
data that needs its own requests:

- ``contributors``: every contributor, most contributions first
- ``issues``: every open issue (pull requests excluded)
- ``languages``: the primary languages, see ``primary_languages()``

Relations requested for a page are resolved for every repository of the
page concurrently.
"""

import asyncio
import logging
from typing import Any, Iterable

from ..client import GitHubClient, NotFoundError
from ..relations import RelationResolver, primary_languages
from ..store import ListModel, PageData, toggle
from ..types import Content, Contributor, Issue, Repository, RepositoryFilter
from .content import encode_content, make_list
from .contributor import ContributorModel
from .issue import IssueModel
from .organization import OrganizationModel

logger = logging.getLogger("github_models.models.repository")


class RepositoryModel(ListModel[Repository]):
    """Pages through repositories and loads their relations.

    Filter keys:
        relation: relation names to merge into every listed repository

    Attributes:
        owner: Organization login, or "" for the authenticated user's repositories
        relations: RelationResolver with the memoized relation lookups
        organization_store: Used to look up an organization's repository total
    """

    index_key = "full_name"

    def __init__(self, client: GitHubClient, owner: str = "", page_size: int | None = None) -> None:
        super().__init__(client, page_size)
        self.owner = owner
        self.base_uri = f"orgs/{owner}/repos" if owner else "user/repos"
        self.organization_store = OrganizationModel(client)
        self.relations = RelationResolver(
            {
                "contributors": self.load_contributors,
                "issues": self.load_issues,
                "languages": self.load_languages,
            }
        )

    # --- Relations ---

    async def load_contributors(self, uri: str) -> list[Contributor]:
        owner, repository = uri.split("/", 1)

        contributors = await ContributorModel(
            self.client, owner, repository, self.page_size
        ).get_all()

        return sorted(contributors, key=lambda c: c.get("contributions", 0), reverse=True)

    async def load_issues(self, uri: str) -> list[Issue]:
        owner, repository = uri.split("/", 1)

        return await IssueModel(self.client, owner, repository, self.page_size).get_all(
            {"state": "open"}
        )

    async def load_languages(self, uri: str) -> list[str]:
        response = await self.client.get(f"repos/{uri}/languages")

        return primary_languages(response.body or {})

    async def get_one_relation(self, uri: str, relation: Iterable[str] = ()) -> dict[str, Any]:
        """Resolve the requested relations of ``owner/repo`` concurrently.

        Fails as a whole when any relation fails.
        """
        return await self.relations.resolve_many(uri, relation)

    # --- Records ---

    @toggle("downloading")
    async def get_one(self, uri: str, relation: Iterable[str] = ()) -> Repository:
        """Load ``owner/repo`` with the requested relations merged in."""
        response = await self.client.get(f"repos/{uri}")

        self.current_one = {**response.body, **(await self.get_one_relation(uri, relation))}
        return self.current_one

    async def _count_repositories(self) -> int:
        if self.owner:
            organization = await self.organization_store.get_one(self.owner)
            return organization.get("public_repos", 0)

        response = await self.client.get("user")
        user = response.body or {}
        return user.get("public_repos", 0) + (user.get("total_private_repos") or 0)

    async def load_page(
        self, page: int, per_page: int, filter: RepositoryFilter
    ) -> PageData[Repository]:
        is_user = not self.owner
        relation = filter.get("relation") or []

        response = await self.client.get(
            self.base_uri,
            params={
                "type": "owner" if is_user else "public",
                "sort": "pushed",
                "page": page,
                "per_page": per_page,
            },
        )
        repositories = response.body or []

        async def decorate(repository: Repository) -> Repository:
            return {
                **repository,
                **(await self.get_one_relation(repository["full_name"], relation)),
            }

        records = list(await asyncio.gather(*(decorate(item) for item in repositories)))

        # The total needs an extra request, made once per loaded collection
        total_count = self.total_count
        if total_count is None:
            total_count = await self._count_repositories()

        return PageData(records=records, total_count=total_count)

    # --- Contents ---

    def _content_uri(self, repository: str | None, path: str) -> str:
        repository = repository or self.current_one.get("name")
        owner = self.owner or (self.current_one.get("owner") or {}).get("login")
        if not repository or not owner:
            raise ValueError("Repository owner and name are required")

        return f"repos/{owner}/{repository}/contents/{path}"

    @toggle("downloading")
    async def get_contents(self, repository: str | None = None, path: str = "") -> list[Content]:
        """Entries at ``path`` of a repository (the current one by default)."""
        response = await self.client.get(self._content_uri(repository, path))
        return make_list(response.body)

    @toggle("uploading")
    async def update_content(
        self,
        path: str,
        content: str | bytes,
        message: str | None = None,
        repository: str | None = None,
    ) -> Content:
        """Create or update a file in a repository (the current one by default)."""
        try:
            existing = await self.get_contents(repository, path)
            sha = existing[0].get("sha") if existing else None
        except NotFoundError:
            sha = None

        payload: dict[str, Any] = {
            "message": message or f"[update] {path}",
            "content": encode_content(content),
        }
        if sha:
            payload["sha"] = sha

        response = await self.client.put(self._content_uri(repository, path), payload)
        return response.body["content"]

    # --- Aggregates ---

    async def get_all_contributors(self) -> list[Contributor]:
        """Contributors across all active repositories, merged by login.

        Archived and forked repositories are skipped, only ``User`` accounts
        are kept, and contributions of the same login are summed.
        """
        repositories = await self.get_all({"relation": ["contributors"]})

        merged: dict[str, Contributor] = {}
        for repository in repositories:
            if repository.get("archived") or repository.get("fork"):
                continue
            for contributor in repository.get("contributors") or []:
                if contributor.get("type") != "User":
                    continue
                login = contributor["login"]
                if login in merged:
                    merged[login]["contributions"] += contributor.get("contributions", 0)
                else:
                    merged[login] = {**contributor, "contributions": contributor.get("contributions", 0)}

        return sorted(merged.values(), key=lambda c: c["contributions"], reverse=True)
