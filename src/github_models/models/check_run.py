"""Check runs of a commit, branch or tag.

See https://docs.github.com/en/rest/checks/runs#list-check-runs-for-a-git-reference
"""

from ..client import GitHubClient
from ..store import ListModel, PageData
from ..types import CheckRun, CheckRunFilter


class CheckRunModel(ListModel[CheckRun]):
    """Pages through the check runs of one git reference.

    Filter keys: ``check_name``, ``filter`` ("latest" by default, or "all").
    """

    def __init__(
        self,
        client: GitHubClient,
        owner: str,
        repository: str,
        ref: str,
        page_size: int | None = None,
    ) -> None:
        super().__init__(client, page_size)
        self.owner = owner
        self.repository = repository
        self.ref = ref
        self.base_uri = f"repos/{owner}/{repository}/commits/{ref}/check-runs"

    async def load_page(
        self, page: int, per_page: int, filter: CheckRunFilter
    ) -> PageData[CheckRun]:
        response = await self.client.get(
            self.base_uri,
            params={
                "check_name": filter.get("check_name"),
                "filter": filter.get("filter", "latest"),
                "per_page": per_page,
                "page": page,
            },
        )
        body = response.body or {}

        return PageData(records=body.get("check_runs", []), total_count=body.get("total_count"))
