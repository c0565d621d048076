"""GitHub Actions workflow runs.

See https://docs.github.com/en/rest/actions/workflow-runs#list-workflow-runs-for-a-repository
"""

from datetime import datetime
from typing import Any, Mapping

from ..client import GitHubClient
from ..store import ListModel, PageData
from ..types import WorkflowRun, WorkflowRunFilter


def _created_at(run: Mapping[str, Any]) -> datetime:
    return datetime.fromisoformat(run["created_at"].replace("Z", "+00:00"))


class WorkflowRunModel(ListModel[WorkflowRun]):
    """Pages through workflow runs; totals come from the response envelope.

    Filter keys: ``branch``, ``actor``, ``status``, ``event`` are sent to
    GitHub; ``direction`` ("asc"/"desc") re-sorts each page by ``created_at``.
    """

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
        self.base_uri = f"repos/{owner}/{repository}/actions/runs"

    async def load_page(
        self, page: int, per_page: int, filter: WorkflowRunFilter
    ) -> PageData[WorkflowRun]:
        response = await self.client.get(
            self.base_uri,
            params={
                "branch": filter.get("branch"),
                "actor": filter.get("actor"),
                "status": filter.get("status"),
                "event": filter.get("event"),
                "per_page": per_page,
                "page": page,
            },
        )
        body = response.body or {}
        runs = body.get("workflow_runs", [])

        direction = filter.get("direction")
        if direction:
            runs.sort(key=_created_at, reverse=direction != "asc")

        return PageData(records=runs, total_count=body.get("total_count"))
