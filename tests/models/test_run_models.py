"""Tests for the envelope-paged WorkflowRunModel and CheckRunModel."""

import pytest

from github_models.models import CheckRunModel, WorkflowRunModel

RUNS = "repos/octo/app/actions/runs"
CHECKS = "repos/octo/app/commits/main/check-runs"


def run(id: int, created_at: str) -> dict:
    return {"id": id, "created_at": created_at}


class TestWorkflowRunModel:
    @pytest.mark.asyncio
    async def test_total_from_envelope(self, github_client, fake_github):
        fake_github.add(
            RUNS, {"total_count": 3, "workflow_runs": [run(1, "2024-01-01T00:00:00Z")]}
        )
        model = WorkflowRunModel(github_client, "octo", "app", page_size=1)

        await model.get_list({"branch": "main"})

        assert model.total_count == 3
        assert model.no_more is False
        params = fake_github.requests_for(RUNS)[0]
        assert params["branch"] == "main"
        assert params["page"] == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("direction", "expected"),
        [("desc", [2, 3, 1]), ("asc", [1, 3, 2])],
    )
    async def test_sorted_by_created_at(self, github_client, fake_github, direction, expected):
        fake_github.add(
            RUNS,
            {
                "total_count": 3,
                "workflow_runs": [
                    run(1, "2024-01-01T00:00:00Z"),
                    run(2, "2024-03-01T00:00:00Z"),
                    run(3, "2024-02-01T00:00:00Z"),
                ],
            },
        )
        model = WorkflowRunModel(github_client, "octo", "app")

        records = await model.get_list({"direction": direction})

        assert [r["id"] for r in records] == expected

    @pytest.mark.asyncio
    async def test_empty_envelope(self, github_client, fake_github):
        fake_github.add(RUNS, {"total_count": 0, "workflow_runs": []})
        model = WorkflowRunModel(github_client, "octo", "app")

        assert await model.get_all() == []
        assert model.no_more is True


class TestCheckRunModel:
    @pytest.mark.asyncio
    async def test_latest_by_default(self, github_client, fake_github):
        fake_github.add(CHECKS, {"total_count": 1, "check_runs": [{"id": 1, "name": "ci"}]})
        model = CheckRunModel(github_client, "octo", "app", "main")

        records = await model.get_all()

        assert records == [{"id": 1, "name": "ci"}]
        assert model.total_count == 1
        assert fake_github.requests_for(CHECKS)[0]["filter"] == "latest"

    @pytest.mark.asyncio
    async def test_check_name_filter(self, github_client, fake_github):
        fake_github.add(CHECKS, {"total_count": 0, "check_runs": []})
        model = CheckRunModel(github_client, "octo", "app", "main")

        await model.get_list({"check_name": "lint", "filter": "all"})

        params = fake_github.requests_for(CHECKS)[0]
        assert params["check_name"] == "lint"
        assert params["filter"] == "all"
