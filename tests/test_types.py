"""Filter types declared on the model entry points."""

from typing import get_type_hints

import pytest

from github_models.models import (
    CheckRunModel,
    ContentModel,
    ContributorModel,
    DiscussionCommentModel,
    DiscussionModel,
    IssueCommentModel,
    IssueModel,
    PullRequestModel,
    RepositoryModel,
    WorkflowRunModel,
)
from github_models.types import (
    BaseFilter,
    CheckRunFilter,
    ContentFilter,
    ContributorFilter,
    IssueFilter,
    PullRequestFilter,
    RepositoryFilter,
    WorkflowRunFilter,
)


@pytest.mark.parametrize(
    "method,expected",
    [
        (ContributorModel.open_stream, ContributorFilter | None),
        (IssueModel.open_stream, IssueFilter | None),
        (IssueCommentModel.open_stream, BaseFilter | None),
        (PullRequestModel.open_stream, PullRequestFilter | None),
        (DiscussionModel.open_stream, BaseFilter | None),
        (DiscussionCommentModel.open_stream, BaseFilter | None),
        (ContentModel.open_stream, ContentFilter | None),
        (RepositoryModel.load_page, RepositoryFilter),
        (WorkflowRunModel.load_page, WorkflowRunFilter),
        (CheckRunModel.load_page, CheckRunFilter),
    ],
)
def test_filter_annotations(method, expected):
    assert get_type_hints(method)["filter"] == expected


def test_workflow_run_filter_keys():
    assert set(WorkflowRunFilter.__annotations__) == {
        "branch",
        "actor",
        "status",
        "event",
        "direction",
    }
