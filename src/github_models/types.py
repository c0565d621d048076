"""Record and filter types for GitHub resources.

Records are the decoded JSON objects GitHub returns; only the fields the
models read are declared, everything else passes through untouched.
"""

from typing import Any, Literal, TypedDict

__all__ = [
    "BaseFilter",
    "CheckRun",
    "CheckRunFilter",
    "Content",
    "ContentFilter",
    "Contributor",
    "ContributorFilter",
    "Discussion",
    "DiscussionComment",
    "Issue",
    "IssueComment",
    "IssueFilter",
    "LinkedPullRequest",
    "Organization",
    "PullRequest",
    "PullRequestFilter",
    "Repository",
    "RepositoryFilter",
    "User",
    "WorkflowRun",
    "WorkflowRunFilter",
]

Record = dict[str, Any]

Direction = Literal["asc", "desc"]


class BaseFilter(TypedDict, total=False):
    """Query parameters shared by most list endpoints."""

    state: Literal["open", "closed", "all"]
    sort: str
    direction: Direction


# --- Records ---


class Contributor(TypedDict, total=False):
    id: int
    login: str
    type: str
    contributions: int


class Issue(TypedDict, total=False):
    id: int
    number: int
    title: str
    body: str | None
    state: str
    assignees: list[dict[str, Any]]
    pull_request: dict[str, Any]  # present only when the "issue" is a PR


class IssueComment(TypedDict, total=False):
    id: int
    body: str
    user: dict[str, Any]


class PullRequest(TypedDict, total=False):
    id: int
    number: int
    url: str
    head: dict[str, Any]
    merged: bool


class LinkedPullRequest(TypedDict, total=False):
    url: str
    number: int
    merged: bool
    headRefName: str


class Discussion(TypedDict, total=False):
    id: int
    number: int
    title: str
    comments: int


class DiscussionComment(TypedDict, total=False):
    id: int
    body: str


class Organization(TypedDict, total=False):
    id: int
    login: str
    public_repos: int


class User(TypedDict, total=False):
    id: int
    login: str
    type: str
    public_repos: int
    total_private_repos: int


class Repository(TypedDict, total=False):
    id: int
    name: str
    full_name: str
    fork: bool
    archived: bool
    contributors: list[Contributor]
    issues: list[Issue]
    languages: list[str]


class Content(TypedDict, total=False):
    name: str
    path: str
    type: Literal["file", "dir", "symlink", "submodule"]
    sha: str
    size: int
    content: str
    parent_path: str
    full_path: str


class WorkflowRun(TypedDict, total=False):
    id: int
    created_at: str
    head_branch: str


class CheckRun(TypedDict, total=False):
    id: int
    name: str
    status: str
    conclusion: str | None


# --- Filters ---


class ContributorFilter(TypedDict, total=False):
    affiliation: Literal["outside", "direct", "all"]
    permission: Literal["pull", "triage", "push", "maintain", "admin"]


class IssueFilter(BaseFilter, total=False):
    # sort: created, updated, comments
    labels: str
    assignee: str


class PullRequestFilter(BaseFilter, total=False):
    # sort: created, updated, popularity, long-running
    head: str
    base: str


class ContentFilter(TypedDict, total=False):
    path: str
    name: str  # regular expression matched against entry names


class RepositoryFilter(TypedDict, total=False):
    relation: list[Literal["contributors", "issues", "languages"]]


class WorkflowRunFilter(TypedDict, total=False):
    branch: str
    actor: str
    status: str
    event: str
    direction: Direction  # re-sorts each page by created_at


class CheckRunFilter(TypedDict, total=False):
    check_name: str
    filter: Literal["latest", "all"]
