"""Repository issues and issue comments.

GitHub's issue listing also returns pull requests (flagged by a
``pull_request`` field). ``IssueModel`` drops them after each page is
fetched, so ``total_count`` counts true issues only while paging still
follows the raw page length.

See https://docs.github.com/en/rest/issues/issues#list-repository-issues
"""

import logging
from typing import Any, AsyncIterator, Mapping

from ..client import GitHubClient, NotFoundError
from ..pagination import StreamListModel
from ..store import toggle
from ..types import BaseFilter, Issue, IssueComment, IssueFilter, LinkedPullRequest

logger = logging.getLogger("github_models.models.issue")

DEFAULT_BOT_LOGIN = "copilot-swe-agent"

CLOSING_PULL_REQUESTS_QUERY = """
query ($owner: String!, $name: String!, $number: Int!) {
    repository(owner: $owner, name: $name) {
        issue(number: $number) {
            closedByPullRequestsReferences(first: 10) {
                nodes {
                    url
                    number
                    headRefName
                    merged
                }
            }
        }
    }
}"""

ASSIGNABLE_ACTORS_QUERY = """
query ($owner: String!, $name: String!, $number: Int!) {
    repository(owner: $owner, name: $name) {
        issue(number: $number) {
            id
            assignees(first: 100) {
                nodes {
                    id
                }
            }
        }
        suggestedActors(capabilities: [CAN_BE_ASSIGNED], first: 100) {
            nodes {
                login
                __typename
                ... on Bot {
                    id
                }
                ... on User {
                    id
                }
            }
        }
    }
}"""

REPLACE_ACTORS_MUTATION = """
mutation ($assignableId: ID!, $actorIds: [ID!]!) {
    replaceActorsForAssignable(input: {assignableId: $assignableId, actorIds: $actorIds}) {
        assignable {
            ... on Issue {
                id
                assignees(first: 100) {
                    nodes {
                        login
                    }
                }
            }
        }
    }
}"""


def is_true_issue(issue: Mapping[str, Any]) -> bool:
    """False for pull requests listed by the issues endpoint."""
    return not issue.get("pull_request")


class IssueModel(StreamListModel[Issue]):
    """Streams, creates and comments on the issues of one repository.

    Filter keys (``state``, ``sort``, ``direction``, ``labels``, ``since``,
    ...) are passed through as query parameters.
    """

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
        self.base_uri = f"repos/{owner}/{repository}/issues"

    def open_stream(self, filter: IssueFilter | None = None) -> AsyncIterator[Issue]:
        return self.paginate_uri(self.base_uri, filter, keep=is_true_issue)

    @toggle("uploading")
    async def create_one(
        self,
        title: str,
        body: str | None = None,
        assignees: list[str] | None = None,
    ) -> Issue:
        """Create a new issue.

        See https://docs.github.com/en/rest/issues/issues#create-an-issue
        """
        payload: dict[str, Any] = {"title": title}
        if body is not None:
            payload["body"] = body
        if assignees is not None:
            payload["assignees"] = assignees

        response = await self.client.post(self.base_uri, payload)
        self.current_one = response.body
        return response.body

    @toggle("uploading")
    async def create_comment(self, issue_number: int, body: str) -> IssueComment:
        """Create a comment on an issue.

        See https://docs.github.com/en/rest/issues/comments#create-an-issue-comment
        """
        response = await self.client.post(
            f"{self.base_uri}/{issue_number}/comments", {"body": body}
        )
        return response.body

    async def get_pull_requests(self, issue_number: int) -> list[LinkedPullRequest]:
        """Pull requests that will close (or closed) an issue, via GraphQL.

        See https://docs.github.com/en/graphql/reference/objects#pullrequest
        """
        data = await self.client.graphql(
            CLOSING_PULL_REQUESTS_QUERY,
            {"owner": self.owner, "name": self.repository, "number": issue_number},
        )
        issue = (data.get("repository") or {}).get("issue")
        if issue is None:
            raise NotFoundError(f"Issue #{issue_number} not found", status=404)

        return issue["closedByPullRequestsReferences"]["nodes"]

    @toggle("uploading")
    async def assign_bot(
        self, issue_number: int, bot_login: str = DEFAULT_BOT_LOGIN
    ) -> list[str]:
        """Add an assignable bot to an issue's assignees through GraphQL.

        Bots such as the Copilot coding agent can only be assigned through
        the ``replaceActorsForAssignable`` mutation, which needs node IDs:
        the issue ID and the IDs of every actor to keep assigned.

        Args:
            issue_number: Issue to assign
            bot_login: Login of the bot among the repository's suggested actors

        Returns:
            Logins assigned after the mutation

        Raises:
            NotFoundError: If the issue or the bot cannot be found
        """
        variables = {"owner": self.owner, "name": self.repository, "number": issue_number}
        data = await self.client.graphql(ASSIGNABLE_ACTORS_QUERY, variables)

        repository = data.get("repository") or {}
        issue = repository.get("issue")
        if issue is None:
            raise NotFoundError(f"Issue #{issue_number} not found", status=404)

        actors = repository.get("suggestedActors", {}).get("nodes", [])
        bot = next((actor for actor in actors if actor.get("login") == bot_login), None)
        if bot is None:
            raise NotFoundError(
                f"{bot_login} is not assignable in {self.owner}/{self.repository}",
                status=404,
            )

        actor_ids = [node["id"] for node in issue["assignees"]["nodes"]]
        if bot["id"] not in actor_ids:
            actor_ids.append(bot["id"])

        result = await self.client.graphql(
            REPLACE_ACTORS_MUTATION,
            {"assignableId": issue["id"], "actorIds": actor_ids},
        )
        assignable = result["replaceActorsForAssignable"]["assignable"]
        logins = [node["login"] for node in assignable["assignees"]["nodes"]]

        logger.info(
            "bot_assigned",
            extra={"issue": issue_number, "bot": bot_login, "assignees": logins},
        )
        return logins


class IssueCommentModel(StreamListModel[IssueComment]):
    """Streams the comments of one issue."""

    def __init__(
        self,
        client: GitHubClient,
        owner: str,
        repository: str,
        issue: int,
        page_size: int | None = None,
    ) -> None:
        super().__init__(client, page_size)
        self.owner = owner
        self.repository = repository
        self.issue = issue
        self.base_uri = f"repos/{owner}/{repository}/issues/{issue}/comments"

    def open_stream(self, filter: BaseFilter | None = None) -> AsyncIterator[IssueComment]:
        return self.paginate_uri(self.base_uri, filter)
