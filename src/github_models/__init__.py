"""github-models - typed client-side models for the GitHub REST and GraphQL APIs.

Provides:
- An httpx transport (GitHubClient) with typed errors
- List stores with bulk paging and incremental streams
- Depth-first traversal of repository contents
- Concurrent, memoized relation loading for repositories

Python Version: 3.10+ required
"""

# Logging Configuration - configure before other imports
from .logging_config import StructuredFormatter, configure_logging

configure_logging()

from .client import (  # noqa: E402
    GitHubClient,
    GitHubClientError,
    GitHubResponse,
    GraphQLError,
    NotFoundError,
    build_query,
)
from .config import GitHubModelsConfig, get_config, reset_config  # noqa: E402
from .models import (  # noqa: E402
    CheckRunModel,
    ContentModel,
    ContributorModel,
    DiscussionCommentModel,
    DiscussionModel,
    IssueCommentModel,
    IssueModel,
    OrganizationModel,
    PullRequestModel,
    RepositoryModel,
    UserModel,
    WorkflowRunModel,
)
from .pagination import StreamListModel, StreamPager, StreamSource, paginate  # noqa: E402
from .relations import RelationResolver, primary_languages  # noqa: E402
from .store import BaseModel, ListModel, PageData, toggle  # noqa: E402
from .tree import TreeTraverser, sanitize_path_segment  # noqa: E402

__version__ = "0.1.0"

__all__ = [
    "BaseModel",
    "CheckRunModel",
    "ContentModel",
    "ContributorModel",
    "DiscussionCommentModel",
    "DiscussionModel",
    "GitHubClient",
    "GitHubClientError",
    "GitHubModelsConfig",
    "GitHubResponse",
    "GraphQLError",
    "IssueCommentModel",
    "IssueModel",
    "ListModel",
    "NotFoundError",
    "OrganizationModel",
    "PageData",
    "PullRequestModel",
    "RelationResolver",
    "RepositoryModel",
    "StreamListModel",
    "StreamPager",
    "StreamSource",
    "StructuredFormatter",
    "TreeTraverser",
    "UserModel",
    "WorkflowRunModel",
    "build_query",
    "configure_logging",
    "get_config",
    "paginate",
    "primary_languages",
    "reset_config",
    "sanitize_path_segment",
    "toggle",
]
