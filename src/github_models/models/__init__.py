"""Resource models, one per GitHub collection."""

from .check_run import CheckRunModel
from .content import ContentModel
from .contributor import ContributorModel
from .discussion import DiscussionCommentModel, DiscussionModel
from .issue import IssueCommentModel, IssueModel
from .organization import OrganizationModel
from .pull_request import PullRequestModel
from .repository import RepositoryModel
from .user import UserModel
from .workflow_run import WorkflowRunModel

__all__ = [
    "CheckRunModel",
    "ContentModel",
    "ContributorModel",
    "DiscussionCommentModel",
    "DiscussionModel",
    "IssueCommentModel",
    "IssueModel",
    "OrganizationModel",
    "PullRequestModel",
    "RepositoryModel",
    "UserModel",
    "WorkflowRunModel",
]
