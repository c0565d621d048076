"""
Prometheus metrics definitions for github-models.

Counters for API traffic issued by the transport and for records handed
out by streaming list models. Naming: snake_case, github_models_ prefix.
"""

from prometheus_client import Counter

github_requests_total = Counter(
    "github_models_requests_total",
    "Total GitHub API requests issued",
    ["method", "status"],
    # status: HTTP status code, or "error" for transport failures
)

records_streamed_total = Counter(
    "github_models_records_streamed_total",
    "Records yielded by completed or partial list streams",
    ["resource"],
    # resource: model class name (IssueModel, ContentModel, ...)
)
