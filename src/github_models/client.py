"""GitHub REST/GraphQL transport.

Provides an async httpx-based client for GitHub REST API v3 and the GraphQL
endpoint. The client is a thin transport: it decodes JSON bodies and maps
error statuses to exceptions. There is deliberately no retry, backoff or
rate-limit handling here; failures reach the caller unmodified.

Reference: https://docs.github.com/en/rest
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from .config import GitHubModelsConfig, get_config
from .metrics import github_requests_total

logger = logging.getLogger("github_models.client")


class GitHubClientError(Exception):
    """Raised when a GitHub API request fails.

    Wraps httpx errors and HTTP error statuses for consistent error handling.

    Attributes:
        status: HTTP status code, or None for transport-level failures
    """

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(message)


class NotFoundError(GitHubClientError):
    """Raised for 404 responses (missing repository, path, issue, ...)."""


class GraphQLError(GitHubClientError):
    """Raised when a GraphQL response carries an ``errors`` array."""

    def __init__(self, errors: list[dict[str, Any]]):
        self.errors = errors
        messages = "; ".join(str(e.get("message", e)) for e in errors)
        super().__init__(f"GraphQL error: {messages}", status=200)


@dataclass
class GitHubResponse:
    """Decoded response of a single request."""

    status: int
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)


def build_query(params: Mapping[str, Any] | None) -> dict[str, str]:
    """Convert optional parameters into query-string values.

    ``None`` entries are dropped, booleans become ``true``/``false`` and
    everything else goes through ``str()``.

    Args:
        params: Mapping of parameter names to optional values

    Returns:
        Dict suitable for httpx ``params``
    """
    if not params:
        return {}

    query: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        else:
            query[key] = str(value)
    return query


class GitHubClient:
    """GitHub API client using httpx with optional Bearer token auth.

    Uses one long-lived httpx.AsyncClient with connection pooling. Models
    receive the client through their constructor; a process normally builds
    one client at start-up and shares it.

    Attributes:
        base_url: GitHub API base URL (default: https://api.github.com)
        graphql_url: GraphQL endpoint derived from base_url

    Example:
        >>> async with GitHubClient(token="ghp_token") as client:
        ...     response = await client.get("repos/octocat/hello-world")
        ...     print(response.body["full_name"])
    """

    BASE_URL = "https://api.github.com"

    # Timeout configuration
    CONNECT_TIMEOUT = 5.0  # seconds
    READ_TIMEOUT = 30.0  # seconds
    WRITE_TIMEOUT = 5.0  # seconds
    POOL_TIMEOUT = 5.0  # seconds

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        api_version: str = "2022-11-28",
        user_agent: str = "github-models/0.1",
        connect_timeout: float = CONNECT_TIMEOUT,
        read_timeout: float = READ_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            token: GitHub token; requests are anonymous when empty
            base_url: GitHub API base URL (default: https://api.github.com)
            api_version: Value of the X-GitHub-Api-Version header
            user_agent: User-Agent header value
            connect_timeout: Connect timeout in seconds
            read_timeout: Read timeout in seconds
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.graphql_url = f"{self.base_url}/graphql"

        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": api_version,
            "User-Agent": user_agent,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=httpx.Timeout(
                connect=connect_timeout,
                read=read_timeout,
                write=self.WRITE_TIMEOUT,
                pool=self.POOL_TIMEOUT,
            ),
        )

    @classmethod
    def from_config(cls, config: GitHubModelsConfig | None = None) -> "GitHubClient":
        """Build a client from GitHubModelsConfig (defaults to get_config())."""
        config = config or get_config()
        return cls(
            token=config.token.get_secret_value(),
            base_url=config.base_url,
            api_version=config.api_version,
            user_agent=config.user_agent,
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
        )

    async def __aenter__(self) -> "GitHubClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit -- close httpx client."""
        await self.close()

    async def close(self) -> None:
        """Close the httpx client and release connections."""
        await self._client.aclose()

    # --- Core HTTP Methods ---

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> GitHubResponse:
        """Make a single API request and decode its JSON body.

        Args:
            method: HTTP method (GET, POST, PUT, ...)
            path: API path relative to base_url (e.g. repos/owner/repo/issues)
                or an absolute URL
            body: JSON-serializable request body
            params: Query parameters; None values are omitted

        Returns:
            GitHubResponse with status, decoded body and headers

        Raises:
            NotFoundError: On 404
            GitHubClientError: On any other 4xx/5xx status or transport failure
        """
        url = path if path.startswith(("http://", "https://")) else "/" + path.lstrip("/")

        try:
            response = await self._client.request(
                method,
                url,
                params=build_query(params),
                json=body,
            )
        except httpx.HTTPError as e:
            github_requests_total.labels(method=method, status="error").inc()
            logger.warning(
                "request_failed",
                extra={"method": method, "path": path, "error": str(e)},
            )
            raise GitHubClientError(f"HTTP error: {e}") from e

        github_requests_total.labels(method=method, status=str(response.status_code)).inc()

        if response.status_code >= 400:
            try:
                error_body = response.json() if response.content else {}
            except (ValueError, UnicodeDecodeError):
                error_body = {}
            message = (
                error_body.get("message", response.text)
                if isinstance(error_body, dict)
                else response.text
            )
            logger.info(
                "request_rejected",
                extra={"method": method, "path": path, "status": response.status_code},
            )
            error_class = NotFoundError if response.status_code == 404 else GitHubClientError
            raise error_class(
                f"GitHub API error {response.status_code}: {message}",
                status=response.status_code,
            )

        data = response.json() if response.content else None
        logger.debug(
            "request_completed",
            extra={"method": method, "path": path, "status": response.status_code},
        )
        return GitHubResponse(status=response.status_code, body=data, headers=response.headers)

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> GitHubResponse:
        """GET shortcut."""
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: Any = None) -> GitHubResponse:
        """POST shortcut."""
        return await self.request("POST", path, body=body)

    async def put(self, path: str, body: Any = None) -> GitHubResponse:
        """PUT shortcut."""
        return await self.request("PUT", path, body=body)

    async def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a GraphQL query or mutation.

        Args:
            query: GraphQL document
            variables: Variables referenced by the document

        Returns:
            The ``data`` object of the response

        Raises:
            GraphQLError: When the response contains ``errors``
            GitHubClientError: On HTTP or transport failure
        """
        response = await self.post(
            self.graphql_url, {"query": query, "variables": variables or {}}
        )
        payload = response.body or {}
        if payload.get("errors"):
            raise GraphQLError(payload["errors"])
        return payload.get("data") or {}
