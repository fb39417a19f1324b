from .exceptions import (
    GithubApiError,
    GithubConfigurationError,
    GithubError,
    GithubRateLimitError,
    GithubRequestError,
    GithubResponseError,
)
from .github_client import GitHubClient

__all__ = [
    "GitHubClient",
    "GithubError",
    "GithubApiError",
    "GithubConfigurationError",
    "GithubRateLimitError",
    "GithubRequestError",
    "GithubResponseError",
]
