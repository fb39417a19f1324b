"""Exceptions raised by the GitHub REST client."""

from __future__ import annotations


class GithubError(Exception):
    """Base exception for GitHub API failures."""


class GithubConfigurationError(GithubError):
    """Raised when required configuration is missing."""


class GithubRequestError(GithubError):
    """Raised when the request never produced a response (DNS, timeout, reset)."""


class GithubApiError(GithubError):
    """Raised for non-2xx responses."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GithubRateLimitError(GithubApiError):
    """Raised when the upstream service enforces a rate limit."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 403,
        retry_after: int | float | None = None,
    ):
        super().__init__(message, status_code=status_code)
        self.retry_after = retry_after


class GithubResponseError(GithubError):
    """Raised when a response body cannot be decoded or has an unexpected shape."""
