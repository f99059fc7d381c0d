"""Typed error hierarchy.

User-facing failures come from the GitHub data fetch and fall into exactly
three kinds: not found, rate limited and internal error. Bad input to the
pure engine is a programming error and is kept outside that hierarchy.
"""

from __future__ import annotations

from typing import Any, Optional

DEFAULT_RETRY_AFTER_SECONDS = 60


class ReadinessError(Exception):
    """Base exception for failures reported to clients."""

    kind = "internal_error"
    status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "kind": self.kind, "status": self.status}


class ProfileNotFoundError(ReadinessError):
    """Raised when GitHub has no user with the requested login."""

    kind = "not_found"
    status = 404

    def __init__(self, username: str):
        super().__init__(f'GitHub user "{username}" not found.')
        self.username = username


class RateLimitedError(ReadinessError):
    """Raised when the GitHub API quota is exhausted."""

    kind = "rate_limited"
    status = 429

    def __init__(self, retry_after: Optional[int] = None):
        super().__init__(
            "GitHub API rate limit exceeded. Please try again later, "
            "or set GITHUB_TOKEN for 5,000 requests/hour."
        )
        self.retry_after = retry_after if retry_after is not None else DEFAULT_RETRY_AFTER_SECONDS

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["retry_after"] = self.retry_after
        return payload


class UpstreamError(ReadinessError):
    """Raised for any other GitHub failure while fetching required data."""

    def __init__(self, detail: str = ""):
        super().__init__("Internal server error during analysis.")
        self.detail = detail


class InvalidUsernameError(ValueError):
    """Raised when the input is neither a GitHub username nor a profile URL."""

    status = 400


class InvalidBundleError(TypeError):
    """Raised when a profile bundle does not have the expected structure."""
