"""Username and profile-URL parsing."""

from __future__ import annotations

import re

from .errors import InvalidUsernameError

_PROFILE_URL = re.compile(r"github\.com/([A-Za-z0-9_-]+)")
_USERNAME = re.compile(r"^[A-Za-z0-9_-]+$")


def extract_username(raw: str) -> str:
    """Return the GitHub login from a plain username or a profile URL.

    ``octocat``, ``https://github.com/octocat/`` and
    ``github.com/octocat/some-repo`` all give ``octocat``. Anything else with
    spaces, slashes or other punctuation is rejected.
    """
    if not isinstance(raw, str):
        raise InvalidUsernameError("A valid GitHub username is required.")

    trimmed = raw.strip().rstrip("/")
    match = _PROFILE_URL.search(trimmed)
    if match:
        return match.group(1)
    if _USERNAME.match(trimmed):
        return trimmed
    raise InvalidUsernameError("Please enter a valid GitHub username or profile URL.")
