"""Repository identity extraction from URL-like strings."""

from __future__ import annotations

import re
from typing import NamedTuple

from .exceptions import MalformedIdentityError

# host, then the first two path components; trailing segments are ignored
_IDENTITY_RE = re.compile(
    r"(?:^|[/@.])github\.com[/:]+(?P<owner>[^/\s?#:]+)/(?P<name>[^/\s?#]+)",
    re.IGNORECASE,
)


class RepoIdentity(NamedTuple):
    """Two-part repository identity used as cache key and API path."""

    owner: str
    name: str

    @property
    def key(self) -> str:
        """Cache key in owner/name form."""
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.key


def parse_identity(url: str) -> RepoIdentity:
    """Extract (owner, name) from a GitHub URL.

    Accepts https/http/schemeless URLs and the ``git@github.com:owner/name``
    form. A ``.git`` suffix is dropped; query strings, fragments and
    deeper path segments are ignored.

    Args:
        url: URL-like string, e.g. "https://github.com/vuejs/core/tree/main"

    Returns:
        RepoIdentity for the repository

    Raises:
        MalformedIdentityError: If no github.com/owner/name pattern is present
    """
    match = _IDENTITY_RE.search(url.strip())
    if match is None:
        raise MalformedIdentityError(url)

    owner = match.group("owner")
    name = match.group("name")
    if name.lower().endswith(".git"):
        name = name[: -len(".git")]
    if not owner or not name:
        raise MalformedIdentityError(url)

    return RepoIdentity(owner=owner, name=name)
