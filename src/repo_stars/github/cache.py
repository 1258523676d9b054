"""Process-wide response cache keyed by repository identity.

No eviction, no TTL and no size bound: a project list is small and a
process lifetime is one session. Entries are never overwritten, so a
failed or repeated fetch cannot replace data already served.

Not thread-safe. All access happens on one event loop.
"""

from __future__ import annotations

from functools import lru_cache

from repo_stars.schemas.github_api import GitHubRepository


class ResponseCache:
    """Mapping from identity key ("owner/name") to the fetched repository."""

    def __init__(self) -> None:
        self._entries: dict[str, GitHubRepository] = {}

    def get(self, key: str) -> GitHubRepository | None:
        """Return the cached response for key, or None."""
        return self._entries.get(key)

    def put(self, key: str, value: GitHubRepository) -> GitHubRepository:
        """Store value for key unless already present.

        Returns:
            The value now held for key (the earlier one wins)
        """
        return self._entries.setdefault(key, value)

    def clear(self) -> None:
        """Drop every entry (primarily for testing)."""
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@lru_cache
def get_response_cache() -> ResponseCache:
    """Get the process-wide cache instance."""
    return ResponseCache()
