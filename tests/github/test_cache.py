"""Tests for the response cache."""

from repo_stars.github.cache import ResponseCache, get_response_cache
from repo_stars.schemas.github_api import GitHubRepository


def _repo(stars: int) -> GitHubRepository:
    return GitHubRepository(stargazers_count=stars)


class TestResponseCache:
    """Tests for ResponseCache."""

    def test_get_missing_returns_none(self) -> None:
        assert ResponseCache().get("a/b") is None

    def test_put_then_get(self) -> None:
        cache = ResponseCache()
        value = _repo(10)

        assert cache.put("a/b", value) is value
        assert cache.get("a/b") is value
        assert "a/b" in cache
        assert len(cache) == 1

    def test_first_write_wins(self) -> None:
        """Entries are never overwritten."""
        cache = ResponseCache()
        first = _repo(10)
        cache.put("a/b", first)

        stored = cache.put("a/b", _repo(99))

        assert stored is first
        assert cache.get("a/b") is first

    def test_keys_are_independent(self) -> None:
        cache = ResponseCache()
        cache.put("a/b", _repo(1))
        cache.put("c/d", _repo(2))

        assert cache.get("a/b").stargazers_count == 1
        assert cache.get("c/d").stargazers_count == 2

    def test_clear(self) -> None:
        cache = ResponseCache()
        cache.put("a/b", _repo(1))
        cache.clear()

        assert len(cache) == 0
        assert cache.get("a/b") is None


class TestProcessWideCache:
    """Tests for get_response_cache."""

    def test_singleton(self) -> None:
        assert get_response_cache() is get_response_cache()
