"""Repo Stars - staggered, cancellable popularity enrichment for project lists."""

__version__ = "0.1.0"

from repo_stars.enrichment import PopularityEnricher, enrich_with_popularity  # noqa: E402

__all__ = [
    "PopularityEnricher",
    "__version__",
    "enrich_with_popularity",
]
