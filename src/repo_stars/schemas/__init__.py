"""Pydantic schemas for Repo Stars.

This module provides input validation and upstream response models.
"""

from .github_api import GitHubOrganization, GitHubRepository
from .project import ProjectRecord

__all__ = [
    # GitHub API
    "GitHubOrganization",
    "GitHubRepository",
    # Project list
    "ProjectRecord",
]
