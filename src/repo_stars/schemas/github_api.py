"""Pydantic schemas for parsing GitHub API responses.

Only the fields consumed by enrichment are modelled; everything else
in the payload is ignored.
See: https://docs.github.com/en/rest/repos/repos#get-a-repository
"""

from pydantic import BaseModel, ConfigDict, Field


class GitHubOrganization(BaseModel):
    """Organization object embedded in a repository response."""

    model_config = ConfigDict(extra="ignore")

    login: str | None = Field(default=None, description="Organization login")
    avatar_url: str | None = Field(default=None, description="Organization avatar URL")


class GitHubRepository(BaseModel):
    """GitHub repository object from API.

    Maps to: GET /repos/{owner}/{repo}
    """

    model_config = ConfigDict(extra="ignore")

    full_name: str | None = Field(default=None, description="owner/name")
    stargazers_count: int = Field(ge=0, description="Number of stargazers")
    organization: GitHubOrganization | None = Field(
        default=None, description="Owning organization (absent for user repos)"
    )

    @property
    def avatar_url(self) -> str | None:
        """Organization avatar, if the repository belongs to one."""
        if self.organization is None:
            return None
        return self.organization.avatar_url
