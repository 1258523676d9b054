"""Pydantic schema for project records shown on a project list page."""

from pydantic import BaseModel, ConfigDict, Field


class ProjectRecord(BaseModel):
    """A project card whose popularity is enriched from GitHub.

    Records are owned by the caller. Enrichment mutates only
    ``popularity_score`` and ``icon`` in place.

    Field aliases match the front-end project list format
    (title/desc/github/star/site) so existing JSON loads unchanged.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        str_strip_whitespace=True,
    )

    display_name: str = Field(alias="title", description="Card title")
    icon: str = Field(default="", description="Icon reference or image URL")
    color: str = Field(default="", description="Accent color tag")
    description: str = Field(default="", alias="desc", description="Short description")
    group: str = Field(default="", description="Grouping tag")
    source_url: str = Field(alias="github", description="Repository URL (owner/name path)")
    popularity_score: int = Field(default=0, ge=0, alias="star", description="Star count")
    homepage_url: str = Field(default="", alias="site", description="Project homepage")

    def to_source_dict(self) -> dict[str, object]:
        """Dump using the front-end field names."""
        return self.model_dump(by_alias=True)
