"""Pydantic models for normalized news feed items."""

from pydantic import BaseModel, ConfigDict, Field


class Headline(BaseModel):
    """A single normalized item from the upstream RSS feed.

    ``published_at`` is kept as the raw feed text; it is serialized as
    ``publishedAt`` to match the JSON contract of ``/api/headlines``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    link: str = ""
    published_at: str = Field(default="", alias="publishedAt")
    description: str = ""
