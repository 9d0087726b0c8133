"""Pydantic export schema for extracted page metadata."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class MetadataSchema(BaseModel):
    """Serializable snapshot of a metadata record.

    Fields absent from the page are ``None``; collection fields are always
    lists.
    """

    # Document
    title: str | None = None
    author: str | None = None
    charset: str | None = None
    keywords: list[str] = Field(default_factory=list)

    # Description chain
    description: str | None = None
    meta_description: str | None = None
    secondary_description: str | None = None

    # Media, links & feeds
    image: str | None = None
    images: list[str] = Field(default_factory=list)
    links: list[str] = Field(default_factory=list)
    feeds: list[str] = Field(default_factory=list)

    # Open Graph
    og_title: str | None = None
    og_description: str | None = None
    og_type: str | None = None
    og_updated_time: str | None = None
    og_locale: str | None = None

    @field_validator("keywords", "images", "links", "feeds", mode="before")
    @classmethod
    def none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v
