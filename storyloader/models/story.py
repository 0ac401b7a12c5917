from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TranslatedSlug(BaseModel):
    lang: str
    name: Optional[str] = None
    path: str


class RawStory(BaseModel):
    """One story as returned by the ``cdn/stories`` endpoint.

    Only the fields the loader maps are declared; anything else the API sends
    is ignored.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    uuid: str
    full_slug: str
    content: Any
    name: str
    created_at: str
    published_at: Optional[str] = None
    editable: Optional[str] = Field(default=None, alias="_editable")
    is_folder: Optional[bool] = None
    lang: Optional[str] = None
    translated_slugs: Optional[List[TranslatedSlug]] = None


class StoryRecord(BaseModel):
    """Normalized story handed to the static-site build."""

    model_config = ConfigDict(populate_by_name=True, serialize_by_alias=True)

    id: str
    slug: str
    content: Any
    name: str
    created_at: str
    published_at: Optional[str] = None
    editable: Optional[str] = Field(default=None, alias="_editable")
    is_folder: Optional[bool] = None
    full_slug: str  # same as slug, kept for older consumers
    language: Optional[str] = None
    translated_slugs: Optional[List[TranslatedSlug]] = None


class LoadResult(BaseModel):
    """Outcome of a full load, telling an empty listing apart from a failure."""

    stories: List[StoryRecord] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
