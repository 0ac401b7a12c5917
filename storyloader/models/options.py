import copy
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Version = Literal["published", "draft"]
Region = Literal["us", "eu"]
ResolveLinks = Literal["url", "story", "0", "1", "2"]


class LoaderOptions(BaseModel):
    """Static configuration for one Storyblok listing loader.

    The token is deliberately not checked here: a missing or wrong token
    surfaces as an authentication error when the first page is requested.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str
    version: Version = "published"
    region: Region = "us"
    language: Optional[str] = None
    content_type: Optional[str] = None
    sort_by: Optional[str] = None
    """``field[:asc|desc]``, e.g. ``"content.published_date:desc"``."""
    filter_query: Optional[Dict[str, Any]] = None
    resolve_relations: Optional[List[str]] = None
    resolve_links: Optional[ResolveLinks] = None
    max_pages: Optional[int] = Field(
        default=None,
        ge=1,
        description="Abort after this many pages (unbounded when unset).",
    )

    @field_validator("filter_query", "resolve_relations")
    @classmethod
    def _own_copy(cls, value):
        # Later changes to the caller's dict or list must not reach the loader.
        return copy.deepcopy(value)
