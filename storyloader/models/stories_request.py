from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from storyloader.models.options import Region, ResolveLinks, Version


class StoriesRequest(BaseModel):
    access_token: Optional[str] = None
    """Falls back to ``STORYBLOK_ACCESS_TOKEN`` when omitted."""
    version: Optional[Version] = None
    region: Optional[Region] = None
    language: Optional[str] = None
    content_type: Optional[str] = None
    sort_by: Optional[str] = None
    filter_query: Optional[Dict[str, Any]] = None
    resolve_relations: Optional[List[str]] = None
    resolve_links: Optional[ResolveLinks] = None
    max_pages: Optional[int] = Field(default=None, ge=1)
    strict: bool = False
    """Report a failed load as HTTP 502 instead of an empty list."""
