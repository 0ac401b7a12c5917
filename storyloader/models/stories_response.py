from typing import List, Optional

from pydantic import BaseModel

from storyloader.models.story import StoryRecord


class StoriesResponse(BaseModel):
    count: int
    stories: List[StoryRecord]
    error: Optional[str] = None
