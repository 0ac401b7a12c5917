"""An in-memory Storyblok backend behind ``httpx.MockTransport``."""

from typing import Callable, List, Optional

import httpx

from storyloader.services.client import StoryblokClient


def make_story(index: int, **overrides) -> dict:
    story = {
        "uuid": f"uuid-{index}",
        "full_slug": f"blog/post-{index}",
        "content": {"component": "post", "title": f"Post {index}"},
        "name": f"Post {index}",
        "created_at": "2024-01-01T10:00:00.000Z",
        "published_at": "2024-01-02T10:00:00.000Z",
    }
    story.update(overrides)
    return story


class FakeStoryblok:
    """Serves *total* stories page by page, like the ``cdn/stories`` endpoint.

    *responder* can replace the default paging for a given page number by
    returning an ``httpx.Response`` (or raising).
    """

    def __init__(self, total: int = 0, responder: Optional[Callable[[int], httpx.Response]] = None):
        self.stories = [make_story(i) for i in range(total)]
        self.responder = responder
        self.requests: List[httpx.Request] = []
        self.clients_built = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        page = int(request.url.params["page"])
        per_page = int(request.url.params["per_page"])
        if self.responder is not None:
            response = self.responder(page)
            if response is not None:
                return response
        start = (page - 1) * per_page
        return httpx.Response(200, json={"stories": self.stories[start:start + per_page]})

    def client_factory(self, **kwargs) -> StoryblokClient:
        self.clients_built += 1
        return StoryblokClient(transport=httpx.MockTransport(self.handler), **kwargs)

    @property
    def pages_requested(self) -> List[int]:
        return [int(r.url.params["page"]) for r in self.requests]
