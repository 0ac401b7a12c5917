import logging
from functools import partial

from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from storyloader.config import Settings, get_settings
from storyloader.models.options import LoaderOptions
from storyloader.models.stories_request import StoriesRequest
from storyloader.models.stories_response import StoriesResponse
from storyloader.services.client import StoryblokClient
from storyloader.services.loader import load_stories

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()


def _build_options(body: StoriesRequest, settings: Settings) -> LoaderOptions:
    """Merge the request body over the environment defaults."""
    token = body.access_token or settings.storyblok_access_token
    if not token:
        raise HTTPException(
            status_code=400,
            detail="No access token: pass access_token or set STORYBLOK_ACCESS_TOKEN.",
        )
    return LoaderOptions(
        access_token=token,
        version=body.version or settings.storyblok_version,
        region=body.region or settings.storyblok_region,
        language=body.language,
        content_type=body.content_type,
        sort_by=body.sort_by,
        filter_query=body.filter_query,
        resolve_relations=body.resolve_relations,
        resolve_links=body.resolve_links,
        max_pages=body.max_pages or settings.storyblok_max_pages,
    )


@router.post(
    "/stories",
    response_model=StoriesResponse,
    summary="Load every story of a Storyblok listing",
    description=(
        "Walks the `cdn/stories` listing 100 stories at a time and returns the "
        "normalized stories in API order.  A failed load is reported as an empty "
        "list with `error` set, or as HTTP 502 when `strict` is true."
    ),
)
@limiter.limit("10/minute")
async def stories_endpoint(
    request: Request,
    body: StoriesRequest,
    settings: Settings = Depends(get_settings),
) -> StoriesResponse:
    options = _build_options(body, settings)
    logger.info(
        "Stories request received",
        extra={"content_type": options.content_type, "version": options.version},
    )

    client_factory = partial(StoryblokClient, timeout=settings.storyblok_timeout)
    result = await load_stories(options, client_factory=client_factory)

    if not result.ok and body.strict:
        raise HTTPException(status_code=502, detail=result.error)

    return StoriesResponse(count=len(result.stories), stories=result.stories, error=result.error)
