"""Paginated Storyblok story loader for static-site builds.

``storyblok_loader`` returns a zero-argument coroutine function that walks the
``cdn/stories`` listing page by page and maps every story to a
:class:`StoryRecord`.  Any failure is logged once and turned into an empty list,
so a broken CMS connection never fails the build; use :func:`load_stories`
directly when the caller needs to know that a load failed.
"""

import copy
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from storyloader.models.options import LoaderOptions
from storyloader.models.story import LoadResult, RawStory, StoryRecord
from storyloader.services.client import StoryblokClient

logger = logging.getLogger(__name__)

PER_PAGE = 100
ERROR_PREFIX = "Error fetching Storyblok content:"

LogSink = Callable[[str], None]
ClientFactory = Callable[..., StoryblokClient]


class PaginationLimitError(RuntimeError):
    """Raised when a listing still has full pages after ``max_pages``."""


def build_query(options: LoaderOptions, page: int) -> Dict[str, Any]:
    """Return the listing parameters for *page*.

    Optional options are only added when set; the API never sees empty keys.
    """
    query: Dict[str, Any] = {
        "version": options.version,
        "per_page": PER_PAGE,
        "page": page,
    }
    if options.language:
        query["language"] = options.language
    if options.content_type:
        query["content_type"] = options.content_type
    if options.sort_by:
        query["sort_by"] = options.sort_by
    if options.filter_query:
        query["filter_query"] = copy.deepcopy(options.filter_query)
    if options.resolve_relations:
        query["resolve_relations"] = list(options.resolve_relations)
    if options.resolve_links:
        query["resolve_links"] = options.resolve_links
    return query


async def fetch_all_stories(client: StoryblokClient, options: LoaderOptions) -> List[RawStory]:
    """Fetch every page of the listing, strictly one page after another.

    Stops on an empty page or on a page shorter than :data:`PER_PAGE`.
    """
    stories: List[RawStory] = []
    page = 1

    while True:
        if options.max_pages is not None and page > options.max_pages:
            raise PaginationLimitError(
                f"Still receiving full pages after {options.max_pages} pages; "
                "possible infinite pagination."
            )

        page_stories = await client.get_stories(build_query(options, page))
        logger.debug("Fetched page %d (%d stories)", page, len(page_stories))

        if not page_stories:
            break
        stories.extend(page_stories)
        if len(page_stories) < PER_PAGE:
            break
        page += 1

    return stories


def to_record(story: RawStory) -> StoryRecord:
    """Map a raw API story to the normalized output shape."""
    return StoryRecord(
        id=story.uuid,
        slug=story.full_slug,
        content=story.content,
        name=story.name,
        created_at=story.created_at,
        published_at=story.published_at,
        editable=story.editable,
        is_folder=story.is_folder,
        full_slug=story.full_slug,
        language=story.lang,
        translated_slugs=story.translated_slugs,
    )


def _error_message(exc: BaseException) -> str:
    message = str(exc)
    return message if message else repr(exc)


async def load_stories(
    options: LoaderOptions,
    *,
    client_factory: ClientFactory = StoryblokClient,
    log: Optional[LogSink] = None,
) -> LoadResult:
    """Run one complete load and report the outcome.

    A fresh client is built for every call.  On any error nothing fetched so
    far is kept: the result holds no stories, ``error`` carries the message and
    exactly one line is written to *log* (the module logger by default).
    """
    sink = log or logger.error
    try:
        async with client_factory(access_token=options.access_token, region=options.region) as client:
            raw_stories = await fetch_all_stories(client, options)
        stories = [to_record(story) for story in raw_stories]
    except Exception as exc:
        message = _error_message(exc)
        sink(f"{ERROR_PREFIX} {message}")
        return LoadResult(error=message)

    logger.info(
        "Loaded %d Storyblok stories",
        len(stories),
        extra={"version": options.version, "region": options.region},
    )
    return LoadResult(stories=stories)


def storyblok_loader(
    options: LoaderOptions,
    *,
    client_factory: ClientFactory = StoryblokClient,
    log: Optional[LogSink] = None,
) -> Callable[[], Awaitable[List[StoryRecord]]]:
    """Build a reusable loader for the listing described by *options*.

    Nothing happens until the returned coroutine function is awaited.  Each
    call re-fetches everything and never raises; failures yield ``[]``.

    Example::

        load = storyblok_loader(
            LoaderOptions(
                access_token=settings.storyblok_access_token,
                content_type="blog",
                resolve_relations=["author.posts", "related_posts"],
                sort_by="content.published_date:desc",
            )
        )
        stories = await load()
    """

    async def load() -> List[StoryRecord]:
        result = await load_stories(options, client_factory=client_factory, log=log)
        return result.stories

    return load
