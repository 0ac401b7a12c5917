"""Thin async client for the Storyblok Content Delivery API listing endpoint."""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx

from storyloader.models.story import RawStory

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15  # seconds
STORIES_PATH = "cdn/stories"

_REGION_HOSTS = {
    "us": "https://api-us.storyblok.com/v2",
    "eu": "https://api.storyblok.com/v2",
}


class StoryblokAPIError(RuntimeError):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Storyblok API returned {status_code}: {detail}")


class StoryblokResponseError(ValueError):
    """Raised when a 2xx response does not carry a ``stories`` list."""


def api_base_url(region: str) -> str:
    """Return the Content Delivery API root for *region*."""
    try:
        return _REGION_HOSTS[region]
    except KeyError:
        raise ValueError(f"Unknown Storyblok region '{region}'. Use one of: us, eu.") from None


def encode_params(params: Mapping[str, Any], prefix: Optional[str] = None) -> List[Tuple[str, str]]:
    """Flatten *params* into the query-string pairs Storyblok expects.

    Nested mappings become bracket keys (``filter_query[component][in]=post``),
    sequences are comma-joined and ``None`` values are dropped.
    """
    pairs: List[Tuple[str, str]] = []
    for key, value in params.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        if value is None:
            continue
        if isinstance(value, Mapping):
            pairs.extend(encode_params(value, name))
        elif isinstance(value, (list, tuple)):
            pairs.append((name, ",".join(str(item) for item in value)))
        elif isinstance(value, bool):
            pairs.append((name, "true" if value else "false"))
        else:
            pairs.append((name, str(value)))
    return pairs


def _error_detail(response: httpx.Response) -> str:
    # Error bodies are either {"error": "..."} JSON or plain text.
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    text = response.text.strip()
    return text[:200] if text else response.reason_phrase


class StoryblokClient:
    """Fetches single pages of the story listing.

    One instance owns one ``httpx.AsyncClient``; close it with :meth:`aclose`
    or use the client as an async context manager.
    """

    def __init__(
        self,
        access_token: str,
        region: str = "us",
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._access_token = access_token
        self.base_url = api_base_url(region)
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> "StoryblokClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get_stories(self, params: Dict[str, Any]) -> List[RawStory]:
        """Request one page of ``cdn/stories`` and return its raw stories.

        Raises:
            StoryblokAPIError: on a non-2xx status (auth, rate limit, server).
            StoryblokResponseError: if the body has no ``stories`` list.
            httpx.HTTPError: on network or transport errors.
            pydantic.ValidationError: if a story lacks a required field.
        """
        query = encode_params({**params, "token": self._access_token})
        response = await self._http.get(STORIES_PATH, params=query)
        if response.is_error:
            raise StoryblokAPIError(response.status_code, _error_detail(response))

        try:
            payload = response.json()
        except ValueError as exc:
            raise StoryblokResponseError(f"Response body is not valid JSON: {exc}") from exc

        stories = payload.get("stories") if isinstance(payload, dict) else None
        if not isinstance(stories, list):
            raise StoryblokResponseError("Response body has no 'stories' list.")

        logger.debug("Storyblok page %s returned %d stories", params.get("page"), len(stories))
        return [RawStory.model_validate(item) for item in stories]
