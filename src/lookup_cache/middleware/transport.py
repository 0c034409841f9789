"""httpx transport that caches LLM API calls.

Wrap the transport of any httpx client talking to an OpenAI-compatible API.
Requests that carry the cache key header are looked up in the cache before
they are sent; successful responses are stored afterwards.

Example:
    ```python
    router = CacheRouter(
        hash_cache=HashCacheService.create(),
        semantic_cache=SemanticCacheService.create(embedding_provider=provider),
    )
    client = httpx.Client(transport=CachingTransport(router))

    client.post(
        "https://api.openai.com/v1/embeddings",
        json={"model": "text-embedding-3-small", "input": "how is it going?"},
        headers={"X-Cache-Key": "embeddings-small"},
    )
    ```
"""

import json
from dataclasses import dataclass
from typing import Any

import httpx

from lookup_cache.config import settings
from lookup_cache.logging import get_logger
from lookup_cache.services import CacheRouter

logger = get_logger(__name__)

# Recomputed by httpx for the decoded body we replay
_DROPPED_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding", "connection"})


@dataclass(frozen=True)
class CachedResponse:
    """What the cache keeps of an HTTP response."""

    status_code: int
    headers: tuple[tuple[str, str], ...]
    content: bytes

    @classmethod
    def from_response(cls, response: httpx.Response) -> "CachedResponse":
        """Copy an already-read response."""
        headers = tuple(
            (name, value)
            for name, value in response.headers.multi_items()
            if name.lower() not in _DROPPED_HEADERS
        )
        return cls(status_code=response.status_code, headers=headers, content=response.content)

    def to_response(self, request: httpx.Request, cache_status: str) -> httpx.Response:
        """Build a fresh response, tagged with an ``X-Cache`` header."""
        headers = httpx.Headers(list(self.headers))
        headers["X-Cache"] = cache_status
        return httpx.Response(
            self.status_code,
            headers=headers,
            content=self.content,
            request=request,
        )


def extract_input(path: str, body: Any) -> str | None:
    """Pull the text to cache on out of an OpenAI-style request body.

    Returns:
        The joined message contents for chat completions, the input for
        embeddings, or None for any other endpoint.
    """
    if not isinstance(body, dict):
        return None

    if path.endswith("chat/completions"):
        parts = []
        for message in body.get("messages", []):
            content = message.get("content")
            if isinstance(content, str):
                parts.append(content)
            elif isinstance(content, list):
                parts.extend(p.get("text", "") for p in content if isinstance(p, dict))
        return " ".join(parts)

    if path.endswith("embeddings"):
        value = body.get("input")
        if isinstance(value, list):
            return " ".join(str(v) for v in value)
        if isinstance(value, str):
            return value

    return None


class CachingTransport(httpx.BaseTransport):
    """Transport layer that answers repeated requests from the cache.

    Only POST requests with the cache key header are considered; the header
    is stripped before the request is forwarded. Non-2xx responses are never
    stored.
    """

    def __init__(
        self,
        router: CacheRouter,
        transport: httpx.BaseTransport | None = None,
        key_header: str | None = None,
        verbose: int | None = None,
    ) -> None:
        """Initialize the caching transport.

        Args:
            router: Chooses the hash or semantic cache per request.
            transport: The transport that actually sends requests.
                Defaults to httpx.HTTPTransport().
            key_header: Header that carries the partition key.
                Defaults to settings.cache_key_header.
            verbose: Verbosity forwarded to the cache lookups.
                Defaults to settings.verbosity.
        """
        self._router = router
        self._transport = transport or httpx.HTTPTransport()
        self._key_header = key_header or settings.cache_key_header
        self._verbose = settings.verbosity if verbose is None else verbose

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        key = request.headers.get(self._key_header)
        if request.method != "POST" or key is None:
            return self._transport.handle_request(request)
        del request.headers[self._key_header]

        try:
            body = json.loads(request.read() or b"null")
        except ValueError:
            return self._transport.handle_request(request)

        text = extract_input(request.url.path, body)
        if text is None:
            return self._transport.handle_request(request)

        if self._verbose >= 1:
            logger.info("Check if we can cache this request (%d chars)", len(text))
        cache = self._router.select(text)
        item = cache(key, text, verbose=self._verbose)
        if item.is_valid():
            return item.output.to_response(request, "HIT")

        if self._verbose >= 1:
            logger.info("Cache miss! Forwarding to %s", request.url)
        response = self._transport.handle_request(request)
        try:
            response.read()
        finally:
            response.close()

        cached = CachedResponse.from_response(response)
        if response.is_success:
            item.output = cached
            cache.push(item)
        return cached.to_response(request, "MISS")

    def close(self) -> None:
        self._transport.close()
