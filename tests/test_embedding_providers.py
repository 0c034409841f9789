"""Tests for the Ollama embedding provider against a mocked API."""

import json

import httpx
import numpy as np
import pytest

from lookup_cache.exceptions import EmbeddingUnavailableError
from lookup_cache.protocols import EmbeddingProvider
from lookup_cache.repositories import OllamaEmbeddingProvider


def make_provider(handler, chunk_chars: int = 10) -> OllamaEmbeddingProvider:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return OllamaEmbeddingProvider(
        model_name="all-minilm",
        base_url="http://ollama.test/",
        chunk_chars=chunk_chars,
        client=client,
    )


def test_satisfies_protocol():
    provider = make_provider(lambda request: httpx.Response(200, json={}))
    assert isinstance(provider, EmbeddingProvider)
    assert provider.model_name == "all-minilm"
    assert provider.dimension == 384


def test_embed_averages_chunks():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        assert request.url == "http://ollama.test/api/embed"
        return httpx.Response(200, json={"embeddings": [[1.0, 0.0, 2.0], [3.0, 2.0, 0.0]]})

    provider = make_provider(handler, chunk_chars=5)
    result = provider.embed("abcdefghij")

    assert seen == [{"model": "all-minilm", "input": ["abcde", "fghij"]}]
    np.testing.assert_allclose(result.vector, [2.0, 1.0, 1.0])
    assert result.vector.dtype == np.float32
    assert result.elapsed >= 0
    assert provider.dimension == 3


def test_short_text_is_sent_whole():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content)["input"])
        return httpx.Response(200, json={"embeddings": [[1.0]]})

    make_provider(handler).embed("short")
    assert seen == [["short"]]


def test_http_error_is_wrapped():
    provider = make_provider(lambda request: httpx.Response(500, json={"error": "boom"}))

    with pytest.raises(EmbeddingUnavailableError) as excinfo:
        provider.embed("hello")
    assert excinfo.value.details["url"] == "http://ollama.test/api/embed"
    assert isinstance(excinfo.value.cause, httpx.HTTPStatusError)
    assert provider.is_available() is False


def test_connection_error_gets_a_hint():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(EmbeddingUnavailableError) as excinfo:
        make_provider(handler).embed("hello")
    assert "ollama serve" in excinfo.value.details["hint"]


def test_missing_embeddings_is_an_error():
    provider = make_provider(lambda request: httpx.Response(200, json={"model": "all-minilm"}))
    with pytest.raises(EmbeddingUnavailableError):
        provider.embed("hello")


def test_close_drops_the_client():
    provider = make_provider(lambda request: httpx.Response(200, json={"embeddings": [[1.0]]}))
    provider.close()
    assert provider._client is None
