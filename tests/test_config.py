"""Tests for settings validation."""

import pytest

from lookup_cache.config import Settings, get_settings
from lookup_cache.exceptions import ConfigError, LookupCacheError


def test_defaults_are_valid():
    settings = Settings()
    assert settings.embedding_chunk_chars > 0
    assert settings.verbosity in (0, 1, 2)


def test_settings_are_cached():
    assert get_settings() is get_settings()


def test_local_backend_flag():
    assert Settings(embedding_backend="local").is_local_backend
    assert not Settings(embedding_backend="ollama").is_local_backend


@pytest.mark.parametrize(
    "overrides",
    [
        {"embedding_backend": "openai"},
        {"embedding_chunk_chars": 0},
        {"hash_cache_char_limit": -1},
        {"verbosity": 3},
    ],
)
def test_invalid_settings_raise(overrides):
    with pytest.raises(ConfigError):
        Settings(**overrides)


def test_thresholds_are_not_validated():
    assert Settings(min_similarity=1.5).min_similarity == 1.5


def test_error_message_includes_details_and_cause():
    error = LookupCacheError("boom", details={"url": "http://x"}, cause=OSError("refused"))
    assert str(error) == "boom (url=http://x) [caused by: OSError: refused]"
    assert isinstance(ConfigError("bad"), ValueError)
