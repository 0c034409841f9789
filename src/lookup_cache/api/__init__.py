"""FastAPI application exposing the caches over HTTP."""
