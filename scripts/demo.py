#!/usr/bin/env python3
"""
Demo script for lookup cache.

This script demonstrates the hash and semantic caches with sample prompts.
It needs a running Ollama with the configured embedding model
(``ollama pull all-minilm``), or EMBEDDING_BACKEND=local.
"""

from lookup_cache import HashCacheService, SemanticCacheService
from lookup_cache.api.dependencies import build_embedding_provider
from lookup_cache.evaluator import CacheEvaluator, QueryPair
from lookup_cache.exceptions import LookupCacheError


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def demo_hash_cache() -> None:
    """Demonstrate exact lookups."""
    print_section("Hash Cache")

    cache = HashCacheService.create()

    item = cache("m1", "hello")
    print(f"\n  Lookup 'hello': {'HIT' if item.is_valid() else 'MISS'}")
    item.output = "A"
    print(f"  Stored at position {cache.push(item)}")

    for text in ["hello", "world"]:
        item = cache("m1", text)
        status = f"HIT -> {item.output}" if item.is_valid() else "MISS"
        print(f"  Lookup '{text}': {status}")

    print(f"\n  {cache!r}")


def demo_semantic_cache(cache: SemanticCacheService) -> None:
    """Demonstrate similarity lookups."""
    print_section("Semantic Cache")

    qa_pairs = [
        ("What is a semantic cache?", "A cache that finds results by meaning."),
        ("How do embeddings work?", "They map text to vectors; similar text, close vectors."),
        ("How is cosine similarity computed?", "The dot product of normalized vectors."),
    ]

    print("\n📝 Storing sample Q&A pairs...")
    for prompt, response in qa_pairs:
        item = cache("demo", prompt)
        if not item.is_valid():
            item.output = response
            cache.push(item)
        print(f"  ✓ Stored: {prompt}")

    print("\n🔍 Looking up similar and unrelated queries (threshold 0.8):")
    queries = [
        "Explain what a semantic cache is",
        "How do you compute cosine similarity?",
        "What is the capital of France?",
    ]
    for query in queries:
        item = cache("demo", query, verbose=1, min_similarity=0.8)
        print(f"\n  Query: {query}")
        if item.is_valid():
            print(f"  ✓ CACHE HIT: {item.output}")
        else:
            print("  ✗ Cache miss")


def demo_threshold_tuning(cache: SemanticCacheService) -> None:
    """Demonstrate threshold tuning."""
    print_section("Threshold Tuning")

    test_queries = [
        # Should match (similar meaning)
        QueryPair("What is a semantic cache?", "Explain semantic caching", should_match=True),
        QueryPair("How do embeddings work?", "How does an embedding model work?", True),
        # Should not match (different meaning)
        QueryPair("What is a semantic cache?", "What is machine learning?", should_match=False),
        QueryPair("How do I deploy this?", "What is a database?", should_match=False),
    ]

    evaluator = CacheEvaluator(cache)
    evaluator.sweep_thresholds(test_queries, min_threshold=0.6, max_threshold=0.95, steps=8)
    print(evaluator.format_summary())


def main() -> None:
    """Run all demos."""
    print("\n🚀 Lookup Cache Demo")
    print("=" * 70)

    demo_hash_cache()

    provider = build_embedding_provider()
    try:
        demo_semantic_cache(SemanticCacheService.create(embedding_provider=provider))
        demo_threshold_tuning(SemanticCacheService.create(embedding_provider=provider))

        print("\n" + "=" * 70)
        print("✅ Demo completed successfully!")
        print("=" * 70)

    except LookupCacheError as e:
        print(f"\n❌ Error: {e}")
        print("\nMake sure Ollama is running and the model is pulled:")
        print("  ollama serve")
        print("  ollama pull all-minilm")
        print("\nOr set EMBEDDING_BACKEND=local to embed in-process.")


if __name__ == "__main__":
    main()
