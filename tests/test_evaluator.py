"""Tests for threshold evaluation."""

import logging

import pytest

from lookup_cache.evaluator import CacheEvaluator, EvalResult, QueryPair

PAIRS = [
    QueryPair(query="How is it goin'?", cached_query="How is it going?", should_match=True),
    QueryPair(query="How are things?", cached_query="How is it going?", should_match=True),
    QueryPair(
        query="completely unrelated text", cached_query="How is it going?", should_match=False
    ),
]


@pytest.fixture
def evaluator(semantic_cache) -> CacheEvaluator:
    return CacheEvaluator(semantic_cache)


def test_eval_result_metrics():
    result = EvalResult(
        threshold=0.9,
        true_positives=1,
        false_positives=1,
        true_negatives=1,
        false_negatives=1,
    )
    assert (result.total_queries, result.cache_hits, result.cache_misses) == (4, 2, 2)
    assert result.hit_rate == 0.5
    assert result.precision == 0.5
    assert result.recall == 0.5
    assert result.f1_score == 0.5
    assert EvalResult(threshold=0.9).f1_score == 0.0


def test_record_outcomes():
    result = EvalResult(threshold=0.9)
    result.record(hit=True, should_match=True)
    result.record(hit=True, should_match=False)
    result.record(hit=False, should_match=True)
    result.record(hit=False, should_match=False)
    result.record(hit=False, should_match=False)

    assert (
        result.true_positives,
        result.false_positives,
        result.false_negatives,
        result.true_negatives,
    ) == (1, 1, 1, 2)
    assert result.to_dict()["total_queries"] == 5


def test_evaluate_threshold(evaluator):
    strict = evaluator.evaluate_threshold(0.92, PAIRS)
    assert (strict.true_positives, strict.false_negatives, strict.true_negatives) == (1, 1, 1)

    loose = evaluator.evaluate_threshold(0.85, PAIRS)
    assert (loose.true_positives, loose.false_negatives, loose.true_negatives) == (2, 0, 1)
    assert loose.false_positives == 0


def test_cached_queries_are_stored_once(evaluator, semantic_cache):
    evaluator.evaluate_threshold(0.9, PAIRS)
    evaluator.evaluate_threshold(0.95, PAIRS)
    # all pairs share one cached query
    assert len(semantic_cache) == 1


def test_different_pair_lists_do_not_interfere(evaluator, semantic_cache):
    first = evaluator.evaluate_threshold(
        0.9, [QueryPair("How is it goin'?", "How is it going?", should_match=True)]
    )
    second = evaluator.evaluate_threshold(
        0.9, [QueryPair("How is it going?", "completely unrelated text", should_match=False)]
    )

    assert (first.true_positives, first.false_negatives) == (1, 0)
    assert (second.true_negatives, second.false_positives) == (1, 0)
    assert len(semantic_cache) == 2


def test_sweep_and_optimal_threshold(evaluator):
    results = evaluator.sweep_thresholds(PAIRS, min_threshold=0.85, max_threshold=0.95, steps=3)

    assert [round(r.threshold, 2) for r in results] == [0.85, 0.9, 0.95]
    threshold, best = evaluator.find_optimal_threshold("f1_score")
    assert threshold == pytest.approx(0.85)
    assert best.recall == 1.0


def test_optimal_threshold_needs_results(evaluator):
    with pytest.raises(ValueError):
        evaluator.find_optimal_threshold()


def test_summary(evaluator, lookup_caplog):
    assert evaluator.format_summary() == "No evaluation results available."

    evaluator.evaluate_threshold(0.85, PAIRS)
    summary = evaluator.format_summary()
    assert "0.850" in summary
    assert "Best f1_score: 0.850 (100.00%)" in summary

    with lookup_caplog.at_level(logging.INFO, logger="lookup_cache"):
        evaluator.log_summary()
    assert any("Cache Evaluation Summary" in r.getMessage() for r in lookup_caplog.records)
