"""Prometheus metrics for monitoring acceptance rates, limit hits, and store health"""

from typing import Optional

from prometheus_client import Counter, Histogram

# Decision metrics
load_decision_counter = Counter(
    "load_decision_total",
    "Total load attempts evaluated",
    ["outcome"],  # accepted | rejected | duplicate
)

load_rejection_counter = Counter(
    "load_rejection_total",
    "Rejected load attempts by limit",
    ["reason"],  # daily_load_count | daily_amount | weekly_amount | store_write_failed
)

load_evaluation_histogram = Histogram(
    "load_evaluation_seconds",
    "Time spent evaluating one load attempt",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

# Store metrics
store_write_failure_counter = Counter(
    "store_write_failures_total",
    "Load records that could not be persisted",
)

store_read_failure_counter = Counter(
    "store_read_failures_total",
    "Aggregate queries that failed during evaluation",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_load_decision(outcome: str, rejection_reason: Optional[str], duration_seconds: float) -> None:
    """Record decision metrics for monitoring acceptance rates and which limits fire"""
    load_decision_counter.labels(outcome=outcome).inc()
    load_evaluation_histogram.observe(duration_seconds)

    if rejection_reason is not None:
        load_rejection_counter.labels(reason=rejection_reason).inc()
        if rejection_reason == "store_write_failed":
            store_write_failure_counter.inc()
