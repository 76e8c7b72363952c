"""Prometheus metrics for transaction creation, benefit usage and report latency"""

from prometheus_client import Counter, Histogram

# Transaction metrics
transactions_created_counter = Counter(
    "finance_transactions_created_total",
    "Transactions persisted",
    ["kind"],  # single | installment
)

benefit_deduction_counter = Counter(
    "finance_benefit_deductions_total",
    "Benefit deduction attempts",
    ["outcome"],  # ok | INVALID_AMOUNT | CATEGORY_NOT_ELIGIBLE | NO_MATCHING_BENEFIT | INSUFFICIENT_BALANCE
)

# Report metrics
stats_duration_histogram = Histogram(
    "finance_stats_duration_seconds",
    "Time spent loading records and computing a report",
    ["report"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_transactions(count: int) -> None:
    """Record a created batch; more than one row means an installment group"""
    kind = "installment" if count > 1 else "single"
    transactions_created_counter.labels(kind=kind).inc(count)


def record_deduction(outcome: str) -> None:
    benefit_deduction_counter.labels(outcome=outcome).inc()
