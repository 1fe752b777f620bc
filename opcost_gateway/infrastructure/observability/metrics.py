"""Prometheus metrics for monitoring settlement runs and allocation quality"""

from prometheus_client import Counter, Histogram

from opcost_gateway.domain.models import SettlementResult

# Settlement metrics
settlement_counter = Counter(
    "opcost_settlement_total",
    "Total settlement calculations",
    ["outcome"],  # clean | warnings | rejected
)

settlement_duration_histogram = Histogram(
    "opcost_settlement_duration_seconds",
    "Settlement calculation time",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

settlement_warning_counter = Counter(
    "opcost_settlement_warnings_total",
    "Degraded inputs detected during settlement",
    ["code"],
)

owner_vacancy_cents_counter = Counter(
    "opcost_owner_vacancy_cents_total",
    "Operating costs absorbed by owners for vacant units",
)

unallocated_cents_counter = Counter(
    "opcost_unallocated_cents_total",
    "Operating costs that reached neither a tenant nor the owner",
)

# Rollover metrics
rollover_counter = Counter(
    "opcost_rollover_total",
    "Year rollovers performed",
    ["outcome"],  # ok | rejected
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_settlement(result: SettlementResult) -> None:
    """Record settlement metrics for monitoring vacancy and allocation gaps"""
    outcome = "warnings" if result.warnings else "clean"
    settlement_counter.labels(outcome=outcome).inc()

    for warning in result.warnings:
        settlement_warning_counter.labels(code=warning.code).inc()

    owner_vacancy_cents_counter.inc(max(result.owner_vacancy_share_cents, 0))
    # Over-allocation (negative bucket) is visible through the warnings instead
    unallocated_cents_counter.inc(max(result.unallocated_cents, 0))
