"""Monitoring utilities leveraging Prometheus client."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

http_requests_total = Counter(
    "coursedocs_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

http_request_latency_seconds = Histogram(
    "coursedocs_http_request_latency_seconds",
    "HTTP request latency",
    ["method", "path"],
)

media_deletions_total = Counter(
    "coursedocs_media_deletions_total",
    "Media store deletions by outcome",
    ["outcome"],
)

read_cache_lookups_total = Counter(
    "coursedocs_read_cache_lookups_total",
    "Read cache lookups by namespace and result",
    ["namespace", "result"],
)


def observe_request(method: str, path: str, status: int, duration_seconds: float) -> None:
    http_requests_total.labels(method=method, path=path, status=str(status)).inc()
    http_request_latency_seconds.labels(method=method, path=path).observe(duration_seconds)


def record_media_deletion(outcome: str) -> None:
    media_deletions_total.labels(outcome=outcome).inc()


def record_cache_lookup(namespace: str, hit: bool) -> None:
    read_cache_lookups_total.labels(namespace=namespace, result="hit" if hit else "miss").inc()
