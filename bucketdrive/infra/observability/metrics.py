from prometheus_client import Counter, Histogram

# Labels stay low-cardinality: operation names only, never keys or prefixes
OPERATIONS = Counter(
    "storage_operations_total",
    "Total object storage backend calls",
    ["operation", "outcome"],
)

LATENCY = Histogram(
    "storage_operation_duration_seconds",
    "Object storage backend call latency in seconds",
    ["operation"],
)


def record_operation(operation: str, outcome: str, elapsed: float) -> None:
    OPERATIONS.labels(operation=operation, outcome=outcome).inc()
    LATENCY.labels(operation=operation).observe(elapsed)
