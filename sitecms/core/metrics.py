"""Prometheus metrics."""

from prometheus_client import Counter

REQUESTS_TOTAL = Counter(
    "sitecms_http_requests_total",
    "Total HTTP requests",
    ["method", "path"],
)

RESPONSES_TOTAL = Counter(
    "sitecms_http_responses_total",
    "Total HTTP responses",
    ["status_code"],
)

REVALIDATION_CALLS = Counter(
    "sitecms_revalidation_calls_total",
    "Render cache invalidation calls",
    ["kind", "outcome"],
)

REFERENCE_PROBES = Counter(
    "sitecms_reference_probes_total",
    "Media reference probes performed by the integrity scanner",
    ["section", "outcome"],
)

REFERENCE_REPAIRS = Counter(
    "sitecms_reference_repairs_total",
    "Broken references repaired by the integrity scanner",
    ["section", "outcome"],
)

STORAGE_MOVES = Counter(
    "sitecms_storage_moves_total",
    "Objects relocated by the storage reorganizer",
    ["outcome"],
)
