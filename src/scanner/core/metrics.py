from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "path", "status_code"],
)

EXTERNAL_API_COUNT = Counter(
    "external_api_requests_total",
    "Total number of external API requests",
    ["source", "status"],
)

EXTERNAL_API_DURATION = Histogram(
    "external_api_duration_seconds",
    "Duration of external API requests in seconds",
    ["source"],
)

CATALOG_LOOKUPS = Counter(
    "catalog_lookups_total",
    "Catalog lookups by outcome (found, not_found, error)",
    ["outcome"],
)

LOG_WRITES = Counter(
    "log_sink_writes_total",
    "Log sink writes by status",
    ["status"],
)

SESSION_TRANSITIONS = Counter(
    "session_transitions_total",
    "Scan session state transitions by target state",
    ["state"],
)
