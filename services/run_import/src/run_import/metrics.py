from prometheus_client import Counter, Gauge, Histogram

IMPORT_REQUESTS_TOTAL = Counter(
    "import_requests_total", "Total number of CSV import requests", ["status"]
)

EVENTS_LOGGED_TOTAL = Counter(
    "graphjson_events_total", "Events sent to GraphJSON", ["collection", "status"]
)

GRAPHJSON_REQUEST_TIME = Histogram(
    "graphjson_request_seconds", "Time spent waiting on GraphJSON", ["operation"]
)

ACTIVE_IMPORTS = Gauge("active_imports", "Number of imports in progress")
