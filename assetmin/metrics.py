from prometheus_client import Counter, start_http_server

# Initialize metrics
FILES_MINIFIED_TOTAL = Counter(
    "assetmin_files_minified_total",
    "Total number of asset files minified",
    ["type", "status"],
)

BYTES_SAVED_TOTAL = Counter(
    "assetmin_bytes_saved_total",
    "Total number of bytes removed by minification",
    ["type"],
)


def start_metrics_server(port: int = 9090):
    """Start Prometheus metrics server on the specified port."""
    start_http_server(port)


def increment_file_minified(asset_type: str, success: bool):
    """Increment minified file counter."""
    status = "success" if success else "failure"
    FILES_MINIFIED_TOTAL.labels(type=asset_type, status=status).inc()


def add_bytes_saved(asset_type: str, saved: int):
    """Add to the saved bytes counter, ignoring files that grew."""
    if saved > 0:
        BYTES_SAVED_TOTAL.labels(type=asset_type).inc(saved)
