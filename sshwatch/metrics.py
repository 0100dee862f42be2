"""Prometheus metrics for the monitor.

Each Counter/Gauge below auto-registers itself in the global REGISTRY on
construction.  start_http_server() (called from main when --metrics-port
is set) serves them on /metrics.
"""

from prometheus_client import Counter, Gauge

# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------
lines_total = Counter(
    "sshwatch_lines_total",
    "Raw log lines read from the event source",
)
events_total = Counter(
    "sshwatch_events_total",
    "Classified events with an address",
    ["outcome"],
)

# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------
alerts_total = Counter(
    "sshwatch_alerts_total",
    "Alerts handed to the dispatcher",
    ["kind"],
)
alert_failures_total = Counter(
    "sshwatch_alert_failures_total",
    "Alerts the webhook did not accept (transport error or non-2xx)",
)
suppressed_total = Counter(
    "sshwatch_suppressed_total",
    "Attempts from already-blocked subnets",
)
blocks_total = Counter(
    "sshwatch_blocks_total",
    "Subnets moved to the block set",
)
window_resets_total = Counter(
    "sshwatch_window_resets_total",
    "Times the attempt counters were cleared",
)
blocked_subnets = Gauge(
    "sshwatch_blocked_subnets",
    "Subnets currently blocked",
)
