"""Prometheus metrics for backend calls, session gating and admin actions"""

from prometheus_client import Counter, Histogram

# Backend API metrics
backend_call_counter = Counter(
    "loansewa_backend_calls_total",
    "Calls made to the LoanSewa backend API",
    ["endpoint", "outcome"],  # ok | error | unavailable | malformed
)

backend_latency_histogram = Histogram(
    "loansewa_backend_latency_seconds",
    "Backend API response time",
    ["endpoint"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

# Session gate
session_redirect_counter = Counter(
    "loansewa_session_redirects_total",
    "Protected page visits redirected to login",
    ["area"],  # user | admin
)

# Admin workflow
admin_action_counter = Counter(
    "loansewa_admin_actions_total",
    "Admin approve/reject/delete requests",
    ["action", "outcome"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_admin_action(action: str, succeeded: bool) -> None:
    admin_action_counter.labels(action=action, outcome="ok" if succeeded else "error").inc()
