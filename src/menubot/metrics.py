"""Prometheus metrics definitions for menubot."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "menubot_http_requests_total",
    "Total number of HTTP requests processed by the menubot API",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "menubot_http_request_duration_seconds",
    "Latency of HTTP requests processed by the menubot API",
    ["method", "path"],
)

SITE_FETCHES = Counter(
    "menubot_site_fetch_total",
    "Menu page fetches by result",
    ["result"],
)

SELECTOR_FAILURES = Counter(
    "menubot_selector_failures_total",
    "Weekday selectors that failed to evaluate",
)

TOKEN_REFRESHES = Counter(
    "menubot_token_refresh_total",
    "Bearer token refresh calls by status",
    ["status"],
)

MESSAGES_SENT = Counter(
    "menubot_messages_sent_total",
    "Outbound reply activities by status",
    ["status"],
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SITE_FETCHES",
    "SELECTOR_FAILURES",
    "TOKEN_REFRESHES",
    "MESSAGES_SENT",
]
