"""
Request logging middleware - access log for /api routes.

One line per logged request with path, method, status, duration, query
string and request id. 5xx responses and requests slower than the slow
threshold are logged at WARNING and always bypass sampling.

Env vars (read once at app creation):
  - REQUEST_LOG_ENABLED (default: true)
  - REQUEST_LOG_SAMPLE_RATE (default: 1.0, fraction of requests logged)
  - REQUEST_LOG_ENDPOINTS (comma-separated path prefixes; when set, only
    these are logged at INFO)
  - REQUEST_LOG_SLOW_MS (default: 1000)
"""

import logging
import os
import random
import time
from dataclasses import dataclass, field
from typing import Tuple

from flask import Flask, g, request


logger = logging.getLogger("api.request")


@dataclass(frozen=True)
class RequestLogSettings:
    enabled: bool = True
    sample_rate: float = 1.0
    watchlist: Tuple[str, ...] = field(default_factory=tuple)
    slow_ms: float = 1000.0

    @classmethod
    def from_env(cls) -> "RequestLogSettings":
        enabled = os.environ.get("REQUEST_LOG_ENABLED", "true").lower() == "true"
        try:
            sample_rate = float(os.environ.get("REQUEST_LOG_SAMPLE_RATE", "1.0"))
        except ValueError:
            sample_rate = 1.0
        try:
            slow_ms = float(os.environ.get("REQUEST_LOG_SLOW_MS", "1000"))
        except ValueError:
            slow_ms = 1000.0
        raw = os.environ.get("REQUEST_LOG_ENDPOINTS", "")
        watchlist = tuple(p.strip() for p in raw.split(",") if p.strip())
        return cls(enabled=enabled, sample_rate=sample_rate, watchlist=watchlist, slow_ms=slow_ms)

    def wants(self, path: str) -> bool:
        if self.watchlist:
            return path.startswith(self.watchlist)
        if self.sample_rate <= 0:
            return False
        return self.sample_rate >= 1 or random.random() <= self.sample_rate


def setup_request_logging_middleware(app: Flask) -> None:
    settings = RequestLogSettings.from_env()
    if not settings.enabled:
        return

    @app.before_request
    def _start_timer():
        g.request_start = time.perf_counter()

    @app.after_request
    def _log_request(response):
        if not request.path.startswith("/api"):
            return response

        duration_ms = None
        if hasattr(g, "request_start"):
            duration_ms = round((time.perf_counter() - g.request_start) * 1000, 2)

        is_problem = response.status_code >= 500 or (
            duration_ms is not None and duration_ms >= settings.slow_ms
        )
        if not is_problem and not settings.wants(request.path):
            return response

        logger.log(
            logging.WARNING if is_problem else logging.INFO,
            "api_request path=%s method=%s status=%s duration_ms=%s query=%s request_id=%s",
            request.path,
            request.method,
            response.status_code,
            duration_ms,
            request.query_string.decode("utf-8", "replace") or "-",
            getattr(g, "request_id", None),
        )
        return response
