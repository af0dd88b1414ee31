"""Filters applied to uvicorn's standard library loggers."""

import logging
import re

# '10.0.12.168:43306 - "GET /health HTTP/1.1" 200'
REQUEST_LINE = re.compile(r'"[A-Z]+ (?P<path>\S+) HTTP/[\d.]+"')


def access_log_path(record: logging.LogRecord) -> str | None:
    """Return the request path of a uvicorn access record, without query."""
    # uvicorn logs (client, method, path, http_version, status) as args
    if isinstance(record.args, tuple) and len(record.args) == 5:
        path = str(record.args[2])
    else:
        match = REQUEST_LINE.search(record.getMessage())
        if match is None:
            return None
        path = match.group("path")
    return path.split("?", 1)[0]


class HealthCheckFilter(logging.Filter):
    """Drop access log lines of load balancer probes."""

    EXCLUDED_PATHS = frozenset({"/health", "/favicon.ico"})

    def filter(self, record: logging.LogRecord) -> bool:
        return access_log_path(record) not in self.EXCLUDED_PATHS
