"""Helpers shared by the serverless HTTP handlers."""

import asyncio
import json
from http.server import BaseHTTPRequestHandler
from typing import Any, Coroutine, Optional
from urllib.parse import parse_qs, urlparse

from marketplace.utils.logging_config import LoggingConfig


def run_async(coro: Coroutine) -> Any:
    """Run a coroutine to completion from a synchronous handler."""
    return asyncio.run(coro)


def query_params(path: str) -> dict[str, list[str]]:
    """Query string of a request path; repeated keys keep every value."""
    return parse_qs(urlparse(path).query, keep_blank_values=True)


def request_correlation_id(request: BaseHTTPRequestHandler) -> Optional[str]:
    return request.headers.get(LoggingConfig.LOG_CORRELATION_ID_HEADER)


def send_json(
    request: BaseHTTPRequestHandler,
    status: int,
    payload: Any,
    correlation_id: Optional[str] = None,
) -> None:
    """Write a JSON response."""
    request.send_response(status)
    request.send_header('Content-Type', 'application/json')
    if correlation_id:
        request.send_header(LoggingConfig.LOG_CORRELATION_ID_HEADER, correlation_id)
    request.end_headers()
    request.wfile.write(json.dumps(payload).encode('utf-8'))
