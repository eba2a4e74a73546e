"""Test helper functions."""

import json
from io import BytesIO
from typing import Any, Dict, Optional
from unittest.mock import MagicMock, Mock


def make_request_handler(handler_cls, path: str, headers: Optional[Dict[str, str]] = None):
    """Build a serverless handler instance without a socket."""
    h = handler_cls.__new__(handler_cls)
    h.path = path
    h.headers = headers or {}
    h.wfile = BytesIO()
    h.send_response = Mock()
    h.send_header = Mock()
    h.end_headers = Mock()
    return h


def response_json(h) -> Dict[str, Any]:
    """Decode the JSON body written by a handler."""
    h.wfile.seek(0)
    return json.loads(h.wfile.read().decode('utf-8'))


def response_status(h) -> int:
    return h.send_response.call_args[0][0]


def mock_postgrest_query(data=None, count=None) -> MagicMock:
    """A chainable PostgREST request builder whose execute() returns data/count."""
    query = MagicMock()
    for method in ("select", "eq", "ilike", "or_", "gte", "lte", "contains",
                   "order", "range", "limit", "update"):
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=data if data is not None else [], count=count)
    return query


def mock_supabase_with_query(query: MagicMock) -> MagicMock:
    client = MagicMock()
    client.table.return_value = query
    return client
