"""
Query outcome taxonomy shared by every Chorus service.

Store operations never raise to the HTTP layer. They return a
``QueryStatus`` carrying one of three results, which ``build_response``
maps onto the JSON envelope and HTTP code:

    OK             -> 200, ``data`` attached when present
    NOT_FOUND      -> 404
    GENERIC_ERROR  -> 500
"""

from enum import Enum
from typing import Any, Optional

from flask import jsonify


class QueryResult(Enum):
    """Outcome of a single store operation."""

    OK = 'OK'
    NOT_FOUND = 'NOT_FOUND'
    GENERIC_ERROR = 'INTERNAL_SERVER_ERROR'

    @property
    def http_code(self) -> int:
        return _HTTP_CODES[self]


_HTTP_CODES = {
    QueryResult.OK: 200,
    QueryResult.NOT_FOUND: 404,
    QueryResult.GENERIC_ERROR: 500,
}


class QueryStatus:
    """Message, result and optional payload of a store operation."""

    def __init__(self, message: str, result: QueryResult, data: Any = None):
        self.message = message
        self.result = result
        self.data = data

    @property
    def ok(self) -> bool:
        return self.result is QueryResult.OK

    def __repr__(self):
        return f'<QueryStatus {self.message!r} {self.result.name}>'


def build_response(status: QueryStatus, path: Optional[str] = None, include_message: bool = False):
    """Serialize a QueryStatus into a (json, http_code) tuple for Flask."""
    body = {'status': status.result.value}
    if path:
        body['path'] = path
    if include_message:
        body['message'] = status.message
    if status.result is QueryResult.OK and status.data is not None:
        body['data'] = status.data
    return jsonify(body), status.result.http_code
