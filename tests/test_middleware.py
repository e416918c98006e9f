"""
Tests for request logging helpers
"""

from unittest.mock import MagicMock

from catalog.middleware import (
    MAX_REQUEST_ID_LENGTH,
    _client_request_id,
    _operation_from_query,
    sanitize_query_params,
)


def test_sanitize_query_params():
    params = {"page": "2", "access_token": "abc", "Authorization": "Bearer x"}

    assert sanitize_query_params(params) == {
        "page": "2",
        "access_token": "[REDACTED]",
        "Authorization": "[REDACTED]",
    }


def test_operation_from_named_query():
    assert _operation_from_query("query AllBooks { allBooks { title } }") == "AllBooks"


def test_operation_from_named_mutation():
    assert _operation_from_query("mutation AddBook { addBook }") == "mutation:AddBook"


def test_operation_from_anonymous_query():
    assert _operation_from_query("{ bookCount }") == "unnamed_operation"


def test_operation_from_introspection():
    assert _operation_from_query("query IntrospectionQuery { __schema { types { name } } }") == (
        "__introspection"
    )


def test_operation_from_missing_query():
    assert _operation_from_query(None) is None


def test_client_request_id_is_bounded():
    def request_with(value):
        return MagicMock(headers={"X-Request-ID": value} if value is not None else {})

    assert _client_request_id(request_with("trace-42")) == "trace-42"
    assert _client_request_id(request_with("x" * (MAX_REQUEST_ID_LENGTH + 1))) is None
    assert _client_request_id(request_with("bad\nid")) is None
    assert _client_request_id(request_with(None)) is None
