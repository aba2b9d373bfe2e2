"""
Unit tests for Frappe error conversion
"""
import json

import httpx
import pytest

from frappe_mcp.errors import (
    AuthenticationError,
    BackendError,
    describe_payload,
    parse_server_messages,
)


def _response(status: int, body=None, text: str | None = None) -> httpx.Response:
    request = httpx.Request("GET", "http://frappe.test/api/resource/ToDo")
    if text is not None:
        return httpx.Response(status, text=text, request=request)
    return httpx.Response(status, json=body, request=request)


class TestParseServerMessages:
    """Decoding of the doubly-encoded _server_messages field"""

    def test_json_list_of_json_strings(self):
        raw = json.dumps([json.dumps({"message": "Value missing for: Title"}), json.dumps("plain")])
        assert parse_server_messages(raw) == [{"message": "Value missing for: Title"}, "plain"]

    def test_non_json_string_kept(self):
        assert parse_server_messages("not json") == ["not json"]

    def test_scalar_wrapped(self):
        assert parse_server_messages(5) == [5]


class TestFromResponse:
    """Conversion of non-2xx responses"""

    def test_exception_field_wins(self):
        error = BackendError.from_response(
            _response(417, {"exception": "ValidationError: bad", "message": "ignored"}),
            "create_document(ToDo)",
        )
        assert error.message == (
            "Frappe exception during create_document(ToDo): ValidationError: bad"
        )
        assert error.status_code == 417
        assert error.endpoint == "http://frappe.test/api/resource/ToDo"
        assert error.details["exception"] == "ValidationError: bad"

    def test_exception_keeps_server_messages(self):
        raw = json.dumps([json.dumps({"message": "Subject is mandatory"})])
        error = BackendError.from_response(
            _response(417, {"exception": "MandatoryError: subject", "_server_messages": raw}),
            "create_document(ToDo)",
        )

        assert error.message == (
            "Frappe exception during create_document(ToDo): MandatoryError: subject. "
            "Server messages: Subject is mandatory"
        )
        assert error.details["serverMessages"] == [{"message": "Subject is mandatory"}]
        assert error.details["exception"] == "MandatoryError: subject"

    def test_server_messages_are_joined(self):
        raw = json.dumps([json.dumps({"message": "First"}), json.dumps({"message": "Second"})])
        error = BackendError.from_response(_response(417, {"_server_messages": raw}), "op")
        assert error.message == "Frappe server message during op: First; Second"
        assert error.details == {"serverMessages": [{"message": "First"}, {"message": "Second"}]}

    def test_message_field(self):
        error = BackendError.from_response(_response(500, {"message": "Boom"}), "op")
        assert error.message == "Frappe API error during op: Boom"

    def test_non_json_body(self):
        error = BackendError.from_response(_response(502, text="<html>gateway</html>"), "op")
        assert "HTTP 502" in error.message
        assert error.details == {"body": "<html>gateway</html>"}

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_statuses_become_authentication_error(self, status):
        error = BackendError.from_response(
            _response(status, {"exc_type": "AuthenticationError"}), "list_documents(ToDo)"
        )
        assert isinstance(error, AuthenticationError)
        assert error.message.startswith("Authentication failed during list_documents(ToDo)")
        assert error.details["status"] == status
        assert error.details["exc_type"] == "AuthenticationError"

    def test_to_dict(self):
        error = BackendError("x", status_code=500, endpoint="/e", details={"a": 1})
        assert error.to_dict() == {"statusCode": 500, "endpoint": "/e", "details": {"a": 1}}


class TestNotFound:
    """Recognition of missing-document errors"""

    def test_404_status(self):
        assert BackendError("anything", status_code=404).is_not_found

    @pytest.mark.parametrize(
        "message",
        ["ToDo abc not found", "DocType X does not exist", "frappe.DoesNotExistError"],
    )
    def test_message_markers(self, message):
        assert BackendError(message, status_code=417).is_not_found

    def test_other_errors(self):
        assert not BackendError("Internal error", status_code=500).is_not_found


class TestFromHttpxError:
    """Conversion of transport failures"""

    def test_timeout(self):
        request = httpx.Request("GET", "http://frappe.test/api/resource/ToDo")
        error = BackendError.from_httpx_error(httpx.ReadTimeout("slow", request=request), "op")
        assert error.message == "Network error during op: request timed out"
        assert error.status_code is None
        assert error.details == {"error": "Network error", "type": "ReadTimeout"}

    def test_status_error_uses_response(self):
        response = _response(500, {"message": "Boom"})
        status_error = httpx.HTTPStatusError("500", request=response.request, response=response)
        error = BackendError.from_httpx_error(status_error, "op")
        assert error.status_code == 500
        assert error.message == "Frappe API error during op: Boom"


class TestDescribePayload:
    """Short summaries of error bodies"""

    def test_empty(self):
        assert describe_payload({}) is None

    def test_exception(self):
        assert describe_payload({"exception": "E"}) == "E"
