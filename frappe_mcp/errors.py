"""Error types shared by the client, the auth coordinator and the dispatcher.

Every failure a tool call can hit is one of these; the dispatcher turns all of
them into an ``isError`` tool result.
"""

import json
from typing import Any

import httpx


class FrappeMCPError(Exception):
    """Base class for all handled errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CredentialError(FrappeMCPError):
    """A required credential is not configured. Raised before any network call."""

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = missing or []


CREDENTIAL_ENV_VARS = {"api_key": "FRAPPE_API_KEY", "api_secret": "FRAPPE_API_SECRET"}


def missing_credentials_message(missing: list[str]) -> str:
    """Name exactly which half of the token credential is missing."""
    env_vars = " and ".join(CREDENTIAL_ENV_VARS[name] for name in missing)
    if len(missing) > 1:
        return (
            "Authentication failed: Both API key and API secret are missing. "
            f"Set {env_vars}."
        )
    label = "API key" if missing == ["api_key"] else "API secret"
    return f"Authentication failed: {label} is missing. Set {env_vars}."


class ToolArgumentError(FrappeMCPError):
    """Tool arguments are missing or malformed."""

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = fields or []


class FilterError(ToolArgumentError):
    """A filter expression has an unsupported shape."""


class UnknownToolError(FrappeMCPError):
    """No handler is registered under the requested tool name."""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class BackendError(FrappeMCPError):
    """A Frappe call failed: transport fault, non-2xx status or unreadable payload."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        endpoint: str | None = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint
        self.details = details

    @property
    def is_not_found(self) -> bool:
        if self.status_code == 404:
            return True
        text = self.message.lower()
        return "not found" in text or "does not exist" in text or "doesnotexisterror" in text

    def to_dict(self) -> dict[str, Any]:
        return {
            "statusCode": self.status_code,
            "endpoint": self.endpoint,
            "details": self.details,
        }

    @classmethod
    def from_response(cls, response: httpx.Response, operation: str) -> "BackendError":
        """Build an error from a non-2xx Frappe response.

        Frappe reports failures in a handful of body fields; the most specific
        one present wins: ``exception``, then ``_server_messages``, then
        ``message``. 401/403 always become :class:`AuthenticationError`.
        """
        status = response.status_code
        endpoint = _request_url(response)
        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            data = {"body": response.text[:500]} if response.text else {}

        if status in (401, 403):
            detail = describe_payload(data)
            message = f"Authentication failed during {operation}. Check API key/secret."
            if detail:
                message = f"{message} Frappe said: {detail}"
            return AuthenticationError(
                message,
                status_code=status,
                endpoint=endpoint,
                details={
                    "error": "Authentication Error",
                    "status": status,
                    "statusText": response.reason_phrase,
                    "exc_type": data.get("exc_type"),
                },
            )

        if data.get("exception"):
            message = f"Frappe exception during {operation}: {data['exception']}"
            details = {k: data[k] for k in ("exception", "exc_type", "message") if k in data}
            if data.get("_server_messages"):
                messages = parse_server_messages(data["_server_messages"])
                message += f". Server messages: {'; '.join(_message_text(m) for m in messages)}"
                details["serverMessages"] = messages
        elif data.get("_server_messages"):
            messages = parse_server_messages(data["_server_messages"])
            joined = "; ".join(_message_text(m) for m in messages)
            message = f"Frappe server message during {operation}: {joined}"
            details = {"serverMessages": messages}
        elif data.get("message"):
            message = f"Frappe API error during {operation}: {data['message']}"
            details = data
        else:
            message = (
                f"Frappe API error during {operation}: HTTP {status} {response.reason_phrase}"
            )
            details = data or None

        return cls(message, status_code=status, endpoint=endpoint, details=details)

    @classmethod
    def from_httpx_error(cls, error: httpx.HTTPError, operation: str) -> "BackendError":
        """Convert any httpx failure into a BackendError."""
        if isinstance(error, httpx.HTTPStatusError):
            return cls.from_response(error.response, operation)

        endpoint = None
        try:
            endpoint = str(error.request.url)
        except RuntimeError:
            pass

        if isinstance(error, httpx.TimeoutException):
            message = f"Network error during {operation}: request timed out"
        else:
            message = f"Network error during {operation}: {error}"
        return cls(
            message,
            endpoint=endpoint,
            details={"error": "Network error", "type": type(error).__name__},
        )


class AuthenticationError(BackendError):
    """Frappe rejected the token or the login."""


def parse_server_messages(raw: Any) -> list[Any]:
    """Decode Frappe's ``_server_messages``: a JSON list of JSON-encoded messages."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return [raw]
    if not isinstance(raw, list):
        raw = [raw]

    parsed = []
    for item in raw:
        if isinstance(item, str):
            try:
                item = json.loads(item)
            except ValueError:
                pass
        parsed.append(item)
    return parsed


def describe_payload(data: dict[str, Any]) -> str | None:
    """Short human-readable summary of a Frappe error body, if it has one."""
    if data.get("exception"):
        return str(data["exception"])
    if data.get("_server_messages"):
        messages = parse_server_messages(data["_server_messages"])
        return "; ".join(_message_text(m) for m in messages)
    if data.get("message"):
        return str(data["message"])
    return None


def _message_text(message: Any) -> str:
    if isinstance(message, dict):
        return str(message.get("message", json.dumps(message)))
    return str(message)


def _request_url(response: httpx.Response) -> str:
    try:
        return str(response.request.url)
    except RuntimeError:
        return "unknown"
