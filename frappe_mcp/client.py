"""Async REST client for the Frappe API.

Two channels share one base URL:

- token channel: every request carries ``Authorization: token <key>:<secret>``
- password channel: a cookie session opened by ``/api/method/login``

All httpx failures are converted to :class:`~frappe_mcp.errors.BackendError`
with the operation name attached, so callers only ever see our error types.
"""

import json
import logging
from typing import Any
from urllib.parse import quote

import httpx

from .config import Settings
from .errors import BackendError, CredentialError, missing_credentials_message

logger = logging.getLogger(__name__)


def _path_part(value: str) -> str:
    return quote(value, safe="")


class FrappeClient:
    """Thin async wrapper around the Frappe resource and method endpoints."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        api_secret: str | None = None,
        team_name: str = "",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._api_secret = api_secret

        headers = {"Accept": "application/json"}
        if team_name:
            headers["X-Press-Team"] = team_name

        self._token_client = httpx.AsyncClient(
            base_url=self.base_url, headers=headers, timeout=timeout, transport=transport
        )
        self._session_client = httpx.AsyncClient(
            base_url=self.base_url, headers=headers, timeout=timeout, transport=transport
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> "FrappeClient":
        return cls(
            settings.frappe_url,
            api_key=settings.frappe_api_key.get_secret_value() if settings.frappe_api_key else None,
            api_secret=(
                settings.frappe_api_secret.get_secret_value()
                if settings.frappe_api_secret
                else None
            ),
            team_name=settings.frappe_team_name,
            timeout=settings.frappe_timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._token_client.aclose()
        await self._session_client.aclose()

    # ============ LOW LEVEL ============

    def _token_header(self) -> dict[str, str]:
        missing = []
        if not self._api_key:
            missing.append("api_key")
        if not self._api_secret:
            missing.append("api_secret")
        if missing:
            raise CredentialError(missing_credentials_message(missing), missing=missing)
        return {"Authorization": f"token {self._api_key}:{self._api_secret}"}

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        session: bool = False,
    ) -> Any:
        if session:
            client, headers = self._session_client, {}
        else:
            client, headers = self._token_client, self._token_header()

        logger.debug(f"{method} {path} ({operation})")
        try:
            response = await client.request(
                method, path, params=params, json=json_body, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            error = BackendError.from_httpx_error(e, operation)
            logger.warning(f"{operation} failed: {error.message}")
            raise error from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(
                f"Invalid JSON response during {operation}",
                status_code=response.status_code,
                endpoint=str(response.request.url),
                details={"body": response.text[:200]},
            ) from e

    @staticmethod
    def _unwrap(payload: Any, key: str) -> Any:
        if isinstance(payload, dict) and key in payload:
            return payload[key]
        return payload

    # ============ RESOURCE API ============

    async def get_doc(self, doctype: str, name: str) -> dict[str, Any]:
        payload = await self._request(
            "GET",
            f"/api/resource/{_path_part(doctype)}/{_path_part(name)}",
            f"get_document({doctype}, {name})",
        )
        return self._unwrap(payload, "data")

    async def get_list(
        self,
        doctype: str,
        *,
        fields: list[str] | None = None,
        filters: list[Any] | None = None,
        order_by: str | None = None,
        limit: int | None = None,
        limit_start: int | None = None,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {}
        if fields:
            params["fields"] = json.dumps(fields)
        if filters:
            params["filters"] = json.dumps(filters)
        if order_by:
            params["order_by"] = order_by
        if limit is not None:
            params["limit_page_length"] = limit
        if limit_start is not None:
            params["limit_start"] = limit_start

        payload = await self._request(
            "GET",
            f"/api/resource/{_path_part(doctype)}",
            f"list_documents({doctype})",
            params=params,
        )
        data = self._unwrap(payload, "data")
        if not isinstance(data, list):
            raise BackendError(f"Invalid response format for listing {doctype}", details=payload)
        return data

    async def create_doc(self, doctype: str, values: dict[str, Any]) -> dict[str, Any]:
        payload = await self._request(
            "POST",
            f"/api/resource/{_path_part(doctype)}",
            f"create_document({doctype})",
            json_body=values,
        )
        return self._unwrap(payload, "data")

    async def update_doc(self, doctype: str, name: str, values: dict[str, Any]) -> dict[str, Any]:
        payload = await self._request(
            "PUT",
            f"/api/resource/{_path_part(doctype)}/{_path_part(name)}",
            f"update_document({doctype}, {name})",
            json_body=values,
        )
        return self._unwrap(payload, "data")

    async def delete_doc(self, doctype: str, name: str) -> Any:
        payload = await self._request(
            "DELETE",
            f"/api/resource/{_path_part(doctype)}/{_path_part(name)}",
            f"delete_document({doctype}, {name})",
        )
        return self._unwrap(payload, "message")

    # ============ METHOD API ============

    async def call_method(
        self, method: str, params: dict[str, Any] | None = None, *, http_method: str = "POST"
    ) -> Any:
        """Call a whitelisted server method and return its ``message``."""
        kwargs: dict[str, Any] = {}
        if http_method == "GET":
            kwargs["params"] = params or {}
        else:
            kwargs["json_body"] = params or {}
        payload = await self._request(
            http_method, f"/api/method/{method}", f"call_method({method})", **kwargs
        )
        return self._unwrap(payload, "message")

    async def get_count(self, doctype: str, filters: list[Any] | None = None) -> int:
        params: dict[str, Any] = {"doctype": doctype}
        if filters:
            params["filters"] = json.dumps(filters)
        payload = await self._request(
            "GET",
            "/api/method/frappe.client.get_count",
            f"get_document_count({doctype})",
            params=params,
        )
        return int(self._unwrap(payload, "message") or 0)

    async def get_doctype_meta(self, doctype: str) -> list[dict[str, Any]]:
        """Fetch DocType metadata; the first doc is the DocType itself."""
        payload = await self._request(
            "GET",
            "/api/method/frappe.desk.form.load.getdoctype",
            f"get_doctype_schema({doctype})",
            params={"doctype": doctype},
        )
        docs = self._unwrap(payload, "docs")
        if not isinstance(docs, list):
            raise BackendError(f"Invalid metadata response for DocType {doctype}", details=payload)
        return docs

    # ============ PASSWORD CHANNEL ============

    async def login(self, username: str, password: str) -> Any:
        """Open a cookie session with username/password. Raises on rejection."""
        return await self._request(
            "POST",
            "/api/method/login",
            "login",
            json_body={"usr": username, "pwd": password},
            session=True,
        )

    async def check_token_auth(self) -> None:
        """Minimal one-record read on the token channel."""
        await self.get_list("DocType", fields=["name"], limit=1)
