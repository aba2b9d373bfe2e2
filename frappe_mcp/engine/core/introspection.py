"""Usage instructions published by installed Frappe apps.

An app may whitelist ``<app>.api_usage.get_usage_instructions``; called with
a ``doctype`` it describes that DocType, called without it describes the app.
Everything here is best effort: a missing endpoint just means no instructions.
"""

import logging
from typing import Any

from ...client import FrappeClient
from ...errors import BackendError

logger = logging.getLogger(__name__)


async def get_app_for_doctype(client: FrappeClient, doctype: str) -> str | None:
    """Resolve DocType -> module -> app name."""
    try:
        doc = await client.get_doc("DocType", doctype)
        module = doc.get("module")
        if not module:
            return None
        module_def = await client.get_doc("Module Def", module)
    except BackendError as e:
        logger.debug(f"Could not resolve app for DocType {doctype}: {e.message}")
        return None
    return module_def.get("app_name") or None


async def get_usage_instructions(
    client: FrappeClient, app: str, doctype: str | None = None
) -> dict[str, Any] | None:
    params = {"doctype": doctype} if doctype else None
    try:
        instructions = await client.call_method(
            f"{app}.api_usage.get_usage_instructions", params
        )
    except BackendError as e:
        logger.debug(f"App {app} provides no usage instructions: {e.message}")
        return None
    return instructions if isinstance(instructions, dict) else None
