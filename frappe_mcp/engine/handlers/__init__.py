"""Tool handlers for the Frappe MCP engine.

This package contains tool handlers organized by domain:
- document: Document CRUD, listing, whitelisted method calls, bank reconciliation
- schema: DocType schema, field options, usage info
- helpers: Discovery, existence checks, counts, naming, API instructions

Each handler is a standalone async function that takes:
- params: the tool's validated *Params model
- ctx: HandlerContext - client, auth coordinator, hints, settings

And returns plain data or a ToolResult.
"""

from .base import HandlerContext, HandlerFunc, render_result
from .document import (
    handle_call_method,
    handle_create_document,
    handle_delete_document,
    handle_get_document,
    handle_list_documents,
    handle_reconcile,
    handle_update_document,
)
from .helpers import (
    handle_check_doctype_exists,
    handle_check_document_exists,
    handle_find_doctypes,
    handle_get_api_instructions,
    handle_get_doctypes_in_module,
    handle_get_document_count,
    handle_get_module_list,
    handle_get_naming_info,
    handle_get_required_fields,
    handle_ping,
)
from .schema import (
    handle_get_doctype_schema,
    handle_get_field_options,
    handle_get_frappe_usage_info,
)

__all__ = [
    # Base
    "HandlerContext",
    "HandlerFunc",
    "render_result",
    # Document handlers
    "handle_call_method",
    "handle_create_document",
    "handle_get_document",
    "handle_update_document",
    "handle_delete_document",
    "handle_list_documents",
    "handle_reconcile",
    # Schema handlers
    "handle_get_doctype_schema",
    "handle_get_field_options",
    "handle_get_frappe_usage_info",
    # Helper handlers
    "handle_ping",
    "handle_find_doctypes",
    "handle_get_module_list",
    "handle_get_doctypes_in_module",
    "handle_check_doctype_exists",
    "handle_check_document_exists",
    "handle_get_document_count",
    "handle_get_naming_info",
    "handle_get_required_fields",
    "handle_get_api_instructions",
]
