"""Helper tool handlers for discovery and quick checks.

Handles:
- ping
- find_doctypes, get_module_list, get_doctypes_in_module
- check_doctype_exists, check_document_exists
- get_document_count, get_naming_info, get_required_fields
- get_api_instructions
"""

import logging
from typing import Any

from ...errors import BackendError
from ...models import (
    ApiInstructionsParams,
    DocTypeParams,
    DocumentCountParams,
    DocumentRefParams,
    EmptyParams,
    FindDoctypesParams,
    ModuleParams,
)
from ..core.filters import normalize_filters
from ..core.instructions import get_instructions
from ..core.schema import get_doctype_schema, naming_info, required_fields
from .base import HandlerContext

logger = logging.getLogger(__name__)

MODULE_LIST_LIMIT = 100
MODULE_DOCTYPES_LIMIT = 100


async def handle_ping(params: EmptyParams, ctx: HandlerContext) -> str:
    return "pong"


# ============ DISCOVERY ============


async def handle_find_doctypes(params: FindDoctypesParams, ctx: HandlerContext) -> list[dict]:
    filters: dict[str, Any] = {}
    if params.search_term:
        filters["name"] = ["like", f"%{params.search_term}%"]
    if params.module is not None:
        filters["module"] = params.module
    if params.is_table is not None:
        filters["istable"] = int(params.is_table)
    if params.is_single is not None:
        filters["issingle"] = int(params.is_single)
    if params.is_custom is not None:
        filters["custom"] = int(params.is_custom)

    return await ctx.client.get_list(
        "DocType",
        fields=["name", "module", "description", "istable", "issingle", "custom"],
        filters=normalize_filters(filters),
        limit=params.limit,
    )


async def handle_get_module_list(params: EmptyParams, ctx: HandlerContext) -> list[str]:
    modules = await ctx.client.get_list(
        "Module Def", fields=["name", "module_name"], limit=MODULE_LIST_LIMIT
    )
    return [m.get("name") or m.get("module_name") for m in modules]


async def handle_get_doctypes_in_module(params: ModuleParams, ctx: HandlerContext) -> list[dict]:
    return await ctx.client.get_list(
        "DocType",
        fields=["name", "description", "istable", "issingle", "custom"],
        filters=normalize_filters({"module": params.module}),
        limit=MODULE_DOCTYPES_LIMIT,
    )


# ============ CHECKS ============


async def handle_check_doctype_exists(params: DocTypeParams, ctx: HandlerContext) -> dict:
    try:
        await get_doctype_schema(ctx.client, params.doctype)
    except BackendError as e:
        if e.is_not_found:
            return {"exists": False}
        raise
    return {"exists": True}


async def handle_check_document_exists(params: DocumentRefParams, ctx: HandlerContext) -> dict:
    try:
        await ctx.client.get_doc(params.doctype, params.name)
    except BackendError as e:
        if e.is_not_found:
            return {"exists": False}
        raise
    return {"exists": True}


async def handle_get_document_count(params: DocumentCountParams, ctx: HandlerContext) -> dict:
    count = await ctx.client.get_count(params.doctype, normalize_filters(params.filters))
    return {"count": count}


# ============ SCHEMA SHORTCUTS ============


async def handle_get_naming_info(params: DocTypeParams, ctx: HandlerContext) -> dict:
    schema = await get_doctype_schema(ctx.client, params.doctype)
    return naming_info(schema)


async def handle_get_required_fields(params: DocTypeParams, ctx: HandlerContext) -> list[dict]:
    schema = await get_doctype_schema(ctx.client, params.doctype)
    return required_fields(schema)


async def handle_get_api_instructions(params: ApiInstructionsParams, ctx: HandlerContext) -> str:
    return get_instructions(params.category, params.operation)
