"""Schema tool handlers.

Handles:
- get_doctype_schema: Normalized schema with a summary
- get_field_options: Values of a Link or Select field
- get_frappe_usage_info: Markdown guide built from app instructions, static
  hints and the schema
"""

import json
import logging
from typing import Any

from ...errors import BackendError
from ...models import DocTypeParams, FieldOptionsParams, ToolResult, UsageInfoParams
from ..core.filters import normalize_filters
from ..core.hints import Hint
from ..core.introspection import get_app_for_doctype, get_usage_instructions
from ..core.schema import get_doctype_schema, get_field_options, summarize_schema
from .base import HandlerContext, to_json

logger = logging.getLogger(__name__)


async def handle_get_doctype_schema(params: DocTypeParams, ctx: HandlerContext) -> ToolResult:
    schema = await get_doctype_schema(ctx.client, params.doctype)
    summary = summarize_schema(schema)
    return ToolResult.text(
        f"Schema Summary:\n{to_json(summary)}\n\nFull Schema:\n{to_json(schema)}"
    )


async def handle_get_field_options(params: FieldOptionsParams, ctx: HandlerContext) -> ToolResult:
    filters = normalize_filters(params.filters)
    field, options = await get_field_options(
        ctx.client, params.doctype, params.fieldname, filters or None
    )
    return ToolResult.text(
        f"Field Information:\n{to_json(field)}\n\n"
        f"Available Options ({len(options)}):\n{to_json(options)}"
    )


# ============ USAGE INFO ============


def _numbered(items: list[str]) -> str:
    return "".join(f"{i}. {item}\n" for i, item in enumerate(items, start=1))


def _app_instructions_section(instructions: dict[str, Any]) -> str:
    body = instructions.get("instructions") or {}
    text = "## App-Provided Usage Information\n\n"
    if body.get("description"):
        text += f"### Description\n\n{body['description']}\n\n"
    if body.get("usage_guidance"):
        text += f"### Usage Guidance\n\n{body['usage_guidance']}\n\n"
    if body.get("key_fields"):
        text += "### Key Fields\n\n"
        for field in body["key_fields"]:
            text += f"- **{field.get('name')}**: {field.get('description', '')}\n"
        text += "\n"
    if body.get("common_workflows"):
        text += "### Common Workflows\n\n" + _numbered(body["common_workflows"]) + "\n"
    return text


def _schema_section(schema: dict[str, Any]) -> str:
    summary = summarize_schema(schema)
    yes_no = {True: "Yes", False: "No"}
    return (
        "## Schema Summary\n\n"
        f"- **Module**: {summary['module']}\n"
        f"- **Is Single**: {yes_no[summary['isSingle']]}\n"
        f"- **Is Table**: {yes_no[summary['isTable']]}\n"
        f"- **Is Custom**: {yes_no[summary['isCustom']]}\n"
        f"- **Field Count**: {summary['fieldCount']}\n"
        f"- **Field Types**: {json.dumps(summary['fieldTypes'])}\n"
        f"- **Required Fields**: {', '.join(summary['requiredFields'])}\n\n"
    )


def _workflow_section(workflows: list[Hint]) -> str:
    text = "## Related Workflows\n\n"
    for workflow in workflows:
        text += f"### {workflow.target}\n\n"
        if workflow.description:
            text += f"{workflow.description}\n\n"
        if workflow.steps:
            text += "Steps:\n" + _numbered(workflow.steps) + "\n"
    return text


async def _doctype_usage(doctype: str, ctx: HandlerContext) -> str:
    text = f"# DocType: {doctype}\n\n"

    schema = None
    schema_error = None
    try:
        schema = await get_doctype_schema(ctx.client, doctype)
    except BackendError as e:
        logger.warning(f"Error getting schema for DocType {doctype}: {e.message}")
        schema_error = f"Error retrieving schema: {e.message}"

    app = await get_app_for_doctype(ctx.client, doctype)
    doctype_instructions = None
    app_instructions = None
    if app:
        doctype_instructions = await get_usage_instructions(ctx.client, app, doctype)
        if not doctype_instructions:
            app_instructions = await get_usage_instructions(ctx.client, app)

    if doctype_instructions:
        text += _app_instructions_section(doctype_instructions)

    hints = ctx.hints.for_doctype(doctype)
    if hints:
        text += "## Static Hints\n\n" + "".join(f"{h.hint}\n\n" for h in hints)

    if app_instructions:
        text += f"## About {app}\n\n"
        if app_instructions.get("app_description"):
            text += f"{app_instructions['app_description']}\n\n"
        text += f'The DocType "{doctype}" is part of the {app} app.\n\n'

    if schema is not None:
        text += _schema_section(schema)
    elif schema_error:
        text += f"## Schema Error\n\n{schema_error}\n\n"

    workflows = ctx.hints.workflows_for_doctype(doctype)
    if workflows:
        text += _workflow_section(workflows)
    return text


def _workflow_usage(workflow: str, ctx: HandlerContext) -> str:
    text = f"# Workflow: {workflow}\n\n"
    hints = ctx.hints.for_workflow(workflow)
    if not hints:
        return text + "No workflow information available.\n"

    for hint in hints:
        if hint.description:
            text += f"## Description\n\n{hint.description}\n\n"
        if hint.steps:
            text += "## Steps\n\n" + _numbered(hint.steps) + "\n"
        if hint.related_doctypes:
            text += "## Related DocTypes\n\n" + ", ".join(hint.related_doctypes) + "\n\n"
    return text


async def handle_get_frappe_usage_info(params: UsageInfoParams, ctx: HandlerContext) -> ToolResult:
    if params.doctype:
        text = await _doctype_usage(params.doctype, ctx)
    else:
        text = _workflow_usage(params.workflow, ctx)
    return ToolResult.text(text)
