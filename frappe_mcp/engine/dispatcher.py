"""Tool registry and dispatcher.

The registry maps tool names to :class:`ToolSpec` descriptors and is built once
at startup. :meth:`ToolDispatcher.dispatch` is the error boundary: whatever
happens inside a handler, the caller gets a :class:`ToolResult`.
"""

import json
import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ValidationError

from ..errors import BackendError, FrappeMCPError, ToolArgumentError, UnknownToolError
from ..mcp.tool_defs import get_tool_definition
from ..models import (
    ApiInstructionsParams,
    CallMethodParams,
    CreateDocumentParams,
    DeleteDocumentParams,
    DocTypeParams,
    DocumentCountParams,
    DocumentRefParams,
    EmptyParams,
    FieldOptionsParams,
    FindDoctypesParams,
    GetDocumentParams,
    ListDocumentsParams,
    ModuleParams,
    ReconcileParams,
    ToolName,
    ToolResult,
    UpdateDocumentParams,
    UsageInfoParams,
)
from .handlers import (
    HandlerContext,
    HandlerFunc,
    handle_call_method,
    handle_check_doctype_exists,
    handle_check_document_exists,
    handle_create_document,
    handle_delete_document,
    handle_find_doctypes,
    handle_get_api_instructions,
    handle_get_doctype_schema,
    handle_get_doctypes_in_module,
    handle_get_document,
    handle_get_document_count,
    handle_get_field_options,
    handle_get_frappe_usage_info,
    handle_get_module_list,
    handle_get_naming_info,
    handle_get_required_fields,
    handle_list_documents,
    handle_ping,
    handle_reconcile,
    handle_update_document,
    render_result,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    """Everything needed to advertise and run one tool."""

    name: str
    description: str
    params_model: type[BaseModel]
    handler: HandlerFunc
    input_schema: dict = field(default_factory=lambda: {"type": "object", "properties": {}})
    # Prefix used when a handler returns a bare list
    list_label: str = "Documents retrieved"

    def definition(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


class ToolRegistry:
    """Name -> ToolSpec lookup, in registration order."""

    def __init__(self, specs: Iterable[ToolSpec] = ()):
        self._specs: dict[str, ToolSpec] = {}
        for spec in specs:
            self.register(spec)

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._specs:
            raise ValueError(f"Tool already registered: {spec.name}")
        self._specs[spec.name] = spec

    def get(self, name: str) -> ToolSpec:
        try:
            return self._specs[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def names(self) -> list[str]:
        return list(self._specs)

    def definitions(self) -> list[dict]:
        return [spec.definition() for spec in self._specs.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)


def _spec(
    name: ToolName,
    params_model: type[BaseModel],
    handler: HandlerFunc,
    list_label: str | None = None,
) -> ToolSpec:
    definition = get_tool_definition(name.value)
    if definition is None:
        raise ValueError(f"No tool definition for {name.value}")
    extra = {"list_label": list_label} if list_label else {}
    return ToolSpec(
        name=name.value,
        description=definition["description"],
        params_model=params_model,
        handler=handler,
        input_schema=definition["inputSchema"],
        **extra,
    )


def build_registry() -> ToolRegistry:
    """Register every tool this server exposes."""
    return ToolRegistry(
        [
            _spec(ToolName.PING, EmptyParams, handle_ping),
            _spec(ToolName.CALL_METHOD, CallMethodParams, handle_call_method, "Results returned"),
            # Documents
            _spec(ToolName.CREATE_DOCUMENT, CreateDocumentParams, handle_create_document),
            _spec(ToolName.GET_DOCUMENT, GetDocumentParams, handle_get_document),
            _spec(ToolName.UPDATE_DOCUMENT, UpdateDocumentParams, handle_update_document),
            _spec(ToolName.DELETE_DOCUMENT, DeleteDocumentParams, handle_delete_document),
            _spec(ToolName.LIST_DOCUMENTS, ListDocumentsParams, handle_list_documents),
            _spec(ToolName.RECONCILE_BANK_TRANSACTION, ReconcileParams, handle_reconcile),
            # Schema
            _spec(ToolName.GET_DOCTYPE_SCHEMA, DocTypeParams, handle_get_doctype_schema),
            _spec(ToolName.GET_FIELD_OPTIONS, FieldOptionsParams, handle_get_field_options),
            _spec(ToolName.GET_FRAPPE_USAGE_INFO, UsageInfoParams, handle_get_frappe_usage_info),
            # Helpers
            _spec(
                ToolName.FIND_DOCTYPES, FindDoctypesParams, handle_find_doctypes, "DocTypes found"
            ),
            _spec(ToolName.GET_MODULE_LIST, EmptyParams, handle_get_module_list, "Modules found"),
            _spec(
                ToolName.GET_DOCTYPES_IN_MODULE,
                ModuleParams,
                handle_get_doctypes_in_module,
                "DocTypes found",
            ),
            _spec(ToolName.CHECK_DOCTYPE_EXISTS, DocTypeParams, handle_check_doctype_exists),
            _spec(ToolName.CHECK_DOCUMENT_EXISTS, DocumentRefParams, handle_check_document_exists),
            _spec(ToolName.GET_DOCUMENT_COUNT, DocumentCountParams, handle_get_document_count),
            _spec(ToolName.GET_NAMING_INFO, DocTypeParams, handle_get_naming_info),
            _spec(
                ToolName.GET_REQUIRED_FIELDS,
                DocTypeParams,
                handle_get_required_fields,
                "Required fields",
            ),
            _spec(
                ToolName.GET_API_INSTRUCTIONS, ApiInstructionsParams, handle_get_api_instructions
            ),
        ]
    )


# ============ ARGUMENT VALIDATION ============


def _loc(error: dict) -> str:
    return ".".join(str(part) for part in error["loc"])


def describe_validation_error(tool: str, error: ValidationError) -> tuple[str, list[str]]:
    """Summarize a pydantic ValidationError as (message, offending field names)."""
    missing = [_loc(e) for e in error.errors() if e["type"] == "missing"]
    invalid = [e for e in error.errors() if e["type"] != "missing"]

    parts = []
    if missing:
        parts.append(f"Missing required parameter(s) for {tool}: {', '.join(missing)}")
    if invalid:
        details = "; ".join(
            f"{_loc(e)}: {e['msg']}" if e["loc"] else e["msg"] for e in invalid
        )
        parts.append(f"Invalid parameter(s) for {tool}: {details}")

    fields = missing + [_loc(e) for e in invalid if e["loc"]]
    return ". ".join(parts), fields


# ============ DISPATCH ============


class ToolDispatcher:
    """Validates, routes and normalizes tool calls."""

    def __init__(self, registry: ToolRegistry, ctx: HandlerContext):
        self.registry = registry
        self.ctx = ctx

    def _validate(self, spec: ToolSpec, arguments: Any) -> BaseModel:
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise ToolArgumentError(
                f"Arguments for {spec.name} must be an object, got {type(arguments).__name__}"
            )
        try:
            return spec.params_model.model_validate(dict(arguments))
        except ValidationError as e:
            message, fields = describe_validation_error(spec.name, e)
            raise ToolArgumentError(message, fields=fields) from e

    async def dispatch(self, name: str, arguments: Any = None) -> ToolResult:
        """Run one tool call. Never raises for handled or unexpected failures."""
        try:
            spec = self.registry.get(name)
            params = self._validate(spec, arguments)
            logger.info(f"Routing tool call: {name}")
            result = await spec.handler(params, self.ctx)
            return render_result(result, spec.list_label)
        except BackendError as e:
            logger.warning(f"Backend error in {name}: {e.message}")
            return backend_error_result(name, e)
        except FrappeMCPError as e:
            logger.warning(f"Tool {name} failed: {e.message}")
            return ToolResult.error(e.message)
        except Exception as e:
            logger.error(f"Error handling tool {name}: {e}", exc_info=True)
            return ToolResult.error(f"Error handling tool {name}: {e}")


def backend_error_result(tool: str, error: BackendError) -> ToolResult:
    """Two blocks: a readable message, then the structured details."""
    message = f"Error in {tool}: {error.message}"
    if error.status_code is not None:
        message += f" (HTTP {error.status_code})"
    details = json.dumps(error.to_dict(), indent=2, default=str)
    return ToolResult.error(message, f"Details: {details}")
