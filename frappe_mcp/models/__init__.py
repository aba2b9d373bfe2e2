"""Pydantic models for Frappe MCP server requests and results.

    from frappe_mcp.models import ToolName, ToolResult
    from frappe_mcp.models.requests import ListDocumentsParams
"""

# ============ ENUMS ============
from .enums import HintType, InstructionCategory, ToolName

# ============ REQUEST MODELS ============
from .requests import (
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
    UpdateDocumentParams,
    UsageInfoParams,
    VoucherParams,
)

# ============ RESULT MODELS ============
from .results import ContentBlock, HealthResponse, HealthStatus, InfoResponse, ToolResult

__all__ = [
    # Enums
    "HintType",
    "InstructionCategory",
    "ToolName",
    # Requests
    "ApiInstructionsParams",
    "CallMethodParams",
    "CreateDocumentParams",
    "DeleteDocumentParams",
    "DocTypeParams",
    "DocumentCountParams",
    "DocumentRefParams",
    "EmptyParams",
    "FieldOptionsParams",
    "FindDoctypesParams",
    "GetDocumentParams",
    "ListDocumentsParams",
    "ModuleParams",
    "ReconcileParams",
    "UpdateDocumentParams",
    "UsageInfoParams",
    "VoucherParams",
    # Results
    "ContentBlock",
    "HealthResponse",
    "HealthStatus",
    "InfoResponse",
    "ToolResult",
]
