"""Request models (Pydantic *Params classes) for the Frappe MCP server.

Each tool validates its ``arguments`` against one of these before any
backend call. Unknown keys are ignored.
"""

from typing import Annotated, Any

from pydantic import BaseModel, Field, model_validator

NonEmptyStr = Annotated[str, Field(min_length=1)]

# Mapping of field -> value / [operator, value], or a list of triples.
FilterArg = dict[str, Any] | list[Any] | None


# ============ GENERIC ============


class EmptyParams(BaseModel):
    """Parameters for tools that take no arguments (ping, get_module_list)."""


class CallMethodParams(BaseModel):
    """Parameters for call_method tool."""

    method: NonEmptyStr = Field(..., description="Whitelisted method path")
    params: dict[str, Any] | None = Field(default=None, description="Method arguments")


# ============ DOCUMENT PARAMS ============


class CreateDocumentParams(BaseModel):
    """Parameters for create_document tool."""

    doctype: NonEmptyStr = Field(..., description="DocType name")
    values: dict[str, Any] = Field(..., description="Field values for the new document")


class GetDocumentParams(BaseModel):
    """Parameters for get_document tool."""

    doctype: NonEmptyStr = Field(..., description="DocType name")
    name: NonEmptyStr = Field(..., description="Document name")
    fields: list[str] | None = Field(default=None, description="Fields to return")


class UpdateDocumentParams(BaseModel):
    """Parameters for update_document tool."""

    doctype: NonEmptyStr = Field(..., description="DocType name")
    name: NonEmptyStr = Field(..., description="Document name")
    values: dict[str, Any] = Field(..., description="Field values to update")


class DeleteDocumentParams(BaseModel):
    """Parameters for delete_document tool."""

    doctype: NonEmptyStr = Field(..., description="DocType name")
    name: NonEmptyStr = Field(..., description="Document name")


class ListDocumentsParams(BaseModel):
    """Parameters for list_documents tool."""

    doctype: NonEmptyStr = Field(..., description="DocType name")
    filters: FilterArg = Field(default=None, description="Filter expression")
    fields: list[str] | None = Field(default=None, description="Fields to return")
    limit: int | None = Field(default=None, ge=1, description="Maximum number of documents")
    order_by: str | None = Field(default=None, description="Order clause, e.g. 'creation desc'")
    limit_start: int | None = Field(default=None, ge=0, description="Pagination offset")


class VoucherParams(BaseModel):
    """One payment voucher to match against a bank transaction."""

    payment_doctype: NonEmptyStr = Field(..., description="Voucher DocType, e.g. Payment Entry")
    payment_name: NonEmptyStr = Field(..., description="Voucher document name")
    amount: float = Field(..., description="Amount to allocate")


class ReconcileParams(BaseModel):
    """Parameters for reconcile_bank_transaction_with_vouchers tool."""

    bank_transaction_name: NonEmptyStr = Field(..., description="Bank Transaction name")
    vouchers: list[VoucherParams] = Field(..., min_length=1, description="Vouchers to allocate")


# ============ SCHEMA PARAMS ============


class DocTypeParams(BaseModel):
    """Parameters for tools that take a single DocType name."""

    doctype: NonEmptyStr = Field(..., description="DocType name")


class FieldOptionsParams(BaseModel):
    """Parameters for get_field_options tool."""

    doctype: NonEmptyStr = Field(..., description="DocType name")
    fieldname: NonEmptyStr = Field(..., description="Field name")
    filters: FilterArg = Field(default=None, description="Filters for the linked DocType")


class UsageInfoParams(BaseModel):
    """Parameters for get_frappe_usage_info tool."""

    doctype: str | None = Field(default=None, description="DocType name")
    workflow: str | None = Field(default=None, description="Workflow name")

    @model_validator(mode="after")
    def require_target(self) -> "UsageInfoParams":
        if not self.doctype and not self.workflow:
            raise ValueError("either doctype or workflow must be provided")
        return self


# ============ HELPER PARAMS ============


class FindDoctypesParams(BaseModel):
    """Parameters for find_doctypes tool."""

    search_term: str = Field(default="", description="Substring of the DocType name")
    module: str | None = Field(default=None, description="Module filter")
    is_table: bool | None = Field(default=None, description="Only child tables")
    is_single: bool | None = Field(default=None, description="Only single DocTypes")
    is_custom: bool | None = Field(default=None, description="Only custom DocTypes")
    limit: int = Field(default=20, ge=1, description="Maximum number of results")


class ModuleParams(BaseModel):
    """Parameters for get_doctypes_in_module tool."""

    module: NonEmptyStr = Field(..., description="Module name")


class DocumentRefParams(BaseModel):
    """Parameters for check_document_exists tool."""

    doctype: NonEmptyStr = Field(..., description="DocType name")
    name: NonEmptyStr = Field(..., description="Document name")


class DocumentCountParams(BaseModel):
    """Parameters for get_document_count tool."""

    doctype: NonEmptyStr = Field(..., description="DocType name")
    filters: FilterArg = Field(default=None, description="Filter expression")


class ApiInstructionsParams(BaseModel):
    """Parameters for get_api_instructions tool."""

    category: NonEmptyStr = Field(..., description="Instruction category")
    operation: NonEmptyStr = Field(..., description="Operation name")
