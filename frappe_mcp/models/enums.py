"""Enumeration types for the Frappe MCP server."""

from enum import StrEnum


class ToolName(StrEnum):
    """Available Frappe tools."""

    PING = "ping"
    CALL_METHOD = "call_method"
    # Document operations
    CREATE_DOCUMENT = "create_document"
    GET_DOCUMENT = "get_document"
    UPDATE_DOCUMENT = "update_document"
    DELETE_DOCUMENT = "delete_document"
    LIST_DOCUMENTS = "list_documents"
    RECONCILE_BANK_TRANSACTION = "reconcile_bank_transaction_with_vouchers"
    # Schema operations
    GET_DOCTYPE_SCHEMA = "get_doctype_schema"
    GET_FIELD_OPTIONS = "get_field_options"
    GET_FRAPPE_USAGE_INFO = "get_frappe_usage_info"
    # Helpers
    FIND_DOCTYPES = "find_doctypes"
    GET_MODULE_LIST = "get_module_list"
    GET_DOCTYPES_IN_MODULE = "get_doctypes_in_module"
    CHECK_DOCTYPE_EXISTS = "check_doctype_exists"
    CHECK_DOCUMENT_EXISTS = "check_document_exists"
    GET_DOCUMENT_COUNT = "get_document_count"
    GET_NAMING_INFO = "get_naming_info"
    GET_REQUIRED_FIELDS = "get_required_fields"
    GET_API_INSTRUCTIONS = "get_api_instructions"


class InstructionCategory(StrEnum):
    """Sections of the built-in API instruction catalogue."""

    DOCUMENT_OPERATIONS = "DOCUMENT_OPERATIONS"
    SCHEMA_OPERATIONS = "SCHEMA_OPERATIONS"
    ADVANCED_OPERATIONS = "ADVANCED_OPERATIONS"
    BEST_PRACTICES = "BEST_PRACTICES"


class HintType(StrEnum):
    """Kinds of static usage hints."""

    DOCTYPE = "doctype"
    WORKFLOW = "workflow"
