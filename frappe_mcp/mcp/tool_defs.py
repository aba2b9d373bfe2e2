"""MCP Tool Definitions for the Frappe MCP server.

This module contains all tool definitions returned by the tools/list method.
Each tool definition includes the schema for its input parameters.

Tool Categories:
    - Documents: create_document, get_document, update_document, delete_document, list_documents
    - Methods: call_method, reconcile_bank_transaction_with_vouchers
    - Schema: get_doctype_schema, get_field_options, get_frappe_usage_info
    - Discovery: find_doctypes, get_module_list, get_doctypes_in_module
    - Checks: check_doctype_exists, check_document_exists, get_document_count
    - Guidance: get_naming_info, get_required_fields, get_api_instructions
    - Utility: ping
"""

_FILTERS_SCHEMA = {
    "description": (
        "Filters as an object ({field: value} or {field: [operator, value]}) "
        "or a list of [field, operator, value] lists"
    ),
    "oneOf": [
        {"type": "object", "additionalProperties": True},
        {"type": "array", "items": {"type": "array"}},
    ],
}

_DOCTYPE = {"type": "string", "description": "DocType name"}


TOOL_DEFINITIONS: list[dict] = [
    # ============ Utility ============
    {
        "name": "ping",
        "description": "A simple tool to check if the server is responding.",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": "call_method",
        "description": "Execute a whitelisted Frappe method",
        "inputSchema": {
            "type": "object",
            "properties": {
                "method": {"type": "string", "description": "Method name to call (whitelisted)"},
                "params": {
                    "type": "object",
                    "description": "Parameters to pass to the method (optional)",
                    "additionalProperties": True,
                },
            },
            "required": ["method"],
        },
    },
    # ============ Document Tools ============
    {
        "name": "create_document",
        "description": (
            "Create a new document in Frappe. Required fields are checked against the "
            "DocType schema first; use get_required_fields to see them."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "doctype": _DOCTYPE,
                "values": {
                    "type": "object",
                    "description": "Document field values. Child tables are lists of row objects.",
                    "additionalProperties": True,
                },
            },
            "required": ["doctype", "values"],
        },
    },
    {
        "name": "get_document",
        "description": "Retrieve a document from Frappe",
        "inputSchema": {
            "type": "object",
            "properties": {
                "doctype": _DOCTYPE,
                "name": {"type": "string", "description": "Document name (case-sensitive)"},
                "fields": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Fields to include (optional, default all)",
                },
            },
            "required": ["doctype", "name"],
        },
    },
    {
        "name": "update_document",
        "description": "Update an existing document in Frappe",
        "inputSchema": {
            "type": "object",
            "properties": {
                "doctype": _DOCTYPE,
                "name": {"type": "string", "description": "Document name (case-sensitive)"},
                "values": {
                    "type": "object",
                    "description": "Field values to update",
                    "additionalProperties": True,
                },
            },
            "required": ["doctype", "name", "values"],
        },
    },
    {
        "name": "delete_document",
        "description": "Delete a document from Frappe",
        "inputSchema": {
            "type": "object",
            "properties": {
                "doctype": _DOCTYPE,
                "name": {"type": "string", "description": "Document name (case-sensitive)"},
            },
            "required": ["doctype", "name"],
        },
    },
    {
        "name": "list_documents",
        "description": "List documents from Frappe with filters",
        "inputSchema": {
            "type": "object",
            "properties": {
                "doctype": _DOCTYPE,
                "filters": _FILTERS_SCHEMA,
                "fields": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Fields to include (optional)",
                },
                "limit": {
                    "type": "integer",
                    "minimum": 1,
                    "description": "Maximum number of documents to return (optional)",
                },
                "order_by": {
                    "type": "string",
                    "description": "Field to order by, e.g. 'creation desc' (optional)",
                },
                "limit_start": {
                    "type": "integer",
                    "minimum": 0,
                    "description": "Offset for pagination (optional)",
                },
            },
            "required": ["doctype"],
        },
    },
    {
        "name": "reconcile_bank_transaction_with_vouchers",
        "description": (
            "Reconcile an ERPNext Bank Transaction against one or more payment vouchers "
            "(e.g. Payment Entry, Journal Entry)."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "bank_transaction_name": {
                    "type": "string",
                    "description": "Name of the Bank Transaction document",
                },
                "vouchers": {
                    "type": "array",
                    "minItems": 1,
                    "description": "Vouchers to allocate to the transaction",
                    "items": {
                        "type": "object",
                        "properties": {
                            "payment_doctype": {
                                "type": "string",
                                "description": "Voucher DocType",
                            },
                            "payment_name": {
                                "type": "string",
                                "description": "Voucher document name",
                            },
                            "amount": {"type": "number", "description": "Allocated amount"},
                        },
                        "required": ["payment_doctype", "payment_name", "amount"],
                    },
                },
            },
            "required": ["bank_transaction_name", "vouchers"],
        },
    },
    # ============ Schema Tools ============
    {
        "name": "get_doctype_schema",
        "description": (
            "Get the complete schema for a DocType including field definitions, validations, "
            "and linked DocTypes. Use this to understand the structure of a DocType before "
            "creating or updating documents."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {"doctype": _DOCTYPE},
            "required": ["doctype"],
        },
    },
    {
        "name": "get_field_options",
        "description": (
            "Get available options for a Link or Select field. For Link fields, returns "
            "documents from the linked DocType. For Select fields, returns the predefined options."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "doctype": _DOCTYPE,
                "fieldname": {"type": "string", "description": "Field name"},
                "filters": {
                    **_FILTERS_SCHEMA,
                    "description": (
                        "Filters to apply to the linked DocType (optional, for Link fields only)"
                    ),
                },
            },
            "required": ["doctype", "fieldname"],
        },
    },
    {
        "name": "get_frappe_usage_info",
        "description": (
            "Get combined information about a DocType or workflow, including schema metadata "
            "and usage guidance from static hints."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "doctype": {
                    "type": "string",
                    "description": "DocType name (optional if workflow is provided)",
                },
                "workflow": {
                    "type": "string",
                    "description": "Workflow name (optional if doctype is provided)",
                },
            },
            "required": [],
        },
    },
    # ============ Helper Tools ============
    {
        "name": "find_doctypes",
        "description": "Find DocTypes in the system matching a search term",
        "inputSchema": {
            "type": "object",
            "properties": {
                "search_term": {
                    "type": "string",
                    "description": "Search term to look for in DocType names",
                },
                "module": {"type": "string", "description": "Filter by module name (optional)"},
                "is_table": {
                    "type": "boolean",
                    "description": "Filter by table DocTypes (optional)",
                },
                "is_single": {
                    "type": "boolean",
                    "description": "Filter by single DocTypes (optional)",
                },
                "is_custom": {
                    "type": "boolean",
                    "description": "Filter by custom DocTypes (optional)",
                },
                "limit": {
                    "type": "integer",
                    "default": 20,
                    "minimum": 1,
                    "description": "Maximum number of results (optional, default 20)",
                },
            },
            "required": [],
        },
    },
    {
        "name": "get_module_list",
        "description": "Get a list of all modules in the system",
        "inputSchema": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "get_doctypes_in_module",
        "description": "Get a list of DocTypes in a specific module",
        "inputSchema": {
            "type": "object",
            "properties": {"module": {"type": "string", "description": "Module name"}},
            "required": ["module"],
        },
    },
    {
        "name": "check_doctype_exists",
        "description": "Check if a DocType exists in the system",
        "inputSchema": {
            "type": "object",
            "properties": {"doctype": {"type": "string", "description": "DocType name to check"}},
            "required": ["doctype"],
        },
    },
    {
        "name": "check_document_exists",
        "description": "Check if a document exists",
        "inputSchema": {
            "type": "object",
            "properties": {
                "doctype": _DOCTYPE,
                "name": {"type": "string", "description": "Document name to check"},
            },
            "required": ["doctype", "name"],
        },
    },
    {
        "name": "get_document_count",
        "description": "Get a count of documents matching filters",
        "inputSchema": {
            "type": "object",
            "properties": {
                "doctype": _DOCTYPE,
                "filters": {**_FILTERS_SCHEMA, "description": "Filters to apply (optional)"},
            },
            "required": ["doctype"],
        },
    },
    {
        "name": "get_naming_info",
        "description": "Get the naming series information for a DocType",
        "inputSchema": {
            "type": "object",
            "properties": {"doctype": _DOCTYPE},
            "required": ["doctype"],
        },
    },
    {
        "name": "get_required_fields",
        "description": "Get a list of required fields for a DocType",
        "inputSchema": {
            "type": "object",
            "properties": {"doctype": _DOCTYPE},
            "required": ["doctype"],
        },
    },
    {
        "name": "get_api_instructions",
        "description": "Get detailed instructions for using the Frappe API",
        "inputSchema": {
            "type": "object",
            "properties": {
                "category": {
                    "type": "string",
                    "description": (
                        "Instruction category (DOCUMENT_OPERATIONS, SCHEMA_OPERATIONS, "
                        "ADVANCED_OPERATIONS, BEST_PRACTICES)"
                    ),
                },
                "operation": {
                    "type": "string",
                    "description": (
                        "Operation name (e.g., CREATE, GET, UPDATE, DELETE, LIST, "
                        "GET_DOCTYPE_SCHEMA, etc.)"
                    ),
                },
            },
            "required": ["category", "operation"],
        },
    },
]


def get_tool_definition(name: str) -> dict | None:
    """Look up one tool definition by name."""
    return next((t for t in TOOL_DEFINITIONS if t["name"] == name), None)
