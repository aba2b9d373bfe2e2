"""Built-in guidance for using the Frappe API through this server.

Served by the ``get_api_instructions`` tool, keyed by category and operation.
"""

from textwrap import dedent
from typing import NamedTuple

from ...models import InstructionCategory


class Instruction(NamedTuple):
    description: str
    usage: str


def _usage(text: str) -> str:
    return dedent(text).strip()


INSTRUCTIONS: dict[InstructionCategory, dict[str, Instruction]] = {
    InstructionCategory.DOCUMENT_OPERATIONS: {
        "CREATE": Instruction(
            "Create a new document in Frappe",
            _usage("""
                Use create_document with the DocType name and field values:

                {
                  "doctype": "ToDo",
                  "values": {
                    "description": "Complete the project",
                    "priority": "Medium",
                    "status": "Open"
                  }
                }

                Tips:
                - Required fields must be present; get_required_fields lists them
                - Link fields take the exact name of the linked document
                - Table fields take a list of row objects; do not create child rows separately
                - owner, creation and modified are set by the system
                - Leave out "name" for DocTypes named by a naming series
            """),
        ),
        "GET": Instruction(
            "Retrieve a document from Frappe",
            _usage("""
                Use get_document with the DocType name and document name:

                {"doctype": "ToDo", "name": "TODO-0001", "fields": ["description", "status"]}

                Tips:
                - Without "fields" the whole document is returned
                - Document names are case-sensitive
            """),
        ),
        "UPDATE": Instruction(
            "Update an existing document in Frappe",
            _usage("""
                Use update_document with the DocType name, document name and changed values:

                {"doctype": "ToDo", "name": "TODO-0001", "values": {"status": "Closed"}}

                Tips:
                - Send only the fields that change
                - Table fields are replaced as a whole; keep "name" on existing rows
                - modified and modified_by are updated by the system
                - Read-only fields cannot be updated
            """),
        ),
        "DELETE": Instruction(
            "Delete a document from Frappe",
            _usage("""
                Use delete_document with the DocType name and document name:

                {"doctype": "ToDo", "name": "TODO-0001"}

                Tips:
                - Deletion fails while other documents link to this one
                - Submitted documents must be cancelled first
                - Deletion is governed by DocPerm rules
            """),
        ),
        "LIST": Instruction(
            "List documents from Frappe with filters",
            _usage("""
                Use list_documents with the DocType name and optional filters:

                {
                  "doctype": "ToDo",
                  "filters": {"status": "Open", "priority": "High"},
                  "fields": ["name", "description", "status"],
                  "limit": 10,
                  "limit_start": 0,
                  "order_by": "creation desc"
                }

                Filter formats:
                1. Equality: {"status": "Open"}
                2. Operator pair: {"creation": [">=", "2023-01-01"]}
                3. Several conditions: {"status": "Open", "priority": "High"}
                4. Triples: [["status", "=", "Open"], ["priority", "!=", "Low"]]

                Only a two-element list is read as [operator, value]; any other
                list is compared by equality as is.

                Operators: =, !=, <, >, <=, >=, like, not like, in, not in, is, is not, between

                Tips:
                - Page with limit and limit_start
                - order_by takes a field name with optional asc/desc
            """),
        ),
    },
    InstructionCategory.SCHEMA_OPERATIONS: {
        "GET_DOCTYPE_SCHEMA": Instruction(
            "Get the complete schema for a DocType",
            _usage("""
                Use get_doctype_schema with the DocType name:

                {"doctype": "ToDo"}

                The response has a summary (field types, required fields, permission
                count) followed by the full schema: fields with types, labels and
                validation data, permissions and naming configuration.

                Tips:
                - Read the schema before creating or updating documents
                - linked_doctype and child_doctype show where Link and Table fields point
            """),
        ),
        "GET_FIELD_OPTIONS": Instruction(
            "Get available options for a Link or Select field",
            _usage("""
                Use get_field_options with the DocType name and field name:

                {"doctype": "ToDo", "fieldname": "priority"}

                Tips:
                - Link fields return up to 50 documents of the linked DocType
                - Select fields return their predefined options
                - "filters" narrows Link options
                - Every option has a value and a label
            """),
        ),
        "FIND_DOCTYPE": Instruction(
            "Find DocTypes in the system",
            _usage("""
                Use find_doctypes with a search term and optional flags:

                {"search_term": "Invoice", "module": "Accounts", "is_table": false, "limit": 20}

                list_documents on the "DocType" DocType works too, with filters on
                istable, issingle, module, custom or name (["like", "%User%"]).

                Tips:
                - get_module_list and get_doctypes_in_module browse by module
                - is_custom finds DocTypes created on this site
            """),
        ),
    },
    InstructionCategory.ADVANCED_OPERATIONS: {
        "WORKING_WITH_CHILD_TABLES": Instruction(
            "Working with child tables (Table fields)",
            _usage("""
                Child tables are lists of row objects inside the parent values:

                {
                  "doctype": "Sales Order",
                  "values": {
                    "customer": "Customer Name",
                    "delivery_date": "2023-12-31",
                    "items": [
                      {"item_code": "ITEM-001", "qty": 5, "rate": 100},
                      {"item_code": "ITEM-002", "qty": 2, "rate": 200}
                    ]
                  }
                }

                Tips:
                - On update include "name" for rows that already exist
                - Rows without "name" are added
                - Existing rows missing from the update are removed
                - New rows need all their required fields
            """),
        ),
        "HANDLING_FILE_ATTACHMENTS": Instruction(
            "Handling file attachments",
            _usage("""
                Files are File documents linked to their owner document:

                {
                  "doctype": "File",
                  "values": {
                    "file_name": "document.pdf",
                    "is_private": 1,
                    "content": "[base64 encoded content]",
                    "attached_to_doctype": "ToDo",
                    "attached_to_name": "TODO-0001"
                  }
                }

                Tips:
                - is_private 1 keeps the file behind login
                - List File documents filtered on attached_to_doctype and
                  attached_to_name to find a document's attachments
            """),
        ),
        "WORKING_WITH_WORKFLOWS": Instruction(
            "Working with workflows",
            _usage("""
                Documents under a workflow carry a workflow_state field.

                1. Find the workflow of a DocType:
                   list_documents {"doctype": "Workflow",
                                   "filters": {"document_type": "Leave Application"}}
                2. Move a document to another state:
                   update_document {"doctype": "Leave Application", "name": "HR-LAP-0001",
                                    "values": {"workflow_state": "Approved"}}

                Tips:
                - Transitions are restricted by role
                - Some states require extra fields to be filled
                - get_frappe_usage_info describes known workflows
            """),
        ),
        "BANK_RECONCILIATION": Instruction(
            "Reconciling bank transactions",
            _usage("""
                Use reconcile_bank_transaction_with_vouchers to allocate vouchers to
                an unreconciled Bank Transaction (ERPNext):

                {
                  "bank_transaction_name": "ACC-BTN-2024-00001",
                  "vouchers": [
                    {
                      "payment_doctype": "Payment Entry",
                      "payment_name": "ACC-PAY-2024-00007",
                      "amount": 250.0
                    }
                  ]
                }

                Tips:
                - The allocated amounts may not exceed the unallocated transaction amount
                - Vouchers must be submitted documents
            """),
        ),
    },
    InstructionCategory.BEST_PRACTICES: {
        "HANDLING_ERRORS": Instruction(
            "Handling common errors",
            _usage("""
                Common Frappe API errors:

                1. Document not found: check the name (case-sensitive) and your permissions
                2. Permission denied: the API user lacks a role or a user permission applies
                3. Validation errors: missing required fields, invalid values, missing
                   linked documents, unique constraint violations
                4. Workflow errors: transition not allowed from the current state

                Tips:
                - Error results carry Frappe's own exception and server messages
                - get_doctype_schema shows field requirements
                - Try operations with minimal data first
            """),
        ),
        "EFFICIENT_QUERYING": Instruction(
            "Efficient querying patterns",
            _usage("""
                1. Ask only for the fields you need
                2. Filter on the server instead of listing everything
                3. Page large result sets with limit and limit_start, raising
                   limit_start by limit for each page
                4. Prefer indexed fields in filters: name, modified, creation, owner,
                   docstatus and fields marked in_standard_filter
                5. get_document_count answers "how many" without fetching rows
            """),
        ),
        "NAMING_CONVENTIONS": Instruction(
            "Understanding Frappe naming conventions",
            _usage("""
                autoname decides how documents are named:

                1. naming_series: generated from a series such as TODO-.#####
                2. field:<fieldname>: the value of that field
                3. format:...: a pattern with fields, dates (YYYY, MM, DD) and counters (#)
                4. prompt: the caller supplies the name
                5. hash or autoincrement: generated by the system

                Tips:
                - get_naming_info reports the rule for a DocType
                - Names are unique within a DocType and case-sensitive
                - Omit "name" when creating auto-named documents
            """),
        ),
    },
}


def get_instructions(category: str, operation: str) -> str:
    """Render one catalogue entry, or say which key was not found."""
    try:
        section = INSTRUCTIONS[InstructionCategory(category.strip().upper())]
    except ValueError:
        return f"Category '{category}' not found in instructions."

    entry = section.get(operation.strip().upper())
    if entry is None:
        return f"Operation '{operation}' not found in category '{category}'."
    return f"{entry.description}\n\n{entry.usage}"
