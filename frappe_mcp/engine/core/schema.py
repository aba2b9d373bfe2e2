"""DocType schema retrieval and the helpers built on top of it.

Schemas are read from ``frappe.desk.form.load.getdoctype``; when that fails
the ``DocType`` document itself is used. Both sources are normalized into the
same shape: Frappe's 0/1 flags become booleans, ``reqd`` becomes ``required``
and Link/Table fields expose the DocType they point at.
"""

import logging
from collections import Counter
from typing import Any

from ...client import FrappeClient
from ...errors import AuthenticationError, BackendError, ToolArgumentError

logger = logging.getLogger(__name__)

LINK_OPTIONS_LIMIT = 50

TABLE_FIELDTYPES = ("Table", "Table MultiSelect")

FIELD_INFO_KEYS = ("fieldname", "label", "fieldtype", "required", "description", "options")

FIELD_FLAGS = (
    "in_list_view",
    "in_standard_filter",
    "in_global_search",
    "bold",
    "hidden",
    "read_only",
    "allow_on_submit",
    "set_only_once",
    "allow_bulk_edit",
    "translatable",
)

DOCTYPE_FLAGS = (
    "is_submittable",
    "quick_entry",
    "track_changes",
    "track_views",
    "has_web_view",
    "allow_rename",
    "allow_copy",
    "allow_import",
    "allow_events_in_timeline",
    "allow_auto_repeat",
)


def _flag(value: Any) -> bool:
    return value in (1, True, "1")


def normalize_field(field: dict[str, Any]) -> dict[str, Any]:
    fieldtype = field.get("fieldtype")
    normalized = {
        "fieldname": field.get("fieldname"),
        "label": field.get("label"),
        "fieldtype": fieldtype,
        "required": _flag(field.get("reqd")),
        "description": field.get("description"),
        "default": field.get("default"),
        "options": field.get("options"),
        "length": field.get("length"),
        "linked_doctype": field.get("options") if fieldtype == "Link" else None,
        "child_doctype": field.get("options") if fieldtype in TABLE_FIELDTYPES else None,
    }
    for flag in FIELD_FLAGS:
        normalized[flag] = _flag(field.get(flag))
    return normalized


def normalize_schema(doctype: str, doc: dict[str, Any]) -> dict[str, Any]:
    """Turn a raw DocType document into the schema returned to tool callers."""
    schema: dict[str, Any] = {
        "name": doctype,
        "label": doc.get("name") or doctype,
        "description": doc.get("description"),
        "module": doc.get("module"),
        "issingle": _flag(doc.get("issingle")),
        "istable": _flag(doc.get("istable")),
        "custom": _flag(doc.get("custom")),
        "fields": [normalize_field(f) for f in doc.get("fields") or []],
        "permissions": doc.get("permissions") or [],
        "autoname": doc.get("autoname"),
        "name_case": doc.get("name_case"),
        "title_field": doc.get("title_field"),
        "document_type": doc.get("document_type"),
        "icon": doc.get("icon"),
        "max_attachments": doc.get("max_attachments"),
    }
    for flag in DOCTYPE_FLAGS:
        schema[flag] = _flag(doc.get(flag))
    return schema


async def get_doctype_schema(client: FrappeClient, doctype: str) -> dict[str, Any]:
    """Fetch and normalize the schema of ``doctype``.

    Raises:
        BackendError: If neither the metadata endpoint nor the DocType
            document can be read. A missing DocType surfaces as a not-found
            error from the fallback read.
    """
    try:
        docs = await client.get_doctype_meta(doctype)
        doc = next((d for d in docs if d.get("name") == doctype), None)
        if doc is None:
            raise BackendError(f"DocType {doctype} not found in metadata response")
    except AuthenticationError:
        raise
    except BackendError as e:
        logger.info(f"Metadata endpoint failed for {doctype}, using DocType document: {e.message}")
        doc = await client.get_doc("DocType", doctype)
    return normalize_schema(doctype, doc)


def field_type_counts(schema: dict[str, Any]) -> dict[str, int]:
    return dict(Counter(f["fieldtype"] for f in schema["fields"]))


def required_fields(schema: dict[str, Any]) -> list[dict[str, Any]]:
    return [f for f in schema["fields"] if f["required"]]


def summarize_schema(schema: dict[str, Any]) -> dict[str, Any]:
    return {
        "name": schema["name"],
        "module": schema["module"],
        "isSingle": schema["issingle"],
        "isTable": schema["istable"],
        "isCustom": schema["custom"],
        "autoname": schema["autoname"],
        "fieldCount": len(schema["fields"]),
        "fieldTypes": field_type_counts(schema),
        "requiredFields": [f["fieldname"] for f in required_fields(schema)],
        "permissions": len(schema["permissions"]),
    }


def missing_required_fields(schema: dict[str, Any], values: dict[str, Any]) -> list[str]:
    """Required fields absent from ``values`` that have no default either."""
    return [
        f["fieldname"]
        for f in required_fields(schema)
        if f["fieldname"] not in values and f.get("default") in (None, "")
    ]


def naming_info(schema: dict[str, Any]) -> dict[str, Any]:
    autoname = schema.get("autoname")
    series_field = next((f for f in schema["fields"] if f["fieldname"] == "naming_series"), None)
    return {
        "autoname": autoname,
        "namingSeriesField": series_field,
        "isAutoNamed": bool(autoname) and autoname != "prompt",
        "isPromptNamed": autoname == "prompt",
        "hasNamingSeries": series_field is not None,
    }


def find_field(schema: dict[str, Any], fieldname: str) -> dict[str, Any]:
    for field in schema["fields"]:
        if field["fieldname"] == fieldname:
            return field
    raise ToolArgumentError(
        f"Field {fieldname} not found in DocType {schema['name']}", fields=["fieldname"]
    )


# ============ FIELD OPTIONS ============


async def _title_field(client: FrappeClient, doctype: str) -> str | None:
    try:
        schema = await get_doctype_schema(client, doctype)
    except BackendError as e:
        logger.warning(f"Could not read schema of linked DocType {doctype}: {e.message}")
        return None
    for field in schema["fields"]:
        if field["fieldname"] == "title" or field["bold"]:
            return field["fieldname"]
    return None


async def link_options(
    client: FrappeClient, doctype: str, filters: list[Any] | None = None
) -> list[dict[str, str]]:
    """Up to 50 documents of ``doctype`` as ``{value, label}`` pairs."""
    title = await _title_field(client, doctype)
    fields = ["name", title] if title else ["name"]
    try:
        rows = await client.get_list(
            doctype, fields=fields, filters=filters, limit=LINK_OPTIONS_LIMIT
        )
    except BackendError as e:
        if title is None:
            raise
        logger.warning(
            f"Listing {doctype} with title field failed, retrying with name only: {e.message}"
        )
        title = None
        rows = await client.get_list(
            doctype, fields=["name"], filters=filters, limit=LINK_OPTIONS_LIMIT
        )

    options = []
    for row in rows:
        label = row["name"]
        if title and row.get(title):
            label = f"{row['name']} - {row[title]}"
        options.append({"value": row["name"], "label": label})
    return options


def select_options(field: dict[str, Any]) -> list[dict[str, str]]:
    raw = field.get("options") or ""
    return [{"value": o.strip(), "label": o.strip()} for o in raw.split("\n") if o.strip()]


async def get_field_options(
    client: FrappeClient, doctype: str, fieldname: str, filters: list[Any] | None = None
) -> tuple[dict[str, Any], list[dict[str, str]]]:
    """Resolve the selectable values of a Link or Select field.

    Returns:
        Tuple of (field metadata, options). Fields of any other type have no
        options.
    """
    schema = await get_doctype_schema(client, doctype)
    field = find_field(schema, fieldname)

    if field["fieldtype"] == "Link":
        if not field["options"]:
            raise ToolArgumentError(
                f"Link field {fieldname} has no linked DocType specified", fields=["fieldname"]
            )
        options = await link_options(client, field["options"], filters)
    elif field["fieldtype"] == "Select":
        options = select_options(field)
    else:
        logger.debug(f"Field {fieldname} is type {field['fieldtype']}, not Link or Select")
        options = []

    info = {k: field[k] for k in FIELD_INFO_KEYS}
    return info, options
