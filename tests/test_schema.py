"""
Unit tests for schema retrieval, field options and usage info
"""
import json

import httpx
import pytest

from frappe_mcp.engine.core.hints import Hint, StaticHints
from frappe_mcp.engine.core.schema import (
    get_doctype_schema,
    missing_required_fields,
    naming_info,
    normalize_schema,
    summarize_schema,
)
from frappe_mcp.errors import AuthenticationError

from .conftest import doctype_meta, json_param

GETDOCTYPE = "/api/method/frappe.desk.form.load.getdoctype"

TODO_FIELDS = [
    {
        "fieldname": "status",
        "fieldtype": "Select",
        "options": "Open\nClosed\n\nCancelled",
        "reqd": 1,
    },
    {"fieldname": "description", "fieldtype": "Text Editor", "reqd": 1, "in_list_view": 1},
    {"fieldname": "allocated_to", "fieldtype": "Link", "options": "User"},
    {"fieldname": "notes", "fieldtype": "Table", "options": "ToDo Note"},
    {"fieldname": "naming_series", "fieldtype": "Select", "options": "TD-.####"},
]

USER_FIELDS = [
    {"fieldname": "email", "fieldtype": "Data"},
    {"fieldname": "full_name", "fieldtype": "Data", "bold": 1},
]

METAS = {"ToDo": TODO_FIELDS, "User": USER_FIELDS}


def serve_meta(request: httpx.Request) -> httpx.Response:
    doctype = request.url.params["doctype"]
    if doctype not in METAS:
        return httpx.Response(404, json={"exc_type": "DoesNotExistError"})
    meta = doctype_meta(doctype, METAS[doctype], autoname="naming_series:")
    return httpx.Response(200, json=meta)


class TestNormalizeSchema:
    """Raw DocType documents to tool-facing schema"""

    @pytest.fixture
    def schema(self):
        """Normalized ToDo schema"""
        return normalize_schema(
            "ToDo", {"name": "ToDo", "istable": 0, "issingle": "1", "fields": TODO_FIELDS}
        )

    def test_flags_become_booleans(self, schema):
        assert schema["istable"] is False
        assert schema["issingle"] is True
        assert schema["fields"][1]["in_list_view"] is True
        assert schema["fields"][1]["hidden"] is False

    def test_link_and_table_targets(self, schema):
        fields = {f["fieldname"]: f for f in schema["fields"]}
        assert fields["allocated_to"]["linked_doctype"] == "User"
        assert fields["allocated_to"]["child_doctype"] is None
        assert fields["notes"]["child_doctype"] == "ToDo Note"

    def test_summary(self, schema):
        summary = summarize_schema(schema)
        assert summary["fieldCount"] == 5
        assert summary["fieldTypes"] == {"Select": 2, "Text Editor": 1, "Link": 1, "Table": 1}
        assert summary["requiredFields"] == ["status", "description"]

    def test_missing_required_fields(self, schema):
        assert missing_required_fields(schema, {"status": "Open"}) == ["description"]

    def test_naming_info(self, schema):
        schema["autoname"] = "naming_series:"
        info = naming_info(schema)
        assert info["isAutoNamed"] is True
        assert info["isPromptNamed"] is False
        assert info["hasNamingSeries"] is True


class TestGetDoctypeSchema:
    """Metadata endpoint with DocType-document fallback"""

    @pytest.mark.asyncio
    async def test_uses_metadata_endpoint(self, client, fake_frappe):
        fake_frappe.add_handler("GET", GETDOCTYPE, serve_meta)

        schema = await get_doctype_schema(client, "ToDo")

        assert schema["name"] == "ToDo"
        assert schema["autoname"] == "naming_series:"
        assert fake_frappe.calls("GET", "/api/resource/DocType/ToDo") == []

    @pytest.mark.asyncio
    async def test_falls_back_to_doctype_document(self, client, fake_frappe):
        fake_frappe.add("GET", GETDOCTYPE, {"exception": "PermissionError"}, status=500)
        fake_frappe.add(
            "GET",
            "/api/resource/DocType/ToDo",
            {"data": {"name": "ToDo", "module": "Desk", "fields": TODO_FIELDS}},
        )

        schema = await get_doctype_schema(client, "ToDo")

        assert schema["module"] == "Desk"
        assert len(schema["fields"]) == 5

    @pytest.mark.asyncio
    async def test_authentication_failure_not_masked(self, client, fake_frappe):
        fake_frappe.add("GET", GETDOCTYPE, {}, status=401)

        with pytest.raises(AuthenticationError):
            await get_doctype_schema(client, "ToDo")

        assert fake_frappe.calls("GET", "/api/resource/DocType/ToDo") == []


class TestSchemaTools:
    """Schema tools through the dispatcher"""

    @pytest.fixture(autouse=True)
    def metadata(self, fake_frappe):
        """Serve ToDo and User metadata"""
        fake_frappe.add_handler("GET", GETDOCTYPE, serve_meta)

    @pytest.mark.asyncio
    async def test_get_doctype_schema(self, dispatcher):
        result = await dispatcher.dispatch("get_doctype_schema", {"doctype": "ToDo"})

        assert not result.is_error
        assert result.first_text.startswith("Schema Summary:\n")
        assert "\n\nFull Schema:\n" in result.first_text

    @pytest.mark.asyncio
    async def test_select_options(self, dispatcher):
        result = await dispatcher.dispatch(
            "get_field_options", {"doctype": "ToDo", "fieldname": "status"}
        )

        assert "Available Options (3):" in result.first_text
        options = json.loads(result.first_text.split("Available Options (3):\n", 1)[1])
        assert [o["value"] for o in options] == ["Open", "Closed", "Cancelled"]

    @pytest.mark.asyncio
    async def test_link_options_use_title_field(self, dispatcher, fake_frappe):
        fake_frappe.add(
            "GET",
            "/api/resource/User",
            {
                "data": [
                    {"name": "ann@example.com", "full_name": "Ann"},
                    {"name": "bot@example.com"},
                ]
            },
        )

        result = await dispatcher.dispatch(
            "get_field_options",
            {"doctype": "ToDo", "fieldname": "allocated_to", "filters": {"enabled": 1}},
        )

        options = json.loads(result.first_text.split("Available Options (2):\n", 1)[1])
        assert options == [
            {"value": "ann@example.com", "label": "ann@example.com - Ann"},
            {"value": "bot@example.com", "label": "bot@example.com"},
        ]
        request = fake_frappe.calls("GET", "/api/resource/User")[0]
        assert json_param(request, "fields") == ["name", "full_name"]
        assert json_param(request, "filters") == [["enabled", "=", 1]]
        assert request.url.params["limit_page_length"] == "50"

    @pytest.mark.asyncio
    async def test_unknown_field(self, dispatcher):
        result = await dispatcher.dispatch(
            "get_field_options", {"doctype": "ToDo", "fieldname": "nope"}
        )

        assert result.is_error
        assert result.first_text == "Field nope not found in DocType ToDo"

    @pytest.mark.asyncio
    async def test_required_fields(self, dispatcher):
        result = await dispatcher.dispatch("get_required_fields", {"doctype": "ToDo"})
        assert result.first_text.startswith("Required fields: 2")

    @pytest.mark.asyncio
    async def test_check_doctype_exists(self, dispatcher):
        result = await dispatcher.dispatch("check_doctype_exists", {"doctype": "ToDo"})
        assert json.loads(result.first_text) == {"exists": True}


class TestUsageInfo:
    """get_frappe_usage_info markdown"""

    @pytest.fixture
    def hints(self):
        """Hints for ToDo and one workflow touching it"""
        return StaticHints(
            [
                Hint(type="doctype", target="ToDo", hint="ToDos are personal tasks."),
                Hint(
                    type="workflow",
                    target="Task Triage",
                    description="Sort incoming tasks",
                    steps=["Open the ToDo", "Assign it"],
                    related_doctypes=["ToDo"],
                ),
            ]
        )

    @pytest.mark.asyncio
    async def test_doctype(self, dispatcher, fake_frappe):
        fake_frappe.add_handler("GET", GETDOCTYPE, serve_meta)
        fake_frappe.add(
            "GET", "/api/resource/DocType/ToDo", {"data": {"name": "ToDo", "module": "Desk"}}
        )
        fake_frappe.add("GET", "/api/resource/Module Def/Desk", {"data": {"app_name": "frappe"}})

        def usage_instructions(request: httpx.Request) -> httpx.Response:
            if json.loads(request.content).get("doctype"):
                return httpx.Response(200, json={"message": None})
            app = {"app_description": "The Frappe framework"}
            return httpx.Response(200, json={"message": app})

        fake_frappe.add_handler(
            "POST", "/api/method/frappe.api_usage.get_usage_instructions", usage_instructions
        )

        result = await dispatcher.dispatch("get_frappe_usage_info", {"doctype": "ToDo"})

        text = result.first_text
        assert not result.is_error
        assert text.startswith("# DocType: ToDo\n\n")
        assert "## Static Hints\n\nToDos are personal tasks." in text
        assert "## About frappe\n\nThe Frappe framework" in text
        assert "## Schema Summary" in text
        assert "- **Required Fields**: status, description" in text
        assert "## Related Workflows\n\n### Task Triage" in text
        assert text.index("## Static Hints") < text.index("## Schema Summary")

    @pytest.mark.asyncio
    async def test_doctype_with_schema_error(self, dispatcher):
        """A missing schema is reported inside the guide, not as a failed call"""
        result = await dispatcher.dispatch("get_frappe_usage_info", {"doctype": "Ghost"})

        assert not result.is_error
        assert "## Schema Error" in result.first_text

    @pytest.mark.asyncio
    async def test_workflow(self, dispatcher, fake_frappe):
        result = await dispatcher.dispatch("get_frappe_usage_info", {"workflow": "Task Triage"})

        assert result.first_text.startswith("# Workflow: Task Triage")
        assert "## Steps\n\n1. Open the ToDo\n2. Assign it\n" in result.first_text
        assert fake_frappe.requests == []

    @pytest.mark.asyncio
    async def test_unknown_workflow(self, dispatcher):
        result = await dispatcher.dispatch("get_frappe_usage_info", {"workflow": "Nope"})
        assert "No workflow information available." in result.first_text

    @pytest.mark.asyncio
    async def test_requires_doctype_or_workflow(self, dispatcher):
        result = await dispatcher.dispatch("get_frappe_usage_info", {})

        assert result.is_error
        assert "either doctype or workflow must be provided" in result.first_text
