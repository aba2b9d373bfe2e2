"""
Unit tests for static hint loading
"""
import json
from pathlib import Path

import pytest

from frappe_mcp.engine.core.hints import StaticHints

BUNDLED_HINTS = Path(__file__).resolve().parent.parent / "static_hints"


class TestStaticHintsLoad:
    """Loading hint files from a directory"""

    @pytest.fixture
    def hints_dir(self, tmp_path):
        """Directory with one good file, one broken file and one wrong-shape file"""
        (tmp_path / "good.json").write_text(
            json.dumps(
                [
                    {"type": "doctype", "target": "ToDo", "hint": "Personal tasks"},
                    {"type": "doctype", "target": "ToDo", "hint": "Assign with allocated_to"},
                    {
                        "type": "workflow",
                        "target": "Triage",
                        "steps": ["a"],
                        "related_doctypes": ["ToDo"],
                    },
                    {"type": "doctype", "target": "Note"},
                    {"type": "report", "target": "X", "hint": "y"},
                ]
            )
        )
        (tmp_path / "broken.json").write_text("[{not json")
        (tmp_path / "object.json").write_text(json.dumps({"type": "doctype"}))
        (tmp_path / "ignored.txt").write_text("not a hint file")
        return tmp_path

    def test_valid_entries_loaded(self, hints_dir):
        hints = StaticHints.load(hints_dir)

        assert len(hints) == 3
        assert [h.hint for h in hints.for_doctype("ToDo")] == [
            "Personal tasks",
            "Assign with allocated_to",
        ]

    def test_invalid_entries_skipped(self, hints_dir):
        hints = StaticHints.load(hints_dir)
        assert hints.for_doctype("Note") == []

    def test_workflows_by_related_doctype(self, hints_dir):
        hints = StaticHints.load(hints_dir)

        assert [w.target for w in hints.workflows_for_doctype("ToDo")] == ["Triage"]
        assert hints.workflows_for_doctype("Note") == []

    def test_missing_directory(self, tmp_path):
        assert len(StaticHints.load(tmp_path / "absent")) == 0

    def test_lookups_return_copies(self, hints_dir):
        hints = StaticHints.load(hints_dir)
        hints.for_doctype("ToDo").clear()
        assert len(hints.for_doctype("ToDo")) == 2


class TestBundledHints:
    """The hints shipped with the server"""

    def test_bundled_hints_are_valid(self):
        hints = StaticHints.load(BUNDLED_HINTS)

        assert hints.for_doctype("Sales Invoice")
        assert hints.for_workflow("Quote to Cash")
        assert "Bank Reconciliation" in [
            w.target for w in hints.workflows_for_doctype("Bank Transaction")
        ]
