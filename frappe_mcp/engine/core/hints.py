"""Static usage hints loaded from JSON files.

Every ``*.json`` file in the hints directory holds a list of hints::

    [
      {"type": "doctype", "target": "Sales Invoice", "hint": "..."},
      {"type": "workflow", "target": "Quote to Cash", "steps": ["..."],
       "related_doctypes": ["Quotation", "Sales Order"]}
    ]

Invalid files and entries are logged and skipped.
"""

import json
import logging
from collections import defaultdict
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, model_validator

from ...models import HintType

logger = logging.getLogger(__name__)


class Hint(BaseModel):
    """One static hint about a DocType or a workflow."""

    type: HintType
    target: str = Field(..., min_length=1)
    hint: str | None = None
    id: str | None = None
    description: str | None = None
    steps: list[str] | None = None
    related_doctypes: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_shape(self) -> "Hint":
        if self.type == HintType.DOCTYPE and not self.hint:
            raise ValueError("doctype hint requires 'hint' text")
        if self.type == HintType.WORKFLOW and not self.steps:
            raise ValueError("workflow hint requires a 'steps' list")
        return self


class StaticHints:
    """Hints indexed by target name."""

    def __init__(self, hints: list[Hint] | None = None):
        self._doctype: dict[str, list[Hint]] = defaultdict(list)
        self._workflow: dict[str, list[Hint]] = defaultdict(list)
        for hint in hints or []:
            self.add(hint)

    def add(self, hint: Hint) -> None:
        index = self._doctype if hint.type == HintType.DOCTYPE else self._workflow
        index[hint.target].append(hint)

    @classmethod
    def load(cls, directory: str | Path) -> "StaticHints":
        hints = cls()
        path = Path(directory)
        if not path.is_dir():
            logger.info(f"Static hints directory not found at {path}, no hints loaded")
            return hints

        files = sorted(path.glob("*.json"))
        logger.debug(f"Found {len(files)} hint files in {path}")
        for file in files:
            try:
                entries = json.loads(file.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.error(f"Error reading hint file {file.name}: {e}")
                continue
            if not isinstance(entries, list):
                logger.error(f"Invalid hint file format in {file.name}: expected an array of hints")
                continue

            for entry in entries:
                try:
                    hints.add(Hint.model_validate(entry))
                except ValidationError as e:
                    logger.warning(f"Skipping invalid hint in {file.name}: {e.errors()[0]['msg']}")

        logger.info(
            f"Loaded {len(hints._doctype)} DocType hints and {len(hints._workflow)} workflow hints"
        )
        return hints

    def for_doctype(self, doctype: str) -> list[Hint]:
        return list(self._doctype.get(doctype, []))

    def for_workflow(self, workflow: str) -> list[Hint]:
        return list(self._workflow.get(workflow, []))

    def workflows_for_doctype(self, doctype: str) -> list[Hint]:
        return [
            hint
            for hints in self._workflow.values()
            for hint in hints
            if doctype in hint.related_doctypes
        ]

    def __len__(self) -> int:
        return sum(len(v) for v in self._doctype.values()) + sum(
            len(v) for v in self._workflow.values()
        )
