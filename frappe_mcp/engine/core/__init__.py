"""Engine core module.

This module contains the backend-facing building blocks used by handlers:
- Filter normalization
- DocType schema retrieval and summaries
- Static usage hints and app-provided instructions
- The API instruction catalogue
"""

from .filters import LiteralValue, OperatorPair, classify, is_canonical, normalize_filters
from .hints import Hint, StaticHints
from .instructions import INSTRUCTIONS, get_instructions
from .introspection import get_app_for_doctype, get_usage_instructions
from .schema import (
    get_doctype_schema,
    get_field_options,
    missing_required_fields,
    naming_info,
    required_fields,
    summarize_schema,
)

__all__ = [
    # Filters
    "LiteralValue",
    "OperatorPair",
    "classify",
    "is_canonical",
    "normalize_filters",
    # Hints
    "Hint",
    "StaticHints",
    # Instructions
    "INSTRUCTIONS",
    "get_instructions",
    "get_app_for_doctype",
    "get_usage_instructions",
    # Schema
    "get_doctype_schema",
    "get_field_options",
    "missing_required_fields",
    "naming_info",
    "required_fields",
    "summarize_schema",
]
