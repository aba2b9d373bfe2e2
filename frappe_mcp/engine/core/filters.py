"""Filter normalization for Frappe list queries.

Frappe's list API takes filters as a sequence of ``[field, operator, value]``
triples. Tool callers may instead send a mapping:

    {"status": "Open"}                      -> [["status", "=", "Open"]]
    {"first_name": ["like", "%George%"]}    -> [["first_name", "like", "%George%"]]

Only a value that is a list of exactly two elements is read as an
``[operator, value]`` pair. Lists of any other length are literal values and
get an implicit ``=``.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ...errors import FilterError

Triple = list[Any]


@dataclass(frozen=True)
class LiteralValue:
    """A filter value compared with implicit equality."""

    value: Any


@dataclass(frozen=True)
class OperatorPair:
    """An explicit ``[operator, value]`` filter value. The operator is not checked."""

    operator: Any
    value: Any


FilterValue = LiteralValue | OperatorPair


def classify(value: Any) -> FilterValue:
    """Decide once, by shape, whether a mapping value carries its own operator."""
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return OperatorPair(value[0], value[1])
    return LiteralValue(value)


def is_canonical(filters: Any) -> bool:
    return isinstance(filters, (list, tuple)) and all(
        isinstance(item, (list, tuple)) for item in filters
    )


def normalize_filters(filters: Any) -> list[Triple]:
    """Convert a filter expression to canonical triple form.

    Args:
        filters: ``None``, a field -> value mapping, or a sequence of triples.

    Returns:
        Triples in the mapping's key order. Canonical input is returned as is.

    Raises:
        FilterError: For any other shape (e.g. a bare string).
    """
    if filters is None:
        return []

    if isinstance(filters, Mapping):
        triples: list[Triple] = []
        for field, raw in filters.items():
            match classify(raw):
                case OperatorPair(operator=operator, value=value):
                    triples.append([field, operator, value])
                case LiteralValue(value=value):
                    triples.append([field, "=", value])
        return triples

    if is_canonical(filters):
        return filters

    raise FilterError(
        "filters must be an object mapping field names to values or "
        "[operator, value] pairs, or a list of [field, operator, value] lists; "
        f"got {type(filters).__name__}",
        fields=["filters"],
    )
