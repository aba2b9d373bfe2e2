"""
Unit tests for filter normalization
"""
import pytest

from frappe_mcp.engine.core.filters import (
    LiteralValue,
    OperatorPair,
    classify,
    is_canonical,
    normalize_filters,
)
from frappe_mcp.errors import FilterError, ToolArgumentError


class TestClassify:
    """Shape-based classification of mapping values"""

    def test_two_element_list_is_operator_pair(self):
        assert classify(["like", "%George%"]) == OperatorPair("like", "%George%")

    def test_tuple_of_two_is_operator_pair(self):
        assert classify(("in", ["a", "b"])) == OperatorPair("in", ["a", "b"])

    @pytest.mark.parametrize("value", ["Open", 5, None, True, {"a": 1}])
    def test_scalars_are_literals(self, value):
        assert classify(value) == LiteralValue(value)

    @pytest.mark.parametrize("value", [[], ["only"], ["a", "b", "c"]])
    def test_other_list_lengths_are_literals(self, value):
        assert classify(value) == LiteralValue(value)


class TestNormalizeFilters:
    """Conversion of filter expressions to [field, operator, value] triples"""

    def test_none_gives_empty_list(self):
        assert normalize_filters(None) == []

    def test_empty_mapping_gives_empty_list(self):
        assert normalize_filters({}) == []

    def test_literal_value_gets_equality(self):
        assert normalize_filters({"first_name": "Aaron"}) == [["first_name", "=", "Aaron"]]

    def test_operator_pair_is_unwrapped(self):
        assert normalize_filters({"first_name": ["like", "%George%"]}) == [
            ["first_name", "like", "%George%"]
        ]

    def test_mixed_mapping_keeps_key_order(self):
        result = normalize_filters({"first_name": ["=", "Aaron"], "status": "Open"})
        assert result == [["first_name", "=", "Aaron"], ["status", "=", "Open"]]

    def test_canonical_input_returned_unchanged(self):
        filters = [["first_name", "=", "Aaron"]]
        assert normalize_filters(filters) is filters

    def test_empty_list_is_canonical(self):
        assert normalize_filters([]) == []

    @pytest.mark.parametrize(
        "value",
        [["x"], ["a", "b", "c"], [1, 2, 3, 4]],
        ids=["one", "three", "four"],
    )
    def test_non_pair_list_is_wrapped_not_unwrapped(self, value):
        assert normalize_filters({"tags": value}) == [["tags", "=", value]]

    def test_operator_is_not_validated(self):
        assert normalize_filters({"x": ["~~", 1]}) == [["x", "~~", 1]]

    @pytest.mark.parametrize(
        "filters",
        [
            {"first_name": "Aaron"},
            {"first_name": ["like", "%George%"], "status": "Open"},
            {"tags": ["a", "b", "c"]},
            [["status", "=", "Open"]],
            None,
        ],
    )
    def test_idempotent(self, filters):
        once = normalize_filters(filters)
        assert normalize_filters(once) == once

    @pytest.mark.parametrize("filters", ["status=Open", 42, ["status", "=", "Open"]])
    def test_unsupported_shapes_raise(self, filters):
        with pytest.raises(FilterError) as exc_info:
            normalize_filters(filters)
        assert isinstance(exc_info.value, ToolArgumentError)
        assert exc_info.value.fields == ["filters"]


class TestIsCanonical:
    """Detection of already-normalized filters"""

    def test_list_of_lists(self):
        assert is_canonical([["a", "=", 1], ("b", ">", 2)])

    def test_flat_list(self):
        assert not is_canonical(["a", "=", 1])

    def test_mapping(self):
        assert not is_canonical({"a": 1})
