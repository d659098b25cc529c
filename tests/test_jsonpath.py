"""Unit tests for dotted-path catalog extraction."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from polychat.catalog import extract_field
from polychat.errors import JsonPathError


class TestExtractField:
    """Tests for extract_field."""

    def test_openai_shape(self, openai_catalog):
        """Test reading ids from a data array, skipping entries without one."""
        assert extract_field(openai_catalog, "data.id") == ["gpt-4o", "gpt-4.1-mini"]

    def test_nested_path(self):
        """Test walking more than one object level."""
        document = {"result": {"models": [{"name": "a"}, {"name": "b"}]}}

        assert extract_field(document, "result.models.name") == ["a", "b"]

    def test_single_segment_reads_top_level_array(self):
        """Test that a one-part path reads a bare array."""
        document = [{"id": "m1"}, {"id": "m2"}, "junk", {"id": 3}]

        assert extract_field(document, "id") == ["m1", "m2"]

    def test_empty_array_returns_empty_list(self):
        """Test that an empty catalog is not an error."""
        assert extract_field({"data": []}, "data.id") == []

    def test_non_array_returns_empty_list(self):
        """Test that a scalar where the array should be yields nothing."""
        assert extract_field({"data": "oops"}, "data.id") == []
        assert extract_field({"data": None}, "data.id") == []

    def test_non_string_fields_skipped(self):
        """Test that numeric and null fields are dropped."""
        document = {"data": [{"id": 1}, {"id": None}, {"id": "ok"}, {"other": "x"}]}

        assert extract_field(document, "data.id") == ["ok"]

    def test_missing_key_raises(self):
        """Test that a missing object key names the failing segment."""
        with pytest.raises(JsonPathError) as excinfo:
            extract_field({"models": []}, "data.id")

        assert excinfo.value.segment == "data"
        assert excinfo.value.position == 0

    def test_non_object_step_raises(self):
        """Test that walking into a list raises with the segment position."""
        with pytest.raises(JsonPathError) as excinfo:
            extract_field({"result": [{"models": []}]}, "result.models.name")

        assert excinfo.value.segment == "models"
        assert excinfo.value.position == 1

    def test_empty_segment_raises(self):
        """Test that a path like 'data..id' is rejected."""
        with pytest.raises(JsonPathError):
            extract_field({"data": []}, "data..id")

    @given(st.lists(st.text()))
    def test_extracts_every_string(self, names: list[str]):
        """Property test: every string field is returned in order."""
        document = {"data": [{"id": name} for name in names]}

        assert extract_field(document, "data.id") == names
