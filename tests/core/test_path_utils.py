"""
Tests for configuration path lookup.
"""

from nodetemplates.core.path_utils import (
    PathComponents,
    format_path,
    get_value_by_path,
    path_segments,
)


class TestPathComponents:
    """Test splitting paths into first segment and remainder."""

    def test_split_dotted_path(self):
        components = PathComponents.split_path("properties.title")
        assert components.first_part == "properties"
        assert components.remainder == ("title",)
        assert components.has_remainder

    def test_split_segment_sequence_keeps_dots_inside_segments(self):
        components = PathComponents.split_path(("childNodes", "a.b"))
        assert components.first_part == "childNodes"
        assert components.remainder == ("a.b",)

    def test_split_single_segment(self):
        components = PathComponents.split_path("when")
        assert components.first_part == "when"
        assert not components.has_remainder


class TestGetValueByPath:
    """Test nested lookup in raw configuration."""

    def test_nested_mapping_lookup(self):
        configuration = {"properties": {"title": "${data.title}"}}
        assert get_value_by_path(configuration, "properties.title") == "${data.title}"

    def test_missing_segment_returns_none(self):
        assert get_value_by_path({"properties": {}}, "properties.title") is None
        assert get_value_by_path({}, "withContext.a") is None

    def test_list_index_lookup(self):
        configuration = {"childNodes": [{"name": "first"}, {"name": "second"}]}
        assert get_value_by_path(configuration, "childNodes.1.name") == "second"
        assert get_value_by_path(configuration, "childNodes.5.name") is None

    def test_scalar_in_the_middle_returns_none(self):
        assert get_value_by_path({"when": True}, "when.deeper") is None

    def test_key_with_dot_via_segments(self):
        configuration = {"properties": {"a.b": 1}}
        assert get_value_by_path(configuration, ("properties", "a.b")) == 1


def test_path_segments_and_format():
    assert path_segments("a.b.c") == ("a", "b", "c")
    assert path_segments(["a", 1]) == ("a", "1")
    assert format_path(("withContext", "key")) == "withContext.key"
