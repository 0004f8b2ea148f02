"""
Tests for shared helpers.
"""

from datetime import date

from nodetemplates.core import json_dump
from nodetemplates.exceptions import ReferenceResolutionError


class TestJsonDump:
    def test_json_values(self):
        assert json_dump("red") == '"red"'
        assert json_dump([1, None]) == "[1, null]"
        assert json_dump({"a": True}) == '{"a": true}'

    def test_objects_use_their_text(self):
        assert json_dump(date(2024, 1, 2)) == '"2024-01-02"'

    def test_unencodable_values_use_repr(self):
        value = {(1, 2): "tuple key"}
        assert json_dump(value) == repr(value)

    def test_used_for_exception_messages(self):
        error = ReferenceResolutionError("featuredPage", "Vendor:Page", date(2024, 1, 2))
        assert '"2024-01-02"' in str(error)
