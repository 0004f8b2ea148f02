"""
Tests for exception messages and the exception hierarchy.
"""

import pytest

from nodetemplates.exceptions import (
    EvaluationError,
    InvalidPropertyNameError,
    NodeCreationError,
    NodeTemplatesError,
    NodeTypeNotFoundError,
    NotIterableError,
    PropertyIgnoredError,
    ReferenceResolutionError,
    TemplateConfigurationError,
)


class TestTemplateConfigurationError:
    def test_root_level_message(self):
        error = TemplateConfigurationError("type", "root")

        assert str(error) == 'Root template configuration has illegal key "type"'
        assert (error.key, error.level, error.path) == ("type", "root", "")

    def test_nested_level_message_with_path(self):
        error = TemplateConfigurationError("bogus", "nested", "childNodes.main")

        assert str(error) == "Template configuration has illegal key \"bogus\" at 'childNodes.main'"

    def test_is_a_value_error(self):
        assert isinstance(TemplateConfigurationError("x", "root"), ValueError)


class TestRecoverableErrors:
    def test_messages(self):
        assert str(NotIterableError(5)) == "Type int is not iterable."
        assert str(EvaluationError("a +", "unexpected end")) == (
            'Expression "a +" could not be evaluated: unexpected end'
        )
        assert str(ReferenceResolutionError("featuredPage", "Vendor:Page", ["a"])) == (
            'Reference could not be set, because node reference(s) ["a"] cannot be resolved.'
        )
        assert str(NodeTypeNotFoundError("Vendor:Unknown")) == (
            "Node of type 'Vendor:Unknown' could not be created: node type is not declared"
        )

    def test_attributes(self):
        error = PropertyIgnoredError("title", "Vendor:Page", "Because reasons.")

        assert (error.property_name, error.node_type, error.reason) == (
            "title",
            "Vendor:Page",
            "Because reasons.",
        )
        assert str(error) == "Because reasons."

    @pytest.mark.parametrize(
        "error",
        [
            TemplateConfigurationError("x", "root"),
            InvalidPropertyNameError("_x", "reserved"),
            EvaluationError("x", "reason"),
            NotIterableError(1),
            PropertyIgnoredError("p", "T", "reason"),
            ReferenceResolutionError("r", "T", None),
            NodeCreationError("T", "reason"),
            NodeTypeNotFoundError("T"),
        ],
    )
    def test_common_base_class(self, error):
        assert isinstance(error, NodeTemplatesError)
