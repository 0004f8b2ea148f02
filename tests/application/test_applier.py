"""
Tests for NodeTemplateApplier.

Focus Areas:
1. Applying evaluated templates to existing and new nodes
2. Lazy build-and-apply with `node` and `parentNode` in the context
3. Meta properties and uriPathSegment derivation
4. Listener notification order
"""

import logging

import pytest

from nodetemplates.application import NodeTemplateApplier
from nodetemplates.domain import CaughtExceptions, Template, TemplateBuilder, Templates
from nodetemplates.exceptions import (
    InvalidPropertyNameError,
    NodeCreationError,
    NodeTypeNotFoundError,
    PropertyIgnoredError,
)
from nodetemplates.settings import NodeTemplatesSettings


@pytest.fixture
def applier(store):
    return NodeTemplateApplier(store)


@pytest.fixture
def root_builder(processor, caught_exceptions):
    def _root_builder(configuration, context=None):
        return TemplateBuilder.create_for_root(
            configuration, context or {}, processor, caught_exceptions
        )

    return _root_builder


def text(name, **properties):
    return Template(type="Vendor:Text", name=name, properties=properties)


class TestApply:
    """Applying an already evaluated template tree."""

    def test_properties_and_new_children(self, applier, home, caught_exceptions):
        template = Template(
            properties={"title": "Home"},
            child_nodes=Templates(
                [Template(name="main", child_nodes=Templates([text("intro", text="Hi", level=2)]))]
            ),
        )

        applier.apply(template, home, caught_exceptions)

        intro = home.get_child("main").get_child("intro")
        assert home.get_property("title") == "Home"
        assert intro.node_type.name == "Vendor:Text"
        assert intro.properties == {"level": 2, "text": "Hi"}
        assert not caught_exceptions

    def test_existing_child_is_reused_and_type_ignored(self, applier, store, home, caught_exceptions):
        main = home.get_child("main")
        existing = store.create_child(main, "Vendor:Text", "intro")
        template = Template(
            child_nodes=Templates(
                [Template(type="Vendor:Page", name="main", child_nodes=Templates([text("intro", text="Hi")]))]
            )
        )

        applier.apply(template, home, caught_exceptions)

        assert main.node_type.name == "Neos.Neos:ContentCollection"
        assert main.children == [existing]
        assert existing.get_property("text") == "Hi"
        assert not caught_exceptions

    def test_failed_creation_skips_subtree_only(self, applier, home, caught_exceptions):
        main = home.get_child("main")
        template = Template(
            child_nodes=Templates(
                [
                    Template(
                        name="main",
                        child_nodes=Templates(
                            [
                                Template(
                                    type="Vendor:Unknown",
                                    name="broken",
                                    child_nodes=Templates([text("deep")]),
                                ),
                                Template(name="untyped"),
                                text("ok"),
                            ]
                        ),
                    )
                ]
            )
        )

        applier.apply(template, home, caught_exceptions)

        assert [child.name for child in main.children] == ["ok"]
        assert len(caught_exceptions) == 2
        first, second = caught_exceptions
        assert isinstance(first.exception, NodeTypeNotFoundError)
        assert first.origin == 'Child node "broken" of "/home/main"'
        assert isinstance(second.exception, NodeCreationError)

    def test_invalid_values_are_dropped_individually(self, applier, home, caught_exceptions):
        template = Template(properties={"title": 5, "layout": "wide", "undeclared": "x"})

        applier.apply(template, home, caught_exceptions)

        assert home.properties == {"layout": "wide"}
        assert len(caught_exceptions) == 2
        assert all(isinstance(caught.exception, PropertyIgnoredError) for caught in caught_exceptions)

    def test_references(self, applier, store, home, caught_exceptions):
        other = store.create_child(home, "Vendor:Page", "other")
        template = Template(
            properties={"featuredPage": other, "relatedPages": [other.identifier, "missing"]}
        )

        applier.apply(template, home, caught_exceptions)

        assert home.references == {"featuredPage": other.identifier}
        assert len(caught_exceptions) == 1
        assert caught_exceptions.first().origin == 'Reference "relatedPages" in NodeType "Vendor:Page"'

    def test_keep_unresolvable_references(self, store, home, caught_exceptions):
        applier = NodeTemplateApplier(
            store, NodeTemplatesSettings(keep_unresolvable_references=True)
        )

        applier.apply(Template(properties={"relatedPages": ["missing"]}), home, caught_exceptions)

        assert home.references == {"relatedPages": ["missing"]}
        assert len(caught_exceptions) == 1

    def test_legacy_property_name_is_fatal(self, applier, home, caught_exceptions):
        with pytest.raises(InvalidPropertyNameError):
            applier.apply(Template(properties={"_hidden": True}), home, caught_exceptions)


class TestMetaProperties:
    def test_hidden_is_applied_to_node(self, applier, home, caught_exceptions):
        applier.apply(Template(properties={"hidden": True}), home, caught_exceptions)

        assert home.hidden
        assert "hidden" not in home.properties
        assert not caught_exceptions

    def test_hidden_must_be_boolean(self, applier, home, caught_exceptions):
        applier.apply(Template(properties={"hidden": "yes"}), home, caught_exceptions)

        assert not home.hidden
        assert caught_exceptions.first().origin == 'Property "hidden" in NodeType "Vendor:Page"'


class TestUriPathSegment:
    """Derivation of uriPathSegment for new document nodes."""

    def test_derived_from_title_of_new_document(self, applier, home, caught_exceptions):
        template = Template(
            child_nodes=Templates(
                [Template(type="Vendor:Page", name="about", properties={"title": "About Us!"})]
            )
        )

        applier.apply(template, home, caught_exceptions)

        assert home.get_child("about").get_property("uriPathSegment") == "about-us"

    def test_explicit_value_wins(self, applier, home, caught_exceptions):
        template = Template(
            child_nodes=Templates(
                [
                    Template(
                        type="Vendor:Page",
                        name="about",
                        properties={"title": "About Us", "uriPathSegment": "company"},
                    )
                ]
            )
        )

        applier.apply(template, home, caught_exceptions)

        assert home.get_child("about").get_property("uriPathSegment") == "company"

    def test_not_derived_for_existing_or_non_document_nodes(self, applier, home, caught_exceptions):
        template = Template(
            properties={"title": "Home"},
            child_nodes=Templates([Template(name="main", child_nodes=Templates([text("t")]))]),
        )

        applier.apply(template, home, caught_exceptions)

        assert home.get_property("uriPathSegment") is None
        assert home.get_child("main").get_child("t").get_property("uriPathSegment") is None

    def test_configurable_document_type(self, store, home, caught_exceptions):
        applier = NodeTemplateApplier(store, NodeTemplatesSettings(document_node_type="Vendor:BlogPost"))
        template = Template(
            child_nodes=Templates(
                [Template(type="Vendor:Page", name="about", properties={"title": "About"})]
            )
        )

        applier.apply(template, home, caught_exceptions)

        assert home.get_child("about").get_property("uriPathSegment") is None


class TestListeners:
    def test_post_order_notification_with_options(self, applier, home, caught_exceptions):
        calls = []
        applier.on_node_template_applied(
            lambda node, context, options: calls.append((node.path, options["source"]))
        )
        template = Template(
            child_nodes=Templates(
                [Template(name="main", child_nodes=Templates([text("a"), text("b")]))]
            )
        )

        applier.apply(template, home, caught_exceptions, options={"source": "test"})

        assert calls == [
            ("/home/main/a", "test"),
            ("/home/main/b", "test"),
            ("/home/main", "test"),
            ("/home", "test"),
        ]

    def test_context_carries_node_and_parent(self, applier, home, caught_exceptions):
        contexts = {}
        applier.on_node_template_applied(
            lambda node, context, options: contexts.setdefault(node.path, context)
        )

        applier.apply(
            Template(child_nodes=Templates([Template(name="main")])),
            home,
            caught_exceptions,
            context={"data": 1},
        )

        assert contexts["/home"]["node"] is home
        assert contexts["/home/main"]["parentNode"] is home
        assert contexts["/home/main"]["data"] == 1


class TestBuildAndApply:
    """Lazy evaluation right before nodes are materialized."""

    def test_expressions_see_node_and_parent_node(self, applier, root_builder, home, caught_exceptions):
        builder = root_builder(
            {
                "properties": {"title": "${'Page ' ~ node.name}"},
                "childNodes": {
                    "main": {
                        "name": "main",
                        "childNodes": {
                            "text": {
                                "type": "Vendor:Text",
                                "name": "text",
                                "properties": {
                                    "text": "${parentNode.name ~ ' of ' ~ parentNode.parent.get_property('title')}"
                                },
                            }
                        },
                    }
                },
            }
        )

        template = applier.build_and_apply(builder, home)

        assert home.get_property("title") == "Page home"
        assert home.get_child("main").get_child("text").get_property("text") == "main of Page home"
        assert template.child_nodes[0].type == "Neos.Neos:ContentCollection"
        assert template.child_nodes[0].child_nodes[0].properties == {"text": "main of Page home"}
        assert not caught_exceptions

    def test_existing_node_type_is_not_evaluated(self, applier, root_builder, home, caught_exceptions):
        builder = root_builder({"childNodes": {"main": {"name": "main", "type": "${missing}"}}})

        template = applier.build_and_apply(builder, home)

        assert len(template.child_nodes) == 1
        assert not caught_exceptions

    def test_with_items_creates_one_node_per_item(self, applier, root_builder, home, caught_exceptions):
        builder = root_builder(
            {
                "childNodes": {
                    "main": {
                        "name": "main",
                        "childNodes": {
                            "texts": {
                                "withItems": "${items}",
                                "type": "Vendor:Text",
                                "name": "${'text-' ~ key}",
                                "properties": {"text": "${item}", "highlighted": "${key == 0}"},
                            }
                        },
                    }
                }
            },
            {"items": ["one", "two"]},
        )

        applier.build_and_apply(builder, home)

        main = home.get_child("main")
        assert [(child.name, child.properties["text"]) for child in main.children] == [
            ("text-0", "one"),
            ("text-1", "two"),
        ]
        assert main.get_child("text-0").get_property("highlighted") is True
        assert not caught_exceptions

    def test_false_condition_skips_with_items(self, applier, root_builder, home, caught_exceptions):
        builder = root_builder(
            {
                "childNodes": {
                    "main": {
                        "name": "main",
                        "childNodes": {
                            "texts": {
                                "when": "${parentNode.name == 'other'}",
                                "withItems": "${undefined_items}",
                                "type": "Vendor:Text",
                            }
                        },
                    }
                }
            }
        )

        template = applier.build_and_apply(builder, home)

        assert home.get_child("main").children == []
        assert len(template.child_nodes[0].child_nodes) == 0
        assert not caught_exceptions

    def test_false_root_condition_changes_nothing(self, applier, root_builder, home, caught_exceptions):
        calls = []
        applier.on_node_template_applied(lambda node, context, options: calls.append(node))

        template = applier.build_and_apply(
            root_builder({"when": "${node.name == 'other'}", "properties": {"title": "x"}}), home
        )

        assert template == Template.empty()
        assert home.get_property("title") is None
        assert calls == []

    def test_failing_parts_are_isolated(self, applier, root_builder, home, caught_exceptions):
        builder = root_builder(
            {
                "properties": {"title": "${missing}", "layout": "wide"},
                "childNodes": {
                    "main": {
                        "name": "main",
                        "childNodes": {
                            "broken": {"type": "Vendor:Text", "name": "${nope}"},
                            "ok": {"type": "Vendor:Text", "name": "ok"},
                        },
                    }
                },
            }
        )

        applier.build_and_apply(builder, home)

        assert home.properties == {"layout": "wide"}
        assert [child.name for child in home.get_child("main").children] == ["ok"]
        assert len(caught_exceptions) == 2
        assert caught_exceptions.first().origin == 'Property "title" in NodeType "Vendor:Page"'

    def test_node_creation_is_logged(self, applier, root_builder, home, caplog):
        builder = root_builder(
            {"childNodes": {"about": {"type": "Vendor:Page", "name": "about"}}}
        )

        with caplog.at_level(logging.INFO, logger="nodetemplates"):
            applier.build_and_apply(builder, home)

        assert "Created node /home/about of type Vendor:Page" in caplog.text


def test_new_sink_per_invocation_is_independent(applier, home):
    first = CaughtExceptions()
    second = CaughtExceptions()

    applier.apply(Template(properties={"undeclared": 1}), home, first)
    applier.apply(Template(properties={"title": "ok"}), home, second)

    assert len(first) == 1
    assert not second
