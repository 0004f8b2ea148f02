"""
Shared test fixtures for the nodetemplates test suite.
"""

import pytest

from nodetemplates.content_repository import InMemoryNodeStore, NodeTypeManager
from nodetemplates.domain import CaughtExceptions
from nodetemplates.expressions import ExpressionValueProcessor
from nodetemplates.application import NodeTemplateService

SELECT_BOX_EDITOR = "Neos.Neos/Inspector/Editors/SelectBoxEditor"

NODE_TYPES = {
    "Neos.Neos:Node": {"abstract": True},
    "Neos.Neos:Document": {
        "abstract": True,
        "superTypes": {"Neos.Neos:Node": True},
        "properties": {
            "title": {"type": "string"},
            "uriPathSegment": {"type": "string"},
        },
    },
    "Neos.Neos:Content": {"abstract": True, "superTypes": {"Neos.Neos:Node": True}},
    "Neos.Neos:ContentCollection": {"superTypes": {"Neos.Neos:Node": True}},
    "Vendor:Page": {
        "superTypes": {"Neos.Neos:Document": True},
        "childNodes": {"main": {"type": "Neos.Neos:ContentCollection"}},
        "properties": {
            "layout": {
                "type": "string",
                "defaultValue": "default",
                "ui": {
                    "inspector": {
                        "editor": SELECT_BOX_EDITOR,
                        "editorOptions": {
                            "values": {"default": {"label": "Default"}, "wide": {"label": "Wide"}}
                        },
                    }
                },
            },
            "tags": {"type": "array<string>"},
            "publishDate": {"type": "DateTime"},
            "featuredPage": {"type": "reference"},
            "relatedPages": {"type": "references"},
        },
    },
    "Vendor:BlogPost": {
        "superTypes": {"Vendor:Page": True},
        "options": {
            "template": {
                "properties": {"title": "${data.title}"},
                "childNodes": {
                    "main": {
                        "name": "main",
                        "childNodes": {
                            "intro": {
                                "type": "Vendor:Text",
                                "name": "intro",
                                "properties": {"text": "${'Intro of ' ~ data.title}"},
                            }
                        },
                    }
                },
            }
        },
    },
    "Vendor:Text": {
        "superTypes": {"Neos.Neos:Content": True},
        "properties": {
            "text": {"type": "string"},
            "level": {"type": "integer", "defaultValue": 1},
            "highlighted": {"type": "boolean"},
        },
    },
}


@pytest.fixture
def node_type_manager():
    return NodeTypeManager(NODE_TYPES)


@pytest.fixture
def store(node_type_manager):
    return InMemoryNodeStore(node_type_manager)


@pytest.fixture
def home(store):
    """Root page named 'home' with its tethered 'main' collection."""
    return store.create_root("Vendor:Page", "home")


@pytest.fixture
def service(store):
    return NodeTemplateService(store)


@pytest.fixture
def processor():
    return ExpressionValueProcessor()


@pytest.fixture
def caught_exceptions():
    return CaughtExceptions()
