"""
Settings of the node templates engine.

Settings can be created from a dict or a YAML file with partial overrides;
only specified values override the defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import fields as dataclass_fields
from pathlib import Path
from typing import Any

import yaml


@dataclass
class NodeTemplatesSettings:
    """Configuration of the template application engine.

    Every setting has a usable default, so an empty settings file or no
    settings at all give the behaviour of a stock Neos installation:

        service = NodeTemplateService(store, NodeTemplatesSettings.from_yaml("Settings.yaml"))
    """

    # Nodes of this type (or a subtype) get a uriPathSegment derived from their title
    document_node_type: str = "Neos.Neos:Document"

    # Editor identifier of select-box properties whose values are checked against the options
    select_box_editor: str = "Neos.Neos/Inspector/Editors/SelectBoxEditor"

    # Write references whose nodes cannot be resolved instead of dropping them
    keep_unresolvable_references: bool = False

    # Log every caught exception of an invocation as a warning
    log_caught_exceptions: bool = True

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> NodeTemplatesSettings:
        """
        Build settings from a mapping of overrides.

        Keys that are not settings fields (e.g. settings of other packages
        sharing the same file) are ignored.

        Params:
            config: Setting names mapped to override values

        Returns:
            NodeTemplatesSettings with the defaults of all absent settings
        """
        valid_fields = {f.name for f in dataclass_fields(cls)}
        filtered = {k: v for k, v in config.items() if k in valid_fields}
        return cls(**filtered)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> NodeTemplatesSettings:
        """
        Load settings overrides from a YAML file.

        An empty file yields the defaults.

        Params:
            yaml_path: YAML file mapping setting names to values, e.g.

                document_node_type: "Vendor:Document"
                keep_unresolvable_references: true

        Returns:
            NodeTemplatesSettings with the file's overrides applied
        """
        path = Path(yaml_path)
        with path.open() as f:
            config = yaml.safe_load(f) or {}

        return cls.from_dict(config)
