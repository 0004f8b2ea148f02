"""Naming helpers for nodes."""

import hashlib

from inflection import parameterize


def render_valid_node_name(name: str) -> str:
    """
    Render a URL and node-name safe segment from arbitrary text.

    The result is deterministic: the same text always yields the same segment.

    Params:
        name: Text such as a page title

    Returns:
        Lowercase, transliterated, dash-separated segment; `node-<hash>` if
        nothing usable is left of the text
    """
    segment = parameterize(str(name))
    if segment:
        return segment
    return "node-" + hashlib.sha1(str(name).encode("utf-8")).hexdigest()[:13]
