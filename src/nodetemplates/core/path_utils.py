"""
Configuration path utilities.

Template configuration is addressed with dotted paths (``"properties.title"``)
or with explicit segment sequences (``("childNodes", "main")``). Segment
sequences are needed whenever a key itself contains a dot.
"""

from dataclasses import dataclass
from typing import Any

from nodetemplates.core.types import ConfigurationPath


@dataclass
class PathComponents:
    """Result of splitting a path into its first segment and the remainder."""

    first_part: str
    remainder: tuple[str, ...]

    @property
    def has_remainder(self) -> bool:
        return bool(self.remainder)

    @classmethod
    def split_path(cls, path: ConfigurationPath) -> "PathComponents":
        """
        Split a configuration path at its first segment.

        Params:
            path: Dotted path string or sequence of segments

        Returns:
            PathComponents with the first segment and the remaining segments

        Examples:
            "properties.title" -> PathComponents("properties", ("title",))
            ("childNodes", "a.b") -> PathComponents("childNodes", ("a.b",))
        """
        segments = path_segments(path)
        if not segments:
            return cls(first_part="", remainder=())
        return cls(first_part=segments[0], remainder=tuple(segments[1:]))


def path_segments(path: ConfigurationPath) -> tuple[str, ...]:
    """Normalize a dotted path or a segment sequence into a tuple of segments."""
    if isinstance(path, str):
        return tuple(segment for segment in path.split(".") if segment != "")
    return tuple(str(segment) for segment in path)


def format_path(path: ConfigurationPath) -> str:
    """Render a configuration path for messages (segments joined by dots)."""
    return ".".join(path_segments(path))


def get_value_by_path(configuration: Any, path: ConfigurationPath) -> Any:
    """
    Look up a value in nested configuration.

    Mappings are traversed by key, lists by integer index. A missing segment
    anywhere along the way yields None rather than raising, so callers can
    treat "absent" and "explicitly null" alike.

    Params:
        configuration: Nested mappings/lists to read from
        path: Dotted path string or sequence of segments

    Returns:
        The value at the path, or None when any segment is missing
    """
    components = PathComponents.split_path(path)
    if components.first_part == "" and not components.has_remainder:
        return configuration

    current = configuration
    for segment in (components.first_part, *components.remainder):
        if isinstance(current, dict):
            if segment not in current:
                return None
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError):
                return None
        else:
            return None
    return current
