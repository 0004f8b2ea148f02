"""
Explicit result variants for configuration evaluation and template building.

Abandoning a branch is part of the return type: `process_configuration`
returns `Evaluated | Aborted`, and each factory step returns
`Built | Skipped | Aborted`. `Skipped` is the normal outcome of a falsy
`when`; `Aborted` means the branch failed and the failure has already been
recorded in the shared CaughtExceptions sink.
"""

from typing import TYPE_CHECKING, Any

from attrs import frozen

from nodetemplates.domain.caught_exceptions import CaughtException

if TYPE_CHECKING:
    from nodetemplates.domain.template import Template


@frozen
class Evaluated:
    """A successfully processed configuration value."""

    value: Any


@frozen
class Built:
    """A template part that was built completely."""

    template: "Template"


@frozen
class Skipped:
    """A template part whose `when` condition did not hold."""

    pass


@frozen
class Aborted:
    """A template part abandoned because of a recorded error."""

    caught_exception: CaughtException


Evaluation = Evaluated | Aborted

BuildResult = Built | Skipped | Aborted
