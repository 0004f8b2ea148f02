"""
Structured, non-fatal error records collected during a template invocation.

A CaughtException wraps a recoverable error together with where it came from
(origin) and what triggered it (cause). All records of one build and apply
invocation are appended to a single CaughtExceptions sink which is threaded
by reference through every builder, factory and validator.
"""

from collections.abc import Iterator

from attrs import evolve, frozen


@frozen
class CaughtException:
    """A recorded recoverable error with optional origin and cause labels.

    Origin and cause are attached while the error travels outward; the
    innermost label wins, `with_origin` and `with_cause` never overwrite a
    label that is already set.
    """

    exception: BaseException
    origin: str | None = None
    cause: str | None = None

    @classmethod
    def from_exception(cls, exception: BaseException) -> "CaughtException":
        return cls(exception=exception)

    def with_origin(self, origin: str) -> "CaughtException":
        if self.origin is not None:
            return self
        return evolve(self, origin=origin)

    def with_cause(self, cause: str) -> "CaughtException":
        if self.cause is not None:
            return self
        return evolve(self, cause=cause)

    def to_message(self) -> str:
        """
        Render the record as a single human readable line.

        Returns:
            "<origin> | <cause> | <ExceptionClass>(<message>)" without absent parts
        """
        parts = [part for part in (self.origin, self.cause) if part]
        parts.append(f"{type(self.exception).__name__}({self.exception})")
        return " | ".join(parts)


class CaughtExceptions:
    """Append-only, ordered collection of CaughtException records.

    Empty means the whole tree was built and applied without any rejected
    branch, failed expression or invalid property or reference.
    """

    def __init__(self):
        self._exceptions: list[CaughtException] = []

    def add(self, caught_exception: CaughtException) -> None:
        self._exceptions.append(caught_exception)

    def has_exceptions(self) -> bool:
        return bool(self._exceptions)

    def first(self) -> CaughtException | None:
        return self._exceptions[0] if self._exceptions else None

    def to_messages(self) -> list[str]:
        return [caught.to_message() for caught in self._exceptions]

    def __iter__(self) -> Iterator[CaughtException]:
        return iter(tuple(self._exceptions))

    def __len__(self) -> int:
        return len(self._exceptions)

    def __bool__(self) -> bool:
        return self.has_exceptions()

    def __repr__(self) -> str:
        return f"CaughtExceptions({self.to_messages()!r})"
