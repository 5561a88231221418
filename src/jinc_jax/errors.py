"""Exceptions raised by the interpreter.

Parse failures and runtime failures are kept apart: ``JParseError`` keeps the
source span of a malformed line, while the ``JRuntimeError`` subclasses name
which verb contract a well-formed line broke.
"""

from __future__ import annotations

from dataclasses import dataclass

from .parser import ParseError


class JError(Exception):
    """Base class for structured jinc-jax errors."""


@dataclass(frozen=True)
class JParseError(JError):
    """A line that does not match the grammar, with the offending span."""

    message: str
    start: int
    end: int
    expected: tuple[str, ...] = ()
    found: str | None = None

    @classmethod
    def from_parse_error(cls, err: ParseError) -> "JParseError":
        return cls(err.message, err.start, err.end, err.expected, err.found)

    def __str__(self) -> str:
        return str(ParseError(self.message, self.start, self.end, self.expected, self.found))


class JRuntimeError(JError):
    """A well-formed line failed while it was being evaluated."""


class JShapeError(JRuntimeError):
    """Operand shapes, ranks or an index do not fit the verb."""


class JTypeError(JRuntimeError):
    """Runtime value-kind failure, e.g. arithmetic on a boxed value."""


class JValueError(JRuntimeError):
    """A variable was read before anything was assigned to it."""


class JUnsupportedError(JRuntimeError):
    """The verb exists in the table but this valence has no implementation."""


class JDepthError(JRuntimeError):
    """The line nests parentheses or boxes deeper than the interpreter can follow."""


def classify_runtime_exception(err: Exception) -> JRuntimeError:
    """Map an exception that escaped the verbs onto the runtime hierarchy."""
    if isinstance(err, RecursionError):
        return JDepthError("Expression nests too deeply")
    return JRuntimeError(f"{type(err).__name__}: {err}")
