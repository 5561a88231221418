"""Evaluator for the J subset on top of JAX."""

from __future__ import annotations

import os
import string
from collections.abc import MutableMapping
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Final, overload

from .ast import Assign, Expr, Infix, Name, Noun, Prefix
from .errors import JError, JParseError, JValueError, classify_runtime_exception
from .parser import ParseError, parse
from .values import Value, as_value, scalar
from .verbs import apply_dyad, apply_monad

VARIABLE_NAMES: Final[str] = string.ascii_lowercase

_PARSE_CACHE_MAX: Final[int] = max(1, int(os.environ.get("JINC_JAX_PARSE_CACHE_MAX", "256")))


@lru_cache(maxsize=_PARSE_CACHE_MAX)
def _parse_cached(source: str) -> Expr | None:
    return parse(source)


def _slot_index(name: object) -> int | None:
    if not isinstance(name, str) or len(name) != 1:
        return None
    index = VARIABLE_NAMES.find(name.lower())
    return None if index < 0 else index


class VariableTable(MutableMapping[str, Value]):
    """The 26 variable slots ``a`` to ``z``; an unassigned slot is absent."""

    def __init__(self) -> None:
        self._slots: list[Value | None] = [None] * len(VARIABLE_NAMES)

    def _index_for_write(self, key: str) -> int:
        index = _slot_index(key)
        if index is None:
            raise ValueError(f"{key!r} is not a variable name; expected a single letter a-z")
        return index

    def __getitem__(self, key: str) -> Value:
        index = _slot_index(key)
        value = None if index is None else self._slots[index]
        if value is None:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: Value) -> None:
        if not isinstance(value, Value):
            raise TypeError(f"variable {key!r} can only hold a Value, got {type(value).__name__}")
        self._slots[self._index_for_write(key)] = value

    def __delitem__(self, key: str) -> None:
        index = _slot_index(key)
        if index is None or self._slots[index] is None:
            raise KeyError(key)
        self._slots[index] = None

    def __iter__(self):
        for name, value in zip(VARIABLE_NAMES, self._slots, strict=True):
            if value is not None:
                yield name

    def __len__(self) -> int:
        return sum(1 for value in self._slots if value is not None)


@dataclass
class _LineScope:
    """Assignments made while evaluating one line, held back until it succeeds."""

    table: VariableTable
    pending: dict[str, Value] = field(default_factory=dict)

    def lookup(self, name: str) -> Value:
        if name in self.pending:
            return self.pending[name]
        try:
            return self.table[name]
        except KeyError:
            raise JValueError(f"Undefined variable {name!r}") from None

    def assign(self, name: str, value: Value) -> None:
        self.pending[name] = value

    def commit(self) -> None:
        for name, value in self.pending.items():
            self.table[name] = value
        self.pending.clear()


class EvaluationEnvironment(MutableMapping[str, object]):
    """Persistent evaluation environment for stateful evaluate() calls."""

    def __init__(self, data: MutableMapping[str, object] | None = None) -> None:
        self.table = VariableTable()
        if data is not None:
            for name, value in data.items():
                self[name] = value

    def __getitem__(self, key: str) -> Value:
        return self.table[key]

    def __setitem__(self, key: str, value: object) -> None:
        self.table[key] = as_value(value)

    def __delitem__(self, key: str) -> None:
        del self.table[key]

    def __iter__(self):
        return iter(self.table)

    def __len__(self) -> int:
        return len(self.table)

    @property
    def variables(self) -> dict[str, Value]:
        return dict(self.table.items())


@dataclass
class StatefulEvaluate:
    """Callable wrapper that evaluates source in a persistent environment."""

    env: EvaluationEnvironment

    def __call__(self, source: str) -> Value | None:
        result, _ = evaluate(source, self.env)
        return result


def _eval_leaf(expr: Expr, scope: _LineScope) -> Value:
    if isinstance(expr, Noun):
        return scalar(expr.value)

    if isinstance(expr, Name):
        return scope.lookup(expr.value)

    raise TypeError(f"Unsupported expression node: {type(expr)!r}")


def _eval_expr(expr: Expr, scope: _LineScope) -> Value:
    # Walk the right spine down to its leaf, then apply the pending nodes
    # on the way back out; only a parenthesised left operand recurses.
    spine: list[Prefix | Infix | Assign] = []
    while isinstance(expr, (Prefix, Infix, Assign)):
        spine.append(expr)
        expr = expr.right

    value = _eval_leaf(expr, scope)
    for node in reversed(spine):
        if isinstance(node, Prefix):
            value = apply_monad(node.op, value)
        elif isinstance(node, Infix):
            # The right argument is the rest of the line and is computed first.
            left = _eval_expr(node.left, scope)
            value = apply_dyad(node.op, left, value)
        else:
            scope.assign(node.target.value, value)
    return value


def _evaluate_with_table(source: str, table: VariableTable) -> Value | None:
    parsed = _parse_cached(source)
    if parsed is None:
        return None
    scope = _LineScope(table=table)
    result = _eval_expr(parsed, scope)
    scope.commit()
    return result


@overload
def evaluate(source: str) -> Value | None:
    ...


@overload
def evaluate(source: str, env: MutableMapping[str, object]) -> Value | None:
    ...


@overload
def evaluate(source: str, env: EvaluationEnvironment) -> tuple[Value | None, EvaluationEnvironment]:
    ...


@overload
def evaluate(env: EvaluationEnvironment) -> StatefulEvaluate:
    ...


@overload
def evaluate(env: MutableMapping[str, object]) -> StatefulEvaluate:
    ...


def evaluate(
    source_or_env: str | EvaluationEnvironment | MutableMapping[str, object],
    env: MutableMapping[str, object] | EvaluationEnvironment | None = None,
):
    """Parse and evaluate one line, with optional persistent environment support.

    A blank line evaluates to ``None``. With an :class:`EvaluationEnvironment`
    the result is returned together with the (updated) environment; a plain
    mapping seeds a throwaway environment and is left untouched.
    """
    if isinstance(source_or_env, str):
        if isinstance(env, EvaluationEnvironment):
            result = _evaluate_with_table(source_or_env, env.table)
            return result, env

        runtime_env = EvaluationEnvironment(env)
        return _evaluate_with_table(source_or_env, runtime_env.table)

    if env is not None:
        raise TypeError("evaluate(env) form takes exactly one argument")

    if isinstance(source_or_env, EvaluationEnvironment):
        return StatefulEvaluate(source_or_env)

    if isinstance(source_or_env, MutableMapping):
        return StatefulEvaluate(EvaluationEnvironment(source_or_env))

    raise TypeError(
        "evaluate() expects either source text, an EvaluationEnvironment, or a mapping"
    )


def evaluate_with_errors(source: str, *, env: MutableMapping[str, object] | EvaluationEnvironment | None = None) -> Value | None:
    """Evaluate one line, raising every failure as a :class:`JError` subclass."""
    try:
        if isinstance(env, EvaluationEnvironment):
            result, _ = evaluate(source, env)
            return result
        return evaluate(source, env)
    except ParseError as err:
        raise JParseError.from_parse_error(err) from err
    except JError:
        raise
    except Exception as err:
        raise classify_runtime_exception(err) from err
