"""Verb table: the monadic and dyadic reading of each primitive glyph.

All verbs build fresh values and never touch their operands, except
monadic ``+`` which hands back the very object it was given.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from itertools import cycle, islice
from typing import Callable, Final

import jax
from jax import lax
import jax.numpy as jnp

from .errors import JShapeError, JTypeError, JUnsupportedError
from .values import ELEMENT_DTYPE, MAX_RANK, Value, box, plain, scalar, shape_count, vector, with_elements

Monad = Callable[[Value], Value]
Dyad = Callable[[Value, Value], Value]

_USE_JITTED_KERNELS: Final[bool] = os.environ.get("JINC_JAX_DISABLE_JITTED_KERNELS", "0") != "1"

_BASE_BINARY_OPS: Final[dict[str, Callable[[jax.Array, jax.Array], jax.Array]]] = {
    "+": lax.add,
}

_JITTED_BINARY_OPS: dict[str, Callable[[jax.Array, jax.Array], jax.Array]] = {}


def _jitted_binary_kernel(op: str) -> Callable[[jax.Array, jax.Array], jax.Array]:
    fn = _JITTED_BINARY_OPS.get(op)
    if fn is None:
        fn = jax.jit(_BASE_BINARY_OPS[op])
        _JITTED_BINARY_OPS[op] = fn
    return fn


def _binary_kernel(op: str) -> Callable[[jax.Array, jax.Array], jax.Array]:
    if _USE_JITTED_KERNELS:
        return _jitted_binary_kernel(op)
    return _BASE_BINARY_OPS[op]


def _require_plain(value: Value, *, where: str) -> None:
    if value.is_boxed:
        raise JTypeError(f"{where} requires a plain (unboxed) argument")


def _as_int_scalar(value: Value, *, where: str) -> int:
    _require_plain(value, where=where)
    if value.rank != 0:
        raise JShapeError(f"{where} requires a rank-0 argument, got rank {value.rank}")
    return int(value.data[0])


# Monads


def identity(right: Value) -> Value:
    return right


def size(right: Value) -> Value:
    """Length of the leading axis; a scalar counts as one item."""
    if right.rank == 0:
        return scalar(1)
    return scalar(right.shape[0])


def iota(right: Value) -> Value:
    n = _as_int_scalar(right, where="~")
    if n < 0:
        raise JShapeError("~ requires a non-negative integer")
    return plain((n,), jnp.arange(n, dtype=ELEMENT_DTYPE))


def box_value(right: Value) -> Value:
    return box(right)


def shape_of(right: Value) -> Value:
    return vector(right.shape)


# Dyads


def plus(left: Value, right: Value) -> Value:
    _require_plain(left, where="+")
    _require_plain(right, where="+")
    if left.shape != right.shape:
        raise JShapeError(f"+ requires equal shapes, got {left.shape} and {right.shape}")
    return plain(right.shape, _binary_kernel("+")(left.data, right.data))


def from_(left: Value, right: Value) -> Value:
    """``i{w``: the i-th cell along the leading axis of ``w``."""
    index = _as_int_scalar(left, where="{")
    if right.rank == 0:
        raise JShapeError("{ requires a right argument of rank 1 or more")
    if not 0 <= index < right.shape[0]:
        raise JShapeError(f"{{ index {index} out of bounds for leading axis of length {right.shape[0]}")
    cell_shape = right.shape[1:]
    step = shape_count(cell_shape)
    start = index * step
    return with_elements(right, cell_shape, right.data[start : start + step])


def reshape(left: Value, right: Value) -> Value:
    """``s#w``: lay the elements of ``w`` out cyclically under shape ``s``.

    The rank of the result is the length of ``s`` (1 when ``s`` is a scalar)
    and its axes are the leading elements of ``s``.
    """
    _require_plain(left, where="#")
    rank = 1 if left.rank == 0 else left.shape[0]
    if rank > MAX_RANK:
        raise JShapeError(f"# result rank {rank} exceeds maximum rank {MAX_RANK}")
    shape = tuple(left.elements()[:rank])
    if len(shape) < rank:
        raise JShapeError(f"# shape argument holds {len(shape)} axes but names rank {rank}")
    if any(axis < 0 for axis in shape):
        raise JShapeError("# shape must be non-negative")

    n = shape_count(shape)
    if n and not right.count:
        raise JShapeError("# cannot fill a non-empty shape from an empty argument")
    if right.is_boxed:
        return with_elements(right, shape, islice(cycle(right.data), n))
    return plain(shape, jnp.resize(right.data, (n,)))


def catenate(left: Value, right: Value) -> Value:
    """``a,w``: both element buffers joined end to end as a vector."""
    if left.kind is not right.kind:
        raise JTypeError(", cannot join plain and boxed values")
    n = left.count + right.count
    if right.is_boxed:
        return with_elements(right, (n,), (*left.data, *right.data))
    return plain((n,), jnp.concatenate((left.data, right.data)))


def _unsupported(glyph: str, valence: str):
    def stub(*_args: Value) -> Value:
        raise JUnsupportedError(f"{valence} {glyph} is not implemented")

    stub.__name__ = f"{valence}_{glyph}_stub"
    return stub


find = _unsupported("~", "dyadic")
box_dyad = _unsupported("<", "dyadic")
ravel = _unsupported(",", "monadic")


@dataclass(frozen=True)
class Verb:
    symbol: str
    monad: Monad
    dyad: Dyad


VERBS: Final[dict[str, Verb]] = {
    "+": Verb("+", identity, plus),
    "{": Verb("{", size, from_),
    "~": Verb("~", iota, find),
    "<": Verb("<", box_value, box_dyad),
    "#": Verb("#", shape_of, reshape),
    ",": Verb(",", ravel, catenate),
}


def _lookup(op: str) -> Verb:
    verb = VERBS.get(op)
    if verb is None:
        raise JUnsupportedError(f"Unknown verb {op!r}")
    return verb


def apply_monad(op: str, right: Value) -> Value:
    return _lookup(op).monad(right)


def apply_dyad(op: str, left: Value, right: Value) -> Value:
    return _lookup(op).dyad(left, right)
