"""Runtime value model and validators for the J subset.

Every runtime value is a :class:`Value`: a shape of at most three axes and a
flat element buffer. Plain values keep their integers in a ``jnp.int32``
buffer; boxed values keep references to other values. Values are never
mutated after construction, so the same object can sit in several variables
or boxes at once.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Final, Union

import jax
import jax.numpy as jnp

MAX_RANK: Final[int] = 3
ELEMENT_DTYPE: Final = jnp.int32


class ValueKind(str, Enum):
    PLAIN = "plain"
    BOXED = "boxed"


@dataclass(frozen=True, eq=False)
class Value:
    kind: ValueKind
    shape: tuple[int, ...]
    data: Union[jax.Array, tuple["Value", ...]]

    def __post_init__(self) -> None:
        validate_value(self)

    @property
    def rank(self) -> int:
        return len(self.shape)

    @property
    def count(self) -> int:
        return shape_count(self.shape)

    @property
    def is_boxed(self) -> bool:
        return self.kind is ValueKind.BOXED

    def elements(self) -> list:
        """Element buffer as Python ints, or as the inner values of a boxed array."""
        if self.is_boxed:
            return list(self.data)
        return [int(x) for x in self.data.tolist()]

    def as_array(self) -> jax.Array:
        if self.is_boxed:
            raise TypeError("Boxed values have no numeric array view")
        return jnp.reshape(self.data, self.shape)

    def __repr__(self) -> str:
        return f"Value(kind={self.kind.value}, shape={self.shape}, elements={self.elements()!r})"


@dataclass(frozen=True)
class ValueInfo:
    kind: ValueKind
    shape: tuple[int, ...]
    rank: int
    count: int
    depth: int


@dataclass(frozen=True)
class Boxed:
    """Python-side view of one box capsule, produced by :func:`to_python`."""

    inner: object


def shape_count(shape: tuple[int, ...]) -> int:
    return math.prod(shape)


def validate_value(value: Value, *, where: str = "value") -> None:
    if not isinstance(value.kind, ValueKind):
        raise TypeError(f"{where} has unsupported kind {value.kind!r}")
    if not isinstance(value.shape, tuple):
        raise TypeError(f"{where} shape must be a tuple, got {type(value.shape).__name__}")
    if len(value.shape) > MAX_RANK:
        raise ValueError(f"{where} rank {len(value.shape)} exceeds maximum rank {MAX_RANK}")
    for axis in value.shape:
        if not isinstance(axis, int) or isinstance(axis, bool) or axis < 0:
            raise ValueError(f"{where} shape {value.shape!r} must hold non-negative integers")

    count = shape_count(value.shape)
    if value.kind is ValueKind.BOXED:
        if not isinstance(value.data, tuple):
            raise TypeError(f"{where} boxed elements must be a tuple")
        if len(value.data) != count:
            raise ValueError(f"{where} holds {len(value.data)} elements but shape {value.shape!r} needs {count}")
        for idx, item in enumerate(value.data):
            if not isinstance(item, Value):
                raise TypeError(f"{where}[{idx}] is not a Value")
        return

    if not isinstance(value.data, jax.Array):
        raise TypeError(f"{where} elements must be a jax array, got {type(value.data).__name__}")
    if value.data.ndim != 1:
        raise ValueError(f"{where} element buffer must be flat")
    if not jnp.issubdtype(value.data.dtype, jnp.integer):
        raise TypeError(f"{where} elements must be integer, got dtype {value.data.dtype}")
    if value.data.shape[0] != count:
        raise ValueError(f"{where} holds {value.data.shape[0]} elements but shape {value.shape!r} needs {count}")


def plain(shape, data) -> Value:
    """Build a plain value from a shape and a flat (or shaped) element buffer."""
    if not hasattr(data, "dtype"):
        data = list(data)
    buffer = jnp.ravel(jnp.asarray(data, dtype=ELEMENT_DTYPE))
    return Value(kind=ValueKind.PLAIN, shape=tuple(int(d) for d in shape), data=buffer)


def boxed(shape, items) -> Value:
    return Value(kind=ValueKind.BOXED, shape=tuple(int(d) for d in shape), data=tuple(items))


def scalar(n: int) -> Value:
    return plain((), [n])


def vector(items) -> Value:
    items = list(items)
    return plain((len(items),), items)


def box(inner: Value) -> Value:
    return boxed((), (inner,))


def with_elements(template: Value, shape, items) -> Value:
    """New value of ``template``'s kind holding ``items`` under ``shape``."""
    if template.is_boxed:
        return boxed(shape, items)
    return plain(shape, items)


def _nested_shape(obj) -> tuple[int, ...]:
    if isinstance(obj, (list, tuple)):
        if not obj:
            return (0,)
        return (len(obj), *_nested_shape(obj[0]))
    return ()


def _flatten_nested(obj, shape: tuple[int, ...], out: list) -> None:
    if not shape:
        if isinstance(obj, (list, tuple)):
            raise ValueError("Ragged nested list cannot be converted to a Value")
        out.append(obj)
        return
    if not isinstance(obj, (list, tuple)) or len(obj) != shape[0]:
        raise ValueError("Ragged nested list cannot be converted to a Value")
    for item in obj:
        _flatten_nested(item, shape[1:], out)


def as_value(obj: object) -> Value:
    """Convert Python ints, nested lists, arrays or :class:`Boxed` views to a Value."""
    if isinstance(obj, Value):
        return obj
    if isinstance(obj, Boxed):
        return box(as_value(obj.inner))
    if isinstance(obj, bool):
        raise TypeError("Booleans are not J values")
    if isinstance(obj, numbers.Integral):
        return scalar(int(obj))
    if isinstance(obj, (list, tuple)):
        shape = _nested_shape(obj)
        flat: list = []
        _flatten_nested(obj, shape, flat)
        if any(isinstance(item, Boxed) for item in flat):
            if not all(isinstance(item, Boxed) for item in flat):
                raise TypeError("Cannot mix boxed and plain elements in one array")
            return boxed(shape, [as_value(item.inner) for item in flat])
        for item in flat:
            if isinstance(item, bool) or not isinstance(item, numbers.Integral):
                raise TypeError(f"Unsupported element {item!r}; expected an integer")
        return plain(shape, flat)
    if hasattr(obj, "shape") and hasattr(obj, "dtype"):
        arr = jnp.asarray(obj)
        if not jnp.issubdtype(arr.dtype, jnp.integer):
            raise TypeError(f"Unsupported array dtype {arr.dtype}; expected integers")
        return plain(arr.shape, arr)
    raise TypeError(f"Cannot convert {type(obj).__name__} to a Value")


def depth_of(value: Value) -> int:
    if not value.is_boxed:
        return 0
    if not value.data:
        return 1
    return 1 + max(depth_of(item) for item in value.data)


def value_info(value: Value) -> ValueInfo:
    return ValueInfo(
        kind=value.kind,
        shape=value.shape,
        rank=value.rank,
        count=value.count,
        depth=depth_of(value),
    )


def _reshape_nested(items: list, shape: tuple[int, ...]):
    if not shape:
        return items[0]
    if len(shape) == 1:
        return list(items)
    step = shape_count(shape[1:])
    return [_reshape_nested(items[i * step : (i + 1) * step], shape[1:]) for i in range(shape[0])]


def to_python(value: Value):
    """Nested Python lists of ints; box capsules become :class:`Boxed`."""
    if not value.is_boxed:
        return value.as_array().tolist()
    items = [Boxed(to_python(item)) for item in value.data]
    return _reshape_nested(items, value.shape)


def match(left: Value, right: Value) -> bool:
    """Structural equality: same kind, shape and elements (recursively)."""
    if left is right:
        return True
    if left.kind is not right.kind or left.shape != right.shape:
        return False
    if left.is_boxed:
        return all(match(l_item, r_item) for l_item, r_item in zip(left.data, right.data, strict=True))
    return bool(jnp.array_equal(left.data, right.data))
