"""AST nodes for the J subset."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Noun:
    value: int


@dataclass(frozen=True)
class Name:
    value: str


@dataclass(frozen=True)
class Prefix:
    op: str
    right: "Expr"


@dataclass(frozen=True)
class Infix:
    op: str
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True)
class Assign:
    target: Name
    right: "Expr"


Expr = Union[Noun, Name, Prefix, Infix, Assign]
