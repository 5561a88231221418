"""jinc-jax public API."""

from .parser import ParseError, parse
from .errors import (
    JDepthError,
    JError,
    JParseError,
    JRuntimeError,
    JShapeError,
    JTypeError,
    JUnsupportedError,
    JValueError,
)
from .evaluator import EvaluationEnvironment, StatefulEvaluate, VariableTable, evaluate, evaluate_with_errors
from .render import render
from .values import Boxed, Value, ValueKind, as_value, to_python, value_info

__all__ = [
    "parse",
    "ParseError",
    "evaluate",
    "evaluate_with_errors",
    "EvaluationEnvironment",
    "StatefulEvaluate",
    "VariableTable",
    "render",
    "Value",
    "ValueKind",
    "Boxed",
    "as_value",
    "to_python",
    "value_info",
    "JDepthError",
    "JError",
    "JParseError",
    "JRuntimeError",
    "JShapeError",
    "JTypeError",
    "JUnsupportedError",
    "JValueError",
]
