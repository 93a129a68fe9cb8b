"""Reference tree-walking evaluator for a small Lox dialect."""

from .evaluator import evaluate_expression, execute
from .parser import ParseError, parse_expr_fragment, parse_source
from .runner import run
from .types import (
    Environment,
    LoxReturnSignal,
    LoxRuntimeError,
    LoxStackOverflow,
    LoxTypeMismatch,
    LoxUndefinedVariable,
)

__all__ = [
    "Environment",
    "LoxReturnSignal",
    "LoxRuntimeError",
    "LoxStackOverflow",
    "LoxTypeMismatch",
    "LoxUndefinedVariable",
    "ParseError",
    "evaluate_expression",
    "execute",
    "parse_expr_fragment",
    "parse_source",
    "run",
]
