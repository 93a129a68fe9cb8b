from __future__ import annotations

import math
from typing import List

from lark import Token

from ..runtime import (
    Environment,
    LoxBool,
    LoxNumber,
    LoxString,
    LoxValue,
    LoxRuntimeError,
    LoxTypeMismatch,
    call_value,
    kind_name,
)
from ..tree import Node, Tree, tree_children
from .common import EvalFunc, expect_ident_token
from .helpers import is_truthy, lox_equals

def eval_unary(children: List[Node], env: Environment, eval_func: EvalFunc) -> LoxValue:
    op, rhs_node = children
    rhs = eval_func(rhs_node, env)

    match op:
        case Token(type='BANG'):
            return LoxBool(not is_truthy(rhs))
        case Token(type='MINUS'):
            if isinstance(rhs, LoxNumber):
                return LoxNumber(-rhs.value)
            raise LoxTypeMismatch(f"Can't negate a {kind_name(rhs)} value")
        case _:
            raise LoxRuntimeError("Unsupported unary op")

def eval_binary(children: List[Node], env: Environment, eval_func: EvalFunc) -> LoxValue:
    lhs_node, op, rhs_node = children
    lhs = eval_func(lhs_node, env)
    rhs = eval_func(rhs_node, env)

    return apply_binary_operator(str(op), lhs, rhs)

def apply_binary_operator(op: str, lhs: LoxValue, rhs: LoxValue) -> LoxValue:
    match op:
        case '==':
            return LoxBool(lox_equals(lhs, rhs))
        case '!=':
            return LoxBool(not lox_equals(lhs, rhs))
        case '<' | '<=' | '>' | '>=':
            return _compare_values(op, lhs, rhs)
        case '+':
            match (lhs, rhs):
                case (LoxNumber(value=a), LoxNumber(value=b)):
                    return LoxNumber(a + b)
                case (LoxString(value=a), LoxString(value=b)):
                    return LoxString(a + b)
                case _:
                    raise LoxTypeMismatch("Can only add two numbers or two strings")
        case '-':
            a, b = _require_numbers(lhs, rhs, "Can't sub non numbers")
            return LoxNumber(a - b)
        case '*':
            a, b = _require_numbers(lhs, rhs, "Can't mul non numbers")
            return LoxNumber(a * b)
        case '/':
            a, b = _require_numbers(lhs, rhs, "Can't div non numbers")
            return LoxNumber(_ieee_div(a, b))
        case _:
            raise LoxRuntimeError(f"Unknown operator {op}")

def _require_numbers(lhs: LoxValue, rhs: LoxValue, message: str) -> tuple[float, float]:
    if isinstance(lhs, LoxNumber) and isinstance(rhs, LoxNumber):
        return lhs.value, rhs.value

    raise LoxTypeMismatch(message)

def _compare_values(op: str, lhs: LoxValue, rhs: LoxValue) -> LoxBool:
    a, b = _require_numbers(lhs, rhs, "Can't compare non numbers")

    match op:
        case '<':
            return LoxBool(a < b)
        case '<=':
            return LoxBool(a <= b)
        case '>':
            return LoxBool(a > b)
        case _:
            return LoxBool(a >= b)

def _ieee_div(a: float, b: float) -> float:
    # Python raises on float division by zero; follow IEEE 754 instead.
    if b != 0.0:
        return a / b

    if a == 0.0 or math.isnan(a):
        return math.nan

    return math.copysign(math.inf, a) * math.copysign(1.0, b)

def eval_logical(kind: str, children: List[Node], env: Environment, eval_func: EvalFunc) -> LoxValue:
    lhs_node, rhs_node = children
    lhs = eval_func(lhs_node, env)

    if kind == 'or_expr':
        return lhs if is_truthy(lhs) else eval_func(rhs_node, env)

    return eval_func(rhs_node, env) if is_truthy(lhs) else lhs

def eval_assign(children: List[Node], env: Environment, eval_func: EvalFunc) -> LoxValue:
    name_node, value_node = children
    name = expect_ident_token(name_node, "Assignment target")
    value = eval_func(value_node, env)

    return env.set(name, value)

def eval_call(n: Tree, env: Environment, eval_func: EvalFunc) -> LoxValue:
    callee_node, args_node = n.children
    callee = eval_func(callee_node, env)
    args = [eval_func(arg, env) for arg in tree_children(args_node)]

    return call_value(callee, args)

def eval_group(n: Tree, env: Environment, eval_func: EvalFunc) -> LoxValue:
    return eval_func(n.children[0], env)
