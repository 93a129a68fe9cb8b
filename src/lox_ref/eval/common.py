from __future__ import annotations

from typing import Any, Callable, List

from lark import Token

from ..runtime import Environment, LoxNumber, LoxString, LoxValue, LoxRuntimeError
from ..tree import Node, is_token, token_kind, tree_children, tree_label

EvalFunc = Callable[[Node, Environment], LoxValue]

def expect_ident_token(node: Any, context: str) -> str:
    if is_token(node) and token_kind(node) == 'IDENT':
        return str(node.value)

    raise LoxRuntimeError(f"{context} must be an identifier")

def extract_param_names(params_node: Any, context: str="parameter list") -> List[str]:
    if params_node is None:
        return []

    if tree_label(params_node) != 'params':
        raise LoxRuntimeError(f"Malformed {context}")

    return [expect_ident_token(p, "Parameter") for p in tree_children(params_node)]

def token_number(token: Token, _: Any) -> LoxNumber:
    return LoxNumber(float(token.value))

def token_string(token: Token, _: Any) -> LoxString:
    raw = token.value

    if len(raw) >= 2 and raw[0] == '"' and raw[-1] == '"':
        raw = raw[1:-1]

    return LoxString(raw)
