from __future__ import annotations

from typing import Callable, Optional, Sequence

from lark import Token

from .runtime import (
    Environment,
    LoxBool,
    LoxNil,
    LoxValue,
    LoxReturnSignal,
    LoxRuntimeError,
    ensure_recursion_limit,
    new_root_env,
)
from .tree import Node, Tree, is_token, node_meta

from .eval.common import token_number, token_string
from .eval.blocks import exec_stmts, eval_block, eval_var_decl, eval_expr_stmt
from .eval.control import eval_if_stmt, eval_while_stmt, eval_return_stmt
from .eval.expr import (
    eval_unary,
    eval_binary,
    eval_logical,
    eval_assign,
    eval_call,
    eval_group,
)
from .eval.fn import eval_fn_decl, eval_lambda


def _maybe_attach_location(exc: LoxRuntimeError, node: Node) -> None:
    # innermost node wins; outer frames see the flag and leave it alone
    if getattr(exc, "_augmented", False):
        return

    meta = node_meta(node)
    if meta is None or getattr(meta, "line", None) is None:
        return

    exc.lox_meta = meta
    exc._augmented = True  # type: ignore[attr-defined]

# ---------------- Public API ----------------

def execute(env: Optional[Environment], stmts: Sequence[Node]) -> None:
    """Run a statement list to completion.

    A fresh root environment is used when *env* is None. A `return` outside
    of any function ends the run early without error.
    """
    ensure_recursion_limit()

    if env is None:
        env = new_root_env()

    try:
        exec_stmts(stmts, env, eval_node)
    except LoxReturnSignal:
        return

def evaluate_expression(env: Environment, expr: Node) -> LoxValue:
    ensure_recursion_limit()
    return eval_node(expr, env)

# ---------------- Core evaluator ----------------

def eval_node(n: Node, env: Environment) -> LoxValue:
    try:
        return _eval_node_inner(n, env)
    except LoxRuntimeError as e:
        _maybe_attach_location(e, n)
        raise


def _eval_node_inner(n: Node, env: Environment) -> LoxValue:
    if is_token(n):
        return _eval_token(n, env)

    d = n.data
    handler = _NODE_DISPATCH.get(d)
    if handler is not None:
        return handler(n, env)

    match d:
        case 'unary':
            return eval_unary(n.children, env, eval_node)
        case 'binary':
            return eval_binary(n.children, env, eval_node)
        case 'and_expr' | 'or_expr':
            return eval_logical(d, n.children, env, eval_node)
        case 'assign':
            return eval_assign(n.children, env, eval_node)
        case _:
            raise LoxRuntimeError(f"Unknown node: {d}")

# ---------------- Tokens ----------------

def _eval_token(t: Token, env: Environment) -> LoxValue:
    handler = _TOKEN_DISPATCH.get(t.type)
    if handler:
        return handler(t, env)

    if t.type == 'IDENT':
        return env.get(t.value)

    raise LoxRuntimeError(f"Unhandled token {t.type}:{t.value}")

# ---------------- Dispatch tables ----------------

_NODE_DISPATCH: dict[str, Callable[[Tree, Environment], LoxValue]] = {
    'var_decl': lambda n, env: eval_var_decl(n, env, eval_node),
    'expr_stmt': lambda n, env: eval_expr_stmt(n, env, eval_node),
    'block': lambda n, env: eval_block(n, env, eval_node),
    'if_stmt': lambda n, env: eval_if_stmt(n, env, eval_node),
    'while_stmt': lambda n, env: eval_while_stmt(n, env, eval_node),
    'return_stmt': lambda n, env: eval_return_stmt(n, env, eval_node),
    'fn_decl': eval_fn_decl,
    'lambda_expr': eval_lambda,
    'call': lambda n, env: eval_call(n, env, eval_node),
    'group': lambda n, env: eval_group(n, env, eval_node),
}

_TOKEN_DISPATCH: dict[str, Callable[[Token, Environment], LoxValue]] = {
    'NUMBER': token_number,
    'STRING': token_string,
    'TRUE': lambda _, __: LoxBool(True),
    'FALSE': lambda _, __: LoxBool(False),
    'NIL': lambda _, __: LoxNil(),
}
