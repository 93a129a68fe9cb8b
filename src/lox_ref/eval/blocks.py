from __future__ import annotations

from typing import Any, Iterable

from ..runtime import Environment, LoxNil, LoxValue
from ..tree import Node, Tree, tree_label
from .common import EvalFunc, expect_ident_token

def exec_stmts(stmts: Iterable[Node], env: Environment, eval_func: EvalFunc | None=None) -> Environment:
    """Run a statement list, giving every `var` its own scope layer.

    Each declaration wraps the cursor before it runs, so only the statements
    after it (in this list) can see the name. Returns the final cursor.
    """
    if eval_func is None:
        from ..evaluator import eval_node  # local import to avoid cycle
        eval_func = eval_node

    cursor = env

    for stmt in stmts:
        if tree_label(stmt) == 'var_decl':
            cursor = Environment.wrap(cursor)

        eval_func(stmt, cursor)

    return cursor

def eval_block(n: Tree, env: Environment, eval_func: EvalFunc) -> LoxValue:
    exec_stmts(n.children, Environment.wrap(env), eval_func)
    return LoxNil()

def eval_var_decl(n: Tree, env: Environment, eval_func: EvalFunc) -> LoxValue:
    name_node, init_node = n.children
    name = expect_ident_token(name_node, "Variable name")
    value: Any = LoxNil() if init_node is None else eval_func(init_node, env)
    env.define(name, value)

    return LoxNil()

def eval_expr_stmt(n: Tree, env: Environment, eval_func: EvalFunc) -> LoxValue:
    eval_func(n.children[0], env)
    return LoxNil()
