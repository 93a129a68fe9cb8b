from __future__ import annotations

from ..runtime import Environment, LoxBool, LoxNil, LoxValue, LoxReturnSignal
from ..tree import Tree
from .common import EvalFunc
from .helpers import is_truthy

def eval_if_stmt(n: Tree, env: Environment, eval_func: EvalFunc) -> LoxValue:
    cond_node, then_node, else_node = n.children
    cond = eval_func(cond_node, env)

    # Only a literal `true` takes the then-branch; other truthy values do not.
    match cond:
        case LoxBool(value=True):
            eval_func(then_node, env)
        case _ if else_node is not None:
            eval_func(else_node, env)

    return LoxNil()

def eval_while_stmt(n: Tree, env: Environment, eval_func: EvalFunc) -> LoxValue:
    cond_node, body_node = n.children

    while is_truthy(eval_func(cond_node, env)):
        eval_func(body_node, env)

    return LoxNil()

def eval_return_stmt(n: Tree, env: Environment, eval_func: EvalFunc) -> LoxValue:
    value_node = n.children[0] if n.children else None
    value = LoxNil() if value_node is None else eval_func(value_node, env)

    raise LoxReturnSignal(value)
