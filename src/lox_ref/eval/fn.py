from __future__ import annotations

from ..runtime import Environment, LoxFn, LoxNil, LoxValue, LoxRuntimeError
from ..tree import Tree, tree_children, tree_label
from .common import expect_ident_token, extract_param_names

def _body_statements(body_node: Tree) -> tuple:
    if tree_label(body_node) != 'block':
        raise LoxRuntimeError("Function body must be a block")

    return tuple(tree_children(body_node))

def eval_fn_decl(n: Tree, env: Environment) -> LoxValue:
    name_node, params_node, body_node = n.children
    name = expect_ident_token(name_node, "Function name")
    params = extract_param_names(params_node, context="function declaration")

    fn_value = LoxFn(params=tuple(params), body=_body_statements(body_node), closure=env, name=name)
    # bound into the captured layer itself, so the body can call itself by name
    env.define(name, fn_value)

    return LoxNil()

def eval_lambda(n: Tree, env: Environment) -> LoxFn:
    params_node, body_node = n.children
    params = extract_param_names(params_node, context="lambda")

    return LoxFn(params=tuple(params), body=_body_statements(body_node), closure=env)
