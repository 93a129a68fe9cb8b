"""Shared helpers for working with the lark Tree/Token nodes of the AST."""
from __future__ import annotations

from typing import Any, List, Optional

from lark import Token, Tree
from typing_extensions import TypeAlias, TypeGuard

Node: TypeAlias = Tree | Token


def is_tree(node: Any) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: Any) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: Any) -> Optional[str]:
    return node.data if is_tree(node) else None

def tree_children(node: Any) -> List[Any]:
    if not is_tree(node):
        return []

    children = getattr(node, "children", None)
    if children is None:
        return []

    return list(children)

def token_kind(node: Any) -> Optional[str]:
    if not is_token(node):
        return None

    return str(node.type)

def node_meta(node: Any) -> Optional[Any]:
    """Return position metadata when the parser recorded any for *node*."""
    if is_token(node):
        return node if getattr(node, "line", None) is not None else None

    if not is_tree(node):
        return None

    meta = node.meta
    if getattr(meta, "empty", True):
        return None

    return meta

def render_tree(node: Any, indent: str = "  ") -> str:
    """Compact, one-node-per-line dump used by `lox-ref --ast`."""
    lines: List[str] = []

    def walk(n: Any, level: int) -> None:
        pad = indent * level

        if is_token(n):
            lines.append(f"{pad}{n.type.lower()}  {n.value}")
            return

        if n is None:
            lines.append(f"{pad}-")
            return

        lines.append(f"{pad}{tree_label(n)}")
        for ch in tree_children(n):
            walk(ch, level + 1)

    walk(node, 0)

    return "\n".join(lines)
