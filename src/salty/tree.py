"""Shared helpers for working with the lark Tree/Token nodes that make up the AST."""
from __future__ import annotations
from typing import Iterator, List, Optional, Tuple
from typing_extensions import TypeAlias, TypeGuard

from lark import Token, Tree


Node: TypeAlias = Tree | Token


def is_tree(node: Node) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: Node) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: Node) -> Optional[str]:
    return node.data if is_tree(node) else None

def token_kind(node: Node) -> Optional[str]:
    return node.type if is_token(node) else None

def tree_children(node: Node) -> List[Node]:
    if not is_tree(node):
        return []

    return list(node.children)

def node_position(node: Node) -> Tuple[Optional[int], Optional[int]]:
    """Line/column of a node's leading token, when the parser recorded one."""
    if is_token(node):
        return node.line, node.column

    meta = getattr(node, "_meta", None)
    if meta is None:
        return None, None

    return getattr(meta, "line", None), getattr(meta, "column", None)

def iter_nodes(node: Node) -> Iterator[Node]:
    """Depth-first pre-order walk over a node and all of its descendants."""
    yield node

    for child in tree_children(node):
        yield from iter_nodes(child)
