from __future__ import annotations

from lark import Tree

from ..tree import Node, is_token, tree_label
from ..types import NORMAL, Frame, Outcome, SaltyRuntimeError
from .chains import set_index_value
from .common import EvalFunc, expect_ident_token

def exec_let(n: Tree, frame: Frame, eval_func: EvalFunc) -> Outcome:
    name_tok, value_node = n.children
    name = expect_ident_token(name_tok, "let target")
    value = eval_func(value_node, frame)
    frame.declare(name, value)
    return NORMAL

def exec_assign(n: Tree, frame: Frame, eval_func: EvalFunc) -> Outcome:
    target, value_node = n.children
    value = eval_func(value_node, frame)
    assign_lvalue(target, value, frame, eval_func)
    return NORMAL

def assign_lvalue(target: Node, value, frame: Frame, eval_func: EvalFunc) -> None:
    """
    Store `value` through an assignment target.

    `name` rebinds an existing variable. `name[i]...[j]` evaluates everything
    but the last segment as a read, then replaces the final array slot in
    place so every holder of the array sees the change.
    """
    if is_token(target):
        name = expect_ident_token(target, "Assignment target")
        frame.assign(name, value)
        return

    if tree_label(target) != 'index':
        raise SaltyRuntimeError("Invalid assignment target")

    container_node, index_node = target.children
    container = eval_func(container_node, frame)
    index = eval_func(index_node, frame)
    set_index_value(container, index, value)
