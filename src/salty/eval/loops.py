from __future__ import annotations

from lark import Tree

from ..types import NORMAL, Break, Continue, Frame, Outcome, Return
from .blocks import exec_block
from .common import EvalFunc, ExecFunc, require_bool

def exec_if_stmt(n: Tree, frame: Frame, eval_func: EvalFunc, exec_func: ExecFunc) -> Outcome:
    cond_node, consequence, *rest = n.children
    cond = require_bool(eval_func(cond_node, frame), "if condition")

    if cond.value:
        return exec_block(consequence, frame, exec_func)

    if rest:
        return exec_block(rest[0], frame, exec_func)

    return NORMAL

def exec_while_stmt(n: Tree, frame: Frame, eval_func: EvalFunc, exec_func: ExecFunc) -> Outcome:
    cond_node, body = n.children

    while require_bool(eval_func(cond_node, frame), "while condition").value:
        outcome = exec_block(body, frame, exec_func)

        match outcome:
            case Break():
                break
            case Continue():
                continue
            case Return():
                return outcome

    return NORMAL
