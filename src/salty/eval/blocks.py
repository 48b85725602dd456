from __future__ import annotations

from typing import Iterable

from lark import Tree

from ..tree import Node, tree_children
from ..types import NORMAL, Frame, Normal, Outcome
from .common import ExecFunc

def exec_statements(stmts: Iterable[Node], frame: Frame, exec_func: ExecFunc) -> Outcome:
    """Run statements in `frame` until one finishes with a non-Normal outcome."""
    for stmt in stmts:
        outcome = exec_func(stmt, frame)

        if not isinstance(outcome, Normal):
            return outcome

    return NORMAL

def exec_block(n: Tree, frame: Frame, exec_func: ExecFunc) -> Outcome:
    # The child frame is unreachable after return unless a closure captured it.
    block_frame = Frame(parent=frame)
    return exec_statements(tree_children(n), block_frame, exec_func)
