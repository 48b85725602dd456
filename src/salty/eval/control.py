from __future__ import annotations

from lark import Tree

from ..types import (
    BREAK,
    CONTINUE,
    Break,
    Continue,
    Frame,
    Outcome,
    Return,
    SaltyControlFlowError,
)
from .common import EvalFunc

def exec_break(_: Tree, __: Frame) -> Outcome:
    return BREAK

def exec_continue(_: Tree, __: Frame) -> Outcome:
    return CONTINUE

def exec_return(n: Tree, frame: Frame, eval_func: EvalFunc) -> Return:
    value_node = n.children[0]
    return Return(eval_func(value_node, frame))

def reject_loop_control(outcome: Outcome) -> None:
    """Raise for a break/continue that escaped every enclosing loop."""
    if isinstance(outcome, Break):
        raise SaltyControlFlowError("break outside of a loop")

    if isinstance(outcome, Continue):
        raise SaltyControlFlowError("continue outside of a loop")
