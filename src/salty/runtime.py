from __future__ import annotations

from typing import List

from .tree import tree_children
from .types import (
    Frame,
    Return,
    SltFn,
    SltNil,
    SltValue,
    SaltyArityError,
)

def call_function(fn: SltFn, args: List[SltValue]) -> SltValue:
    """
    Call semantics:
    - a fresh frame whose parent is the closure frame receives the params
    - arity must equal len(fn.params)
    - body statements run directly in that frame (no extra block scope)
    - Return(v) yields v; falling off the end yields nil
    """
    from .evaluator import exec_node  # local import to avoid cycle
    from .eval.blocks import exec_statements
    from .eval.control import reject_loop_control

    if len(args) != len(fn.params):
        label = f"Function {fn.name}" if fn.name else "Function"
        raise SaltyArityError(f"{label} expects {len(fn.params)} args; got {len(args)}")

    callee_frame = Frame(parent=fn.frame)

    for name, val in zip(fn.params, args):
        callee_frame.declare(name, val)

    outcome = exec_statements(tree_children(fn.body), callee_frame, exec_node)

    if isinstance(outcome, Return):
        return outcome.value

    reject_loop_control(outcome)
    return SltNil()
