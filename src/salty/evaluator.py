from __future__ import annotations

import sys
from typing import Callable, List, Optional

from lark import Token
from types import SimpleNamespace

from .tree import Node, Tree, is_token, node_position
from .types import (
    NORMAL,
    Context,
    Frame,
    Outcome,
    Return,
    SltBool,
    SltValue,
    SaltyControlFlowError,
    SaltyRuntimeError,
)
from .utils import stringify

from .eval.bind import exec_assign, exec_let
from .eval.blocks import exec_block, exec_statements
from .eval.chains import eval_array, eval_call, eval_index
from .eval.common import token_number
from .eval.control import exec_break, exec_continue, exec_return, reject_loop_control
from .eval.expr import eval_binary, eval_unary
from .eval.fn import eval_fn_expr, exec_fn_decl
from .eval.loops import exec_if_stmt, exec_while_stmt

def _maybe_attach_location(exc: SaltyRuntimeError, node: Node) -> None:
    # Innermost node wins; outer frames of the walk leave it alone.
    if getattr(exc, "_augmented", False):
        return

    line, column = node_position(node)
    if line is None:
        return

    exc.slt_meta = SimpleNamespace(line=line, column=column)
    exc._augmented = True  # type: ignore[attr-defined]

# ---------------- Public API ----------------

# Each Salty call costs about a dozen Python frames.
RECURSION_LIMIT = 10_000

def evaluate(program: List[Node], context: Optional[Context]=None) -> Context:
    """
    Execute top-level statements against `context.globals` and return the
    context. Passing the same context again keeps earlier bindings.
    """
    if context is None:
        context = Context()

    previous_limit = sys.getrecursionlimit()
    sys.setrecursionlimit(max(previous_limit, RECURSION_LIMIT))

    try:
        outcome = exec_statements(program, context.globals, exec_node)
    except RecursionError:
        raise SaltyRuntimeError("maximum recursion depth exceeded") from None
    finally:
        sys.setrecursionlimit(previous_limit)

    if isinstance(outcome, Return):
        raise SaltyControlFlowError("return outside of a function")

    reject_loop_control(outcome)
    return context

# ---------------- Core evaluator ----------------

def eval_node(n: Node, frame: Frame) -> SltValue:
    """Evaluate an expression node to a value."""
    try:
        if is_token(n):
            return _eval_token(n, frame)

        handler = _NODE_DISPATCH.get(n.data)
        if handler is None:
            raise SaltyRuntimeError(f"Unknown expression node: {n.data}")

        return handler(n, frame)
    except SaltyRuntimeError as e:
        _maybe_attach_location(e, n)
        raise

def exec_node(n: Node, frame: Frame) -> Outcome:
    """Execute a statement node and report how it finished."""
    try:
        if is_token(n):
            raise SaltyRuntimeError(f"Unexpected token {n.type} in statement position")

        handler = _STMT_DISPATCH.get(n.data)
        if handler is None:
            raise SaltyRuntimeError(f"Unknown statement node: {n.data}")

        return handler(n, frame)
    except SaltyRuntimeError as e:
        _maybe_attach_location(e, n)
        raise
# ---------------- Tokens ----------------

def _eval_token(t: Token, frame: Frame) -> SltValue:
    handler = _TOKEN_DISPATCH.get(t.type)
    if handler:
        return handler(t, frame)

    if t.type == 'IDENT':
        return frame.lookup(str(t.value))

    raise SaltyRuntimeError(f"Unhandled token {t.type}:{t.value}")

# ---------------- Statements ----------------

def _exec_print(n: Tree, frame: Frame) -> Outcome:
    value = eval_node(n.children[0], frame)
    frame.context.write(stringify(value))
    return NORMAL

def _exec_expr_stmt(n: Tree, frame: Frame) -> Outcome:
    eval_node(n.children[0], frame)
    return NORMAL

# ---------------- Dispatch ----------------

_NODE_DISPATCH: dict[str, Callable[[Tree, Frame], SltValue]] = {
    'unary': lambda n, frame: eval_unary(n, frame, eval_node),
    'binary': lambda n, frame: eval_binary(n, frame, eval_node),
    'array': lambda n, frame: eval_array(n, frame, eval_node),
    'index': lambda n, frame: eval_index(n, frame, eval_node),
    'call': lambda n, frame: eval_call(n, frame, eval_node),
    'fnexpr': eval_fn_expr,
}

_STMT_DISPATCH: dict[str, Callable[[Tree, Frame], Outcome]] = {
    'let': lambda n, frame: exec_let(n, frame, eval_node),
    'assign': lambda n, frame: exec_assign(n, frame, eval_node),
    'print': _exec_print,
    'block': lambda n, frame: exec_block(n, frame, exec_node),
    'if': lambda n, frame: exec_if_stmt(n, frame, eval_node, exec_node),
    'while': lambda n, frame: exec_while_stmt(n, frame, eval_node, exec_node),
    'break': exec_break,
    'continue': exec_continue,
    'return': lambda n, frame: exec_return(n, frame, eval_node),
    'fndecl': exec_fn_decl,
    'exprstmt': _exec_expr_stmt,
}

_TOKEN_DISPATCH: dict[str, Callable[[Token, Frame], SltValue]] = {
    'NUMBER': token_number,
    'TRUE': lambda _, __: SltBool(True),
    'FALSE': lambda _, __: SltBool(False),
}
