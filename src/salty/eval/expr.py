from __future__ import annotations

from typing import Callable, Dict

from lark import Tree

from ..types import (
    Frame,
    SltBool,
    SltNumber,
    SltValue,
    SaltyRuntimeError,
    SaltyTypeError,
    SaltyZeroDivisionError,
    type_name,
)
from ..utils import same_kind, slt_equals
from .common import EvalFunc

def eval_unary(n: Tree, frame: Frame, eval_func: EvalFunc) -> SltValue:
    op_tok, operand_node = n.children
    operand = eval_func(operand_node, frame)

    match op_tok:
        case '-':
            if not isinstance(operand, SltNumber):
                raise SaltyTypeError(f"Unary '-' expects a number, got {type_name(operand)}")
            return SltNumber(-operand.value)
        case '!':
            if not isinstance(operand, SltBool):
                raise SaltyTypeError(f"Unary '!' expects a boolean, got {type_name(operand)}")
            return SltBool(not operand.value)
        case _:
            raise SaltyRuntimeError(f"Unsupported unary operator '{op_tok}'")

def eval_binary(n: Tree, frame: Frame, eval_func: EvalFunc) -> SltValue:
    left_node, op_tok, right_node = n.children
    # Both sides are always evaluated, left first; && and || do not short-circuit.
    lhs = eval_func(left_node, frame)
    rhs = eval_func(right_node, frame)
    return apply_binary_operator(str(op_tok), lhs, rhs)

def _divide(a: float, b: float) -> float:
    if b == 0:
        raise SaltyZeroDivisionError()

    return a / b

_ARITHMETIC: Dict[str, Callable[[float, float], float]] = {
    '+': lambda a, b: a + b,
    '-': lambda a, b: a - b,
    '*': lambda a, b: a * b,
    '/': _divide,
}

_ORDERING: Dict[str, Callable[[float, float], bool]] = {
    '>': lambda a, b: a > b,
    '<': lambda a, b: a < b,
    '>=': lambda a, b: a >= b,
    '<=': lambda a, b: a <= b,
}

_LOGICAL: Dict[str, Callable[[bool, bool], bool]] = {
    '&&': lambda a, b: a and b,
    '||': lambda a, b: a or b,
}

def _operand_error(op: str, lhs: SltValue, rhs: SltValue) -> SaltyTypeError:
    return SaltyTypeError(f"Unsupported operand types for '{op}': {type_name(lhs)} and {type_name(rhs)}")

def apply_binary_operator(op: str, lhs: SltValue, rhs: SltValue) -> SltValue:
    if op in _ARITHMETIC:
        if isinstance(lhs, SltNumber) and isinstance(rhs, SltNumber):
            return SltNumber(_ARITHMETIC[op](lhs.value, rhs.value))
        raise _operand_error(op, lhs, rhs)

    if op in _ORDERING:
        if isinstance(lhs, SltNumber) and isinstance(rhs, SltNumber):
            return SltBool(_ORDERING[op](lhs.value, rhs.value))
        raise _operand_error(op, lhs, rhs)

    if op in _LOGICAL:
        if isinstance(lhs, SltBool) and isinstance(rhs, SltBool):
            return SltBool(_LOGICAL[op](lhs.value, rhs.value))
        raise _operand_error(op, lhs, rhs)

    if op in ('==', '!='):
        if not same_kind(lhs, rhs):
            raise _operand_error(op, lhs, rhs)
        eq = slt_equals(lhs, rhs)
        return SltBool(eq if op == '==' else not eq)

    raise SaltyRuntimeError(f"Unknown operator '{op}'")
