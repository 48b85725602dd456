from __future__ import annotations

from typing import List

from lark import Tree

from ..tree import tree_children
from ..types import (
    Frame,
    SltArray,
    SltBool,
    SltFn,
    SltNumber,
    SltValue,
    SaltyIndexError,
    SaltyTypeError,
    type_name,
)
from .common import EvalFunc

def eval_array(n: Tree, frame: Frame, eval_func: EvalFunc) -> SltArray:
    return SltArray([eval_func(el, frame) for el in tree_children(n)])

def eval_args_node(args_node: Tree, frame: Frame, eval_func: EvalFunc) -> List[SltValue]:
    return [eval_func(arg, frame) for arg in tree_children(args_node)]

def expect_array(value: SltValue) -> SltArray:
    if not isinstance(value, SltArray):
        raise SaltyTypeError(f"Cannot index into {type_name(value)}")

    return value

def normalize_index(array: SltArray, index: SltValue) -> int:
    """Turn an index value into a valid Python position within `array`."""
    # SltBool is checked first so `a[true]` never passes as a number.
    if isinstance(index, SltBool) or not isinstance(index, SltNumber):
        raise SaltyIndexError(f"Array index must be a number, got {type_name(index)}")

    raw = index.value

    if not raw.is_integer():
        raise SaltyIndexError(f"Array index must be an integer, got {index!r}")

    pos = int(raw)

    if pos < 0 or pos >= len(array.items):
        raise SaltyIndexError(f"Index {pos} out of bounds for array of length {len(array.items)}")

    return pos

def index_value(target: SltValue, index: SltValue) -> SltValue:
    array = expect_array(target)
    return array.items[normalize_index(array, index)]

def set_index_value(target: SltValue, index: SltValue, value: SltValue) -> None:
    array = expect_array(target)
    array.items[normalize_index(array, index)] = value

def eval_index(n: Tree, frame: Frame, eval_func: EvalFunc) -> SltValue:
    target_node, index_node = n.children
    target = eval_func(target_node, frame)
    index = eval_func(index_node, frame)
    return index_value(target, index)

def eval_call(n: Tree, frame: Frame, eval_func: EvalFunc) -> SltValue:
    from ..runtime import call_function  # local import to avoid cycle

    callee_node, args_node = n.children
    callee = eval_func(callee_node, frame)
    args = eval_args_node(args_node, frame, eval_func)

    if not isinstance(callee, SltFn):
        raise SaltyTypeError(f"Cannot call {type_name(callee)}")

    return call_function(callee, args)
