from __future__ import annotations

from typing import Any, Callable

from lark import Token

from ..tree import Node, is_token, token_kind
from ..types import (
    Frame,
    Outcome,
    SltBool,
    SltNumber,
    SltValue,
    SaltyRuntimeError,
    SaltyTypeError,
    type_name,
)

EvalFunc = Callable[[Node, Frame], SltValue]
ExecFunc = Callable[[Node, Frame], Outcome]

def expect_ident_token(node: Any, context: str) -> str:
    if is_token(node) and token_kind(node) == 'IDENT':
        return str(node.value)

    raise SaltyRuntimeError(f"{context} must be an identifier")

def token_number(token: Token, _: Any) -> SltNumber:
    return SltNumber(float(token.value))

def require_bool(value: SltValue, context: str) -> SltBool:
    if not isinstance(value, SltBool):
        raise SaltyTypeError(f"{context} must be a boolean, got {type_name(value)}")

    return value
