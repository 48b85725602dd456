from __future__ import annotations

from typing import List

from lark import Tree

from ..tree import tree_children
from ..types import NORMAL, Frame, Outcome, SltFn, SaltyDuplicateNameError
from .common import expect_ident_token

def extract_param_names(params_node: Tree) -> List[str]:
    names: List[str] = []

    for p in tree_children(params_node):
        name = expect_ident_token(p, "Function parameter")

        # Parameters share one call frame.
        if name in names:
            raise SaltyDuplicateNameError(name)

        names.append(name)

    return names

def eval_fn_expr(n: Tree, frame: Frame) -> SltFn:
    params_node, body = n.children
    return SltFn(params=extract_param_names(params_node), body=body, frame=frame)

def exec_fn_decl(n: Tree, frame: Frame) -> Outcome:
    name_tok, params_node, body = n.children
    name = expect_ident_token(name_tok, "Function name")
    fn = SltFn(params=extract_param_names(params_node), body=body, frame=frame, name=name)
    frame.declare(name, fn)
    return NORMAL
