"""
AST model for Salty.

Compound nodes are lark ``Tree``s whose ``data`` label is the variant tag;
literals, identifiers and operators are lark ``Token`` leaves whose ``type``
is the tag. Every builder copies the position of the token that starts the
construct onto the node so runtime errors can point back at the source.

Shapes (children in order):

    NUMBER / TRUE / FALSE / IDENT     leaf tokens
    unary     [OP, operand]
    binary    [left, OP, right]
    assign    [target, value]          target: IDENT or index chain on an IDENT
    let       [IDENT, value]
    print     [value]
    block     [stmt, ...]
    if        [cond, block] | [cond, block, block]
    while     [cond, block]
    break     []
    continue  []
    return    [value]
    fndecl    [IDENT, params, block]
    fnexpr    [params, block]
    params    [IDENT, ...]
    call      [callee, args]
    args      [expr, ...]
    array     [expr, ...]
    index     [target, expr]
    exprstmt  [call]
"""

from __future__ import annotations

from typing import List, Optional

from lark import Token, Tree

from .token_types import Tok
from .tree import Node

# Leaf token types
NUMBER = 'NUMBER'
TRUE = 'TRUE'
FALSE = 'FALSE'
IDENT = 'IDENT'
OP = 'OP'

# Tree labels
UNARY = 'unary'
BINARY = 'binary'
ASSIGN = 'assign'
LET = 'let'
PRINT = 'print'
BLOCK = 'block'
IF = 'if'
WHILE = 'while'
BREAK = 'break'
CONTINUE = 'continue'
RETURN = 'return'
FNDECL = 'fndecl'
FNEXPR = 'fnexpr'
PARAMS = 'params'
CALL = 'call'
ARGS = 'args'
ARRAY = 'array'
INDEX = 'index'
EXPRSTMT = 'exprstmt'

STATEMENT_LABELS = frozenset({
    ASSIGN, LET, PRINT, BLOCK, IF, WHILE, BREAK, CONTINUE, RETURN, FNDECL, EXPRSTMT,
})


def _leaf(type_: str, tok: Tok) -> Token:
    return Token(type_, tok.text, line=tok.line, column=tok.column)

def _tree(label: str, children: List[Node], at: Optional[Tok]) -> Tree:
    node = Tree(label, children)

    if at is not None:
        node.meta.line = at.line
        node.meta.column = at.column
        node.meta.empty = False

    return node

# ---------------- Leaves ----------------

def number(tok: Tok) -> Token:
    return _leaf(NUMBER, tok)

def boolean(tok: Tok) -> Token:
    return _leaf(TRUE if tok.text == 'true' else FALSE, tok)

def ident(tok: Tok) -> Token:
    return _leaf(IDENT, tok)

def op(tok: Tok) -> Token:
    return _leaf(OP, tok)

# ---------------- Expressions ----------------

def unary(op_tok: Tok, operand: Node) -> Tree:
    return _tree(UNARY, [op(op_tok), operand], op_tok)

def binary(left: Node, op_tok: Tok, right: Node, at: Optional[Tok] = None) -> Tree:
    return _tree(BINARY, [left, op(op_tok), right], at or op_tok)

def fn_expr(params: Tree, body: Tree, at: Tok) -> Tree:
    return _tree(FNEXPR, [params, body], at)

def params(names: List[Tok], at: Tok) -> Tree:
    return _tree(PARAMS, [ident(t) for t in names], at)

def call(callee: Node, args: List[Node], at: Tok) -> Tree:
    return _tree(CALL, [callee, _tree(ARGS, args, at)], at)

def array(elements: List[Node], at: Tok) -> Tree:
    return _tree(ARRAY, elements, at)

def index(target: Node, idx: Node, at: Tok) -> Tree:
    return _tree(INDEX, [target, idx], at)

# ---------------- Statements ----------------

def assign(target: Node, value: Node, at: Tok) -> Tree:
    return _tree(ASSIGN, [target, value], at)

def let(name: Tok, value: Node, at: Tok) -> Tree:
    return _tree(LET, [ident(name), value], at)

def print_stmt(value: Node, at: Tok) -> Tree:
    return _tree(PRINT, [value], at)

def block(stmts: List[Node], at: Tok) -> Tree:
    return _tree(BLOCK, stmts, at)

def if_stmt(cond: Node, consequence: Tree, alternate: Optional[Tree], at: Tok) -> Tree:
    children: List[Node] = [cond, consequence]
    if alternate is not None:
        children.append(alternate)
    return _tree(IF, children, at)

def while_stmt(cond: Node, body: Tree, at: Tok) -> Tree:
    return _tree(WHILE, [cond, body], at)

def break_stmt(at: Tok) -> Tree:
    return _tree(BREAK, [], at)

def continue_stmt(at: Tok) -> Tree:
    return _tree(CONTINUE, [], at)

def return_stmt(value: Node, at: Tok) -> Tree:
    return _tree(RETURN, [value], at)

def fn_decl(name: Tok, params_node: Tree, body: Tree, at: Tok) -> Tree:
    return _tree(FNDECL, [ident(name), params_node, body], at)

def expr_stmt(expr: Node, at: Tok) -> Tree:
    return _tree(EXPRSTMT, [expr], at)
