"""
Recursive Descent Parser for Salty

Structure:
- Lexer: Token list from source (lexer_rd)
- Parser: recursive descent, one token of lookahead, no backtracking
- AST: lark Tree/Token nodes built through salty.nodes

The first grammar violation aborts parsing with a ParseError; there is no
error recovery and no multi-error reporting.
"""

from typing import List, Optional

from lark import Tree

from . import nodes
from .token_types import BINARY_OPERATORS, TT, Tok
from .tree import Node, is_token, tree_label

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    kind = "ParseError"

    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        self.line = token.line if token else None
        self.column = token.column if token else None
        super().__init__(
            f"{message} at line {token.line}, col {token.column}" if token else message
        )

def _describe(tok: Optional[Tok]) -> str:
    return tok.describe() if tok is not None else "end of input"

class Parser:
    """
    Recursive descent parser for Salty.

    Binary expressions have a single precedence level and associate to the
    left, so ``1 + 2 * 3`` is ``(1 + 2) * 3``.
    """

    def __init__(self, tokens: List[Tok]):
        self.tokens = tokens
        self.pos = 0
        self.current: Optional[Tok] = tokens[0] if tokens else None

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> Optional[Tok]:
        """Look ahead at token"""
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return None

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        if prev is None:
            raise ParseError("Unexpected end of input")
        self.pos += 1
        self.current = self.peek()
        return prev

    def at_end(self) -> bool:
        return self.current is None

    def check_symbol(self, *texts: str) -> bool:
        return self.current is not None and self.current.kind is TT.SYMBOL and self.current.text in texts

    def check_keyword(self, *texts: str) -> bool:
        return self.current is not None and self.current.kind is TT.KEYWORD and self.current.text in texts

    def match_symbol(self, text: str) -> bool:
        """Check and consume if current token is the given symbol"""
        if self.check_symbol(text):
            self.advance()
            return True
        return False

    def expect(self, kind: TT, text: Optional[str] = None) -> Tok:
        """Consume token of expected kind (and text) or raise error"""
        tok = self.current
        if tok is None or tok.kind is not kind or (text is not None and tok.text != text):
            expected = f"{kind.value} '{text}'" if text is not None else kind.value
            raise ParseError(f"Expected {expected}, got {_describe(tok)}", tok)
        return self.advance()

    def expect_symbol(self, text: str) -> Tok:
        return self.expect(TT.SYMBOL, text)

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> List[Node]:
        """Parse entire program into its top-level statements"""
        program: List[Node] = []

        while not self.at_end():
            program.append(self.parse_statement())

        return program

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Node:
        """
        Parse a single statement, dispatching on its leading token.
        """
        tok = self.current

        if tok is None:
            raise ParseError("Expected statement, got end of input")

        if tok.kind is TT.KEYWORD:
            match tok.text:
                case 'fn':
                    return self.parse_fn_decl()
                case 'return':
                    return self.parse_return_stmt()
                case 'let':
                    return self.parse_let_stmt()
                case 'continue':
                    self.advance()
                    self.expect_symbol(';')
                    return nodes.continue_stmt(tok)
                case 'break':
                    self.advance()
                    self.expect_symbol(';')
                    return nodes.break_stmt(tok)
                case 'while':
                    return self.parse_while_stmt()
                case 'if':
                    return self.parse_if_stmt()
                case 'print':
                    return self.parse_print_stmt()

        if tok.is_symbol('{'):
            return self.parse_block()

        if tok.kind is TT.IDENT:
            return self.parse_ident_stmt()

        raise ParseError(f"Unrecognized statement starting with {_describe(tok)}", tok)

    def parse_block(self) -> Tree:
        """Parse `{ stmt* }`"""
        start = self.expect_symbol('{')
        stmts: List[Node] = []

        while not self.at_end() and not self.check_symbol('}'):
            stmts.append(self.parse_statement())

        self.expect_symbol('}')
        return nodes.block(stmts, start)

    def parse_fn_decl(self) -> Tree:
        """Parse `fn name(params) { body }`"""
        start = self.expect(TT.KEYWORD, 'fn')
        name = self.expect(TT.IDENT)
        params = self.parse_param_list()
        body = self.parse_block()
        return nodes.fn_decl(name, params, body, start)

    def parse_return_stmt(self) -> Tree:
        start = self.expect(TT.KEYWORD, 'return')
        value = self.parse_expr()
        self.expect_symbol(';')
        return nodes.return_stmt(value, start)

    def parse_let_stmt(self) -> Tree:
        start = self.expect(TT.KEYWORD, 'let')
        name = self.expect(TT.IDENT)
        self.expect_symbol('=')
        value = self.parse_expr()
        self.expect_symbol(';')
        return nodes.let(name, value, start)

    def parse_while_stmt(self) -> Tree:
        start = self.expect(TT.KEYWORD, 'while')
        cond = self.parse_expr()
        body = self.parse_block()
        return nodes.while_stmt(cond, body, start)

    def parse_if_stmt(self) -> Tree:
        """Parse `if cond { ... } [else { ... }]`; else binds to this if only."""
        start = self.expect(TT.KEYWORD, 'if')
        cond = self.parse_expr()
        consequence = self.parse_block()
        alternate = None

        if self.check_keyword('else'):
            self.advance()
            alternate = self.parse_block()

        return nodes.if_stmt(cond, consequence, alternate, start)

    def parse_print_stmt(self) -> Tree:
        start = self.expect(TT.KEYWORD, 'print')
        value = self.parse_expr()
        self.expect_symbol(';')
        return nodes.print_stmt(value, start)

    def parse_ident_stmt(self) -> Tree:
        """
        Statements led by an identifier:
        - `name = expr;` and `name[i]...[j] = expr;` (assignment)
        - `callee(args)...;` (call evaluated for its effects)
        """
        start = self.advance()
        target = self.parse_postfix(nodes.ident(start))

        if tree_label(target) == nodes.CALL and not self.check_symbol('='):
            self.expect_symbol(';')
            return nodes.expr_stmt(target, start)

        if not self._is_assignable(target):
            raise ParseError("Invalid assignment target", start)

        self.expect_symbol('=')
        value = self.parse_expr()
        self.expect_symbol(';')
        return nodes.assign(target, value, start)

    def _is_assignable(self, target: Node) -> bool:
        while tree_label(target) == nodes.INDEX:
            target = target.children[0]

        return is_token(target) and target.type == nodes.IDENT

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self) -> Node:
        """primary (op primary)*: one precedence level, left associative"""
        start = self.current
        left = self.parse_primary()

        while self.current is not None and self.current.kind is TT.SYMBOL and self.current.text in BINARY_OPERATORS:
            op_tok = self.advance()
            right = self.parse_primary()
            left = nodes.binary(left, op_tok, right, at=start)

        return left

    def parse_primary(self) -> Node:
        tok = self.current

        if tok is None:
            raise ParseError("Expected expression, got end of input")

        # Unary prefix applies to the next primary only
        if tok.is_symbol('-') or tok.is_symbol('!'):
            self.advance()
            return nodes.unary(tok, self.parse_primary())

        if tok.is_keyword('true') or tok.is_keyword('false'):
            self.advance()
            return nodes.boolean(tok)

        if tok.is_keyword('fn'):
            self.advance()
            params = self.parse_param_list()
            body = self.parse_block()
            return nodes.fn_expr(params, body, tok)

        if tok.kind is TT.NUMBER:
            self.advance()
            return nodes.number(tok)

        if tok.is_symbol('('):
            self.advance()
            expr = self.parse_expr()
            self.expect_symbol(')')
            return expr

        if tok.is_symbol('['):
            self.advance()
            elements = self.parse_comma_list(']', self.parse_expr)
            return nodes.array(elements, tok)

        if tok.kind is TT.IDENT:
            self.advance()
            return self.parse_postfix(nodes.ident(tok))

        raise ParseError(f"Unexpected token {_describe(tok)}", tok)

    def parse_postfix(self, head: Node) -> Node:
        """Apply any chain of `(args)` calls and `[expr]` index operations."""
        node = head

        while True:
            tok = self.current

            if self.check_symbol('('):
                self.advance()
                args = self.parse_comma_list(')', self.parse_expr)
                node = nodes.call(node, args, tok)
                continue

            if self.check_symbol('['):
                self.advance()
                idx = self.parse_expr()
                self.expect_symbol(']')
                node = nodes.index(node, idx, tok)
                continue

            return node

    # ========================================================================
    # Lists
    # ========================================================================

    def parse_param_list(self) -> Tree:
        """Parse `(a, b, ...)`; a trailing comma is allowed"""
        start = self.expect_symbol('(')
        names = self.parse_comma_list(')', lambda: self.expect(TT.IDENT))
        return nodes.params(names, start)

    def parse_comma_list(self, closer: str, parse_item):
        """
        Items separated by commas up to `closer` (consumed). Empty lists and a
        single trailing comma are accepted.
        """
        items = []

        while not self.check_symbol(closer):
            items.append(parse_item())

            if not self.match_symbol(','):
                break

        self.expect_symbol(closer)
        return items

# ============================================================================
# Entry points
# ============================================================================

def parse_tokens(tokens: List[Tok]) -> List[Node]:
    """Parse a token list into the program's top-level statement nodes."""
    return Parser(tokens).parse()


def parse_source(source: str) -> List[Node]:
    """
    Parse Salty source code to its list of top-level statement nodes.
    """
    from .lexer_rd import tokenize

    return parse_tokens(tokenize(source))
