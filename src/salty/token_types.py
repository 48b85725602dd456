"""
Token Types for the Salty lexer and parser

Shared between lexer and parser to avoid circular dependencies.
"""

from dataclasses import dataclass, field
from enum import Enum


class TT(Enum):
    """Token kinds. Values match the names used in diagnostics."""

    IDENT = "identifier"
    NUMBER = "number"
    KEYWORD = "keyword"
    SYMBOL = "symbol"


KEYWORDS = frozenset({
    'print',
    'if',
    'else',
    'while',
    'let',
    'return',
    'break',
    'continue',
    'fn',
    'true',
    'false',
})

# Two-character symbols are matched before single-character ones.
MULTI_CHAR_SYMBOLS = ('==', '!=', '>=', '<=', '&&', '||')

SYMBOLS = frozenset('+-*/=;(){}[],.><!')

BINARY_OPERATORS = frozenset({
    '+', '-', '*', '/',
    '>', '<', '>=', '<=', '==', '!=',
    '&&', '||',
})


@dataclass
class Tok:
    """Token with position info"""

    kind: TT
    text: str
    # Position is not part of token identity.
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    def is_symbol(self, text: str) -> bool:
        return self.kind is TT.SYMBOL and self.text == text

    def is_keyword(self, text: str) -> bool:
        return self.kind is TT.KEYWORD and self.text == text

    def describe(self) -> str:
        return f"{self.kind.value} '{self.text}'"

    def __repr__(self):
        return f"Tok({self.kind.name}, {self.text!r}, {self.line}:{self.column})"
