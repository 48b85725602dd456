"""
Lexer for Salty - Recursive Descent Parser

Tokenizes Salty source code into a flat list of tokens.

Features:
- Single-pass tokenization
- Position tracking (line, column)
- `//` line comments
- Atomic: either the whole token list or a LexError
"""

from typing import List

from .token_types import KEYWORDS, MULTI_CHAR_SYMBOLS, SYMBOLS, TT, Tok

_DIGITS = '0123456789'
_IDENT_START = 'abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_'
_IDENT_CHARS = _IDENT_START + _DIGITS

# ============================================================================
# Lexer Implementation
# ============================================================================

class LexError(Exception):
    """Lexical analysis error"""
    kind = "LexError"

    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(
            f"{message} at line {line}, col {column}" if line else message
        )


class Lexer:
    """
    Salty lexer.

    Whitespace (including newlines) only separates tokens; no layout
    tokens are emitted.
    """

    def __init__(self, source: str, keep_comments: bool = False):
        self.source = source
        self.keep_comments = keep_comments
        self.comments: List[Tok] = []
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Tok] = []

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.scan_token()

        return self.tokens

    def scan_token(self):
        """Scan next token"""
        if self.skip_whitespace():
            return

        # Comments
        if self.peek() == '/' and self.peek(1) == '/':
            self.skip_comment()
            return

        # Numbers
        if self.peek() in _DIGITS:
            self.scan_number()
            return

        # Identifiers and keywords
        if self.peek() in _IDENT_START:
            self.scan_identifier()
            return

        # Operators and punctuation
        self.scan_symbol()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_number(self):
        """Scan number literal: digits with at most one decimal point"""
        line, column = self.line, self.column
        value = ''

        while self.peek() in _DIGITS or self.peek() == '.':
            value += self.advance()

        if value.count('.') > 1:
            raise LexError(f"Invalid number format '{value}'", line, column)

        self.emit(TT.NUMBER, value, line, column)

    def scan_identifier(self):
        """Scan identifier or keyword"""
        line, column = self.line, self.column
        value = ''

        while self.peek() in _IDENT_CHARS:
            value += self.advance()

        kind = TT.KEYWORD if value in KEYWORDS else TT.IDENT
        self.emit(kind, value, line, column)

    def scan_symbol(self):
        """Scan operators and punctuation"""
        line, column = self.line, self.column

        for sym in MULTI_CHAR_SYMBOLS:
            if self.source.startswith(sym, self.pos):
                self.advance(len(sym))
                self.emit(TT.SYMBOL, sym, line, column)
                return

        ch = self.peek()
        if ch in SYMBOLS:
            self.advance()
            self.emit(TT.SYMBOL, ch, line, column)
            return

        raise LexError(f"Unexpected character '{ch}'", line, column)

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        result = self.source[self.pos:self.pos + n]

        for ch in result:
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1

        self.pos += len(result)
        return result

    def skip_whitespace(self) -> bool:
        """Skip whitespace including newlines, return True if any skipped"""
        skipped = False
        while self.pos < len(self.source) and self.peek().isspace():
            self.advance()
            skipped = True
        return skipped

    def skip_comment(self):
        """Skip comment until end of line; kept aside for highlighting when asked"""
        line, column = self.line, self.column
        text = ''

        while self.peek() not in ('\n', '\0'):
            text += self.advance()

        if self.keep_comments:
            self.comments.append(Tok(kind=TT.SYMBOL, text=text, line=line, column=column))

    def emit(self, kind: TT, text: str, line: int, column: int):
        """Emit a token"""
        self.tokens.append(Tok(kind=kind, text=text, line=line, column=column))


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()
