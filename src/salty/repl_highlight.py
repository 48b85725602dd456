"""prompt_toolkit lexer for live Salty syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as SltLexer, LexError
from .token_types import BINARY_OPERATORS, TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "number": "ansimagenta",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

_BOOLEANS = {"true", "false"}


def _token_group(tokens: list[Tok], idx: int) -> str:
    tok = tokens[idx]

    if tok.kind is TT.KEYWORD:
        return "boolean" if tok.text in _BOOLEANS else "keyword"

    if tok.kind is TT.NUMBER:
        return "number"

    if tok.kind is TT.IDENT:
        # `fn name` and `name(` read as function names.
        prev_tok = tokens[idx - 1] if idx > 0 else None
        next_tok = tokens[idx + 1] if idx + 1 < len(tokens) else None
        if prev_tok is not None and prev_tok.is_keyword("fn"):
            return "function"
        if next_tok is not None and next_tok.is_symbol("("):
            return "function"
        return "identifier"

    if tok.text in BINARY_OPERATORS or tok.text in ("=", "!"):
        return "operator"

    return "punctuation"


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    try:
        lexer = SltLexer(text, keep_comments=True)
        tokens = lexer.tokenize()
    except LexError as exc:
        # Style everything from the offending character onward as an error.
        start = max(exc.column - 1, 0)
        return [("", text[:start]), (GROUP_STYLE["error"], text[start:])]

    spans = [(tok.column - 1, tok.text, GROUP_STYLE.get(_token_group(tokens, i), "")) for i, tok in enumerate(tokens)]
    spans.extend((c.column - 1, c.text, GROUP_STYLE["comment"]) for c in lexer.comments)
    spans.sort(key=lambda span: span[0])

    result: StyleAndTextTuples = []
    pos = 0

    for start, tok_text, style in spans:
        # Unstyled gap before token.
        if start > pos:
            result.append(("", text[pos:start]))

        result.append((style, tok_text))
        pos = start + len(tok_text)

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class SaltyLexer(Lexer):
    """prompt_toolkit Lexer that highlights Salty source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights for all lines.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
