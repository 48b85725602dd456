"""Interactive REPL for Salty, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import clear

from .lexer_rd import LexError, tokenize
from .repl_highlight import SaltyLexer
from .runner import SaltyError, repl_eval, report_error
from .token_types import TT, Tok
from .types import Context
from .utils import debug_py_trace_enabled

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}

_TRACE_ENV = "SALTY_DEBUG_PY_TRACE"

_ELSE_RE = re.compile(r"\s*else\b")


def _brace_depth(tokens: list[Tok]) -> int:
    """Net count of unclosed `{`; negative when `}` outnumbers `{`."""
    depth = 0

    for tok in tokens:
        if tok.kind is not TT.SYMBOL:
            continue
        if tok.text == "{":
            depth += 1
        elif tok.text == "}":
            depth -= 1

    return depth


def is_complete(buffer: str) -> bool:
    """A buffer submits once it ends a statement and every block is closed."""
    try:
        tokens = tokenize(buffer)
    except LexError:
        # Submit anyway so the error is reported.
        return buffer.strip().endswith((";", "}"))

    if not tokens:
        return True

    last = tokens[-1]
    if not (last.is_symbol(";") or last.is_symbol("}")):
        return False

    return _brace_depth(tokens) <= 0


def awaits_else(buffer: str) -> bool:
    """
    True when the buffer's last top-level statement is an `if` whose block
    has closed without an `else`, so an `else` may still follow on the next
    line.
    """
    try:
        tokens = tokenize(buffer)
    except LexError:
        return False

    if not tokens or not tokens[-1].is_symbol("}"):
        return False

    depth = 0
    leader: Optional[Tok] = None
    has_else = False
    at_boundary = True

    for tok in tokens:
        if depth == 0:
            if tok.is_keyword("else"):
                has_else = True
            elif at_boundary and (tok.kind in (TT.KEYWORD, TT.IDENT) or tok.is_symbol("{")):
                leader, has_else = tok, False

        at_boundary = False

        if tok.is_symbol("{"):
            depth += 1
        elif tok.is_symbol("}"):
            depth -= 1
            at_boundary = depth == 0
        elif tok.is_symbol(";"):
            at_boundary = depth == 0

    return depth == 0 and leader is not None and leader.is_keyword("if") and not has_else


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


class ReplSession:
    """
    Line-buffering core of the REPL, independent of the terminal.

    Lines are collected until they form a complete submission, which is then
    evaluated against one Context kept for the whole session, so bindings
    from earlier submissions stay visible. A complete `if` without `else` is
    held until the next line shows whether an `else` follows.
    """

    def __init__(self, context: Optional[Context]=None):
        self.context = context if context is not None else Context()
        self.lines: list[str] = []
        self.held = False

    @property
    def pending(self) -> bool:
        return bool(self.lines)

    def feed(self, line: str) -> bool:
        """Consume one input line. Returns False when the session should end."""
        text = _normalize(line)

        if self.held:
            self.held = False
            if not _ELSE_RE.match(text):
                self.flush()

        if not self.lines:
            if text.strip() == "exit":
                return False
            if not text.strip():
                return True

        self.lines.append(text)
        buffer = "\n".join(self.lines)

        if not is_complete(buffer):
            return True

        if awaits_else(buffer):
            self.held = True
            return True

        self.flush()
        return True

    def flush(self) -> None:
        """Evaluate whatever is buffered, complete or not."""
        if not self.lines:
            return

        buffer = "\n".join(self.lines)
        self.lines.clear()
        self.held = False

        try:
            repl_eval(buffer, self.context)
        except SaltyError as exc:
            report_error(exc)

    def discard(self) -> None:
        self.lines.clear()
        self.held = False

    def reset(self) -> None:
        self.context.reset()
        self.discard()


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=f"{desc} {hint}".strip(),
                )


def handle_slash(line: str, session: ReplSession) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            os.environ[_TRACE_ENV] = "1"
        elif arg.lower() in ("off", "0", "false", "no"):
            os.environ.pop(_TRACE_ENV, None)
        elif arg == "":
            # Toggle.
            if debug_py_trace_enabled():
                os.environ.pop(_TRACE_ENV, None)
            else:
                os.environ[_TRACE_ENV] = "1"
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    if cmd == "/reset":
        session.reset()
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    session = ReplSession()

    prompt: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=SaltyLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
    )

    print("salty repl: Ctrl-D or 'exit' to quit, / for commands")

    while True:
        try:
            line = prompt.prompt("... " if session.pending else ">>> ")
        except EOFError:
            if session.held:
                session.flush()
            print()
            break
        except KeyboardInterrupt:
            session.discard()
            print("KeyboardInterrupt")
            continue

        # A command line ends a held `if`.
        if session.held and line.strip().startswith("/"):
            session.flush()

        # Slash commands only apply on the primary prompt.
        if not session.pending and handle_slash(line, session):
            continue

        if not session.feed(line):
            break
