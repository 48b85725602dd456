from __future__ import annotations

import argparse
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from .evaluator import evaluate
from .lexer_rd import LexError, tokenize
from .parser_rd import ParseError, parse_tokens
from .tree import Node
from .types import Context, SaltyRuntimeError
from .utils import debug_py_trace_enabled, format_error

SaltyError = (LexError, ParseError, SaltyRuntimeError)

def parse(src: str) -> List[Node]:
    return parse_tokens(tokenize(src))

def run(src: str, context: Optional[Context]=None) -> Context:
    """Tokenize, parse and evaluate `src`; returns the context it ran in."""
    program = parse(src)
    return evaluate(program, context)

def repl_eval(src: str, context: Context) -> Context:
    """Evaluate one REPL submission against the session's persistent context."""
    return evaluate(parse(src), context)

def report_error(exc: BaseException) -> None:
    print(f"Error: {format_error(exc)}", file=sys.stderr)

    if debug_py_trace_enabled() and exc.__traceback__ is not None:
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")

def _load_source(arg: str) -> str:
    """
    Resolve the CLI script argument into source text.
    - "-" => read stdin.
    - anything else => path to a script file.
    """
    if arg == "-":
        return sys.stdin.read()

    return Path(arg).read_text(encoding="utf-8")

def _dump_tokens(src: str) -> None:
    for tok in tokenize(src):
        print(tok.describe())

def _dump_ast(src: str) -> None:
    for stmt in parse(src):
        print(stmt.pretty(), end="")

def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="salty", description="Run Salty scripts or start the REPL.")
    ap.add_argument("script", nargs="?", help="Path to a Salty script, or '-' for stdin (omit for the REPL)")
    mode = ap.add_mutually_exclusive_group()
    mode.add_argument("--tokens", action="store_true", help="Print the token list instead of running")
    mode.add_argument("--ast", action="store_true", help="Print the parse tree instead of running")
    return ap

def main(argv: Optional[List[str]]=None) -> int:
    args = build_arg_parser().parse_args(argv)

    if args.script is None:
        if args.tokens or args.ast:
            print("Error: --tokens and --ast need a script", file=sys.stderr)
            return 2

        from .repl import repl

        repl()
        return 0

    try:
        source = _load_source(args.script)
    except OSError as exc:
        print(f"Error: cannot read {args.script}: {exc.strerror or exc}", file=sys.stderr)
        return 1

    try:
        if args.tokens:
            _dump_tokens(source)
        elif args.ast:
            _dump_ast(source)
        else:
            run(source)
    except SaltyError as exc:
        report_error(exc)
        return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
