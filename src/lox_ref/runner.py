from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Tuple

from .evaluator import evaluate_expression
from .eval.blocks import exec_stmts
from .parser import ParseError, parse_expr_fragment, parse_source, program_statements
from .runtime import Environment, LoxNil, LoxReturnSignal, LoxRuntimeError, LoxValue, ensure_recursion_limit, new_root_env
from .tree import render_tree
from .utils import report_error

def run(src: str, env: Optional[Environment]=None) -> Environment:
    """Parse and execute *src*; return the innermost top-level scope.

    The returned environment sees every binding the program's top-level
    statements made, which is what callers need to keep going from there.
    """
    ensure_recursion_limit()

    if env is None:
        env = new_root_env()

    stmts = program_statements(parse_source(src))

    try:
        return exec_stmts(stmts, env)
    except LoxReturnSignal:
        # top-level `return` ends the program
        return env

def repl_eval(src: str, env: Environment) -> Tuple[LoxValue, Environment, bool]:
    """Evaluate one REPL input.

    Returns (value, environment to use next, whether it ran as statements).
    A lone expression is evaluated for its value; anything else runs as a
    program whose declarations stay visible to later inputs.
    """
    try:
        expr = parse_expr_fragment(src)
    except ParseError:
        expr = None

    if expr is not None:
        return evaluate_expression(env, expr), env, False

    return LoxNil(), run(src, env), True

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_text(encoding="utf-8")

    return arg

def _build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="lox-ref", description="Run Lox programs with the reference tree-walking evaluator.")
    ap.add_argument("source", nargs="?", help="script path, '-' for stdin, or literal source text")
    ap.add_argument("--repl", action="store_true", help="start the interactive REPL")
    ap.add_argument("--ast", action="store_true", help="print the parsed tree instead of running it")
    return ap

def main(argv: Optional[list[str]] = None) -> None:
    args = _build_arg_parser().parse_args(argv)

    if args.repl or (args.source is None and sys.stdin.isatty()):
        from .repl import repl
        repl()
        return

    source = _load_source(args.source)

    try:
        if args.ast:
            print(render_tree(parse_source(source)))
            return
        run(source)
    except (ParseError, LoxRuntimeError) as exc:
        report_error(exc)
        raise SystemExit(1) from None

if __name__ == "__main__":
    main()
