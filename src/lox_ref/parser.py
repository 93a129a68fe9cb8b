"""
Source front end for the Lox dialect.

Structure:
- grammar.lark: LALR grammar, tokenized by lark's basic lexer so keywords are
  reserved in every position
- Prune: lark Transformer that fills the optional slots the grammar leaves
  as None with canonical empty nodes, so the evaluator sees one shape per
  statement/expression kind
- parse_source / parse_expr_fragment: public entry points, raising
  ParseError with line/column on bad input
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, List, Optional

from lark import Lark, Token, Transformer, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken
from lark.visitors import v_args

from .tree import Node, is_tree

GRAMMAR_FILE = "grammar.lark"

# Terminal names lark reports in `expected` sets, mapped back to source text.
_TERMINAL_TEXT = {
    "SEMICOLON": "';'",
    "LPAR": "'('",
    "RPAR": "')'",
    "LBRACE": "'{'",
    "RBRACE": "'}'",
    "COMMA": "','",
    "EQUAL": "'='",
    "IDENT": "identifier",
    "NUMBER": "number",
    "STRING": "string",
}

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(
            f"{message} at line {line}, col {column}" if line is not None else message
        )

class Prune(Transformer):
    """Normalize lark's parse tree into the evaluator's node shapes."""

    @staticmethod
    def _params(node: Any) -> Tree:
        return node if node is not None else Tree('params', [])

    @v_args(meta=True)
    def fn_decl(self, meta, c):
        name, params, body = c
        return Tree('fn_decl', [name, self._params(params), body], meta)

    @v_args(meta=True)
    def lambda_expr(self, meta, c):
        params, body = c
        return Tree('lambda_expr', [self._params(params), body], meta)

    @v_args(meta=True)
    def call(self, meta, c):
        callee, args = c
        return Tree('call', [callee, args if args is not None else Tree('args', [])], meta)

    @v_args(meta=True)
    def arguments(self, meta, c):
        return Tree('args', c, meta)

    @v_args(meta=True)
    def return_stmt(self, meta, c):
        # `return;` keeps an explicit empty slot
        return Tree('return_stmt', [c[0] if c else None], meta)

    def expr_fragment(self, c):
        return c[0]

@lru_cache(maxsize=None)
def make_parser() -> Lark:
    return Lark.open(
        GRAMMAR_FILE,
        rel_to=__file__,
        parser="lalr",
        lexer="basic",
        start=["program", "expr_fragment"],
        propagate_positions=True,
        maybe_placeholders=True,
    )

def _expected_text(expected: Any) -> str:
    names = sorted(_TERMINAL_TEXT.get(name, name) for name in (expected or ()))
    return ", ".join(names)

def _to_parse_error(exc: UnexpectedInput) -> ParseError:
    line = getattr(exc, "line", None)
    column = getattr(exc, "column", None)

    if not isinstance(line, int) or line < 1:
        line = column = None

    match exc:
        case UnexpectedToken(token=tok) if tok.type == '$END':
            message = "Unexpected end of input"
        case UnexpectedToken(token=tok):
            message = f"Unexpected token {tok.value!r}"
        case UnexpectedCharacters(char=ch):
            message = f"Unexpected character {ch!r}"
        case UnexpectedEOF():
            message = "Unexpected end of input"
        case _:
            message = "Syntax error"

    expected = getattr(exc, "expected", None)
    if expected:
        message = f"{message}; expected {_expected_text(expected)}"

    return ParseError(message, line, column)

def _parse(source: str, start: str) -> Node:
    try:
        tree = make_parser().parse(source, start=start)
    except UnexpectedInput as exc:
        raise _to_parse_error(exc) from None

    return Prune().transform(tree) if is_tree(tree) else tree

def parse_source(source: str) -> Tree:
    """Parse a whole program into Tree('program', statements)."""
    return _parse(source, "program")

def parse_expr_fragment(source: str) -> Node:
    """Parse exactly one expression (no trailing ';')."""
    return _parse(source, "expr_fragment")

def program_statements(program: Tree) -> List[Node]:
    return list(program.children)

def tokenize(source: str, keep_ignored: bool = False) -> List[Token]:
    """Token stream only, as used by the REPL highlighter."""
    return list(make_parser().lex(source, dont_ignore=keep_ignored))
