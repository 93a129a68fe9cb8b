"""prompt_toolkit lexer for live Lox syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable, List

from lark import Token
from lark.exceptions import UnexpectedInput
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .parser import tokenize

# Map highlight groups -> prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
}

# lark terminal name -> highlight group
_TERMINAL_GROUP = {
    "VAR": "keyword",
    "FN": "keyword",
    "IF": "keyword",
    "ELSE": "keyword",
    "WHILE": "keyword",
    "RETURN": "keyword",
    "AND": "keyword",
    "OR": "keyword",
    "TRUE": "boolean",
    "FALSE": "boolean",
    "NIL": "constant",
    "NUMBER": "number",
    "STRING": "string",
    "IDENT": "identifier",
    "PLUS": "operator",
    "MINUS": "operator",
    "STAR": "operator",
    "SLASH": "operator",
    "BANG": "operator",
    "EQ_OP": "operator",
    "CMP_OP": "operator",
    "EQUAL": "operator",
    "LPAR": "punctuation",
    "RPAR": "punctuation",
    "LBRACE": "punctuation",
    "RBRACE": "punctuation",
    "COMMA": "punctuation",
    "SEMICOLON": "punctuation",
    "COMMENT": "comment",
}

def _is_call_head(tokens: List[Token], idx: int) -> bool:
    j = idx + 1
    while j < len(tokens) and tokens[j].type == "WS":
        j += 1

    return j < len(tokens) and tokens[j].type == "LPAR"

def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    try:
        tokens = tokenize(text, keep_ignored=True)
    except UnexpectedInput:
        return [("", text)]

    result: StyleAndTextTuples = []
    pos = 0

    for i, tok in enumerate(tokens):
        start = tok.start_pos if tok.start_pos is not None else pos
        if start > pos:
            result.append(("", text[pos:start]))

        group = _TERMINAL_GROUP.get(tok.type, "")
        if group == "identifier" and _is_call_head(tokens, i):
            group = "function"

        result.append((GROUP_STYLE.get(group, ""), str(tok)))
        pos = start + len(tok)

    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class LoxLexer(Lexer):
    """prompt_toolkit Lexer that highlights Lox source with the lark lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
