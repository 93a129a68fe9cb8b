from __future__ import annotations

import os

import pytest
from prompt_toolkit.document import Document

from tests.support.harness import Environment, LoxRuntimeError, new_root_env
from lox_ref.repl import _handle_slash, _normalize, open_depth
from lox_ref.repl_highlight import GROUP_STYLE, LoxLexer, _highlight_line
from lox_ref.runner import repl_eval


@pytest.mark.parametrize(
    "text, depth",
    [
        pytest.param("fn f() {", 1, id="open-brace"),
        pytest.param("f(1, (2", 2, id="nested-parens"),
        pytest.param("{ }", 0, id="balanced"),
        pytest.param('print("{");', 0, id="brace-in-string"),
        pytest.param("}", 0, id="stray-close"),
        pytest.param("@", 0, id="lex-error"),
    ],
)
def test_open_depth(text: str, depth: int) -> None:
    assert open_depth(text) == depth


def test_normalize_strips_invisible_characters() -> None:
    assert _normalize("var\u00a0a\u200b = 1;\r") == "vara = 1;"


def test_non_slash_line_is_not_a_command() -> None:
    assert _handle_slash("var a = 1;", [new_root_env()]) is False


def test_env_command_lists_bindings(capsys: pytest.CaptureFixture[str]) -> None:
    _, env, _ = repl_eval('var a = 1; var s = "hi";', new_root_env())
    box: list[Environment] = [env]

    assert _handle_slash("/env", box) is True

    lines = capsys.readouterr().out.splitlines()
    assert "a = 1" in lines
    assert "s = hi" in lines
    assert "clock = <native fn clock>" in lines


def test_reset_command_swaps_env(capsys: pytest.CaptureFixture[str]) -> None:
    _, env, _ = repl_eval("var a = 1;", new_root_env())
    box: list[Environment] = [env]

    _handle_slash("/reset", box)

    assert box[0] is not env
    assert "a" not in box[0].visible_names()
    assert "Environment reset." in capsys.readouterr().out


def test_py_traceback_command(capsys: pytest.CaptureFixture[str]) -> None:
    box = [new_root_env()]

    _handle_slash("/py-traceback on", box)
    assert os.environ["LOX_DEBUG_PY_TRACE"] == "1"
    _handle_slash("/py-traceback off", box)
    assert "LOX_DEBUG_PY_TRACE" not in os.environ

    out = capsys.readouterr().out.splitlines()
    assert out == ["Python traceback: on", "Python traceback: off"]


def test_unknown_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert _handle_slash("/nope", [new_root_env()]) is True
    assert "Unknown command: /nope" in capsys.readouterr().err


def test_highlight_keywords_and_calls() -> None:
    fragments = _highlight_line("var x = clock();")

    assert "".join(text for _, text in fragments) == "var x = clock();"
    assert fragments[0] == (GROUP_STYLE["keyword"], "var")
    assert (GROUP_STYLE["function"], "clock") in fragments


def test_highlight_literals_and_comments() -> None:
    fragments = _highlight_line('print("s", 1) // note')

    assert (GROUP_STYLE["string"], '"s"') in fragments
    assert (GROUP_STYLE["number"], "1") in fragments
    assert (GROUP_STYLE["comment"], "// note") in fragments


def test_highlight_unlexable_line_is_plain() -> None:
    assert _highlight_line('print("open') == [("", 'print("open')]


def test_lexer_per_line() -> None:
    get_line = LoxLexer().lex_document(Document("var a\nnil"))

    assert get_line(1) == [(GROUP_STYLE["constant"], "nil")]
    assert get_line(5) == [("", "")]


def test_runaway_recursion_leaves_session_usable() -> None:
    _, env, _ = repl_eval("fn forever() { return forever(); }", new_root_env())

    # the REPL loop reports any LoxRuntimeError and keeps going
    with pytest.raises(LoxRuntimeError, match="Stack overflow"):
        repl_eval("forever()", env)

    value, _, _ = repl_eval("1 + 1", env)
    assert value.value == 2
