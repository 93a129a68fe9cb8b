"""Interactive REPL for Lox, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys

from lark.exceptions import UnexpectedInput
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .eval.helpers import stringify
from .parser import ParseError, tokenize
from .repl_highlight import LoxLexer
from .runner import repl_eval
from .runtime import Environment, LoxNil, LoxRuntimeError, new_root_env
from .utils import debug_py_trace_enabled, report_error, set_debug_py_trace

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/env": ("List bindings visible from the REPL scope", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}

_DEPTH_OPEN = {"LPAR", "LBRACE"}
_DEPTH_CLOSE = {"RPAR", "RBRACE"}


def open_depth(text: str) -> int:
    """Net count of unclosed ( and { in *text*; 0 when it could be complete."""
    try:
        tokens = tokenize(text)
    except UnexpectedInput:
        return 0

    depth = 0
    for tok in tokens:
        if tok.type in _DEPTH_OPEN:
            depth += 1
        elif tok.type in _DEPTH_CLOSE:
            depth = max(depth - 1, 0)

    return depth


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
                    display_meta=desc,
                )


def _handle_slash(line: str, env_box: list[Environment]) -> bool:
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
            set_debug_py_trace(True)
        elif arg.lower() in ("off", "0", "false", "no"):
            set_debug_py_trace(False)
        elif arg == "":
            set_debug_py_trace(None)
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    if cmd == "/env":
        for name, value in sorted(env_box[0].visible_names().items()):
            print(f"{name} = {stringify(value)}")
        return True

    if cmd == "/reset":
        env_box[0] = new_root_env()
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    # Use a mutable box so /reset and declarations can swap the environment.
    env_box: list[Environment] = [new_root_env()]

    bindings = KeyBindings()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        # Keep reading while braces/parens are still open.
        if open_depth(text) > 0:
            buf.insert_text("\n" + "    " * open_depth(text))
            return

        buf.validate_and_handle()

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=LoxLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("lox repl - Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt("> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if _handle_slash(text, env_box):
            continue

        try:
            result, env_box[0], stmt = repl_eval(text, env_box[0])
        except (ParseError, LoxRuntimeError) as exc:
            report_error(exc)
            continue

        if not stmt and not isinstance(result, LoxNil):
            print(stringify(result))
