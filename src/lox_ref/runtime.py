from __future__ import annotations

import importlib
import sys
from typing import List

from .types import (
    LoxNil, LoxNumber, LoxString, LoxBool, LoxFn, NativeFunction, NativeFn,
    LoxValue, LoxCallable, Environment,
    LoxRuntimeError, LoxUndefinedVariable, LoxTypeMismatch, LoxStackOverflow, LoxReturnSignal,
    Builtins, is_callable, is_lox_value, kind_name,
)

_STDLIB_INITIALIZED = False

# One Lox call nests about fourteen Python frames.
RECURSION_LIMIT = 30_000

def ensure_recursion_limit() -> None:
    """Raise the interpreter recursion limit to fit deep Lox call chains."""
    if sys.getrecursionlimit() < RECURSION_LIMIT:
        sys.setrecursionlimit(RECURSION_LIMIT)

def init_stdlib() -> None:
    """Load the stdlib module (idempotent) so register_native hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("lox_ref.stdlib")
    _STDLIB_INITIALIZED = True

def new_root_env() -> Environment:
    """Fresh top-level environment holding the native bindings."""
    init_stdlib()
    return Environment()

def register_native(name: str):
    def dec(fn: NativeFn):
        Builtins.native_functions[name] = NativeFunction(name=name, fn=fn)
        return fn

    return dec

def call_value(callee: LoxValue, args: List[LoxValue]) -> LoxValue:
    """Single call path for every callable; the variant is not inspected."""
    if not is_callable(callee):
        raise LoxTypeMismatch("Can't call this value")

    return _ensure_lox_value(callee.invoke(args))

def call_loxfn(fn: LoxFn, args: List[LoxValue]) -> LoxValue:
    """
    User function call semantics:
    - a fresh environment wraps the captured closure
    - parameters are bound positionally; missing ones read as nil and
      surplus arguments are dropped
    - a `return` anywhere in the body ends the call with its value;
      running off the end yields nil
    - exhausting the Python stack surfaces as LoxStackOverflow
    """
    from .eval.blocks import exec_stmts  # local import to avoid cycle

    callee_env = Environment.wrap(fn.closure)

    for index, name in enumerate(fn.params):
        callee_env.define(name, args[index] if index < len(args) else LoxNil())

    try:
        exec_stmts(fn.body, callee_env)
    except LoxReturnSignal as signal:
        return signal.value
    except RecursionError:
        raise LoxStackOverflow() from None

    return LoxNil()

def _ensure_lox_value(value: object) -> LoxValue:
    if value is None:
        return LoxNil()
    if is_lox_value(value):
        return value
    raise LoxTypeMismatch(f"Unexpected value type {type(value).__name__}")
